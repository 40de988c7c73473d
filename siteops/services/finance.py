from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple

from siteops.core.exceptions import NotFoundException, ValidationException
from siteops.core.logging import get_logger
from siteops.models.finance import Finance
from siteops.models.project import Project
from siteops.rules.finance import FinanceSummary, parse_expense_category, summarize, validate_amount
from siteops.rules.guard import reject_unknown_fields, strip_client_fields
from siteops.store.base import EntityStore

logger = get_logger("services.finance")

# Line items are only ever appended through add_expense/add_revenue
LINE_ITEM_FIELDS = ("expenses", "revenue")


class FinanceService:
    def __init__(self, store: EntityStore):
        self.store = store

    def _prepare(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        payload = strip_client_fields("Finance", data)
        reject_unknown_fields("Finance", payload, Finance.model_fields)
        for field in LINE_ITEM_FIELDS:
            if field in payload:
                raise ValidationException(
                    f"{field} are append-only; add items one at a time", field=field
                )
        for field in ("total_invested", "able_to_bill"):
            if field in payload:
                payload[field] = validate_amount(payload[field], field)
        if "project" in payload:
            self.store.require(Project, payload["project"])
        return payload

    def get_summary(self) -> Tuple[FinanceSummary, List[Finance]]:
        """Portfolio totals over every finance record visible right now."""
        records = self.store.find(Finance)
        summary = summarize(records)
        logger.info(
            f"Finance summary: invested={summary.total_invested}, "
            f"billable={summary.able_to_bill}, records={summary.project_count}"
        )
        return summary, records

    def list_finance(self) -> List[Finance]:
        """All records, most recently updated first."""
        return sorted(self.store.find(Finance), key=lambda finance: finance.updated_at or "", reverse=True)

    def get_finance(self, finance_id: str) -> Finance:
        return self.store.require(Finance, finance_id)

    def get_or_create_for_project(self, project_id: str, requested_by: Optional[str] = None) -> Finance:
        """
        Return the project's finance record, creating a zero-valued one on first access.

        Two first reads racing can both create a record; the summary treats the
        extra zero-valued record as harmless. The oldest record is always the
        one returned.
        """
        self.store.require(Project, project_id)
        existing = self.store.find(Finance, project=project_id)
        if existing:
            return min(existing, key=lambda finance: (finance.created_at or "", finance.id))
        finance = self.store.add(Finance(project=project_id, updated_by=requested_by))
        logger.info(f"Created default finance record {finance.id} for project {project_id}")
        return finance

    def create_finance(self, data: Mapping[str, Any], updated_by: Optional[str] = None) -> Finance:
        payload = self._prepare(data)
        if not payload.get("project"):
            raise ValidationException("Project is required", field="project")
        finance = self.store.add(Finance(**payload, updated_by=updated_by))
        logger.info(f"Finance {finance.id} created for project {finance.project}")
        return finance

    def update_finance(self, finance_id: str, changes: Mapping[str, Any], updated_by: Optional[str] = None) -> Finance:
        logger.info(f"Updating finance {finance_id}: fields={sorted(changes)}")
        self.store.require(Finance, finance_id)
        payload = self._prepare(changes)

        def mutate(finance: Finance) -> None:
            for key, value in payload.items():
                setattr(finance, key, value)
            finance.updated_by = updated_by

        return self._write(finance_id, mutate)

    def add_expense(self, finance_id: str, item: Mapping[str, Any], updated_by: Optional[str] = None) -> Finance:
        entry = {
            "description": item.get("description"),
            "amount": validate_amount(item.get("amount"), "amount"),
            "category": parse_expense_category(item.get("category")).value,
            "date": item.get("date") or datetime.now(timezone.utc).isoformat(),
        }

        def mutate(finance: Finance) -> None:
            finance.expenses = [*(finance.expenses or []), entry]
            finance.updated_by = updated_by

        return self._write(finance_id, mutate)

    def add_revenue(self, finance_id: str, item: Mapping[str, Any], updated_by: Optional[str] = None) -> Finance:
        entry = {
            "description": item.get("description"),
            "amount": validate_amount(item.get("amount"), "amount"),
            "date": item.get("date") or datetime.now(timezone.utc).isoformat(),
        }

        def mutate(finance: Finance) -> None:
            finance.revenue = [*(finance.revenue or []), entry]
            finance.updated_by = updated_by

        return self._write(finance_id, mutate)

    def _write(self, finance_id: str, mutate) -> Finance:
        finance = self.store.update(Finance, finance_id, mutate)
        if finance is None:
            raise NotFoundException("Finance", finance_id)
        logger.info(f"Finance {finance.id} updated")
        return finance
