from types import SimpleNamespace

import pytest

from siteops.core.exceptions import NotFoundException, ValidationException
from siteops.models.finance import Finance
from siteops.rules.finance import (
    efficiency_ratio,
    parse_expense_category,
    summarize,
    validate_amount,
)
from siteops.services.finance import FinanceService
from siteops.services.projects import ProjectService


def _records(*pairs):
    return [SimpleNamespace(total_invested=invested, able_to_bill=billable) for invested, billable in pairs]


def test_summary_totals():
    summary = summarize(_records((100, 40), (200, 150)))
    assert summary.total_invested == 300
    assert summary.able_to_bill == 190
    assert summary.pending == 110
    assert summary.efficiency == 63.33
    assert summary.project_count == 2


def test_empty_summary():
    assert summarize([]).as_dict() == {
        "total_invested": 0.0,
        "able_to_bill": 0.0,
        "pending": 0.0,
        "efficiency": 0.0,
        "project_count": 0,
    }


def test_efficiency_is_zero_without_investment():
    assert efficiency_ratio(0, 50) == 0.0


def test_efficiency_rounds_half_up():
    assert efficiency_ratio(200, 0.01) == 0.01
    assert efficiency_ratio(3, 2) == 66.67


def test_sums_do_not_pick_up_float_noise():
    assert summarize(_records((0.1, 0.1), (0.2, 0))).total_invested == 0.3


@pytest.mark.parametrize("value", [-1, "10", True, None])
def test_invalid_amounts_are_rejected(value):
    with pytest.raises(ValidationException):
        validate_amount(value, "amount")


def test_unknown_expense_category_is_rejected():
    with pytest.raises(ValidationException) as exc_info:
        parse_expense_category("Fuel")
    assert exc_info.value.field == "category"


@pytest.fixture
def project(store):
    return ProjectService(store).create_project({"project_id": "FIN-001", "name": "Depot", "location": "Nashik"})


def test_project_finance_is_created_once(store, project):
    service = FinanceService(store)
    first = service.get_or_create_for_project(project.id, requested_by="u1")
    second = service.get_or_create_for_project(project.id, requested_by="u2")

    assert first.id == second.id
    assert first.total_invested == 0
    assert first.updated_by == "u1"
    assert len(service.list_finance()) == 1


def test_project_finance_requires_project(store):
    with pytest.raises(NotFoundException):
        FinanceService(store).get_or_create_for_project("missing")


def test_pending_is_derived_and_never_taken_from_client(store, project):
    service = FinanceService(store)
    finance = service.create_finance({"project": project.id, "total_invested": 500, "able_to_bill": 200, "pending": 1})
    assert finance.pending == 300

    finance = service.update_finance(finance.id, {"total_invested": 800, "pending": 5}, updated_by="admin")
    assert finance.pending == 600
    assert finance.updated_by == "admin"


def test_line_items_cannot_be_replaced(store, project):
    service = FinanceService(store)
    finance = service.create_finance({"project": project.id})
    with pytest.raises(ValidationException):
        service.update_finance(finance.id, {"expenses": []})


def test_line_items_are_appended(store, project):
    service = FinanceService(store)
    finance = service.create_finance({"project": project.id, "total_invested": 1000})

    service.add_expense(finance.id, {"description": "Cement", "amount": 250, "category": "Material", "date": "2024-03-01"})
    finance = service.add_expense(finance.id, {"description": "Crane", "amount": 400, "category": "Equipment"})
    finance = service.add_revenue(finance.id, {"description": "Stage 1 bill", "amount": 900})

    assert [item["description"] for item in finance.expenses] == ["Cement", "Crane"]
    assert finance.expenses[0]["date"] == "2024-03-01"
    assert finance.expenses[1]["date"]
    assert finance.revenue[0]["amount"] == 900


def test_expense_with_bad_category_is_not_written(store, project):
    service = FinanceService(store)
    finance = service.create_finance({"project": project.id})
    with pytest.raises(ValidationException):
        service.add_expense(finance.id, {"description": "Diesel", "amount": 10, "category": "Fuel"})
    assert service.get_finance(finance.id).expenses == []


def test_negative_amount_is_rejected(store, project):
    with pytest.raises(ValidationException) as exc_info:
        FinanceService(store).create_finance({"project": project.id, "able_to_bill": -5})
    assert exc_info.value.field == "able_to_bill"


def test_summary_reads_current_records(store, project):
    other = ProjectService(store).create_project({"project_id": "FIN-002", "name": "Yard", "location": "Thane"})
    service = FinanceService(store)
    service.create_finance({"project": project.id, "total_invested": 100, "able_to_bill": 40})
    service.create_finance({"project": other.id, "total_invested": 200, "able_to_bill": 150})

    summary, records = service.get_summary()
    assert summary.efficiency == 63.33
    assert summary.pending == 110
    assert len(records) == 2


def test_duplicate_project_records_resolve_to_oldest(store, project):
    newer = store.add(Finance(project=project.id, total_invested=5, created_at="2024-02-01T00:00:00+00:00"))
    older = store.add(Finance(project=project.id, total_invested=9, created_at="2024-01-01T00:00:00+00:00"))
    service = FinanceService(store)

    assert service.get_or_create_for_project(project.id).id == older.id
    service.update_finance(older.id, {"able_to_bill": 4})
    assert service.get_or_create_for_project(project.id).able_to_bill == 4
    assert newer.id != older.id
