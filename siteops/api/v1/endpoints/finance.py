"""
Finance Endpoints Module

Portfolio totals and per-project finance records. Everything except reading a
single project's record is restricted to administrators.
"""
from fastapi import APIRouter, Depends, status

from siteops.api import deps
from siteops.api.responses import success
from siteops.models.user import User
from siteops.schemas.finance import ExpenseIn, FinanceCreate, FinanceRead, FinanceUpdate, RevenueIn
from siteops.services.finance import FinanceService
from siteops.store.base import EntityStore

router = APIRouter()


def _read(finance) -> dict:
    return FinanceRead.model_validate(finance).model_dump()


@router.get("")
def list_finance(
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_admin),
):
    records = [_read(finance) for finance in FinanceService(store).list_finance()]
    return success(records, count=len(records))


@router.get("/summary")
def finance_summary(
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_admin),
):
    """
    Portfolio totals across every finance record.

    ``efficiency`` is able_to_bill / total_invested as a percentage with two
    decimals, 0 when nothing is invested.
    """
    summary, records = FinanceService(store).get_summary()
    return success({
        "summary": summary.as_dict(),
        "projects": [_read(finance) for finance in records],
    })


@router.get("/project/{project_id}")
def read_project_finance(
    project_id: str,
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_user),
):
    """Get the project's finance record, creating an empty one on first access."""
    finance = FinanceService(store).get_or_create_for_project(project_id, requested_by=current_user.id)
    return success(_read(finance))


@router.get("/{finance_id}")
def read_finance(
    finance_id: str,
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_admin),
):
    return success(_read(FinanceService(store).get_finance(finance_id)))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_finance(
    finance_in: FinanceCreate,
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_admin),
):
    finance = FinanceService(store).create_finance(
        finance_in.model_dump(exclude_unset=True, mode="json"), updated_by=current_user.id
    )
    return success(_read(finance), message="Finance record created successfully")


@router.put("/{finance_id}")
def update_finance(
    finance_id: str,
    finance_in: FinanceUpdate,
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_admin),
):
    """
    Update the invested and billable amounts.

    Expenses and revenue cannot be replaced here; use the append endpoints.
    """
    finance = FinanceService(store).update_finance(
        finance_id, finance_in.model_dump(exclude_unset=True, mode="json"), updated_by=current_user.id
    )
    return success(_read(finance), message="Finance record updated successfully")


@router.post("/{finance_id}/expenses", status_code=status.HTTP_201_CREATED)
def add_expense(
    finance_id: str,
    expense: ExpenseIn,
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_admin),
):
    finance = FinanceService(store).add_expense(
        finance_id, expense.model_dump(mode="json"), updated_by=current_user.id
    )
    return success(_read(finance), message="Expense added")


@router.post("/{finance_id}/revenue", status_code=status.HTTP_201_CREATED)
def add_revenue(
    finance_id: str,
    revenue: RevenueIn,
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_admin),
):
    finance = FinanceService(store).add_revenue(
        finance_id, revenue.model_dump(mode="json"), updated_by=current_user.id
    )
    return success(_read(finance), message="Revenue added")
