import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, computed_field

from siteops.schemas.base import WritePayload


class FinanceCreate(WritePayload):
    project: str
    total_invested: float = 0
    able_to_bill: float = 0


class FinanceUpdate(WritePayload):
    project: Optional[str] = None
    total_invested: Optional[float] = None
    able_to_bill: Optional[float] = None


class ExpenseIn(BaseModel):
    description: str
    amount: float
    category: str
    date: Optional[datetime.date] = None


class RevenueIn(BaseModel):
    description: str
    amount: float
    date: Optional[datetime.date] = None


class FinanceRead(BaseModel):
    """Finance record as returned to clients, with ``pending`` computed on the way out."""
    id: str
    project: str
    total_invested: float
    able_to_bill: float
    expenses: List[Dict[str, Any]] = []
    revenue: List[Dict[str, Any]] = []
    updated_by: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def pending(self) -> float:
        return self.total_invested - self.able_to_bill
