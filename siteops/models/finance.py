"""
Finance Model Module

One finance record per project (created lazily on first access). Expense and
revenue line items are append-only JSON lists.
"""
from typing import Any, Dict, List, Optional
from sqlmodel import SQLModel, Field, Column, JSON
import uuid

from datetime import datetime, timezone


class Finance(SQLModel, table=True):
    """
    Attributes:
        id: Unique identifier (UUID) assigned by the store
        project: Id of the Project the record belongs to
        total_invested: Amount invested in the project so far
        able_to_bill: Portion of the investment that can be billed
        expenses: Line items {description, amount, category, date}
        revenue: Line items {description, amount, date}
        updated_by: Id of the user who last changed the record
    """
    __tablename__ = "finances"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)

    # Not unique: two first reads racing may both create a default record
    project: str = Field(index=True, nullable=False)

    total_invested: float = 0
    able_to_bill: float = 0

    expenses: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    revenue: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))

    updated_by: Optional[str] = None

    created_at: Optional[str] = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    updated_at: Optional[str] = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    @property
    def pending(self) -> float:
        """Amount invested that cannot be billed yet."""
        return (self.total_invested or 0) - (self.able_to_bill or 0)
