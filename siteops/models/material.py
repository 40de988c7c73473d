"""
Material Model Module

Materials are either on site ("Available") or requested for a site ("Required").
The legal status/priority combinations for each type are enforced by
siteops.rules.materials before a row is written.
"""
from typing import Optional
from sqlmodel import SQLModel, Field
import uuid

from datetime import datetime, timezone

from siteops.core.enums import MaterialStatus


class Material(SQLModel, table=True):
    """
    Attributes:
        id: Unique identifier (UUID) assigned by the store
        project: Id of the Project the material belongs to (required)
        name: Material name, e.g. "Cement" (required)
        quantity: Free-text quantity with unit, e.g. "50 bags" (required)
        type: "Available" or "Required"
        location: Where on site the material is kept
        status: "Pending"/"In Stock" for Available, "Pending"/"Ordered"/"Delivered" for Required
        priority: "Low"/"Medium"/"High", only set for Required materials
        needed_by: Date (YYYY-MM-DD) a Required material is needed by
        reported_by: Id of the user who filed the entry
    """
    __tablename__ = "materials"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)

    project: str = Field(index=True, nullable=False)
    name: str = Field(nullable=False)
    quantity: str = Field(nullable=False)
    type: str = Field(nullable=False)
    location: Optional[str] = None

    # Lifecycle fields
    status: str = Field(default=MaterialStatus.PENDING.value)
    priority: Optional[str] = None
    needed_by: Optional[str] = None

    reported_by: Optional[str] = None

    created_at: Optional[str] = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    updated_at: Optional[str] = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
