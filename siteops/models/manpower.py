"""
Manpower Model Module

A worker on the company roster. ``is_available`` is derived from
``assigned_project`` by siteops.rules.availability and is never set directly.
"""
from typing import Optional
from sqlmodel import SQLModel, Field
import uuid

from datetime import datetime, timezone


class Manpower(SQLModel, table=True):
    """
    Attributes:
        id: Unique identifier (UUID) assigned by the store
        employee_id: Human-assigned staff code (unique, at least 3 characters)
        name: Worker name (required)
        role: Trade or job role, e.g. "Mason" (required)
        phone: Optional 10-digit phone number
        email: Optional email address, stored lower case
        experience: Free-text experience summary
        skills: Free-text skills summary
        assigned_project: Id of the Project the worker is on, or None
        is_available: True exactly when assigned_project is None
        created_by: Id of the admin who added the worker
    """
    __tablename__ = "manpower"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)

    employee_id: str = Field(unique=True, index=True, nullable=False)
    name: str = Field(nullable=False)
    role: str = Field(nullable=False)

    # Optional contact details
    phone: Optional[str] = None
    email: Optional[str] = None
    experience: Optional[str] = None
    skills: Optional[str] = None

    # Assignment state
    assigned_project: Optional[str] = Field(default=None, index=True)
    is_available: bool = True

    created_by: Optional[str] = None

    created_at: Optional[str] = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    updated_at: Optional[str] = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
