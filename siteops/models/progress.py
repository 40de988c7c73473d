"""
Progress Model Module

A progress report is an append-only history record. Its ``work_completed`` value
is projected onto the owning Project by siteops.services.progress.
"""
from typing import Optional
from sqlmodel import SQLModel, Field
import uuid

from datetime import datetime, timezone


class Progress(SQLModel, table=True):
    """
    Attributes:
        id: Unique identifier (UUID) assigned by the store
        project: Id of the Project the report is about (required)
        reported_by: Id of the user who filed the report (required)
        work_completed: Completion percentage 0-100 at the time of the report
        status: "Started" or "Not Started"
        not_started_reason: Why work has not started, when status is "Not Started"
        material_status: Free-text note on material availability
        notes: Free-text remarks
        created_at: ISO timestamp of submission
    """
    __tablename__ = "progress_reports"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)

    project: str = Field(index=True, nullable=False)
    reported_by: str = Field(nullable=False)

    work_completed: int = Field(nullable=False)
    status: str = Field(nullable=False)
    not_started_reason: Optional[str] = None
    material_status: Optional[str] = None
    notes: Optional[str] = None

    created_at: Optional[str] = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    updated_at: Optional[str] = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
