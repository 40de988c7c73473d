"""
Project Model Module

This module defines the Project model: a construction site with its identifying
code, status, completion percentage, milestone timeline and assigned crew.
"""
from typing import Any, Dict, List, Optional
from sqlmodel import SQLModel, Field, Column, JSON
import uuid

from datetime import datetime, timezone

from siteops.core.enums import ProjectStatus


class Project(SQLModel, table=True):
    """
    Project model representing a construction site.

    Attributes:
        id: Unique identifier (UUID) assigned by the store
        project_id: Human-assigned site code in the form "XXX-000" (unique, upper case)
        name: Project name (required)
        location: Site location (required)
        description: Free-text description
        client_name: Name of the client the site is built for
        budget: Planned budget, never negative
        status: One of "Planning", "In Progress", "On Hold", "Completed"
        progress: Completion percentage 0-100, projected from the latest progress report
        start_date: Start date in ISO format (YYYY-MM-DD)
        expected_completion_date: Expected completion date (YYYY-MM-DD)
        actual_completion_date: Actual completion date (YYYY-MM-DD)
        timeline: Ordered milestones, each {id, title, description, date, icon}
        assigned_manpower: Ids of Manpower records attached to the site
        created_by: Id of the admin who created the project
        created_at: ISO timestamp when the project was created
        updated_at: ISO timestamp when the project was last modified
    """
    __tablename__ = "projects"

    # Primary key
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)

    # Basic project information
    project_id: str = Field(unique=True, index=True, nullable=False)
    name: str = Field(nullable=False)
    location: str = Field(nullable=False)
    description: Optional[str] = None
    client_name: Optional[str] = None
    budget: Optional[float] = None

    # Status tracking - valid values come from ProjectStatus
    status: str = Field(default=ProjectStatus.PLANNING.value)
    progress: int = 0

    # Dates stored as ISO format strings (YYYY-MM-DD)
    start_date: Optional[str] = None
    expected_completion_date: Optional[str] = None
    actual_completion_date: Optional[str] = None

    # Embedded documents stored as JSON
    timeline: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    assigned_manpower: List[str] = Field(default_factory=list, sa_column=Column(JSON))

    # References are plain ids: deleting a project leaves dependents in place
    created_by: Optional[str] = None

    # Audit timestamps - automatically managed
    created_at: Optional[str] = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    updated_at: Optional[str] = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
