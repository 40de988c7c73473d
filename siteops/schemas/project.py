import datetime
from typing import List, Optional

from pydantic import BaseModel

from siteops.schemas.base import WritePayload


class TimelineEntryIn(BaseModel):
    title: str
    date: datetime.date
    description: Optional[str] = None
    icon: Optional[str] = None


# Shared properties
class ProjectBase(WritePayload):
    description: Optional[str] = None
    client_name: Optional[str] = None
    budget: Optional[float] = None
    status: Optional[str] = None
    progress: Optional[int] = None
    start_date: Optional[datetime.date] = None
    expected_completion_date: Optional[datetime.date] = None
    actual_completion_date: Optional[datetime.date] = None
    timeline: Optional[List[TimelineEntryIn]] = None
    assigned_manpower: Optional[List[str]] = None


# Properties to receive via API on creation
class ProjectCreate(ProjectBase):
    project_id: str
    name: str
    location: str


# Properties to receive via API on update; the timeline is replaced as a whole
class ProjectUpdate(ProjectBase):
    project_id: Optional[str] = None
    name: Optional[str] = None
    location: Optional[str] = None
