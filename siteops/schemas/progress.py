from typing import Optional

from siteops.schemas.base import WritePayload


class ProgressCreate(WritePayload):
    project: str
    work_completed: int
    status: str
    not_started_reason: Optional[str] = None
    material_status: Optional[str] = None
    notes: Optional[str] = None


class ProgressUpdate(WritePayload):
    project: Optional[str] = None
    work_completed: Optional[int] = None
    status: Optional[str] = None
    not_started_reason: Optional[str] = None
    material_status: Optional[str] = None
    notes: Optional[str] = None
