from datetime import date
from typing import Optional

from siteops.schemas.base import WritePayload


# Enum fields stay plain strings; the lifecycle policy validates and normalizes them
class MaterialCreate(WritePayload):
    project: str
    name: str
    quantity: str
    type: str
    location: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    needed_by: Optional[date] = None


class MaterialUpdate(WritePayload):
    project: Optional[str] = None
    name: Optional[str] = None
    quantity: Optional[str] = None
    type: Optional[str] = None
    location: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    needed_by: Optional[date] = None
