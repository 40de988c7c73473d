from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from siteops.schemas.base import WritePayload

PHONE_PATTERN = r"^[0-9]{10}$"


# Shared properties
class ManpowerBase(WritePayload):
    phone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)
    email: Optional[EmailStr] = None
    experience: Optional[str] = None
    skills: Optional[str] = None
    assigned_project: Optional[str] = None
    # Accepted only so it can be discarded; availability is derived
    is_available: Optional[bool] = None


class ManpowerCreate(ManpowerBase):
    employee_id: str
    name: str
    role: str


class ManpowerUpdate(ManpowerBase):
    employee_id: Optional[str] = None
    name: Optional[str] = None
    role: Optional[str] = None


class AssignRequest(BaseModel):
    project_id: str
