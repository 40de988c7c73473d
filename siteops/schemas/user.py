from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


# Properties to return to client; the password hash is never included
class UserRead(BaseModel):
    id: str
    email: EmailStr
    name: Optional[str] = None
    employee_id: Optional[str] = None
    role: str
    location: Optional[Dict[str, Any]] = None
    created_at: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class LocationUpdate(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    address: Optional[str] = None
