"""
User Model Module

This module defines the User model and UserRole enumeration used to authenticate
callers and to gate administrative operations.
"""
from enum import Enum
from typing import Any, Dict, Optional
from sqlmodel import SQLModel, Field, Column, JSON
import uuid
from datetime import datetime, timezone


class UserRole(str, Enum):
    """
    Enumeration of user roles.

    - ADMIN: site administrator; creates projects and manpower, sees finances
    - USER: field staff; files progress reports and material entries
    """
    ADMIN = "admin"
    USER = "user"


class User(SQLModel, table=True):
    """
    User model representing authenticated callers of the API.

    Attributes:
        id: Unique identifier (UUID) automatically generated for each user
        email: Login email address (required, unique, indexed)
        password: Hashed password (bcrypt)
        name: Display name
        role: One of the UserRole values (default: USER)
        employee_id: Optional staff code shown next to reports the user files
        location: Last reported position: latitude, longitude, address and
            last_updated (ISO timestamp); None until the user reports one
        created_at: ISO timestamp when the user account was created
    """
    __tablename__ = "users"

    # Primary key - auto-generated UUID for global uniqueness
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)

    # Authentication fields
    email: str = Field(unique=True, index=True, nullable=False)
    password: Optional[str] = None  # Hashed password (bcrypt)

    # Profile information
    name: Optional[str] = None
    employee_id: Optional[str] = None

    # Authorization
    role: str = Field(default=UserRole.USER.value)

    # Last reported GPS position, replaced as a whole on every report
    location: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))

    # Audit timestamp
    created_at: Optional[str] = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    @property
    def is_admin(self) -> bool:
        """Helper to check if user has the admin role."""
        return self.role == UserRole.ADMIN.value
