"""
API Dependencies Module

This module provides FastAPI dependency functions for the storage port and for
bearer-token authentication and authorization.
"""
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from pydantic import ValidationError
from sqlmodel import Session

from siteops.core.config import settings
from siteops.core.security import decode_access_token
from siteops.db.session import get_db
from siteops.models.user import User
from siteops.schemas.auth import TokenData
from siteops.store.base import EntityStore
from siteops.store.sql import SqlStore

# auto_error=False so a missing header is reported as 401 by get_current_user
reusable_oauth2 = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_STR}/auth/login",
    auto_error=False
)


def get_store(db: Session = Depends(get_db)) -> EntityStore:
    """Storage port for one request, backed by the request's database session."""
    return SqlStore(db)


def get_current_user(
    store: EntityStore = Depends(get_store),
    token: Optional[str] = Depends(reusable_oauth2)
) -> User:
    """
    Dependency that retrieves and validates the current authenticated user.

    Returns:
        User: The authenticated user object

    Raises:
        HTTPException 401: If no bearer token is provided
        HTTPException 403: If the token is invalid or expired
        HTTPException 404: If the user referenced in the token doesn't exist
    """
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # Decode and validate the JWT token
    try:
        payload = decode_access_token(token)
        token_data = TokenData(email=payload.get("sub"))  # Extract email from token
    except (JWTError, ValidationError):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Could not validate credentials",
        )

    user = store.find_one(User, email=token_data.email) if token_data.email else None
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def get_current_admin(
    current_user: User = Depends(get_current_user),
) -> User:
    """
    Dependency that requires the current user to be an administrator.
    """
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="The user doesn't have enough privileges"
        )
    return current_user
