"""
Authentication Endpoints Module

Registration, login and the current-user lookup with JWT bearer tokens.
"""
from datetime import timedelta
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm

from siteops.api import deps
from siteops.api.responses import success
from siteops.core.config import settings
from siteops.core.logging import get_logger
from siteops.core.security import create_access_token, get_password_hash, verify_password
from siteops.models.user import User, UserRole
from siteops.schemas.auth import UserRegister
from siteops.schemas.user import LocationUpdate, UserRead
from siteops.services import users
from siteops.store.base import EntityStore

logger = get_logger("api.auth")

router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register_user(user_in: UserRegister, store: EntityStore = Depends(deps.get_store)):
    """
    Register a new field user account.

    The password is hashed before storage. New users always get the USER role;
    administrators are created with scripts/create_first_user.py.

    Raises:
        409: If a user with this email already exists
    """
    logger.info(f"Registration attempt for {user_in.email}")
    user = store.add(User(
        email=user_in.email.lower(),
        password=get_password_hash(user_in.password),  # Hash password using bcrypt
        name=user_in.name.strip(),
        employee_id=user_in.employee_id,
        role=UserRole.USER.value,
    ))
    token = create_access_token(subject=user.email)
    logger.info(f"User {user.id} registered")
    return success(
        UserRead.model_validate(user).model_dump(),
        access_token=token,
        token_type="bearer",
    )


@router.post("/login")
def login(store: EntityStore = Depends(deps.get_store), form_data: OAuth2PasswordRequestForm = Depends()):
    """
    Authenticate a user and issue an access token.

    Note: OAuth2PasswordRequestForm uses the 'username' field, which holds the email.
    """
    user = store.find_one(User, email=form_data.username.lower())

    # Verify user exists and password is correct
    if not user or not verify_password(form_data.password, user.password):
        logger.warning(f"Failed login for {form_data.username}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(
        subject=user.email,
        expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )
    logger.info(f"User {user.id} logged in")
    return {"access_token": access_token, "token_type": "bearer"}


@router.get("/me")
def read_me(current_user: User = Depends(deps.get_current_user)):
    return success(UserRead.model_validate(current_user).model_dump())


@router.put("/update-location")
def update_location(
    location_in: LocationUpdate,
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_user),
):
    """Record the caller's current GPS position, replacing the previous one."""
    user = users.update_location(
        store, current_user.id, location_in.latitude, location_in.longitude, location_in.address
    )
    return success(user.location, message="Location updated successfully")
