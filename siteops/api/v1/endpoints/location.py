"""
Location Endpoints Module

Read access to the last GPS position reported by field staff. Positions are
written by the users themselves through ``PUT /auth/update-location``.
"""
from fastapi import APIRouter, Depends

from siteops.api import deps
from siteops.api.responses import listing, success
from siteops.core.exceptions import NotFoundException
from siteops.core.logging import get_logger
from siteops.models.user import User
from siteops.schemas.user import UserRead
from siteops.services import users
from siteops.store.base import EntityStore

logger = get_logger("api.location")

router = APIRouter()


@router.get("")
def list_staff_locations(
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_user),
):
    staff = users.list_staff_locations(store)
    logger.info(f"Staff locations requested by {current_user.id}: {len(staff)} found")
    return listing(UserRead.model_validate(user).model_dump() for user in staff)


@router.get("/user/{user_id}")
def read_user_location(
    user_id: str,
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_user),
):
    user = store.get(User, user_id)
    if user is None:
        raise NotFoundException("User", user_id)
    return success(UserRead.model_validate(user).model_dump())
