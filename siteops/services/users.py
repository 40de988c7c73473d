from datetime import datetime, timezone
from typing import List, Optional

from siteops.core.exceptions import NotFoundException
from siteops.core.logging import get_logger
from siteops.core.security import get_password_hash
from siteops.models.user import User, UserRole
from siteops.store.base import EntityStore

logger = get_logger("services.users")


def ensure_admin(store: EntityStore, email: str, password: str, name: Optional[str] = "Administrator") -> User:
    """
    Return the admin account for ``email``, creating it if needed.

    An existing non-admin account with that email is promoted; its password is
    left alone.
    """
    email = email.lower()
    user = store.find_one(User, email=email)
    if user is None:
        user = store.add(User(
            email=email,
            password=get_password_hash(password),
            name=name,
            role=UserRole.ADMIN.value,
        ))
        logger.info(f"Created admin user {user.email}")
        return user
    if not user.is_admin:
        def promote(existing: User) -> None:
            existing.role = UserRole.ADMIN.value

        user = store.update(User, user.id, promote)
        logger.info(f"Promoted {email} to admin")
    return user


def update_location(
    store: EntityStore,
    user_id: str,
    latitude: float,
    longitude: float,
    address: Optional[str] = None,
) -> User:
    """Replace the user's last reported position and stamp it with the current time."""
    location = {
        "latitude": latitude,
        "longitude": longitude,
        "address": address.strip() if address else address,
        "last_updated": datetime.now(timezone.utc).isoformat(),
    }

    def mutate(user: User) -> None:
        user.location = location

    user = store.update(User, user_id, mutate)
    if user is None:
        raise NotFoundException("User", user_id)
    logger.info(f"User {user_id} location updated ({latitude}, {longitude})")
    return user


def list_staff_locations(store: EntityStore) -> List[User]:
    """Field users that have reported a position, most recent report first."""
    staff = [
        user for user in store.find(User, role=UserRole.USER.value)
        if user.location and user.location.get("latitude") is not None
        and user.location.get("longitude") is not None
    ]
    return sorted(staff, key=lambda user: user.location.get("last_updated") or "", reverse=True)
