import sys
import os
from sqlmodel import Session

# Add current directory to path
sys.path.append(os.getcwd())

from siteops.core.config import settings
from siteops.db.session import get_engine, init_db
from siteops.services.users import ensure_admin
from siteops.store.sql import SqlStore


def create_initial_user():
    print("--- Initial Admin Creation ---")
    init_db()

    with Session(get_engine()) as session:
        user = ensure_admin(SqlStore(session), settings.FIRST_ADMIN_EMAIL, settings.FIRST_ADMIN_PASSWORD)
        print(f"Admin ready: {user.email} (role: {user.role})")


if __name__ == "__main__":
    create_initial_user()
