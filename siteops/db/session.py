from sqlmodel import SQLModel, create_engine, Session
from siteops.core.config import settings

# Global engine instance, created on first use
_engine = None


def get_engine():
    global _engine

    if _engine is not None:
        return _engine

    # Fallback to a local SQLite file when DATABASE_URL is not set
    db_url = settings.DATABASE_URL or "sqlite:///./siteops.db"

    # SQLite fix for multithreading
    connect_args = {"check_same_thread": False} if db_url.startswith("sqlite") else {}

    _engine = create_engine(db_url, connect_args=connect_args, pool_pre_ping=True)
    return _engine


def init_db():
    """Create any missing tables for the registered models."""
    import siteops.models  # noqa: F401  (registers the tables on SQLModel.metadata)

    SQLModel.metadata.create_all(get_engine())


def get_db():
    with Session(get_engine()) as session:
        yield session
