"""
Storage port used by the services.

Documents are SQLModel instances keyed by their ``id``. Implementations give
per-document atomic read-modify-write through :meth:`EntityStore.update` and make
no promise across documents.
"""
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional, Type, TypeVar

from sqlmodel import SQLModel

from siteops.core.exceptions import NotFoundException

T = TypeVar("T", bound=SQLModel)


def touch(entity: SQLModel) -> None:
    """Stamp ``updated_at`` on entities that carry it."""
    if hasattr(entity, "updated_at"):
        entity.updated_at = datetime.now(timezone.utc).isoformat()


class EntityStore(ABC):
    """Repository interface shared by the SQL and in-memory stores."""

    @abstractmethod
    def get(self, model: Type[T], entity_id: str) -> Optional[T]:
        """Get a document by id."""
        pass

    @abstractmethod
    def find(self, model: Type[T], **filters: Any) -> List[T]:
        """Get all documents whose fields equal the given filter values."""
        pass

    @abstractmethod
    def add(self, entity: T) -> T:
        """Insert a new document. Raises ConflictException on a unique field clash."""
        pass

    @abstractmethod
    def update(self, model: Type[T], entity_id: str, mutate: Callable[[T], None]) -> Optional[T]:
        """
        Atomically load a document, apply ``mutate`` to it and write it back.

        Returns the written document, or None if no document has that id. If
        ``mutate`` raises, nothing is written.
        """
        pass

    @abstractmethod
    def delete(self, model: Type[T], entity_id: str) -> bool:
        """Delete a document. Returns False if it did not exist."""
        pass

    def find_one(self, model: Type[T], **filters: Any) -> Optional[T]:
        results = self.find(model, **filters)
        return results[0] if results else None

    def require(self, model: Type[T], entity_id: str) -> T:
        """Get a document or raise NotFoundException."""
        entity = self.get(model, entity_id) if entity_id else None
        if entity is None:
            raise NotFoundException(model.__name__, entity_id)
        return entity


def unique_fields(model: Type[SQLModel]) -> List[str]:
    """Names of the columns declared unique on a table model."""
    return [column.name for column in model.__table__.columns if column.unique]
