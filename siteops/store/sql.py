"""
SQLModel-backed document store used by the running service.

Each write commits its own transaction. ``update`` re-reads the row with
``SELECT ... FOR UPDATE`` (a no-op on SQLite) so the mutation is computed from the
row version it overwrites.
"""
from typing import Any, Callable, List, Optional, Type

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, SQLModel, select

from siteops.core.exceptions import ConflictException
from siteops.core.logging import get_logger
from siteops.store.base import EntityStore, T, touch, unique_fields

logger = get_logger("store.sql")


class SqlStore(EntityStore):

    def __init__(self, session: Session):
        self.session = session

    def _conflict(self, model: Type[SQLModel], entity_id: str, values: dict) -> ConflictException:
        """Work out which unique field an IntegrityError was about."""
        for field, value in values.items():
            if value is None:
                continue
            statement = select(model).where(getattr(model, field) == value, model.id != entity_id)
            if self.session.exec(statement).first() is not None:
                return ConflictException(model.__name__, field, value)
        return ConflictException(model.__name__, "id", entity_id)

    def _commit(self, entity: SQLModel) -> None:
        model = type(entity)
        # Captured before commit: a rollback expires persistent instances
        entity_id = entity.id
        values = {field: getattr(entity, field) for field in unique_fields(model)}
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            logger.warning(f"Integrity error writing {model.__name__} {entity_id}: {exc.orig}")
            raise self._conflict(model, entity_id, values) from exc

    def get(self, model: Type[T], entity_id: str) -> Optional[T]:
        return self.session.get(model, entity_id)

    def find(self, model: Type[T], **filters: Any) -> List[T]:
        statement = select(model)
        for field, value in filters.items():
            statement = statement.where(getattr(model, field) == value)
        return list(self.session.exec(statement).all())

    def add(self, entity: T) -> T:
        self.session.add(entity)
        self._commit(entity)
        self.session.refresh(entity)
        return entity

    def update(self, model: Type[T], entity_id: str, mutate: Callable[[T], None]) -> Optional[T]:
        statement = (
            select(model)
            .where(model.id == entity_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        try:
            entity = self.session.exec(statement).first()
            if entity is None:
                self.session.rollback()
                return None
            mutate(entity)
            touch(entity)
            self.session.add(entity)
        except Exception:
            self.session.rollback()
            raise
        self._commit(entity)
        self.session.refresh(entity)
        return entity

    def delete(self, model: Type[T], entity_id: str) -> bool:
        entity = self.session.get(model, entity_id)
        if entity is None:
            return False
        self.session.delete(entity)
        self.session.commit()
        return True
