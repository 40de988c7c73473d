"""
Thread-safe in-memory document store.

Documents are kept as plain dicts and rebuilt into model instances on every
read, so callers never share mutable state with the store or with each other.
A single lock makes each call atomic for the document it touches; sequences of
calls are not atomic, which is the same guarantee the SQL store gives.
"""
import copy
import threading
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional, Type

from sqlmodel import SQLModel

from siteops.core.exceptions import ConflictException
from siteops.store.base import EntityStore, T, touch, unique_fields


class MemoryStore(EntityStore):

    def __init__(self):
        self._lock = threading.RLock()
        self._documents: Dict[Type[SQLModel], Dict[str, dict]] = defaultdict(dict)

    @staticmethod
    def _snapshot(entity: SQLModel) -> dict:
        return copy.deepcopy(entity.model_dump())

    @staticmethod
    def _restore(model: Type[T], document: dict) -> T:
        return model(**copy.deepcopy(document))

    def _check_unique(self, entity: SQLModel) -> None:
        model = type(entity)
        for field in unique_fields(model):
            value = getattr(entity, field)
            if value is None:
                continue
            for document_id, document in self._documents[model].items():
                if document_id != entity.id and document.get(field) == value:
                    raise ConflictException(model.__name__, field, value)

    def get(self, model: Type[T], entity_id: str) -> Optional[T]:
        with self._lock:
            document = self._documents[model].get(entity_id)
            return self._restore(model, document) if document is not None else None

    def find(self, model: Type[T], **filters: Any) -> List[T]:
        with self._lock:
            return [
                self._restore(model, document)
                for document in self._documents[model].values()
                if all(document.get(field) == value for field, value in filters.items())
            ]

    def add(self, entity: T) -> T:
        with self._lock:
            model = type(entity)
            if entity.id in self._documents[model]:
                raise ConflictException(model.__name__, "id", entity.id)
            self._check_unique(entity)
            self._documents[model][entity.id] = self._snapshot(entity)
            return self._restore(model, self._documents[model][entity.id])

    def update(self, model: Type[T], entity_id: str, mutate: Callable[[T], None]) -> Optional[T]:
        with self._lock:
            document = self._documents[model].get(entity_id)
            if document is None:
                return None
            entity = self._restore(model, document)
            mutate(entity)
            entity.id = entity_id
            touch(entity)
            self._check_unique(entity)
            self._documents[model][entity_id] = self._snapshot(entity)
            return self._restore(model, self._documents[model][entity_id])

    def delete(self, model: Type[T], entity_id: str) -> bool:
        with self._lock:
            return self._documents[model].pop(entity_id, None) is not None
