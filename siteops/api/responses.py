"""
Success envelope shared by all endpoints.

Errors are rendered by the handlers in siteops.core.exceptions, so endpoints only
ever build the ``{"success": true, ...}`` shape.
"""
from typing import Any, Dict, Iterable, List, Optional

from sqlmodel import SQLModel


def serialize(entity: SQLModel) -> Dict[str, Any]:
    # getattr reloads attributes the session expired on commit
    return {field: getattr(entity, field) for field in type(entity).model_fields}


def success(data: Any = None, message: Optional[str] = None, **extra: Any) -> Dict[str, Any]:
    body = {"success": True, "data": data}
    if message:
        body["message"] = message
    body.update(extra)
    return body


def listing(items: Iterable[Any], **extra: Any) -> Dict[str, Any]:
    data: List[Any] = [serialize(item) if isinstance(item, SQLModel) else item for item in items]
    return success(data, count=len(data), **extra)
