"""
Manpower availability rule.

``is_available`` is a pure function of ``assigned_project``. Every manpower write
path goes through :func:`apply_availability`; no other code derives the flag.

Resolution order for a payload:

1. ``assigned_project`` set to a non-empty value: keep it, worker is unavailable.
2. ``assigned_project`` set to None or an empty string: clear it, worker is available.
3. ``assigned_project`` absent: keep the persisted value and recompute the flag from it.

A client-supplied ``is_available`` is always discarded.
"""
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

ASSIGNED_PROJECT = "assigned_project"
IS_AVAILABLE = "is_available"


@dataclass(frozen=True)
class Assignment:
    assigned_project: Optional[str]
    is_available: bool


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def requested_project(payload: Mapping[str, Any]) -> Optional[str]:
    """The project a payload assigns the worker to, if any. Callers check it exists."""
    value = payload.get(ASSIGNED_PROJECT)
    if _is_empty(value):
        return None
    return str(value).strip()


def resolve_availability(
    payload: Mapping[str, Any], current_project: Optional[str] = None
) -> Assignment:
    """
    Decide the assignment state a write leaves behind.

    Args:
        payload: The create/update payload as sent by the client
        current_project: ``assigned_project`` of the persisted record (None on create)
    """
    if ASSIGNED_PROJECT in payload:
        project = requested_project(payload)
        return Assignment(assigned_project=project, is_available=project is None)

    if _is_empty(current_project):
        return Assignment(assigned_project=None, is_available=True)
    return Assignment(assigned_project=current_project, is_available=False)


def apply_availability(
    payload: Mapping[str, Any], current_project: Optional[str] = None
) -> Dict[str, Any]:
    """Return a copy of ``payload`` with both assignment fields reconciled."""
    assignment = resolve_availability(payload, current_project)
    fields = {key: value for key, value in payload.items() if key != IS_AVAILABLE}
    fields[ASSIGNED_PROJECT] = assignment.assigned_project
    fields[IS_AVAILABLE] = assignment.is_available
    return fields
