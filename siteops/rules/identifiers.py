"""
Structural checks for human-assigned identifiers.

Runs once, before the entity is persisted. Uniqueness is decided from the ids
of the records that already carry the identifier, which the caller looks up.
"""
import re
from typing import Any, Iterable, Optional

from siteops.core.exceptions import ConflictException, ValidationException

PROJECT_ID_PATTERN = re.compile(r"^[A-Z]{3}-[0-9]{3}$")
MIN_EMPLOYEE_ID_LENGTH = 3


def normalize_project_id(value: Any) -> str:
    """Upper-case a project code and check it has the form ``XXX-000``."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationException("Project ID is required", field="project_id", value=value)
    candidate = value.strip().upper()
    if not PROJECT_ID_PATTERN.match(candidate):
        raise ValidationException(
            "Project ID must be in format: XXX-000", field="project_id", value=value
        )
    return candidate


def normalize_employee_id(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationException("Employee ID is required", field="employee_id", value=value)
    candidate = value.strip()
    if len(candidate) < MIN_EMPLOYEE_ID_LENGTH:
        raise ValidationException(
            f"Employee ID must be at least {MIN_EMPLOYEE_ID_LENGTH} characters",
            field="employee_id",
            value=value,
        )
    return candidate


def ensure_unique(
    entity: str,
    field: str,
    value: str,
    holders: Iterable[str],
    own_id: Optional[str] = None,
) -> None:
    """
    Raise ConflictException if any record other than ``own_id`` holds ``value``.

    Args:
        entity: Entity name used in the error, e.g. "Project"
        field: Name of the identifier field, e.g. "project_id"
        value: The normalized identifier
        holders: Ids of the records that currently carry ``value``
        own_id: Id of the record being updated, which may keep its own identifier
    """
    if any(holder != own_id for holder in holders):
        raise ConflictException(entity, field, value)
