"""
Payload hygiene applied on every write path before any rule runs.

Derived fields are computed by the rules and server-managed fields are stamped
by the services, so neither is ever taken from a client payload.
"""
from typing import Any, Dict, Iterable, Mapping

from siteops.core.exceptions import ValidationException
from siteops.core.logging import get_logger

logger = get_logger("rules.guard")

SERVER_MANAGED_FIELDS = frozenset({
    "id",
    "created_at",
    "updated_at",
    "created_by",
    "reported_by",
    "updated_by",
})

DERIVED_FIELDS = {
    "Manpower": frozenset({"is_available"}),
    "Finance": frozenset({"pending"}),
}


def strip_client_fields(entity: str, payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a copy of ``payload`` without derived or server-managed keys."""
    blocked = SERVER_MANAGED_FIELDS | DERIVED_FIELDS.get(entity, frozenset())
    discarded = sorted(key for key in payload if key in blocked)
    if discarded:
        logger.warning(f"Discarding client-supplied {entity} fields: {', '.join(discarded)}")
    return {key: value for key, value in payload.items() if key not in blocked}


def reject_unknown_fields(entity: str, payload: Mapping[str, Any], known: Iterable[str]) -> None:
    """Refuse payload keys that do not name a field of the entity."""
    unknown = sorted(set(payload) - set(known))
    if unknown:
        raise ValidationException(
            f"Unknown {entity} field(s): {', '.join(unknown)}", field=unknown[0]
        )
