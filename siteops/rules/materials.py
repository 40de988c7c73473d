"""
Material lifecycle policy.

A material is one of two variants:

* :class:`AvailableMaterial`: on site; status is Pending or In Stock, and it has
  no priority or needed-by date.
* :class:`RequiredMaterial`: requested; status is Pending, Ordered or Delivered,
  priority defaults to Medium and a needed-by date may be kept.

Cross-type status values are normalized rather than rejected: an Available
material marked Ordered or Delivered is In Stock, a Required material marked In
Stock is Pending. Unknown enum values are rejected. The same reconciliation runs
on create and on update, so changing ``type`` re-normalizes the record.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Mapping, Optional, Type, Union

from siteops.core.enums import MaterialStatus, MaterialType, Priority
from siteops.core.exceptions import ValidationException
from siteops.core.logging import get_logger

logger = get_logger("rules.materials")

AVAILABLE_STATUSES = (MaterialStatus.PENDING, MaterialStatus.IN_STOCK)
REQUIRED_STATUSES = (MaterialStatus.PENDING, MaterialStatus.ORDERED, MaterialStatus.DELIVERED)

LIFECYCLE_FIELDS = ("type", "status", "priority", "needed_by")


@dataclass(frozen=True)
class AvailableMaterial:
    status: MaterialStatus = MaterialStatus.PENDING

    type: ClassVar[MaterialType] = MaterialType.AVAILABLE

    def __post_init__(self):
        if self.status not in AVAILABLE_STATUSES:
            raise ValueError(f"{self.status.value} is not a status of an available material")

    def as_fields(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "status": self.status.value,
            "priority": None,
            "needed_by": None,
        }


@dataclass(frozen=True)
class RequiredMaterial:
    status: MaterialStatus = MaterialStatus.PENDING
    priority: Priority = Priority.MEDIUM
    needed_by: Optional[str] = None

    type: ClassVar[MaterialType] = MaterialType.REQUIRED

    def __post_init__(self):
        if self.status not in REQUIRED_STATUSES:
            raise ValueError(f"{self.status.value} is not a status of a required material")

    def as_fields(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "status": self.status.value,
            "priority": self.priority.value,
            "needed_by": self.needed_by,
        }


MaterialVariant = Union[AvailableMaterial, RequiredMaterial]


def _parse(enum_cls: Type[Enum], value: Any, field: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationException(
            f"Invalid {field} '{value}'. Must be one of: {allowed}", field=field, value=value
        )


def _blank(value: Any) -> bool:
    return value is None or value == ""


def reconcile_material(
    type: Any,
    status: Any = None,
    priority: Any = None,
    needed_by: Optional[str] = None,
) -> MaterialVariant:
    """Build the legal variant for the given raw field values."""
    if _blank(type):
        raise ValidationException("Material type is required", field="type", value=type)
    material_type = _parse(MaterialType, type, "type")
    material_status = MaterialStatus.PENDING if _blank(status) else _parse(MaterialStatus, status, "status")

    if material_type is MaterialType.AVAILABLE:
        if material_status not in AVAILABLE_STATUSES:
            logger.info(f"Normalizing status '{material_status.value}' to 'In Stock' for available material")
            material_status = MaterialStatus.IN_STOCK
        return AvailableMaterial(status=material_status)

    if material_status not in REQUIRED_STATUSES:
        logger.info(f"Normalizing status '{material_status.value}' to 'Pending' for required material")
        material_status = MaterialStatus.PENDING
    material_priority = Priority.MEDIUM if _blank(priority) else _parse(Priority, priority, "priority")
    return RequiredMaterial(
        status=material_status,
        priority=material_priority,
        needed_by=None if _blank(needed_by) else needed_by,
    )


def reconcile_material_fields(
    current: Mapping[str, Any], changes: Mapping[str, Any]
) -> Dict[str, Any]:
    """
    Merge ``changes`` over the persisted lifecycle fields and normalize the result.

    ``current`` is empty on create. Returns the four lifecycle fields to write.
    """
    merged = {field: current.get(field) for field in LIFECYCLE_FIELDS}
    merged.update({field: changes[field] for field in LIFECYCLE_FIELDS if field in changes})
    return reconcile_material(**merged).as_fields()
