import pytest

from siteops.core.enums import MaterialStatus, Priority
from siteops.core.exceptions import ValidationException
from siteops.rules.materials import (
    AvailableMaterial,
    RequiredMaterial,
    reconcile_material,
    reconcile_material_fields,
)


@pytest.mark.parametrize("status", ["Ordered", "Delivered"])
def test_available_material_with_order_status_is_in_stock(status):
    material = reconcile_material("Available", status)
    assert isinstance(material, AvailableMaterial)
    assert material.status is MaterialStatus.IN_STOCK


def test_available_material_drops_priority_and_needed_by():
    fields = reconcile_material("Available", "Pending", priority="High", needed_by="2024-06-01").as_fields()
    assert fields == {"type": "Available", "status": "Pending", "priority": None, "needed_by": None}


def test_required_material_in_stock_is_pending():
    material = reconcile_material("Required", "In Stock")
    assert isinstance(material, RequiredMaterial)
    assert material.status is MaterialStatus.PENDING


def test_required_material_defaults():
    material = reconcile_material("Required")
    assert material.status is MaterialStatus.PENDING
    assert material.priority is Priority.MEDIUM
    assert material.needed_by is None


def test_required_material_keeps_priority_and_needed_by():
    fields = reconcile_material("Required", "Ordered", "High", "2024-06-01").as_fields()
    assert fields == {"type": "Required", "status": "Ordered", "priority": "High", "needed_by": "2024-06-01"}


def test_missing_status_defaults_to_pending_for_available():
    assert reconcile_material("Available", "").status is MaterialStatus.PENDING


@pytest.mark.parametrize("kwargs, field", [
    ({"type": "Borrowed"}, "type"),
    ({"type": None}, "type"),
    ({"type": "Required", "status": "Lost"}, "status"),
    ({"type": "Available", "status": "Lost"}, "status"),
    ({"type": "Required", "priority": "Urgent"}, "priority"),
])
def test_unknown_enum_values_are_rejected(kwargs, field):
    with pytest.raises(ValidationException) as exc_info:
        reconcile_material(**kwargs)
    assert exc_info.value.field == field


def test_variants_refuse_illegal_status():
    with pytest.raises(ValueError):
        AvailableMaterial(status=MaterialStatus.ORDERED)
    with pytest.raises(ValueError):
        RequiredMaterial(status=MaterialStatus.IN_STOCK)


def test_type_change_renormalizes_persisted_fields():
    current = {"type": "Required", "status": "Ordered", "priority": "High", "needed_by": "2024-06-01"}
    fields = reconcile_material_fields(current, {"type": "Available"})
    assert fields == {"type": "Available", "status": "In Stock", "priority": None, "needed_by": None}


def test_partial_change_keeps_other_persisted_fields():
    current = {"type": "Required", "status": "Ordered", "priority": "High", "needed_by": "2024-06-01"}
    fields = reconcile_material_fields(current, {"status": "Delivered"})
    assert fields == {"type": "Required", "status": "Delivered", "priority": "High", "needed_by": "2024-06-01"}


def test_reconciliation_is_idempotent():
    changes = {"type": "Available", "status": "Delivered"}
    once = reconcile_material_fields({}, changes)
    assert reconcile_material_fields(once, changes) == once
