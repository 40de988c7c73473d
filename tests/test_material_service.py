import pytest

from siteops.core.exceptions import NotFoundException, ValidationException
from siteops.services.materials import MaterialService
from siteops.services.projects import ProjectService


@pytest.fixture
def project(store):
    return ProjectService(store).create_project({"project_id": "MAT-001", "name": "Bridge", "location": "Satara"})


def _material(store, owner, **fields):
    data = {"project": owner.id, "name": "Cement", "quantity": "50 bags", "type": "Required", **fields}
    return MaterialService(store).create_material(data, reported_by="u1")


def test_available_material_marked_ordered_is_in_stock(store, project):
    material = _material(store, project, type="Available", status="Ordered", priority="High")
    assert material.status == "In Stock"
    assert material.priority is None
    assert material.reported_by == "u1"


def test_required_material_defaults(store, project):
    material = _material(store, project, needed_by="2024-07-01")
    assert material.status == "Pending"
    assert material.priority == "Medium"
    assert material.needed_by == "2024-07-01"


def test_material_needs_existing_project(store, project):
    with pytest.raises(NotFoundException):
        _material(store, project, project="missing")


def test_material_needs_quantity(store, project):
    with pytest.raises(ValidationException) as exc_info:
        _material(store, project, quantity="  ")
    assert exc_info.value.field == "quantity"


def test_type_change_on_update_renormalizes(store, project):
    service = MaterialService(store)
    material = _material(store, project, status="Delivered", priority="High", needed_by="2024-07-01")

    material = service.update_material(material.id, {"type": "Available"})
    assert (material.type, material.status, material.priority, material.needed_by) == ("Available", "In Stock", None, None)

    material = service.update_material(material.id, {"type": "Required"})
    assert (material.status, material.priority) == ("Pending", "Medium")


def test_update_keeps_lifecycle_fields_not_sent(store, project):
    service = MaterialService(store)
    material = _material(store, project, status="Ordered", priority="High")
    material = service.update_material(material.id, {"quantity": "60 bags"})
    assert (material.quantity, material.status, material.priority) == ("60 bags", "Ordered", "High")


def test_unknown_status_on_update_is_rejected(store, project):
    service = MaterialService(store)
    material = _material(store, project)
    with pytest.raises(ValidationException):
        service.update_material(material.id, {"status": "Lost"})
    assert service.get_material(material.id).status == "Pending"


def test_lists(store, project):
    service = MaterialService(store)
    _material(store, project, name="Sand", priority="Low")
    _material(store, project, name="Steel", priority="High")
    _material(store, project, name="Bricks", priority="Medium")
    _material(store, project, name="Gravel", type="Available")

    assert [material.name for material in service.list_required()] == ["Steel", "Bricks", "Sand"]
    assert [material.name for material in service.list_available()] == ["Gravel"]
    assert len(service.list_materials(project=project.id)) == 4
    assert service.list_materials(project="other") == []


def test_delete(store, project):
    service = MaterialService(store)
    material = _material(store, project)
    service.delete_material(material.id)
    with pytest.raises(NotFoundException):
        service.delete_material(material.id)


@pytest.mark.parametrize("cleared", [None, ""])
def test_project_cannot_be_cleared(store, project, cleared):
    service = MaterialService(store)
    material = _material(store, project)
    with pytest.raises(ValidationException) as exc_info:
        service.update_material(material.id, {"project": cleared})
    assert exc_info.value.field == "project"
    assert service.get_material(material.id).project == project.id
