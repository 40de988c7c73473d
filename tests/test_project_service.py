import pytest

from siteops.core.exceptions import ConflictException, NotFoundException, ValidationException
from siteops.services.manpower import ManpowerService
from siteops.services.materials import MaterialService
from siteops.services.projects import DEFAULT_MILESTONE_ICON, ProjectService


def _create(service, project_id="PJT-001", **extra):
    return service.create_project({"project_id": project_id, "name": "Tower A", "location": "Pune", **extra})


def test_create_normalizes_project_id(store):
    project = _create(ProjectService(store), "pjt-001", budget=1500000)
    assert project.project_id == "PJT-001"
    assert project.status == "Planning"
    assert project.progress == 0
    assert project.budget == 1500000


def test_second_project_with_same_id_conflicts(store):
    service = ProjectService(store)
    _create(service)
    with pytest.raises(ConflictException) as exc_info:
        _create(service, "pjt-001")
    assert exc_info.value.field == "project_id"
    assert len(service.list_projects()) == 1


def test_malformed_project_id_is_rejected(store):
    with pytest.raises(ValidationException):
        _create(ProjectService(store), "pj-001")


def test_project_id_change_is_checked(store):
    service = ProjectService(store)
    first = _create(service)
    _create(service, "PJT-002")

    with pytest.raises(ConflictException):
        service.update_project(first.id, {"project_id": "pjt-002"})
    assert service.update_project(first.id, {"project_id": "pjt-001"}).project_id == "PJT-001"
    assert service.update_project(first.id, {"project_id": "pjt-009"}).project_id == "PJT-009"


def test_invalid_status_and_progress_are_rejected(store):
    service = ProjectService(store)
    project = _create(service)
    with pytest.raises(ValidationException):
        service.update_project(project.id, {"status": "Abandoned"})
    with pytest.raises(ValidationException):
        service.update_project(project.id, {"progress": 120})
    with pytest.raises(ValidationException):
        service.update_project(project.id, {"name": None})


def test_direct_progress_update_does_not_change_status(store):
    service = ProjectService(store)
    project = _create(service)
    project = service.update_project(project.id, {"progress": 35})
    assert project.progress == 35
    assert project.status == "Planning"


def test_timeline_is_replaced_with_fresh_ids(store):
    service = ProjectService(store)
    project = _create(service, timeline=[{"title": "Foundation", "date": "2024-01-10"}])
    original_id = project.timeline[0]["id"]
    assert project.timeline[0]["icon"] == DEFAULT_MILESTONE_ICON
    assert project.timeline[0]["description"] == ""

    project = service.update_project(project.id, {"timeline": [
        {"id": original_id, "title": "Foundation", "date": "2024-01-10"},
        {"title": "Slab", "date": "2024-03-01", "icon": "flag"},
    ]})
    assert [entry["title"] for entry in project.timeline] == ["Foundation", "Slab"]
    assert project.timeline[0]["id"] != original_id
    assert project.timeline[1]["icon"] == "flag"


def test_timeline_entry_needs_title(store):
    with pytest.raises(ValidationException) as exc_info:
        _create(ProjectService(store), timeline=[{"title": " ", "date": "2024-01-10"}])
    assert exc_info.value.field == "timeline.0.title"


def test_assigned_manpower_must_exist(store):
    worker = ManpowerService(store).create_manpower({"employee_id": "EMP-001", "name": "Ravi", "role": "Mason"})
    service = ProjectService(store)
    project = _create(service, assigned_manpower=[worker.id, worker.id])
    assert project.assigned_manpower == [worker.id]

    with pytest.raises(NotFoundException):
        service.update_project(project.id, {"assigned_manpower": ["missing"]})


def test_crew_update_assigns_and_releases_workers(store):
    workers = ManpowerService(store)
    ravi = workers.create_manpower({"employee_id": "EMP-001", "name": "Ravi", "role": "Mason"})
    asha = workers.create_manpower({"employee_id": "EMP-002", "name": "Asha", "role": "Welder"})
    service = ProjectService(store)
    project = _create(service)

    project = service.update_project(project.id, {"assigned_manpower": [ravi.id, asha.id]})
    assert project.assigned_manpower == [ravi.id, asha.id]
    assert {worker.id for worker in workers.list_for_project(project.id)} == {ravi.id, asha.id}
    assert workers.get_manpower(ravi.id).is_available is False

    project = service.update_project(project.id, {"assigned_manpower": [asha.id]})
    assert project.assigned_manpower == [asha.id]
    released = workers.get_manpower(ravi.id)
    assert released.assigned_project is None
    assert released.is_available is True
    assert workers.get_manpower(asha.id).assigned_project == project.id


def test_crew_on_create_takes_worker_from_previous_site(store):
    workers = ManpowerService(store)
    service = ProjectService(store)
    first = _create(service, "PJT-001")
    worker = workers.create_manpower(
        {"employee_id": "EMP-001", "name": "Ravi", "role": "Mason", "assigned_project": first.id}
    )
    assert service.get_project(first.id).assigned_manpower == [worker.id]

    second = _create(service, "PJT-002", assigned_manpower=[worker.id])
    assert second.assigned_manpower == [worker.id]
    assert workers.get_manpower(worker.id).assigned_project == second.id
    assert service.get_project(first.id).assigned_manpower == []


def test_dropping_worker_already_moved_elsewhere_keeps_assignment(store):
    workers = ManpowerService(store)
    service = ProjectService(store)
    first = _create(service, "PJT-001")
    second = _create(service, "PJT-002")
    worker = workers.create_manpower({"employee_id": "EMP-001", "name": "Ravi", "role": "Mason"})
    service.update_project(first.id, {"assigned_manpower": [worker.id]})
    workers.assign(worker.id, second.id)

    service.update_project(first.id, {"assigned_manpower": []})
    assert workers.get_manpower(worker.id).assigned_project == second.id
    assert service.get_project(second.id).assigned_manpower == [worker.id]


def test_started_and_not_started_lists(store):
    service = ProjectService(store)
    idle = _create(service, "PJT-001")
    running = _create(service, "PJT-002", status="In Progress", progress=45)
    held = _create(service, "PJT-003", status="On Hold", progress=20)

    assert [project.id for project in service.list_started()] == [running.id]
    assert [project.id for project in service.list_not_started()] == [idle.id]
    assert held.id not in [project.id for project in service.list_not_started()]


def test_delete_leaves_dependents(store):
    service = ProjectService(store)
    project = _create(service)
    material = MaterialService(store).create_material(
        {"project": project.id, "name": "Cement", "quantity": "50 bags", "type": "Required"}, reported_by="u1"
    )
    service.delete_project(project.id)

    with pytest.raises(NotFoundException):
        service.get_project(project.id)
    assert MaterialService(store).get_material(material.id).project == project.id
    with pytest.raises(NotFoundException):
        service.delete_project(project.id)
