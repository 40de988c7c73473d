import pytest

from siteops.core.exceptions import (
    NotFoundException,
    PartialFailureException,
    ValidationException,
)
from siteops.models.project import Project
from siteops.rules.progress import ProjectProgress, project_progress, validate_percentage
from siteops.services.progress import ProgressService
from siteops.services.projects import ProjectService
from siteops.store.memory import MemoryStore


@pytest.mark.parametrize("status, work_completed, expected", [
    ("Planning", 0, ProjectProgress(0, "Planning")),
    ("Planning", 40, ProjectProgress(40, "In Progress")),
    ("In Progress", 100, ProjectProgress(100, "In Progress")),
    ("On Hold", 50, ProjectProgress(50, "On Hold")),
    ("Completed", 30, ProjectProgress(30, "Completed")),
])
def test_project_progress(status, work_completed, expected):
    assert project_progress(status, work_completed) == expected


@pytest.mark.parametrize("value", [-1, 101, 50.5, True, None, "50"])
def test_invalid_percentage_is_rejected(value):
    with pytest.raises(ValidationException):
        validate_percentage(value)


def test_integral_float_percentage_is_accepted():
    assert validate_percentage(50.0) == 50


def _project(store, project_id="PJT-001"):
    return ProjectService(store).create_project(
        {"project_id": project_id, "name": "Tower A", "location": "Pune"}, created_by="admin"
    )


def test_report_projects_onto_project(store):
    project = _project(store)
    service = ProgressService(store)

    service.submit_progress({"project": project.id, "work_completed": 40, "status": "Started"}, reported_by="u1")

    project = store.get(Project, project.id)
    assert project.progress == 40
    assert project.status == "In Progress"


def test_latest_report_wins_even_when_lower(store):
    project = _project(store)
    service = ProgressService(store)

    service.submit_progress({"project": project.id, "work_completed": 60, "status": "Started"}, reported_by="u1")
    service.submit_progress({"project": project.id, "work_completed": 20, "status": "Started"}, reported_by="u2")

    project = store.get(Project, project.id)
    assert project.progress == 20
    assert project.status == "In Progress"
    assert len(service.list_progress(project.id)) == 2


def test_zero_does_not_start_and_hundred_does_not_complete(store):
    project = _project(store)
    service = ProgressService(store)

    service.submit_progress({"project": project.id, "work_completed": 0, "status": "Not Started"}, reported_by="u1")
    assert store.get(Project, project.id).status == "Planning"

    service.submit_progress({"project": project.id, "work_completed": 100, "status": "Started"}, reported_by="u1")
    project = store.get(Project, project.id)
    assert project.progress == 100
    assert project.status == "In Progress"


def test_report_for_missing_project_writes_nothing(store):
    service = ProgressService(store)
    with pytest.raises(NotFoundException):
        service.submit_progress({"project": "missing", "work_completed": 10, "status": "Started"}, reported_by="u1")
    assert service.list_progress() == []


def test_report_requires_status(store):
    project = _project(store)
    with pytest.raises(ValidationException) as exc_info:
        ProgressService(store).submit_progress({"project": project.id, "work_completed": 10}, reported_by="u1")
    assert exc_info.value.field == "status"


class ProjectWriteFailingStore(MemoryStore):
    def update(self, model, entity_id, mutate):
        if model is Project:
            raise RuntimeError("project write refused")
        return super().update(model, entity_id, mutate)


def test_failed_project_write_reports_partial_failure():
    store = ProjectWriteFailingStore()
    project = _project(store)
    service = ProgressService(store)

    with pytest.raises(PartialFailureException) as exc_info:
        service.submit_progress({"project": project.id, "work_completed": 30, "status": "Started"}, reported_by="u1")

    reports = service.list_progress(project.id)
    assert len(reports) == 1
    assert exc_info.value.committed == {"Progress": reports[0].id}
    assert exc_info.value.status_code == 500
    # No compensation: the project keeps its old reading
    assert store.get(Project, project.id).progress == 0


def test_amendment_with_work_completed_is_projected(store):
    project = _project(store)
    service = ProgressService(store)
    report = service.submit_progress({"project": project.id, "work_completed": 40, "status": "Started"}, reported_by="u1")

    ProjectService(store).update_project(project.id, {"progress": 10})
    service.amend_progress(report.id, {"notes": "Slab cured"})
    assert store.get(Project, project.id).progress == 10

    amended = service.amend_progress(report.id, {"work_completed": 70})
    assert amended.work_completed == 70
    assert amended.notes == "Slab cured"
    assert store.get(Project, project.id).progress == 70


def test_report_cannot_move_to_another_project(store):
    project = _project(store)
    other = _project(store, "PJT-002")
    service = ProgressService(store)
    report = service.submit_progress({"project": project.id, "work_completed": 5, "status": "Started"}, reported_by="u1")

    with pytest.raises(ValidationException):
        service.amend_progress(report.id, {"project": other.id})
    # Repeating the current project is allowed
    service.amend_progress(report.id, {"project": project.id, "notes": "ok"})


def test_orphaned_report_cannot_be_reprojected(store):
    project = _project(store)
    service = ProgressService(store)
    report = service.submit_progress({"project": project.id, "work_completed": 5, "status": "Started"}, reported_by="u1")
    ProjectService(store).delete_project(project.id)

    # The report survives the project
    assert service.get_progress(report.id).project == project.id
    with pytest.raises(NotFoundException):
        service.amend_progress(report.id, {"work_completed": 50})
    with pytest.raises(NotFoundException):
        service.list_progress(project.id)
