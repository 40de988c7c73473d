import uuid
from typing import Any, Dict, Iterable, List, Mapping, Optional

from siteops.core.enums import ProjectStatus
from siteops.core.exceptions import NotFoundException, ValidationException
from siteops.core.logging import get_logger
from siteops.models.manpower import Manpower
from siteops.models.project import Project
from siteops.rules.finance import validate_amount
from siteops.rules.guard import reject_unknown_fields, strip_client_fields
from siteops.rules.identifiers import ensure_unique, normalize_project_id
from siteops.rules.progress import parse_project_status, validate_percentage
from siteops.services.manpower import ManpowerService
from siteops.store.base import EntityStore

logger = get_logger("services.projects")

DEFAULT_MILESTONE_ICON = "checkmark-circle"


def build_timeline(entries: Optional[Iterable[Mapping[str, Any]]]) -> List[Dict[str, Any]]:
    """
    Normalize a full timeline array.

    Every entry gets a fresh id; ids sent by the client are ignored because the
    timeline is always replaced as a whole.
    """
    timeline = []
    for position, entry in enumerate(entries or []):
        title = (entry.get("title") or "").strip()
        if not title:
            raise ValidationException("Timeline title is required", field=f"timeline.{position}.title")
        if not entry.get("date"):
            raise ValidationException("Timeline date is required", field=f"timeline.{position}.date")
        timeline.append({
            "id": str(uuid.uuid4()),
            "title": title,
            "description": entry.get("description") or "",
            "date": entry["date"],
            "icon": entry.get("icon") or DEFAULT_MILESTONE_ICON,
        })
    return timeline


class ProjectService:
    def __init__(self, store: EntityStore):
        self.store = store

    def _check_project_id(self, value: Any, own_id: Optional[str] = None) -> str:
        project_id = normalize_project_id(value)
        holders = [project.id for project in self.store.find(Project, project_id=project_id)]
        ensure_unique("Project", "project_id", project_id, holders, own_id=own_id)
        return project_id

    def _prepare(self, data: Mapping[str, Any], own_id: Optional[str] = None) -> Dict[str, Any]:
        """Validate and normalize the writable project fields present in ``data``."""
        payload = strip_client_fields("Project", data)
        reject_unknown_fields("Project", payload, Project.model_fields)

        for field in ("name", "location"):
            if field in payload:
                value = (payload[field] or "").strip()
                if not value:
                    raise ValidationException(f"Project {field} is required", field=field, value=payload[field])
                payload[field] = value
        if "project_id" in payload:
            payload["project_id"] = self._check_project_id(payload["project_id"], own_id=own_id)
        if payload.get("status") is not None:
            payload["status"] = parse_project_status(payload["status"]).value
        if "progress" in payload:
            payload["progress"] = validate_percentage(payload["progress"], field="progress")
        if payload.get("budget") is not None:
            payload["budget"] = validate_amount(payload["budget"], "budget")
        if "timeline" in payload:
            payload["timeline"] = build_timeline(payload["timeline"])
        if "assigned_manpower" in payload:
            members = list(dict.fromkeys(payload["assigned_manpower"] or []))
            for manpower_id in members:
                self.store.require(Manpower, manpower_id)
            payload["assigned_manpower"] = members
        return payload

    def _settle_crew(self, project_id: str, current: List[str], members: List[str]) -> Project:
        """
        Assign added members to the project and release removed ones.

        Workers go through ManpowerService so their availability and their
        previous crew follow the move. The crew order sent by the client wins.
        """
        workers = ManpowerService(self.store)
        for manpower_id in members:
            if manpower_id not in current:
                workers.update_manpower(manpower_id, {"assigned_project": project_id})
        for manpower_id in current:
            if manpower_id in members:
                continue
            worker = self.store.get(Manpower, manpower_id)
            if worker is not None and worker.assigned_project == project_id:
                workers.update_manpower(manpower_id, {"assigned_project": None})

        def mutate(project: Project) -> None:
            project.assigned_manpower = list(members)

        project = self.store.update(Project, project_id, mutate)
        if project is None:
            raise NotFoundException("Project", project_id)
        logger.info(f"Project {project_id} crew set to {len(members)} worker(s)")
        return project

    def create_project(self, data: Mapping[str, Any], created_by: Optional[str] = None) -> Project:
        logger.info(f"Creating project: {data.get('project_id')} ({data.get('name')})")
        if "project_id" not in data:
            raise ValidationException("Project ID is required", field="project_id")
        payload = self._prepare(data)
        for field in ("name", "location"):
            if field not in payload:
                raise ValidationException(f"Project {field} is required", field=field)
        if payload.get("status") is None:
            payload.pop("status", None)
        members = payload.pop("assigned_manpower", None)

        project = self.store.add(Project(**payload, created_by=created_by))
        logger.info(f"Project {project.id} created with project_id {project.project_id}")
        if members:
            project = self._settle_crew(project.id, [], members)
        return project

    def get_project(self, project_id: str) -> Project:
        return self.store.require(Project, project_id)

    def list_projects(self) -> List[Project]:
        """All projects, newest first."""
        return sorted(self.store.find(Project), key=lambda project: project.created_at or "", reverse=True)

    def list_started(self) -> List[Project]:
        """Active projects that have reported some progress, most recently touched first."""
        active = (ProjectStatus.IN_PROGRESS.value, ProjectStatus.PLANNING.value)
        projects = [
            project for project in self.store.find(Project)
            if project.status in active and project.progress > 0
        ]
        return sorted(projects, key=lambda project: project.updated_at or "", reverse=True)

    def list_not_started(self) -> List[Project]:
        projects = [
            project for project in self.store.find(Project)
            if project.status == ProjectStatus.PLANNING.value or project.progress == 0
        ]
        return sorted(projects, key=lambda project: project.created_at or "", reverse=True)

    def update_project(self, project_id: str, changes: Mapping[str, Any]) -> Project:
        """
        Apply direct field updates.

        ``progress`` is written as given without touching ``status``; only a
        progress report moves a project out of Planning. ``timeline`` replaces
        the stored timeline wholesale, and a new ``assigned_manpower`` assigns and
        releases workers through the availability rule.
        """
        logger.info(f"Updating project {project_id}: fields={sorted(changes)}")
        current = self.store.require(Project, project_id)
        payload = self._prepare(changes, own_id=project_id)
        for field in ("project_id", "name", "location", "status", "progress"):
            if field in payload and payload[field] is None:
                raise ValidationException(f"Project {field} cannot be cleared", field=field)
        members = payload.pop("assigned_manpower", None)

        def mutate(project: Project) -> None:
            for key, value in payload.items():
                setattr(project, key, value)

        project = self.store.update(Project, project_id, mutate)
        if project is None:
            raise NotFoundException("Project", project_id)
        logger.info(f"Project {project.id} updated")
        if members is not None:
            project = self._settle_crew(project_id, list(current.assigned_manpower or []), members)
        return project

    def delete_project(self, project_id: str) -> None:
        # Progress, material and finance records keep pointing at the deleted id
        if not self.store.delete(Project, project_id):
            raise NotFoundException("Project", project_id)
        logger.info(f"Project {project_id} deleted; dependent records left in place")
