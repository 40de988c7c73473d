from collections import defaultdict
from typing import Any, Dict, List, Mapping, Optional, Tuple

from siteops.core.exceptions import NotFoundException, ValidationException
from siteops.core.logging import get_logger
from siteops.models.manpower import Manpower
from siteops.models.project import Project
from siteops.rules.availability import apply_availability, requested_project
from siteops.rules.guard import reject_unknown_fields, strip_client_fields
from siteops.rules.identifiers import ensure_unique, normalize_employee_id
from siteops.store.base import EntityStore

logger = get_logger("services.manpower")


class ManpowerService:
    def __init__(self, store: EntityStore):
        self.store = store

    def _check_employee_id(self, value: Any, own_id: Optional[str] = None) -> str:
        employee_id = normalize_employee_id(value)
        holders = [worker.id for worker in self.store.find(Manpower, employee_id=employee_id)]
        ensure_unique("Manpower", "employee_id", employee_id, holders, own_id=own_id)
        return employee_id

    def _check_project(self, payload: Mapping[str, Any]) -> None:
        """The project a payload assigns to must exist before the rule runs."""
        project_id = requested_project(payload)
        if project_id is not None:
            self.store.require(Project, project_id)

    def _move_between_crews(self, manpower_id: str, previous: Optional[str], current: Optional[str]) -> None:
        """
        Mirror a worker's assignment onto ``Project.assigned_manpower``.

        Each crew list is its own document write; a project deleted in the
        meantime is skipped.
        """
        if previous == current:
            return

        def leave(project: Project) -> None:
            project.assigned_manpower = [member for member in project.assigned_manpower or [] if member != manpower_id]

        def join(project: Project) -> None:
            crew = list(project.assigned_manpower or [])
            if manpower_id not in crew:
                project.assigned_manpower = crew + [manpower_id]

        if previous:
            self.store.update(Project, previous, leave)
        if current:
            self.store.update(Project, current, join)
        logger.info(f"Manpower {manpower_id} moved from crew {previous} to crew {current}")

    @staticmethod
    def _prepare(data: Mapping[str, Any]) -> Dict[str, Any]:
        payload = strip_client_fields("Manpower", data)
        reject_unknown_fields("Manpower", payload, Manpower.model_fields)
        for field in ("name", "role"):
            if field in payload:
                value = payload[field].strip() if isinstance(payload[field], str) else payload[field]
                if not value:
                    raise ValidationException(f"{field.capitalize()} is required", field=field, value=payload[field])
                payload[field] = value
        if payload.get("email"):
            payload["email"] = payload["email"].lower()
        return payload

    def create_manpower(self, data: Mapping[str, Any], created_by: Optional[str] = None) -> Manpower:
        """Create a worker; a worker without an assignment starts out available."""
        logger.info(f"Creating manpower: {data.get('employee_id')}")
        payload = self._prepare(data)
        for field in ("name", "role"):
            if field not in payload:
                raise ValidationException(f"{field.capitalize()} is required", field=field)
        payload["employee_id"] = self._check_employee_id(payload.get("employee_id"))
        self._check_project(payload)

        fields = apply_availability(payload)
        worker = self.store.add(Manpower(**fields, created_by=created_by))
        logger.info(f"Manpower {worker.id} created (employee_id={worker.employee_id}, available={worker.is_available})")
        self._move_between_crews(worker.id, None, worker.assigned_project)
        return worker

    def get_manpower(self, manpower_id: str) -> Manpower:
        return self.store.require(Manpower, manpower_id)

    def list_manpower(self) -> List[Manpower]:
        """All workers, newest first."""
        return sorted(self.store.find(Manpower), key=lambda worker: worker.created_at or "", reverse=True)

    def list_available(self) -> Tuple[List[Manpower], Dict[str, List[Manpower]]]:
        """Available workers sorted by role, plus the same workers grouped by role."""
        workers = sorted(self.store.find(Manpower, is_available=True), key=lambda worker: worker.role)
        grouped: Dict[str, List[Manpower]] = defaultdict(list)
        for worker in workers:
            grouped[worker.role].append(worker)
        return workers, dict(grouped)

    def list_for_project(self, project_id: str) -> List[Manpower]:
        self.store.require(Project, project_id)
        return self.store.find(Manpower, assigned_project=project_id)

    def update_manpower(self, manpower_id: str, changes: Mapping[str, Any]) -> Manpower:
        """
        Apply a partial update.

        The availability flag is recomputed inside the store's atomic update from
        the record version being overwritten, so whichever concurrent write wins
        leaves the record consistent.
        """
        logger.info(f"Updating manpower {manpower_id}: fields={sorted(changes)}")
        self.store.require(Manpower, manpower_id)
        payload = self._prepare(changes)
        if "employee_id" in payload:
            payload["employee_id"] = self._check_employee_id(payload["employee_id"], own_id=manpower_id)
        self._check_project(payload)
        previous = {}

        def mutate(worker: Manpower) -> None:
            previous["project"] = worker.assigned_project
            for key, value in apply_availability(payload, worker.assigned_project).items():
                setattr(worker, key, value)

        worker = self.store.update(Manpower, manpower_id, mutate)
        if worker is None:
            raise NotFoundException("Manpower", manpower_id)
        logger.info(f"Manpower {worker.id} updated (assigned_project={worker.assigned_project}, available={worker.is_available})")
        self._move_between_crews(worker.id, previous["project"], worker.assigned_project)
        return worker

    def assign(self, manpower_id: str, project_id: Optional[str]) -> Manpower:
        if not project_id or not str(project_id).strip():
            raise ValidationException("Project is required for assignment", field="assigned_project", value=project_id)
        return self.update_manpower(manpower_id, {"assigned_project": project_id})

    def unassign(self, manpower_id: str) -> Manpower:
        return self.update_manpower(manpower_id, {"assigned_project": None})

    def delete_manpower(self, manpower_id: str) -> None:
        worker = self.store.require(Manpower, manpower_id)
        if not self.store.delete(Manpower, manpower_id):
            raise NotFoundException("Manpower", manpower_id)
        logger.info(f"Manpower {manpower_id} deleted")
        self._move_between_crews(manpower_id, worker.assigned_project, None)
