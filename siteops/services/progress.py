from typing import Any, Dict, List, Mapping, Optional

from siteops.core.exceptions import NotFoundException, PartialFailureException, ValidationException
from siteops.core.logging import get_logger
from siteops.models.progress import Progress
from siteops.models.project import Project
from siteops.rules.guard import reject_unknown_fields, strip_client_fields
from siteops.rules.progress import parse_report_status, project_progress, validate_percentage
from siteops.store.base import EntityStore

logger = get_logger("services.progress")

# A report stays attached to the project it was filed against
IMMUTABLE_FIELDS = ("project",)


class ProgressService:
    def __init__(self, store: EntityStore):
        self.store = store

    def _prepare(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        payload = strip_client_fields("Progress", data)
        reject_unknown_fields("Progress", payload, Progress.model_fields)
        if "work_completed" in payload:
            payload["work_completed"] = validate_percentage(payload["work_completed"])
        if "status" in payload:
            payload["status"] = parse_report_status(payload["status"]).value
        return payload

    def _project_onto(self, report: Progress, work_completed: int) -> Project:
        """
        Second write of the submission: copy the reading onto the project.

        The report is already committed at this point. A failure here is raised as
        PartialFailureException and the report is left as it is.
        """
        def mutate(project: Project) -> None:
            outcome = project_progress(project.status, work_completed)
            project.progress = outcome.progress
            project.status = outcome.status

        committed = {"Progress": report.id}
        try:
            project = self.store.update(Project, report.project, mutate)
        except Exception as exc:
            logger.error(f"Progress {report.id} saved but project {report.project} update failed: {exc}", exc_info=True)
            raise PartialFailureException(
                f"Progress report {report.id} was saved but project {report.project} could not be updated",
                committed=committed,
            ) from exc
        if project is None:
            logger.error(f"Progress {report.id} saved but project {report.project} no longer exists")
            raise PartialFailureException(
                f"Progress report {report.id} was saved but project {report.project} no longer exists",
                committed=committed,
            )
        logger.info(f"Project {project.id} now at {project.progress}% ({project.status})")
        return project

    def submit_progress(self, data: Mapping[str, Any], reported_by: str) -> Progress:
        """Append a progress report and project its reading onto the project."""
        logger.info(f"Progress report for project {data.get('project')} by {reported_by}")
        payload = self._prepare(data)
        for field in ("project", "work_completed", "status"):
            if payload.get(field) is None:
                raise ValidationException(f"{field} is required", field=field)
        self.store.require(Project, payload["project"])

        report = self.store.add(Progress(**payload, reported_by=reported_by))
        logger.info(f"Progress {report.id} created ({report.work_completed}%)")
        self._project_onto(report, report.work_completed)
        return report

    def amend_progress(self, progress_id: str, changes: Mapping[str, Any]) -> Progress:
        """Change a filed report; a new ``work_completed`` is projected like a new report."""
        logger.info(f"Amending progress {progress_id}: fields={sorted(changes)}")
        current = self.store.require(Progress, progress_id)
        payload = self._prepare(changes)
        for field in IMMUTABLE_FIELDS:
            if field in payload and payload.pop(field) != current.project:
                raise ValidationException("A report cannot be moved to another project", field=field)
        # An orphaned report can no longer be projected anywhere
        if "work_completed" in payload:
            self.store.require(Project, current.project)

        def mutate(report: Progress) -> None:
            for key, value in payload.items():
                setattr(report, key, value)

        report = self.store.update(Progress, progress_id, mutate)
        if report is None:
            raise NotFoundException("Progress", progress_id)
        if "work_completed" in payload:
            self._project_onto(report, report.work_completed)
        return report

    def get_progress(self, progress_id: str) -> Progress:
        return self.store.require(Progress, progress_id)

    def list_progress(self, project_id: Optional[str] = None) -> List[Progress]:
        """Reports newest first, optionally for one (existing) project."""
        if project_id is not None:
            self.store.require(Project, project_id)
            reports = self.store.find(Progress, project=project_id)
        else:
            reports = self.store.find(Progress)
        return sorted(reports, key=lambda report: report.created_at or "", reverse=True)
