"""
Progress projection: how a report's completion value lands on its project.

The most recent report always wins, even when it is lower than an earlier one.
A positive reading moves a Planning project to In Progress; nothing here ever
moves a project back to Planning or forward to Completed.
"""
from dataclasses import dataclass
from typing import Any

from siteops.core.enums import ProjectStatus, ReportStatus
from siteops.core.exceptions import ValidationException


@dataclass(frozen=True)
class ProjectProgress:
    progress: int
    status: str


def validate_percentage(value: Any, field: str = "work_completed") -> int:
    """Accept an integer 0-100 (integral floats included) and return it as int."""
    if isinstance(value, bool) or value is None:
        raise ValidationException(f"{field} must be an integer between 0 and 100", field=field, value=value)
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationException(f"{field} must be an integer between 0 and 100", field=field, value=value)
        value = int(value)
    if not isinstance(value, int) or not 0 <= value <= 100:
        raise ValidationException(f"{field} must be an integer between 0 and 100", field=field, value=value)
    return value


def parse_report_status(value: Any) -> ReportStatus:
    try:
        return ReportStatus(value)
    except ValueError:
        raise ValidationException(
            "Status must be Started or Not Started", field="status", value=value
        )


def parse_project_status(value: Any) -> ProjectStatus:
    try:
        return ProjectStatus(value)
    except ValueError:
        allowed = ", ".join(member.value for member in ProjectStatus)
        raise ValidationException(
            f"Invalid status '{value}'. Must be one of: {allowed}", field="status", value=value
        )


def project_progress(current_status: str, work_completed: Any) -> ProjectProgress:
    """Compute a project's progress and status after a report is projected onto it."""
    progress = validate_percentage(work_completed)
    status = current_status
    if progress > 0 and current_status == ProjectStatus.PLANNING.value:
        status = ProjectStatus.IN_PROGRESS.value
    return ProjectProgress(progress=progress, status=status)
