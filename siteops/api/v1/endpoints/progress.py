"""
Progress Endpoints Module

Progress reports are appended by field users. Each report's ``work_completed``
becomes the project's progress; see siteops.rules.progress.
"""
from fastapi import APIRouter, Depends, HTTPException, status

from siteops.api import deps
from siteops.api.responses import listing, serialize, success
from siteops.models.user import User
from siteops.schemas.progress import ProgressCreate, ProgressUpdate
from siteops.services.progress import ProgressService
from siteops.store.base import EntityStore

router = APIRouter()


@router.get("")
def list_progress(
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_user),
):
    return listing(ProgressService(store).list_progress())


@router.get("/project/{project_id}")
def list_project_progress(
    project_id: str,
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_user),
):
    """Reports for one project, newest first. 404 if the project is gone."""
    return listing(ProgressService(store).list_progress(project_id=project_id))


@router.get("/{progress_id}")
def read_progress(
    progress_id: str,
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_user),
):
    return success(serialize(ProgressService(store).get_progress(progress_id)))


@router.post("", status_code=status.HTTP_201_CREATED)
def submit_progress(
    progress_in: ProgressCreate,
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_user),
):
    """
    File a progress report and update the project's progress.

    The report is saved before the project. If the project update fails the
    response is a 500 PARTIAL_FAILURE whose details name the saved report.
    """
    report = ProgressService(store).submit_progress(
        progress_in.model_dump(exclude_unset=True, mode="json"), reported_by=current_user.id
    )
    return success(serialize(report), message="Progress submitted successfully")


@router.put("/{progress_id}")
def amend_progress(
    progress_id: str,
    progress_in: ProgressUpdate,
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_user),
):
    """
    Amend a report. Only the reporter or an administrator may do so.
    """
    service = ProgressService(store)
    report = service.get_progress(progress_id)
    if report.reported_by != current_user.id and not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized")

    report = service.amend_progress(progress_id, progress_in.model_dump(exclude_unset=True, mode="json"))
    return success(serialize(report), message="Progress updated successfully")
