"""
Project Endpoints Module

Projects are created, changed and deleted by administrators; every authenticated
user can read them. A project's progress normally moves through progress
reports; a direct ``progress`` update here sets the value as given.
"""
from fastapi import APIRouter, Depends, status

from siteops.api import deps
from siteops.api.responses import listing, serialize, success
from siteops.models.user import User
from siteops.schemas.project import ProjectCreate, ProjectUpdate
from siteops.services.manpower import ManpowerService
from siteops.services.projects import ProjectService
from siteops.store.base import EntityStore

router = APIRouter()


@router.get("")
def list_projects(
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_user),
):
    return listing(ProjectService(store).list_projects())


@router.get("/status/started")
def list_started_projects(
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_user),
):
    """Active projects with reported progress, most recently updated first."""
    return listing(ProjectService(store).list_started())


@router.get("/status/not-started")
def list_not_started_projects(
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_user),
):
    return listing(ProjectService(store).list_not_started())


@router.get("/{project_id}")
def read_project(
    project_id: str,
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_user),
):
    """
    Get a specific project by ID.

    Raises:
        404: If the project doesn't exist
    """
    return success(serialize(ProjectService(store).get_project(project_id)))


@router.get("/{project_id}/manpower")
def list_project_manpower(
    project_id: str,
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_user),
):
    return listing(ManpowerService(store).list_for_project(project_id))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_project(
    project_in: ProjectCreate,
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_admin),
):
    """
    Create a new project.

    ``project_id`` is upper-cased and must look like ``ABC-123``; a code already
    in use is rejected with 409.
    """
    project = ProjectService(store).create_project(
        project_in.model_dump(exclude_unset=True, mode="json"), created_by=current_user.id
    )
    return success(serialize(project), message="Project created successfully")


@router.put("/{project_id}")
def update_project(
    project_id: str,
    project_in: ProjectUpdate,
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_admin),
):
    """
    Update an existing project.

    Only the fields sent are changed. A ``timeline`` replaces the stored one and
    every entry gets a new id.
    """
    project = ProjectService(store).update_project(
        project_id, project_in.model_dump(exclude_unset=True, mode="json")
    )
    return success(serialize(project), message="Project updated successfully")


@router.delete("/{project_id}")
def delete_project(
    project_id: str,
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_admin),
):
    """
    Delete a project.

    Progress reports, materials and finance records of the project are kept.
    """
    ProjectService(store).delete_project(project_id)
    return success(message="Project deleted")
