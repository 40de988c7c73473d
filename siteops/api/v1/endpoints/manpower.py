"""
Manpower Endpoints Module

The worker roster. Availability is never written by clients: it follows from
``assigned_project`` on every write.
"""
from fastapi import APIRouter, Depends, status

from siteops.api import deps
from siteops.api.responses import listing, serialize, success
from siteops.models.user import User
from siteops.schemas.manpower import AssignRequest, ManpowerCreate, ManpowerUpdate
from siteops.services.manpower import ManpowerService
from siteops.store.base import EntityStore

router = APIRouter()


@router.get("")
def list_manpower(
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_user),
):
    return listing(ManpowerService(store).list_manpower())


@router.get("/available")
def list_available_manpower(
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_user),
):
    """Available workers sorted by role, with a ``grouped`` map of role to workers."""
    workers, grouped = ManpowerService(store).list_available()
    return listing(
        workers,
        grouped={role: [serialize(worker) for worker in members] for role, members in grouped.items()},
    )


@router.get("/{manpower_id}")
def read_manpower(
    manpower_id: str,
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_user),
):
    return success(serialize(ManpowerService(store).get_manpower(manpower_id)))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_manpower(
    manpower_in: ManpowerCreate,
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_admin),
):
    worker = ManpowerService(store).create_manpower(
        manpower_in.model_dump(exclude_unset=True, mode="json"), created_by=current_user.id
    )
    return success(serialize(worker), message="Manpower created successfully")


@router.put("/{manpower_id}")
def update_manpower(
    manpower_id: str,
    manpower_in: ManpowerUpdate,
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_admin),
):
    """
    Update a worker.

    Sending ``assigned_project`` as null or "" releases the worker; leaving it
    out keeps the current assignment.
    """
    worker = ManpowerService(store).update_manpower(
        manpower_id, manpower_in.model_dump(exclude_unset=True, mode="json")
    )
    return success(serialize(worker), message="Manpower updated successfully")


@router.post("/{manpower_id}/assign")
def assign_manpower(
    manpower_id: str,
    assignment: AssignRequest,
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_admin),
):
    worker = ManpowerService(store).assign(manpower_id, assignment.project_id)
    return success(serialize(worker), message="Manpower assigned")


@router.post("/{manpower_id}/unassign")
def unassign_manpower(
    manpower_id: str,
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_admin),
):
    worker = ManpowerService(store).unassign(manpower_id)
    return success(serialize(worker), message="Manpower unassigned")


@router.delete("/{manpower_id}")
def delete_manpower(
    manpower_id: str,
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_admin),
):
    ManpowerService(store).delete_manpower(manpower_id)
    return success(message="Manpower deleted")
