"""
Material Endpoints Module

Any authenticated user can file, change or remove material entries. Status and
priority are normalized to the legal values for the material's type.
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query, status

from siteops.api import deps
from siteops.api.responses import listing, serialize, success
from siteops.models.user import User
from siteops.schemas.material import MaterialCreate, MaterialUpdate
from siteops.services.materials import MaterialService
from siteops.store.base import EntityStore

router = APIRouter()


@router.get("")
def list_materials(
    type: Optional[str] = Query(None, description="Filter by type (Available or Required)"),
    project: Optional[str] = Query(None, description="Filter by project id"),
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_user),
):
    return listing(MaterialService(store).list_materials(type=type, project=project))


@router.get("/available")
def list_available_materials(
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_user),
):
    return listing(MaterialService(store).list_available())


@router.get("/required")
def list_required_materials(
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_user),
):
    """Required materials, High priority first."""
    return listing(MaterialService(store).list_required())


@router.get("/{material_id}")
def read_material(
    material_id: str,
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_user),
):
    return success(serialize(MaterialService(store).get_material(material_id)))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_material(
    material_in: MaterialCreate,
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_user),
):
    material = MaterialService(store).create_material(
        material_in.model_dump(exclude_unset=True, mode="json"), reported_by=current_user.id
    )
    return success(serialize(material), message="Material created successfully")


@router.put("/{material_id}")
def update_material(
    material_id: str,
    material_in: MaterialUpdate,
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_user),
):
    material = MaterialService(store).update_material(
        material_id, material_in.model_dump(exclude_unset=True, mode="json")
    )
    return success(serialize(material), message="Material updated successfully")


@router.delete("/{material_id}")
def delete_material(
    material_id: str,
    store: EntityStore = Depends(deps.get_store),
    current_user: User = Depends(deps.get_current_user),
):
    MaterialService(store).delete_material(material_id)
    return success(message="Material deleted")
