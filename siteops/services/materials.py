from typing import Any, Dict, List, Mapping, Optional

from siteops.core.enums import MaterialType, Priority
from siteops.core.exceptions import NotFoundException, ValidationException
from siteops.core.logging import get_logger
from siteops.models.material import Material
from siteops.models.project import Project
from siteops.rules.guard import reject_unknown_fields, strip_client_fields
from siteops.rules.materials import LIFECYCLE_FIELDS, reconcile_material_fields
from siteops.store.base import EntityStore

logger = get_logger("services.materials")

PRIORITY_RANK = {Priority.HIGH.value: 0, Priority.MEDIUM.value: 1, Priority.LOW.value: 2}


class MaterialService:
    def __init__(self, store: EntityStore):
        self.store = store

    def _prepare(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        payload = strip_client_fields("Material", data)
        reject_unknown_fields("Material", payload, Material.model_fields)
        for field in ("name", "quantity"):
            if field in payload:
                value = (payload[field] or "").strip()
                if not value:
                    raise ValidationException(f"Material {field} is required", field=field, value=payload[field])
                payload[field] = value
        if "project" in payload:
            if not payload["project"]:
                raise ValidationException("Material project is required", field="project", value=payload["project"])
            self.store.require(Project, payload["project"])
        return payload

    def create_material(self, data: Mapping[str, Any], reported_by: Optional[str] = None) -> Material:
        logger.info(f"Creating material {data.get('name')} for project {data.get('project')}")
        payload = self._prepare(data)
        for field in ("project", "name", "quantity"):
            if not payload.get(field):
                raise ValidationException(f"Material {field} is required", field=field)
        payload.update(reconcile_material_fields({}, payload))

        material = self.store.add(Material(**payload, reported_by=reported_by))
        logger.info(f"Material {material.id} created ({material.type}, {material.status})")
        return material

    def update_material(self, material_id: str, changes: Mapping[str, Any]) -> Material:
        """Apply a partial update and re-run the lifecycle policy over the merged record."""
        logger.info(f"Updating material {material_id}: fields={sorted(changes)}")
        self.store.require(Material, material_id)
        payload = self._prepare(changes)

        def mutate(material: Material) -> None:
            current = {field: getattr(material, field) for field in LIFECYCLE_FIELDS}
            fields = {**payload, **reconcile_material_fields(current, payload)}
            for key, value in fields.items():
                setattr(material, key, value)

        material = self.store.update(Material, material_id, mutate)
        if material is None:
            raise NotFoundException("Material", material_id)
        logger.info(f"Material {material.id} updated ({material.type}, {material.status})")
        return material

    def get_material(self, material_id: str) -> Material:
        return self.store.require(Material, material_id)

    def list_materials(self, type: Optional[str] = None, project: Optional[str] = None) -> List[Material]:
        """Materials newest first, optionally filtered by type and project."""
        filters = {}
        if type:
            filters["type"] = type
        if project:
            filters["project"] = project
        materials = self.store.find(Material, **filters)
        return sorted(materials, key=lambda material: material.created_at or "", reverse=True)

    def list_available(self) -> List[Material]:
        return self.list_materials(type=MaterialType.AVAILABLE.value)

    def list_required(self) -> List[Material]:
        """Required materials, most urgent priority first."""
        materials = self.list_materials(type=MaterialType.REQUIRED.value)
        return sorted(materials, key=lambda material: PRIORITY_RANK.get(material.priority, len(PRIORITY_RANK)))

    def delete_material(self, material_id: str) -> None:
        if not self.store.delete(Material, material_id):
            raise NotFoundException("Material", material_id)
        logger.info(f"Material {material_id} deleted")
