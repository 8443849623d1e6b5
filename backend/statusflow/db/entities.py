"""Explicit type-to-model lookup for polymorphic references.

Action.targetable_type and AuditStatus.auditable_type store the type name;
this module maps names to models and walks entities up to their project.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from statusflow.core.exceptions import UnknownEntityTypeError
from statusflow.db.models import (
    FinancialReport,
    Nursery,
    NurseryReport,
    Project,
    ProjectReport,
    Site,
    SiteReport,
)
from statusflow.domain.entities import FINANCIAL_REPORTS, EntityType

ENTITY_MODELS: dict[EntityType, type] = {
    EntityType.PROJECTS: Project,
    EntityType.SITES: Site,
    EntityType.NURSERIES: Nursery,
    EntityType.PROJECT_REPORTS: ProjectReport,
    EntityType.SITE_REPORTS: SiteReport,
    EntityType.NURSERY_REPORTS: NurseryReport,
}

POLYMORPHIC_MODELS: dict[str, type] = {
    **{entity_type.value: model for entity_type, model in ENTITY_MODELS.items()},
    FINANCIAL_REPORTS: FinancialReport,
}

_TYPE_NAMES: dict[type, str] = {model: name for name, model in POLYMORPHIC_MODELS.items()}


def entity_type_of(model: object) -> EntityType | None:
    """Resolve a model instance to its trackable entity type, or None."""
    name = _TYPE_NAMES.get(type(model))
    if name is None or name == FINANCIAL_REPORTS:
        return None
    return EntityType(name)


def polymorphic_type(model: object) -> str | None:
    """Type name stored in polymorphic reference columns, or None if unregistered."""
    return _TYPE_NAMES.get(type(model))


async def resolve_targetable(session: AsyncSession, type_name: str, target_id: int):
    """Load the entity referenced by a (type name, id) pair.

    Raises:
        UnknownEntityTypeError: type_name has no registered model
    """
    model = POLYMORPHIC_MODELS.get(type_name)
    if model is None:
        raise UnknownEntityTypeError(type_name)
    return await session.get(model, target_id)


async def get_project_id(session: AsyncSession, entity: object) -> int | None:
    """Return the id of the project that owns the entity."""
    if isinstance(entity, Project):
        return entity.id
    if isinstance(entity, (Site, Nursery, ProjectReport)):
        return entity.project_id
    if isinstance(entity, SiteReport):
        result = await session.execute(select(Site.project_id).where(Site.id == entity.site_id))
        return result.scalar_one_or_none()
    if isinstance(entity, NurseryReport):
        result = await session.execute(select(Nursery.project_id).where(Nursery.id == entity.nursery_id))
        return result.scalar_one_or_none()
    return None


async def get_organisation_id(session: AsyncSession, entity: object) -> int | None:
    """Return the id of the organisation that owns the entity."""
    if isinstance(entity, (Project, FinancialReport)):
        return entity.organisation_id
    project_id = await get_project_id(session, entity)
    if project_id is None:
        return None
    result = await session.execute(select(Project.organisation_id).where(Project.id == project_id))
    return result.scalar_one_or_none()
