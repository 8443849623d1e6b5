"""Project queries used by the scheduled job processor and bulk approval."""

import uuid

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from statusflow.db.models import Nursery, Project, Site
from statusflow.domain.status import Status


def _has_site():
    return select(Site.id).where(Site.project_id == Project.id, Site.deleted_at.is_(None)).exists()


def _has_nursery():
    return select(Nursery.id).where(Nursery.project_id == Project.id, Nursery.deleted_at.is_(None)).exists()


async def find_project_by_uuid(session: AsyncSession, project_uuid: uuid.UUID) -> Project | None:
    result = await session.execute(
        select(Project).where(Project.uuid == project_uuid, Project.deleted_at.is_(None))
    )
    return result.scalar_one_or_none()


async def find_task_due_projects(
    session: AsyncSession,
    framework_key: str,
    limit: int,
    offset: int = 0,
) -> list[Project]:
    """Approved projects in the framework, one page at a time, ordered by id."""
    result = await session.execute(
        select(Project)
        .where(
            Project.framework_key == framework_key,
            Project.status == Status.APPROVED.value,
            Project.deleted_at.is_(None),
        )
        .order_by(Project.id)
        .limit(limit)
        .offset(offset)
    )
    return list(result.scalars().all())


async def find_project_ids_with_sites_or_nurseries(session: AsyncSession, framework_key: str) -> list[int]:
    """Ids of projects in the framework with at least one site or nursery."""
    result = await session.execute(
        select(Project.id)
        .where(
            Project.framework_key == framework_key,
            Project.deleted_at.is_(None),
            or_(_has_site(), _has_nursery()),
        )
        .order_by(Project.id)
    )
    return list(result.scalars().all())
