"""ReportGenerationService: creates the Task and reports for a reporting period."""

from datetime import datetime

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from statusflow.db.models import Action, Nursery, NurseryReport, Project, ProjectReport, Site, SiteReport, Task
from statusflow.db.models.action import ACTION_STATUS_PENDING, ACTION_TYPE_NOTIFICATION
from statusflow.domain.entities import EntityType
from statusflow.domain.status import Status

logger = structlog.get_logger(__name__)


def reports_available_text(has_site: bool, has_nursery: bool) -> str:
    """Notification text, e.g. "Project, site reports available"."""
    labels = ["Project"]
    if has_site:
        labels.append("site")
    if has_nursery:
        labels.append("nursery")
    noun = "reports" if len(labels) > 1 else "report"
    return f"{', '.join(labels)} {noun} available"


class ReportGenerationService:
    async def create_task(self, session: AsyncSession, project: Project, due_at: datetime) -> Task | None:
        """Create a due Task for the project with all of its reports.

        Idempotent per (project, due_at): returns None without writing if the
        task already exists. Draft (started) sites and nurseries get no report.
        The caller commits.
        """
        existing = await session.execute(
            select(Task.id)
            .where(Task.project_id == project.id, Task.due_at == due_at, Task.deleted_at.is_(None))
            .limit(1)
        )
        if existing.scalar_one_or_none() is not None:
            logger.warning("task_already_exists", project_id=project.id, due_at=due_at.isoformat())
            return None

        task = Task(
            project_id=project.id,
            organisation_id=project.organisation_id,
            status=Status.DUE.value,
            due_at=due_at,
        )
        session.add(task)
        await session.flush()

        project_report = ProjectReport(
            task_id=task.id,
            project_id=project.id,
            framework_key=project.framework_key,
            status=Status.DUE.value,
            due_at=due_at,
        )
        session.add(project_report)

        sites = await self._non_draft(session, Site, project.id)
        for site in sites:
            session.add(
                SiteReport(
                    task_id=task.id,
                    site_id=site.id,
                    framework_key=project.framework_key,
                    status=Status.DUE.value,
                    due_at=due_at,
                )
            )

        nurseries = await self._non_draft(session, Nursery, project.id)
        for nursery in nurseries:
            session.add(
                NurseryReport(
                    task_id=task.id,
                    nursery_id=nursery.id,
                    framework_key=project.framework_key,
                    status=Status.DUE.value,
                    due_at=due_at,
                )
            )

        await session.flush()

        session.add(
            Action(
                status=ACTION_STATUS_PENDING,
                type=ACTION_TYPE_NOTIFICATION,
                targetable_type=EntityType.PROJECT_REPORTS.value,
                targetable_id=project_report.id,
                title="Project report",
                sub_title="",
                text=reports_available_text(bool(sites), bool(nurseries)),
                project_id=project.id,
                organisation_id=project.organisation_id,
            )
        )
        await session.flush()

        logger.info(
            "task_created",
            task_id=task.id,
            project_id=project.id,
            due_at=due_at.isoformat(),
            site_reports=len(sites),
            nursery_reports=len(nurseries),
        )
        return task

    async def _non_draft(self, session: AsyncSession, model: type, project_id: int) -> list:
        result = await session.execute(
            select(model)
            .where(
                model.project_id == project_id,
                model.status != Status.STARTED.value,
                model.deleted_at.is_(None),
            )
            .order_by(model.id)
        )
        return list(result.scalars().all())
