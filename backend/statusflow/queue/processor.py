"""ScheduledJobsProcessor: executes messages from the scheduled-jobs queue."""

from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from statusflow.core.config import get_settings
from statusflow.queue.schemas import (
    EMAIL_QUEUE,
    EmailJobType,
    ProjectReminderEmail,
    QueueMessage,
    ReminderDefinition,
    ScheduledJobMessage,
    ScheduledJobType,
    TaskDueDefinition,
)
from statusflow.queue.work_queue import WorkQueue
from statusflow.repositories.projects import (
    find_project_ids_with_sites_or_nurseries,
    find_task_due_projects,
)
from statusflow.repositories.scheduled_jobs import ScheduledJobStore
from statusflow.services.report_generation import ReportGenerationService

logger = structlog.get_logger(__name__)


class ScheduledJobsProcessor:
    """Consumer for dispatched scheduled jobs.

    A recognized job that fails is restored in the ScheduledJob store so the
    next dispatcher pass claims it again. Retries are unbounded.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        work_queue: WorkQueue,
        report_generation: ReportGenerationService | None = None,
        reminder_framework_key: str | None = None,
        batch_size: int | None = None,
    ):
        settings = get_settings()
        self.session_factory = session_factory
        self.work_queue = work_queue
        self.report_generation = report_generation or ReportGenerationService()
        self.reminder_framework_key = reminder_framework_key or settings.report_reminder_framework_key
        self.batch_size = batch_size or settings.task_due_batch_size

    async def process(self, message: QueueMessage) -> None:
        """Execute one queue message, restoring the scheduled job on failure."""
        handlers = {
            ScheduledJobType.TASK_DUE: self._process_task_due,
            ScheduledJobType.REPORT_REMINDER: self._process_report_reminder,
            ScheduledJobType.SITE_AND_NURSERY_REMINDER: self._process_site_and_nursery_reminder,
        }
        handler = handlers.get(message.name)
        if handler is None:
            logger.error("scheduled_job_message_unrecognized", name=message.name, data=message.data)
            return

        job = ScheduledJobMessage.model_validate(message.data)
        try:
            await handler(job.task_definition)
            logger.info("scheduled_job_processed", job_id=job.id, job_type=message.name)
        except Exception as exc:
            logger.error(
                "scheduled_job_processing_failed",
                job_id=job.id,
                job_type=message.name,
                error=str(exc),
                error_type=type(exc).__name__,
                exc_info=True,
            )
            # TODO: cap retries once a restore counter exists on ScheduledJob
            await self._restore(job.id)

    async def _restore(self, job_id: int) -> None:
        async with self.session_factory() as session:
            restored = await ScheduledJobStore(session).restore(job_id)
            await session.commit()
        logger.info("scheduled_job_restored", job_id=job_id, restored=restored)

    async def _process_task_due(self, task_definition: dict) -> None:
        definition = TaskDueDefinition.model_validate(task_definition)
        created = await self._create_tasks(definition.framework_key, definition.due_at)
        logger.info(
            "task_due_processed",
            framework_key=definition.framework_key,
            due_at=definition.due_at.isoformat(),
            tasks_created=created,
        )

    async def _create_tasks(self, framework_key: str, due_at: datetime) -> int:
        created = 0
        async with self.session_factory() as session:
            offset = 0
            while True:
                projects = await find_task_due_projects(session, framework_key, self.batch_size, offset)
                if not projects:
                    break

                for project in projects:
                    # Committed per project: a later failure keeps earlier tasks
                    task = await self.report_generation.create_task(session, project, due_at)
                    await session.commit()
                    if task is not None:
                        created += 1

                offset += self.batch_size
        return created

    async def _process_report_reminder(self, task_definition: dict) -> None:
        definition = ReminderDefinition.model_validate(task_definition)
        if definition.framework_key != self.reminder_framework_key:
            logger.warning("report_reminder_framework_ignored", framework_key=definition.framework_key)
            return

        await self._send_reminder(definition.framework_key, EmailJobType.TERRAFUND_REPORT_REMINDER)

    async def _process_site_and_nursery_reminder(self, task_definition: dict) -> None:
        definition = ReminderDefinition.model_validate(task_definition)
        if definition.framework_key != self.reminder_framework_key:
            logger.warning("site_and_nursery_reminder_framework_ignored", framework_key=definition.framework_key)
            return

        await self._send_reminder(definition.framework_key, EmailJobType.TERRAFUND_SITE_AND_NURSERY_REMINDER)

    async def _send_reminder(self, framework_key: str, email_type: EmailJobType) -> None:
        async with self.session_factory() as session:
            project_ids = await find_project_ids_with_sites_or_nurseries(session, framework_key)

        payload = ProjectReminderEmail(project_ids=project_ids).model_dump(by_alias=True)
        await self.work_queue.enqueue(EMAIL_QUEUE, email_type.value, payload)
        logger.info("reminder_email_enqueued", email_type=email_type.value, project_count=len(project_ids))
