"""TaskStatusService: keeps a Task's status consistent with its reports."""

import structlog
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from statusflow.db.models.task import Task
from statusflow.domain.rollup import derive_task_status, rollup_task_status
from statusflow.domain.status import Status

logger = structlog.get_logger(__name__)

_REPORT_OPTIONS = (
    selectinload(Task.project_report),
    selectinload(Task.site_reports),
    selectinload(Task.nursery_reports),
)


class TaskStatusService:
    """Task status rollup, reactive per report and as a batch repair."""

    async def check_task_status(self, session: AsyncSession, report) -> Status | None:
        """Recompute the status of the task that owns a report.

        Runs inside the caller's transaction; the task row is updated but not
        committed.

        Returns:
            The task's new status, or None when nothing was rolled up

        Raises:
            TaskStatusInconsistentError: the task is not due but a report is unsubmitted
        """
        task_id = getattr(report, "task_id", None)
        if task_id is None:
            logger.warning(
                "task_status_check_skipped_no_task",
                model=type(report).__name__,
                id=getattr(report, "id", None),
            )
            return None

        result = await session.execute(
            select(Task).where(Task.id == task_id, Task.deleted_at.is_(None)).options(*_REPORT_OPTIONS)
        )
        task = result.scalar_one_or_none()
        if task is None:
            logger.error("task_status_check_task_not_found", task_id=task_id, report_id=report.id)
            return None

        new_status = rollup_task_status(task.id, task.status, task.active_reports)
        if new_status is None:
            logger.debug("task_status_check_task_due", task_id=task.id)
            return None

        if task.status != new_status:
            logger.info("task_status_updated", task_id=task.id, from_status=task.status, to_status=new_status.value)
            task.status = new_status.value
        return new_status

    async def reconcile_due_tasks(self, session: AsyncSession, batch_size: int = 100) -> dict[str, int]:
        """Repair tasks left DUE although their reports have moved on.

        Tasks with a report still due or started are left alone. Updates are
        applied in bulk after the scan so the status filter does not shift
        the pages underneath it. The caller commits.

        Returns:
            Count of tasks moved into each status
        """
        moved: dict[Status, list[int]] = {
            Status.APPROVED: [],
            Status.NEEDS_MORE_INFORMATION: [],
            Status.AWAITING_APPROVAL: [],
        }

        last_id = 0
        while True:
            result = await session.execute(
                select(Task)
                .where(Task.status == Status.DUE.value, Task.deleted_at.is_(None), Task.id > last_id)
                .order_by(Task.id)
                .limit(batch_size)
                .options(*_REPORT_OPTIONS)
            )
            tasks = list(result.scalars().all())
            if not tasks:
                break

            for task in tasks:
                new_status = derive_task_status(task.id, task.active_reports, strict=False)
                if new_status is not None:
                    moved[new_status].append(task.id)

            last_id = tasks[-1].id

        for status, task_ids in moved.items():
            if task_ids:
                await session.execute(
                    update(Task)
                    .where(Task.id.in_(task_ids))
                    .values(status=status.value)
                    .execution_options(synchronize_session=False)
                )

        counts = {status.value: len(task_ids) for status, task_ids in moved.items()}
        logger.info("due_tasks_reconciled", **counts)
        return counts
