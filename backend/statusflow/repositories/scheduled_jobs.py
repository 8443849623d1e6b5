"""ScheduledJobStore: persisted time-triggered jobs with contention-safe claiming."""

from datetime import UTC, datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from statusflow.db.models.scheduled_job import ScheduledJob


class ScheduledJobStore:
    """Data access for ScheduledJob rows within the caller's transaction."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_due_jobs(self, now: datetime) -> list[ScheduledJob]:
        """Claim every visible job whose execution time has passed.

        Rows are locked FOR UPDATE SKIP LOCKED: concurrent claimants never
        block on, or receive, a row another transaction already holds.
        Locks are held until the caller's transaction ends.
        """
        result = await self.session.execute(
            select(ScheduledJob)
            .where(
                ScheduledJob.deleted_at.is_(None),
                ScheduledJob.execution_time <= now,
            )
            .order_by(ScheduledJob.execution_time, ScheduledJob.id)
            .with_for_update(skip_locked=True)
        )
        return list(result.scalars().all())

    async def remove(self, job: ScheduledJob, now: datetime | None = None) -> None:
        """Soft-delete a claimed job (marks it consumed)."""
        job.deleted_at = now or datetime.now(UTC)
        await self.session.flush()

    async def restore(self, job_id: int) -> bool:
        """Un-delete a consumed job so the next dispatcher pass claims it again.

        Returns:
            True if a soft-deleted job was restored
        """
        result = await self.session.execute(
            update(ScheduledJob)
            .where(ScheduledJob.id == job_id, ScheduledJob.deleted_at.is_not(None))
            .values(deleted_at=None)
        )
        return result.rowcount > 0
