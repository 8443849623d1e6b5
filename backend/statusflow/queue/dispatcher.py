"""Dispatcher for scheduled jobs whose execution time has passed.

Every pass claims due ScheduledJob rows under FOR UPDATE SKIP LOCKED, soft-deletes
them and pushes them onto the scheduled-jobs work queue, all inside one
transaction. Several service instances can run the timer against the same
database; row locks keep them from claiming the same job.
"""

import asyncio
from datetime import UTC, datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from statusflow.db.models.scheduled_job import ScheduledJob
from statusflow.queue.schemas import SCHEDULED_JOBS_QUEUE, ScheduledJobMessage, ScheduledJobType
from statusflow.queue.work_queue import WorkQueue
from statusflow.repositories.scheduled_jobs import ScheduledJobStore

logger = structlog.get_logger(__name__)


class ScheduledJobDispatcher:
    """Moves due scheduled jobs from the database onto the work queue."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], work_queue: WorkQueue):
        self.session_factory = session_factory
        self.work_queue = work_queue

    async def process_scheduled_jobs(self, now: datetime | None = None) -> int:
        """Run one dispatch pass.

        All-or-nothing: if any removal or enqueue raises, the transaction rolls
        back (no job is removed) and the error propagates. Messages already
        enqueued before the failure stay on the queue, so consumers must
        tolerate duplicates.

        Args:
            now: Injectable current time for testing

        Returns:
            Number of jobs enqueued
        """
        if now is None:
            now = datetime.now(UTC)

        async with self.session_factory() as session:
            async with session.begin():
                store = ScheduledJobStore(session)
                jobs = await store.find_due_jobs(now)

                if not jobs:
                    logger.debug("no_scheduled_jobs_due")
                    return 0

                enqueued = 0
                for job in jobs:
                    if await self._process_job(store, job, now):
                        enqueued += 1

        logger.info("scheduled_jobs_dispatched", enqueued=enqueued, claimed=len(jobs))
        return enqueued

    async def _process_job(self, store: ScheduledJobStore, job: ScheduledJob, now: datetime) -> bool:
        await store.remove(job, now)

        try:
            job_type = ScheduledJobType(job.type)
        except ValueError:
            # Dropped: consumed from the store but never queued
            logger.error(
                "scheduled_job_type_unrecognized",
                job_id=job.id,
                job_type=job.type,
                task_definition=job.task_definition,
            )
            return False

        message = ScheduledJobMessage(id=job.id, task_definition=job.task_definition or {})
        await self.work_queue.enqueue(SCHEDULED_JOBS_QUEUE, job_type.value, message.model_dump(by_alias=True))
        logger.info("scheduled_job_enqueued", job_id=job.id, job_type=job_type.value)
        return True


class DispatcherTimer:
    """Fixed-interval loop that triggers dispatch passes.

    Usage:
        timer = DispatcherTimer(dispatcher, interval_seconds=300)
        task = asyncio.create_task(timer.run())
        ...
        timer.stop()
        await task

    A failed pass is logged and retried on the next tick.
    """

    def __init__(self, dispatcher: ScheduledJobDispatcher, interval_seconds: float) -> None:
        self.dispatcher = dispatcher
        self.interval_seconds = interval_seconds
        self.stop_event = asyncio.Event()

    async def run(self) -> None:
        logger.info("dispatcher_timer_started", interval_seconds=self.interval_seconds)

        while not self.stop_event.is_set():
            await self.tick()

            try:
                await asyncio.wait_for(self.stop_event.wait(), timeout=self.interval_seconds)
            except TimeoutError:
                pass

        logger.info("dispatcher_timer_stopped")

    async def tick(self) -> None:
        try:
            await self.dispatcher.process_scheduled_jobs()
        except Exception as exc:
            logger.error(
                "scheduled_jobs_pass_failed",
                error=str(exc),
                error_type=type(exc).__name__,
                exc_info=True,
            )

    def stop(self) -> None:
        self.stop_event.set()
