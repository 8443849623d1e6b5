"""StatusChangeService: the single entry point for changing a status."""

from datetime import UTC, datetime

import structlog
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from statusflow.core.config import get_settings
from statusflow.core.context import ActingUser
from statusflow.db.redis import get_redis
from statusflow.domain.status import Status
from statusflow.queue.work_queue import WorkQueue
from statusflow.repositories.users import get_acting_user
from statusflow.services.analytics import RedisAnalyticsSink
from statusflow.services.entity_status_update import EntityStatusUpdateProcessor

logger = structlog.get_logger(__name__)


class StatusChangeService:
    """Applies a status change and runs its side effects in one transaction."""

    def __init__(self, status_update: EntityStatusUpdateProcessor):
        self.status_update = status_update

    async def change_status(
        self,
        session: AsyncSession,
        model,
        status: str,
        feedback: str | None = None,
        feedback_fields: list[str] | None = None,
        acting_user: ActingUser | None = None,
        acting_user_id: int | None = None,
    ) -> None:
        """Set a new status on model, process the change and commit.

        The acting user is taken as given, or looked up from acting_user_id;
        neither means a system-triggered change.

        Raises:
            InvalidStatusError: status is not allowed for the model
            TaskStatusInconsistentError: rollup found unsubmitted sibling reports
        """
        model.status = status
        if feedback is not None:
            model.feedback = feedback
        if feedback_fields is not None:
            model.feedback_fields = feedback_fields
        if status == Status.AWAITING_APPROVAL and hasattr(model, "submitted_at") and model.submitted_at is None:
            model.submitted_at = datetime.now(UTC)

        try:
            if acting_user is None and acting_user_id is not None:
                acting_user = await get_acting_user(session, acting_user_id)
            await self.status_update.handle(session, model, acting_user)
            await session.commit()
        except Exception:
            await session.rollback()
            raise

        logger.info(
            "status_changed",
            model=type(model).__name__,
            id=model.id,
            status=status,
            user_id=acting_user.user_id if acting_user else None,
        )


def create_status_change_service(redis: Redis | None = None) -> StatusChangeService:
    """Wire a StatusChangeService onto the shared Redis pool (email queue + analytics channel)."""
    redis = redis or get_redis()
    analytics = RedisAnalyticsSink(redis, get_settings().analytics_channel)
    return StatusChangeService(EntityStatusUpdateProcessor(WorkQueue(redis), analytics))
