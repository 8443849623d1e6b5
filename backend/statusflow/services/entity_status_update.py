"""EntityStatusUpdateProcessor: side effects of a single status change.

Called explicitly by the code that changes a status (see StatusChangeService),
never from ORM hooks. Steps, in order:
1. Publish an analytics event
2. For trackable entities: queue the status update email and replace the
   entity's pending notification Action
3. Append an AuditStatus for auditable types
4. For reports entering a reviewed status: roll the status up to the Task
"""

import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from statusflow.core.context import ActingUser
from statusflow.db.entities import (
    entity_type_of,
    get_organisation_id,
    get_project_id,
    polymorphic_type,
)
from statusflow.db.models.action import ACTION_STATUS_PENDING, ACTION_TYPE_NOTIFICATION, Action
from statusflow.db.models.audit_status import AUDIT_TYPE_CHANGE_REQUEST, AuditStatus
from statusflow.db.models.form_question import FormQuestion
from statusflow.domain.entities import AUDITABLE_TYPES, EntityType, is_report
from statusflow.domain.status import TASK_ROLLUP_TRIGGER_STATUSES, Status, display_status
from statusflow.queue.schemas import EMAIL_QUEUE, EmailJobType, StatusUpdateEmail
from statusflow.queue.work_queue import WorkQueue
from statusflow.services.analytics import AnalyticsSink
from statusflow.services.task_status import TaskStatusService

logger = structlog.get_logger(__name__)


class EntityStatusUpdateProcessor:
    """Fans a status change out to notifications, audit log and task rollup."""

    def __init__(
        self,
        work_queue: WorkQueue,
        analytics: AnalyticsSink,
        task_status: TaskStatusService | None = None,
    ):
        self.work_queue = work_queue
        self.analytics = analytics
        self.task_status = task_status or TaskStatusService()

    async def handle(self, session: AsyncSession, model, acting_user: ActingUser | None = None) -> None:
        """Process a model whose status has just changed.

        Writes happen in the caller's session; the caller commits.

        Args:
            session: Session the model belongs to
            model: Entity, report or other auditable model with a new status
            acting_user: User who made the change, None if system-triggered

        Raises:
            TaskStatusInconsistentError: a report's task has unsubmitted siblings
        """
        type_name = polymorphic_type(model) or type(model).__name__
        log = logger.bind(model=type_name, id=getattr(model, "id", None), status=model.status)
        log.info("entity_status_update_received")

        uuid = getattr(model, "uuid", None)
        await self.analytics.status_updated(str(uuid) if uuid is not None else None, type_name, model.status)

        entity_type = entity_type_of(model)
        if entity_type is not None:
            await self._send_status_update_email(entity_type, model)
            await self._update_actions(session, entity_type, model)
        else:
            log.info("entity_status_update_not_trackable")

        await self._create_audit_status(session, model, acting_user)

        if is_report(entity_type) and model.status in TASK_ROLLUP_TRIGGER_STATUSES:
            await self.task_status.check_task_status(session, model)

        await session.flush()

    async def _send_status_update_email(self, entity_type: EntityType, model) -> None:
        payload = StatusUpdateEmail(type=entity_type.value, id=model.id)
        await self.work_queue.enqueue(EMAIL_QUEUE, EmailJobType.STATUS_UPDATE.value, payload.model_dump())
        logger.info("status_update_email_enqueued", type=entity_type.value, id=model.id)

    async def _update_actions(self, session: AsyncSession, entity_type: EntityType, model) -> None:
        await session.execute(
            delete(Action).where(
                Action.targetable_type == entity_type.value,
                Action.targetable_id == model.id,
                Action.type == ACTION_TYPE_NOTIFICATION,
                Action.status == ACTION_STATUS_PENDING,
            )
        )

        # Submissions awaiting review are the reviewer's to act on
        if model.status == Status.AWAITING_APPROVAL:
            return

        action = Action(
            status=ACTION_STATUS_PENDING,
            type=ACTION_TYPE_NOTIFICATION,
            targetable_type=entity_type.value,
            targetable_id=model.id,
            project_id=await get_project_id(session, model),
            organisation_id=await get_organisation_id(session, model),
        )
        if not is_report(entity_type):
            action.title = getattr(model, "name", None) or ""
            action.text = display_status(model.status)

        session.add(action)

    async def _create_audit_status(
        self,
        session: AsyncSession,
        model,
        acting_user: ActingUser | None,
    ) -> AuditStatus | None:
        type_name = polymorphic_type(model)
        if type_name not in AUDITABLE_TYPES:
            logger.debug("audit_status_not_auditable", model=type(model).__name__)
            return None

        audit_type = None
        comment = None
        if model.status == Status.APPROVED:
            comment = f"Approved: {model.feedback or ''}"
        elif model.status == Status.NEEDS_MORE_INFORMATION:
            audit_type = AUDIT_TYPE_CHANGE_REQUEST
            comment = await self._needs_more_info_comment(session, model)
        elif model.status == Status.AWAITING_APPROVAL:
            pass
        else:
            # Entities are created as started; anything else is unexpected here
            if model.status != Status.STARTED:
                logger.warning("audit_status_skipped", model=type_name, id=model.id, status=model.status)
            return None

        audit_status = AuditStatus(
            auditable_type=type_name,
            auditable_id=model.id,
            status=model.status,
            type=audit_type,
            comment=comment,
            created_by=acting_user.email_address if acting_user else None,
            first_name=acting_user.first_name if acting_user else None,
            last_name=acting_user.last_name if acting_user else None,
        )
        session.add(audit_status)
        return audit_status

    async def _needs_more_info_comment(self, session: AsyncSession, model) -> str:
        feedback_fields = list(model.feedback_fields or [])
        labels: list[str] = []
        if feedback_fields:
            result = await session.execute(
                select(FormQuestion.uuid, FormQuestion.label).where(FormQuestion.uuid.in_(feedback_fields))
            )
            label_by_uuid = {question_uuid: label for question_uuid, label in result.all()}
            labels = [label_by_uuid[field] for field in feedback_fields if field in label_by_uuid]

        feedback = model.feedback or "(No feedback)"
        return f"Request More Information on the following fields: {', '.join(labels)}. Feedback: {feedback}"
