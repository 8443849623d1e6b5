"""Status changes, audit trail and task rollup against PostgreSQL."""

from datetime import UTC, datetime

import pytest
from sqlalchemy import select

from statusflow.core.context import ActingUser
from statusflow.core.exceptions import TaskStatusInconsistentError
from statusflow.db.models import Action, AuditStatus, FormQuestion, Project, ProjectReport, Site, SiteReport, Task
from statusflow.queue.schemas import EMAIL_QUEUE
from statusflow.services.analytics import RedisAnalyticsSink
from statusflow.services.entity_status_update import EntityStatusUpdateProcessor
from statusflow.services.report_generation import ReportGenerationService
from statusflow.services.status_change import StatusChangeService
from statusflow.services.task_status import TaskStatusService

pytestmark = pytest.mark.integration

DUE_AT = datetime(2026, 4, 1, tzinfo=UTC)
REVIEWER = ActingUser(user_id=1, email_address="reviewer@example.org", first_name="Ada", last_name="Obi")


@pytest.fixture
def status_change(work_queue, redis_client):
    analytics = RedisAnalyticsSink(redis_client, "analytics:status-updates")
    return StatusChangeService(EntityStatusUpdateProcessor(work_queue, analytics))


async def _create_task(session_factory) -> tuple[int, int, int]:
    """Approved project with one live site; returns (task id, project report id, site report id)."""
    async with session_factory() as session:
        project = Project(name="Mangroves", framework_key="ppc", organisation_id=5, status="approved")
        session.add(project)
        await session.flush()
        session.add(Site(project_id=project.id, name="Delta", status="approved"))
        await session.flush()

        task = await ReportGenerationService().create_task(session, project, DUE_AT)
        await session.commit()

        project_report = (
            await session.execute(select(ProjectReport).where(ProjectReport.task_id == task.id))
        ).scalar_one()
        site_report = (await session.execute(select(SiteReport).where(SiteReport.task_id == task.id))).scalar_one()
        return task.id, project_report.id, site_report.id


async def _set_task_status(session_factory, task_id: int, status: str) -> None:
    async with session_factory() as session:
        task = await session.get(Task, task_id)
        task.status = status
        await session.commit()


async def _task_status(session_factory, task_id: int) -> str:
    async with session_factory() as session:
        return (await session.get(Task, task_id)).status


async def test_approving_every_report_approves_the_task(session_factory, status_change, work_queue, drain_queue):
    task_id, project_report_id, site_report_id = await _create_task(session_factory)
    await _set_task_status(session_factory, task_id, "awaiting-approval")

    async with session_factory() as session:
        for model, report_id in ((ProjectReport, project_report_id), (SiteReport, site_report_id)):
            report = await session.get(model, report_id)
            report.status = "awaiting-approval"
        await session.commit()

        site_report = await session.get(SiteReport, site_report_id)
        await status_change.change_status(session, site_report, "approved", acting_user=REVIEWER)
    assert await _task_status(session_factory, task_id) == "awaiting-approval"

    async with session_factory() as session:
        project_report = await session.get(ProjectReport, project_report_id)
        await status_change.change_status(session, project_report, "approved", feedback="Good", acting_user=REVIEWER)
    assert await _task_status(session_factory, task_id) == "approved"

    async with session_factory() as session:
        audits = (
            await session.execute(
                select(AuditStatus).where(AuditStatus.auditable_type == "projectReports").order_by(AuditStatus.id)
            )
        ).scalars().all()
    assert [audit.comment for audit in audits] == ["Approved: Good"]
    assert audits[0].created_by == "reviewer@example.org"

    emails = await drain_queue(EMAIL_QUEUE)
    assert [message.data for message in emails] == [
        {"type": "siteReports", "id": site_report_id},
        {"type": "projectReports", "id": project_report_id},
    ]


async def test_needs_more_information_flows_to_task_and_audit(session_factory, status_change):
    task_id, project_report_id, site_report_id = await _create_task(session_factory)
    await _set_task_status(session_factory, task_id, "awaiting-approval")

    async with session_factory() as session:
        session.add(FormQuestion(uuid="11111111-1111-1111-1111-111111111111", label="Trees planted"))
        project_report = await session.get(ProjectReport, project_report_id)
        project_report.status = "awaiting-approval"
        site_report = await session.get(SiteReport, site_report_id)
        site_report.status = "awaiting-approval"
        await session.commit()

        await status_change.change_status(
            session,
            site_report,
            "needs-more-information",
            feedback="Count is missing",
            feedback_fields=["11111111-1111-1111-1111-111111111111"],
            acting_user=REVIEWER,
        )

    assert await _task_status(session_factory, task_id) == "needs-more-information"

    async with session_factory() as session:
        audit = (
            await session.execute(select(AuditStatus).where(AuditStatus.auditable_id == site_report_id))
        ).scalar_one()
        actions = (
            await session.execute(
                select(Action).where(Action.targetable_type == "siteReports", Action.targetable_id == site_report_id)
            )
        ).scalars().all()

    assert audit.type == "change-request"
    assert audit.comment == (
        "Request More Information on the following fields: Trees planted. Feedback: Count is missing"
    )
    assert len(actions) == 1


async def test_inconsistent_task_rolls_back_the_change(session_factory, status_change):
    task_id, project_report_id, site_report_id = await _create_task(session_factory)
    await _set_task_status(session_factory, task_id, "awaiting-approval")

    async with session_factory() as session:
        site_report = await session.get(SiteReport, site_report_id)
        with pytest.raises(TaskStatusInconsistentError):
            # The project report is still due
            await status_change.change_status(session, site_report, "approved")

    async with session_factory() as session:
        assert (await session.get(SiteReport, site_report_id)).status == "due"
    assert await _task_status(session_factory, task_id) == "awaiting-approval"


async def test_reconcile_repairs_due_tasks(session_factory):
    task_id, project_report_id, site_report_id = await _create_task(session_factory)
    untouched_id, _, _ = await _create_task(session_factory)

    async with session_factory() as session:
        (await session.get(ProjectReport, project_report_id)).status = "approved"
        (await session.get(SiteReport, site_report_id)).status = "approved"
        await session.commit()

    async with session_factory() as session:
        counts = await TaskStatusService().reconcile_due_tasks(session, batch_size=1)
        await session.commit()

    assert counts["approved"] == 1
    assert await _task_status(session_factory, task_id) == "approved"
    assert await _task_status(session_factory, untouched_id) == "due"
