"""Test StatusChangeService: validate, process and commit in one step."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from statusflow.core.context import ActingUser
from statusflow.core.exceptions import InvalidStatusError, TaskStatusInconsistentError
from statusflow.db.models import Project, SiteReport
from statusflow.services.status_change import StatusChangeService, create_status_change_service

pytestmark = pytest.mark.unit


@pytest.fixture
def status_update():
    return MagicMock(handle=AsyncMock())


@pytest.fixture
def session():
    mock_session = AsyncMock()
    mock_session.commit = AsyncMock()
    mock_session.rollback = AsyncMock()
    return mock_session


async def test_change_status_processes_and_commits(status_update, session):
    report = SiteReport(id=1, task_id=2, site_id=3, status="needs-more-information")
    user = ActingUser(user_id=9, email_address="pm@example.org")

    await StatusChangeService(status_update).change_status(
        session,
        report,
        "needs-more-information",
        feedback="Missing photos",
        feedback_fields=["q-1"],
        acting_user=user,
    )

    assert report.feedback == "Missing photos"
    assert report.feedback_fields == ["q-1"]
    status_update.handle.assert_awaited_once_with(session, report, user)
    session.commit.assert_awaited_once()
    session.rollback.assert_not_awaited()


async def test_submission_stamps_submitted_at(status_update, session):
    report = SiteReport(id=1, task_id=2, site_id=3, status="started")

    await StatusChangeService(status_update).change_status(session, report, "awaiting-approval")

    assert report.status == "awaiting-approval"
    assert report.submitted_at is not None


async def test_resubmission_keeps_first_submitted_at(status_update, session):
    first = datetime(2026, 1, 1, tzinfo=UTC)
    report = SiteReport(id=1, task_id=2, site_id=3, status="needs-more-information", submitted_at=first)

    await StatusChangeService(status_update).change_status(session, report, "awaiting-approval")

    assert report.submitted_at == first


async def test_entity_without_submitted_at(status_update, session):
    project = Project(id=1, name="Mangroves", status="started")

    await StatusChangeService(status_update).change_status(session, project, "awaiting-approval")

    assert project.status == "awaiting-approval"
    session.commit.assert_awaited_once()


async def test_invalid_status_is_rejected_before_processing(status_update, session):
    project = Project(id=1, status="started")

    with pytest.raises(InvalidStatusError):
        await StatusChangeService(status_update).change_status(session, project, "due")

    status_update.handle.assert_not_awaited()
    session.commit.assert_not_awaited()


async def test_processing_error_rolls_back(status_update, session):
    status_update.handle = AsyncMock(side_effect=TaskStatusInconsistentError(2, ["due"]))
    report = SiteReport(id=1, task_id=2, site_id=3, status="awaiting-approval")

    with pytest.raises(TaskStatusInconsistentError):
        await StatusChangeService(status_update).change_status(session, report, "approved")

    session.rollback.assert_awaited_once()
    session.commit.assert_not_awaited()


async def test_create_status_change_service_uses_redis(redis_client):
    service = create_status_change_service(redis_client)

    processor = service.status_update
    assert processor.work_queue.redis is redis_client
    assert processor.analytics.redis is redis_client
    assert processor.analytics.channel == "analytics:status-updates"


async def test_acting_user_resolved_from_user_id(status_update, session):
    report = SiteReport(id=1, task_id=2, site_id=3, status="awaiting-approval")
    user = ActingUser(user_id=9, email_address="pm@example.org", first_name="Ada", last_name="Obi")

    with patch(
        "statusflow.services.status_change.get_acting_user", AsyncMock(return_value=user)
    ) as mock_lookup:
        await StatusChangeService(status_update).change_status(session, report, "approved", acting_user_id=9)

    mock_lookup.assert_awaited_once_with(session, 9)
    status_update.handle.assert_awaited_once_with(session, report, user)


async def test_no_user_lookup_for_system_change(status_update, session):
    report = SiteReport(id=1, task_id=2, site_id=3, status="awaiting-approval")

    with patch("statusflow.services.status_change.get_acting_user", AsyncMock()) as mock_lookup:
        await StatusChangeService(status_update).change_status(session, report, "approved")

    mock_lookup.assert_not_awaited()
    status_update.handle.assert_awaited_once_with(session, report, None)
