"""Tests for task status rollup: priority order, idempotence and inconsistent tasks."""

from types import SimpleNamespace

import pytest

from statusflow.core.exceptions import TaskStatusInconsistentError
from statusflow.domain.rollup import derive_task_status, needs_more_information, rollup_task_status
from statusflow.domain.status import Status

pytestmark = pytest.mark.unit


def _report(status: str, update_request_status: str | None = None) -> SimpleNamespace:
    return SimpleNamespace(status=status, update_request_status=update_request_status)


# ---------------------------------------------------------------------------
# needs_more_information
# ---------------------------------------------------------------------------


def test_needs_more_information_on_report_status():
    assert needs_more_information(_report("needs-more-information")) is True


def test_resubmitted_update_request_clears_needs_more_information():
    report = _report("needs-more-information", update_request_status="awaiting-approval")
    assert needs_more_information(report) is False


def test_update_request_needing_more_information_counts():
    report = _report("approved", update_request_status="needs-more-information")
    assert needs_more_information(report) is True


def test_awaiting_approval_does_not_need_more_information():
    assert needs_more_information(_report("awaiting-approval")) is False


# ---------------------------------------------------------------------------
# derive_task_status
# ---------------------------------------------------------------------------


def test_all_approved_gives_approved():
    reports = [_report("approved"), _report("approved"), _report("approved")]
    assert derive_task_status(1, reports) == Status.APPROVED


def test_approved_with_awaiting_gives_awaiting_approval():
    reports = [_report("approved"), _report("awaiting-approval")]
    assert derive_task_status(1, reports) == Status.AWAITING_APPROVAL


def test_needs_more_information_beats_awaiting_approval():
    reports = [_report("awaiting-approval"), _report("needs-more-information"), _report("approved")]
    assert derive_task_status(1, reports) == Status.NEEDS_MORE_INFORMATION


def test_all_approved_wins_over_pending_update_request():
    reports = [_report("approved"), _report("approved", update_request_status="needs-more-information")]
    assert derive_task_status(1, reports) == Status.APPROVED


def test_update_request_needing_info_beats_awaiting_approval():
    reports = [_report("approved"), _report("awaiting-approval", update_request_status="needs-more-information")]
    assert derive_task_status(1, reports) == Status.NEEDS_MORE_INFORMATION


@pytest.mark.parametrize("unsubmitted", ["due", "started"])
def test_unsubmitted_report_raises(unsubmitted):
    reports = [_report("approved"), _report(unsubmitted)]

    with pytest.raises(TaskStatusInconsistentError) as exc_info:
        derive_task_status(42, reports)

    assert exc_info.value.task_id == 42
    assert unsubmitted in exc_info.value.report_statuses
    assert "42" in str(exc_info.value)


def test_unsubmitted_report_returns_none_when_not_strict():
    reports = [_report("approved"), _report("due")]
    assert derive_task_status(1, reports, strict=False) is None


def test_unsubmitted_checked_before_needs_more_information():
    reports = [_report("needs-more-information"), _report("started")]

    with pytest.raises(TaskStatusInconsistentError):
        derive_task_status(1, reports)


def test_missing_reports_are_ignored():
    reports = [_report("approved"), None, _report("approved")]
    assert derive_task_status(1, reports) == Status.APPROVED


def test_empty_task_is_awaiting_approval():
    assert derive_task_status(1, []) == Status.AWAITING_APPROVAL


def test_derivation_is_idempotent():
    reports = [_report("needs-more-information"), _report("awaiting-approval")]
    first = derive_task_status(1, reports)
    second = derive_task_status(1, reports)
    assert first == second == Status.NEEDS_MORE_INFORMATION


def test_order_of_reports_does_not_matter():
    reports = [_report("awaiting-approval"), _report("approved"), _report("needs-more-information")]
    assert derive_task_status(1, reports) == derive_task_status(1, list(reversed(reports)))


# ---------------------------------------------------------------------------
# rollup_task_status
# ---------------------------------------------------------------------------


def test_due_task_is_never_rolled_up():
    reports = [_report("approved"), _report("due")]
    assert rollup_task_status(1, "due", reports) is None


def test_submitted_task_is_rolled_up():
    reports = [_report("approved"), _report("approved")]
    assert rollup_task_status(1, "awaiting-approval", reports) == Status.APPROVED


def test_submitted_task_with_due_report_raises():
    with pytest.raises(TaskStatusInconsistentError):
        rollup_task_status(1, "needs-more-information", [_report("due")])
