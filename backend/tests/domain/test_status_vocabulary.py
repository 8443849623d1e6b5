"""Tests for the lifecycle status vocabulary."""

import pytest

from statusflow.domain.status import (
    ENTITY_STATUSES,
    REPORT_STATUSES,
    TASK_ROLLUP_TRIGGER_STATUSES,
    UNSUBMITTED_STATUSES,
    Status,
    display_status,
    is_valid_status,
)

pytestmark = pytest.mark.unit


def test_status_values_are_wire_strings():
    assert Status.DUE == "due"
    assert Status.AWAITING_APPROVAL == "awaiting-approval"
    assert Status.NEEDS_MORE_INFORMATION == "needs-more-information"


def test_entities_can_never_be_due():
    assert Status.DUE not in ENTITY_STATUSES
    assert Status.STARTED in ENTITY_STATUSES


def test_reports_accept_every_status():
    assert REPORT_STATUSES == frozenset(Status)


def test_unsubmitted_statuses():
    assert UNSUBMITTED_STATUSES == {"due", "started"}


def test_rollup_triggers_exclude_unsubmitted():
    assert TASK_ROLLUP_TRIGGER_STATUSES.isdisjoint(UNSUBMITTED_STATUSES)


@pytest.mark.parametrize("value", ["due", "approved", Status.STARTED])
def test_is_valid_status_accepts_known_values(value):
    assert is_valid_status(value) is True


@pytest.mark.parametrize("value", ["rejected", "", None, 3, "Approved"])
def test_is_valid_status_rejects_unknown_values(value):
    assert is_valid_status(value) is False


def test_is_valid_status_honours_allowed_set():
    assert is_valid_status("due", ENTITY_STATUSES) is False


def test_display_status():
    assert display_status("needs-more-information") == "Needs More Information"
    assert display_status("awaiting-approval") == "Awaiting Approval"
    assert display_status("unknown") == "unknown"
