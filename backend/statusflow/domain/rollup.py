"""Task status rollup.

Pure domain functions deriving a task's aggregate status from its child
reports. No DB access, fully deterministic.
"""

from collections.abc import Iterable
from typing import Protocol

from statusflow.core.exceptions import TaskStatusInconsistentError
from statusflow.domain.status import UNSUBMITTED_STATUSES, Status


class ReportStatusLike(Protocol):
    status: str
    update_request_status: str | None


def needs_more_information(report: ReportStatusLike) -> bool:
    """True if the report itself, or its pending update request, needs more information.

    A report in needs-more-information whose update request has since been
    resubmitted (awaiting approval) no longer counts.
    """
    return (
        report.status == Status.NEEDS_MORE_INFORMATION
        and report.update_request_status != Status.AWAITING_APPROVAL
    ) or report.update_request_status == Status.NEEDS_MORE_INFORMATION


def derive_task_status(
    task_id: int,
    reports: Iterable[ReportStatusLike | None],
    strict: bool = True,
) -> Status | None:
    """Derive the aggregate status of a submitted task.

    Checks run in priority order: all approved, unsubmitted report,
    needs more information, awaiting approval.

    Args:
        task_id: Task identifier (for error reporting)
        reports: Child reports; None entries (missing associations) are ignored
        strict: Raise on unsubmitted reports. When False, return None instead.

    Returns:
        The derived Status, or None when not strict and a report is unsubmitted

    Raises:
        TaskStatusInconsistentError: strict and a report is still due/started
    """
    present = [report for report in reports if report is not None]
    statuses = list(dict.fromkeys(report.status for report in present))

    if statuses == [Status.APPROVED]:
        return Status.APPROVED

    if any(status in UNSUBMITTED_STATUSES for status in statuses):
        if strict:
            raise TaskStatusInconsistentError(task_id, statuses)
        return None

    if any(needs_more_information(report) for report in present):
        return Status.NEEDS_MORE_INFORMATION

    return Status.AWAITING_APPROVAL


def rollup_task_status(
    task_id: int,
    task_status: str,
    reports: Iterable[ReportStatusLike | None],
) -> Status | None:
    """Compute the new status for a task after one of its reports changed.

    Returns None for a DUE task: nothing has been submitted yet.
    """
    if task_status == Status.DUE:
        return None
    return derive_task_status(task_id, reports, strict=True)
