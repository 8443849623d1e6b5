"""Lifecycle status vocabulary shared by entities, reports and tasks.

Pure data: no DB access. The persistence layer checks assignments against
these sets and the workflow services branch on them.
"""

from enum import StrEnum


class Status(StrEnum):
    """Lifecycle states for trackable entities, reports and tasks."""

    DUE = "due"
    STARTED = "started"
    AWAITING_APPROVAL = "awaiting-approval"
    NEEDS_MORE_INFORMATION = "needs-more-information"
    APPROVED = "approved"


# Human-readable labels used for notification text
STATUS_DISPLAY_STRINGS: dict[str, str] = {
    Status.DUE: "Due",
    Status.STARTED: "Started",
    Status.AWAITING_APPROVAL: "Awaiting Approval",
    Status.NEEDS_MORE_INFORMATION: "Needs More Information",
    Status.APPROVED: "Approved",
}

# Projects, sites and nurseries start at STARTED; only reports and tasks can be DUE
ENTITY_STATUSES: frozenset[str] = frozenset(
    {
        Status.STARTED,
        Status.AWAITING_APPROVAL,
        Status.NEEDS_MORE_INFORMATION,
        Status.APPROVED,
    }
)
REPORT_STATUSES: frozenset[str] = frozenset(Status)
TASK_STATUSES: frozenset[str] = frozenset(Status)

# Not yet submitted
UNSUBMITTED_STATUSES: frozenset[str] = frozenset({Status.DUE, Status.STARTED})

# A report moving into one of these recomputes its task's status
TASK_ROLLUP_TRIGGER_STATUSES: frozenset[str] = frozenset(
    {
        Status.APPROVED,
        Status.NEEDS_MORE_INFORMATION,
        Status.AWAITING_APPROVAL,
    }
)


def is_valid_status(value: object, allowed: frozenset[str] = REPORT_STATUSES) -> bool:
    """Return True if value is a member of the allowed status set."""
    return isinstance(value, str) and value in allowed


def display_status(value: str) -> str:
    """Label for a status, falling back to the raw value."""
    return STATUS_DISPLAY_STRINGS.get(value, value)
