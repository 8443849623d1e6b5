"""Acting user passed explicitly through status change handlers."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ActingUser:
    """The authenticated user responsible for a change.

    System-triggered changes (scheduled jobs, rollups) pass ``None`` instead.
    """

    user_id: int
    email_address: str | None = None
    first_name: str | None = None
    last_name: str | None = None
