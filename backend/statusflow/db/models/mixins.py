"""Column mixins shared by the workflow models."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import validates

from statusflow.core.exceptions import InvalidStatusError
from statusflow.domain.status import REPORT_STATUSES, is_valid_status


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)


class SoftDeleteMixin:
    # NULL = visible; set = logically deleted
    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)


class StatusMixin:
    """Lifecycle status plus reviewer feedback.

    Assignments outside ALLOWED_STATUSES raise InvalidStatusError.
    """

    ALLOWED_STATUSES: frozenset[str] = REPORT_STATUSES

    status = Column(String(50), nullable=False)
    feedback = Column(Text, nullable=True)
    feedback_fields = Column(JSONB, nullable=True)  # form question uuids

    @validates("status")
    def _validate_status(self, key, value):
        if not is_valid_status(value, self.ALLOWED_STATUSES):
            raise InvalidStatusError(type(self).__name__, value, self.ALLOWED_STATUSES)
        return value
