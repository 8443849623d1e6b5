"""AuditStatus model: append-only record of status transitions."""

import uuid

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID

from statusflow.db.base import Base
from statusflow.db.models.mixins import utcnow

AUDIT_TYPE_CHANGE_REQUEST = "change-request"


class AuditStatus(Base):
    __tablename__ = "audit_statuses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    uuid = Column(UUID(as_uuid=True), nullable=False, unique=True, default=uuid.uuid4)

    auditable_type = Column(String(50), nullable=False, index=True)
    auditable_id = Column(Integer, nullable=False, index=True)

    status = Column(String(50), nullable=True)
    type = Column(String(50), nullable=True)  # change-request for needs-more-information
    comment = Column(Text, nullable=True)

    created_by = Column(String(255), nullable=True)  # email of the acting user
    first_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    # NO updated_at -- audit entries are immutable (append-only)
