"""Action model: pending notifications surfaced in the user's actions feed."""

import uuid

from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID

from statusflow.db.base import Base
from statusflow.db.models.mixins import TimestampMixin

ACTION_STATUS_PENDING = "pending"
ACTION_TYPE_NOTIFICATION = "notification"


class Action(TimestampMixin, Base):
    __tablename__ = "actions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    uuid = Column(UUID(as_uuid=True), nullable=False, unique=True, default=uuid.uuid4)

    # Polymorphic reference resolved through statusflow.db.entities
    targetable_type = Column(String(50), nullable=False, index=True)
    targetable_id = Column(Integer, nullable=False, index=True)

    type = Column(String(50), nullable=False, default=ACTION_TYPE_NOTIFICATION)
    status = Column(String(50), nullable=False, default=ACTION_STATUS_PENDING)
    project_id = Column(Integer, nullable=True, index=True)
    organisation_id = Column(Integer, nullable=True, index=True)

    title = Column(String(255), nullable=True)
    sub_title = Column(String(255), nullable=True)
    text = Column(Text, nullable=True)
