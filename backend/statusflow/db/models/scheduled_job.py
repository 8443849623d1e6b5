"""ScheduledJob model: time-triggered work claimed by the dispatcher."""

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.dialects.postgresql import JSONB

from statusflow.db.base import Base
from statusflow.db.models.mixins import SoftDeleteMixin, TimestampMixin


class ScheduledJob(SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "scheduled_jobs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    type = Column(String(50), nullable=False)  # ScheduledJobType values
    execution_time = Column(DateTime(timezone=True), nullable=False, index=True)
    task_definition = Column(JSONB, nullable=False, default=dict)  # opaque payload, e.g. framework_key + due_at
