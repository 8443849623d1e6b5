"""Task model: groups the reports generated for one reporting due date."""

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship, validates

from statusflow.core.exceptions import InvalidStatusError
from statusflow.db.base import Base
from statusflow.db.models.mixins import SoftDeleteMixin, TimestampMixin
from statusflow.domain.status import TASK_STATUSES, Status, is_valid_status


class Task(SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    uuid = Column(UUID(as_uuid=True), nullable=False, unique=True, index=True, default=uuid.uuid4)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=True, index=True)
    organisation_id = Column(Integer, nullable=True, index=True)

    status = Column(String(50), nullable=False, default=Status.DUE.value)
    due_at = Column(DateTime(timezone=True), nullable=True, index=True)

    project = relationship("Project", lazy="raise")
    project_report = relationship("ProjectReport", back_populates="task", uselist=False, lazy="raise")
    site_reports = relationship("SiteReport", back_populates="task", lazy="raise")
    nursery_reports = relationship("NurseryReport", back_populates="task", lazy="raise")

    @validates("status")
    def _validate_status(self, key, value):
        if not is_valid_status(value, TASK_STATUSES):
            raise InvalidStatusError("Task", value, TASK_STATUSES)
        return value

    @property
    def active_reports(self) -> list:
        """Loaded child reports that are present and not soft-deleted, project report first."""
        reports = [self.project_report, *self.site_reports, *self.nursery_reports]
        return [report for report in reports if report is not None and report.deleted_at is None]
