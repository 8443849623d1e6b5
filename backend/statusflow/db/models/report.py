"""Report models: periodic reports grouped under a Task."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from statusflow.db.base import Base
from statusflow.db.models.mixins import SoftDeleteMixin, StatusMixin, TimestampMixin
from statusflow.domain.status import REPORT_STATUSES, Status


class ProjectReport(StatusMixin, SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "project_reports"

    ALLOWED_STATUSES = REPORT_STATUSES

    id = Column(Integer, primary_key=True, autoincrement=True)
    uuid = Column(UUID(as_uuid=True), nullable=False, unique=True, index=True, default=uuid.uuid4)
    task_id = Column(Integer, ForeignKey("tasks.id"), nullable=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)

    framework_key = Column(String(20), nullable=True)
    title = Column(String(255), nullable=True)
    status = Column(String(50), nullable=False, default=Status.DUE.value)
    update_request_status = Column(String(50), nullable=True)
    due_at = Column(DateTime(timezone=True), nullable=True)
    submitted_at = Column(DateTime(timezone=True), nullable=True)

    task = relationship("Task", back_populates="project_report", lazy="raise")
    project = relationship("Project", lazy="raise")


class SiteReport(StatusMixin, SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "site_reports"

    ALLOWED_STATUSES = REPORT_STATUSES

    id = Column(Integer, primary_key=True, autoincrement=True)
    uuid = Column(UUID(as_uuid=True), nullable=False, unique=True, index=True, default=uuid.uuid4)
    task_id = Column(Integer, ForeignKey("tasks.id"), nullable=True, index=True)
    site_id = Column(Integer, ForeignKey("sites.id"), nullable=False, index=True)

    framework_key = Column(String(20), nullable=True)
    title = Column(String(255), nullable=True)
    status = Column(String(50), nullable=False, default=Status.DUE.value)
    update_request_status = Column(String(50), nullable=True)
    nothing_to_report = Column(Boolean, nullable=False, default=False)
    due_at = Column(DateTime(timezone=True), nullable=True)
    submitted_at = Column(DateTime(timezone=True), nullable=True)

    task = relationship("Task", back_populates="site_reports", lazy="raise")
    site = relationship("Site", lazy="raise")


class NurseryReport(StatusMixin, SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "nursery_reports"

    ALLOWED_STATUSES = REPORT_STATUSES

    id = Column(Integer, primary_key=True, autoincrement=True)
    uuid = Column(UUID(as_uuid=True), nullable=False, unique=True, index=True, default=uuid.uuid4)
    task_id = Column(Integer, ForeignKey("tasks.id"), nullable=True, index=True)
    nursery_id = Column(Integer, ForeignKey("nurseries.id"), nullable=False, index=True)

    framework_key = Column(String(20), nullable=True)
    title = Column(String(255), nullable=True)
    status = Column(String(50), nullable=False, default=Status.DUE.value)
    update_request_status = Column(String(50), nullable=True)
    nothing_to_report = Column(Boolean, nullable=False, default=False)
    due_at = Column(DateTime(timezone=True), nullable=True)
    submitted_at = Column(DateTime(timezone=True), nullable=True)

    task = relationship("Task", back_populates="nursery_reports", lazy="raise")
    nursery = relationship("Nursery", lazy="raise")


class FinancialReport(StatusMixin, SoftDeleteMixin, TimestampMixin, Base):
    """Organisation-level report. Audited, but never part of a Task."""

    __tablename__ = "financial_reports"

    ALLOWED_STATUSES = REPORT_STATUSES

    id = Column(Integer, primary_key=True, autoincrement=True)
    uuid = Column(UUID(as_uuid=True), nullable=False, unique=True, index=True, default=uuid.uuid4)
    organisation_id = Column(Integer, nullable=True, index=True)

    title = Column(String(255), nullable=True)
    status = Column(String(50), nullable=False, default=Status.DUE.value)
    due_at = Column(DateTime(timezone=True), nullable=True)
    submitted_at = Column(DateTime(timezone=True), nullable=True)
