"""Project, Site and Nursery models: the non-report trackable entities."""

import uuid

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from statusflow.db.base import Base
from statusflow.db.models.mixins import SoftDeleteMixin, StatusMixin, TimestampMixin
from statusflow.domain.status import ENTITY_STATUSES, Status


class Project(StatusMixin, SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "projects"

    ALLOWED_STATUSES = ENTITY_STATUSES

    id = Column(Integer, primary_key=True, autoincrement=True)
    uuid = Column(UUID(as_uuid=True), nullable=False, unique=True, index=True, default=uuid.uuid4)
    organisation_id = Column(Integer, nullable=True, index=True)

    name = Column(String(255), nullable=True)
    framework_key = Column(String(20), nullable=True, index=True)  # terrafund, ppc, ...
    status = Column(String(50), nullable=False, default=Status.STARTED.value)

    sites = relationship("Site", back_populates="project", lazy="raise")
    nurseries = relationship("Nursery", back_populates="project", lazy="raise")


class Site(StatusMixin, SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "sites"

    ALLOWED_STATUSES = ENTITY_STATUSES

    id = Column(Integer, primary_key=True, autoincrement=True)
    uuid = Column(UUID(as_uuid=True), nullable=False, unique=True, index=True, default=uuid.uuid4)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)

    name = Column(String(255), nullable=True)
    status = Column(String(50), nullable=False, default=Status.STARTED.value)

    project = relationship("Project", back_populates="sites", lazy="raise")


class Nursery(StatusMixin, SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "nurseries"

    ALLOWED_STATUSES = ENTITY_STATUSES

    id = Column(Integer, primary_key=True, autoincrement=True)
    uuid = Column(UUID(as_uuid=True), nullable=False, unique=True, index=True, default=uuid.uuid4)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)

    name = Column(String(255), nullable=True)
    status = Column(String(50), nullable=False, default=Status.STARTED.value)

    project = relationship("Project", back_populates="nurseries", lazy="raise")
