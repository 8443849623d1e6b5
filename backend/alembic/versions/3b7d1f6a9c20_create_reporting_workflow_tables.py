"""create reporting workflow tables

Revision ID: 3b7d1f6a9c20
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3b7d1f6a9c20"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    ]


def _status_columns(default: str) -> list[sa.Column]:
    return [
        sa.Column("status", sa.String(length=50), nullable=False, server_default=default),
        sa.Column("feedback", sa.Text(), nullable=True),
        sa.Column("feedback_fields", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
    ]


def _report_columns() -> list[sa.Column]:
    return [
        sa.Column("framework_key", sa.String(length=20), nullable=True),
        sa.Column("title", sa.String(length=255), nullable=True),
        sa.Column("update_request_status", sa.String(length=50), nullable=True),
        sa.Column("due_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=True),
    ]


def _index(table: str, *columns: str, unique: bool = False) -> None:
    for column in columns:
        op.create_index(op.f(f"ix_{table}_{column}"), table, [column], unique=unique)


def upgrade() -> None:
    """Create projects, sites, nurseries, tasks, reports, actions, audit and scheduling tables."""
    op.create_table(
        "projects",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("uuid", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("organisation_id", sa.Integer(), nullable=True),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("framework_key", sa.String(length=20), nullable=True),
        *_status_columns("started"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("projects", "uuid", unique=True)
    _index("projects", "organisation_id", "framework_key", "deleted_at")

    for table in ("sites", "nurseries"):
        op.create_table(
            table,
            sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
            sa.Column("uuid", postgresql.UUID(as_uuid=True), nullable=False),
            sa.Column("project_id", sa.Integer(), nullable=False),
            sa.Column("name", sa.String(length=255), nullable=True),
            *_status_columns("started"),
            *_timestamps(),
            sa.ForeignKeyConstraint(["project_id"], ["projects.id"]),
            sa.PrimaryKeyConstraint("id"),
        )
        _index(table, "uuid", unique=True)
        _index(table, "project_id", "deleted_at")

    op.create_table(
        "tasks",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("uuid", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("project_id", sa.Integer(), nullable=True),
        sa.Column("organisation_id", sa.Integer(), nullable=True),
        sa.Column("status", sa.String(length=50), nullable=False, server_default="due"),
        sa.Column("due_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("tasks", "uuid", unique=True)
    _index("tasks", "project_id", "organisation_id", "due_at", "deleted_at")

    op.create_table(
        "project_reports",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("uuid", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("task_id", sa.Integer(), nullable=True),
        sa.Column("project_id", sa.Integer(), nullable=False),
        *_report_columns(),
        *_status_columns("due"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["task_id"], ["tasks.id"]),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("project_reports", "uuid", unique=True)
    _index("project_reports", "task_id", "project_id", "deleted_at")

    for table, parent_column, parent_table in (
        ("site_reports", "site_id", "sites"),
        ("nursery_reports", "nursery_id", "nurseries"),
    ):
        op.create_table(
            table,
            sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
            sa.Column("uuid", postgresql.UUID(as_uuid=True), nullable=False),
            sa.Column("task_id", sa.Integer(), nullable=True),
            sa.Column(parent_column, sa.Integer(), nullable=False),
            sa.Column("nothing_to_report", sa.Boolean(), nullable=False, server_default=sa.false()),
            *_report_columns(),
            *_status_columns("due"),
            *_timestamps(),
            sa.ForeignKeyConstraint(["task_id"], ["tasks.id"]),
            sa.ForeignKeyConstraint([parent_column], [f"{parent_table}.id"]),
            sa.PrimaryKeyConstraint("id"),
        )
        _index(table, "uuid", unique=True)
        _index(table, "task_id", parent_column, "deleted_at")

    op.create_table(
        "financial_reports",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("uuid", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("organisation_id", sa.Integer(), nullable=True),
        sa.Column("title", sa.String(length=255), nullable=True),
        sa.Column("due_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=True),
        *_status_columns("due"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("financial_reports", "uuid", unique=True)
    _index("financial_reports", "organisation_id", "deleted_at")

    op.create_table(
        "actions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("uuid", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("targetable_type", sa.String(length=50), nullable=False),
        sa.Column("targetable_id", sa.Integer(), nullable=False),
        sa.Column("type", sa.String(length=50), nullable=False, server_default="notification"),
        sa.Column("status", sa.String(length=50), nullable=False, server_default="pending"),
        sa.Column("project_id", sa.Integer(), nullable=True),
        sa.Column("organisation_id", sa.Integer(), nullable=True),
        sa.Column("title", sa.String(length=255), nullable=True),
        sa.Column("sub_title", sa.String(length=255), nullable=True),
        sa.Column("text", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("uuid"),
    )
    _index("actions", "targetable_type", "targetable_id", "project_id", "organisation_id")

    op.create_table(
        "audit_statuses",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("uuid", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("auditable_type", sa.String(length=50), nullable=False),
        sa.Column("auditable_id", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=50), nullable=True),
        sa.Column("type", sa.String(length=50), nullable=True),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column("created_by", sa.String(length=255), nullable=True),
        sa.Column("first_name", sa.String(length=255), nullable=True),
        sa.Column("last_name", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("uuid"),
    )
    _index("audit_statuses", "auditable_type", "auditable_id", "created_at")

    op.create_table(
        "scheduled_jobs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("type", sa.String(length=50), nullable=False),
        sa.Column("execution_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("task_definition", postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default="{}"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("scheduled_jobs", "execution_time", "deleted_at")

    op.create_table(
        "form_questions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("uuid", sa.String(length=36), nullable=False),
        sa.Column("label", sa.Text(), nullable=False),
        sa.Column("linked_field_key", sa.String(length=255), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("form_questions", "uuid", unique=True)

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("uuid", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("email_address", sa.String(length=255), nullable=False),
        sa.Column("first_name", sa.String(length=255), nullable=True),
        sa.Column("last_name", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("uuid"),
        sa.UniqueConstraint("email_address"),
    )


def downgrade() -> None:
    """Drop all reporting workflow tables."""
    for table in (
        "users",
        "form_questions",
        "scheduled_jobs",
        "audit_statuses",
        "actions",
        "financial_reports",
        "nursery_reports",
        "site_reports",
        "project_reports",
        "tasks",
        "nurseries",
        "sites",
        "projects",
    ):
        op.drop_table(table)
