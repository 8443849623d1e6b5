"""Queue names, job types and message payloads."""

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

SCHEDULED_JOBS_QUEUE = "scheduled-jobs"
EMAIL_QUEUE = "email"


class ScheduledJobType(StrEnum):
    """ScheduledJob.type values; also the message names on the scheduled-jobs queue."""

    TASK_DUE = "task-due"
    REPORT_REMINDER = "report-reminder"
    SITE_AND_NURSERY_REMINDER = "site-and-nursery-reminder"


class EmailJobType(StrEnum):
    """Message names on the email queue."""

    STATUS_UPDATE = "statusUpdate"
    TERRAFUND_REPORT_REMINDER = "terrafundReportReminder"
    TERRAFUND_SITE_AND_NURSERY_REMINDER = "terrafundSiteAndNurseryReminder"


class QueueMessage(BaseModel):
    """Envelope stored on a work queue."""

    id: str
    name: str
    data: dict[str, Any]
    enqueued_at: str  # ISO 8601


class ScheduledJobMessage(BaseModel):
    """Payload the dispatcher enqueues for a claimed ScheduledJob."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    task_definition: dict[str, Any] = Field(default_factory=dict, alias="taskDefinition")


class TaskDueDefinition(BaseModel):
    framework_key: str = Field(validation_alias=AliasChoices("framework_key", "frameworkKey"))
    due_at: datetime = Field(validation_alias=AliasChoices("due_at", "dueAt"))


class ReminderDefinition(BaseModel):
    framework_key: str = Field(validation_alias=AliasChoices("framework_key", "frameworkKey"))


class StatusUpdateEmail(BaseModel):
    type: str
    id: int


class ProjectReminderEmail(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    project_ids: list[int] = Field(alias="projectIds")
