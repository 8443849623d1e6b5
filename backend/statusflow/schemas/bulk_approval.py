"""Bulk approval response schemas."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ReportType(StrEnum):
    SITE_REPORT = "site-report"
    NURSERY_REPORT = "nursery-report"


class BulkApprovalReport(BaseModel):
    """A nothing-to-report report still waiting for approval."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    uuid: str
    name: str
    type: ReportType
    submitted_at: datetime | None = None
    status: str
    nothing_to_report: bool


class BulkApprovalResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    project_uuid: str
    reports_bulk_approval: list[BulkApprovalReport]
