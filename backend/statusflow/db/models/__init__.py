"""Re-export all models so Base.metadata sees them."""

from statusflow.db.models.action import Action
from statusflow.db.models.audit_status import AuditStatus
from statusflow.db.models.form_question import FormQuestion
from statusflow.db.models.project import Nursery, Project, Site
from statusflow.db.models.report import FinancialReport, NurseryReport, ProjectReport, SiteReport
from statusflow.db.models.scheduled_job import ScheduledJob
from statusflow.db.models.task import Task
from statusflow.db.models.user import User

__all__ = [
    "Action",
    "AuditStatus",
    "FinancialReport",
    "FormQuestion",
    "Nursery",
    "NurseryReport",
    "Project",
    "ProjectReport",
    "ScheduledJob",
    "Site",
    "SiteReport",
    "Task",
    "User",
]
