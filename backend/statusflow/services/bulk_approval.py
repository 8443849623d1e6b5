"""BulkApprovalService: nothing-to-report reports a reviewer can approve in one go."""

import uuid

import structlog
from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from statusflow.db.models import NurseryReport, SiteReport, Task
from statusflow.domain.status import Status
from statusflow.repositories.projects import find_project_by_uuid
from statusflow.schemas.bulk_approval import BulkApprovalReport, BulkApprovalResponse, ReportType

logger = structlog.get_logger(__name__)


def _is_candidate(report) -> bool:
    return report.deleted_at is None and bool(report.nothing_to_report) and report.status != Status.APPROVED


def _to_candidate(report, parent, report_type: ReportType, placeholder: str) -> BulkApprovalReport:
    return BulkApprovalReport(
        uuid=str(report.uuid),
        name=report.title or (parent.name if parent is not None else None) or placeholder,
        type=report_type,
        submitted_at=report.submitted_at,
        status=report.status,
        nothing_to_report=report.nothing_to_report,
    )


class BulkApprovalService:
    """Read-only: surfaces candidates; approving them goes through StatusChangeService."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def get_bulk_approval_candidates(self, project_uuid: str | uuid.UUID) -> BulkApprovalResponse:
        """List every unapproved nothing-to-report site and nursery report of a project.

        Raises:
            HTTPException(404): Project not found
        """
        try:
            parsed_uuid = project_uuid if isinstance(project_uuid, uuid.UUID) else uuid.UUID(str(project_uuid))
        except ValueError:
            raise HTTPException(status_code=404, detail=f"Project with UUID {project_uuid} not found") from None

        async with self.session_factory() as session:
            project = await find_project_by_uuid(session, parsed_uuid)
            if project is None:
                raise HTTPException(status_code=404, detail=f"Project with UUID {project_uuid} not found")

            result = await session.execute(
                select(Task)
                .where(Task.project_id == project.id, Task.deleted_at.is_(None))
                .order_by(Task.id)
                .options(
                    selectinload(Task.site_reports).selectinload(SiteReport.site),
                    selectinload(Task.nursery_reports).selectinload(NurseryReport.nursery),
                )
            )
            tasks = list(result.scalars().all())

        logger.info("bulk_approval_tasks_loaded", project_uuid=str(parsed_uuid), tasks=len(tasks))

        candidates: list[BulkApprovalReport] = []
        for task in tasks:
            candidates.extend(
                _to_candidate(report, report.site, ReportType.SITE_REPORT, "Unnamed Site Report")
                for report in task.site_reports
                if _is_candidate(report)
            )
            candidates.extend(
                _to_candidate(report, report.nursery, ReportType.NURSERY_REPORT, "Unnamed Nursery Report")
                for report in task.nursery_reports
                if _is_candidate(report)
            )

        return BulkApprovalResponse(project_uuid=str(project_uuid), reports_bulk_approval=candidates)
