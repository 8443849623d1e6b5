"""Project workflow endpoints.

GET /api/projects/{project_uuid}/bulk-approval - Reports eligible for bulk approval
"""

from fastapi import APIRouter

from statusflow.db.base import get_session_factory
from statusflow.schemas.bulk_approval import BulkApprovalResponse
from statusflow.services.bulk_approval import BulkApprovalService

router = APIRouter()


@router.get("/{project_uuid}/bulk-approval", response_model=BulkApprovalResponse)
async def get_bulk_approval(project_uuid: str) -> BulkApprovalResponse:
    """List the project's nothing-to-report site and nursery reports not yet approved.

    Returns 404 if the project does not exist or the UUID is malformed.
    """
    service = BulkApprovalService(get_session_factory())
    return await service.get_bulk_approval_candidates(project_uuid)
