from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.reports.schemas.unlock import UnlockedReport, UnlockRequest
from app.features.reports.services.lead_notifier import notify_lead
from app.features.reports.services.unlock_service import unlock_report
from app.platform.db.session import get_db
from app.platform.logger import get_logger
from app.platform.response import api_response

logger = get_logger(__name__)

router = APIRouter(prefix="/reports", tags=["Reports"])
# Path kept for clients of the original edge function
alias_router = APIRouter(tags=["Reports"])


@router.post("/unlock", response_model=UnlockedReport, response_model_by_alias=True)
async def unlock(
    unlock_request: UnlockRequest,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
):
    """
    Return the full report for a scan in exchange for an email address.
    The report is also emailed and the lead is posted to the sales webhook.
    """
    report = await unlock_report(db, unlock_request.session_id, unlock_request.email)
    background_tasks.add_task(notify_lead, unlock_request.email, report)
    return api_response(data=report)


alias_router.add_api_route(
    "/unlock-report",
    unlock,
    methods=["POST"],
    response_model=UnlockedReport,
    response_model_by_alias=True,
)
