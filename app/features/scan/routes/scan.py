from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.scan.schemas.scan import ScanRequest, ScanResponse
from app.features.scan.services.audit.markup_auditor import MarkupAuditor
from app.features.scan.services.audit.pagespeed_auditor import PageSpeedAuditor
from app.features.scan.services.orchestration.scan_orchestrator import ScanOrchestrator
from app.features.scan.services.scan.scan import run_scan
from app.platform.config import settings
from app.platform.db.session import get_db
from app.platform.logger import get_logger
from app.platform.response import api_response
from app.platform.utils.client import get_client_identifier

logger = get_logger(__name__)

router = APIRouter(tags=["scan"])
# Path kept for clients of the original edge function
alias_router = APIRouter(tags=["scan"])


def get_scan_orchestrator() -> ScanOrchestrator:
    """A fresh orchestrator per scan, wired to the configured audit provider."""
    markup_auditor = MarkupAuditor()
    if settings.AUDIT_PROVIDER == "pagespeed":
        auditor = PageSpeedAuditor()
    else:
        auditor = markup_auditor
    return ScanOrchestrator(auditor=auditor, markup_auditor=markup_auditor)


@router.post("/scan", response_model=ScanResponse, response_model_by_alias=True)
async def start_scan(
    scan_request: ScanRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
    orchestrator: ScanOrchestrator = Depends(get_scan_orchestrator),
):
    """
    Scan a website and return the teaser summary.

    The full report stays locked until an email is submitted through
    ``/reports/unlock`` with the returned ``sessionId``.
    """
    client_id = get_client_identifier(request)
    logger.info(f"Scan requested for {scan_request.website_url} by {client_id}")

    result = await run_scan(db, scan_request, client_id, orchestrator)
    return api_response(data=result)


alias_router.add_api_route(
    "/scan-website",
    start_scan,
    methods=["POST"],
    response_model=ScanResponse,
    response_model_by_alias=True,
)
