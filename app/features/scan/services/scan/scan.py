import time
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.scan.models.scan_result import ScanResult
from app.features.scan.schemas.findings import Finding, Summary
from app.features.scan.schemas.scan import ScanOutcome, ScanRequest, ScanResponse
from app.features.scan.services.cache.result_cache import ResultCache
from app.features.scan.services.orchestration.scan_orchestrator import ScanOrchestrator
from app.features.scan.services.quota.quota_guard import QuotaGuard
from app.features.scan.services.repository.scan_results import insert_scan_result
from app.features.scan.services.utils.aggregator import build_teaser
from app.platform.exceptions import PersistenceFailure, RootFetchFailed
from app.platform.logger import get_logger
from app.platform.utils.url_validator import normalize_url

logger = get_logger(__name__)


def _dump(models) -> List[dict]:
    return [m.model_dump(mode="json", by_alias=True, exclude_none=True) for m in models]


async def _save(db: AsyncSession, record: ScanResult) -> None:
    try:
        await insert_scan_result(db, record)
    except IntegrityError:
        # Same client session submitted twice; the in-memory result still stands
        logger.warning(f"Scan record for session {record.session_id} already exists, keeping the original")
    except SQLAlchemyError as e:
        logger.error(f"Failed to persist scan {record.session_id}: {e}")
        raise PersistenceFailure("Failed to save scan results") from e


async def _save_failed_attempt(db: AsyncSession, request: ScanRequest, url: str, client_id: str, duration_ms: int):
    record = ScanResult(
        session_id=request.client_session_id,
        website_url=url,
        client_ip=client_id,
        user_id=request.user_id,
        http_status=0,
        scan_duration_ms=duration_ms,
        findings=[],
        summary=Summary().model_dump(by_alias=True, exclude_none=True),
    )
    try:
        await _save(db, record)
    except PersistenceFailure:
        # The root failure is what the caller needs to see
        logger.error(f"Could not record failed scan attempt for {url}")


def build_record(request: ScanRequest, client_id: str, outcome: ScanOutcome) -> ScanResult:
    return ScanResult(
        session_id=request.client_session_id,
        website_url=outcome.website_url,
        client_ip=client_id,
        user_id=request.user_id,
        http_status=outcome.http_status,
        scan_duration_ms=outcome.scan_duration_ms,
        findings=_dump(outcome.findings),
        summary=outcome.summary.model_dump(mode="json", by_alias=True, exclude_none=True),
        page_results=_dump(outcome.page_results),
        pages_scanned=outcome.pages_scanned,
        pdf_results=_dump(outcome.pdf_results),
        vendor_warnings=_dump(outcome.vendor_warnings),
        overall_score=outcome.overall_score,
    )


def response_from_record(record: ScanResult) -> ScanResponse:
    """Teaser response built purely from a stored scan."""
    findings = [Finding.model_validate(f) for f in record.findings or []]
    summary = Summary.model_validate(record.summary or {})
    score = record.overall_score if record.overall_score is not None else summary.accessibility_score
    return ScanResponse(
        session_id=record.session_id,
        summary=summary,
        teaser=build_teaser(findings, score),
        pages_scanned=record.pages_scanned,
        cached=True,
    )


async def run_scan(
    db: AsyncSession,
    request: ScanRequest,
    client_id: str,
    orchestrator: ScanOrchestrator,
    quota_guard: Optional[QuotaGuard] = None,
    cache: Optional[ResultCache] = None,
) -> ScanResponse:
    """
    Validate, rate limit, serve from cache or scan, then persist.

    Raises:
        InvalidUrl: The website URL cannot be normalized.
        RateLimited: The client used up its hourly quota.
        RootFetchFailed: The root page could not be fetched or audited.
        PersistenceFailure: The scan ran but could not be stored.
    """
    url = normalize_url(request.website_url)
    async with (quota_guard or QuotaGuard()).admit(db, client_id):
        cached = await (cache or ResultCache()).lookup(db, url)
        if cached is not None:
            return response_from_record(cached)

        started = time.monotonic()
        try:
            outcome = await orchestrator.run(url)
        except RootFetchFailed:
            await _save_failed_attempt(db, request, url, client_id, int((time.monotonic() - started) * 1000))
            raise

        await _save(db, build_record(request, client_id, outcome))

    logger.info(f"Scan completed for {url}: {outcome.summary.total} issues found in {outcome.scan_duration_ms}ms")

    return ScanResponse(
        session_id=request.client_session_id,
        summary=outcome.summary,
        teaser=outcome.teaser,
        pages_scanned=outcome.pages_scanned,
    )
