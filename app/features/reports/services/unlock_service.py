from datetime import datetime

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.reports.schemas.unlock import UnlockedReport
from app.features.reports.services.report_email import send_report_email
from app.features.scan.models.scan_result import ScanResult
from app.features.scan.services.repository.scan_results import find_by_session, update_by_session
from app.features.waitlist.services.waitlist import add_to_waitlist
from app.platform.exceptions import ScanNotFound
from app.platform.logger import get_logger

logger = get_logger(__name__)


def report_from_record(record: ScanResult) -> UnlockedReport:
    return UnlockedReport.model_validate(
        {
            "findings": record.findings or [],
            "summary": record.summary or {},
            "website_url": record.website_url,
            "pages_scanned": record.pages_scanned,
            "page_results": record.page_results or [],
            "pdf_results": record.pdf_results or [],
            "vendor_warnings": record.vendor_warnings or [],
        }
    )


async def _record_email(db: AsyncSession, session_id: str, email: str):
    try:
        await update_by_session(db, session_id, email=email, email_captured_at=datetime.utcnow())
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to store email for scan {session_id}: {e}")


async def _join_waitlist(db: AsyncSession, email: str, website_url: str):
    try:
        await add_to_waitlist(db, email, website_url)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Waitlist upsert failed for {email}: {e}")


async def _mark_report_sent(db: AsyncSession, session_id: str):
    try:
        await update_by_session(db, session_id, report_sent_at=datetime.utcnow())
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to stamp report_sent_at for scan {session_id}: {e}")


async def unlock_report(db: AsyncSession, session_id: str, email: str) -> UnlockedReport:
    """
    Exchange an email for the full stored report.

    Storing the email, the waitlist upsert and the report email are best
    effort; none of them changes the outcome for the caller.

    Raises:
        ScanNotFound: No scan exists for ``session_id``.
    """
    record = await find_by_session(db, session_id)
    if record is None:
        logger.warning(f"Unlock requested for unknown session {session_id}")
        raise ScanNotFound()

    # Snapshot before any commit or rollback expires the instance
    report = report_from_record(record)
    scanned_at = record.created_at

    await _record_email(db, session_id, email)
    await _join_waitlist(db, email, report.website_url)

    sent = await run_in_threadpool(send_report_email, email, report, scanned_at)
    if sent:
        await _mark_report_sent(db, session_id)

    return report.model_copy(update={"report_sent": sent})
