from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.scan.models.scan_result import ScanResult
from app.platform.logger import get_logger

logger = get_logger(__name__)


def _window_start(minutes: int) -> datetime:
    return datetime.utcnow() - timedelta(minutes=minutes)


async def insert_scan_result(db: AsyncSession, record: ScanResult) -> ScanResult:
    """Insert once. A duplicate session id surfaces as ``IntegrityError`` after rollback."""
    db.add(record)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    await db.refresh(record)
    return record


async def count_recent_by_client(db: AsyncSession, client_ip: str, window_minutes: int) -> int:
    query = (
        select(func.count(ScanResult.id))
        .where(ScanResult.client_ip == client_ip)
        .where(ScanResult.created_at >= _window_start(window_minutes))
    )
    result = await db.execute(query)
    return result.scalar_one()


async def find_latest_by_url(db: AsyncSession, website_url: str, window_minutes: int) -> Optional[ScanResult]:
    """Most recent successful scan of the URL inside the window."""
    query = (
        select(ScanResult)
        .where(ScanResult.website_url == website_url)
        .where(ScanResult.http_status != 0)
        .where(ScanResult.created_at >= _window_start(window_minutes))
        .order_by(desc(ScanResult.created_at))
        .limit(1)
    )
    result = await db.execute(query)
    return result.scalars().first()


async def find_by_session(db: AsyncSession, session_id: str) -> Optional[ScanResult]:
    result = await db.execute(select(ScanResult).where(ScanResult.session_id == session_id))
    return result.scalars().first()


async def update_by_session(db: AsyncSession, session_id: str, **fields) -> int:
    if not fields:
        return 0
    result = await db.execute(
        update(ScanResult).where(ScanResult.session_id == session_id).values(**fields)
    )
    await db.commit()
    logger.info(f"Updated scan {session_id}: {', '.join(fields)}")
    return result.rowcount
