from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.scan.models.scan_result import ScanResult
from app.features.scan.services.repository.scan_results import find_latest_by_url
from app.platform.config import settings
from app.platform.logger import get_logger

logger = get_logger(__name__)


class ResultCache:
    def __init__(self, ttl_minutes: int = settings.SCAN_CACHE_TTL_MINUTES):
        self.ttl_minutes = ttl_minutes

    async def lookup(self, db: AsyncSession, website_url: str) -> Optional[ScanResult]:
        """Latest successful scan of ``website_url`` younger than the TTL, or None."""
        try:
            record = await find_latest_by_url(db, website_url, self.ttl_minutes)
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Cache lookup failed for {website_url}, treating as miss: {e}")
            return None

        if record is not None:
            logger.info(f"Cache hit for {website_url} (session {record.session_id})")
        return record
