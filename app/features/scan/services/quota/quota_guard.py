from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Dict

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.scan.services.repository.scan_results import count_recent_by_client
from app.platform.config import settings
from app.platform.exceptions import RateLimited
from app.platform.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class QuotaDecision:
    allowed: bool
    remaining: int


class QuotaGuard:
    """
    Sliding-window scan quota per client, counted from persisted scan records.

    A scan is only persisted when it finishes, so ``admit`` also counts scans
    this process has admitted for the client but not yet stored. Scans running
    in other worker processes are not visible until they are persisted.
    """

    # client id -> admitted scans not yet released, shared by every guard in the process
    _in_flight: Dict[str, int] = {}

    def __init__(
        self,
        limit: int = settings.SCAN_RATE_LIMIT_PER_HOUR,
        window_minutes: int = settings.RATE_LIMIT_WINDOW_MINUTES,
        retry_after: int = settings.RATE_LIMIT_RETRY_AFTER_SECONDS,
    ):
        self.limit = limit
        self.window_minutes = window_minutes
        self.retry_after = retry_after

    async def check(self, db: AsyncSession, client_id: str, pending: int = 0) -> QuotaDecision:
        try:
            count = await count_recent_by_client(db, client_id, self.window_minutes)
        except SQLAlchemyError as e:
            await db.rollback()
            # Fail open
            logger.error(f"Quota check failed for {client_id}, allowing request: {e}")
            return QuotaDecision(allowed=True, remaining=self.limit)

        count += pending
        return QuotaDecision(allowed=count < self.limit, remaining=max(0, self.limit - count))

    def _deny(self, client_id: str):
        logger.warning(f"Rate limit exceeded for {client_id}")
        raise RateLimited(retry_after=self.retry_after)

    async def enforce(self, db: AsyncSession, client_id: str) -> QuotaDecision:
        decision = await self.check(db, client_id)
        if not decision.allowed:
            self._deny(client_id)
        return decision

    @asynccontextmanager
    async def admit(self, db: AsyncSession, client_id: str) -> AsyncIterator[QuotaDecision]:
        """
        Reserve a quota slot for the duration of one scan.

        The reservation is taken before the count query is awaited, so of two
        concurrent requests competing for the last slot only the first passes.
        Raises ``RateLimited`` when the client is over quota.
        """
        pending = self._in_flight.get(client_id, 0)
        self._in_flight[client_id] = pending + 1
        try:
            decision = await self.check(db, client_id, pending)
            if not decision.allowed:
                self._deny(client_id)
            yield decision
        finally:
            left = self._in_flight.get(client_id, 1) - 1
            if left > 0:
                self._in_flight[client_id] = left
            else:
                self._in_flight.pop(client_id, None)
