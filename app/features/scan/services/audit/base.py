from typing import TYPE_CHECKING, Optional, Protocol

import httpx

from app.features.scan.schemas.audit import AuditReport

if TYPE_CHECKING:
    from app.features.scan.services.audit.page_fetcher import FetchedPage


class AuditFailed(Exception):
    """The audit capability could not produce a report for a URL."""

    def __init__(self, message: str, timed_out: bool = False):
        super().__init__(message)
        self.timed_out = timed_out


class AuditCapability(Protocol):
    """Given a single absolute URL, return a normalized accessibility report.

    ``page`` is the markup already fetched by the orchestrator; remote engines
    ignore it, the local markup auditor requires it.
    """

    async def audit(self, url: str, page: Optional["FetchedPage"] = None) -> AuditReport:
        ...


def is_timeout(exc: BaseException) -> bool:
    return isinstance(exc, httpx.TimeoutException) or getattr(exc, "timed_out", False)
