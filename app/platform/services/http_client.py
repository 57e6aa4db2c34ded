from contextlib import asynccontextmanager
from typing import Optional

import httpx

from app.platform.config import settings

DEFAULT_HEADERS = {
    "User-Agent": settings.SCANNER_USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/pdf;q=0.9,*/*;q=0.8",
}


@asynccontextmanager
async def client_for(
    timeout: float,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    headers: Optional[dict] = None,
):
    """Outbound client with an explicit timeout; tests inject an httpx.MockTransport."""
    async with httpx.AsyncClient(
        timeout=httpx.Timeout(timeout, connect=min(timeout, 5.0)),
        headers={**DEFAULT_HEADERS, **(headers or {})},
        follow_redirects=True,
        transport=transport,
    ) as client:
        yield client
