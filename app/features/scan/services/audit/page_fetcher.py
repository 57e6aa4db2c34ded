import time
from dataclasses import dataclass
from typing import Optional

import httpx

from app.platform.config import settings
from app.platform.logger import get_logger
from app.platform.services.http_client import client_for

logger = get_logger(__name__)


@dataclass(frozen=True)
class FetchedPage:
    url: str
    final_url: str
    status: int
    html: str
    load_time: float


class PageFetcher:
    """Fetches raw page markup once so every analyzer can share it."""

    def __init__(
        self,
        timeout: float = settings.PAGE_FETCH_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.transport = transport

    async def fetch(self, url: str) -> FetchedPage:
        """
        GET a page and return its markup.

        Raises httpx errors (including ``httpx.TimeoutException``) to the caller,
        which decides whether the failure is fatal.
        """
        async with client_for(self.timeout, transport=self.transport) as client:
            start_time = time.monotonic()
            response = await client.get(url)
            load_time = time.monotonic() - start_time

        logger.info(f"Fetched {url} -> {response.status_code} in {load_time:.2f}s")
        return FetchedPage(
            url=url,
            final_url=str(response.url),
            status=response.status_code,
            html=response.text,
            load_time=load_time,
        )
