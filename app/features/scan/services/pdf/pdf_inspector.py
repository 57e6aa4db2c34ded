import re
from typing import List, Optional
from urllib.parse import unquote, urljoin, urlparse

import httpx
from bs4 import BeautifulSoup

from app.features.scan.schemas.findings import Finding, PdfCheckResult
from app.features.scan.services.enrichment.finding_enricher import enrich
from app.platform.config import settings
from app.platform.logger import get_logger
from app.platform.services.http_client import client_for

logger = get_logger(__name__)

LANG_MARKER = "/Lang"
MARK_INFO_MARKERS = ("/MarkInfo", "/Marked true")
TITLE_MARKER = "/Title"
MAX_LISTED_FILENAMES = 5
CRITICAL_PDF_THRESHOLD = 3


def extract_pdf_links(html: str, base_url: str, limit: int = settings.MAX_PDF_CHECKS) -> List[str]:
    """Absolute URLs of linked PDF documents in document order, de-duplicated."""
    soup = BeautifulSoup(html or "", "html.parser")
    seen = set()
    links = []
    for tag in soup.find_all(href=True):
        href = tag["href"].strip()
        if not urlparse(href).path.lower().endswith(".pdf"):
            continue
        absolute = urljoin(base_url, href)
        if absolute in seen:
            continue
        seen.add(absolute)
        links.append(absolute)
        if len(links) >= limit:
            break
    return links


def pdf_filename(url: str) -> str:
    path = urlparse(url).path
    return unquote(path.rsplit("/", 1)[-1]) or url


class PdfInspector:
    """
    Checks linked PDFs for structural accessibility markers.

    Only the head of each document is fetched; the catalog dictionary that
    carries ``/Lang`` and ``/MarkInfo`` is almost always near the start.
    """

    def __init__(
        self,
        timeout: float = settings.PDF_FETCH_TIMEOUT,
        range_bytes: int = settings.PDF_RANGE_BYTES,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.range_bytes = range_bytes
        self.transport = transport

    async def _read_head(self, url: str) -> bytes:
        headers = {"Range": f"bytes=0-{self.range_bytes - 1}"}
        async with client_for(self.timeout, transport=self.transport, headers=headers) as client:
            async with client.stream("GET", url) as response:
                response.raise_for_status()
                buffer = bytearray()
                async for chunk in response.aiter_bytes():
                    buffer.extend(chunk)
                    if len(buffer) >= self.range_bytes:
                        break
        return bytes(buffer[: self.range_bytes])

    async def inspect(self, url: str) -> PdfCheckResult:
        filename = pdf_filename(url)
        try:
            head = await self._read_head(url)
        except httpx.TimeoutException:
            logger.warning(f"PDF check timed out for {url}")
            return PdfCheckResult(url=url, filename=filename, error="Request timed out")
        except httpx.HTTPStatusError as e:
            logger.warning(f"PDF check for {url} returned {e.response.status_code}")
            return PdfCheckResult(url=url, filename=filename, error=f"HTTP {e.response.status_code}")
        except httpx.HTTPError as e:
            logger.warning(f"PDF check failed for {url}: {e}")
            return PdfCheckResult(url=url, filename=filename, error=str(e) or type(e).__name__)

        text = head.decode("latin-1")
        return PdfCheckResult(
            url=url,
            filename=filename,
            has_lang_tag=LANG_MARKER in text,
            has_mark_info=any(marker in text for marker in MARK_INFO_MARKERS),
            has_title=TITLE_MARKER in text,
        )

    async def inspect_all(self, html: str, base_url: str) -> List[PdfCheckResult]:
        results = []
        for url in extract_pdf_links(html, base_url):
            results.append(await self.inspect(url))

        failing = sum(1 for r in results if r.error is None and not r.is_accessible)
        logger.info(f"Checked {len(results)} PDFs on {base_url}, {failing} inaccessible")
        return results


def build_pdf_finding(results: List[PdfCheckResult], page_url: Optional[str] = None) -> Optional[Finding]:
    """Synthesize one document-level finding for inspected PDFs lacking tags."""
    inaccessible = [r for r in results if r.error is None and not r.is_accessible]
    if not inaccessible:
        return None

    names = [r.filename for r in inaccessible[:MAX_LISTED_FILENAMES]]
    details = f"Affected files: {', '.join(names)}"
    if len(inaccessible) > MAX_LISTED_FILENAMES:
        details += f" and {len(inaccessible) - MAX_LISTED_FILENAMES} more"

    return enrich(
        "inaccessible-pdfs",
        message=f"{len(inaccessible)} PDF document(s) are not accessible to screen readers",
        severity="critical" if len(inaccessible) >= CRITICAL_PDF_THRESHOLD else "high",
        page_url=page_url,
        details=details,
        count=len(inaccessible),
    )
