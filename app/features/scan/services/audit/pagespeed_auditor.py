from typing import Any, Dict, Optional

import httpx

from app.features.scan.schemas.audit import AuditReport, RawAudit
from app.features.scan.services.audit.base import AuditFailed
from app.features.scan.services.audit.page_fetcher import FetchedPage
from app.platform.config import settings
from app.platform.logger import get_logger
from app.platform.services.http_client import client_for

logger = get_logger(__name__)


class PageSpeedAuditor:
    """Lighthouse accessibility audit through the PageSpeed Insights API."""

    def __init__(
        self,
        api_url: str = settings.PAGESPEED_API_URL,
        api_key: Optional[str] = settings.PAGESPEED_API_KEY,
        strategy: str = settings.PAGESPEED_STRATEGY,
        timeout: float = settings.AUDIT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = api_url
        self.api_key = api_key
        self.strategy = strategy
        self.timeout = timeout
        self.transport = transport

    def _params(self, url: str) -> Dict[str, str]:
        params = {"url": url, "category": "ACCESSIBILITY", "strategy": self.strategy}
        if self.api_key:
            params["key"] = self.api_key
        return params

    async def audit(self, url: str, page: Optional[FetchedPage] = None) -> AuditReport:
        try:
            async with client_for(self.timeout, transport=self.transport) as client:
                response = await client.get(self.api_url, params=self._params(url))
                response.raise_for_status()
                payload = response.json()
        except httpx.TimeoutException as e:
            logger.warning(f"PageSpeed audit timed out for {url}")
            raise AuditFailed("Audit request timed out", timed_out=True) from e
        except httpx.HTTPStatusError as e:
            logger.error(f"PageSpeed audit for {url} returned {e.response.status_code}")
            raise AuditFailed(f"Audit service returned {e.response.status_code}") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"PageSpeed audit failed for {url}: {e}")
            raise AuditFailed(f"Audit service error: {e}") from e

        return self.parse_report(url, payload)

    @staticmethod
    def parse_report(url: str, payload: Dict[str, Any]) -> AuditReport:
        lighthouse = payload.get("lighthouseResult") or {}
        if lighthouse.get("runtimeError"):
            message = lighthouse["runtimeError"].get("message", "Lighthouse runtime error")
            raise AuditFailed(message)

        category = (lighthouse.get("categories") or {}).get("accessibility") or {}
        score = category.get("score")
        if score is None:
            raise AuditFailed("Audit response has no accessibility score")

        audit_refs = {ref.get("id") for ref in category.get("auditRefs") or [] if ref.get("id")}
        audits = {}
        for rule_id, raw in (lighthouse.get("audits") or {}).items():
            # The API returns every category's audits when refs are absent
            if audit_refs and rule_id not in audit_refs:
                continue
            audits[rule_id] = RawAudit.model_validate({"id": rule_id, **raw})

        return AuditReport(
            url=url,
            score=max(0.0, min(1.0, float(score))),
            audits=audits,
        )
