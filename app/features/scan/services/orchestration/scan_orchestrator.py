import enum
import time
from typing import Callable, List, Optional, Tuple

import httpx

from app.features.scan.schemas.audit import AuditReport
from app.features.scan.schemas.findings import Finding, PageResult, PdfCheckResult, VendorWarning
from app.features.scan.schemas.scan import ScanOutcome
from app.features.scan.services.audit.base import AuditCapability, AuditFailed, is_timeout
from app.features.scan.services.audit.markup_auditor import MarkupAuditor
from app.features.scan.services.audit.page_fetcher import FetchedPage, PageFetcher
from app.features.scan.services.discovery.link_discovery import LinkDiscoveryService
from app.features.scan.services.enrichment.finding_enricher import findings_from_report
from app.features.scan.services.pdf.pdf_inspector import PdfInspector, build_pdf_finding
from app.features.scan.services.utils.aggregator import (
    build_teaser,
    calculate_summary,
    clamp_score,
    merge_page_findings,
    overall_score,
    sort_findings,
)
from app.features.scan.services.vendors.vendor_detector import build_vendor_finding, detect_vendors
from app.platform.config import settings
from app.platform.exceptions import RootFetchFailed, SubScanFailed
from app.platform.logger import get_logger

logger = get_logger(__name__)


class ScanState(str, enum.Enum):
    """Scan pipeline state machine"""
    idle = "idle"
    scanning_root = "scanning_root"
    crawl_planning = "crawl_planning"
    scanning_subpages = "scanning_subpages"
    aggregating = "aggregating"
    done = "done"
    errored = "errored"


class ScanOrchestrator:
    """
    Runs one scan: root page, crawl planning, budgeted sub-pages, aggregation.

    Outbound calls are sequential. The wall-clock budget is measured from the
    start of ``run`` with the injected clock; once the hard ceiling passes no
    new sub-page audit starts, but one already in flight is allowed to finish.
    Build a new instance per scan; ``state`` belongs to a single run.
    """

    def __init__(
        self,
        fetcher: Optional[PageFetcher] = None,
        auditor: Optional[AuditCapability] = None,
        markup_auditor: Optional[MarkupAuditor] = None,
        pdf_inspector: Optional[PdfInspector] = None,
        clock: Callable[[], float] = time.monotonic,
        soft_budget: float = settings.SCAN_SOFT_BUDGET_SECONDS,
        hard_budget: float = settings.SCAN_HARD_BUDGET_SECONDS,
        max_subpages: int = settings.MAX_SUBPAGES,
        max_links: int = settings.MAX_DISCOVERED_LINKS,
    ):
        self.fetcher = fetcher or PageFetcher()
        self.markup_auditor = markup_auditor or MarkupAuditor()
        self.auditor = auditor or self.markup_auditor
        self.pdf_inspector = pdf_inspector or PdfInspector()
        self.clock = clock
        self.soft_budget = soft_budget
        self.hard_budget = hard_budget
        self.max_subpages = max_subpages
        self.max_links = max_links
        self.state = ScanState.idle
        self._started_at = 0.0

    def _transition(self, state: ScanState):
        logger.debug(f"Scan state {self.state.value} -> {state.value}")
        self.state = state

    def elapsed(self) -> float:
        return self.clock() - self._started_at

    async def _audit(self, url: str, page: Optional[FetchedPage]) -> Tuple[AuditReport, int]:
        """
        Primary audit merged with the local markup baseline.

        Baseline audits are only added for rule ids the primary did not report.
        The page score always comes from the primary.
        """
        primary = await self.auditor.audit(url, page)
        audits = dict(primary.audits)
        page_title = primary.page_title

        if page is not None and self.auditor is not self.markup_auditor:
            baseline = self.markup_auditor.run_checks(page)
            for rule_id, raw in baseline.audits.items():
                audits.setdefault(rule_id, raw)
            page_title = page_title or baseline.page_title

        merged = AuditReport(url=url, score=primary.score, audits=audits, page_title=page_title)
        return merged, clamp_score(primary.score * 100)

    @staticmethod
    def _page_result(report: AuditReport, score: int, extra: Optional[List[Finding]] = None) -> PageResult:
        # Synthesized findings go first; the stable sort keeps them ahead within a severity
        findings = sort_findings(list(extra or []) + findings_from_report(report, report.url))
        return PageResult(
            page_url=report.url,
            page_title=report.page_title,
            accessibility_score=score,
            findings=findings,
            summary=calculate_summary(findings, score),
        )

    async def _scan_root(self, url: str) -> Tuple[FetchedPage, AuditReport, int]:
        self._transition(ScanState.scanning_root)
        try:
            page = await self.fetcher.fetch(url)
            report, score = await self._audit(url, page)
        except (httpx.HTTPError, AuditFailed) as e:
            self._transition(ScanState.errored)
            reason = str(e) or type(e).__name__
            logger.error(f"Root scan failed for {url}: {reason}")
            raise RootFetchFailed(reason, timed_out=is_timeout(e)) from e
        return page, report, score

    async def _plan_crawl(self, page: FetchedPage) -> Tuple[List[str], List[PdfCheckResult], List[VendorWarning]]:
        """
        Link discovery, PDF inspection and vendor detection, each isolated from the others.

        Relative references and the same-origin check use the URL the root was
        served from, so a redirected or path-style root still yields its sub-pages.
        """
        self._transition(ScanState.crawl_planning)
        url = page.final_url or page.url
        links: List[str] = []
        pdf_results: List[PdfCheckResult] = []
        vendor_warnings: List[VendorWarning] = []

        try:
            links = LinkDiscoveryService.discover_links(page.html, url, limit=self.max_links)
        except Exception as e:
            logger.warning(SubScanFailed(f"Link discovery failed for {url}: {e}"))

        try:
            pdf_results = await self.pdf_inspector.inspect_all(page.html, url)
        except Exception as e:
            logger.warning(SubScanFailed(f"PDF inspection failed for {url}: {e}"))

        try:
            vendor_warnings = detect_vendors(page.html)
        except Exception as e:
            logger.warning(SubScanFailed(f"Vendor detection failed for {url}: {e}"))

        return links, pdf_results, vendor_warnings

    async def _scan_subpages(self, links: List[str]) -> List[PageResult]:
        if self.elapsed() > self.soft_budget:
            logger.info(f"Skipping sub-pages, {self.elapsed():.1f}s elapsed after root audit")
            return []

        self._transition(ScanState.scanning_subpages)
        results = []
        for link in links[: self.max_subpages]:
            if self.elapsed() > self.hard_budget:
                logger.warning(f"Scan budget of {self.hard_budget}s exhausted, {len(results)} sub-page(s) audited")
                break
            try:
                page = await self.fetcher.fetch(link)
                if page.status >= 400:
                    logger.warning(SubScanFailed(f"Sub-page {link} skipped: HTTP {page.status}"))
                    continue
                report, score = await self._audit(link, page)
            except (httpx.HTTPError, AuditFailed) as e:
                logger.warning(SubScanFailed(f"Sub-page {link} skipped: {e}"))
                continue
            results.append(self._page_result(report, score))
        return results

    async def run(self, url: str) -> ScanOutcome:
        """
        Scan ``url`` (already normalized).

        Raises:
            RootFetchFailed: The root page could not be fetched or audited.
        """
        self._started_at = self.clock()
        page, root_report, root_score = await self._scan_root(url)
        links, pdf_results, vendor_warnings = await self._plan_crawl(page)

        synthesized = [
            finding
            for finding in (
                build_pdf_finding(pdf_results, page_url=url),
                build_vendor_finding(vendor_warnings, page_url=url),
            )
            if finding is not None
        ]
        page_results = [self._page_result(root_report, root_score, synthesized)]
        page_results.extend(await self._scan_subpages(links))

        self._transition(ScanState.aggregating)
        findings = merge_page_findings(page_results)
        score = overall_score(page_results)
        outcome = ScanOutcome(
            website_url=url,
            http_status=page.status,
            scan_duration_ms=int(self.elapsed() * 1000),
            findings=findings,
            summary=calculate_summary(findings, score),
            page_results=page_results,
            pdf_results=pdf_results,
            vendor_warnings=vendor_warnings,
            overall_score=score,
            teaser=build_teaser(findings, score),
        )
        self._transition(ScanState.done)
        logger.info(
            f"Scanned {url}: {outcome.pages_scanned} page(s), {len(findings)} finding(s), "
            f"score {score}, {outcome.scan_duration_ms}ms"
        )
        return outcome
