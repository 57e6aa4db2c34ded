import httpx
import pytest

from app.features.scan.schemas.audit import AuditReport, RawAudit
from app.features.scan.services.audit.base import AuditFailed
from app.features.scan.services.audit.markup_auditor import MarkupAuditor
from app.features.scan.services.audit.page_fetcher import PageFetcher
from app.features.scan.services.orchestration.scan_orchestrator import ScanOrchestrator, ScanState
from app.features.scan.services.pdf.pdf_inspector import PdfInspector
from app.platform.exceptions import RootFetchFailed
from conftest import SITE, CountingAuditor, FakeClock, build_orchestrator, mock_site, site_routes


async def test_full_scan_of_root_and_priority_subpages():
    transport = mock_site()
    auditor = CountingAuditor()
    orchestrator = build_orchestrator(transport, auditor=auditor)

    outcome = await orchestrator.run(SITE)

    assert orchestrator.state == ScanState.done
    assert auditor.calls == [
        SITE,
        "https://sunriseclinic.com/appointments",
        "https://sunriseclinic.com/patient-forms/",
    ]
    assert outcome.pages_scanned == 3
    assert outcome.http_status == 200
    assert [p.page_title for p in outcome.page_results] == ["Sunrise Family Clinic", "Appointments", "Patient Forms"]

    root = outcome.page_results[0]
    assert [f.id for f in root.findings] == ["inaccessible-pdfs", "image-alt", "third-party-vendors"]
    assert root.findings[0].severity == "high"
    assert [w.vendor for w in outcome.vendor_warnings] == ["Zocdoc"]
    assert len(outcome.pdf_results) == 1
    assert outcome.pdf_results[0].is_accessible is False

    assert outcome.summary.total == len(outcome.findings)
    assert outcome.teaser.top_issue == root.findings[0].message
    # Form-label finding fires on both sub-pages but is one distinct rule
    assert outcome.teaser.issue_count == 4
    assert outcome.overall_score == round(sum(p.accessibility_score for p in outcome.page_results) / 3)


async def test_subpages_skipped_after_soft_budget():
    clock = FakeClock()
    auditor = CountingAuditor(clock=clock, seconds_per_audit=46)
    orchestrator = build_orchestrator(mock_site(), auditor=auditor, clock=clock)

    outcome = await orchestrator.run(SITE)

    assert outcome.pages_scanned == 1
    assert auditor.calls == [SITE]
    assert outcome.scan_duration_ms == 46000


async def test_hard_ceiling_stops_new_subpage_audits():
    clock = FakeClock()
    auditor = CountingAuditor(clock=clock, seconds_per_audit=30)
    orchestrator = build_orchestrator(mock_site(), auditor=auditor, clock=clock, soft_budget=100)

    outcome = await orchestrator.run(SITE)

    # Root ends at 30s, first sub-page starts at 30s and ends at 60s, past the 45s ceiling
    assert outcome.pages_scanned == 2
    assert len(auditor.calls) == 2


async def test_root_fetch_timeout():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    orchestrator = build_orchestrator(httpx.MockTransport(handler))

    with pytest.raises(RootFetchFailed) as exc_info:
        await orchestrator.run(SITE)

    assert exc_info.value.timed_out is True
    assert exc_info.value.message == "Could not fetch website: Request timed out"
    assert orchestrator.state == ScanState.errored


async def test_root_audit_failure_aborts_scan():
    class BrokenAuditor(CountingAuditor):
        async def audit(self, url, page=None):
            raise AuditFailed("Audit service returned 503")

    orchestrator = build_orchestrator(mock_site(), auditor=BrokenAuditor())

    with pytest.raises(RootFetchFailed) as exc_info:
        await orchestrator.run(SITE)

    assert exc_info.value.message == "Could not fetch website: Audit service returned 503"


async def test_failing_subpage_and_pdf_are_skipped():
    routes = site_routes()
    routes.pop("/docs/intake.pdf")

    def handler(request):
        if request.url.path == "/patient-forms/":
            raise httpx.ConnectError("connection refused", request=request)
        factory = routes.get(request.url.path)
        return factory() if factory else httpx.Response(404)

    auditor = CountingAuditor()
    outcome = await build_orchestrator(httpx.MockTransport(handler), auditor=auditor).run(SITE)

    assert [p.page_url for p in outcome.page_results] == [SITE, "https://sunriseclinic.com/appointments"]
    assert outcome.pdf_results[0].error == "HTTP 404"
    assert "inaccessible-pdfs" not in {f.id for f in outcome.findings}


async def test_crawl_planning_failures_are_isolated(monkeypatch):
    def explode(*args, **kwargs):
        raise RuntimeError("parser blew up")

    monkeypatch.setattr(
        "app.features.scan.services.orchestration.scan_orchestrator.detect_vendors", explode
    )
    outcome = await build_orchestrator(mock_site()).run(SITE)

    assert outcome.vendor_warnings == []
    assert len(outcome.pdf_results) == 1
    assert outcome.pages_scanned == 3


async def test_primary_report_is_merged_with_markup_baseline():
    class RemoteAuditor:
        async def audit(self, url, page=None):
            return AuditReport(
                url=url,
                score=0.55,
                audits={"image-alt": RawAudit(id="image-alt", title="Images lack alt", score=0)},
            )

    transport = mock_site()
    orchestrator = ScanOrchestrator(
        fetcher=PageFetcher(transport=transport),
        auditor=RemoteAuditor(),
        markup_auditor=MarkupAuditor(),
        pdf_inspector=PdfInspector(transport=transport),
        clock=FakeClock(),
        max_subpages=0,
    )

    outcome = await orchestrator.run(SITE)
    root = outcome.page_results[0]

    assert root.accessibility_score == 55
    assert root.page_title == "Sunrise Family Clinic"
    image_alt = [f for f in root.findings if f.id == "image-alt"]
    # The remote result wins; its severity comes from the score formula
    assert len(image_alt) == 1
    assert image_alt[0].message == "Images lack alt"
    assert image_alt[0].severity == "medium"


async def test_redirected_root_keeps_same_site_subpages():
    www = "https://www.sunriseclinic.com"
    routes = site_routes()

    def handler(request):
        if request.url.host == "sunriseclinic.com":
            return httpx.Response(301, headers={"Location": f"{www}/"})
        if request.url.path == "/":
            return httpx.Response(
                200,
                html=f'<html lang="en"><title>Home</title><h1>Home</h1>'
                f'<a href="{www}/appointments">Book</a><a href="docs/intake.pdf">Intake</a></html>',
            )
        factory = routes.get(request.url.path)
        return factory() if factory else httpx.Response(404)

    auditor = CountingAuditor()
    outcome = await build_orchestrator(httpx.MockTransport(handler), auditor=auditor).run(SITE)

    assert outcome.pages_scanned == 2
    assert auditor.calls == [SITE, f"{www}/appointments"]
    assert [r.url for r in outcome.pdf_results] == [f"{www}/docs/intake.pdf"]


async def test_error_status_subpage_is_skipped():
    routes = site_routes()
    routes["/appointments"] = lambda: httpx.Response(404, html="<html><img src=a.png></html>")
    routes["/patient-forms/"] = lambda: httpx.Response(500, text="Internal Server Error")

    auditor = CountingAuditor()
    outcome = await build_orchestrator(mock_site(routes), auditor=auditor).run(SITE)

    assert auditor.calls == [SITE]
    assert outcome.pages_scanned == 1
    assert outcome.overall_score == outcome.page_results[0].accessibility_score
