import pytest

from app.features.scan.services.audit.base import AuditFailed
from app.features.scan.services.audit.markup_auditor import MarkupAuditor
from app.features.scan.services.audit.page_fetcher import FetchedPage
from app.features.scan.services.enrichment.finding_enricher import findings_from_report

CLEAN_PAGE = """
<html lang="en">
<head><title>Sunrise Family Clinic</title></head>
<body>
  <h1>Sunrise Family Clinic</h1>
  <img src="/logo.png" alt="Sunrise logo">
  <label for="name">Name</label><input id="name" type="text">
  <label>Phone <input type="tel"></label>
  <input type="email" aria-label="Email">
  <input type="submit" value="Send">
  <a href="/contact">Contact us</a>
  <a href="/"><img src="/home.png" alt="Home"></a>
</body>
</html>
"""


def _page(html, url="https://sunriseclinic.com"):
    return FetchedPage(url=url, final_url=url, status=200, html=html, load_time=0.1)


async def _findings(html, url="https://sunriseclinic.com"):
    report = await MarkupAuditor().audit(url, _page(html, url))
    return report, findings_from_report(report)


async def test_missing_lang_and_alt_over_https():
    report, findings = await _findings('<html><body><h1>Hi</h1><img src="/a.png"></body></html>')
    by_check = {f.check: f for f in findings}

    assert by_check["Language Attribute"].severity == "medium"
    assert by_check["Image Alt Text"].severity == "high"
    assert by_check["Image Alt Text"].count == 1
    assert by_check["Image Alt Text"].elements == ['<img src="/a.png"/>']
    assert "SSL/HTTPS" not in by_check


async def test_clean_page_has_no_findings():
    report, findings = await _findings(CLEAN_PAGE)

    assert findings == []
    assert report.score == 1.0
    assert report.page_title == "Sunrise Family Clinic"


async def test_http_site_is_critical():
    report, findings = await _findings(CLEAN_PAGE, url="http://sunriseclinic.com")

    assert [f.id for f in findings] == ["is-on-https"]
    assert findings[0].severity == "critical"
    assert findings[0].message == "Website is not using HTTPS"
    assert report.score == 0.8


async def test_unlabelled_inputs_and_empty_links():
    html = """
    <html lang="en"><head><title>Intake</title></head><body><h1>Intake</h1>
    <input type="text" name="first">
    <input name="dob">
    <input type="hidden" name="csrf">
    <a href="/next"></a>
    <a href="/next"><img src="/arrow.png" alt=""></a>
    </body></html>
    """
    report, findings = await _findings(html)
    by_id = {f.id: f for f in findings}

    assert by_id["label"].count == 2
    assert by_id["label"].severity == "high"
    assert by_id["link-name"].count == 2
    # The empty-alt arrow image also counts as missing alt text
    assert by_id["image-alt"].count == 1
    assert report.score == pytest.approx(0.7)


async def test_missing_title_and_heading():
    report, findings = await _findings('<html lang="en"><body><p>Hello</p></body></html>')
    severities = {f.id: f.severity for f in findings}

    assert severities == {"page-has-heading-one": "medium", "document-title": "low"}
    assert report.score == pytest.approx(0.93)


async def test_requires_fetched_page():
    with pytest.raises(AuditFailed):
        await MarkupAuditor().audit("https://sunriseclinic.com")
