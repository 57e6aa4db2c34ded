from typing import Dict, List, Optional

from bs4 import BeautifulSoup

from app.features.scan.schemas.audit import AuditReport, RawAudit
from app.features.scan.services.audit.base import AuditFailed
from app.features.scan.services.audit.page_fetcher import FetchedPage
from app.platform.logger import get_logger

logger = get_logger(__name__)

TEXT_INPUT_TYPES = {"text", "email", "tel", "password", "search", "url", "number"}
SEVERITY_PENALTY = {"critical": 20, "high": 10, "medium": 5, "low": 2}
MAX_SNIPPET_LENGTH = 200


def _snippet(tag) -> Dict[str, Dict[str, str]]:
    html = str(tag)
    if len(html) > MAX_SNIPPET_LENGTH:
        html = html[:MAX_SNIPPET_LENGTH] + "..."
    return {"node": {"snippet": html}}


def _passed(rule_id: str, title: str) -> RawAudit:
    return RawAudit(id=rule_id, title=title, score=1)


def _failed(rule_id: str, title: str, severity: str, nodes: Optional[list] = None) -> RawAudit:
    details = {"items": [_snippet(n) for n in nodes]} if nodes else None
    return RawAudit(id=rule_id, title=title, score=0, severity=severity, details=details)


def _has_accessible_name(tag) -> bool:
    if tag.get_text(strip=True):
        return True
    if (tag.get("aria-label") or "").strip() or (tag.get("title") or "").strip():
        return True
    return any((img.get("alt") or "").strip() for img in tag.find_all("img"))


def check_https(final_url: str) -> RawAudit:
    if final_url.lower().startswith("https://"):
        return _passed("is-on-https", "Uses HTTPS")
    return _failed("is-on-https", "Website is not using HTTPS", "critical")


def check_image_alt(soup: BeautifulSoup) -> RawAudit:
    # Empty alt is flagged too: decorative images are rare on practice sites
    missing = [img for img in soup.find_all("img") if not (img.get("alt") or "").strip()]
    if not missing:
        return _passed("image-alt", "Images have alt text")
    return _failed("image-alt", f"{len(missing)} image(s) missing alt text", "high", missing)


def check_html_lang(soup: BeautifulSoup) -> RawAudit:
    html_tag = soup.find("html")
    lang = (html_tag.get("lang") or "").strip() if html_tag else ""
    if len(lang) >= 2 and lang[:2].isalpha():
        return _passed("html-has-lang", "HTML element has a lang attribute")
    return _failed("html-has-lang", "Missing language attribute on HTML element", "medium")


def check_form_labels(soup: BeautifulSoup) -> RawAudit:
    labelled_ids = {label.get("for") for label in soup.find_all("label") if label.get("for")}
    unlabelled = []
    for field in soup.find_all("input"):
        field_type = (field.get("type") or "text").lower()
        if field_type not in TEXT_INPUT_TYPES:
            continue
        if field.get("id") and field.get("id") in labelled_ids:
            continue
        if (field.get("aria-label") or "").strip() or field.get("aria-labelledby"):
            continue
        if field.find_parent("label") is not None:
            continue
        unlabelled.append(field)

    if not unlabelled:
        return _passed("label", "Form inputs have labels")
    return _failed("label", f"{len(unlabelled)} form input(s) may be missing labels", "high", unlabelled)


def check_heading_one(soup: BeautifulSoup) -> RawAudit:
    if soup.find("h1") is not None:
        return _passed("page-has-heading-one", "Page has an H1 heading")
    return _failed("page-has-heading-one", "No H1 heading found", "medium")


def check_document_title(soup: BeautifulSoup) -> RawAudit:
    title = soup.find("title")
    if title is not None and title.get_text(strip=True):
        return _passed("document-title", "Page has a title")
    return _failed("document-title", "Missing or empty page title", "low")


def check_link_names(soup: BeautifulSoup) -> RawAudit:
    empty = [a for a in soup.find_all("a", href=True) if a["href"].strip() and not _has_accessible_name(a)]
    if not empty:
        return _passed("link-name", "Links have discernible names")
    return _failed("link-name", f"{len(empty)} empty link(s) found", "high", empty)


def score_from(audits: List[RawAudit]) -> float:
    score = 100
    for audit in audits:
        if audit.is_finding and audit.severity:
            score -= SEVERITY_PENALTY[audit.severity]
    return max(score, 0) / 100


class MarkupAuditor:
    """
    Baseline accessibility checks run locally over fetched markup.

    Used as the primary audit capability when no remote engine is configured,
    and as a supplement to the remote engine for rules it did not report.
    """

    def run_checks(self, page: FetchedPage) -> AuditReport:
        soup = BeautifulSoup(page.html or "", "html.parser")
        audits = [
            check_https(page.final_url),
            check_image_alt(soup),
            check_html_lang(soup),
            check_form_labels(soup),
            check_heading_one(soup),
            check_document_title(soup),
            check_link_names(soup),
        ]
        title_tag = soup.find("title")
        return AuditReport(
            url=page.url,
            score=score_from(audits),
            audits={audit.id: audit for audit in audits},
            page_title=title_tag.get_text(strip=True) if title_tag else None,
        )

    async def audit(self, url: str, page: Optional[FetchedPage] = None) -> AuditReport:
        if page is None:
            raise AuditFailed(f"Markup audit for {url} needs fetched page content")
        report = self.run_checks(page)
        logger.info(f"Markup audit for {url}: score {report.score:.2f}")
        return report
