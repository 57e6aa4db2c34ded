from datetime import datetime
from typing import Optional

from app.features.reports.schemas.unlock import UnlockedReport
from app.features.scan.services.utils.aggregator import sort_findings
from app.platform.config import settings
from app.platform.logger import get_logger
from app.platform.services.email import env, send_email

logger = get_logger(__name__)

SEVERITY_COLORS = {"critical": "#dc2626", "high": "#ea580c", "medium": "#ca8a04", "low": "#2563eb"}
WCAG_LEVEL_COLORS = {"A": "#059669", "AA": "#7c3aed", "AAA": "#4f46e5"}


def report_score(report: UnlockedReport) -> int:
    return report.summary.accessibility_score or 0


def report_subject(report: UnlockedReport) -> str:
    total = report.summary.total
    issue_text = "1 issue" if total == 1 else f"{total} issues"
    return f"Accessibility Report: Score {report_score(report)}/100 - {issue_text} on {report.website_url}"


def render_report(report: UnlockedReport, scanned_at: Optional[datetime] = None) -> str:
    template = env.get_template("scan_report.html")
    return template.render(
        report=report,
        findings=sort_findings(report.findings),
        score=report_score(report),
        scan_date=(scanned_at or datetime.utcnow()).strftime("%B %d, %Y"),
        deadline=settings.COMPLIANCE_DEADLINE,
        severity_colors=SEVERITY_COLORS,
        wcag_colors=WCAG_LEVEL_COLORS,
        app_name=settings.APP_NAME,
        landing_page_url=settings.LANDING_PAGE_URL,
    )


def send_report_email(to_email: str, report: UnlockedReport, scanned_at: Optional[datetime] = None) -> bool:
    """Used for: Report Unlock"""
    html_content = render_report(report, scanned_at)
    sent = send_email(to_email, report_subject(report), html_content)
    if sent:
        logger.info(f"Report for {report.website_url} sent to {to_email}")
    return sent
