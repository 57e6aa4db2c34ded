from typing import Optional

import httpx

from app.features.reports.schemas.unlock import UnlockedReport
from app.platform.config import settings
from app.platform.logger import get_logger
from app.platform.services.http_client import client_for

logger = get_logger(__name__)


def is_hot_lead(score: int, threshold: int = settings.HOT_LEAD_SCORE_THRESHOLD) -> bool:
    return score < threshold


def build_lead_message(email: str, report: UnlockedReport) -> str:
    summary = report.summary
    score = summary.accessibility_score or 0
    header = (
        ":fire: HOT LEAD :fire: High Potential Client!"
        if is_hot_lead(score)
        else "New scan report unlocked!"
    )
    return (
        f"{header}\n"
        f"*Email:* {email}\n"
        f"*Website:* {report.website_url}\n"
        f"*Score:* {score}/100\n"
        f"*Pages:* {report.pages_scanned or 1}\n"
        f"*Issues:* {summary.critical} critical, {summary.high} high, "
        f"{summary.medium} medium, {summary.low} low"
    )


async def notify_lead(
    email: str,
    report: UnlockedReport,
    webhook_url: Optional[str] = settings.SLACK_WEBHOOK_URL,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> bool:
    """Post an unlocked-report lead to the sales webhook. Never raises."""
    if not webhook_url:
        return False

    try:
        async with client_for(settings.WEBHOOK_TIMEOUT, transport=transport) as client:
            response = await client.post(webhook_url, json={"text": build_lead_message(email, report)})
            response.raise_for_status()
    except httpx.HTTPError as e:
        logger.error(f"Lead notification failed for {report.website_url}: {e}")
        return False

    logger.info(f"Lead notification sent for {report.website_url}")
    return True
