from fastapi import Request

from app.platform.logger import get_logger

logger = get_logger(__name__)

UNKNOWN_CLIENT = "unknown"


def get_client_identifier(request: Request) -> str:
    """Client origin for quota accounting, taken from proxy headers."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        first_hop = forwarded_for.split(",")[0].strip()
        if first_hop:
            return first_hop

    real_ip = (request.headers.get("x-real-ip") or "").strip()
    if real_ip:
        return real_ip

    logger.debug("No proxy headers on request, using fallback client identifier")
    return UNKNOWN_CLIENT
