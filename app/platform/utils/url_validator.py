from typing import Tuple
from urllib.parse import urlparse

from app.platform.exceptions import InvalidUrl


def normalize_url(url: str) -> str:
    """
    Canonicalize a user supplied site identifier.

    Trims and lower-cases the input, prefixes ``https://`` when no http(s)
    scheme is given and strips trailing slashes. Raises ``InvalidUrl`` when the
    result is not an absolute http(s) URL with a plausible host.
    """
    if not isinstance(url, str) or not url.strip():
        raise InvalidUrl("Website URL is required")

    normalized = url.strip().lower()
    if not normalized.startswith(("http://", "https://")):
        normalized = f"https://{normalized}"

    # rstrip keeps normalize(normalize(u)) == normalize(u) for "...//" inputs
    normalized = normalized.rstrip("/")

    parsed = urlparse(normalized)
    if parsed.scheme not in ("http", "https"):
        raise InvalidUrl(f"Invalid URL scheme: {parsed.scheme} (must be http or https)")

    host = parsed.hostname
    if not parsed.netloc or not host:
        raise InvalidUrl("Invalid URL format: missing domain")
    if any(ch.isspace() for ch in normalized):
        raise InvalidUrl("Invalid URL format")
    if "." not in host and host != "localhost":
        raise InvalidUrl("Invalid URL format: missing domain")
    try:
        parsed.port
    except ValueError:
        raise InvalidUrl("Invalid URL format: bad port")

    return normalized


def validate_url(url: str) -> Tuple[bool, str, str]:
    try:
        return True, normalize_url(url), ""
    except InvalidUrl as e:
        return False, "", e.message
