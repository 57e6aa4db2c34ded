from typing import List, Optional, Tuple
from urllib.parse import urljoin, urlparse, urlunparse

from bs4 import BeautifulSoup

from app.platform.config import settings
from app.platform.logger import get_logger

logger = get_logger(__name__)

NON_NAVIGABLE_PREFIXES = ("#", "javascript:", "mailto:", "tel:", "sms:", "data:")

# Patient-facing paths, highest regulatory exposure first
PRIORITY_PATTERNS = [
    "appointment",
    "schedule",
    "book",
    "new-patient",
    "patient",
    "intake",
    "form",
    "portal",
    "contact",
    "insurance",
    "billing",
    "provider",
    "doctor",
    "physician",
    "telehealth",
    "location",
    "services",
]


class LinkDiscoveryService:

    @staticmethod
    def _origin(url: str) -> Tuple[str, str, Optional[int]]:
        parsed = urlparse(url)
        scheme = parsed.scheme.lower()
        default_port = 443 if scheme == "https" else 80
        return scheme, (parsed.hostname or "").lower(), parsed.port or default_port

    @staticmethod
    def _is_same_origin(url: str, base_url: str) -> bool:
        """
        Check that a URL shares scheme, host and port with the base.
        Subdomains count as different origins.
        """
        parsed = urlparse(url)
        if not parsed.scheme or not parsed.netloc:
            return False
        try:
            return LinkDiscoveryService._origin(url) == LinkDiscoveryService._origin(base_url)
        except ValueError:
            return False

    @staticmethod
    def _dedupe_key(url: str) -> str:
        parsed = urlparse(url)
        path = parsed.path.rstrip("/") or "/"
        return f"{parsed.scheme}://{parsed.netloc.lower()}{path}"

    @staticmethod
    def _clean(url: str) -> str:
        parsed = urlparse(url)
        return urlunparse((parsed.scheme, parsed.netloc.lower(), parsed.path or "/", "", "", ""))

    @staticmethod
    def priority_of(url: str) -> Optional[int]:
        path = urlparse(url).path.lower()
        for index, pattern in enumerate(PRIORITY_PATTERNS):
            if pattern in path:
                return index
        return None

    @staticmethod
    def extract_links(html: str, base_url: str) -> List[str]:
        """All distinct same-origin links in discovery order, homepage excluded."""
        soup = BeautifulSoup(html or "", "html.parser")
        home_key = LinkDiscoveryService._dedupe_key(base_url)
        seen = {home_key}
        links = []

        for anchor in soup.find_all("a", href=True):
            href = anchor["href"].strip()
            if not href or href.lower().startswith(NON_NAVIGABLE_PREFIXES):
                continue
            absolute = urljoin(base_url, href)
            if not LinkDiscoveryService._is_same_origin(absolute, base_url):
                continue
            if urlparse(absolute).path.lower().endswith(".pdf"):
                continue
            key = LinkDiscoveryService._dedupe_key(absolute)
            if key in seen:
                continue
            seen.add(key)
            links.append(LinkDiscoveryService._clean(absolute))

        return links

    @staticmethod
    def discover_links(html: str, base_url: str, limit: int = settings.MAX_DISCOVERED_LINKS) -> List[str]:
        """
        Same-origin links ranked by likely patient-facing relevance.

        Args:
            html: Root page markup
            base_url: URL the root page was served from, after redirects
            limit: Maximum number of non-homepage URLs to return

        Returns:
            Up to ``limit`` URLs; priority matches first, the rest in discovery order
        """
        links = LinkDiscoveryService.extract_links(html, base_url)
        prioritized = []
        others = []
        for position, url in enumerate(links):
            priority = LinkDiscoveryService.priority_of(url)
            if priority is None:
                others.append(url)
            else:
                prioritized.append((priority, position, url))

        prioritized.sort()
        ranked = [url for _, _, url in prioritized] + others
        logger.info(f"Discovered {len(links)} same-origin links on {base_url}, {len(prioritized)} patient-facing")
        return ranked[:limit]
