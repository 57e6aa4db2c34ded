from typing import Iterator, List, Optional, Tuple

from bs4 import BeautifulSoup

from app.features.scan.schemas.findings import Finding, VendorWarning
from app.features.scan.services.enrichment.finding_enricher import enrich
from app.features.scan.services.vendors.vendor_catalog import VENDOR_CATALOG, VendorSignature
from app.platform.config import settings
from app.platform.logger import get_logger

logger = get_logger(__name__)

LIABILITY_WARNING = (
    "Under Section 504 of the Rehabilitation Act, your practice is responsible for the "
    "accessibility of third-party tools patients must use, even when {vendor} hosts them. "
    "If this {category} tool is not accessible, the compliance risk falls on you."
)
RECOMMENDED_ACTION = (
    "Request a VPAT (Voluntary Product Accessibility Template) or ACR (Accessibility "
    "Conformance Report) from {vendor} documenting WCAG 2.1 AA conformance."
)


def build_vpat_request_email(vendor: str, deadline: str = settings.COMPLIANCE_DEADLINE) -> str:
    return (
        f"Subject: Request for Accessibility Conformance Report (VPAT) - {vendor}\n"
        f"\n"
        f"Hello {vendor} team,\n"
        f"\n"
        f"Our practice uses {vendor} on our website to serve patients. Under the updated "
        f"Section 504 rule, healthcare providers must ensure the digital services they offer "
        f"conform to WCAG 2.1 Level AA by {deadline}.\n"
        f"\n"
        f"Please send us your current VPAT or Accessibility Conformance Report (ACR) for the "
        f"product we use, including:\n"
        f"- The WCAG 2.1 AA success criteria you support, partially support or do not support\n"
        f"- Your remediation timeline for any known gaps\n"
        f"- A contact for accessibility questions\n"
        f"\n"
        f"Thank you,\n"
        f"[Your Name]\n"
        f"[Practice Name]"
    )


def _candidate_sources(soup: BeautifulSoup) -> Iterator[Tuple[str, str]]:
    """(value, detected_via) pairs in document order."""
    for tag in soup.find_all(True):
        if tag.name == "iframe" and tag.get("src"):
            yield tag["src"], "iframe"
        elif tag.name == "script" and tag.get("src"):
            yield tag["src"], "script"
        if tag.get("href"):
            yield tag["href"], "link"


def _match(value: str) -> Optional[VendorSignature]:
    for signature in VENDOR_CATALOG:
        if signature.pattern.search(value):
            return signature
    return None


def detect_vendors(html: str, deadline: str = settings.COMPLIANCE_DEADLINE) -> List[VendorWarning]:
    """
    Match embedded third-party healthcare software against the vendor catalog.

    One warning per vendor, in the order each vendor is first seen.
    """
    soup = BeautifulSoup(html or "", "html.parser")
    warnings = {}
    for value, detected_via in _candidate_sources(soup):
        signature = _match(value)
        if signature is None or signature.name in warnings:
            continue
        warnings[signature.name] = VendorWarning(
            vendor=signature.name,
            category=signature.category,
            detected_via=detected_via,
            warning=LIABILITY_WARNING.format(vendor=signature.name, category=signature.category),
            action=RECOMMENDED_ACTION.format(vendor=signature.name),
            vpat_template_email=build_vpat_request_email(signature.name, deadline),
        )

    if warnings:
        logger.info(f"Detected third-party vendors: {', '.join(warnings)}")
    return list(warnings.values())


def build_vendor_finding(warnings: List[VendorWarning], page_url: Optional[str] = None) -> Optional[Finding]:
    if not warnings:
        return None
    names = ", ".join(w.vendor for w in warnings)
    return enrich(
        "third-party-vendors",
        message=f"{len(warnings)} third-party service(s) detected that may need accessibility documentation",
        severity="medium",
        page_url=page_url,
        details=f"Detected: {names}",
        count=len(warnings),
    )
