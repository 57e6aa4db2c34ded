"""
Report Unlock Schemas

Exchanging an email address for the full report of a finished scan.
"""
from typing import List, Optional

from pydantic import AliasChoices, EmailStr, Field

from app.features.scan.schemas.findings import (
    CamelModel,
    Finding,
    PageResult,
    PdfCheckResult,
    Summary,
    VendorWarning,
)


class UnlockRequest(CamelModel):
    session_id: str = Field(
        min_length=1,
        validation_alias=AliasChoices("sessionId", "session_id"),
    )
    email: EmailStr


class UnlockedReport(CamelModel):
    success: bool = True
    findings: List[Finding] = Field(default_factory=list)
    summary: Summary
    website_url: str
    pages_scanned: Optional[int] = None
    page_results: List[PageResult] = Field(default_factory=list)
    pdf_results: List[PdfCheckResult] = Field(default_factory=list)
    vendor_warnings: List[VendorWarning] = Field(default_factory=list)
    report_sent: bool = False
