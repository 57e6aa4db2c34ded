"""
Scan Schemas

Request and response models for the scan API endpoints.
"""
from typing import List, Optional

from pydantic import AliasChoices, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.features.scan.schemas.findings import (
    CamelModel,
    Finding,
    PageResult,
    PdfCheckResult,
    Summary,
    VendorWarning,
)

NO_ISSUES_SENTINEL = "No issues found"


class ScanRequest(CamelModel):
    """Request to scan a website."""

    website_url: str = Field(min_length=1)
    client_session_id: str = Field(
        min_length=1,
        validation_alias=AliasChoices("clientSessionId", "sessionId", "client_session_id"),
    )
    user_id: Optional[str] = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "websiteUrl": "exampleclinic.com",
                "clientSessionId": "0b7f1f8e-3a55-4f0e-9a51-0d4c4f7c2f11",
            }
        },
    )


class Teaser(CamelModel):
    top_issue: str = NO_ISSUES_SENTINEL
    issue_count: int = 0
    accessibility_score: Optional[int] = None


class ScanResponse(CamelModel):
    success: bool = True
    session_id: str
    summary: Summary
    teaser: Teaser
    pages_scanned: Optional[int] = None
    page_results: Optional[List[PageResult]] = None
    pdf_results: Optional[List[PdfCheckResult]] = None
    vendor_warnings: Optional[List[VendorWarning]] = None
    error: Optional[str] = None
    cached: Optional[bool] = None


class ScanOutcome(CamelModel):
    """Everything the orchestrator produced for one scan, before persistence."""

    website_url: str
    http_status: int
    scan_duration_ms: int
    findings: List[Finding] = Field(default_factory=list)
    summary: Summary
    page_results: List[PageResult] = Field(default_factory=list, max_length=3)
    pdf_results: List[PdfCheckResult] = Field(default_factory=list, max_length=10)
    vendor_warnings: List[VendorWarning] = Field(default_factory=list)
    overall_score: Optional[int] = None
    teaser: Teaser

    @property
    def pages_scanned(self) -> int:
        return len(self.page_results)
