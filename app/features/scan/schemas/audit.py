from typing import Any, Dict, List, Optional

from pydantic import Field

from app.features.scan.schemas.findings import CamelModel, Severity

NON_FINDING_DISPLAY_MODES = {"notApplicable", "informative"}


class RawAudit(CamelModel):
    """One rule result as returned by the audit capability (Lighthouse shape)."""

    id: str
    title: str = ""
    description: str = ""
    score: Optional[float] = None
    score_display_mode: str = "binary"
    details: Optional[Dict[str, Any]] = None
    # Only set by the local markup auditor, which knows its own severities
    severity: Optional[Severity] = None

    @property
    def items(self) -> List[Dict[str, Any]]:
        if not self.details:
            return []
        items = self.details.get("items") or []
        return [item for item in items if isinstance(item, dict)]

    @property
    def is_finding(self) -> bool:
        if self.score is None or self.score >= 1:
            return False
        return self.score_display_mode not in NON_FINDING_DISPLAY_MODES


class AuditReport(CamelModel):
    url: str
    score: float = Field(ge=0, le=1)
    audits: Dict[str, RawAudit] = Field(default_factory=dict)
    page_title: Optional[str] = None
