"""
Findings Schemas

Domain types shared by the scan pipeline, persistence and the report unlock
flow. All of them serialize with camelCase aliases.
"""
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator
from pydantic.alias_generators import to_camel

Severity = Literal["critical", "high", "medium", "low"]
WcagLevel = Literal["A", "AA", "AAA"]

SEVERITY_RANK = {"critical": 0, "high": 1, "medium": 2, "low": 3}
MAX_ELEMENT_SNIPPETS = 5


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Finding(CamelModel):
    """One detected accessibility defect. Immutable once created."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    check: str
    severity: Severity
    message: str
    details: Optional[str] = None
    count: Optional[int] = None
    wcag_criterion: Optional[str] = None
    wcag_name: Optional[str] = None
    wcag_level: Optional[WcagLevel] = None
    wcag_principle: Optional[str] = None
    page_url: Optional[str] = None
    remediation: Optional[str] = None
    impact: Optional[str] = None
    manager_guidance: Optional[str] = None
    developer_guidance: Optional[str] = None
    elements: Optional[List[str]] = Field(default=None, max_length=MAX_ELEMENT_SNIPPETS)

    @model_validator(mode="after")
    def _criterion_requires_level(self):
        if self.wcag_criterion and not self.wcag_level:
            raise ValueError(f"Finding {self.id} has WCAG criterion without a level")
        return self


class Summary(CamelModel):
    total: int = 0
    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0
    accessibility_score: Optional[int] = Field(default=None, ge=0, le=100)


class PageResult(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    page_url: str
    page_title: Optional[str] = None
    accessibility_score: int = Field(ge=0, le=100)
    findings: List[Finding] = Field(default_factory=list)
    summary: Summary


class PdfCheckResult(CamelModel):
    url: str
    filename: str
    has_lang_tag: bool = False
    has_mark_info: bool = False
    has_title: bool = False
    error: Optional[str] = None

    @computed_field(alias="isAccessible")
    @property
    def is_accessible(self) -> bool:
        # Title absence alone does not disqualify a document
        return self.error is None and self.has_lang_tag and self.has_mark_info


class VendorWarning(CamelModel):
    vendor: str
    category: str
    detected_via: str
    warning: str
    action: str
    vpat_template_email: str
