import re
from typing import List, Optional

from app.features.scan.schemas.audit import AuditReport, RawAudit
from app.features.scan.schemas.findings import MAX_ELEMENT_SNIPPETS, Finding, Severity
from app.features.scan.services.enrichment.rule_catalog import get_rule
from app.features.scan.services.utils.aggregator import sort_findings

# Lighthouse descriptions end with "[Learn more](https://...)."
_MARKDOWN_LINK = re.compile(r"\[([^\]]+)\]\([^)]+\)")
_LEARN_MORE = re.compile(r"\s*Learn more[^.]*\.?\s*$", re.IGNORECASE)


def severity_from_score(score: float, affected: int = 0) -> Severity:
    """
    Bucket a raw audit score (0..1) into a severity.

    A hard failure (score 0) escalates with the number of affected elements.
    """
    if score == 0:
        if affected > 10:
            return "critical"
        if affected > 5:
            return "high"
        return "medium"
    if score < 0.5:
        return "high"
    if score < 0.9:
        return "medium"
    return "low"


def _clean_description(description: str) -> Optional[str]:
    text = _LEARN_MORE.sub("", _MARKDOWN_LINK.sub(r"\1", description or "")).strip()
    return text or None


def _element_snippets(raw: RawAudit) -> Optional[List[str]]:
    snippets = []
    for item in raw.items:
        node = item.get("node") if isinstance(item.get("node"), dict) else item
        snippet = node.get("snippet") or node.get("selector")
        if snippet:
            snippets.append(str(snippet))
        if len(snippets) >= MAX_ELEMENT_SNIPPETS:
            break
    return snippets or None


def enrich(
    rule_id: str,
    message: str,
    severity: Severity,
    page_url: Optional[str] = None,
    details: Optional[str] = None,
    count: Optional[int] = None,
    elements: Optional[List[str]] = None,
) -> Finding:
    """Attach catalog metadata to a finding. Used for audit items and synthesized findings alike."""
    rule = get_rule(rule_id)
    return Finding(
        id=rule_id,
        check=rule.check,
        severity=severity,
        message=message,
        details=details,
        count=count,
        wcag_criterion=rule.wcag_criterion,
        wcag_name=rule.wcag_name,
        wcag_level=rule.wcag_level,
        wcag_principle=rule.wcag_principle,
        page_url=page_url,
        remediation=rule.remediation,
        impact=rule.impact,
        manager_guidance=rule.manager_guidance,
        developer_guidance=rule.developer_guidance,
        elements=elements[:MAX_ELEMENT_SNIPPETS] if elements else None,
    )


def enrich_audit(raw: RawAudit, page_url: Optional[str] = None) -> Finding:
    affected = len(raw.items)
    severity = raw.severity or severity_from_score(raw.score or 0.0, affected)
    return enrich(
        raw.id,
        message=raw.title or get_rule(raw.id).check,
        severity=severity,
        page_url=page_url,
        details=_clean_description(raw.description),
        count=affected or None,
        elements=_element_snippets(raw),
    )


def findings_from_report(report: AuditReport, page_url: Optional[str] = None) -> List[Finding]:
    """Enrich every failing audit in the report, most severe first."""
    findings = [
        enrich_audit(raw, page_url or report.url)
        for raw in report.audits.values()
        if raw.is_finding
    ]
    return sort_findings(findings)
