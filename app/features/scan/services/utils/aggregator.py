from typing import Iterable, List, Optional, Sequence

from app.features.scan.schemas.findings import SEVERITY_RANK, Finding, PageResult, Summary
from app.features.scan.schemas.scan import NO_ISSUES_SENTINEL, Teaser


def sort_findings(findings: Iterable[Finding]) -> List[Finding]:
    """
    Canonical ordering: most severe first.

    ``sorted`` is stable, so findings of equal severity keep their original
    relative order (synthesized document-level findings placed first stay first).
    """
    return sorted(findings, key=lambda f: SEVERITY_RANK[f.severity])


def calculate_summary(findings: Sequence[Finding], accessibility_score: Optional[int] = None) -> Summary:
    counts = {"critical": 0, "high": 0, "medium": 0, "low": 0}
    for finding in findings:
        counts[finding.severity] += 1

    return Summary(
        total=len(findings),
        accessibility_score=accessibility_score,
        **counts,
    )


def clamp_score(value: float) -> int:
    return int(max(0, min(100, round(value))))


def overall_score(page_results: Sequence[PageResult]) -> Optional[int]:
    """Arithmetic mean of per-page scores, rounded."""
    if not page_results:
        return None
    return clamp_score(sum(p.accessibility_score for p in page_results) / len(page_results))


def merge_page_findings(page_results: Sequence[PageResult]) -> List[Finding]:
    findings: List[Finding] = []
    for page in page_results:
        findings.extend(page.findings)
    return findings


def get_top_issue(findings: Sequence[Finding]) -> str:
    ordered = sort_findings(findings)
    return ordered[0].message if ordered else NO_ISSUES_SENTINEL


def build_teaser(findings: Sequence[Finding], accessibility_score: Optional[int] = None) -> Teaser:
    """
    Minimal ungated projection of a scan.

    ``issue_count`` counts distinct rule ids, so a rule firing on several pages
    is counted once.
    """
    return Teaser(
        top_issue=get_top_issue(findings),
        issue_count=len({f.id for f in findings}),
        accessibility_score=accessibility_score,
    )
