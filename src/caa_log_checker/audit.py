from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from caa.coverage import apply_coverage
from caa.index import IssuanceIndex, ingest
from caa.models import AuditFinding, CoverageWindow, IssuanceBounds
from caa.observer import AuditObserver, NullObserver
from reporting.report import build_report

from .sources import open_log


@dataclass
class AuditResult:
    """Outcome of one audit run over a set of RA and VA logs."""

    issuance_sources: List[str] = field(default_factory=list)
    check_sources: List[str] = field(default_factory=list)
    issuances_read: int = 0
    checks_read: int = 0
    findings: List[str] = field(default_factory=list)
    index: IssuanceIndex = field(default_factory=IssuanceIndex)

    @property
    def clean(self) -> bool:
        return not self.findings

    @property
    def overall(self) -> str:
        return "clean" if self.clean else "uncovered"

    def raise_for_findings(self) -> None:
        if self.findings:
            raise AuditFinding(self.findings)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall": self.overall,
            "issuance_sources": self.issuance_sources,
            "check_sources": self.check_sources,
            "issuances_read": self.issuances_read,
            "checks_read": self.checks_read,
            "findings": self.findings,
            "remaining": self.index.to_dict(),
        }


class CAALogAuditor:
    """
    Runs the audit: every issuance log is loaded before any CAA log is read,
    then each CAA log drains the index in turn, then the report is built.

    Any ParseError aborts the run; there is no partial result.
    """

    def __init__(
        self,
        window: Optional[CoverageWindow] = None,
        bounds: Optional[IssuanceBounds] = None,
        observer: Optional[AuditObserver] = None,
    ) -> None:
        self.window = window or CoverageWindow()
        self.bounds = bounds
        self.observer = observer or NullObserver()

    def load_issuances(self, paths: Sequence[str], index: Optional[IssuanceIndex] = None) -> IssuanceIndex:
        index = IssuanceIndex() if index is None else index
        self._ingest_all(paths, index)
        return index

    def _ingest_all(self, paths: Sequence[str], index: IssuanceIndex) -> int:
        issuances = 0
        for path in paths:
            with open_log(path) as lines:
                issuances += ingest(lines, index, source=path, bounds=self.bounds, observer=self.observer)
        return issuances

    def process_checks(self, paths: Sequence[str], index: IssuanceIndex) -> int:
        checks = 0
        for path in paths:
            with open_log(path) as lines:
                checks += apply_coverage(lines, index, source=path, window=self.window, observer=self.observer)
        return checks

    def audit(self, ra_paths: Sequence[str], va_paths: Sequence[str]) -> AuditResult:
        result = AuditResult(issuance_sources=list(ra_paths), check_sources=list(va_paths))

        result.issuances_read = self._ingest_all(ra_paths, result.index)

        # Try to pare the index down to nothing with the CAA checks.
        result.checks_read = self.process_checks(va_paths, result.index)

        result.findings = build_report(result.index)
        return result
