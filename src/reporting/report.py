from __future__ import annotations

from datetime import datetime, timezone
from typing import List

from caa.index import IssuanceIndex
from caa.models import AuditFinding


def format_timestamp(t: datetime) -> str:
    # Fixed-width UTC form so lexicographic order is chronological order.
    return t.astimezone(timezone.utc).isoformat(timespec="microseconds")


def format_finding(t: datetime, name: str) -> str:
    return f"{format_timestamp(t)}: {name}"


def build_report(index: IssuanceIndex) -> List[str]:
    """
    One line per issuance that no CAA check covered, sorted.

    Returns an empty list when the index is empty (the audit passed).
    """
    if not index:
        return []

    messages: List[str] = []
    for name, timestamps in index.items():
        for t in timestamps:
            messages.append(format_finding(t, name))

    messages.sort()
    return messages


def render_report(findings: List[str]) -> str:
    return "\n".join(findings)


def raise_for_findings(index: IssuanceIndex) -> None:
    findings = build_report(index)
    if findings:
        raise AuditFinding(findings)
