# coverage.py
from __future__ import annotations

from typing import Iterable, List, Optional

import dns.exception
import dns.name

from .extract import parse_caa_line
from .index import IssuanceIndex
from .models import CAACheckRecord, CoverageWindow, MalformedRecord, ParseError
from .observer import AuditObserver, NullObserver


def ancestor_names(name: str) -> List[str]:
    """
    Proper ancestors of name that a CAA lookup walks through, nearest first.

    The walk stops before the single-label TLD, so a.b.example.com gives
    ["b.example.com", "example.com"] and never "com".
    """
    try:
        n = dns.name.from_text(name)
    except dns.exception.DNSException:
        # Not a well-formed DNS name (empty or over-long label); walk the
        # raw labels the same way.
        labels = name.split(".")
        return [".".join(labels[i:]) for i in range(1, len(labels) - 1)]

    # dns.name keeps the root label, so "example.com." has 3 labels.
    if n == dns.name.root:
        return []

    out: List[str] = []
    parent = n.parent()
    while len(parent.labels) > 2:
        out.append(parent.to_text(omit_final_dot=True))
        parent = parent.parent()
    return out


def apply_check(record: CAACheckRecord, index: IssuanceIndex, window: CoverageWindow) -> int:
    """
    Remove every issuance covered by one CAA check. Returns how many were covered.

    When the check found no CAA records for w.x.y.z, the CA also looked at
    x.y.z and y.z and found none there either, so issuances for those names
    are covered by the same check.
    """
    covered = index.remove_covered(record.name, record.check_time, window)

    if not record.records_present:
        for tail in ancestor_names(record.name):
            covered += index.remove_covered(tail, record.check_time, window)

    return covered


def apply_coverage(
    lines: Iterable[str],
    index: IssuanceIndex,
    source: str = "<caa log>",
    window: Optional[CoverageWindow] = None,
    observer: Optional[AuditObserver] = None,
) -> int:
    """
    Drain the index with one CAA (VA) log, in file order.

    Non-CAA lines are skipped; a CAA line that cannot be decoded raises
    ParseError and aborts the pass. Returns the number of checks processed.
    """
    window = window or CoverageWindow()
    observer = observer or NullObserver()
    observer.source_started(source, "caa")

    lines_count = 0
    checks_count = 0

    for line in lines:
        lines_count += 1
        try:
            record = parse_caa_line(line)
        except MalformedRecord as e:
            raise ParseError(source, lines_count, str(e)) from e
        if record is None:
            continue

        checks_count += 1
        covered = apply_check(record, index, window)
        observer.check_applied(record, covered)

    observer.source_finished(source, "caa", checks_count, lines_count)
    return checks_count
