# index.py
from __future__ import annotations

from datetime import datetime
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .extract import parse_issuance_line
from .models import CoverageWindow, IssuanceBounds, MalformedRecord, ParseError
from .observer import AuditObserver, NullObserver


class IssuanceIndex:
    """
    Issued name -> issuance timestamps, in the order they were read.

    A name is present only while it still has at least one timestamp; every
    removal prunes names whose list became empty.
    """

    def __init__(self) -> None:
        self._issuances: Dict[str, List[datetime]] = {}

    def add(self, name: str, t: datetime) -> None:
        self._issuances.setdefault(name, []).append(t)

    def remove_covered(self, name: str, check_time: datetime, window: CoverageWindow) -> int:
        """
        Drop every timestamp for name that is covered by a check at check_time.

        Survivors keep their relative order. Returns the number removed.
        """
        timestamps = self._issuances.get(name)
        if not timestamps:
            return 0

        remaining = [t for t in timestamps if not window.covers(check_time, t)]
        removed = len(timestamps) - len(remaining)
        if remaining:
            self._issuances[name] = remaining
        else:
            del self._issuances[name]
        return removed

    def timestamps(self, name: str) -> List[datetime]:
        return list(self._issuances.get(name, []))

    def names(self) -> List[str]:
        return list(self._issuances)

    def items(self) -> Iterator[Tuple[str, List[datetime]]]:
        for name, timestamps in self._issuances.items():
            yield name, list(timestamps)

    def pending(self) -> int:
        return sum(len(v) for v in self._issuances.values())

    def to_dict(self) -> Dict[str, List[datetime]]:
        return {name: list(ts) for name, ts in self._issuances.items()}

    def __contains__(self, name: object) -> bool:
        return name in self._issuances

    def __len__(self) -> int:
        return len(self._issuances)

    def __bool__(self) -> bool:
        return bool(self._issuances)

    def __repr__(self) -> str:
        return f"IssuanceIndex(names={len(self)}, pending={self.pending()})"


def ingest(
    lines: Iterable[str],
    index: IssuanceIndex,
    source: str = "<issuance log>",
    bounds: Optional[IssuanceBounds] = None,
    observer: Optional[AuditObserver] = None,
) -> int:
    """
    Read one issuance (RA) log into the index.

    Lines that are not issuance records are skipped. A recognized line that
    cannot be decoded raises ParseError with its 1-based line number, and
    nothing from this source is merged into the index.

    Returns the number of issuance records read.
    """
    observer = observer or NullObserver()
    observer.source_started(source, "issuance")

    staged: List[Tuple[str, datetime]] = []
    lines_count = 0
    issuances_count = 0

    for line in lines:
        lines_count += 1
        try:
            record = parse_issuance_line(line)
        except MalformedRecord as e:
            raise ParseError(source, lines_count, str(e)) from e
        if record is None:
            continue

        issuances_count += 1
        in_scope = 0
        if bounds is None or bounds.contains(record.issuance_time):
            for name in record.names:
                staged.append((name, record.issuance_time))
                in_scope += 1
        observer.issuance_recorded(record, in_scope)

    for name, t in staged:
        index.add(name, t)

    observer.source_finished(source, "issuance", issuances_count, lines_count)
    return issuances_count
