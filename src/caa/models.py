from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Tuple


DEFAULT_COVERAGE_WINDOW = timedelta(hours=8)


# -----------------------------
# Errors
# -----------------------------

class AuditError(Exception):
    """Base error for the CAA log audit."""


class MalformedRecord(AuditError, ValueError):
    """A recognized log line whose payload or timestamp could not be decoded."""


class ParseError(AuditError, ValueError):
    """Raised when a source line matched a record pattern but could not be decoded."""

    def __init__(self, source: str, line_number: int, reason: str) -> None:
        self.source = source
        self.line_number = int(line_number)
        self.reason = reason
        super().__init__(f"{source}: line {self.line_number}: {reason}")


class ConfigError(AuditError, ValueError):
    """Invalid audit configuration (flags, dates, durations)."""


class AuditFinding(AuditError):
    """
    One or more issuances have no covering CAA check.

    This is the product of the audit, not an operational failure: str() is the
    sorted, newline-joined report.
    """

    def __init__(self, findings: List[str]) -> None:
        self.findings = list(findings)
        super().__init__("\n".join(self.findings))


# -----------------------------
# Records
# -----------------------------

@dataclass(frozen=True)
class IssuanceRecord:
    names: Tuple[str, ...]
    issuance_time: datetime
    serial: str = ""
    requester: int = 0


@dataclass(frozen=True)
class CAACheckRecord:
    name: str
    records_present: bool
    check_time: datetime


@dataclass(frozen=True)
class Unrecognized:
    line: str


# -----------------------------
# Matching parameters
# -----------------------------

@dataclass(frozen=True)
class CoverageWindow:
    """
    How long after a CAA check an issuance for the checked name is authorized.

    A timestamp t is covered by a check at c iff
        -tolerance <= t - c <= window + tolerance
    so with the default zero tolerance only issuances at or after the check,
    and no later than window after it, are covered.
    """

    window: timedelta = DEFAULT_COVERAGE_WINDOW
    tolerance: timedelta = field(default_factory=timedelta)

    def __post_init__(self) -> None:
        if self.window < timedelta(0):
            raise ConfigError("coverage window must be non-negative")
        if self.tolerance < timedelta(0):
            raise ConfigError("time tolerance must be non-negative")

    def covers(self, check_time: datetime, t: datetime) -> bool:
        diff = t - check_time
        return -self.tolerance <= diff <= self.window + self.tolerance


@dataclass(frozen=True)
class IssuanceBounds:
    """Inclusive earliest / exclusive latest bounds on in-scope issuance times."""

    earliest: datetime
    latest: datetime

    def __post_init__(self) -> None:
        if not self.earliest < self.latest:
            raise ConfigError("earliest date must be before latest date")

    def contains(self, t: datetime) -> bool:
        return self.earliest <= t < self.latest
