from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from caa.models import DEFAULT_COVERAGE_WINDOW, ConfigError, CoverageWindow, IssuanceBounds

# Syslog severities (0=emerg .. 7=debug); 6 is "info".
DEFAULT_STDOUT_LEVEL = int(os.getenv("CAA_LOG_CHECKER_STDOUT_LEVEL", "6"))
DEFAULT_SYSLOG_LEVEL = int(os.getenv("CAA_LOG_CHECKER_SYSLOG_LEVEL", "6"))

DAY_FORMAT = "%Y%m%d"

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")
_UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def parse_duration(text: str) -> timedelta:
    """
    Parse a duration like 8h, 90m, 1h30m, 2.5s or 500ms.

    A bare "0" is accepted. A leading "-" is parsed so validation can reject it
    with a useful message.
    """
    s = (text or "").strip()
    if not s:
        raise ConfigError("empty duration")

    sign = 1
    if s[0] in "+-":
        sign = -1 if s[0] == "-" else 1
        s = s[1:]

    if s == "0":
        return timedelta(0)

    pos = 0
    seconds = 0.0
    for m in _DURATION_PART.finditer(s):
        if m.start() != pos:
            break
        seconds += float(m.group(1)) * _UNIT_SECONDS[m.group(2)]
        pos = m.end()

    if pos == 0 or pos != len(s):
        raise ConfigError(f"invalid duration {text!r}")
    return sign * timedelta(seconds=seconds)


def parse_day(text: str) -> datetime:
    """Parse YYYYMMDD into midnight UTC."""
    try:
        return datetime.strptime(text, DAY_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError:
        raise ConfigError(f"{text!r} could not be parsed as a date (expected YYYYMMDD)") from None


def split_paths(text: Optional[str]) -> List[str]:
    return [p.strip() for p in (text or "").split(",") if p.strip()]


@dataclass
class AuditConfig:
    ra_logs: List[str] = field(default_factory=list)
    va_logs: List[str] = field(default_factory=list)
    window: timedelta = DEFAULT_COVERAGE_WINDOW
    time_tolerance: timedelta = field(default_factory=timedelta)
    earliest: Optional[datetime] = None
    latest: Optional[datetime] = None
    stdout_level: int = DEFAULT_STDOUT_LEVEL
    syslog_level: int = DEFAULT_SYSLOG_LEVEL
    as_json: bool = False

    def validate(self) -> "AuditConfig":
        if self.time_tolerance < timedelta(0):
            raise ConfigError("value of --time-tolerance must be non-negative")
        if self.window < timedelta(0):
            raise ConfigError("value of --window must be non-negative")

        if (self.earliest is None) != (self.latest is None):
            raise ConfigError("--earliest and --latest must be both set or both unset")
        if self.earliest is not None and self.latest is not None and not self.earliest < self.latest:
            raise ConfigError("earliest date must be before latest date")

        if not 0 <= self.stdout_level <= 7:
            raise ConfigError("value of --stdout-level must be a syslog severity between 0 and 7")
        if self.syslog_level > 7:
            raise ConfigError("value of --syslog-level must be at most 7 (negative disables syslog)")

        if not self.ra_logs:
            raise ConfigError("at least one issuance log (--ra-log) is required")
        return self

    def coverage_window(self) -> CoverageWindow:
        return CoverageWindow(window=self.window, tolerance=self.time_tolerance)

    def bounds(self) -> Optional[IssuanceBounds]:
        if self.earliest is None or self.latest is None:
            return None
        return IssuanceBounds(earliest=self.earliest, latest=self.latest)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ra_logs": self.ra_logs,
            "va_logs": self.va_logs,
            "window_seconds": self.window.total_seconds(),
            "time_tolerance_seconds": self.time_tolerance.total_seconds(),
            "earliest": self.earliest,
            "latest": self.latest,
        }
