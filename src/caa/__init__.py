"""
CAA audit core.

Reconciles RA issuance log records against VA CAA-check log records:
  - index: issued name -> issuance timestamps
  - coverage: CAA checks remove the issuances they authorize
  - extract: the typed parsing boundary for raw log lines

Nothing in this package configures logging or touches files.
"""

from .coverage import ancestor_names, apply_check, apply_coverage
from .extract import parse_caa_line, parse_issuance_line, parse_line, parse_timestamp
from .index import IssuanceIndex, ingest
from .models import (
    AuditError,
    AuditFinding,
    CAACheckRecord,
    ConfigError,
    CoverageWindow,
    IssuanceBounds,
    IssuanceRecord,
    MalformedRecord,
    ParseError,
    Unrecognized,
)
from .observer import AuditObserver, NullObserver

__all__ = [
    "AuditError",
    "AuditFinding",
    "AuditObserver",
    "CAACheckRecord",
    "ConfigError",
    "CoverageWindow",
    "IssuanceBounds",
    "IssuanceIndex",
    "IssuanceRecord",
    "MalformedRecord",
    "NullObserver",
    "ParseError",
    "Unrecognized",
    "ancestor_names",
    "apply_check",
    "apply_coverage",
    "ingest",
    "parse_caa_line",
    "parse_issuance_line",
    "parse_line",
    "parse_timestamp",
]
