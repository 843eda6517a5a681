import argparse
import json
import logging
import sys
from typing import Any, Dict, List

from caa.models import AuditFinding, ConfigError, ParseError
from reporting.analytics import ReportAnalyzer
from reporting.assembler import Assemble
from reporting.report import render_report

from . import __version__
from .audit import AuditResult, CAALogAuditor
from .config import (
    DEFAULT_STDOUT_LEVEL,
    DEFAULT_SYSLOG_LEVEL,
    AuditConfig,
    parse_day,
    parse_duration,
    split_paths,
)
from .logging_config import LOGGER_NAME, LoggingObserver, configure_logging

"""
The command-line interface for the CAA log checker.
  1) Parse + validate flags into an AuditConfig (nothing is read on bad flags)
  2) Load every RA log, then drain the issuances with each VA log
  3) Print the uncovered issuances (or the JSON payload) and exit non-zero if any
"""

EXIT_CLEAN = 0
EXIT_UNCOVERED = 1
EXIT_FAILURE = 2

log = logging.getLogger(LOGGER_NAME)


# Parse the command-line arguments
def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="caa-log-checker",
        description="Check that every issuance in the RA logs was preceded by a CAA check in the VA logs",
    )
    p.add_argument("--ra-log", action="append", default=[],
                   help="Path to a boulder-ra log file (comma-separated list or repeated; .gz is fine)")
    p.add_argument("--va-logs", action="append", default=[],
                   help="Paths to boulder-va log files, separated by commas (may be repeated)")
    p.add_argument("--window", default="8h",
                   help="How long after a CAA check an issuance is covered (e.g. 8h, 90m; "
                        "negative values need the --window=-1s form)")
    p.add_argument("--time-tolerance", default="0",
                   help="How much slop to allow when comparing timestamps for ordering "
                        "(negative values need the --time-tolerance=-1s form)")
    p.add_argument("--earliest", default="",
                   help="Day at which to start checking issuances (inclusive). Formatted like "
                        "'20060102'. Optional. If specified, --latest is required.")
    p.add_argument("--latest", default="",
                   help="Day at which to stop checking issuances (exclusive). Formatted like "
                        "'20060102'. Optional. If specified, --earliest is required.")
    p.add_argument("--stdout-level", type=int, default=DEFAULT_STDOUT_LEVEL,
                   help="Minimum severity of messages to send to stdout")
    p.add_argument("--syslog-level", type=int, default=DEFAULT_SYSLOG_LEVEL,
                   help="Minimum severity of messages to send to syslog (negative disables)")
    p.add_argument("--json", dest="as_json", action="store_true", help="Output JSON")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p.parse_args(argv)


def build_config(args: argparse.Namespace) -> AuditConfig:
    """
    Turn parsed flags into a validated AuditConfig.

    Raises:
        ConfigError: on any invalid or inconsistent flag value.
    """
    config = AuditConfig(
        ra_logs=[p for raw in args.ra_log for p in split_paths(raw)],
        va_logs=[p for raw in args.va_logs for p in split_paths(raw)],
        window=parse_duration(args.window),
        time_tolerance=parse_duration(args.time_tolerance),
        earliest=parse_day(args.earliest) if args.earliest else None,
        latest=parse_day(args.latest) if args.latest else None,
        stdout_level=args.stdout_level,
        syslog_level=args.syslog_level,
        as_json=args.as_json,
    )
    return config.validate()


def print_human(result: AuditResult, analytics: Dict[str, Any]) -> None:
    """
    Print a readable console report.

    Args:
        result: Result of CAALogAuditor.audit().
        analytics: Output of ReportAnalyzer.analytics().
    """
    print(
        f"Issuances read: {result.issuances_read} | "
        f"CAA checks read: {result.checks_read} | "
        f"Uncovered: {len(result.findings)}"
    )

    if result.clean:
        print("No uncovered issuances.")
        return

    print(render_report(result.findings))

    by_name = analytics.get("counts_by_name")
    if by_name is not None and not by_name.empty:
        print("\nUncovered issuances by name:")
        print(by_name.to_string(index=False))


def main(argv: List[str] | None = None) -> int:
    """
    CLI entrypoint.

    Returns:
        0 when every issuance is covered, 1 when some are not, 2 on bad flags,
        unreadable files or malformed log lines.
    """
    args = parse_args(argv)

    try:
        config = build_config(args)
    except ConfigError as e:
        print(f"Invalid input: {e}")
        return EXIT_FAILURE

    # Keep stdout clean for the JSON payload.
    configure_logging(
        stdout_level=config.stdout_level,
        syslog_level=config.syslog_level,
        stream=sys.stderr if config.as_json else None,
    )

    auditor = CAALogAuditor(
        window=config.coverage_window(),
        bounds=config.bounds(),
        observer=LoggingObserver(log),
    )

    try:
        result = auditor.audit(config.ra_logs, config.va_logs)
    except ParseError as e:
        log.error("failed to parse %s line %d: %s", e.source, e.line_number, e.reason)
        return EXIT_FAILURE
    except OSError as e:
        log.error("failed to open log: %s", e)
        return EXIT_FAILURE

    analyzer = ReportAnalyzer()
    analytics = analyzer.analytics(analyzer.frame(result.index))

    # Output: JSON (machine-readable) or human-readable text
    if config.as_json:
        payload = Assemble().build(
            result,
            analytics=analytics,
            meta={"version": __version__, "config": config.to_dict()},
        )
        print(json.dumps(payload, indent=2))
    else:
        print_human(result, analytics)

    try:
        result.raise_for_findings()
    except AuditFinding as e:
        # The report itself is already on stdout (or in the JSON payload).
        log.error("%d issuances were missing CAA checks", len(e.findings))
        return EXIT_UNCOVERED

    return EXIT_CLEAN


if __name__ == "__main__":
    raise SystemExit(main())
