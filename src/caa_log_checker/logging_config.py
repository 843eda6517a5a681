"""
Logging configuration for the CAA log checker.

Levels are given as syslog severities (0=emerg .. 7=debug) and mapped onto the
standard library's levels. Only the CLI calls configure_logging(); the audit
core reports progress through LoggingObserver.
"""

import logging
import logging.handlers
import os
import sys
from typing import Optional, TextIO

from caa.models import CAACheckRecord, IssuanceRecord

LOGGER_NAME = "caa_log_checker"
SYSLOG_SOCKET = "/dev/log"

log = logging.getLogger(LOGGER_NAME)

_SYSLOG_TO_LOGGING = {
    0: logging.CRITICAL,
    1: logging.CRITICAL,
    2: logging.CRITICAL,
    3: logging.ERROR,
    4: logging.WARNING,
    5: logging.INFO,
    6: logging.INFO,
    7: logging.DEBUG,
}


def syslog_to_logging_level(severity: int) -> int:
    """Map a syslog severity onto a logging level; values past 7 mean debug."""
    if severity < 0:
        raise ValueError(f"syslog severity must be non-negative, got {severity}")
    return _SYSLOG_TO_LOGGING.get(severity, logging.DEBUG)


def configure_logging(
    stdout_level: int = 6,
    syslog_level: int = 6,
    syslog_address: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Configure the checker's logger.

    Args:
        stdout_level: Minimum syslog severity of messages written to stdout.
        syslog_level: Minimum syslog severity sent to syslog; negative disables it.
        syslog_address: Syslog socket path, defaults to /dev/log.
        stream: Console stream, defaults to stdout.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.propagate = False

    # Remove existing handlers
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    levels = []
    missing_syslog: Optional[str] = None

    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setLevel(syslog_to_logging_level(stdout_level))
    console_handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    )
    logger.addHandler(console_handler)
    levels.append(console_handler.level)

    if syslog_level >= 0:
        address = syslog_address or SYSLOG_SOCKET
        if os.path.exists(address):
            syslog_handler = logging.handlers.SysLogHandler(address=address)
            syslog_handler.setLevel(syslog_to_logging_level(syslog_level))
            syslog_handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
            logger.addHandler(syslog_handler)
            levels.append(syslog_handler.level)
        else:
            missing_syslog = address

    logger.setLevel(min(levels))
    if missing_syslog:
        logger.debug("syslog socket %s not available; logging to stdout only", missing_syslog)
    return logger


class LoggingObserver:
    """Reports audit progress through the checker's logger."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._log = logger or log

    def source_started(self, source: str, kind: str) -> None:
        self._log.info("processing %s log %s", kind, source)

    def source_finished(self, source: str, kind: str, records: int, lines: int) -> None:
        self._log.info("finished %s log %s: %d records in %d lines", kind, source, records, lines)

    def issuance_recorded(self, record: IssuanceRecord, in_scope: int) -> None:
        self._log.debug(
            "issuance serial=%s names=%d in_scope=%d at %s",
            record.serial,
            len(record.names),
            in_scope,
            record.issuance_time.isoformat(),
        )

    def check_applied(self, record: CAACheckRecord, covered: int) -> None:
        self._log.debug(
            "CAA check %s present=%s at %s covered %d issuances",
            record.name,
            record.records_present,
            record.check_time.isoformat(),
            covered,
        )
