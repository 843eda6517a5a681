# extract.py
from __future__ import annotations

import json
import re
from datetime import datetime
from typing import Optional, Union

from .models import CAACheckRecord, IssuanceRecord, MalformedRecord, Unrecognized


# RA audit line for a completed issuance; the payload is a JSON object.
RA_ISSUANCE_LINE_RE = re.compile(r"Certificate request - successful JSON=(.*)")

# VA audit line for a CAA lookup.
VA_CAA_LINE_RE = re.compile(r"Checked CAA records for ([a-z0-9-.*]+), \[Present: (true|false)")

ParsedLine = Union[IssuanceRecord, CAACheckRecord, Unrecognized]


def parse_timestamp(line: str) -> datetime:
    """
    Parse the leading RFC 3339 timestamp of a syslog line.

    The timestamp must carry a UTC offset so that lines from different hosts
    compare on the same clock.
    """
    token = line.split(None, 1)[0] if line.strip() else ""
    text = token[:-1] + "+00:00" if token.endswith(("Z", "z")) else token
    try:
        ts = datetime.fromisoformat(text)
    except ValueError:
        raise MalformedRecord(f"failed to parse timestamp {token!r}") from None
    if ts.tzinfo is None:
        raise MalformedRecord(f"timestamp {token!r} is not RFC 3339 with a UTC offset")
    return ts


def parse_issuance_line(line: str) -> Optional[IssuanceRecord]:
    m = RA_ISSUANCE_LINE_RE.search(line)
    if m is None:
        return None

    try:
        payload = json.loads(m.group(1))
    except json.JSONDecodeError as e:
        raise MalformedRecord(f"failed to unmarshal JSON: {e}") from None
    if not isinstance(payload, dict):
        raise MalformedRecord("issuance payload is not a JSON object")

    names = payload.get("Names")
    if not isinstance(names, list) or not names or not all(isinstance(n, str) for n in names):
        raise MalformedRecord("issuance payload has no Names list")

    serial = payload.get("SerialNumber", "")
    if not isinstance(serial, str):
        raise MalformedRecord("issuance payload SerialNumber is not a string")

    requester = payload.get("Requester", 0)
    # bool is an int subclass; a JSON true is not an account ID
    if not isinstance(requester, int) or isinstance(requester, bool):
        raise MalformedRecord("issuance payload Requester is not an integer")

    # Issuance time comes from the syslog timestamp rather than any time in the
    # JSON: both log streams are stamped by the same syslog clock.
    return IssuanceRecord(
        names=tuple(names),
        issuance_time=parse_timestamp(line),
        serial=serial,
        requester=requester,
    )


def parse_caa_line(line: str) -> Optional[CAACheckRecord]:
    m = VA_CAA_LINE_RE.search(line)
    if m is None:
        return None

    return CAACheckRecord(
        name=m.group(1),
        records_present=m.group(2) == "true",
        check_time=parse_timestamp(line),
    )


def parse_line(line: str) -> ParsedLine:
    """
    Classify one raw log line.

    Returns an IssuanceRecord, a CAACheckRecord, or Unrecognized. Raises
    MalformedRecord only when a recognized line carries a bad payload.
    """
    record: Optional[ParsedLine] = parse_issuance_line(line)
    if record is None:
        record = parse_caa_line(line)
    return record if record is not None else Unrecognized(line)
