from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Callable, Iterable, List

import pytest


T0 = datetime(2020, 6, 23, 12, 0, 0, tzinfo=timezone.utc)


def _stamp(t: datetime) -> str:
    return t.isoformat(timespec="microseconds")


def make_ra_line(t: datetime, names: Iterable[str], serial: str = "ff00", requester: int = 1) -> str:
    payload = {
        "ID": "zyx",
        "Requester": requester,
        "SerialNumber": serial,
        "Names": list(names),
        "ResponseTime": "2000-01-01T00:00:00Z",
    }
    return (
        f"{_stamp(t)} ip-10-0-0-1 boulder-ra[1234]: 6 boulder-ra nGbB7A0 [AUDIT] "
        f"Certificate request - successful JSON={json.dumps(payload)}"
    )


def make_va_line(t: datetime, name: str, present: bool = True) -> str:
    return (
        f"{_stamp(t)} ip-10-0-0-2 boulder-va[5678]: 6 boulder-va kF4hNwM [AUDIT] "
        f"Checked CAA records for {name}, [Present: {'true' if present else 'false'}, "
        f"Account ID: 1, Challenge: http-01, Valid for issuance: true] Response=\"\""
    )


def noise_line(t: datetime) -> str:
    return f"{_stamp(t)} ip-10-0-0-1 boulder-ra[1234]: 6 boulder-ra 5Lf2dQ0 Unrelated message"


@pytest.fixture
def t0() -> datetime:
    return T0


@pytest.fixture
def ra_line() -> Callable[..., str]:
    return make_ra_line


@pytest.fixture
def va_line() -> Callable[..., str]:
    return make_va_line


@pytest.fixture
def write_log(tmp_path) -> Callable[[str, List[str]], str]:
    """Write lines to tmp_path/<name>; names ending in .gz are gzipped."""
    import gzip

    def _write(name: str, lines: List[str]) -> str:
        path = tmp_path / name
        text = "".join(line + "\n" for line in lines)
        if name.endswith(".gz"):
            with gzip.open(path, "wt", encoding="utf-8") as f:
                f.write(text)
        else:
            path.write_text(text, encoding="utf-8")
        return str(path)

    return _write
