# test_audit.py
from __future__ import annotations

from datetime import timedelta

import pytest

from caa.models import AuditFinding, CoverageWindow, IssuanceBounds, ParseError
from caa_log_checker.audit import CAALogAuditor
from caa_log_checker.sources import open_log

H = timedelta(hours=1)


def test_open_log_reads_plain_and_gzip(write_log):
    plain = write_log("ra.log", ["one", "two"])
    packed = write_log("ra.log.gz", ["one", "two"])

    with open_log(plain) as lines:
        assert list(lines) == ["one", "two"]
    with open_log(packed) as lines:
        assert list(lines) == ["one", "two"]


def test_open_log_missing_file_raises(tmp_path):
    with pytest.raises(OSError):
        with open_log(str(tmp_path / "nope.log")):
            pass


def test_fully_covered_logs_are_clean(write_log, ra_line, va_line, t0):
    ra = write_log("ra.log", [
        ra_line(t0 + H, ["a.example.com", "b.example.com"]),
        ra_line(t0 + 2 * H, ["example.com"]),
    ])
    va = write_log("va.log.gz", [
        va_line(t0, "a.example.com", present=True),
        va_line(t0, "b.example.com", present=False),
    ])

    result = CAALogAuditor().audit([ra], [va])

    assert result.clean
    assert result.overall == "clean"
    assert result.issuances_read == 2
    assert result.checks_read == 2
    result.raise_for_findings()


def test_uncovered_issuance_is_reported(write_log, ra_line, va_line, t0):
    ra = write_log("ra.log", [ra_line(t0, ["x.example.com"]), ra_line(t0, ["y.example.com"])])
    va = write_log("va.log", [va_line(t0, "y.example.com")])

    result = CAALogAuditor().audit([ra], [va])

    assert result.findings == ["2020-06-23T12:00:00.000000+00:00: x.example.com"]
    assert result.to_dict()["remaining"] == {"x.example.com": [t0]}
    with pytest.raises(AuditFinding):
        result.raise_for_findings()


def test_multiple_va_logs_each_drain_the_index(write_log, ra_line, va_line, t0):
    ra = write_log("ra.log", [ra_line(t0 + H, ["a.example.com"]), ra_line(t0 + H, ["b.example.com"])])
    va1 = write_log("va-1.log", [va_line(t0, "a.example.com")])
    va2 = write_log("va-2.log", [va_line(t0, "b.example.com")])

    assert CAALogAuditor().audit([ra], [va1, va2]).clean


def test_no_va_logs_reports_everything(write_log, ra_line, t0):
    ra = write_log("ra.log", [ra_line(t0, ["a.example.com"])])
    result = CAALogAuditor().audit([ra], [])
    assert result.findings == ["2020-06-23T12:00:00.000000+00:00: a.example.com"]


def test_report_order_independent_of_file_order(write_log, ra_line, t0):
    ra1 = write_log("ra-1.log", [ra_line(t0 + H, ["b.example.com"])])
    ra2 = write_log("ra-2.log", [ra_line(t0, ["a.example.com"])])

    first = CAALogAuditor().audit([ra1, ra2], []).findings
    second = CAALogAuditor().audit([ra2, ra1], []).findings
    assert first == second


def test_tolerance_and_bounds_are_applied(write_log, ra_line, va_line, t0):
    ra = write_log("ra.log", [
        ra_line(t0 - timedelta(seconds=1), ["skew.example.com"]),
        ra_line(t0 + 48 * H, ["out-of-scope.example.com"]),
    ])
    va = write_log("va.log", [va_line(t0, "skew.example.com")])

    auditor = CAALogAuditor(
        window=CoverageWindow(tolerance=timedelta(seconds=5)),
        bounds=IssuanceBounds(earliest=t0 - 12 * H, latest=t0 + 12 * H),
    )
    assert auditor.audit([ra], [va]).clean


def test_parse_error_aborts_with_source_and_line(write_log, ra_line, va_line, t0):
    ra = write_log("ra.log", [ra_line(t0, ["a.example.com"])])
    va = write_log("va.log", [
        "noise",
        va_line(t0, "a.example.com"),
        "oops host Checked CAA records for a.example.com, [Present: true",
    ])

    with pytest.raises(ParseError) as exc:
        CAALogAuditor().audit([ra], [va])
    assert exc.value.source == va
    assert exc.value.line_number == 3


def test_load_issuances_and_process_checks_compose(write_log, ra_line, va_line, t0):
    ra = write_log("ra.log", [ra_line(t0 + H, ["a.example.com"])])
    va = write_log("va.log", [va_line(t0, "a.example.com")])

    auditor = CAALogAuditor()
    index = auditor.load_issuances([ra])
    assert index.names() == ["a.example.com"]
    assert auditor.process_checks([va], index) == 1
    assert not index
