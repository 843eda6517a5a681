# test_report.py
from __future__ import annotations

from datetime import timedelta, timezone, datetime

import pytest

from caa.index import IssuanceIndex
from caa.models import AuditFinding
from reporting.analytics import ReportAnalyzer
from reporting.assembler import Assemble
from reporting.report import build_report, format_finding, raise_for_findings, render_report

H = timedelta(hours=1)


def test_empty_index_is_clean():
    idx = IssuanceIndex()
    assert build_report(idx) == []
    raise_for_findings(idx)  # no exception


def test_format_finding_is_fixed_width_utc():
    t = datetime(2020, 6, 23, 14, 0, tzinfo=timezone(timedelta(hours=2)))
    assert format_finding(t, "x.example.com") == "2020-06-23T12:00:00.000000+00:00: x.example.com"


def test_report_is_sorted_by_time_then_name(t0):
    idx = IssuanceIndex()
    idx.add("b.example.com", t0 + H)
    idx.add("z.example.com", t0)
    idx.add("a.example.com", t0 + H)
    idx.add("b.example.com", t0 + timedelta(microseconds=500))

    assert build_report(idx) == [
        "2020-06-23T12:00:00.000000+00:00: z.example.com",
        "2020-06-23T12:00:00.000500+00:00: b.example.com",
        "2020-06-23T13:00:00.000000+00:00: a.example.com",
        "2020-06-23T13:00:00.000000+00:00: b.example.com",
    ]


def test_report_is_deterministic_across_insertion_order(t0):
    pairs = [("a.example.com", t0), ("b.example.com", t0 + H), ("a.example.com", t0 + 2 * H)]

    forward, backward = IssuanceIndex(), IssuanceIndex()
    for name, t in pairs:
        forward.add(name, t)
    for name, t in reversed(pairs):
        backward.add(name, t)

    assert build_report(forward) == build_report(backward)


def test_raise_for_findings_carries_the_report(t0):
    idx = IssuanceIndex()
    idx.add("x.example.com", t0)

    with pytest.raises(AuditFinding) as exc:
        raise_for_findings(idx)

    assert exc.value.findings == ["2020-06-23T12:00:00.000000+00:00: x.example.com"]
    assert str(exc.value) == render_report(exc.value.findings)


# ----------------------------
# Analytics + assembler
# ----------------------------
def test_analytics_on_empty_index_keeps_keys():
    a = ReportAnalyzer()
    out = a.analytics(a.frame(IssuanceIndex()))
    assert set(out) == {"counts_by_name", "counts_by_day", "counts_by_domain"}
    assert all(df.empty for df in out.values())


def test_analytics_counts(t0):
    idx = IssuanceIndex()
    idx.add("www.example.com", t0)
    idx.add("www.example.com", t0 + 24 * H)
    idx.add("*.example.com", t0)
    idx.add("other.org", t0)

    a = ReportAnalyzer()
    df = a.frame(idx)
    assert list(df.columns) == ["timestamp", "name"]
    assert len(df) == 4

    out = a.analytics(df)
    by_name = out["counts_by_name"].to_dict(orient="records")
    assert by_name[0] == {"name": "www.example.com", "count": 2}

    by_day = out["counts_by_day"].to_dict(orient="records")
    assert by_day == [{"day": "2020-06-23", "count": 3}, {"day": "2020-06-24", "count": 1}]

    by_domain = out["counts_by_domain"].to_dict(orient="records")
    assert by_domain == [{"domain": "example.com", "count": 3}, {"domain": "other.org", "count": 1}]


class _FakeResult:
    def __init__(self, findings, remaining):
        self.findings = findings
        self.remaining = remaining

    def to_dict(self):
        return {
            "overall": "uncovered" if self.findings else "clean",
            "issuances_read": 3,
            "checks_read": 5,
            "findings": self.findings,
            "remaining": self.remaining,
        }


def test_assemble_builds_json_safe_payload(t0):
    idx = IssuanceIndex()
    idx.add("x.example.com", t0)
    a = ReportAnalyzer()
    analytics = a.analytics(a.frame(idx))

    result = _FakeResult(build_report(idx), idx.to_dict())
    out = Assemble().build(result, analytics=analytics, meta={"version": "test"})

    assert out["overall"] == "uncovered"
    assert out["summary"] == {"issuances_read": 3, "checks_read": 5, "uncovered": 1, "names": 1}
    assert out["analytics"]["counts_by_name"] == [{"name": "x.example.com", "count": 1}]
    assert out["audit"]["remaining"]["x.example.com"] == ["2020-06-23T12:00:00+00:00"]
    assert out["meta"] == {"version": "test"}
