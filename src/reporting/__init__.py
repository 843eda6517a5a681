"""
Reporting for the CAA log audit.

  - report: the sorted list of uncovered issuances (the audit's result)
  - analytics: pandas summaries of what is left uncovered
  - assembler: the JSON-safe payload for --json output
"""

from .report import build_report, format_finding, raise_for_findings, render_report

__all__ = ["build_report", "format_finding", "raise_for_findings", "render_report"]
