"""
CAA log checker.

Audits RA issuance logs against VA CAA-check logs and reports every issuance
that no CAA check covered.

Public entrypoints: CAALogAuditor, main
"""

__version__ = "0.1.0"

from .audit import AuditResult, CAALogAuditor

__all__ = ["AuditResult", "CAALogAuditor", "__version__"]
