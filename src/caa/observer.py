from __future__ import annotations

from typing import Protocol

from .models import CAACheckRecord, IssuanceRecord


class AuditObserver(Protocol):
    # Hooks the core calls while reading sources. The core never configures
    # logging itself; the CLI passes a logging-backed observer.
    def source_started(self, source: str, kind: str) -> None:
        ...

    def source_finished(self, source: str, kind: str, records: int, lines: int) -> None:
        ...

    def issuance_recorded(self, record: IssuanceRecord, in_scope: int) -> None:
        ...

    def check_applied(self, record: CAACheckRecord, covered: int) -> None:
        ...


class NullObserver:
    def source_started(self, source: str, kind: str) -> None:
        pass

    def source_finished(self, source: str, kind: str, records: int, lines: int) -> None:
        pass

    def issuance_recorded(self, record: IssuanceRecord, in_scope: int) -> None:
        pass

    def check_applied(self, record: CAACheckRecord, covered: int) -> None:
        pass
