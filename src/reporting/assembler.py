from typing import Any, Dict, Optional
from fastapi.encoders import jsonable_encoder


class Assemble:
    """
    Shapes an audit result into one JSON-safe response.

    Design intent:
      - The audit focuses on detection (which issuances are uncovered)
      - The assembler is responsible for the output format:
          - JSON-safe output
          - summary counts
          - analytics tables as lists of records
    """

    def build(
        self,
        result: Any,
        analytics: Optional[Dict[str, Any]] = None,
        meta: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Build a unified response.

        Args:
            result: An AuditResult (anything with to_dict() is accepted).
            analytics: Optional dict of table name -> pandas DataFrame.
            meta: Optional metadata (version, source, etc.).

        Returns:
            A dict containing only JSON-safe values (dict/list/str/int/etc.).
        """
        result_json = self._to_json(result)
        findings = result_json.get("findings") or []

        response: Dict[str, Any] = {
            "overall": result_json.get("overall", "unknown"),
            "summary": self._summarize(result_json),
            "findings": findings,
            "analytics": {k: self._table(v) for k, v in (analytics or {}).items()},
            "meta": meta or {},
            "audit": result_json,
        }

        # Final safety pass: ensure *everything* in response is JSON-safe.
        return jsonable_encoder(response)

    def _to_json(self, obj: Any) -> Any:
        if hasattr(obj, "to_dict"):
            return jsonable_encoder(obj.to_dict())
        return jsonable_encoder(obj)

    def _table(self, df: Any) -> Any:
        # DataFrames go out as a list of row dicts
        if hasattr(df, "to_dict"):
            return df.to_dict(orient="records")
        return df

    def _summarize(self, result_json: Dict[str, Any]) -> Dict[str, Any]:
        findings = result_json.get("findings") or []
        remaining = result_json.get("remaining") or {}
        return {
            "issuances_read": result_json.get("issuances_read", 0),
            "checks_read": result_json.get("checks_read", 0),
            "uncovered": len(findings),
            "names": len(remaining),
        }
