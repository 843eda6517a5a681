# Summaries of the issuances that are still uncovered after the audit.
# Used for the console summary and the JSON payload.

from typing import Any, Dict

import pandas as pd

from caa.index import IssuanceIndex

FRAME_COLUMNS = ["timestamp", "name"]


def _base_domain(name: str) -> str:
    # Last two labels, wildcard stripped. Good enough to group findings by
    # the zone an operator would look at first.
    labels = [x for x in name.lstrip("*.").split(".") if x]
    return ".".join(labels[-2:]) if labels else name


class ReportAnalyzer:

    def frame(self, index: IssuanceIndex) -> pd.DataFrame:
        rows = [
            {"timestamp": t, "name": name}
            for name, timestamps in index.items()
            for t in timestamps
        ]
        if not rows:
            return pd.DataFrame(columns=FRAME_COLUMNS)

        df = pd.DataFrame(rows, columns=FRAME_COLUMNS)
        df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True)
        return df.sort_values(["timestamp", "name"]).reset_index(drop=True)

    def analytics(self, df: pd.DataFrame) -> Dict[str, Any]:
        # Always return the same keys
        empty = {
            "counts_by_name": pd.DataFrame(columns=["name", "count"]),
            "counts_by_day": pd.DataFrame(columns=["day", "count"]),
            "counts_by_domain": pd.DataFrame(columns=["domain", "count"]),
        }
        if df is None or df.empty:
            return empty

        counts_by_name = (
            df.groupby("name")
              .size()
              .reset_index(name="count")
              .sort_values(["count", "name"], ascending=[False, True])
              .reset_index(drop=True)
        )

        counts_by_day = (
            df.assign(day=df["timestamp"].dt.strftime("%Y-%m-%d"))
              .groupby("day")
              .size()
              .reset_index(name="count")
              .sort_values("day")
              .reset_index(drop=True)
        )

        counts_by_domain = (
            df.assign(domain=df["name"].map(_base_domain))
              .groupby("domain")
              .size()
              .reset_index(name="count")
              .sort_values(["count", "domain"], ascending=[False, True])
              .reset_index(drop=True)
        )

        return {
            "counts_by_name": counts_by_name,
            "counts_by_day": counts_by_day,
            "counts_by_domain": counts_by_domain,
        }
