"""Problem-set aggregations for dashboard summaries."""

from __future__ import annotations

from datetime import datetime

import pandas as pd

from problem_portal.analytics.metrics.aging import add_age_metrics
from problem_portal.core.config import CLOSED_STATES, RECENT_ACTIVITY_DAYS, RESOLVED_STATES, UNKNOWN_KEY
from problem_portal.core.models import ActivitySummary, Stats


def _bucket_counts(series: pd.Series) -> dict[str, int]:
    keys = series.fillna("").astype(str).str.strip().replace("", UNKNOWN_KEY)
    return {str(k): int(v) for k, v in keys.value_counts(sort=False).items()}


def summarize(df: pd.DataFrame) -> Stats:
    """Count rows overall, by active flag, and by priority/state/category value.

    Every row lands in exactly one bucket of each map; empty values are
    grouped under ``"Unknown"``.
    """
    if df.empty:
        return Stats()
    active = int(df["active"].astype(bool).sum())
    return Stats(
        total=len(df),
        active=active,
        inactive=len(df) - active,
        by_priority=_bucket_counts(df["priority"]),
        by_state=_bucket_counts(df["state"]),
        by_category=_bucket_counts(df["category"]),
    )


def recent_activity(
    df: pd.DataFrame,
    now: datetime | None = None,
    days: int = RECENT_ACTIVITY_DAYS,
) -> ActivitySummary:
    """New and resolved problems within the last ``days``, plus open problem count."""
    if df.empty:
        return ActivitySummary()
    aged = add_age_metrics(df, now)
    states = aged["state"].fillna("").astype(str).str.strip()
    created_recently = aged["days_open"] <= days
    updated_recently = aged["days_since_update"] <= days
    return ActivitySummary(
        new_problems=int(created_recently.sum()),
        resolved_problems=int((states.isin(RESOLVED_STATES) & updated_recently).sum()),
        total_open=int((~states.isin(CLOSED_STATES)).sum()),
    )


def distribution_frame(counts: dict[str, int], label: str = "key") -> pd.DataFrame:
    """Tabular form of a group-by map, largest bucket first."""
    if not counts:
        return pd.DataFrame(columns=[label, "count"])
    out = pd.DataFrame({label: list(counts.keys()), "count": list(counts.values())})
    return out.sort_values(by="count", ascending=False, kind="stable").reset_index(drop=True)
