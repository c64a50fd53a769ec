"""DataFrame view filters: free-text search or facet selection, never both."""

from __future__ import annotations

from datetime import datetime

import pandas as pd

from problem_portal.analytics.metrics.aging import add_age_metrics
from problem_portal.core.config import ALL, DATE_RANGE_WINDOWS
from problem_portal.core.models import FilterState

SEARCH_COLUMNS = ("title", "description", "number")
VALUE_FACETS = ("category", "priority", "state")


def search_mask(df: pd.DataFrame, term: str) -> pd.Series:
    """Rows whose title, description OR number contains ``term`` (case-insensitive)."""
    needle = (term or "").strip().lower()
    if not needle:
        return pd.Series(True, index=df.index)
    mask = pd.Series(False, index=df.index)
    for col in SEARCH_COLUMNS:
        text = df[col].fillna("").astype(str).str.lower()
        mask |= text.str.contains(needle, regex=False)
    return mask


def date_range_mask(df: pd.DataFrame, date_range: str, now: datetime | None = None) -> pd.Series:
    if date_range == ALL:
        return pd.Series(True, index=df.index)
    window = DATE_RANGE_WINDOWS.get(date_range)
    if window is None:
        raise ValueError(f"Unknown date range: {date_range!r}")
    aged = add_age_metrics(df, now)
    # NaN ages (missing/unparsable updated) compare False and drop out
    return aged["days_since_update"] <= window


def facet_mask(df: pd.DataFrame, filters: FilterState, now: datetime | None = None) -> pd.Series:
    """AND of every facet constraint; ``"all"`` leaves a facet unconstrained."""
    mask = pd.Series(True, index=df.index)
    for name in VALUE_FACETS:
        wanted = getattr(filters, name)
        if wanted == ALL:
            continue
        values = df[name].fillna("").astype(str).str.strip()
        mask &= values == str(wanted)
    if filters.active != ALL:
        wanted_active = str(filters.active).strip().lower() == "true"
        mask &= df["active"].astype(bool) == wanted_active
    if filters.date_range != ALL:
        mask &= date_range_mask(df, filters.date_range, now)
    return mask


def apply_view(df: pd.DataFrame, filters: FilterState, now: datetime | None = None) -> pd.DataFrame:
    """Apply the search-or-facets policy, preserving input order."""
    if df.empty:
        return df
    if filters.searching:
        return df[search_mask(df, filters.search_term)].copy()
    return df[facet_mask(df, filters, now)].copy()
