"""Aging metrics computation (pure functions)."""

from __future__ import annotations

from datetime import datetime

import pandas as pd
import pytz


def as_utc_timestamp(now: datetime | None = None) -> pd.Timestamp:
    if now is None:
        return pd.Timestamp.now(tz=pytz.UTC)
    ts = pd.Timestamp(now)
    if ts.tzinfo is None:
        return ts.tz_localize(pytz.UTC)
    return ts.tz_convert(pytz.UTC)


def add_age_metrics(df: pd.DataFrame, now: datetime | None = None) -> pd.DataFrame:
    """Add ``days_since_update`` and ``days_open`` (fractional days, NaN when unknown)."""
    out = df.copy()
    reference = as_utc_timestamp(now)
    updated = pd.to_datetime(out["updated"], utc=True, errors="coerce")
    created = pd.to_datetime(out["created"], utc=True, errors="coerce")
    out["days_since_update"] = (reference - updated).dt.total_seconds() / 86400.0
    out["days_open"] = (reference - created).dt.total_seconds() / 86400.0
    return out
