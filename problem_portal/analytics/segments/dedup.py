"""Collapse re-reported problems that share a normalized title."""

from __future__ import annotations

from dataclasses import dataclass

import pandas as pd


@dataclass(slots=True)
class DedupResult:
    frame: pd.DataFrame
    duplicate_count: int = 0


def title_key(series: pd.Series) -> pd.Series:
    return series.fillna("").astype(str).str.strip().str.lower()


def deduplicate(df: pd.DataFrame, enabled: bool = True) -> DedupResult:
    """Keep the first row per lower-cased, trimmed title, in original order.

    When disabled the input frame itself is returned untouched.
    """
    if not enabled or df.empty:
        return DedupResult(frame=df, duplicate_count=0)
    keys = title_key(df["title"])
    out = df[~keys.duplicated(keep="first")].copy()
    return DedupResult(frame=out, duplicate_count=len(df) - len(out))
