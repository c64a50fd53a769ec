"""Reusable table helpers for Streamlit rendering."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime

import pandas as pd
import streamlit as st

from problem_portal.analytics.metrics.aging import add_age_metrics
from problem_portal.core.config import DISPLAY_ORDER_PROBLEM_LIST
from problem_portal.core.models import Choice
from problem_portal.core.status import priority_label, state_label
from problem_portal.visual.column_metadata import apply_column_metadata


def _fill_labels(
    df: pd.DataFrame,
    value_col: str,
    display_col: str,
    labeler: Callable[[str | None], str],
) -> pd.Series:
    # Store-provided display strings win; blanks are labelled from the value code
    display = df[display_col].fillna("").astype(str).str.strip()
    derived = df[value_col].map(labeler)
    return display.where(display != "", derived)


def label_choices(df: pd.DataFrame, choices: dict[str, Iterable[Choice]] | None = None) -> pd.DataFrame:
    """Fill blank ``*_display`` columns from choice lists or the built-in labels."""
    if df.empty:
        return df
    choices = choices or {}
    priority_choices = list(choices.get("priority", ()))
    state_choices = list(choices.get("state", ()))
    category_labels = {c.value: c.label for c in choices.get("category", ())}
    out = df.copy()
    out["priority_display"] = _fill_labels(out, "priority", "priority_display", lambda v: priority_label(v, priority_choices))
    out["state_display"] = _fill_labels(out, "state", "state_display", lambda v: state_label(v, state_choices))
    out["category_display"] = _fill_labels(
        out, "category", "category_display", lambda v: category_labels.get(str(v or ""), str(v or "")) or "Unknown"
    )
    return out


def prepare_problem_table(
    df: pd.DataFrame,
    choices: dict[str, Iterable[Choice]] | None = None,
    *,
    extra_columns: list[str] | None = None,
    now: datetime | None = None,
) -> tuple[pd.DataFrame, list[str], dict[str, object]]:
    if df.empty:
        return df, [], {}

    table = label_choices(add_age_metrics(df, now), choices)
    table["days_since_update"] = pd.to_numeric(table["days_since_update"], errors="coerce").round(1)
    display_cols: list[str] = [col for col in DISPLAY_ORDER_PROBLEM_LIST if col in table.columns]

    if extra_columns:
        for col in extra_columns:
            if col in table.columns and col not in display_cols:
                display_cols.append(col)

    return table, display_cols, apply_column_metadata(display_cols)


def render_problem_table(df: pd.DataFrame, choices: dict[str, Iterable[Choice]] | None = None, limit: int = 1000):
    table, cols, cfg = prepare_problem_table(df, choices, extra_columns=["days_since_update"])
    if not cols:
        st.info("No problems to show.")
        return
    st.dataframe(table[cols].head(limit), hide_index=True, column_config=cfg)
