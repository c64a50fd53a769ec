"""Central column metadata and helpers for table rendering."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import streamlit as st

# Mapping of raw column keys to (label, help text, format key)
# format key: "int" -> integer, "float1" -> 1 decimal float, "bool" -> checkbox,
# "datetime" -> timestamp, None -> default text column
COLUMN_METADATA: dict[str, tuple[str, str, str | None]] = {
    "number": ("Number", "Problem number assigned by the record store.", None),
    "title": ("Title", "Short description of the problem.", None),
    "priority_display": ("Priority", "Priority of the problem (1 is most severe).", None),
    "state_display": ("State", "Current lifecycle state.", None),
    "category_display": ("Category", "Problem category.", None),
    "active": ("Active", "Whether the problem is still being worked.", "bool"),
    "assignee": ("Assignee", "Current owner of the problem.", None),
    "updated": ("Updated", "Timestamp of the most recent update.", "datetime"),
    "created": ("Created", "Timestamp when the problem was opened.", "datetime"),
    "days_since_update": ("Days Since Update", "Days elapsed since the most recent update.", "float1"),
    "days_open": ("Days Open", "Days since the problem was opened.", "float1"),
    "count": ("Count", "Number of problems in the bucket.", "int"),
}


def apply_column_metadata(
    columns: Iterable[str],
    existing: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Return a column_config dictionary with human labels and hover help."""

    config: dict[str, Any] = dict(existing or {})
    for col in columns:
        if col in config:
            continue
        meta = COLUMN_METADATA.get(col)
        if not meta:
            continue
        label, help_text, fmt = meta
        if fmt == "int":
            config[col] = st.column_config.NumberColumn(label, help=help_text, format="%d")
        elif fmt == "float1":
            config[col] = st.column_config.NumberColumn(label, help=help_text, format="%.1f")
        elif fmt == "bool":
            config[col] = st.column_config.CheckboxColumn(label, help=help_text)
        elif fmt == "datetime":
            config[col] = st.column_config.DatetimeColumn(label, help=help_text, format="YYYY-MM-DD HH:mm")
        else:
            config[col] = st.column_config.Column(label, help=help_text)
    return config
