"""Accessors for record fields that arrive either as scalars or display/value pairs.

The record store returns each column either as a bare scalar or as a mapping
such as ``{"display_value": "Resolved", "value": "106"}``. Everything outside
this module reads fields through :func:`display_of` / :func:`value_of` (or the
normalized :class:`FieldValue` built by :func:`to_field`) and never inspects
the raw shape.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .models import FieldValue

_DISPLAY_KEYS = ("display_value", "displayValue")
_VALUE_KEYS = ("value",)


def _first_present(raw: Mapping, keys) -> Any:
    for key in keys:
        found = raw.get(key)
        if found is not None:
            return found
    return None


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def display_of(raw: Any) -> str:
    """Return the human readable string for a field, or '' when absent."""
    if raw is None:
        return ""
    if isinstance(raw, FieldValue):
        return raw.display
    if isinstance(raw, Mapping):
        shown = _first_present(raw, _DISPLAY_KEYS)
        if shown is None:
            shown = _first_present(raw, _VALUE_KEYS)
        return _as_text(shown)
    return _as_text(raw)


def value_of(raw: Any) -> Any:
    """Return the underlying value for a field, or '' when absent."""
    if raw is None:
        return ""
    if isinstance(raw, FieldValue):
        return raw.value
    if isinstance(raw, Mapping):
        found = _first_present(raw, _VALUE_KEYS)
        if found is None:
            found = _first_present(raw, _DISPLAY_KEYS)
        return "" if found is None else found
    return raw


def text_value(raw: Any) -> str:
    """Underlying value as a string, for comparisons against facet selections."""
    return _as_text(value_of(raw)).strip()


def to_field(raw: Any) -> FieldValue:
    return FieldValue(display=display_of(raw), value=value_of(raw))


def is_active(raw: Any) -> bool:
    """True iff the underlying value is boolean True or the string "true"."""
    value = value_of(raw)
    return value is True or value == "true"
