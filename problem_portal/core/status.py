"""Priority and lifecycle-state labelling utilities.

Centralized so the listing, detail and statistics views label codes the same
way. Uses the tables from config.py (PRIORITY_LABELS, STATE_LABELS,
RESOLVED_STATES, CLOSED_STATES); a resolved choice list, when available,
takes precedence over the built-in labels.
"""

from __future__ import annotations

from collections.abc import Iterable

from .config import (
    CLOSED_STATES,
    DESCRIPTION_SNIPPET_LENGTH,
    PRIORITY_COLORS,
    PRIORITY_LABELS,
    RESOLVED_STATES,
    STATE_LABELS,
    UNKNOWN_KEY,
)
from .models import Choice


def _lookup(value: str | None, choices: Iterable[Choice] | None, builtin: dict[str, str]) -> str:
    if value is None:
        return UNKNOWN_KEY
    text = str(value).strip()
    if not text or text == UNKNOWN_KEY:
        return UNKNOWN_KEY
    for choice in choices or ():
        if choice.value == text:
            return choice.label
    return builtin.get(text, text)


def priority_label(value: str | None, choices: Iterable[Choice] | None = None) -> str:
    """Human label for a priority code.

    Examples
    --------
    >>> priority_label("1")
    'Critical'
    >>> priority_label("")
    'Unknown'
    """
    return _lookup(value, choices, PRIORITY_LABELS)


def state_label(value: str | None, choices: Iterable[Choice] | None = None) -> str:
    """Human label for a lifecycle state code.

    Examples
    --------
    >>> state_label("106")
    'Resolved'
    >>> state_label("999")
    '999'
    """
    return _lookup(value, choices, STATE_LABELS)


def priority_color(value: str | None) -> str:
    return PRIORITY_COLORS.get(str(value or "").strip(), "#999999")


def is_resolved_state(value: str | None) -> bool:
    return str(value or "").strip() in RESOLVED_STATES


def is_closed_state(value: str | None) -> bool:
    return str(value or "").strip() in CLOSED_STATES


def snippet(text: str | None, length: int = DESCRIPTION_SNIPPET_LENGTH) -> str:
    """Shorten a description for list cards."""
    if not text:
        return ""
    cleaned = " ".join(str(text).split())
    if len(cleaned) <= length:
        return cleaned
    return cleaned[:length].rstrip() + "..."
