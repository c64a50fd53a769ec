"""Central configuration, constants, fallback tables, and shared column definitions."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, fields, replace
from typing import Any

# =============================================================================
# Record Store Settings
# =============================================================================
PROBLEM_ENTITY = "problem"
SOLUTION_ENTITY = "kb_knowledge"
MAX_PAGE_SIZE = 200  # Hard cap on records returned by a single fetch
DEFAULT_SEARCH_PAGE_SIZE = 100

# =============================================================================
# Fallback Choice Lists
# Used when the record store has no choice list for a field or is unreachable.
# Keys are (entity kind, field name); values are (value, label) pairs in
# display sequence.
# =============================================================================
FALLBACK_CHOICES: dict[tuple[str, str], Sequence[tuple[str, str]]] = {
    (PROBLEM_ENTITY, "category"): (
        ("software", "Software"),
        ("hardware", "Hardware"),
        ("network", "Network"),
        ("database", "Database"),
    ),
    # Priority uses integer codes 1-5 that are not stored as choice rows
    (PROBLEM_ENTITY, "priority"): (
        ("1", "1 - Critical"),
        ("2", "2 - High"),
        ("3", "3 - Moderate"),
        ("4", "4 - Low"),
        ("5", "5 - Planning"),
    ),
    (PROBLEM_ENTITY, "state"): (
        ("101", "New"),
        ("102", "Assess"),
        ("103", "Root Cause Analysis"),
        ("104", "Fix in Progress"),
        ("106", "Resolved"),
        ("107", "Closed"),
    ),
}

# =============================================================================
# Priority Configuration
# Lower code = more severe.
# =============================================================================
PRIORITY_LABELS: dict[str, str] = {
    "1": "Critical",
    "2": "High",
    "3": "Moderate",
    "4": "Low",
    "5": "Planning",
}

# Badge colours used by the listing and detail views
PRIORITY_COLORS: dict[str, str] = {
    "1": "#ff4444",
    "2": "#ff8800",
    "3": "#ffcc00",
    "4": "#44aa44",
    "5": "#4488cc",
}

# =============================================================================
# Lifecycle State Configuration
# =============================================================================
STATE_LABELS: dict[str, str] = {value: label for value, label in FALLBACK_CHOICES[(PROBLEM_ENTITY, "state")]}

RESOLVED_STATES: frozenset[str] = frozenset({"106"})
CLOSED_STATES: frozenset[str] = frozenset({"107"})

# =============================================================================
# Facets
# =============================================================================
ALL = "all"
FACET_NAMES: Sequence[str] = ("category", "priority", "state", "active", "date_range")

# Maximum age in days of the last update for each recency window
DATE_RANGE_WINDOWS: dict[str, float] = {
    "today": 1.0,
    "week": 7.0,
    "month": 30.0,
}

UNKNOWN_KEY = "Unknown"
RECENT_ACTIVITY_DAYS: int = 7
DESCRIPTION_SNIPPET_LENGTH: int = 150

# =============================================================================
# Raw record field names (record store column names)
# =============================================================================
PROBLEM_FIELDS: dict[str, str] = {
    "id": "sys_id",
    "number": "number",
    "title": "short_description",
    "description": "description",
    "priority": "priority",
    "state": "state",
    "category": "category",
    "active": "active",
    "updated": "sys_updated_on",
    "created": "sys_created_on",
    "assignee": "assigned_to",
}

SOLUTION_FIELDS: dict[str, str] = {
    "id": "sys_id",
    "title": "short_description",
    "body": "text",
    "author": "author",
    "published": "sys_created_on",
    "helpful": "helpful_count",
    "not_helpful": "not_helpful_count",
}

PROBLEM_COLUMNS: Sequence[str] = (
    "id",
    "number",
    "title",
    "description",
    "priority",
    "priority_display",
    "state",
    "state_display",
    "category",
    "category_display",
    "active",
    "assignee",
    "updated",
    "created",
)

DISPLAY_ORDER_PROBLEM_LIST: Sequence[str] = (
    "number",
    "title",
    "priority_display",
    "state_display",
    "category_display",
    "active",
    "assignee",
    "updated",
)


@dataclass(slots=True)
class PortalSettings:
    page_size: int = MAX_PAGE_SIZE
    search_page_size: int = DEFAULT_SEARCH_PAGE_SIZE
    # None waits forever on the record store
    remote_timeout_seconds: float | None = None
    dedupe_by_default: bool = True
    demo_seed: int = 7
    demo_size: int = 50
    log_level: str = "INFO"


SETTINGS = PortalSettings()


def settings_from_mapping(overrides: Mapping[str, Any] | None, base: PortalSettings | None = None) -> PortalSettings:
    """Copy ``base`` with known keys replaced from ``overrides`` (e.g. ``st.secrets["portal"]``).

    Unknown keys are ignored; values are coerced to the field's type and page
    sizes are clamped to ``MAX_PAGE_SIZE``.
    """
    settings = replace(base or SETTINGS)
    for item in fields(PortalSettings):
        if not overrides or item.name not in overrides:
            continue
        raw = overrides[item.name]
        if item.name == "remote_timeout_seconds":
            value: Any = None if raw in (None, "", 0) else float(raw)
        elif item.name == "dedupe_by_default":
            value = raw if isinstance(raw, bool) else str(raw).strip().lower() in {"1", "true", "yes", "on"}
        elif item.name == "log_level":
            value = str(raw).upper()
        else:
            value = int(raw)
        setattr(settings, item.name, value)
    settings.page_size = max(1, min(settings.page_size, MAX_PAGE_SIZE))
    settings.search_page_size = max(1, min(settings.search_page_size, MAX_PAGE_SIZE))
    return settings
