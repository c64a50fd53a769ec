"""Domain data models for problem records, solutions, choices, and view state."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Generic, TypeVar

from .config import ALL, FACET_NAMES

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class FieldValue:
    """A record field normalized to its display string and underlying value."""

    display: str = ""
    value: Any = ""


EMPTY_FIELD = FieldValue()


@dataclass(frozen=True, slots=True)
class ProblemRecord:
    id: FieldValue
    number: FieldValue = EMPTY_FIELD
    title: FieldValue = EMPTY_FIELD
    description: FieldValue = EMPTY_FIELD
    priority: FieldValue = EMPTY_FIELD
    state: FieldValue = EMPTY_FIELD
    category: FieldValue = EMPTY_FIELD
    active: FieldValue = EMPTY_FIELD
    assignee: FieldValue = EMPTY_FIELD
    updated_at: datetime | None = None
    created_at: datetime | None = None

    @property
    def record_id(self) -> str:
        return str(self.id.value)


@dataclass(frozen=True, slots=True)
class Choice:
    value: str
    label: str


@dataclass(frozen=True, slots=True)
class SolutionArticle:
    id: str
    title: str
    body_html: str
    author: str
    published_at: datetime | None
    helpful_count: int = 0
    not_helpful_count: int = 0


@dataclass(frozen=True, slots=True)
class FilterState:
    """Facet selections plus the free-text search term.

    Search mode and facet mode are mutually exclusive: entering a search term
    makes the facets inert, and picking a concrete facet value drops the term.
    """

    category: str = ALL
    priority: str = ALL
    state: str = ALL
    active: str = ALL
    date_range: str = ALL
    search_term: str = ""
    is_search_mode: bool = False

    def with_search(self, term: str | None) -> FilterState:
        cleaned = (term or "").strip()
        if not cleaned:
            return self.without_search()
        return replace(self, search_term=cleaned, is_search_mode=True)

    def without_search(self) -> FilterState:
        return replace(self, search_term="", is_search_mode=False)

    def with_facet(self, name: str, value: Any) -> FilterState:
        if name not in FACET_NAMES:
            raise ValueError(f"Unknown facet: {name!r}")
        text = ALL if value is None else str(value)
        if text == ALL:
            return replace(self, **{name: ALL})
        return replace(self, search_term="", is_search_mode=False, **{name: text})

    def reset_facets(self) -> FilterState:
        return replace(self, **{name: ALL for name in FACET_NAMES})

    @property
    def facets(self) -> dict[str, str]:
        return {name: getattr(self, name) for name in FACET_NAMES}

    @property
    def searching(self) -> bool:
        return self.is_search_mode and bool(self.search_term.strip())


@dataclass(frozen=True, slots=True)
class ProblemFilter:
    """Opaque server-side filter handed to the record store."""

    category: str | None = None
    priority: str | None = None
    state: str | None = None
    active_only: bool | None = None
    date_range: str | None = None


@dataclass(slots=True)
class Stats:
    total: int = 0
    active: int = 0
    inactive: int = 0
    by_priority: dict[str, int] = field(default_factory=dict)
    by_state: dict[str, int] = field(default_factory=dict)
    by_category: dict[str, int] = field(default_factory=dict)


@dataclass(slots=True)
class ActivitySummary:
    new_problems: int = 0
    resolved_problems: int = 0
    total_open: int = 0


class DataSource(str, Enum):
    LIVE = "live"
    FALLBACK = "fallback"


@dataclass(slots=True)
class FetchResult(Generic[T]):
    """Result of a read against the record store, tagged with its provenance."""

    data: T
    source: DataSource = DataSource.LIVE
    error: str | None = None

    @property
    def is_fallback(self) -> bool:
        return self.source is DataSource.FALLBACK


@dataclass(frozen=True, slots=True)
class SubmissionOutcome:
    accepted: bool
    message: str = ""
