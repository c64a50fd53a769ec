"""Mapping raw record-store rows into ProblemRecord / SolutionArticle instances."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import pandas as pd

from .config import PROBLEM_COLUMNS, PROBLEM_FIELDS, SOLUTION_FIELDS
from .fields import display_of, is_active, text_value, to_field, value_of
from .models import Choice, FieldValue, ProblemRecord, SolutionArticle, Stats


def parse_dt(raw: Any):
    """Parse a timestamp field into an aware UTC datetime, or None."""
    text = value_of(raw)
    if text is None or text == "":
        return None
    ts = pd.to_datetime(text, utc=True, errors="coerce")
    if ts is None or pd.isna(ts):
        return None
    return ts.to_pydatetime()


def _as_count(raw: Any) -> int:
    try:
        count = int(value_of(raw))
    except (TypeError, ValueError):
        return 0
    return max(count, 0)


def _normalized_value_field(raw: Any) -> FieldValue:
    # Enumerated codes compare as strings ("1" vs 1 from different sources)
    return FieldValue(display=display_of(raw), value=text_value(raw))


def map_problem(raw: Mapping[str, Any]) -> ProblemRecord:
    def pick(name: str) -> Any:
        return raw.get(PROBLEM_FIELDS[name])

    return ProblemRecord(
        id=to_field(pick("id")),
        number=to_field(pick("number")),
        title=to_field(pick("title")),
        description=to_field(pick("description")),
        priority=_normalized_value_field(pick("priority")),
        state=_normalized_value_field(pick("state")),
        category=_normalized_value_field(pick("category")),
        active=to_field(pick("active")),
        assignee=to_field(pick("assignee")),
        updated_at=parse_dt(pick("updated")),
        created_at=parse_dt(pick("created")),
    )


def map_problems(raw_rows: Iterable[Mapping[str, Any]] | None) -> list[ProblemRecord]:
    if not raw_rows:
        return []
    return [map_problem(row) for row in raw_rows if isinstance(row, Mapping)]


def map_solution(raw: Mapping[str, Any]) -> SolutionArticle:
    def pick(name: str) -> Any:
        return raw.get(SOLUTION_FIELDS[name])

    return SolutionArticle(
        id=text_value(pick("id")),
        title=display_of(pick("title")),
        body_html=display_of(pick("body")),
        author=display_of(pick("author")),
        published_at=parse_dt(pick("published")),
        helpful_count=_as_count(pick("helpful")),
        not_helpful_count=_as_count(pick("not_helpful")),
    )


def map_solutions(raw_rows: Iterable[Mapping[str, Any]] | None) -> list[SolutionArticle]:
    if not raw_rows:
        return []
    return [map_solution(row) for row in raw_rows if isinstance(row, Mapping)]


def map_choices(raw_rows: Iterable[Mapping[str, Any]] | None) -> list[Choice]:
    out: list[Choice] = []
    for row in raw_rows or []:
        if not isinstance(row, Mapping):
            continue
        value = text_value(row.get("value"))
        if not value:
            continue
        label = display_of(row.get("label")) or value
        out.append(Choice(value=value, label=label))
    return out


def map_stats(raw: Mapping[str, Any]) -> Stats:
    def counts(key: str, alias: str) -> dict[str, int]:
        block = raw.get(key) or raw.get(alias) or {}
        if not isinstance(block, Mapping):
            return {}
        return {str(k): _as_count(v) for k, v in block.items()}

    return Stats(
        total=_as_count(raw.get("total")),
        active=_as_count(raw.get("active")),
        inactive=_as_count(raw.get("inactive")),
        by_priority=counts("by_priority", "byPriority"),
        by_state=counts("by_state", "byState"),
        by_category=counts("by_category", "byCategory"),
    )


def problems_to_dataframe(records: Iterable[ProblemRecord]) -> pd.DataFrame:
    rows = []
    for r in records:
        rows.append(
            {
                "id": r.record_id,
                "number": r.number.display,
                "title": r.title.display,
                "description": r.description.display,
                "priority": str(r.priority.value),
                "priority_display": r.priority.display,
                "state": str(r.state.value),
                "state_display": r.state.display,
                "category": str(r.category.value),
                "category_display": r.category.display,
                "active": is_active(r.active),
                "assignee": r.assignee.display,
                "updated": r.updated_at,
                "created": r.created_at,
            }
        )
    df = pd.DataFrame(rows, columns=list(PROBLEM_COLUMNS))
    df["active"] = df["active"].astype(bool)
    for col in ("updated", "created"):
        df[col] = pd.to_datetime(df[col], utc=True, errors="coerce")
    return df
