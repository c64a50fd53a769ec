"""Streamlit rendering for the problem listing and detail views.

Render functions take plain data and callbacks; they never talk to the record
store. Callbacks are wired to widget ``on_click`` / ``on_change`` hooks so the
caller's state is updated before the next script run renders it.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping

import pandas as pd
import streamlit as st

from problem_portal.core.config import ALL, DATE_RANGE_WINDOWS
from problem_portal.core.models import Choice, DataSource, FilterState, SolutionArticle
from problem_portal.core.status import priority_color, priority_label, snippet, state_label
from problem_portal.core.votes import helpful_percentage, total_votes
from problem_portal.features.portal.state import DetailState, Notification, PortalView

FACET_LABELS = {
    "category": "Category",
    "priority": "Priority",
    "state": "State",
    "active": "Active",
    "date_range": "Updated",
}
ACTIVE_OPTIONS = {ALL: "All", "true": "Active", "false": "Inactive"}
DATE_RANGE_OPTIONS = {ALL: "Any time", "today": "Today", "week": "Last 7 days", "month": "Last 30 days"}
MAX_CARDS = 50


def _badge(text: str, color: str) -> str:
    return (
        f"<span style='background:{color};color:white;padding:2px 8px;"
        f"border-radius:10px;font-size:0.8em'>{text}</span>"
    )


def _fmt_ts(value) -> str:
    ts = pd.to_datetime(value, utc=True, errors="coerce")
    if pd.isna(ts):
        return "unknown"
    return ts.strftime("%Y-%m-%d %H:%M")


def _facet_options(name: str, choices: Mapping[str, Iterable[Choice]]) -> dict[str, str]:
    if name == "active":
        return dict(ACTIVE_OPTIONS)
    if name == "date_range":
        return {key: label for key, label in DATE_RANGE_OPTIONS.items() if key == ALL or key in DATE_RANGE_WINDOWS}
    options = {ALL: "All"}
    options.update({c.value: c.label for c in choices.get(name, ())})
    return options


def _on_facet_change(name: str, key: str, on_filter_change: Callable[[str, str], None]) -> None:
    on_filter_change(name, st.session_state[key])


def render_notifications(notes: Iterable[Notification], on_dismiss: Callable[[int], None]) -> None:
    for note in notes:
        cols = st.columns([12, 1])
        with cols[0]:
            if note.level == "success":
                st.success(note.message)
            else:
                st.error(note.message)
        cols[1].button("✕", key=f"dismiss_{note.id}", on_click=on_dismiss, args=(note.id,), help="Dismiss")


def render_problem_list(
    view: PortalView,
    filters: FilterState,
    choices: Mapping[str, Iterable[Choice]],
    *,
    on_select: Callable[[str], None],
    on_search: Callable[[str], None],
    on_clear_search: Callable[[], None],
    on_filter_change: Callable[[str, str], None],
    on_dedupe_change: Callable[[bool], None],
    dedupe: bool,
    key_prefix: str = "portal",
) -> None:
    """Render search bar, facet selectors and problem cards.

    Parameters
    ----------
    view : PortalView
        Visible frame plus counters from the orchestrator.
    filters : FilterState
        Current facet selections and search term.
    choices : Mapping[str, Iterable[Choice]]
        Resolved choice lists keyed by field name.
    on_select, on_search, on_clear_search, on_filter_change, on_dedupe_change
        Callbacks fired from widget hooks.
    """
    with st.form(f"{key_prefix}_search", clear_on_submit=False):
        cols = st.columns([5, 1])
        term = cols[0].text_input(
            "Search problems",
            value=filters.search_term,
            placeholder="Search by title, description or number",
            label_visibility="collapsed",
        )
        submitted = cols[1].form_submit_button("Search", type="primary")
    if submitted:
        on_search(term)
    if view.search_mode:
        cols = st.columns([5, 1])
        cols[0].caption(f"Showing search results for “{filters.search_term}”. Picking a filter returns to all problems.")
        cols[1].button("Clear search", key=f"{key_prefix}_clear", on_click=on_clear_search)

    facet_cols = st.columns(len(FACET_LABELS))
    for col, (name, label) in zip(facet_cols, FACET_LABELS.items(), strict=False):
        options = _facet_options(name, choices)
        current = getattr(filters, name)
        keys = list(options)
        key = f"{key_prefix}_facet_{name}"
        col.selectbox(
            label,
            keys,
            index=keys.index(current) if current in keys else 0,
            format_func=lambda v, opts=options: opts.get(v, v),
            key=key,
            on_change=_on_facet_change,
            args=(name, key, on_filter_change),
        )

    dedupe_key = f"{key_prefix}_dedupe"
    st.toggle(
        "Hide duplicate titles",
        value=dedupe,
        key=dedupe_key,
        on_change=lambda: on_dedupe_change(bool(st.session_state[dedupe_key])),
    )

    summary = f"{len(view.frame)} of {view.loaded_count} loaded problem(s) shown"
    if view.duplicate_count:
        summary += f" · {view.duplicate_count} duplicate(s) hidden"
    st.caption(summary)
    if view.source is DataSource.FALLBACK:
        st.warning("The problem store is unavailable; showing no live data.")

    if view.is_empty:
        st.info("No problems match the current search or filters.")
        return

    for row in view.frame.head(MAX_CARDS).itertuples(index=False):
        with st.container(border=True):
            head = st.columns([6, 2])
            head[0].markdown(f"**{row.number}** · {row.title or '(untitled)'}")
            badge = _badge(row.priority_display or priority_label(row.priority), priority_color(row.priority))
            head[1].markdown(badge, unsafe_allow_html=True)
            if row.description:
                st.write(snippet(row.description))
            meta = [
                row.state_display or state_label(row.state),
                row.category_display or "Uncategorized",
                f"updated {_fmt_ts(row.updated)}",
            ]
            st.caption(" · ".join(meta))
            st.button(
                "View solutions",
                key=f"{key_prefix}_open_{row.id}",
                on_click=on_select,
                args=(row.id,),
            )
    if len(view.frame) > MAX_CARDS:
        st.caption(f"Showing the first {MAX_CARDS} problems; refine the search or filters to narrow the list.")


def _render_solution(article: SolutionArticle, on_vote: Callable[[str, bool], None], key_prefix: str) -> None:
    with st.container(border=True):
        st.markdown(f"**{article.title or '(untitled solution)'}**")
        published = _fmt_ts(article.published_at) if article.published_at else "unknown date"
        st.caption(f"By {article.author or 'unknown'} · {published}")
        st.markdown(article.body_html, unsafe_allow_html=True)
        votes = total_votes(article)
        pct = helpful_percentage(article)
        if votes:
            st.progress(pct / 100.0, text=f"{pct}% found this helpful ({votes} vote(s))")
        else:
            st.caption("No feedback yet.")
        cols = st.columns([1, 1, 6])
        cols[0].button(
            "👍 Helpful", key=f"{key_prefix}_up_{article.id}", on_click=on_vote, args=(article.id, True)
        )
        cols[1].button(
            "👎 Not helpful", key=f"{key_prefix}_down_{article.id}", on_click=on_vote, args=(article.id, False)
        )


def render_problem_detail(
    detail: DetailState,
    *,
    on_back: Callable[[], None],
    on_vote: Callable[[str, bool], None],
    on_submit_solution: Callable[[str], None],
    choices: Mapping[str, Iterable[Choice]] | None = None,
    key_prefix: str = "portal",
) -> None:
    record = detail.record
    choices = choices or {}
    st.button("← Back to problems", key=f"{key_prefix}_back", on_click=on_back)
    st.subheader(f"{record.number.display} · {record.title.display or '(untitled)'}")
    priority_text = record.priority.display or priority_label(record.priority.value, choices.get("priority"))
    st.markdown(_badge(priority_text, priority_color(record.priority.value)), unsafe_allow_html=True)
    cols = st.columns(3)
    cols[0].metric("State", record.state.display or state_label(record.state.value, choices.get("state")))
    cols[1].metric("Category", record.category.display or "Unknown")
    cols[2].metric("Assignee", record.assignee.display or "Unassigned")
    if record.description.display:
        st.write(record.description.display)

    st.markdown("---")
    st.subheader("Solutions")
    if detail.loading:
        st.info("Loading solutions...")
    elif detail.source is DataSource.FALLBACK:
        st.warning("Solutions could not be loaded right now.")
    elif not detail.solutions:
        st.info("No solutions yet. Be the first to share one below.")
    for article in detail.solutions:
        _render_solution(article, on_vote, key_prefix)

    st.markdown("---")
    with st.form(f"{key_prefix}_submit_solution", clear_on_submit=True):
        text = st.text_area("Share a solution", placeholder="Describe the workaround or fix that worked for you")
        submitted = st.form_submit_button("Submit solution", type="primary")
    if submitted:
        if text.strip():
            on_submit_solution(text)
        else:
            st.warning("Please enter a solution before submitting.")
