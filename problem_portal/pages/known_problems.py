"""Known Problems page: searchable listing with a per-problem solutions view.

All state lives in the :class:`PortalOrchestrator` kept in ``st.session_state``;
widget callbacks drive its coroutines to completion with ``asyncio.run``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

import streamlit as st

from problem_portal.app import register_page
from problem_portal.features.portal import DetailState, PortalOrchestrator, TransitionError
from problem_portal.visual.problem_views import render_notifications, render_problem_detail, render_problem_list
from problem_portal.visual.tables import render_problem_table

logger = logging.getLogger(__name__)

PAGE_KEY = "known_problems"


def _run(coro: Coroutine[Any, Any, Any]) -> Any:
    try:
        return asyncio.run(coro)
    except (TransitionError, KeyError) as exc:
        # A click from a view that has since been replaced (double click, stale tab)
        logger.info("Ignoring action: %s", exc)
        return None


@register_page("Known Problems")
def known_problems_page():
    portal: PortalOrchestrator | None = st.session_state.get("portal")
    if portal is None:
        st.warning("Initialize the portal on the Setup page first.")
        return
    if not portal.mounted:
        with st.spinner("Loading known problems..."):
            _run(portal.mount())

    st.title("Known Problems")
    st.caption("Check whether your issue is already known and see what has worked for others.")
    render_notifications(list(portal.notifications), portal.dismiss)

    # Form submissions fire mid-render, so these rerun to show the new state
    def submit_solution(text: str) -> None:
        _run(portal.submit_solution(text))
        st.rerun()

    def search(term: str) -> None:
        _run(portal.search(term))
        st.rerun()

    state = portal.state
    if isinstance(state, DetailState):
        render_problem_detail(
            state,
            on_back=lambda: _run(portal.back()),
            on_vote=lambda solution_id, helpful: _run(portal.vote(solution_id, helpful)),
            on_submit_solution=submit_solution,
            choices=portal.choices,
            key_prefix=PAGE_KEY,
        )
        return

    view = portal.view()
    render_problem_list(
        view,
        portal.filters,
        portal.choices,
        on_select=lambda record_id: _run(portal.select_record(record_id)),
        on_search=search,
        on_clear_search=lambda: _run(portal.clear_search()),
        on_filter_change=lambda facet, value: _run(portal.change_filter(facet, value)),
        on_dedupe_change=portal.set_dedupe,
        dedupe=portal.dedupe,
        key_prefix=PAGE_KEY,
    )

    if not view.is_empty:
        with st.expander("Table view"):
            render_problem_table(view.frame, portal.choices)
            csv = view.frame.to_csv(index=False).encode("utf-8")
            st.download_button(
                "Download CSV",
                data=csv,
                file_name="known_problems.csv",
                mime="text/csv",
            )
