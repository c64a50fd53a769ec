"""Problem Statistics page: headline counts, distributions and recent activity."""

from __future__ import annotations

import asyncio

import streamlit as st

from problem_portal.app import register_page
from problem_portal.core.config import RECENT_ACTIVITY_DAYS
from problem_portal.core.models import DataSource
from problem_portal.core.status import priority_label, state_label
from problem_portal.features.portal import PortalOrchestrator
from problem_portal.visual.charts import activity_chart, distribution_chart, priority_chart


@register_page("Problem Statistics")
def statistics_page():
    st.title("Problem Statistics")
    portal: PortalOrchestrator | None = st.session_state.get("portal")
    if portal is None:
        st.warning("Initialize the portal on the Setup page first.")
        return
    if not portal.mounted:
        with st.spinner("Loading statistics..."):
            asyncio.run(portal.mount())

    stats = portal.stats
    if portal.stats_source is DataSource.FALLBACK:
        st.caption("Store statistics unavailable; counts are computed from the loaded problems.")

    cols = st.columns(3)
    cols[0].metric("Total", stats.total)
    cols[1].metric("Active", stats.active)
    cols[2].metric("Inactive", stats.inactive)

    priority_choices = portal.choices.get("priority")
    state_choices = portal.choices.get("state")
    category_labels = {c.value: c.label for c in portal.choices.get("category", ())}

    tabs = st.tabs(["By Priority", "By State", "By Category", "Recent Activity"])
    with tabs[0]:
        chart = priority_chart(stats.by_priority, lambda k: priority_label(k, priority_choices))
        if chart is None:
            st.info("No priority data.")
        else:
            st.altair_chart(chart, use_container_width=True)
    with tabs[1]:
        chart = distribution_chart(stats.by_state, "State", lambda k: state_label(k, state_choices))
        if chart is None:
            st.info("No state data.")
        else:
            st.altair_chart(chart, use_container_width=True)
    with tabs[2]:
        chart = distribution_chart(
            stats.by_category, "Category", lambda k: category_labels.get(k, k), color="#9467bd"
        )
        if chart is None:
            st.info("No category data.")
        else:
            st.altair_chart(chart, use_container_width=True)
    with tabs[3]:
        activity = portal.activity()
        st.caption(f"Computed from the {len(portal.frame)} loaded problem(s).")
        st.altair_chart(activity_chart(activity, RECENT_ACTIVITY_DAYS), use_container_width=True)
