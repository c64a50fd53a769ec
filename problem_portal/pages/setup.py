"""Data source setup page: configure the demo record store and build the portal."""

from __future__ import annotations

import logging

import streamlit as st

from problem_portal.app import register_page
from problem_portal.core.config import MAX_PAGE_SIZE, SETTINGS, settings_from_mapping
from problem_portal.features.portal import PortalOrchestrator, build_demo_portal

logger = logging.getLogger(__name__)


@register_page("Setup / Data Source")
def setup_page():
    st.title("Data Source Setup")
    st.caption("The portal runs against a deterministic in-memory problem store.")

    base = st.session_state.get("portal_settings", SETTINGS)
    seed = st.number_input("Demo seed", min_value=0, value=int(base.demo_seed), step=1)
    size = st.number_input("Number of problems", min_value=1, max_value=1000, value=int(base.demo_size), step=10)
    page_size = st.number_input("Page size", min_value=1, max_value=MAX_PAGE_SIZE, value=int(base.page_size))
    timeout = st.number_input(
        "Store timeout (seconds, 0 = wait forever)",
        min_value=0.0,
        max_value=60.0,
        value=float(base.remote_timeout_seconds or 0.0),
        step=0.5,
    )
    latency = st.number_input("Simulated latency (seconds)", min_value=0.0, max_value=10.0, value=0.0, step=0.1)
    offline = st.checkbox("Simulate store outage", value=False, help="Every store call fails; the portal falls back.")
    init_btn = st.button("Initialize Portal", type="primary")

    if init_btn:
        settings = settings_from_mapping(
            {
                "demo_seed": seed,
                "demo_size": size,
                "page_size": page_size,
                "remote_timeout_seconds": timeout,
            },
            base,
        )
        portal = build_demo_portal(settings, offline=offline, latency=latency)
        st.session_state["portal_settings"] = settings
        st.session_state["portal"] = portal
        logger.info("Portal initialized (seed=%s, size=%s, offline=%s)", seed, size, offline)
        st.success("Portal initialized.")

    portal: PortalOrchestrator | None = st.session_state.get("portal")
    if portal is None:
        return
    st.info("Portal ready.")
    source = portal.service.source
    if hasattr(source, "offline"):
        outage = st.toggle("Store outage (live)", value=bool(source.offline), help="Applies to the next store call.")
        source.offline = outage
    drafts = getattr(source, "drafts", [])
    if drafts:
        st.caption(f"{len(drafts)} community solution draft(s) submitted this session.")
