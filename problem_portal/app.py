"""Application entry point: page registry and router."""

from __future__ import annotations

import streamlit as st

PAGES = {}


def register_page(label):
    def decorator(func):
        PAGES[label] = func
        return func

    return decorator


def main():
    st.sidebar.title("Known Problems Portal")
    pages = list(PAGES.keys())
    if not pages:
        st.write("No pages registered yet.")
        return
    preferred_order = [
        "Known Problems",  # self-service listing and solutions
        "Problem Statistics",  # distributions and recent activity
        "Setup / Data Source",  # configuration
    ]

    ordered = [name for name in preferred_order if name in pages]
    trailing = sorted(name for name in pages if name not in preferred_order)
    pages = ordered + trailing

    missing = [name for name in preferred_order if name not in ordered]
    if missing:
        st.sidebar.caption(f"(Info) Missing expected pages not yet registered: {', '.join(missing)}")
    # If setup exists and no portal yet, default to setup page
    if "Setup / Data Source" in pages and "portal" not in st.session_state:
        default = pages.index("Setup / Data Source")
    else:
        default = 0
    page = st.sidebar.selectbox("Page", pages, index=default)
    PAGES[page]()


if __name__ == "__main__":
    main()
