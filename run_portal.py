"""Convenience launcher for the Streamlit app.

Usage:
  streamlit run run_portal.py

Automatically imports every module in ``problem_portal/pages`` so each page
decorated with ``@register_page`` registers itself without manual edits here.
Settings come from a ``[portal]`` section in ``.streamlit/secrets.toml`` when
present (keys match ``PortalSettings`` fields).
"""

import logging
from importlib import import_module
from pathlib import Path

import streamlit as st

from problem_portal.app import main
from problem_portal.core.config import settings_from_mapping

st.set_page_config(layout="wide")


def _load_settings():
    try:
        overrides = st.secrets.get("portal", {})
    except FileNotFoundError:
        # No secrets.toml at all
        overrides = {}
    return settings_from_mapping(overrides)


def _auto_init_portal():
    """Build the demo-backed portal from settings if the session has none yet."""
    if "portal" in st.session_state:
        return
    from problem_portal.features.portal import build_demo_portal

    settings = st.session_state.get("portal_settings") or _load_settings()
    st.session_state["portal_settings"] = settings
    st.session_state["portal"] = build_demo_portal(settings)


SETTINGS = _load_settings()
logging.basicConfig(
    level=getattr(logging, SETTINGS.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
_auto_init_portal()

PAGES_DIR = Path(__file__).parent / "problem_portal" / "pages"
for py in sorted(PAGES_DIR.glob("[!_]*.py")):
    mod_name = f"problem_portal.pages.{py.stem}"
    try:
        import_module(mod_name)
    except Exception as e:  # pragma: no cover
        logging.getLogger(__name__).error("Failed importing page %s: %s", mod_name, e)

if __name__ == "__main__":
    main()
