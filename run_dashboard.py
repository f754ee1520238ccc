"""Convenience launcher for the Streamlit app.

Usage:
  streamlit run run_dashboard.py

Automatically imports every module in ``review_app/pages`` so each page
decorated with ``@register_page`` registers itself without manual edits here.
"""

import logging
from importlib import import_module
from pathlib import Path

import streamlit as st

from review_app.app import main

st.set_page_config(layout="wide")
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

logger = logging.getLogger(__name__)


def _auto_init_review_service():
    """Connect to the configured storage backend from secrets or environment, if possible."""
    if "review_service" in st.session_state:
        return

    from review_app.core.config import load_storage_settings
    from review_app.core.gateway import build_gateway
    from review_app.core.service import ReviewService

    settings = load_storage_settings(st.secrets)
    if settings.backend == "github" and not (settings.github_owner and settings.github_repo and settings.github_token):
        st.sidebar.warning("GitHub storage is not fully configured. Please use the Setup page.")
        return

    service = ReviewService(build_gateway(settings))
    if service.load():
        st.session_state["review_service"] = service
        st.session_state["storage_backend"] = settings.backend
        st.session_state["unsaved_changes"] = False
    else:
        st.sidebar.error(f"Storage connection failed: {service.last_error}")


_auto_init_review_service()

PAGES_DIR = Path(__file__).parent / "review_app" / "pages"
for py in sorted(PAGES_DIR.glob("[!_]*.py")):
    mod_name = f"review_app.pages.{py.stem}"
    try:
        import_module(mod_name)
    except ImportError as e:
        logger.error("Failed importing page %s: %s", mod_name, e)

if __name__ == "__main__":
    main()
