"""Application entry point: page registry and router."""

from __future__ import annotations

import streamlit as st

from review_app.core.config import APP_TITLE
from review_app.core.service import ReviewService

PAGES = {}


def register_page(label):
    def decorator(func):
        PAGES[label] = func
        return func

    return decorator


def get_service() -> ReviewService | None:
    """Return the session's ReviewService, or warn and return None."""
    service: ReviewService | None = st.session_state.get("review_service")
    if service is None:
        st.warning("Configure storage on the Setup page first.")
    return service


def main():
    st.sidebar.title(APP_TITLE)
    pages = list(PAGES.keys())
    if not pages:
        st.write("No pages registered yet.")
        return
    preferred_order = [
        "Games",  # game list and statistics
        "Game Review",  # task triage for one game
        "Team Members",
        "Deleted Tasks",  # audit log
        "Setup / Storage",  # configuration
    ]

    ordered = [name for name in preferred_order if name in pages]
    trailing = sorted(name for name in pages if name not in preferred_order)
    pages = ordered + trailing

    # Until a storage backend is connected the setup page is the only useful one
    if "Setup / Storage" in pages and "review_service" not in st.session_state:
        default = pages.index("Setup / Storage")
    elif st.session_state.get("nav_page") in pages:
        default = pages.index(st.session_state["nav_page"])
    else:
        default = 0
    page = st.sidebar.selectbox("Page", pages, index=default)
    st.session_state["nav_page"] = page
    PAGES[page]()


if __name__ == "__main__":
    main()
