"""Storage setup page: choose a persistence backend and initialize ReviewService."""

from __future__ import annotations

from dataclasses import replace

import streamlit as st

from review_app.app import register_page
from review_app.core.config import STORAGE_BACKENDS, load_storage_settings
from review_app.core.gateway import build_gateway
from review_app.core.service import ReviewService
from review_app.visual.progress import ProgressReporter


@register_page("Setup / Storage")
def setup_page():
    st.title("Storage Setup")
    st.caption("Pick where games and team members are stored (use secrets in production).")

    defaults = load_storage_settings(st.secrets)
    backend = st.radio(
        "Storage backend",
        list(STORAGE_BACKENDS),
        index=list(STORAGE_BACKENDS).index(defaults.backend),
        format_func=lambda b: "Local database (SQLite)" if b == "sqlite" else "GitHub repository (JSON files)",
        horizontal=True,
    )

    settings = replace(defaults, backend=backend)
    if backend == "sqlite":
        settings.db_path = st.text_input("Database file", value=defaults.db_path)
    else:
        settings.github_owner = st.text_input("Repository owner", value=defaults.github_owner)
        settings.github_repo = st.text_input("Repository name", value=defaults.github_repo)
        settings.github_branch = st.text_input("Branch", value=defaults.github_branch)
        settings.github_data_dir = st.text_input("Data folder", value=defaults.github_data_dir)
        token = st.text_input("Personal access token", type="password", value=defaults.github_token or "")
        settings.github_token = token or None
        settings.request_timeout = float(
            st.number_input("Request timeout (seconds)", min_value=1, max_value=120, value=int(defaults.request_timeout))
        )

    if st.button("Connect", type="primary"):
        if backend == "github" and not (settings.github_owner and settings.github_repo and settings.github_token):
            st.error("Owner, repository and token are required.")
            return
        reporter = ProgressReporter("Connecting to storage")
        service = ReviewService(build_gateway(settings))
        if not service.load(progress=reporter.callback):
            reporter.error(f"Failed to load data: {service.last_error}")
            return
        st.session_state["review_service"] = service
        st.session_state["storage_backend"] = backend
        st.session_state["unsaved_changes"] = False
        reporter.complete(
            f"Connected. {len(service.store.games)} game(s) and {len(service.store.members)} member(s) loaded."
        )

    if "review_service" in st.session_state:
        st.info(f"ReviewService ready ({st.session_state.get('storage_backend', 'sqlite')}).")
