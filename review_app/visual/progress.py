"""Progress and save-status feedback for Streamlit pages."""

from __future__ import annotations

import streamlit as st

from review_app.core.service import MutationResult, ReviewService


class ProgressReporter:
    """Banner + progress bar; ``callback`` matches ReviewService progress hooks."""

    def __init__(self, title: str):
        self._container = st.container()
        self._container.info(title)
        self._message_placeholder = self._container.empty()
        self._progress_placeholder = self._container.progress(0.0)
        self._total: int | None = None
        self._current: int = 0
        self._finalized: bool = False

    def callback(self, message: str, current: int | None = None, total: int | None = None) -> None:
        self.update(message, current=current, total=total)

    def update(self, message: str, *, current: int | None = None, total: int | None = None) -> None:
        if self._finalized:
            return
        if total is not None and total > 0:
            self._total = total
        if current is not None:
            self._current = max(0, current)
        self._message_placeholder.write(message)
        if self._total:
            self._progress_placeholder.progress(min(max(self._current / self._total, 0.0), 1.0))

    def complete(self, message: str) -> None:
        if self._finalized:
            return
        self._progress_placeholder.progress(1.0)
        self._container.success(message)
        self._finalized = True

    def error(self, message: str) -> None:
        if self._finalized:
            return
        self._container.error(message)
        self._finalized = True


def report_result(result: MutationResult, success_message: str) -> None:
    """Show a toast on success, or a warning that storage is behind memory."""
    if result.saved:
        st.toast(success_message)
        return
    st.session_state["unsaved_changes"] = True
    st.warning(f"{success_message} locally, but saving to storage failed. Use 'Retry save' to try again.")


def render_retry_banner(service: ReviewService) -> None:
    if not st.session_state.get("unsaved_changes"):
        return
    st.warning("Some changes are not saved to storage yet.")
    if st.button("Retry save", key="retry_save"):
        reporter = ProgressReporter("Saving changes")
        if service.retry_flush(progress=reporter.callback):
            st.session_state["unsaved_changes"] = False
            reporter.complete("All changes saved.")
        else:
            reporter.error(service.last_error or "Saving failed again.")
