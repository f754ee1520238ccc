"""Games page: list games with task statistics, add, rename, complete and delete them."""

from __future__ import annotations

import streamlit as st

from review_app.analytics.metrics.statistics import compute_statistics
from review_app.app import get_service, register_page
from review_app.core.errors import NotFoundError, ValidationError
from review_app.core.models import Game
from review_app.core.service import ReviewService
from review_app.visual.progress import render_retry_banner, report_result


def _add_game_form(service: ReviewService) -> None:
    with st.expander("Add game", expanded=not service.store.games):
        with st.form("add_game", clear_on_submit=True):
            name = st.text_input("Name")
            genre = st.text_input("Genre")
            description = st.text_area("Description")
            submitted = st.form_submit_button("Create game", type="primary")
        if submitted:
            try:
                result = service.add_game(name, description, genre)
            except ValidationError as exc:
                st.error(str(exc))
                return
            report_result(result, "Game created")


def _render_game_card(service: ReviewService, game: Game) -> None:
    stats = compute_statistics(game)
    with st.container(border=True):
        title = f"~~{game.name}~~" if game.completed else game.name
        st.subheader(title, anchor=False)
        st.text(game.description or "No description")
        if game.genre:
            st.caption(game.genre)
        c1, c2, c3 = st.columns(3)
        c1.metric("Total", stats.total)
        c2.metric("Open", stats.open)
        c3.metric("Done", stats.completed)

        a1, a2, a3, a4 = st.columns(4)
        if a1.button("Open", key=f"open_{game.id}", type="primary"):
            st.session_state["current_game_id"] = game.id
            st.session_state["nav_page"] = "Game Review"
            st.rerun()
        toggle_label = "Mark active" if game.completed else "Mark complete"
        if a2.button(toggle_label, key=f"toggle_{game.id}"):
            try:
                result = service.toggle_game_complete(game.id)
            except NotFoundError as exc:
                st.error(str(exc))
            else:
                report_result(result, "Game marked as completed" if result.value.completed else "Game marked as active")
                st.rerun()
        with a3.popover("Rename"):
            new_name = st.text_input("New name", value=game.name, key=f"rename_{game.id}")
            if st.button("Save", key=f"rename_btn_{game.id}"):
                try:
                    result = service.update_game(game.id, name=new_name)
                except (ValidationError, NotFoundError) as exc:
                    st.error(str(exc))
                else:
                    report_result(result, "Game updated")
                    st.rerun()
        with a4.popover("Delete"):
            st.write(f"Delete this game and all {stats.total} of its tasks?")
            if st.button("Delete game", key=f"delete_{game.id}", type="primary"):
                try:
                    result = service.delete_game(game.id)
                except NotFoundError as exc:
                    st.error(str(exc))
                else:
                    if st.session_state.get("current_game_id") == game.id:
                        st.session_state.pop("current_game_id", None)
                    report_result(result, "Game deleted")
                    st.rerun()


@register_page("Games")
def games_page():
    st.title("Games")
    service = get_service()
    if service is None:
        return
    render_retry_banner(service)
    _add_game_form(service)

    games = service.store.games
    if not games:
        st.info("No games added yet. Use 'Add game' to get started.")
        return
    columns = st.columns(2)
    for idx, game in enumerate(games):
        with columns[idx % 2]:
            _render_game_card(service, game)
