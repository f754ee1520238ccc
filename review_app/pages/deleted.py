"""Deleted tasks page: read-only audit log of tasks removed from each game."""

from __future__ import annotations

import streamlit as st

from review_app.app import get_service, register_page
from review_app.core.config import SETTINGS
from review_app.core.mappers import tasks_to_dataframe
from review_app.visual.tables import render_task_table


@register_page("Deleted Tasks")
def deleted_page():
    st.title("Deleted Tasks")
    service = get_service()
    if service is None:
        return
    games = [g for g in service.store.games if g.deleted_tasks]
    if not games:
        st.info("No tasks have been deleted.")
        return

    names = {g.id: g.name for g in games}
    choice = st.selectbox("Game", ["all", *names], format_func=lambda gid: "All games" if gid == "all" else names[gid])
    selected = games if choice == "all" else [g for g in games if g.id == choice]

    for game in selected:
        records = game.deleted_tasks
        st.subheader(f"{game.name} ({len(records)})", anchor=False)
        df = tasks_to_dataframe(records, service.store.members)
        if "deleted" in df.columns:
            df = df.sort_values("deleted", ascending=False, na_position="last")
        table = render_task_table(df, column_set="deleted", key=f"deleted_{game.id}")
        if not table.empty:
            st.download_button(
                "Download CSV",
                table.drop(columns=["created_dt", "updated_dt"], errors="ignore").to_csv(index=False).encode(
                    SETTINGS.download_encoding
                ),
                file_name=f"deleted_tasks_{game.id}.csv",
                mime="text/csv",
                key=f"download_deleted_{game.id}",
            )
