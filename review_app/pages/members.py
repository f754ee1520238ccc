"""Team members page: roster management plus open-task workload across games."""

from __future__ import annotations

import pandas as pd
import streamlit as st

from review_app.analytics.aggregations.assignee import aggregate_by_assignee
from review_app.analytics.ordering import filter_tasks
from review_app.app import get_service, register_page
from review_app.core.errors import NotFoundError, ValidationError
from review_app.core.mappers import tasks_to_dataframe
from review_app.core.service import ReviewService
from review_app.visual.charts import assignee_workload_chart
from review_app.visual.column_metadata import apply_column_metadata
from review_app.visual.progress import render_retry_banner, report_result


def _workload(service: ReviewService) -> pd.DataFrame:
    tasks = [t for game in service.store.games for t in filter_tasks(game)]
    df = tasks_to_dataframe(tasks, service.store.members)
    return aggregate_by_assignee(df)


@register_page("Team Members")
def members_page():
    st.title("Team Members")
    service = get_service()
    if service is None:
        return
    render_retry_banner(service)

    with st.expander("Add member", expanded=not service.store.members):
        with st.form("add_member", clear_on_submit=True):
            name = st.text_input("Name")
            role = st.text_input("Role")
            email = st.text_input("Email")
            submitted = st.form_submit_button("Add member", type="primary")
        if submitted:
            try:
                result = service.add_member(name, role, email)
            except ValidationError as exc:
                st.error(str(exc))
            else:
                report_result(result, f"{result.value.name} added")

    members = service.store.members
    if not members:
        st.info("No team members yet.")
        return

    for member in members:
        c1, c2, c3, c4 = st.columns([3, 2, 3, 1])
        c1.markdown(f"**{member.name}**")
        c2.write(member.role or "-")
        c3.write(member.email or "-")
        if c4.button("Remove", key=f"remove_member_{member.id}"):
            try:
                result = service.remove_member(member.id)
            except NotFoundError as exc:
                st.error(str(exc))
            else:
                report_result(result, f"{member.name} removed")
                st.rerun()

    st.subheader("Workload")
    workload = _workload(service)
    if workload.empty:
        st.caption("No tasks assigned yet.")
        return
    chart = assignee_workload_chart(workload)
    if chart is not None:
        st.altair_chart(chart, use_container_width=True)
    cols = ["assignee", "tasks", "open_tasks", "critical_open"]
    st.dataframe(workload[cols], hide_index=True, column_config=apply_column_metadata(cols))
