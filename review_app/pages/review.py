"""Game review page: filter, order and work the tasks of one game."""

from __future__ import annotations

import streamlit as st

from review_app.analytics.aggregations.assignee import aggregate_by_assignee
from review_app.analytics.metrics.aging import format_relative
from review_app.analytics.metrics.statistics import category_breakdown, compute_statistics
from review_app.analytics.ordering import filter_tasks, sort_for_display
from review_app.app import get_service, register_page
from review_app.core.config import (
    ALL,
    CATEGORIES,
    CATEGORY_LABELS,
    REVIEW_CATEGORY,
    SEVERITY_LEVELS,
    STATUS_COMPLETED,
    STATUS_OPEN,
    UNASSIGNED_LABEL,
    UNKNOWN_LABEL,
)
from review_app.core.engine import member_name
from review_app.core.errors import NotFoundError, ValidationError
from review_app.core.mappers import tasks_to_dataframe
from review_app.core.media import media_label, media_links_to_text
from review_app.core.models import Game, Task, TaskInput
from review_app.core.service import ReviewService
from review_app.core.status import format_status
from review_app.visual.charts import assignee_workload_chart, category_status_chart
from review_app.visual.progress import render_retry_banner, report_result
from review_app.visual.tables import escape_text, preview, render_task_table


def _member_options(service: ReviewService) -> dict[str, str]:
    return {m.id: f"{m.name} ({m.role})" if m.role else m.name for m in service.store.members}


def _select_game(service: ReviewService) -> Game | None:
    games = service.store.games
    if not games:
        st.info("No games yet. Create one on the Games page.")
        return None
    ids = [g.id for g in games]
    current = st.session_state.get("current_game_id")
    index = ids.index(current) if current in ids else 0
    game_id = st.sidebar.selectbox(
        "Game",
        ids,
        index=index,
        format_func=lambda gid: next(g.name for g in games if g.id == gid),
    )
    st.session_state["current_game_id"] = game_id
    return service.store.get_game(game_id)


def _filters(service: ReviewService) -> tuple[str, str, str, str]:
    category = st.radio(
        "Category",
        [ALL, *CATEGORIES],
        format_func=lambda c: "All" if c == ALL else CATEGORY_LABELS[c],
        horizontal=True,
    )
    f1, f2, f3 = st.columns(3)
    status = f1.selectbox("Status", [ALL, STATUS_OPEN, STATUS_COMPLETED], format_func=format_status)
    priority = f2.selectbox("Priority", [ALL, *SEVERITY_LEVELS], format_func=str.capitalize)
    members = _member_options(service)
    assignee = f3.selectbox(
        "Assignee",
        [ALL, *members],
        format_func=lambda mid: "All Assignees" if mid == ALL else members[mid],
    )
    return category, status, priority, assignee


def assignee_choices(members: dict[str, str], current: str | None = None) -> tuple[list[str], dict[str, str]]:
    """Selectbox ids and labels for an assignee picker.

    A ``current`` id whose member was removed stays selectable as "Unknown",
    so saving an edit keeps the reference instead of clearing it.
    """
    labels = {"": UNASSIGNED_LABEL, **members}
    if current and current not in labels:
        labels[current] = UNKNOWN_LABEL
    return list(labels), labels


def _task_fields(service: ReviewService, key: str, task: Task | None = None) -> dict:
    """Shared inputs for the create and edit forms."""
    members = _member_options(service)
    levels = ["", *SEVERITY_LEVELS]
    title = st.text_input("Title", value=task.title if task else "", key=f"{key}_title")
    description = st.text_area("Description", value=task.description if task else "", key=f"{key}_desc")
    c1, c2, c3 = st.columns(3)
    priority = c1.selectbox(
        "Priority",
        levels,
        index=levels.index(task.priority or "") if task else levels.index("medium"),
        format_func=lambda v: v.capitalize() or "None",
        key=f"{key}_priority",
    )
    urgency = c2.selectbox(
        "Urgency",
        levels,
        index=levels.index(task.urgency or "") if task else levels.index("medium"),
        format_func=lambda v: v.capitalize() or "None",
        key=f"{key}_urgency",
    )
    current_assignee = (task.assignee or "") if task else ""
    assignee_ids, assignee_labels = assignee_choices(members, current_assignee)
    assignee = c3.selectbox(
        "Assignee",
        assignee_ids,
        index=assignee_ids.index(current_assignee),
        format_func=assignee_labels.__getitem__,
        key=f"{key}_assignee",
    )
    media = st.text_area(
        "Media links (one URL per line)",
        value=media_links_to_text(task.media_links) if task else "",
        key=f"{key}_media",
    )
    return {
        "title": title,
        "description": description,
        "priority": priority or None,
        "urgency": urgency or None,
        "assignee": assignee or None,
        "media_links": media,
    }


def _add_task_form(service: ReviewService, game: Game) -> None:
    with st.expander("Add task"):
        category = st.selectbox(
            "Category",
            list(CATEGORIES),
            format_func=lambda c: CATEGORY_LABELS[c],
            key="new_task_category",
        )
        if category == REVIEW_CATEGORY:
            st.caption("Reviews are feedback records: priority, urgency and assignee are not kept.")
        with st.form("add_task", clear_on_submit=True):
            values = _task_fields(service, "new_task")
            submitted = st.form_submit_button("Create task", type="primary")
        if submitted:
            data = TaskInput(category=category, **values)
            try:
                result = service.create_task(game.id, data)
            except (ValidationError, NotFoundError) as exc:
                st.error(str(exc))
                return
            report_result(result, "Task created")


def _render_task_detail(service: ReviewService, game: Game, task: Task) -> None:
    store = service.store
    st.markdown(f"### {escape_text(task.title)}")
    meta = [CATEGORY_LABELS.get(task.category, task.category), format_status(task.status)]
    if not task.is_review:
        meta.append(f"Priority: {(task.priority or 'none').capitalize()}")
        meta.append(f"Urgency: {(task.urgency or 'none').capitalize()}")
        placeholder = UNKNOWN_LABEL if task.assignee else UNASSIGNED_LABEL
        meta.append(f"Assignee: {member_name(store, task.assignee, placeholder)}")
    meta.append(f"Created {format_relative(task.created)}")
    st.caption(" · ".join(meta))
    st.text(task.description or "No description")

    if task.media_links:
        st.markdown("**Media links**")
        for link in task.media_links:
            st.link_button(media_label(link), link.url)

    if task.is_completed:
        who = member_name(store, task.completed_by, UNKNOWN_LABEL) if task.completed_by else UNKNOWN_LABEL
        st.success(f"Completed by {who}")
        if task.completion_comment:
            st.text(task.completion_comment)

    st.markdown("**Comments**")
    if not task.comments:
        st.caption("No comments yet.")
    for comment in task.comments:
        author = member_name(store, comment.author, comment.author or UNKNOWN_LABEL)
        st.markdown(f"**{escape_text(author)}** · {format_relative(comment.created)}")
        st.text(comment.text)

    members = _member_options(service)
    people = ["", *members]
    with st.form(f"comment_{task.id}", clear_on_submit=True):
        text = st.text_area("Add comment")
        author = st.selectbox("Author", people, format_func=lambda mid: members.get(mid, "Select member"))
        if st.form_submit_button("Comment"):
            try:
                result = service.add_comment(game.id, task.id, text, author)
            except (ValidationError, NotFoundError) as exc:
                st.error(str(exc))
            else:
                report_result(result, "Comment added")

    s1, s2, s3 = st.columns(3)
    if task.is_completed:
        if s1.button("Reopen", key=f"reopen_{task.id}"):
            _apply_status(service, game, task, STATUS_OPEN)
    else:
        with s1.popover("Complete"):
            note = st.text_area("Completion comment", key=f"done_note_{task.id}")
            by = st.selectbox(
                "Completed by",
                people,
                format_func=lambda mid: members.get(mid, UNKNOWN_LABEL),
                key=f"done_by_{task.id}",
            )
            if st.button("Mark completed", key=f"done_{task.id}", type="primary"):
                _apply_status(service, game, task, STATUS_COMPLETED, note, by)

    with s2.popover("Edit"):
        with st.form(f"edit_{task.id}"):
            values = _task_fields(service, f"edit_{task.id}", task)
            if st.form_submit_button("Save changes"):
                try:
                    result = service.update_task(game.id, task.id, values)
                except (ValidationError, NotFoundError) as exc:
                    st.error(str(exc))
                else:
                    report_result(result, "Task updated")

    with s3.popover("Delete"):
        reason = st.text_area("Reason for deletion", key=f"delete_reason_{task.id}")
        deleted_by = st.selectbox(
            "Deleted by",
            people,
            format_func=lambda mid: members.get(mid, UNKNOWN_LABEL),
            key=f"delete_by_{task.id}",
        )
        if st.button("Delete task", key=f"delete_task_{task.id}", type="primary"):
            try:
                result = service.delete_task(game.id, task.id, reason, deleted_by or None)
            except (ValidationError, NotFoundError) as exc:
                st.error(str(exc))
            else:
                report_result(result, "Task moved to the deleted log")
                st.rerun()


def _apply_status(
    service: ReviewService,
    game: Game,
    task: Task,
    status: str,
    note: str | None = None,
    by: str | None = None,
) -> None:
    try:
        result = service.set_task_status(game.id, task.id, status, completion_comment=note, completed_by=by or None)
    except (ValidationError, NotFoundError) as exc:
        st.error(str(exc))
        return
    report_result(result, "Task completed" if status == STATUS_COMPLETED else "Task reopened")
    st.rerun()


@register_page("Game Review")
def review_page():
    service = get_service()
    if service is None:
        return
    game = _select_game(service)
    if game is None:
        return
    st.title(game.name)
    render_retry_banner(service)

    stats = compute_statistics(game)
    m1, m2, m3 = st.columns(3)
    m1.metric("Total Tasks", stats.total)
    m2.metric("Open", stats.open)
    m3.metric("Completed", stats.completed)

    _add_task_form(service, game)

    category, status, priority, assignee = _filters(service)
    tasks = sort_for_display(filter_tasks(game, category, status=status, priority=priority, assignee=assignee))
    if not tasks:
        scope = "" if category == ALL else f"{CATEGORY_LABELS[category].lower()} "
        st.info(f"No {scope}tasks found.")
    else:
        df = tasks_to_dataframe(tasks, service.store.members)
        render_task_table(df)
        labels = {t.id: f"{t.title} · {format_status(t.status)}" for t in tasks}
        selected = st.selectbox("Task", list(labels), format_func=lambda tid: preview(labels[tid], 80))
        if selected:
            _render_task_detail(service, game, next(t for t in tasks if t.id == selected))

    with st.expander("Overview charts"):
        chart = category_status_chart(category_breakdown(game))
        if chart is not None:
            st.altair_chart(chart, use_container_width=True)
        all_df = tasks_to_dataframe(filter_tasks(game), service.store.members)
        workload = aggregate_by_assignee(all_df)
        workload_chart = assignee_workload_chart(workload)
        if workload_chart is not None:
            st.altair_chart(workload_chart, use_container_width=True)
