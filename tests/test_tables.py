from datetime import datetime, timedelta

import pytz

from review_app.analytics.aggregations.assignee import aggregate_by_assignee
from review_app.analytics.metrics.aging import add_aging_metrics, format_relative
from review_app.core.column_config import get_columns, load_column_sets
from review_app.core.mappers import tasks_to_dataframe
from review_app.core.models import Member, Task
from review_app.visual.charts import assignee_workload_chart
from review_app.visual.tables import escape_text, prepare_task_table, preview

NOW = pytz.UTC.localize(datetime(2025, 3, 10, 12, 0, 0))


def _sample_df():
    members = [Member(id="m1", name="Alice"), Member(id="m2", name="Bob")]
    tasks = []
    for i in range(6):
        tasks.append(
            Task(
                id=str(i),
                title=f"Task {i}",
                category="bug",
                priority="critical" if i % 3 == 0 else "low",
                status="completed" if i == 5 else "open",
                assignee="m1" if i < 4 else "m2",
                created=NOW - timedelta(days=i + 1),
                updated=NOW - timedelta(hours=i),
            )
        )
    return tasks_to_dataframe(tasks, members)


def test_column_sets_load():
    sets = load_column_sets(refresh=True)
    assert "task_list" in sets and "deleted" in sets and "core" in sets
    assert "delete_reason" in get_columns("deleted")
    assert get_columns("nope") == []


def test_column_sets_fall_back_without_yaml(tmp_path):
    sets = load_column_sets(tmp_path, refresh=True)
    assert sets["task_list"][0] == "title"
    load_column_sets(refresh=True)


def test_add_aging_metrics():
    out = add_aging_metrics(_sample_df(), now=NOW)
    assert round(out.loc[0, "days_open"], 1) == 1.0
    assert "days_since_update" in out.columns


def test_format_relative():
    assert format_relative(None) == ""
    assert format_relative(NOW - timedelta(minutes=5), now=NOW) == "5 minutes ago"
    assert format_relative(NOW - timedelta(hours=3), now=NOW) == "3 hours ago"
    assert format_relative(NOW - timedelta(days=1, hours=2), now=NOW) == "Yesterday"
    assert format_relative(NOW - timedelta(days=4), now=NOW) == "4 days ago"
    assert format_relative(NOW - timedelta(days=30), now=NOW) == "2025-02-08"


def test_prepare_task_table_formats_columns():
    table, cols, cfg = prepare_task_table(_sample_df())
    assert cols[0] == "title"
    assert "id" not in cols
    assert set(table["status"]) == {"Open", "Completed"}
    assert table.loc[0, "priority"] == "Critical"
    assert set(cfg) == set(cols)


def test_aggregate_by_assignee():
    out = aggregate_by_assignee(_sample_df())
    alice = out.set_index("assignee").loc["Alice"]
    assert alice["tasks"] == 4
    assert alice["open_tasks"] == 4
    assert alice["critical_open"] == 2
    bob = out.set_index("assignee").loc["Bob"]
    assert bob["open_tasks"] == 1
    assert assignee_workload_chart(out) is not None


def test_text_helpers():
    assert escape_text("<b>boss</b>") == "&lt;b&gt;boss&lt;/b&gt;"
    assert escape_text(None) == ""
    assert preview("abcdef", 3) == "abc..."
    assert preview("abc", 3) == "abc"
