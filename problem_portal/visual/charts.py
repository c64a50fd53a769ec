"""Chart builders (Altair) for problem distributions and recent activity."""

from __future__ import annotations

from collections.abc import Callable

import altair as alt
import pandas as pd

from problem_portal.analytics.aggregations.problems import distribution_frame
from problem_portal.core.config import PRIORITY_COLORS
from problem_portal.core.models import ActivitySummary


def distribution_chart(
    counts: dict[str, int],
    title: str,
    labeler: Callable[[str], str] | None = None,
    *,
    color: str = "#1f77b4",
):
    """Horizontal bar chart of a group-by map; ``None`` when there is nothing to plot."""
    data = distribution_frame(counts)
    if data.empty:
        return None
    data["label"] = data["key"].map(labeler) if labeler else data["key"]
    return (
        alt.Chart(data)
        .mark_bar(color=color)
        .encode(
            x=alt.X("count:Q", title="Problems"),
            y=alt.Y("label:N", title=title, sort="-x"),
            tooltip=[
                alt.Tooltip("label:N", title=title),
                alt.Tooltip("count:Q", title="Count"),
            ],
        )
        .properties(height=max(120, 32 * len(data)))
    )


def priority_chart(counts: dict[str, int], labeler: Callable[[str], str] | None = None):
    """Priority distribution coloured with the badge palette."""
    data = distribution_frame(counts)
    if data.empty:
        return None
    data["label"] = data["key"].map(labeler) if labeler else data["key"]
    data["color"] = data["key"].map(lambda k: PRIORITY_COLORS.get(str(k), "#999999"))
    return (
        alt.Chart(data)
        .mark_bar()
        .encode(
            x=alt.X("label:N", title="Priority", sort=alt.EncodingSortField(field="key", order="ascending")),
            y=alt.Y("count:Q", title="Problems"),
            color=alt.Color("color:N", scale=None, legend=None),
            tooltip=[
                alt.Tooltip("label:N", title="Priority"),
                alt.Tooltip("count:Q", title="Count"),
            ],
        )
        .properties(height=260)
    )


def activity_chart(activity: ActivitySummary, days: int):
    data = pd.DataFrame(
        {
            "metric": [f"New (last {days}d)", f"Resolved (last {days}d)", "Open"],
            "count": [activity.new_problems, activity.resolved_problems, activity.total_open],
        }
    )
    return (
        alt.Chart(data)
        .mark_bar(color="#2ca02c")
        .encode(
            x=alt.X("metric:N", title=None, sort=None),
            y=alt.Y("count:Q", title="Problems"),
            tooltip=[alt.Tooltip("metric:N", title="Metric"), alt.Tooltip("count:Q", title="Count")],
        )
        .properties(height=220)
    )
