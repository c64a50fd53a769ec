from datetime import timedelta

import pandas as pd

from fakes import NOW, problem_row
from problem_portal.analytics.aggregations.problems import distribution_frame, recent_activity, summarize
from problem_portal.core.mappers import map_problems, problems_to_dataframe


def _sample_df():
    rows = [
        problem_row(1, priority="1", state="101", category="software", active="true",
                    updated=NOW - timedelta(days=1), created=NOW - timedelta(days=2)),
        problem_row(2, priority="1", state="106", category="network", active="false",
                    updated=NOW - timedelta(days=3), created=NOW - timedelta(days=40)),
        problem_row(3, priority="2", state="106", category="", active=True,
                    updated=NOW - timedelta(days=12), created=NOW - timedelta(days=50)),
        problem_row(4, priority="", state="107", category="software", active="false",
                    updated=NOW - timedelta(days=1), created=NOW - timedelta(days=5)),
    ]
    return problems_to_dataframe(map_problems(rows))


def test_summarize_counts():
    stats = summarize(_sample_df())
    assert stats.total == 4
    assert (stats.active, stats.inactive) == (2, 2)
    assert stats.by_priority == {"1": 2, "2": 1, "Unknown": 1}
    assert stats.by_state == {"101": 1, "106": 2, "107": 1}
    assert stats.by_category == {"software": 2, "network": 1, "Unknown": 1}


def test_summarize_buckets_partition_total():
    stats = summarize(_sample_df())
    assert stats.active + stats.inactive == stats.total
    for counts in (stats.by_priority, stats.by_state, stats.by_category):
        assert sum(counts.values()) == stats.total


def test_summarize_empty():
    stats = summarize(problems_to_dataframe([]))
    assert stats.total == 0
    assert stats.by_priority == {}


def test_recent_activity():
    activity = recent_activity(_sample_df(), NOW, days=7)
    assert activity.new_problems == 2
    # p2 resolved within the week; p3 resolved too long ago
    assert activity.resolved_problems == 1
    assert activity.total_open == 3


def test_recent_activity_empty():
    activity = recent_activity(pd.DataFrame(), NOW)
    assert (activity.new_problems, activity.resolved_problems, activity.total_open) == (0, 0, 0)


def test_distribution_frame_sorted():
    out = distribution_frame({"a": 1, "b": 5, "c": 3})
    assert out["key"].tolist() == ["b", "c", "a"]
    assert distribution_frame({}).empty
