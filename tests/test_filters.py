from datetime import timedelta

import pandas as pd
import pytest

from fakes import NOW, problem_row
from problem_portal.analytics.metrics.aging import add_age_metrics
from problem_portal.analytics.segments.filters import apply_view, date_range_mask, facet_mask, search_mask
from problem_portal.core.mappers import map_problems, problems_to_dataframe
from problem_portal.core.models import FilterState


def _sample_df():
    rows = [
        problem_row(1, title="Login failures", description="SSO rejects tokens", priority="1", state="101",
                    category="software", active="true", updated=NOW - timedelta(hours=2)),
        problem_row(2, title="Switch reboot", description="Core switch restarts nightly", priority="2", state="104",
                    category="network", active="false", updated=NOW - timedelta(days=3)),
        problem_row(3, title="Slow queries", description="Reports time out", priority="1", state="106",
                    category="database", active=True, updated=NOW - timedelta(days=20)),
        problem_row(4, title="Old printer", description="", priority="5", state="107",
                    category="hardware", active=False, updated=NOW - timedelta(days=60)),
    ]
    # Unparsable updated timestamp
    broken = problem_row(5, title="Mystery", priority="", category="software")
    broken["sys_updated_on"] = "garbage"
    rows.append(broken)
    return problems_to_dataframe(map_problems(rows))


def _ids(df):
    return df["id"].tolist()


def test_search_matches_title_description_or_number():
    df = _sample_df()
    assert _ids(apply_view(df, FilterState().with_search("login"), NOW)) == ["p1"]
    assert _ids(apply_view(df, FilterState().with_search("TIME OUT"), NOW)) == ["p3"]
    assert _ids(apply_view(df, FilterState().with_search("prb0002"), NOW)) == ["p2"]


def test_search_ignores_facets():
    df = _sample_df()
    state = FilterState(category="network").with_search("slow")
    assert state.category == "network"
    assert _ids(apply_view(df, state, NOW)) == ["p3"]


def test_blank_search_term_falls_back_to_facets():
    df = _sample_df()
    state = FilterState(is_search_mode=True, search_term="   ", category="network")
    assert _ids(apply_view(df, state, NOW)) == ["p2"]


def test_facets_and_together():
    df = _sample_df()
    state = FilterState(priority="1", active="true")
    assert _ids(apply_view(df, state, NOW)) == ["p1", "p3"]
    state = state.with_facet("category", "database")
    assert _ids(apply_view(df, state, NOW)) == ["p3"]


def test_all_filters_is_identity():
    df = _sample_df()
    out = apply_view(df, FilterState(), NOW)
    assert _ids(out) == _ids(df)


def test_facet_result_satisfies_each_constraint():
    df = _sample_df()
    state = FilterState(category="software", active="true")
    out = apply_view(df, state, NOW)
    assert (out["category"] == "software").all()
    assert out["active"].all()
    assert facet_mask(out, state, NOW).all()


def test_empty_value_never_matches_concrete_facet():
    df = _sample_df()
    out = apply_view(df, FilterState(priority="3"), NOW)
    assert out.empty


def test_date_ranges():
    df = _sample_df()
    assert _ids(apply_view(df, FilterState(date_range="today"), NOW)) == ["p1"]
    assert _ids(apply_view(df, FilterState(date_range="week"), NOW)) == ["p1", "p2"]
    assert _ids(apply_view(df, FilterState(date_range="month"), NOW)) == ["p1", "p2", "p3"]


def test_unparsable_update_fails_every_window():
    df = _sample_df()
    for window in ("today", "week", "month"):
        assert "p5" not in _ids(apply_view(df, FilterState(date_range=window), NOW))
    assert "p5" in _ids(apply_view(df, FilterState(), NOW))


def test_unknown_date_range_raises():
    df = _sample_df()
    with pytest.raises(ValueError):
        date_range_mask(df, "year", NOW)


def test_search_mask_blank_term_keeps_everything():
    df = _sample_df()
    assert search_mask(df, "").all()


def test_apply_view_preserves_order_and_empty():
    df = _sample_df().iloc[::-1]
    assert _ids(apply_view(df, FilterState(priority="1"), NOW)) == ["p3", "p1"]
    empty = problems_to_dataframe([])
    assert apply_view(empty, FilterState(priority="1"), NOW).empty


def test_age_metrics():
    df = add_age_metrics(_sample_df(), NOW)
    assert df.loc[df["id"] == "p1", "days_since_update"].iloc[0] == pytest.approx(2 / 24)
    assert pd.isna(df.loc[df["id"] == "p5", "days_since_update"].iloc[0])
    assert df.loc[df["id"] == "p2", "days_open"].iloc[0] == pytest.approx(5.0)


def test_filter_state_transitions():
    state = FilterState(category="network").with_search("vpn")
    assert state.searching
    dropped = state.with_facet("priority", "2")
    assert not dropped.is_search_mode
    assert dropped.search_term == ""
    kept = state.with_facet("priority", "all")
    assert kept.searching
    assert state.without_search().category == "network"
    assert state.reset_facets().facets == {
        "category": "all",
        "priority": "all",
        "state": "all",
        "active": "all",
        "date_range": "all",
    }
    with pytest.raises(ValueError):
        state.with_facet("colour", "red")


def test_two_day_old_record_windows():
    df = problems_to_dataframe(map_problems([problem_row(1, updated=NOW - timedelta(days=2))]))
    assert apply_view(df, FilterState(date_range="week"), NOW).shape[0] == 1
    assert apply_view(df, FilterState(date_range="month"), NOW).shape[0] == 1
    assert apply_view(df, FilterState(date_range="today"), NOW).empty
