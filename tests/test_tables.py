from fakes import NOW, problem_row
from problem_portal.core.config import DISPLAY_ORDER_PROBLEM_LIST
from problem_portal.core.mappers import map_problems, problems_to_dataframe
from problem_portal.core.models import Choice
from problem_portal.visual.column_metadata import COLUMN_METADATA, apply_column_metadata
from problem_portal.visual.tables import label_choices, prepare_problem_table


def _sample_df():
    rows = [problem_row(1, priority="2", state="106"), problem_row(2, category="network")]
    # Store rows without display strings
    rows[1]["priority"] = "4"
    rows[1]["state"] = "103"
    rows[1]["category"] = {"value": "network"}
    return problems_to_dataframe(map_problems(rows))


def test_label_choices_fills_blank_displays():
    df = _sample_df()
    df.loc[1, ["priority_display", "state_display", "category_display"]] = ""
    out = label_choices(df, {"category": [Choice("network", "Network")]})
    assert out.loc[0, "priority_display"] == "2 - P"
    assert out.loc[1, "priority_display"] == "Low"
    assert out.loc[1, "state_display"] == "Root Cause Analysis"
    assert out.loc[1, "category_display"] == "Network"


def test_prepare_problem_table():
    table, cols, cfg = prepare_problem_table(_sample_df(), extra_columns=["days_since_update"], now=NOW)
    assert cols == list(DISPLAY_ORDER_PROBLEM_LIST) + ["days_since_update"]
    assert table.loc[0, "days_since_update"] == 0.0
    assert set(cfg) == set(cols) & set(COLUMN_METADATA)


def test_prepare_problem_table_empty():
    table, cols, cfg = prepare_problem_table(problems_to_dataframe([]))
    assert table.empty
    assert cols == [] and cfg == {}


def test_apply_column_metadata_keeps_existing():
    cfg = apply_column_metadata(["title", "unknown_col"], {"title": "custom"})
    assert cfg == {"title": "custom"}
