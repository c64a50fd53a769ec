from problem_portal.core.models import ActivitySummary
from problem_portal.core.status import priority_label
from problem_portal.visual.charts import activity_chart, distribution_chart, priority_chart


def test_distribution_chart_shapes():
    chart = distribution_chart({"software": 3, "network": 1, "Unknown": 2}, "Category")
    assert chart is not None
    data = chart.data
    assert data["key"].tolist() == ["software", "Unknown", "network"]
    assert data["label"].tolist() == data["key"].tolist()


def test_distribution_chart_empty():
    assert distribution_chart({}, "State") is None
    assert priority_chart({}) is None


def test_priority_chart_labels_and_colors():
    chart = priority_chart({"1": 2, "3": 5}, priority_label)
    data = chart.data
    assert set(data["label"]) == {"Critical", "Moderate"}
    assert data.loc[data["key"] == "1", "color"].iloc[0] == "#ff4444"


def test_activity_chart():
    chart = activity_chart(ActivitySummary(new_problems=2, resolved_problems=1, total_open=5), 7)
    assert chart.data["count"].tolist() == [2, 1, 5]
    assert chart.to_dict()["mark"]["type"] == "bar"
