from problem_portal.core.models import Choice
from problem_portal.core.status import (
    is_closed_state,
    is_resolved_state,
    priority_color,
    priority_label,
    snippet,
    state_label,
)


def test_priority_labels():
    assert priority_label("1") == "Critical"
    assert priority_label(" 5 ") == "Planning"
    assert priority_label("") == "Unknown"
    assert priority_label(None) == "Unknown"
    assert priority_label("9") == "9"
    assert priority_label("1", [Choice("1", "1 - Critical")]) == "1 - Critical"


def test_state_labels_and_sets():
    assert state_label("103") == "Root Cause Analysis"
    assert state_label("106", [Choice("106", "Fixed")]) == "Fixed"
    assert is_resolved_state("106")
    assert not is_resolved_state("107")
    assert is_closed_state("107")


def test_priority_color_default():
    assert priority_color("1") == "#ff4444"
    assert priority_color("") == "#999999"


def test_snippet():
    assert snippet(None) == ""
    assert snippet("short   text") == "short text"
    long = "word " * 60
    out = snippet(long, length=20)
    assert out.endswith("...")
    assert len(out) <= 23
