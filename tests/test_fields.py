from problem_portal.core.fields import display_of, is_active, text_value, to_field, value_of
from problem_portal.core.models import FieldValue


def test_display_prefers_display_value_then_value():
    assert display_of({"display_value": "Resolved", "value": "106"}) == "Resolved"
    assert display_of({"displayValue": "Closed", "value": "107"}) == "Closed"
    assert display_of({"value": "106"}) == "106"


def test_value_prefers_value_then_display():
    assert value_of({"display_value": "Resolved", "value": "106"}) == "106"
    assert value_of({"display_value": "Resolved"}) == "Resolved"


def test_scalars_and_missing():
    assert display_of(None) == ""
    assert value_of(None) == ""
    assert display_of({}) == ""
    assert value_of({}) == ""
    assert display_of(3) == "3"
    assert value_of(3) == 3
    assert display_of(True) == "true"
    assert display_of(False) == "false"


def test_text_value_strips_and_stringifies():
    assert text_value({"value": 2}) == "2"
    assert text_value("  software ") == "software"


def test_to_field_and_passthrough():
    field = to_field({"display_value": "High", "value": "2"})
    assert field == FieldValue(display="High", value="2")
    assert display_of(field) == "High"
    assert value_of(field) == "2"
    assert to_field(None) == FieldValue()


def test_is_active_normalization():
    assert is_active(True)
    assert is_active("true")
    assert is_active({"display_value": "true", "value": "true"})
    assert is_active({"display_value": "Yes", "value": True})
    assert not is_active("True")
    assert not is_active("1")
    assert not is_active(False)
    assert not is_active(None)
