"""Tests for template placeholder rendering."""

from datetime import date

from propledger_backend.modules.correspondence import render_template
from propledger_backend.modules.correspondence.rendering import find_placeholders

TODAY = date(2025, 6, 15)


def test_substitutes_variables_with_and_without_spaces():
    text = "Dear {{tenant_name}}, rent of {{ amount }} is due."
    assert (
        render_template(text, {"tenant_name": "Ana", "amount": "950.00"}, TODAY)
        == "Dear Ana, rent of 950.00 is due."
    )


def test_builtin_date_variables():
    assert render_template("{{current_date}} / {{ current_year }}", today=TODAY) == (
        "2025-06-15 / 2025"
    )


def test_builtin_variables_can_be_overridden():
    assert render_template("{{current_year}}", {"current_year": "2030"}, TODAY) == "2030"


def test_unknown_placeholder_is_left_as_written():
    assert render_template("Hello {{ nobody }}", {}, TODAY) == "Hello {{ nobody }}"


def test_none_renders_empty():
    assert render_template("[{{note}}]", {"note": None}, TODAY) == "[]"


def test_find_placeholders_distinct_in_order():
    text = "{{ b }} {{a}} {{b}} {{ current_date }}"
    assert find_placeholders(text) == ["b", "a", "current_date"]
