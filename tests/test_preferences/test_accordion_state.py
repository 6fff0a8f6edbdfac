"""Unit tests for the dashboard accordion state helpers."""

from __future__ import annotations

import json

from security_barometer.preferences import (
    DEFAULT_ACCORDION_STATE,
    apply_open_sections,
    collapse_all,
    dump_accordion_state,
    expand_all,
    is_section_open,
    merge_accordion_state,
    open_sections,
    reset_to_default,
    toggle_section,
)


def test_nothing_saved_gives_defaults() -> None:
    assert merge_accordion_state(None) == DEFAULT_ACCORDION_STATE
    assert merge_accordion_state("") == DEFAULT_ACCORDION_STATE


def test_saved_value_is_merged_over_defaults() -> None:
    state = merge_accordion_state('{"incidents": true}')
    assert state == {
        "active-alerts": True,
        "provinces": True,
        "international": True,
        "recent-alerts": False,
        "incidents": True,
        "employee-chart": False,
    }


def test_unparseable_value_falls_back_to_defaults() -> None:
    assert merge_accordion_state("{not json") == DEFAULT_ACCORDION_STATE
    assert merge_accordion_state("[1, 2]") == DEFAULT_ACCORDION_STATE


def test_defaults_are_not_mutated() -> None:
    state = merge_accordion_state('{"provinces": false}')
    state["international"] = False
    assert DEFAULT_ACCORDION_STATE["provinces"] is True
    assert DEFAULT_ACCORDION_STATE["international"] is True


def test_toggle_and_query() -> None:
    state = toggle_section(reset_to_default(), "incidents")
    assert is_section_open(state, "incidents") is True
    assert is_section_open(toggle_section(state, "incidents"), "incidents") is False
    assert is_section_open(state, "unknown-section") is False


def test_open_sections_round_trip() -> None:
    state = apply_open_sections(reset_to_default(), ["incidents", "provinces"])
    assert sorted(open_sections(state)) == ["incidents", "provinces"]
    assert json.loads(dump_accordion_state(state)) == state


def test_expand_and_collapse_all() -> None:
    assert all(expand_all().values())
    assert not any(collapse_all().values())
    assert set(expand_all()) == set(DEFAULT_ACCORDION_STATE)
