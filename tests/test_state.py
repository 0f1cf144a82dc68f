"""Tests for the browse-state reducer."""

import pytest

from lab_catalog.filters import FilterState
from lab_catalog.sorting import SortState
from lab_catalog.state import (
    BrowseState,
    ChangeCategory,
    ClearFilters,
    SetRange,
    ToggleContaminant,
    ToggleSort,
    ToggleValue,
    reduce,
)


def test_toggle_value_adds_and_removes():
    state = reduce(BrowseState(), ToggleValue("verdict", "pass"))
    assert state.filters.selected("verdict") == ("pass",)

    state = reduce(state, ToggleValue("verdict", "fail"))
    assert state.filters.selected("verdict") == ("pass", "fail")

    state = reduce(state, ToggleValue("verdict", "pass"))
    assert state.filters.selected("verdict") == ("fail",)


def test_toggle_normalizes_verdicts_but_not_bucket_labels():
    state = reduce(BrowseState(), ToggleValue("verdict", "Not Assigned"))
    state = reduce(state, ToggleValue("verdict", "not_assigned"))
    assert state.filters.selected("verdict") == ()

    state = reduce(BrowseState(), ToggleValue("protein_per_serving", "> 25g"))
    assert state.filters.selected("protein_per_serving") == ("> 25g",)


def test_reducer_never_mutates_previous_state():
    first = reduce(BrowseState(), ToggleValue("taste", "pass"))
    second = reduce(first, ToggleValue("taste", "fail"))

    assert first.filters.selected("taste") == ("pass",)
    assert second.filters.selected("taste") == ("pass", "fail")


def test_toggle_contaminant_from_data():
    state = reduce(BrowseState(), ToggleContaminant("mercury", "pass"))
    assert state.filters.extra_contaminants == {"mercury": ("pass",)}

    state = reduce(state, ToggleContaminant("mercury", "pass"))
    assert state.filters.extra_contaminants == {}


def test_set_range():
    state = reduce(BrowseState(), SetRange("price", 100, 900))
    assert state.filters.range_for("price") == (100.0, 900.0)

    state = reduce(state, SetRange("price", 0, 10000))
    assert state.filters.range_for("price") is None


def test_set_range_rejects_list_facets():
    with pytest.raises(ValueError):
        reduce(BrowseState(), SetRange("verdict", 0, 1))


def test_toggle_sort_cycles_direction():
    state = reduce(BrowseState(), ToggleSort("price"))
    assert state.sort == SortState("price", "desc")

    state = reduce(state, ToggleSort("price"))
    assert state.sort == SortState("price", "asc")

    state = reduce(state, ToggleSort("price"))
    assert state.sort == SortState("price", "desc")

    state = reduce(state, ToggleSort("protein_per_serving"))
    assert state.sort == SortState("protein_per_serving", "desc")


def test_change_category_resets_everything():
    state = BrowseState(
        category="whey-isolate",
        filters=FilterState.from_mapping({"verdict": ["pass"]}),
        sort=SortState("price"),
    )
    state = reduce(state, ChangeCategory("creatine"))

    assert state == BrowseState(category="creatine")


def test_clear_filters_keeps_category():
    state = reduce(BrowseState(category="omega-3"), ToggleValue("verdict", "pass"))
    state = reduce(state, ToggleSort("price"))
    state = reduce(state, ClearFilters())

    assert state == BrowseState(category="omega-3")


def test_unknown_action():
    with pytest.raises(TypeError):
        reduce(BrowseState(), object())
