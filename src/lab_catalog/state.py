"""Browse state and the reducer that applies user actions to it."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional, Union

from .facets import ALL_CATEGORY
from .filters import VERDICT_FACETS, FilterState
from .parsers import normalize_verdict
from .sorting import ASC, DESC, SortState


@dataclass(frozen=True)
class BrowseState:
    category: str = ALL_CATEGORY
    filters: FilterState = field(default_factory=FilterState)
    sort: Optional[SortState] = None


@dataclass(frozen=True)
class ChangeCategory:
    category: str


@dataclass(frozen=True)
class ToggleValue:
    facet: str
    value: str


@dataclass(frozen=True)
class ToggleContaminant:
    contaminant: str
    value: str


@dataclass(frozen=True)
class SetRange:
    facet: str
    low: float
    high: float


@dataclass(frozen=True)
class ToggleSort:
    field: str


@dataclass(frozen=True)
class ClearFilters:
    pass


Action = Union[ChangeCategory, ToggleValue, ToggleContaminant, SetRange, ToggleSort, ClearFilters]


def reduce(state: BrowseState, action: Action) -> BrowseState:
    """Return the state that results from applying ``action`` to ``state``."""

    if isinstance(action, ChangeCategory):
        return BrowseState(category=action.category)

    if isinstance(action, ClearFilters):
        return BrowseState(category=state.category)

    if isinstance(action, ToggleValue):
        value = normalize_verdict(action.value) if action.facet in VERDICT_FACETS else action.value
        current = state.filters.selected(action.facet)
        filters = state.filters.with_selection(action.facet, _toggle(current, value))
        return replace(state, filters=filters)

    if isinstance(action, ToggleContaminant):
        current = state.filters.extra_contaminants.get(action.contaminant, ())
        filters = state.filters.with_extra_contaminant(action.contaminant, _toggle(current, normalize_verdict(action.value)))
        return replace(state, filters=filters)

    if isinstance(action, SetRange):
        return replace(state, filters=state.filters.with_range(action.facet, action.low, action.high))

    if isinstance(action, ToggleSort):
        # Re-selecting the active field while descending flips it to ascending.
        if state.sort is not None and state.sort.field == action.field and state.sort.direction == DESC:
            direction = ASC
        else:
            direction = DESC
        return replace(state, sort=SortState(action.field, direction))

    raise TypeError(f"Unsupported action: {action!r}")


def _toggle(current, value: str):
    values = list(current)
    if value in values:
        values.remove(value)
    else:
        values.append(value)
    return values
