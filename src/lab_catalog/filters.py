"""Filter state and the narrowing pipeline applied to product lists."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .accessors import (
    basic_tests_verdict,
    contaminant_tests_verdict,
    contaminant_verdict,
    nutrient_value,
    price_per_serving_value,
    price_value,
    review_verdict,
    subjective_verdict,
)
from .facets import CONTAMINANTS, SUBJECTIVE_ASPECTS
from .models import Product
from .parsers import normalize_verdict
from .ranges import NUTRIENTS, matches_nutrient_range, nutrient_field

Range = Tuple[float, float]

PRICE_DEFAULT: Range = (0.0, 10000.0)
PRICE_PER_SERVING_DEFAULT: Range = (0.0, 1000.0)
RANGE_DEFAULTS: Dict[str, Range] = {
    "price": PRICE_DEFAULT,
    "price_per_serving": PRICE_PER_SERVING_DEFAULT,
}
RANGE_FACETS: Tuple[str, ...] = tuple(RANGE_DEFAULTS)

NUTRIENT_FACETS: Tuple[str, ...] = tuple(nutrient_field(nutrient) for nutrient in NUTRIENTS)
AGGREGATE_FACETS: Tuple[str, ...] = (
    "basic_tests_verdict",
    "contaminant_tests_verdict",
    "review_verdict",
)
VERDICT_FACETS: Tuple[str, ...] = ("verdict",) + CONTAMINANTS + SUBJECTIVE_ASPECTS + AGGREGATE_FACETS
LIST_FACETS: Tuple[str, ...] = ("verdict",) + NUTRIENT_FACETS + CONTAMINANTS + SUBJECTIVE_ASPECTS + AGGREGATE_FACETS

EXTRA_CONTAMINANTS_KEY = "extra_contaminants"


def lookup_name(facet: str) -> str:
    """Report key a contaminant or review facet reads (``heavy_metals`` -> ``heavy metals``)."""

    return facet.replace("_", " ")


@dataclass(frozen=True)
class FilterState:
    """Sparse set of facet selections.

    ``selections`` maps list facets to accepted values, ``ranges`` maps price
    facets to inclusive ``(low, high)`` bounds and ``extra_contaminants`` holds
    verdict selections for contaminants discovered in the data. Missing or
    empty entries impose no constraint. Instances are never mutated; the
    ``with_*`` helpers return copies.
    """

    selections: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
    ranges: Mapping[str, Range] = field(default_factory=dict)
    extra_contaminants: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "FilterState":
        """Build a state from the sparse ``{facet: value}`` shape.

        Raises
        ------
        ValueError
            If a key is not a known facet or a range is not a pair of numbers.
        """

        state = cls()
        for key, value in (data or {}).items():
            if value is None:
                continue
            if key in LIST_FACETS:
                state = state.with_selection(key, value)
            elif key in RANGE_FACETS:
                low, high = _as_range(key, value)
                state = state.with_range(key, low, high)
            elif key == EXTRA_CONTAMINANTS_KEY:
                for name, verdicts in dict(value).items():
                    state = state.with_extra_contaminant(name, verdicts)
            else:
                raise ValueError(f"Unknown filter facet: {key}")
        return state

    def to_mapping(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {key: list(values) for key, values in self.selections.items() if values}
        for key in RANGE_FACETS:
            bounds = self.range_for(key)
            if bounds is not None:
                data[key] = list(bounds)
        extra = {name: list(values) for name, values in self.extra_contaminants.items() if values}
        if extra:
            data[EXTRA_CONTAMINANTS_KEY] = extra
        return data

    def selected(self, facet: str) -> Tuple[str, ...]:
        return tuple(self.selections.get(facet, ()))

    def range_for(self, facet: str) -> Optional[Range]:
        """Active bounds for ``facet``; ``None`` when unset or at the full-span default."""

        bounds = self.ranges.get(facet)
        if bounds is None or tuple(bounds) == RANGE_DEFAULTS.get(facet):
            return None
        return bounds

    def with_selection(self, facet: str, values: Iterable[str]) -> "FilterState":
        if facet not in LIST_FACETS:
            raise ValueError(f"Unknown filter facet: {facet}")
        cleaned = _clean_values(values, normalize=facet in VERDICT_FACETS)
        selections = dict(self.selections)
        if cleaned:
            selections[facet] = cleaned
        else:
            selections.pop(facet, None)
        return FilterState(selections, dict(self.ranges), dict(self.extra_contaminants))

    def with_range(self, facet: str, low: float, high: float) -> "FilterState":
        if facet not in RANGE_FACETS:
            raise ValueError(f"Unknown range facet: {facet}")
        ranges = dict(self.ranges)
        ranges[facet] = (float(low), float(high))
        return FilterState(dict(self.selections), ranges, dict(self.extra_contaminants))

    def with_extra_contaminant(self, name: str, values: Iterable[str]) -> "FilterState":
        cleaned = _clean_values(values, normalize=True)
        extra = dict(self.extra_contaminants)
        if cleaned:
            extra[name] = cleaned
        else:
            extra.pop(name, None)
        return FilterState(dict(self.selections), dict(self.ranges), extra)


VerdictGetter = Callable[[Product], Optional[str]]


def _contaminant_getter(name: str) -> VerdictGetter:
    return lambda product: contaminant_verdict(product, name)


def _subjective_getter(name: str) -> VerdictGetter:
    return lambda product: subjective_verdict(product, name)


_VERDICT_GETTERS: List[Tuple[str, VerdictGetter]] = (
    [("verdict", lambda product: product.verdict)]
    + [(facet, _contaminant_getter(lookup_name(facet))) for facet in CONTAMINANTS]
    + [(facet, _subjective_getter(lookup_name(facet))) for facet in SUBJECTIVE_ASPECTS]
    + [
        ("basic_tests_verdict", basic_tests_verdict),
        ("contaminant_tests_verdict", contaminant_tests_verdict),
        ("review_verdict", review_verdict),
    ]
)

_RANGE_GETTERS: Dict[str, Callable[[Product], Optional[float]]] = {
    "price": price_value,
    "price_per_serving": price_per_serving_value,
}


def apply_filters(products: Sequence[Product], filters: FilterState | None = None) -> List[Product]:
    """Return the products that satisfy every active facet in ``filters``.

    The input sequence is left untouched and input order is preserved. A
    product without the data a facet needs is excluded while that facet is
    active.
    """

    filtered = list(products)
    if filters is None:
        return filtered

    for nutrient in NUTRIENTS:
        labels = filters.selected(nutrient_field(nutrient))
        if labels:
            filtered = [p for p in filtered if _in_nutrient_ranges(p, nutrient, labels)]

    for facet, getter in _RANGE_GETTERS.items():
        bounds = filters.range_for(facet)
        if bounds is not None:
            filtered = [p for p in filtered if _within(getter(p), bounds)]

    for facet, getter in _VERDICT_GETTERS:
        filtered = _narrow_by_verdict(filtered, getter, filters.selected(facet))

    for name, accepted in filters.extra_contaminants.items():
        filtered = _narrow_by_verdict(filtered, _contaminant_getter(name), accepted)

    return filtered


def count_active_filters(filters: FilterState | None) -> int:
    """Number of facet slots holding a non-default selection."""

    if filters is None:
        return 0
    count = sum(1 for facet in LIST_FACETS if filters.selected(facet))
    count += sum(1 for facet in RANGE_FACETS if filters.range_for(facet) is not None)
    count += sum(1 for values in filters.extra_contaminants.values() if values)
    return count


def _narrow_by_verdict(
    products: List[Product], getter: VerdictGetter, accepted: Iterable[str]
) -> List[Product]:
    accepted = set(accepted)
    if not accepted:
        return products
    kept = []
    for product in products:
        verdict = getter(product)
        if verdict is not None and verdict in accepted:
            kept.append(product)
    return kept


def _in_nutrient_ranges(product: Product, nutrient: str, labels: Sequence[str]) -> bool:
    value = nutrient_value(product, nutrient)
    return value is not None and matches_nutrient_range(value, labels, nutrient)


def _within(value: Optional[float], bounds: Range) -> bool:
    low, high = bounds
    return value is not None and low <= value <= high


def _clean_values(values: Iterable[str], normalize: bool) -> Tuple[str, ...]:
    if isinstance(values, str):
        values = [values]
    cleaned: List[str] = []
    for value in values:
        item = normalize_verdict(value) if normalize else str(value).strip()
        if item and item not in cleaned:
            cleaned.append(item)
    return tuple(cleaned)


def _as_range(facet: str, value: Any) -> Range:
    try:
        low, high = value
        return float(low), float(high)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{facet} expects a [min, max] pair, got {value!r}") from exc
