"""Ordering of filtered product lists."""
from __future__ import annotations

from dataclasses import dataclass
from functools import cmp_to_key
from typing import Callable, Dict, List, Optional, Sequence

from .accessors import nutrient_value, price_per_serving_value, price_value
from .models import Product
from .ranges import NUTRIENTS, nutrient_field

ASC = "asc"
DESC = "desc"
DIRECTIONS = (ASC, DESC)

SortKey = Callable[[Product], Optional[float]]


def _nutrient_key(nutrient: str) -> SortKey:
    return lambda product: nutrient_value(product, nutrient)


SORT_KEYS: Dict[str, SortKey] = {
    "price": price_value,
    "price_per_serving": price_per_serving_value,
    **{nutrient_field(nutrient): _nutrient_key(nutrient) for nutrient in NUTRIENTS},
}
SORT_FIELDS = tuple(SORT_KEYS)


@dataclass(frozen=True)
class SortState:
    field: str
    direction: str = DESC

    def __post_init__(self) -> None:
        if self.field not in SORT_KEYS:
            raise ValueError(f"Unsupported sort field: {self.field}")
        if self.direction not in DIRECTIONS:
            raise ValueError(f"Sort direction must be one of {', '.join(DIRECTIONS)}")

    @classmethod
    def parse(cls, text: str) -> "SortState":
        """Parse ``"price"`` or ``"price:asc"``."""

        field, _, direction = text.partition(":")
        return cls(field.strip(), (direction or DESC).strip().lower())


def apply_sort(products: Sequence[Product], sort: SortState | None = None) -> List[Product]:
    """Return ``products`` ordered by ``sort``.

    Missing values go last when ascending and first when descending. Products
    with equal keys keep their input order.
    """

    if sort is None:
        return list(products)

    key = SORT_KEYS[sort.field]
    ascending = sort.direction == ASC
    keyed = [(key(product), product) for product in products]

    def compare(a, b) -> int:
        a_value, b_value = a[0], b[0]
        if a_value is None and b_value is None:
            return 0
        if a_value is None:
            return 1 if ascending else -1
        if b_value is None:
            return -1 if ascending else 1
        difference = a_value - b_value
        if difference == 0:
            return 0
        sign = 1 if difference > 0 else -1
        return sign if ascending else -sign

    keyed.sort(key=cmp_to_key(compare))
    return [product for _, product in keyed]
