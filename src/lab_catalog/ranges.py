"""Labeled per-serving nutrient buckets used for range filtering."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

UNBOUNDED = math.inf


@dataclass(frozen=True)
class NutrientRange:
    label: str
    min: float
    max: float = UNBOUNDED

    @property
    def unbounded(self) -> bool:
        return self.max == UNBOUNDED

    def contains(self, value: float) -> bool:
        # The open top bucket starts strictly above its lower edge.
        if value < self.min:
            return False
        if self.unbounded:
            return value > self.min
        return value <= self.max


NUTRIENT_RANGES: Dict[str, Tuple[NutrientRange, ...]] = {
    "protein": (
        NutrientRange("< 20g", 0, 20),
        NutrientRange("20-22g", 20, 22),
        NutrientRange("22-25g", 22, 25),
        NutrientRange("> 25g", 25),
    ),
    "carbs": (
        NutrientRange("< 5g", 0, 5),
        NutrientRange("5-10g", 5, 10),
        NutrientRange("10-20g", 10, 20),
        NutrientRange("20-30g", 20, 30),
        NutrientRange("> 30g", 30),
    ),
    "fats": (
        NutrientRange("< 5g", 0, 5),
        NutrientRange("5-10g", 5, 10),
        NutrientRange("10-15g", 10, 15),
        NutrientRange("> 15g", 15),
    ),
    "creatine": (
        NutrientRange("< 3g", 0, 3),
        NutrientRange("3-4g", 3, 4),
        NutrientRange("4-5g", 4, 5),
        NutrientRange("> 5g", 5),
    ),
}

NUTRIENTS: Tuple[str, ...] = tuple(NUTRIENT_RANGES)


def nutrient_field(nutrient: str) -> str:
    """Name of the basic test and filter key for ``nutrient``."""

    return f"{nutrient}_per_serving"


def find_range(nutrient: str, label: str) -> Optional[NutrientRange]:
    for bucket in NUTRIENT_RANGES.get(nutrient, ()):
        if bucket.label == label:
            return bucket
    return None


def matches_nutrient_range(value: float, selected_labels: Iterable[str], nutrient: str) -> bool:
    """Return ``True`` when ``value`` falls in any of ``selected_labels``.

    An empty selection or an unknown nutrient imposes no constraint; an
    unknown label matches nothing.
    """

    labels = list(selected_labels)
    if not labels:
        return True
    if nutrient not in NUTRIENT_RANGES:
        return True
    for label in labels:
        bucket = find_range(nutrient, label)
        if bucket is not None and bucket.contains(value):
            return True
    return False
