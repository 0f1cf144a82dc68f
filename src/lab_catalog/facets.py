"""Category-dependent facet configuration."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List, Tuple

CATEGORIES = [
    "Whey Concentrate",
    "Whey Isolate",
    "Whey Blend",
    "Creatine",
    "Omega 3",
    "Food",
    "Plant Protein",
    "All Products",
]

ALL_CATEGORY = "all"

CONTAMINANTS: Tuple[str, ...] = (
    "aflatoxins",
    "pesticides",
    "amino_spiking",
    "heavy_metals",
    "melamine_spiking",
)

SUBJECTIVE_ASPECTS: Tuple[str, ...] = (
    "taste",
    "mixability",
    "packaging",
    "serving_size_accuracy",
)

VERDICT_OPTIONS: Tuple[str, ...] = ("pass", "fail", "not_assigned")
CONTAMINANT_VERDICT_OPTIONS: Tuple[str, ...] = ("pass", "fail")
AGGREGATE_VERDICT_OPTIONS: Tuple[str, ...] = ("pass", "fail", "mixed")

PRICE_SORT_FIELDS: Tuple[str, ...] = ("price", "price_per_serving")


@dataclass(frozen=True)
class FacetConfig:
    """Which filter groups and sort fields a category offers."""

    has_verdict: bool = True
    has_nutrients: bool = True
    nutrients: Tuple[str, ...] = ()
    has_contaminants: bool = True
    contaminants: Tuple[str, ...] = ()
    contaminants_from_data: bool = False
    has_subjective: bool = True
    subjective: Tuple[str, ...] = SUBJECTIVE_ASPECTS
    has_price: bool = True
    has_price_per_serving: bool = True
    has_sorting: bool = True
    sorting_fields: Tuple[str, ...] = PRICE_SORT_FIELDS
    has_food_filters: bool = False


_PROTEIN_PROFILE = FacetConfig(
    nutrients=("protein",),
    contaminants=CONTAMINANTS,
    sorting_fields=PRICE_SORT_FIELDS + ("protein_per_serving",),
)

_CREATINE_PROFILE = FacetConfig(
    nutrients=("creatine",),
    contaminants=CONTAMINANTS,
    sorting_fields=PRICE_SORT_FIELDS + ("creatine_per_serving",),
)

_OMEGA_PROFILE = FacetConfig(
    has_nutrients=False,
    contaminants_from_data=True,
)

_FOOD_PROFILE = FacetConfig(
    has_verdict=False,
    has_nutrients=False,
    has_contaminants=False,
    has_subjective=False,
    subjective=(),
    has_sorting=False,
    sorting_fields=(),
    has_food_filters=True,
)

_DEFAULT_PROFILE = FacetConfig(
    nutrients=("protein", "creatine"),
    contaminants=CONTAMINANTS,
    sorting_fields=PRICE_SORT_FIELDS + ("protein_per_serving", "creatine_per_serving"),
)

# Checked in order; the first group with a matching keyword wins.
_CATEGORY_PROFILES: List[Tuple[Tuple[str, ...], FacetConfig]] = [
    (("whey", "plant protein"), _PROTEIN_PROFILE),
    (("creatine",), _CREATINE_PROFILE),
    (("omega",), _OMEGA_PROFILE),
    (("food", "other"), _FOOD_PROFILE),
]


def resolve_facets(category: str) -> FacetConfig:
    """Return the facet configuration for ``category``.

    Matching is a case-insensitive substring test, so ``"Whey Isolate"`` and
    the routing slug ``"whey-isolate"`` resolve alike. Unknown categories,
    including ``"all"``, get the profile exposing every facet.
    """

    lowered = category_from_slug(category or "")
    for keywords, config in _CATEGORY_PROFILES:
        if any(keyword in lowered for keyword in keywords):
            return config
    return _DEFAULT_PROFILE


def category_slug(category: str) -> str:
    """``"Whey Isolate"`` -> ``"whey-isolate"``."""

    return re.sub(r"\s+", "-", category.strip().lower())


def category_from_slug(slug: str) -> str:
    """``"whey-isolate"`` -> ``"whey isolate"``."""

    return slug.replace("-", " ").strip().lower()


def is_all_category(category: str | None) -> bool:
    if not category:
        return True
    name = category_from_slug(category)
    return name in (ALL_CATEGORY, "all products")


def matches_category(product_category: str | None, category: str | None) -> bool:
    """Case-insensitive category equality; the "all" category matches everything."""

    if is_all_category(category):
        return True
    if not product_category:
        return False
    return " ".join(product_category.lower().split()) == " ".join(category_from_slug(category).split())


def discover_contaminants(products: Iterable) -> List[str]:
    """Contaminant test names present in ``products``, in first-seen order."""

    names: List[str] = []
    for product in products:
        tests = product.results.contaminant_tests or {}
        for name in tests:
            if name not in names:
                names.append(name)
    return names
