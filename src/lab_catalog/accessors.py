"""Typed value lookups over partially populated product reports.

Every accessor is total: a missing section, entry or unparseable number
yields ``None`` and never raises.
"""
from __future__ import annotations

from typing import Dict, Iterable, Optional

from .models import Product
from .parsers import parse_amount, parse_leading_float
from .ranges import nutrient_field

FAIL = "fail"
PASS = "pass"
MIXED = "mixed"


def nutrient_value(product: Product, nutrient: str) -> Optional[float]:
    tests = product.results.basic_tests
    if not tests:
        return None
    result = tests.get(nutrient_field(nutrient))
    if result is None or not result.tested:
        return None
    return parse_leading_float(result.tested)


def price_value(product: Product) -> Optional[float]:
    info = product.results.product_info
    nested = parse_amount(info.price) if info else None
    return _prefer_positive(nested, product.price)


def price_per_serving_value(product: Product) -> Optional[float]:
    info = product.results.product_info
    nested = parse_amount(info.price_per_serving) if info else None
    return _prefer_positive(nested, product.price_per_serving)


def contaminant_verdict(product: Product, contaminant: str) -> Optional[str]:
    tests = product.results.contaminant_tests
    if not tests:
        return None

    exact = tests.get(contaminant)
    if exact is not None and exact.verdict:
        return exact.verdict

    needle = contaminant.lower()
    for name, entry in tests.items():
        if needle in name.lower() and entry.verdict:
            return entry.verdict
    return None


def subjective_verdict(product: Product, aspect: str) -> Optional[str]:
    review = product.results.review
    if not review:
        return None
    entry = review.get(aspect)
    return entry.verdict if entry is not None and entry.verdict else None


def basic_tests_verdict(product: Product) -> Optional[str]:
    return _aggregate_section(product.results.basic_tests)


def contaminant_tests_verdict(product: Product) -> Optional[str]:
    return _aggregate_section(product.results.contaminant_tests)


def review_verdict(product: Product) -> Optional[str]:
    return _aggregate_section(product.results.review)


def aggregate_verdict(verdicts: Iterable[Optional[str]]) -> Optional[str]:
    """Combine verdicts: any fail wins, then any pass, otherwise mixed."""

    present = [verdict for verdict in verdicts if verdict]
    if not present:
        return None
    if FAIL in present:
        return FAIL
    if PASS in present:
        return PASS
    return MIXED


def _aggregate_section(section: Optional[Dict[str, object]]) -> Optional[str]:
    if not section:
        return None
    return aggregate_verdict(getattr(entry, "verdict", None) for entry in section.values())


def _prefer_positive(nested: Optional[float], flat: Optional[float]) -> Optional[float]:
    if nested is not None and nested > 0:
        return nested
    if flat is not None and flat > 0:
        return flat
    return None
