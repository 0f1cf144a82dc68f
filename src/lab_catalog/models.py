"""Data models for lab-tested product reports."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional, Union


@dataclass
class TestResult:
    verdict: Optional[str] = None
    tested: Optional[str] = None
    claimed: Optional[str] = None
    rating: Optional[str] = None
    note: Optional[str] = None


@dataclass
class ContaminantGroup:
    """A contaminant test composed of several nested sub-checks."""

    verdict: Optional[str] = None
    note: Optional[str] = None
    children: Dict[str, TestResult] = field(default_factory=dict)


ContaminantEntry = Union[TestResult, ContaminantGroup]


@dataclass
class ReviewEntry:
    verdict: Optional[str] = None
    rating: Optional[str] = None
    note: Optional[str] = None


@dataclass
class ProductInfo:
    product_name: Optional[str] = None
    company_name: Optional[str] = None
    product_category: Optional[str] = None
    serving_size: Optional[str] = None
    price: Optional[str] = None
    price_per_serving: Optional[str] = None
    verdict: Optional[str] = None


@dataclass
class ReportResults:
    """Nested results of a report; every section may be missing."""

    product_info: Optional[ProductInfo] = None
    basic_tests: Optional[Dict[str, TestResult]] = None
    contaminant_tests: Optional[Dict[str, ContaminantEntry]] = None
    review: Optional[Dict[str, ReviewEntry]] = None
    debug_info: dict = field(default_factory=dict)


@dataclass
class Product:
    id: object
    product_id: str
    product_name: str = ""
    category: str = ""
    company: str = ""
    verdict: Optional[str] = None
    price: Optional[float] = None
    price_per_serving: Optional[float] = None
    image_url: Optional[str] = None
    image_status: Optional[str] = None
    video_url: Optional[str] = None
    results: ReportResults = field(default_factory=ReportResults)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    raw: dict = field(default_factory=dict)

    def display_price(self) -> Optional[str]:
        """Price as shown to visitors, preferring the tested product info."""

        info = self.results.product_info
        if info and info.price:
            return _with_currency(info.price)
        if self.price:
            return _with_currency(self.price)
        return None

    def display_price_per_serving(self) -> Optional[str]:
        info = self.results.product_info
        if info and info.price_per_serving:
            return _with_currency(info.price_per_serving)
        if self.price_per_serving:
            return _with_currency(self.price_per_serving)
        return None


CURRENCY_SYMBOL = "₹"


def _with_currency(value: object) -> str:
    text = str(value)
    return text if CURRENCY_SYMBOL in text else f"{CURRENCY_SYMBOL}{text}"
