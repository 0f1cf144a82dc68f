"""Parsers that convert raw catalog rows into report models."""
from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from .models import (
    ContaminantEntry,
    ContaminantGroup,
    Product,
    ProductInfo,
    ReportResults,
    ReviewEntry,
    TestResult,
)

logger = logging.getLogger(__name__)

_LEADING_FLOAT = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_NON_NUMERIC = re.compile(r"[^\d.]")

_GROUP_RESERVED_KEYS = {"verdict", "note"}


def parse_report(row: Dict[str, Any]) -> Product:
    results = row.get("results") or {}
    if not isinstance(results, dict):
        logger.debug("Report %s has non-object results, ignoring", row.get("id"))
        results = {}

    return Product(
        id=row.get("id"),
        product_id=str(row.get("product_id") or ""),
        product_name=row.get("product_name") or "",
        category=row.get("product_category") or "",
        company=row.get("company") or "",
        verdict=normalize_verdict(row.get("verdict")),
        price=_safe_float(row.get("price")),
        price_per_serving=_safe_float(row.get("price_per_serving")),
        image_url=row.get("image_url"),
        image_status=row.get("image_status"),
        video_url=row.get("video_url"),
        results=parse_results(results),
        created_at=_safe_datetime(row.get("created_at")),
        updated_at=_safe_datetime(row.get("updated_at")),
        raw=row,
    )


def parse_reports(rows: Iterable[Dict[str, Any]]) -> List[Product]:
    products: List[Product] = []
    for row in rows:
        if not isinstance(row, dict) or row.get("product_id") is None:
            logger.warning("Skipping catalog row without product_id: %r", row)
            continue
        products.append(parse_report(row))
    return products


def parse_results(results: Dict[str, Any]) -> ReportResults:
    product_info = results.get("product_info")
    return ReportResults(
        product_info=_parse_product_info(product_info) if isinstance(product_info, dict) else None,
        basic_tests=_parse_section(results.get("basic_tests"), _parse_test_result),
        contaminant_tests=_parse_section(results.get("contaminant_tests"), _parse_contaminant),
        review=_parse_section(results.get("review"), _parse_review),
        debug_info=results.get("debug_info") or {},
    )


def normalize_verdict(value: Any) -> Optional[str]:
    """Lower-case a verdict and join words with underscores.

    ``"Not Assigned"`` becomes ``"not_assigned"``; empty values become ``None``.
    """

    if value is None:
        return None
    text = "_".join(str(value).strip().lower().split())
    return text or None


def parse_leading_float(value: Any) -> Optional[float]:
    """Parse the numeric prefix of ``value`` (``"24.5g"`` -> ``24.5``)."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    match = _LEADING_FLOAT.match(str(value))
    if not match:
        return None
    return _safe_float(match.group(1))


def parse_amount(value: Any) -> Optional[float]:
    """Parse a display amount such as ``"₹1,250.50"`` by dropping every
    character that is not a digit or a dot."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    return parse_leading_float(_NON_NUMERIC.sub("", str(value)))


def _parse_section(section: Any, parse_entry) -> Optional[Dict[str, Any]]:
    if not isinstance(section, dict):
        return None
    parsed: Dict[str, Any] = {}
    for name, entry in section.items():
        if not isinstance(entry, dict):
            logger.debug("Skipping non-object test entry %r", name)
            continue
        parsed[name] = parse_entry(entry)
    return parsed


def _parse_test_result(entry: Dict[str, Any]) -> TestResult:
    return TestResult(
        verdict=normalize_verdict(entry.get("verdict")),
        tested=_optional_str(entry.get("tested")),
        claimed=_optional_str(entry.get("claimed")),
        rating=_optional_str(entry.get("rating")),
        note=_optional_str(entry.get("note")),
    )


def _parse_contaminant(entry: Dict[str, Any]) -> ContaminantEntry:
    children = {
        key: _parse_test_result(value)
        for key, value in entry.items()
        if key not in _GROUP_RESERVED_KEYS and isinstance(value, dict)
    }
    if not children:
        return _parse_test_result(entry)
    return ContaminantGroup(
        verdict=normalize_verdict(entry.get("verdict")),
        note=_optional_str(entry.get("note")),
        children=children,
    )


def _parse_review(entry: Dict[str, Any]) -> ReviewEntry:
    return ReviewEntry(
        verdict=normalize_verdict(entry.get("verdict")),
        rating=_optional_str(entry.get("rating")),
        note=_optional_str(entry.get("note")),
    )


def _parse_product_info(entry: Dict[str, Any]) -> ProductInfo:
    return ProductInfo(
        product_name=_optional_str(entry.get("product_name")),
        company_name=_optional_str(entry.get("company_name")),
        product_category=_optional_str(entry.get("product_category")),
        serving_size=_optional_str(entry.get("serving_size")),
        price=_optional_str(entry.get("price")),
        price_per_serving=_optional_str(entry.get("price_per_serving")),
        verdict=normalize_verdict(entry.get("verdict")),
    )


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def _safe_float(value: Any) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _safe_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Unparseable timestamp %r", value)
        return None
