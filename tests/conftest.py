"""Shared report fixtures."""

import copy
import sys
from pathlib import Path

import pytest


def ensure_src_on_path() -> None:
    root = Path(__file__).resolve().parent.parent
    src_path = root / "src"
    if str(src_path) not in sys.path:
        sys.path.append(str(src_path))


ensure_src_on_path()

from lab_catalog.parsers import parse_report  # noqa: E402


WHEY_ISOLATE_ROW = {
    "id": 1,
    "product_id": "p-1",
    "product_name": "Gold Isolate",
    "product_category": "Whey Isolate",
    "company": "Acme Nutrition",
    "verdict": "pass",
    "price": 2500,
    "price_per_serving": None,
    "image_status": "completed",
    "created_at": "2024-05-03T10:00:00+00:00",
    "results": {
        "product_info": {
            "product_name": "Gold Isolate",
            "serving_size": "30g",
            "price": "₹2,400",
            "price_per_serving": "₹80",
            "verdict": "pass",
        },
        "basic_tests": {
            "protein_per_serving": {"claimed": "25g", "tested": "24g", "verdict": "pass"},
            "carbs_per_serving": {"claimed": "3g", "tested": "3.1g", "verdict": "pass"},
        },
        "contaminant_tests": {
            "aflatoxins": {"tested": "ND", "verdict": "pass"},
            "heavy metals": {
                "verdict": "fail",
                "note": "Lead above limit",
                "lead": {"tested": "0.4 ppm", "verdict": "fail"},
                "arsenic": {"tested": "0.01 ppm", "verdict": "pass"},
            },
        },
        "review": {
            "taste": {"rating": "8/10", "verdict": "pass"},
            "mixability": {"note": "Clumps slightly", "verdict": "not assigned"},
        },
        "debug_info": {"can_access_url": True},
    },
}

WHEY_BLEND_ROW = {
    "id": 2,
    "product_id": "p-2",
    "product_name": "Budget Blend",
    "product_category": "Whey Blend",
    "company": "Value Labs",
    "verdict": "fail",
    "price": 1800,
    "price_per_serving": 60,
    "image_status": "completed",
    "created_at": "2024-05-02T10:00:00+00:00",
    "results": {
        "basic_tests": {
            "protein_per_serving": {"claimed": "24g", "tested": "21.5g", "verdict": "fail"},
        },
        "contaminant_tests": {
            "Amino Spiking Test": {"verdict": "fail", "note": "Glycine detected"},
        },
        "review": {"taste": {"verdict": "fail"}},
    },
}

PLANT_ROW = {
    "id": 3,
    "product_id": "p-3",
    "product_name": "Pea Protein",
    "product_category": "Plant Protein",
    "company": "Green Co",
    "verdict": "not assigned",
    "price": None,
    "price_per_serving": 0,
    "image_status": "completed",
    "created_at": "2024-05-01T10:00:00+00:00",
    "results": {
        "basic_tests": {"protein_per_serving": {"tested": "not measured", "verdict": "pending"}},
    },
}


def make_product(row=None, **overrides):
    data = copy.deepcopy(row or {"id": 99, "product_id": "p-99"})
    data.update(overrides)
    return parse_report(data)


@pytest.fixture
def rows():
    return [copy.deepcopy(WHEY_ISOLATE_ROW), copy.deepcopy(WHEY_BLEND_ROW), copy.deepcopy(PLANT_ROW)]


@pytest.fixture
def products(rows):
    return [parse_report(row) for row in rows]
