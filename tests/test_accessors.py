"""Tests for record accessors."""

import pytest

from lab_catalog.accessors import (
    aggregate_verdict,
    basic_tests_verdict,
    contaminant_tests_verdict,
    contaminant_verdict,
    nutrient_value,
    price_per_serving_value,
    price_value,
    review_verdict,
    subjective_verdict,
)

from conftest import WHEY_ISOLATE_ROW, make_product


def test_nutrient_value_parses_leading_number(products):
    isolate, blend, plant = products

    assert nutrient_value(isolate, "protein") == 24.0
    assert nutrient_value(isolate, "carbs") == 3.1
    assert nutrient_value(blend, "protein") == 21.5


def test_nutrient_value_absent_or_unparseable_is_none(products):
    isolate, _, plant = products

    assert nutrient_value(isolate, "creatine") is None
    assert nutrient_value(plant, "protein") is None
    assert nutrient_value(make_product(), "protein") is None


def test_nutrient_value_keeps_a_tested_zero():
    product = make_product(results={"basic_tests": {"fats_per_serving": {"tested": "0g", "verdict": "pass"}}})
    assert nutrient_value(product, "fats") == 0.0


def test_price_prefers_nested_product_info(products):
    isolate, blend, plant = products

    assert price_value(isolate) == 2400.0
    assert price_value(blend) == 1800.0
    assert price_value(plant) is None


def test_price_per_serving_falls_back_to_positive_flat_field(products):
    isolate, blend, plant = products

    assert price_per_serving_value(isolate) == 80.0
    assert price_per_serving_value(blend) == 60.0
    assert price_per_serving_value(plant) is None


def test_unparseable_nested_price_falls_back_to_flat_field():
    product = make_product(
        price_per_serving=45,
        results={"product_info": {"price_per_serving": "not listed"}},
    )
    assert price_per_serving_value(product) == 45.0


def test_price_per_serving_strips_currency_and_separators():
    product = make_product(results={"product_info": {"price_per_serving": "Rs 1,250.50 / scoop"}})
    assert price_per_serving_value(product) == 1250.5


def test_contaminant_exact_key(products):
    assert contaminant_verdict(products[0], "aflatoxins") == "pass"


def test_contaminant_substring_scan_is_case_insensitive(products):
    _, blend, _ = products
    assert contaminant_verdict(blend, "amino spiking") == "fail"


def test_contaminant_group_verdict(products):
    assert contaminant_verdict(products[0], "heavy metals") == "fail"


def test_contaminant_scan_takes_first_entry_with_a_verdict():
    product = make_product(
        results={
            "contaminant_tests": {
                "pesticides (screen)": {"note": "not run"},
                "pesticides panel": {"verdict": "fail"},
                "pesticides retest": {"verdict": "pass"},
            }
        }
    )
    assert contaminant_verdict(product, "Pesticides") == "fail"


def test_contaminant_missing(products):
    assert contaminant_verdict(products[0], "melamine spiking") is None
    assert contaminant_verdict(products[2], "aflatoxins") is None


def test_subjective_verdict(products):
    isolate, blend, plant = products

    assert subjective_verdict(isolate, "taste") == "pass"
    assert subjective_verdict(isolate, "mixability") == "not_assigned"
    assert subjective_verdict(isolate, "packaging") is None
    assert subjective_verdict(blend, "taste") == "fail"
    assert subjective_verdict(plant, "taste") is None


@pytest.mark.parametrize(
    "verdicts, expected",
    [
        (["pass", "fail", "pass"], "fail"),
        (["pass", "pass"], "pass"),
        (["not_assigned"], "mixed"),
        (["pending", "pass"], "pass"),
        ([None, ""], None),
        ([], None),
    ],
)
def test_aggregate_verdict_dominance(verdicts, expected):
    assert aggregate_verdict(verdicts) == expected


def test_section_aggregates(products):
    isolate, blend, plant = products

    assert basic_tests_verdict(isolate) == "pass"
    assert basic_tests_verdict(blend) == "fail"
    assert basic_tests_verdict(plant) == "mixed"
    assert contaminant_tests_verdict(isolate) == "fail"
    assert review_verdict(isolate) == "pass"
    assert review_verdict(plant) is None
    assert contaminant_tests_verdict(plant) is None


def test_aggregate_only_reads_immediate_children():
    row = dict(WHEY_ISOLATE_ROW)
    row["results"] = {
        "contaminant_tests": {
            "heavy metals": {"verdict": "pass", "lead": {"verdict": "fail"}},
        }
    }
    assert contaminant_tests_verdict(make_product(row)) == "pass"
