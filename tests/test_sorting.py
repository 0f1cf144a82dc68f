"""Tests for the sort comparator."""

import pytest

from lab_catalog.sorting import SORT_FIELDS, SortState, apply_sort

from conftest import make_product


def priced(product_id, price):
    return make_product(product_id=product_id, price=price)


def ids(products):
    return [product.product_id for product in products]


def test_no_sort_preserves_order(products):
    result = apply_sort(products)
    assert ids(result) == ["p-1", "p-2", "p-3"]
    assert result is not products


def test_flat_price_descending():
    products = [priced("a", 100), priced("b", 200)]
    assert ids(apply_sort(products, SortState("price", "desc"))) == ["b", "a"]


def test_nulls_last_ascending_and_first_descending():
    products = [priced("n1", None), priced("five", 5), priced("n2", None)]

    assert ids(apply_sort(products, SortState("price", "asc"))) == ["five", "n1", "n2"]
    assert ids(apply_sort(products, SortState("price", "desc"))) == ["n1", "n2", "five"]


def test_sort_is_stable_for_equal_keys():
    products = [priced("a", 10), priced("b", 5), priced("c", 10), priced("d", 5)]

    assert ids(apply_sort(products, SortState("price", "asc"))) == ["b", "d", "a", "c"]
    assert ids(apply_sort(products, SortState("price", "desc"))) == ["a", "c", "b", "d"]


def test_nested_price_takes_precedence(products):
    # p-1 has flat 2500 but nested ₹2,400; p-2 only flat 1800.
    result = apply_sort(products, SortState("price", "asc"))
    assert ids(result) == ["p-2", "p-1", "p-3"]


def test_price_per_serving_ignores_non_positive_flat_field(products):
    result = apply_sort(products, SortState("price_per_serving", "desc"))
    assert ids(result) == ["p-3", "p-1", "p-2"]


def test_sort_by_nutrient(products):
    result = apply_sort(products, SortState("protein_per_serving", "asc"))
    assert ids(result) == ["p-2", "p-1", "p-3"]


def test_sort_empty_list():
    assert apply_sort([], SortState("price")) == []


def test_input_is_not_mutated():
    products = [priced("a", 3), priced("b", 1)]
    apply_sort(products, SortState("price", "asc"))
    assert ids(products) == ["a", "b"]


def test_sort_fields():
    assert set(SORT_FIELDS) == {
        "price",
        "price_per_serving",
        "protein_per_serving",
        "carbs_per_serving",
        "fats_per_serving",
        "creatine_per_serving",
    }


def test_sort_state_validation():
    with pytest.raises(ValueError):
        SortState("rating")
    with pytest.raises(ValueError):
        SortState("price", "up")


def test_sort_state_parse():
    assert SortState.parse("price") == SortState("price", "desc")
    assert SortState.parse("protein_per_serving:ASC") == SortState("protein_per_serving", "asc")
