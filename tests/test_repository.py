"""Tests for the SQLite report cache."""

import pytest

from lab_catalog.repository import ReportRepository


@pytest.fixture
def repository(tmp_path, rows):
    repo = ReportRepository(tmp_path / "cache" / "reports.db")
    repo.upsert_reports(rows)
    return repo


def ids(products):
    return [product.product_id for product in products]


def test_list_reports_newest_first(repository):
    assert ids(repository.list_reports()) == ["p-1", "p-2", "p-3"]
    assert ids(repository.list_reports("all")) == ["p-1", "p-2", "p-3"]


def test_list_reports_by_category_is_case_insensitive(repository):
    assert ids(repository.list_reports("whey-isolate")) == ["p-1"]
    assert ids(repository.list_reports("PLANT PROTEIN")) == ["p-3"]
    assert repository.list_reports("creatine") == []


def test_only_completed_reports_are_listed(repository, rows):
    pending = dict(rows[0], product_id="p-9", image_status="pending")
    repository.upsert_reports([pending])

    assert "p-9" not in ids(repository.list_reports())
    assert repository.get_report("p-9") is not None


def test_upsert_replaces_existing_rows(repository, rows):
    updated = dict(rows[1], product_name="Budget Blend v2")
    repository.upsert_reports([updated])

    assert repository.count() == 3
    assert repository.get_report("p-2").product_name == "Budget Blend v2"


def test_rows_without_product_id_are_not_cached(repository):
    assert repository.upsert_reports([{"id": 50, "product_name": "Ghost"}]) == 0
    assert repository.count() == 3


def test_search_matches_name_company_and_category(repository):
    assert ids(repository.search("gold")) == ["p-1"]
    assert ids(repository.search("value labs")) == ["p-2"]
    assert ids(repository.search("whey")) == ["p-1", "p-2"]
    assert repository.search("   ") == []


def test_get_report_round_trips_nested_results(repository):
    product = repository.get_report("p-1")

    assert product.results.contaminant_tests["heavy metals"].children["lead"].verdict == "fail"
    assert repository.get_report("missing") is None
