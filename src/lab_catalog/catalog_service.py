"""High-level service that browses, filters and summarises cached reports."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

import pandas as pd

from .accessors import (
    contaminant_tests_verdict,
    nutrient_value,
    price_per_serving_value,
    price_value,
    review_verdict,
)
from .facets import FacetConfig, discover_contaminants, resolve_facets
from .filters import FilterState, apply_filters, count_active_filters
from .models import Product
from .repository import ReportRepository
from .sorting import SortState, apply_sort
from .utils import ensure_directory

logger = logging.getLogger(__name__)


@dataclass
class BrowseResult:
    category: str
    facets: FacetConfig
    products: List[Product]
    total: int
    active_filters: int = 0
    contaminants: List[str] = field(default_factory=list)

    @property
    def shown(self) -> int:
        return len(self.products)


@dataclass
class CatalogService:
    repository: ReportRepository

    def browse(
        self,
        category: str,
        filters: Optional[FilterState] = None,
        sort: Optional[SortState] = None,
    ) -> BrowseResult:
        products = self.repository.list_reports(category)
        return self.narrow(category, products, filters, sort)

    def narrow(
        self,
        category: str,
        products: Sequence[Product],
        filters: Optional[FilterState] = None,
        sort: Optional[SortState] = None,
    ) -> BrowseResult:
        """Run the filter and sort pipeline over an already loaded list."""

        facets = resolve_facets(category)
        contaminants = list(facets.contaminants)
        if facets.contaminants_from_data:
            contaminants = discover_contaminants(products)
        selected = apply_sort(apply_filters(products, filters), sort)
        logger.debug("Category %s: %d of %d products shown", category, len(selected), len(products))
        return BrowseResult(
            category=category,
            facets=facets,
            products=selected,
            total=len(products),
            active_filters=count_active_filters(filters),
            contaminants=contaminants,
        )

    def search(self, query: str) -> List[Product]:
        return self.repository.search(query)

    def get_product(self, product_id: str) -> Optional[Product]:
        return self.repository.get_report(product_id)

    def summary_frame(self, products: Sequence[Product]) -> pd.DataFrame:
        data = [
            {
                "product_id": product.product_id,
                "product_name": product.product_name,
                "company": product.company,
                "category": product.category,
                "verdict": product.verdict,
                "price": price_value(product),
                "price_per_serving": price_per_serving_value(product),
                "protein_per_serving": nutrient_value(product, "protein"),
                "creatine_per_serving": nutrient_value(product, "creatine"),
                "contaminants": contaminant_tests_verdict(product),
                "review": review_verdict(product),
            }
            for product in products
        ]
        return pd.DataFrame(data, columns=SUMMARY_COLUMNS)

    def export_to_csv(self, products: Sequence[Product], destination: Path | str) -> None:
        destination = Path(destination)
        ensure_directory(destination)
        self.summary_frame(products).to_csv(destination, index=False)
        logger.info("Exported %d products to %s", len(products), destination)


SUMMARY_COLUMNS = [
    "product_id",
    "product_name",
    "company",
    "category",
    "verdict",
    "price",
    "price_per_serving",
    "protein_per_serving",
    "creatine_per_serving",
    "contaminants",
    "review",
]
