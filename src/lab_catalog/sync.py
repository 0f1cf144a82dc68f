"""Operations for pulling catalog reports into the local cache."""
from __future__ import annotations

import logging
from typing import List, Optional

from .catalog_client import CatalogClient
from .models import Product
from .parsers import parse_reports
from .repository import ReportRepository

logger = logging.getLogger(__name__)


class CatalogSync:
    def __init__(self, client: CatalogClient, repository: ReportRepository) -> None:
        self.client = client
        self.repository = repository

    def sync(self, category: Optional[str] = None) -> List[Product]:
        rows = self.client.fetch_reports(category)
        self.repository.upsert_reports(rows)
        products = parse_reports(rows)
        logger.info("Synced %d reports for category %s", len(products), category or "all")
        return products

    def get_product(self, product_id: str, refresh: bool = False) -> Product | None:
        product_id = product_id.strip()
        product = self.repository.get_report(product_id)
        if product and not refresh:
            return product
        row = self.client.get_report(product_id)
        if row is None:
            logger.warning("Report %s not found upstream", product_id)
            return product
        self.repository.upsert_reports([row])
        return self.repository.get_report(product_id)
