"""Minimal read-only client for the Supabase REST catalog."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from .config import Settings
from .facets import category_from_slug, is_all_category

logger = logging.getLogger(__name__)

COMPLETED = "completed"
_SEARCH_UNSAFE = re.compile(r'[,()"*\\]')


@dataclass
class CatalogClient:
    """Thin wrapper around PostgREST queries on the reports table.

    Every query is limited to reports whose image pipeline completed and is
    ordered newest first.
    """

    settings: Settings
    session: Optional[requests.Session] = None

    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self.settings.anon_key,
            "Authorization": f"Bearer {self.settings.anon_key}",
            "Accept": "application/json",
        }

    def _request(self, params: Dict[str, str]) -> List[Dict[str, Any]]:
        endpoint = f"{self.settings.supabase_url}/rest/v1/{self.settings.table}"
        query = {
            "select": "*",
            "image_status": f"eq.{COMPLETED}",
            "order": "created_at.desc",
            **params,
        }
        http = self.session or requests
        response = http.get(endpoint, params=query, headers=self._headers(), timeout=self.settings.timeout)
        response.raise_for_status()
        rows = response.json()
        logger.info("Fetched %d rows from %s", len(rows), self.settings.table)
        return rows

    def fetch_reports(self, category: Optional[str] = None) -> List[Dict[str, Any]]:
        params: Dict[str, str] = {}
        if not is_all_category(category):
            params["product_category"] = f"ilike.{category_from_slug(category)}"
        return self._request(params)

    def search_reports(self, query: str) -> List[Dict[str, Any]]:
        term = _SEARCH_UNSAFE.sub(" ", query).strip()
        if not term:
            return []
        pattern = f"*{term}*"
        clauses = ",".join(
            f"{column}.ilike.{pattern}" for column in ("product_name", "company", "product_category")
        )
        return self._request({"or": f"({clauses})"})

    def get_report(self, product_id: str) -> Optional[Dict[str, Any]]:
        rows = self._request({"product_id": f"eq.{product_id}", "limit": "1"})
        return rows[0] if rows else None
