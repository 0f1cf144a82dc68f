"""SQLite cache of catalog report rows."""
from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .config import DEFAULT_DB_PATH
from .facets import matches_category
from .models import Product
from .parsers import parse_report
from .utils import ensure_directory, now_utc

logger = logging.getLogger(__name__)

DB_PATH = Path(DEFAULT_DB_PATH)


class ReportRepository:
    """Local copy of the reports table, queried the way the remote one is."""

    def __init__(self, db_path: Path | str = DB_PATH) -> None:
        self.db_path = Path(db_path)
        ensure_directory(self.db_path)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS reports (
                    product_id TEXT PRIMARY KEY,
                    report_id TEXT,
                    product_name TEXT,
                    product_category TEXT,
                    company TEXT,
                    image_status TEXT,
                    created_at TEXT,
                    raw_json TEXT NOT NULL,
                    synced_at TEXT NOT NULL
                );

                CREATE INDEX IF NOT EXISTS idx_reports_category
                    ON reports (product_category);
                """
            )

    def upsert_reports(self, rows: Iterable[Dict[str, Any]]) -> int:
        synced_at = now_utc().isoformat()
        payload = []
        for row in rows:
            if row.get("product_id") is None:
                logger.warning("Not caching report without product_id: %r", row.get("id"))
                continue
            payload.append(
                {
                    "product_id": str(row["product_id"]),
                    "report_id": None if row.get("id") is None else str(row["id"]),
                    "product_name": row.get("product_name"),
                    "product_category": row.get("product_category"),
                    "company": row.get("company"),
                    "image_status": row.get("image_status"),
                    "created_at": row.get("created_at"),
                    "raw_json": json.dumps(row, ensure_ascii=False),
                    "synced_at": synced_at,
                }
            )
        with self._connect() as conn:
            conn.executemany(
                """
                INSERT INTO reports (
                    product_id, report_id, product_name, product_category, company,
                    image_status, created_at, raw_json, synced_at
                ) VALUES (:product_id, :report_id, :product_name, :product_category, :company,
                          :image_status, :created_at, :raw_json, :synced_at)
                ON CONFLICT(product_id) DO UPDATE SET
                    report_id = excluded.report_id,
                    product_name = excluded.product_name,
                    product_category = excluded.product_category,
                    company = excluded.company,
                    image_status = excluded.image_status,
                    created_at = excluded.created_at,
                    raw_json = excluded.raw_json,
                    synced_at = excluded.synced_at;
                """,
                payload,
            )
        logger.info("Cached %d reports in %s", len(payload), self.db_path)
        return len(payload)

    def list_reports(self, category: Optional[str] = None) -> List[Product]:
        """Completed reports, newest first, optionally restricted to ``category``."""

        with self._connect() as conn:
            rows = conn.execute(
                "SELECT product_category, raw_json FROM reports "
                "WHERE image_status = 'completed' ORDER BY created_at DESC"
            ).fetchall()
        return [
            parse_report(json.loads(row["raw_json"]))
            for row in rows
            if matches_category(row["product_category"], category)
        ]

    def search(self, term: str) -> List[Product]:
        """Completed reports whose name, company or category contains ``term``."""

        term = term.strip().lower()
        if not term:
            return []
        like = f"%{term}%"
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT raw_json FROM reports
                WHERE image_status = 'completed'
                  AND (lower(product_name) LIKE ? OR lower(company) LIKE ? OR lower(product_category) LIKE ?)
                ORDER BY created_at DESC
                """,
                (like, like, like),
            ).fetchall()
        return [parse_report(json.loads(row["raw_json"])) for row in rows]

    def get_report(self, product_id: str) -> Optional[Product]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT raw_json FROM reports WHERE product_id = ?", (str(product_id),)
            ).fetchone()
        if not row:
            return None
        return parse_report(json.loads(row["raw_json"]))

    def count(self) -> int:
        with self._connect() as conn:
            return conn.execute("SELECT COUNT(*) FROM reports").fetchone()[0]
