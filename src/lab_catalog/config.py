"""Application configuration helpers."""
from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

CONFIG_PATH = Path(os.environ.get("LAB_CATALOG_CONFIG", "config/catalog.json"))
DEFAULT_DB_PATH = "data/lab_catalog.db"


@dataclass
class Settings:
    """Runtime configuration loaded from a JSON file or environment variables."""

    supabase_url: str
    anon_key: str
    table: str = "reports"
    db_path: str = DEFAULT_DB_PATH
    timeout: int = 20

    @classmethod
    def load(cls, path: Path | None = None) -> "Settings":
        """Load settings from ``path`` or the default config file.

        Raises
        ------
        ValueError
            If the Supabase URL or anon key is missing from both the
            configuration file and the environment.
        """

        config_path = path or CONFIG_PATH
        if config_path.exists():
            data = json.loads(config_path.read_text())
        else:
            data = cls._load_from_env()

        missing = {k for k in ("supabase_url", "anon_key") if not data.get(k)}
        if missing:
            raise ValueError(f"Missing configuration keys: {', '.join(sorted(missing))}")

        return cls(
            supabase_url=data["supabase_url"].rstrip("/"),
            anon_key=data["anon_key"],
            table=data.get("table", "reports"),
            db_path=data.get("db_path", DEFAULT_DB_PATH),
            timeout=int(data.get("timeout", 20)),
        )

    @staticmethod
    def _load_from_env() -> Dict[str, Any]:
        env_mapping = {
            "supabase_url": os.environ.get("SUPABASE_URL") or os.environ.get("NEXT_PUBLIC_SUPABASE_URL"),
            "anon_key": os.environ.get("ANON_KEY") or os.environ.get("NEXT_PUBLIC_ANON_KEY"),
            "table": os.environ.get("LAB_CATALOG_TABLE"),
            "db_path": os.environ.get("LAB_CATALOG_DB"),
            "timeout": os.environ.get("LAB_CATALOG_TIMEOUT"),
        }
        return {k: v for k, v in env_mapping.items() if v}
