"""Shared utility helpers for Lab Catalog."""
from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path


def ensure_directory(path: Path) -> None:
    """Create parent directories for ``path`` if they do not exist."""

    path.parent.mkdir(parents=True, exist_ok=True)


def now_utc() -> datetime:
    """Return the current UTC datetime."""

    return datetime.now(timezone.utc)


def titleize(key: str) -> str:
    """``"price_per_serving"`` -> ``"Price Per Serving"``."""

    return " ".join(word.capitalize() for word in key.replace("_", " ").split())
