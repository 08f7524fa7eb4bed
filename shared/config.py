"""Shared configuration constants used by the backend and the CLI."""
from __future__ import annotations

import os
from pathlib import Path


def _env_first(*names: str, default: str = "") -> str:
    """Return the first non-empty env value among ``names``."""
    for name in names:
        val = os.environ.get(name, "").strip()
        if val:
            return val
    return default


# Project root: resolve relative to this file's location
_PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Static reference data (factions, planets, tones)
CATALOG_DIR = os.environ.get("WARHOST_CATALOG_DIR", str(_PROJECT_ROOT / "data" / "static" / "catalog"))
