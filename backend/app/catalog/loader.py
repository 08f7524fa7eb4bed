"""Catalog loader with module-level cache."""
from __future__ import annotations

import logging
from pathlib import Path

import yaml

from backend.app.catalog.models import Catalog
from shared.config import CATALOG_DIR

logger = logging.getLogger(__name__)

_CATALOG_CACHE: dict[str, Catalog] = {}

_SECTIONS = ("factions", "planets", "tones")


class CatalogError(Exception):
    """Raised when catalog files are missing or invalid."""


def _read_yaml(path: Path) -> object:
    return yaml.safe_load(path.read_text(encoding="utf-8"))


def _load_section(dir_path: Path, section: str) -> list:
    """Load ``<section>.yaml`` (or .yml) and return its top-level list."""
    for ext in (".yaml", ".yml"):
        fp = dir_path / f"{section}{ext}"
        if not fp.exists():
            continue
        data = _read_yaml(fp)
        if isinstance(data, dict):
            data = data.get(section)
        if not isinstance(data, list):
            raise CatalogError(f"{fp}: expected a list under '{section}'")
        return data
    raise CatalogError(f"Catalog section '{section}' not found in {dir_path}")


def load_catalog(catalog_dir: str | Path | None = None) -> Catalog:
    """Load and validate the catalog; cached per directory."""
    dir_path = Path(catalog_dir or CATALOG_DIR).resolve()
    cache_key = str(dir_path)
    cached = _CATALOG_CACHE.get(cache_key)
    if cached is not None:
        return cached

    raw = {section: _load_section(dir_path, section) for section in _SECTIONS}
    try:
        catalog = Catalog.model_validate(raw)
    except ValueError as exc:
        raise CatalogError(f"Invalid catalog in {dir_path}: {exc}") from exc

    logger.info(
        "Loaded catalog from %s (%d factions, %d planets, %d tones)",
        dir_path, len(catalog.factions), len(catalog.planets), len(catalog.tones),
    )
    _CATALOG_CACHE[cache_key] = catalog
    return catalog


def clear_catalog_cache() -> None:
    _CATALOG_CACHE.clear()
