"""Static option catalogs and roster formatting."""
from .loader import CatalogError, load_catalog
from .options import format_faction_choice, pick_planet
from .roster import build_roster_block, build_roster_text, derive_faction_labels

__all__ = [
    "CatalogError",
    "build_roster_block",
    "build_roster_text",
    "derive_faction_labels",
    "format_faction_choice",
    "load_catalog",
    "pick_planet",
]
