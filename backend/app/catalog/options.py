"""Catalog lookups: dropdown options, faction labels and the planet picker.

Every lookup is total: unknown keys resolve to empty results, never errors.
"""
from __future__ import annotations

from backend.app.catalog.loader import load_catalog
from backend.app.catalog.models import Catalog, PlanetDef

Option = dict[str, str]

# Agents operate under Imperial authority when judging planet plausibility
_ALLEGIANCE_ALIASES: dict[str, str] = {"Agents of the Imperium": "Imperium"}


def _catalog(catalog: Catalog | None) -> Catalog:
    return catalog if catalog is not None else load_catalog()


def format_faction_choice(
    faction_key: str | None,
    sub_key: str | None = None,
    catalog: Catalog | None = None,
) -> str:
    """Display label for a faction selection.

    ``"<Faction>: <Subfaction>"`` when both keys resolve, ``"<Faction>"`` when
    only the faction does, ``""`` otherwise.
    """
    faction = _catalog(catalog).faction(faction_key)
    if faction is None:
        return ""
    sub = faction.subfaction(sub_key)
    if sub is not None:
        return f"{faction.name}: {sub.name}"
    return faction.name


def faction_options(catalog: Catalog | None = None) -> list[Option]:
    return [{"value": f.key, "label": f.name} for f in _catalog(catalog).factions]


def subfaction_options(faction_key: str | None, catalog: Catalog | None = None) -> list[Option]:
    faction = _catalog(catalog).faction(faction_key)
    if faction is None:
        return []
    return [{"value": s.key, "label": s.name} for s in faction.subfactions]


def segmentum_options(catalog: Catalog | None = None) -> list[Option]:
    seen = dict.fromkeys(p.segmentum for p in _catalog(catalog).planets)
    return [{"value": s, "label": s} for s in seen]


def planet_options(segmentum: str | None = None, catalog: Catalog | None = None) -> list[Option]:
    planets = _catalog(catalog).planets
    if segmentum:
        planets = [p for p in planets if p.segmentum == segmentum]
    return [{"value": p.key, "label": p.name} for p in planets]


def tone_options(catalog: Catalog | None = None) -> list[Option]:
    return [{"value": t.key, "label": t.label} for t in _catalog(catalog).tones]


def tone_label(key: str | None, catalog: Catalog | None = None) -> str:
    """Label for a tone key; unknown keys pass through unchanged."""
    for tone in _catalog(catalog).tones:
        if tone.key == key:
            return tone.label
    return key or ""


def resolve_planet_name(value: str | None, catalog: Catalog | None = None) -> str:
    """Planet display name for a key; free-text names pass through."""
    text = (value or "").strip()
    for planet in _catalog(catalog).planets:
        if planet.key == text:
            return planet.name
    return text


def _hash_to_index(seed: str, mod: int) -> int:
    if not mod:
        return 0
    h = 0
    for ch in seed:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    return h % mod


def pick_planet(
    segmentum: str | None = None,
    biome: str | None = None,
    faction_key: str | None = None,
    seed: str | None = None,
    catalog: Catalog | None = None,
) -> PlanetDef:
    """Pick a plausible planet for the given filters, deterministic per seed.

    Filters narrow in order (segmentum, biome, faction allegiance); the
    longest prefix of filters that still matches something wins.
    """
    cat = _catalog(catalog)
    allegiance = None
    faction = cat.faction(faction_key)
    if faction is not None:
        allegiance = _ALLEGIANCE_ALIASES.get(faction.allegiance, faction.allegiance)

    filters = []
    if segmentum:
        filters.append(lambda p: p.segmentum == segmentum)
    if biome:
        filters.append(lambda p: biome in p.biomes)
    if allegiance:
        filters.append(lambda p: allegiance in p.primary_allegiances)

    candidates = list(cat.planets)
    for i in range(len(filters), 0, -1):
        subset = [p for p in cat.planets if all(fn(p) for fn in filters[:i])]
        if subset:
            candidates = subset
            break

    key = seed if seed is not None else f"{segmentum or ''}|{biome or ''}|{allegiance or ''}"
    return candidates[_hash_to_index(key, len(candidates))]
