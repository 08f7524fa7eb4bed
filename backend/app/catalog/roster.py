"""Roster formatting: Warhost selections to human-readable lines."""
from __future__ import annotations

from typing import Sequence

from backend.app.catalog.models import Catalog
from backend.app.catalog.options import format_faction_choice
from backend.app.constants import ROSTER_DEFAULT_NAME, ROSTER_HEADER, ROSTER_UNASSIGNED
from backend.app.models.scenario import Warhost


def warhost_labels(warhost: Warhost, catalog: Catalog | None = None) -> list[str]:
    """Resolved player labels in slot order; unassigned/unknown players are skipped."""
    labels = []
    for player in warhost.players:
        label = format_faction_choice(player.faction_key, player.sub_key, catalog=catalog)
        if label:
            labels.append(label)
    return labels


def roster_lines(warhosts: Sequence[Warhost], catalog: Catalog | None = None) -> list[str]:
    lines = []
    for wh in warhosts:
        entries = warhost_labels(wh, catalog)
        title = wh.name or ROSTER_DEFAULT_NAME
        lines.append(f"{title}: {'; '.join(entries) if entries else ROSTER_UNASSIGNED}")
    return lines


def build_roster_text(warhosts: Sequence[Warhost], catalog: Catalog | None = None) -> str:
    """One line per Warhost, in input order."""
    return "\n".join(roster_lines(warhosts, catalog))


def build_roster_block(warhosts: Sequence[Warhost], catalog: Catalog | None = None) -> str:
    """Bulleted ``Forces Roster:`` block, or '' when there are no Warhosts."""
    lines = roster_lines(warhosts, catalog)
    if not lines:
        return ""
    bullets = "\n".join(f"- {line}" for line in lines)
    return f"{ROSTER_HEADER}\n{bullets}\n"


def derive_faction_labels(
    warhosts: Sequence[Warhost], catalog: Catalog | None = None,
) -> tuple[str, str]:
    """(primary, opposition) labels: first Warhost vs. everyone else."""
    if not warhosts:
        return "", ""
    primary = ", ".join(warhost_labels(warhosts[0], catalog))
    others = [label for wh in warhosts[1:] for label in warhost_labels(wh, catalog)]
    return primary, ", ".join(others)
