"""Scenario input schema and generation result.

The input schema is deliberately lenient: every field has an explicit default
and ``mode="before"`` validators coerce wrong-typed values instead of raising,
so any JSON object yields a usable ``ScenarioInput``.
"""
from __future__ import annotations

import math
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from backend.app.constants import BATTLE_FORMATS, DEFAULTS

BattleFormat = Literal["1v1", "2v2", "3v3", "4v4", "ffa", "2v2v2v2"]

MAX_PLAYERS = 16

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

# Spellings accepted for a format beyond its canonical token
_FORMAT_ALIASES: dict[str, str] = {
    "free-for-all": "ffa",
    "free for all": "ffa",
}


def coerce_text(value: Any) -> str:
    """Strings pass through; anything else (None, numbers, objects) becomes ''."""
    return value if isinstance(value, str) else ""


def coerce_battle_format(value: Any) -> BattleFormat:
    """Map loose format strings onto the enumerated formats (default 1v1)."""
    if not isinstance(value, str):
        return DEFAULTS["battle_format"]  # type: ignore[return-value]
    token = value.strip().lower()
    token = _FORMAT_ALIASES.get(token, token)
    if token in BATTLE_FORMATS:
        return token  # type: ignore[return-value]
    return DEFAULTS["battle_format"]  # type: ignore[return-value]


def coerce_int(value: Any) -> int | None:
    """Finite numbers truncate to int; bools, NaN, infinities and non-numbers become None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return int(value)


def _only_mappings(value: Any) -> list:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, (dict, BaseModel))]


class WarhostPlayer(BaseModel):
    """One player slot: faction key plus optional subfaction key."""
    model_config = _CAMEL

    faction_key: str = ""
    sub_key: str | None = None

    @field_validator("faction_key", mode="before")
    @classmethod
    def _coerce_faction(cls, v: Any) -> str:
        return coerce_text(v).strip()

    @field_validator("sub_key", mode="before")
    @classmethod
    def _coerce_sub(cls, v: Any) -> str | None:
        text = coerce_text(v).strip()
        return text or None


class Warhost(BaseModel):
    """A named team grouping one or more players."""
    model_config = _CAMEL

    name: str = ""
    players: list[WarhostPlayer] = Field(default_factory=list)

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, v: Any) -> str:
        return coerce_text(v).strip()

    @field_validator("players", mode="before")
    @classmethod
    def _coerce_players(cls, v: Any) -> list:
        return _only_mappings(v)


class ScenarioInput(BaseModel):
    """Structured battle inputs for one generation request."""
    model_config = _CAMEL

    campaign_name: str = ""
    battle_format: BattleFormat = "1v1"
    player_faction: str = ""
    other_factions: str = ""
    planet: str = ""
    tone: str = ""
    stakes: str = ""
    warhosts: list[Warhost] = Field(default_factory=list)
    players_count: int | None = None

    @field_validator(
        "campaign_name", "player_faction", "other_factions", "planet", "tone", "stakes",
        mode="before",
    )
    @classmethod
    def _coerce_strings(cls, v: Any) -> str:
        return coerce_text(v)

    @field_validator("battle_format", mode="before")
    @classmethod
    def _coerce_format(cls, v: Any) -> str:
        return coerce_battle_format(v)

    @field_validator("warhosts", mode="before")
    @classmethod
    def _coerce_warhosts(cls, v: Any) -> list:
        return _only_mappings(v)

    @field_validator("players_count", mode="before")
    @classmethod
    def _coerce_players_count(cls, v: Any) -> int | None:
        count = coerce_int(v)
        if count is None or count <= 0:
            return None
        return min(count, MAX_PLAYERS)

    def counted_players(self) -> int | None:
        """Explicit players_count, else the number of player slots across Warhosts."""
        if self.players_count:
            return self.players_count
        total = sum(len(w.players) for w in self.warhosts)
        return total or None


class GenerationResult(BaseModel):
    """Narrative plus whether the enhancement pass produced it."""
    model_config = _CAMEL

    narrative: str
    ai_used: bool = False
    ai_error: str | None = None
