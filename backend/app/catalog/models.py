"""Pydantic models for the option catalogs (factions, planets, tones)."""
from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SubfactionDef(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    key: str
    name: str


class FactionDef(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    key: str
    name: str
    allegiance: str
    subfactions: List[SubfactionDef] = Field(default_factory=list)

    def subfaction(self, sub_key: str | None) -> SubfactionDef | None:
        if not sub_key:
            return None
        for sub in self.subfactions:
            if sub.key == sub_key:
                return sub
        return None


class PlanetDef(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    key: str
    name: str
    segmentum: str
    biomes: List[str] = Field(default_factory=list)
    primary_allegiances: List[str] = Field(default_factory=list)
    keywords: List[str] = Field(default_factory=list)
    notes: str = ""


class ToneDef(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    key: str
    label: str
    description: str = ""
    best_for: List[str] = Field(default_factory=list)


class Catalog(BaseModel):
    """All static reference data, validated together."""
    model_config = ConfigDict(frozen=True)

    factions: List[FactionDef] = Field(default_factory=list)
    planets: List[PlanetDef] = Field(default_factory=list)
    tones: List[ToneDef] = Field(default_factory=list)

    @field_validator("factions", "planets", "tones")
    @classmethod
    def _unique_keys(cls, v: list) -> list:
        seen: set[str] = set()
        for item in v:
            if item.key in seen:
                raise ValueError(f"duplicate catalog key: {item.key}")
            seen.add(item.key)
        return v

    def faction(self, key: str | None) -> FactionDef | None:
        if not key:
            return None
        for f in self.factions:
            if f.key == key:
                return f
        return None
