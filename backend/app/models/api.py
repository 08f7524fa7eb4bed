"""Request/response envelopes for the HTTP layer."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from backend.app.models.campaign import CampaignMode, EpisodeMeta, coerce_mode
from backend.app.models.scenario import GenerationResult, ScenarioInput, coerce_text

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class GenerateResponse(GenerationResult):
    """``{narrative, aiUsed, aiError?}``; routes exclude None so aiError is omitted on success."""


class CampaignGenerateResponse(GenerationResult):
    scenario_id: str


class CreateCampaignRequest(BaseModel):
    model_config = _CAMEL

    name: str = "Untitled Campaign"
    tone: str | None = None
    mode: CampaignMode = "planetary"
    planet_name: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, v: Any) -> str:
        return coerce_text(v).strip() or "Untitled Campaign"

    @field_validator("tone", "planet_name", mode="before")
    @classmethod
    def _coerce_optional(cls, v: Any) -> str | None:
        return coerce_text(v).strip() or None

    @field_validator("mode", mode="before")
    @classmethod
    def _coerce_mode(cls, v: Any) -> str:
        return coerce_mode(v) or "planetary"


class RecordOutcomeRequest(BaseModel):
    """Post-battle outcome appended to a campaign as a new episode."""
    model_config = _CAMEL

    scenario_id: str = ""
    planet_name: str | None = None
    factions: list[str] = Field(default_factory=list)
    outcome_summary: str | None = None
    rp_delta_by_faction: dict[str, int] | None = None
    cgp_delta: int | None = None

    def to_episode(self) -> EpisodeMeta:
        return EpisodeMeta.model_validate(self.model_dump())


class CampaignBattleRequest(ScenarioInput):
    """Scenario fields for a battle in a stored campaign, plus a next-planet override."""

    requested_planet: str | None = None

    @field_validator("requested_planet", mode="before")
    @classmethod
    def _coerce_requested(cls, v: Any) -> str | None:
        return coerce_text(v).strip() or None
