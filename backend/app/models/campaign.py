"""Campaign continuity DTOs.

``CampaignContext`` is rebuilt by the caller from campaign/outcome storage
before each generation and is read-only to the core (frozen models).
``LegacyCampaignContext`` is the reduced view handed to the enhancement prompt.
"""
from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from backend.app.models.scenario import ScenarioInput, coerce_int, coerce_text

CampaignMode = Literal["planetary", "interplanetary"]

# Older clients call fixed-planet campaigns "sequential-claim"
_MODE_ALIASES: dict[str, str] = {
    "planetary": "planetary",
    "sequential-claim": "planetary",
    "interplanetary": "interplanetary",
}


def coerce_mode(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    return _MODE_ALIASES.get(value.strip().lower())


def _optional_text(value: Any) -> str | None:
    text = coerce_text(value).strip()
    return text or None


class EpisodeMeta(BaseModel):
    """One finished battle in a campaign. Append-only history."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore", frozen=True)

    scenario_id: str = ""
    planet_name: str | None = None
    factions: tuple[str, ...] = ()
    outcome_summary: str | None = None
    rp_delta_by_faction: dict[str, int] | None = None
    cgp_delta: int | None = None

    @field_validator("scenario_id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> str:
        return coerce_text(v)

    @field_validator("planet_name", "outcome_summary", mode="before")
    @classmethod
    def _coerce_optional(cls, v: Any) -> str | None:
        return _optional_text(v)

    @field_validator("factions", mode="before")
    @classmethod
    def _coerce_factions(cls, v: Any) -> tuple[str, ...]:
        if not isinstance(v, (list, tuple)):
            return ()
        return tuple(s.strip() for s in v if isinstance(s, str) and s.strip())

    @field_validator("rp_delta_by_faction", mode="before")
    @classmethod
    def _coerce_rp(cls, v: Any) -> dict[str, int] | None:
        if not isinstance(v, dict):
            return None
        deltas = {str(k): coerce_int(n) for k, n in v.items()}
        return {k: n for k, n in deltas.items() if n is not None} or None

    @field_validator("cgp_delta", mode="before")
    @classmethod
    def _coerce_cgp(cls, v: Any) -> int | None:
        return coerce_int(v)


class CampaignContext(BaseModel):
    """Campaign state needed to compose continuity for the next battle."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore", frozen=True)

    id: str = ""
    name: str = ""
    tone: str | None = None
    mode: CampaignMode | None = None
    planet_name: str | None = None
    previous_episodes: tuple[EpisodeMeta, ...] = ()

    @field_validator("id", "name", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str:
        return coerce_text(v).strip()

    @field_validator("tone", "planet_name", mode="before")
    @classmethod
    def _coerce_optional(cls, v: Any) -> str | None:
        return _optional_text(v)

    @field_validator("mode", mode="before")
    @classmethod
    def _coerce_mode(cls, v: Any) -> str | None:
        return coerce_mode(v)

    @field_validator("previous_episodes", mode="before")
    @classmethod
    def _coerce_episodes(cls, v: Any) -> tuple:
        if not isinstance(v, (list, tuple)):
            return ()
        return tuple(e for e in v if isinstance(e, (dict, EpisodeMeta)))


class LegacyOutcome(BaseModel):
    """Prior outcome reduced to its notes. Winners are not tracked here."""
    model_config = ConfigDict(frozen=True)

    notes: str | None = None


class LegacyCampaignContext(BaseModel):
    """Reduced campaign view carried into the enhancement prompt."""
    model_config = ConfigDict(frozen=True)

    mode: CampaignMode | None = None
    primary_planet: str | None = None
    battle_index: int = 0
    continuity: dict[str, int] = Field(default_factory=dict)
    last_outcomes: tuple[LegacyOutcome, ...] = ()


class ContinuityResult(BaseModel):
    """Output of the continuity composer."""
    model_config = ConfigDict(frozen=True)

    stakes_with_tag: str
    continuity_tag: str
    resolved_planet: str | None = None
    legacy_context: LegacyCampaignContext | None = None


class CampaignScenarioRequest(ScenarioInput):
    """Scenario fields plus the campaign object and a next-planet override."""

    campaign: CampaignContext = Field(default_factory=CampaignContext)
    requested_planet: str | None = None

    @field_validator("campaign", mode="before")
    @classmethod
    def _coerce_campaign(cls, v: Any) -> Any:
        return v if isinstance(v, (dict, CampaignContext)) else {}

    @field_validator("requested_planet", mode="before")
    @classmethod
    def _coerce_requested(cls, v: Any) -> str | None:
        return _optional_text(v)

    def scenario_fields(self) -> ScenarioInput:
        return ScenarioInput.model_validate(
            self.model_dump(exclude={"campaign", "requested_planet"})
        )
