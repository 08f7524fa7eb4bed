"""Stored campaign and scenario records used by the repository layer."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from backend.app.models.campaign import CampaignContext, CampaignMode, EpisodeMeta
from backend.app.models.scenario import ScenarioInput


class CampaignRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    code: str
    name: str
    tone: str | None = None
    mode: CampaignMode = "planetary"
    planet_name: str | None = None
    created_at: str
    episodes: list[EpisodeMeta] = Field(default_factory=list)
    scenario_ids: list[str] = Field(default_factory=list)

    def to_context(self) -> CampaignContext:
        """Snapshot for one generation call; later appends do not leak into it."""
        return CampaignContext(
            id=self.id,
            name=self.name,
            tone=self.tone,
            mode=self.mode,
            planet_name=self.planet_name,
            previous_episodes=tuple(self.episodes),
        )


class ScenarioRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    created_at: str
    campaign_id: str | None = None
    input: ScenarioInput
    narrative: str
    ai_used: bool = False
