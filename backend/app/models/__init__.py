"""Application models (scenario input, campaign continuity, stored records)."""
from .campaign import (
    CampaignContext,
    CampaignMode,
    CampaignScenarioRequest,
    ContinuityResult,
    EpisodeMeta,
    LegacyCampaignContext,
    LegacyOutcome,
)
from .records import CampaignRecord, ScenarioRecord
from .scenario import (
    BattleFormat,
    GenerationResult,
    ScenarioInput,
    Warhost,
    WarhostPlayer,
)

__all__ = [
    "BattleFormat",
    "CampaignContext",
    "CampaignMode",
    "CampaignRecord",
    "CampaignScenarioRequest",
    "ContinuityResult",
    "EpisodeMeta",
    "GenerationResult",
    "LegacyCampaignContext",
    "LegacyOutcome",
    "ScenarioInput",
    "ScenarioRecord",
    "Warhost",
    "WarhostPlayer",
]
