"""Campaign continuity: fold prior episodes into the next generation request.

The continuity tag is a short, machine-composed summary appended to the
stakes text, e.g.::

    Continuity → Mode=planetary; Planet=Armageddon; Prior=Armageddon: Orks repelled

Composition is deterministic and never mutates the ``CampaignContext``.
"""
from __future__ import annotations

import logging

from backend.app.constants import (
    CONTINUITY_MAX_EPISODES,
    CONTINUITY_PART_SEP,
    CONTINUITY_PRIOR_SEP,
    CONTINUITY_STAKES_SEP,
    CONTINUITY_TAG_PREFIX,
    UNSPECIFIED_WORLD,
)
from backend.app.models.campaign import (
    CampaignContext,
    CampaignScenarioRequest,
    ContinuityResult,
    EpisodeMeta,
    LegacyCampaignContext,
    LegacyOutcome,
)
from backend.app.models.scenario import ScenarioInput

logger = logging.getLogger(__name__)


def _episode_brief(episode: EpisodeMeta) -> str:
    world = episode.planet_name or UNSPECIFIED_WORLD
    brief = (episode.outcome_summary or "").strip()
    return f"{world}: {brief}" if brief else world


def resolve_planet(
    campaign: CampaignContext,
    requested_planet: str | None = None,
    fallback_planet: str | None = None,
) -> str | None:
    """Requested override, else the fixed planet of a planetary campaign, else the fallback."""
    requested = (requested_planet or "").strip()
    if requested:
        return requested
    if campaign.mode == "planetary" and campaign.planet_name:
        return campaign.planet_name
    return (fallback_planet or "").strip() or None


def build_continuity_tag(campaign: CampaignContext, resolved_planet: str | None) -> str:
    parts: list[str] = []
    if campaign.mode:
        parts.append(f"Mode={campaign.mode}")
    if campaign.planet_name:
        parts.append(f"Planet={campaign.planet_name}")
    if resolved_planet and resolved_planet != campaign.planet_name:
        parts.append(f"Next={resolved_planet}")

    recent = campaign.previous_episodes[-CONTINUITY_MAX_EPISODES:]
    summaries = [_episode_brief(e) for e in recent]
    if summaries:
        parts.append(f"Prior={CONTINUITY_PRIOR_SEP.join(summaries)}")

    if not parts:
        return ""
    return CONTINUITY_TAG_PREFIX + CONTINUITY_PART_SEP.join(parts)


def build_legacy_context(campaign: CampaignContext) -> LegacyCampaignContext | None:
    """Reduced context for the enhancement prompt; winners are not carried."""
    episodes = campaign.previous_episodes
    if not (campaign.mode or campaign.planet_name or episodes):
        return None
    return LegacyCampaignContext(
        mode=campaign.mode,
        primary_planet=campaign.planet_name,
        battle_index=len(episodes),
        continuity={"previous_episodes_count": len(episodes)},
        last_outcomes=tuple(
            LegacyOutcome(notes=e.outcome_summary)
            for e in episodes[-CONTINUITY_MAX_EPISODES:]
        ),
    )


def compose_continuity(
    campaign: CampaignContext,
    requested_planet: str | None = None,
    new_stakes: str | None = None,
    fallback_planet: str | None = None,
) -> ContinuityResult:
    """
    Compose the continuity tag and reduced context for the next battle.

    Args:
        campaign: Read-only campaign snapshot
        requested_planet: Optional next-planet override
        new_stakes: Caller-supplied stakes; the tag is appended, never substituted
        fallback_planet: Planet named in the request body, used when nothing else resolves

    Returns:
        ContinuityResult with tagged stakes, the bare tag, the resolved planet
        and the legacy context (None for an empty campaign)
    """
    resolved = resolve_planet(campaign, requested_planet, fallback_planet)
    tag = build_continuity_tag(campaign, resolved)
    stakes = (new_stakes or "").strip()
    stakes_with_tag = CONTINUITY_STAKES_SEP.join(s for s in (stakes, tag) if s)
    return ContinuityResult(
        stakes_with_tag=stakes_with_tag,
        continuity_tag=tag,
        resolved_planet=resolved,
        legacy_context=build_legacy_context(campaign),
    )


def compose_campaign_input(
    request: CampaignScenarioRequest,
) -> tuple[ScenarioInput, LegacyCampaignContext | None]:
    """Merge campaign fallbacks and the continuity tag into plain scenario fields."""
    campaign = request.campaign
    result = compose_continuity(
        campaign, request.requested_planet, request.stakes, fallback_planet=request.planet,
    )
    base = request.scenario_fields()

    merged = base.model_copy(update={
        "campaign_name": base.campaign_name.strip() or campaign.name,
        "planet": result.resolved_planet or base.planet,
        "tone": base.tone.strip() or (campaign.tone or ""),
        "stakes": result.stakes_with_tag,
        "players_count": base.counted_players(),
    })
    logger.debug(
        "Campaign %s: battle_index=%d tag=%r",
        campaign.id or "(anonymous)",
        len(campaign.previous_episodes),
        result.continuity_tag,
    )
    return merged, result.legacy_context
