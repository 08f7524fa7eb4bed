"""Generation orchestrator: roster -> template -> optional enhancement -> result.

Linear, no retries. The only two outcomes are "template-only" and
"enhanced"; every failure downgrades to the template fallback.
"""
from __future__ import annotations

import logging
from typing import Optional

from backend.app.catalog.models import Catalog
from backend.app.catalog.options import resolve_planet_name, tone_label
from backend.app.catalog.roster import build_roster_block, derive_faction_labels
from backend.app.config import GenerationSettings
from backend.app.core.enhancer import enhance
from backend.app.core.llm_provider import TextRewriter, create_provider
from backend.app.core.narrative_builder import build_narrative
from backend.app.core.text_utils import short_diagnostic
from backend.app.models.campaign import LegacyCampaignContext
from backend.app.models.scenario import GenerationResult, ScenarioInput

logger = logging.getLogger(__name__)

ROSTER_DIVIDER = "\n\n---\n\n"


def prepare_input(data: ScenarioInput, catalog: Catalog | None = None) -> ScenarioInput:
    """Resolve catalog keys to display text and fill faction labels from Warhosts."""
    primary, others = derive_faction_labels(data.warhosts, catalog)
    return data.model_copy(update={
        "planet": resolve_planet_name(data.planet, catalog),
        "tone": tone_label(data.tone.strip(), catalog),
        "player_faction": data.player_faction.strip() or primary,
        "other_factions": data.other_factions.strip() or others,
        "players_count": data.counted_players(),
    })


def with_roster(base: str, roster_block: str) -> str:
    """Template fallback: the base document plus the roster for visibility."""
    if not roster_block:
        return base
    return base + ROSTER_DIVIDER + roster_block


def scenario_summary(data: ScenarioInput) -> dict:
    return {
        "campaignName": data.campaign_name,
        "battleFormat": data.battle_format,
        "planet": data.planet,
        "tone": data.tone,
        "stakes": data.stakes,
        "playersCount": data.players_count,
    }


async def generate(
    data: ScenarioInput,
    settings: GenerationSettings,
    campaign_context: Optional[LegacyCampaignContext] = None,
    *,
    rewriter: Optional[TextRewriter] = None,
    catalog: Catalog | None = None,
) -> GenerationResult:
    """
    Produce the scenario document for one request.

    Args:
        data: Scenario fields (already merged with campaign continuity, if any)
        settings: Enhancement configuration, passed explicitly
        campaign_context: Reduced campaign context for the enhancement prompt
        rewriter: Override the provider client (tests, custom backends)
        catalog: Override the default option catalog

    Returns:
        GenerationResult; ``ai_used`` is False whenever the template is returned
    """
    prepared = prepare_input(data, catalog)
    roster_block = build_roster_block(prepared.warhosts, catalog)
    base = build_narrative(prepared)
    fallback = with_roster(base, roster_block)

    if not settings.enhancement_available:
        logger.debug("Enhancement disabled or no credential; returning template")
        return GenerationResult(narrative=fallback, ai_used=False)

    try:
        client = rewriter if rewriter is not None else create_provider(settings)
        text = await enhance(
            base,
            scenario_summary(prepared),
            roster_block or None,
            campaign_context,
            rewriter=client,
        )
    except Exception as exc:
        logger.warning("Enhancement failed, using template: %s", exc)
        return GenerationResult(narrative=fallback, ai_used=False, ai_error=short_diagnostic(exc))

    if text == base:
        return GenerationResult(narrative=fallback, ai_used=False)
    return GenerationResult(narrative=text, ai_used=True)
