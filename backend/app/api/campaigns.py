"""Campaign API: stored campaigns, outcome recording and campaign battles."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from backend.app.api.deps import (
    get_campaign_repository,
    get_rewriter,
    get_scenario_repository,
    get_settings,
)
from backend.app.config import GenerationSettings
from backend.app.core.continuity import compose_campaign_input
from backend.app.core.generator import generate
from backend.app.core.llm_provider import TextRewriter
from backend.app.core.repositories import CampaignRepository, ScenarioRepository
from backend.app.models.api import (
    CampaignBattleRequest,
    CampaignGenerateResponse,
    CreateCampaignRequest,
    RecordOutcomeRequest,
)
from backend.app.models.campaign import CampaignScenarioRequest
from backend.app.models.records import CampaignRecord

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/campaigns", tags=["campaigns"])


def _require_campaign(repo: CampaignRepository, campaign_id: str) -> CampaignRecord:
    record = repo.get(campaign_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Campaign not found")
    return record


@router.post("", response_model=CampaignRecord, status_code=201)
def create_campaign(
    body: CreateCampaignRequest,
    campaigns: CampaignRepository = Depends(get_campaign_repository),
):
    return campaigns.create(
        name=body.name, tone=body.tone, mode=body.mode, planet_name=body.planet_name,
    )


@router.get("", response_model=list[CampaignRecord])
def list_campaigns(campaigns: CampaignRepository = Depends(get_campaign_repository)):
    return campaigns.list_campaigns()


@router.get("/{campaign_id}", response_model=CampaignRecord)
def get_campaign(
    campaign_id: str,
    campaigns: CampaignRepository = Depends(get_campaign_repository),
):
    return _require_campaign(campaigns, campaign_id)


@router.post("/{campaign_id}/outcomes", response_model=CampaignRecord)
def record_outcome(
    campaign_id: str,
    body: RecordOutcomeRequest,
    campaigns: CampaignRepository = Depends(get_campaign_repository),
):
    """Append a finished battle to the campaign history. Existing episodes are never edited."""
    _require_campaign(campaigns, campaign_id)
    updated = campaigns.append_episode(campaign_id, body.to_episode())
    if updated is None:
        raise HTTPException(status_code=404, detail="Campaign not found")
    logger.info("Campaign %s: recorded episode %d", campaign_id, len(updated.episodes))
    return updated


@router.post(
    "/{campaign_id}/generate",
    response_model=CampaignGenerateResponse,
    response_model_exclude_none=True,
)
async def generate_campaign_battle(
    campaign_id: str,
    body: CampaignBattleRequest,
    settings: GenerationSettings = Depends(get_settings),
    rewriter: TextRewriter | None = Depends(get_rewriter),
    campaigns: CampaignRepository = Depends(get_campaign_repository),
    scenarios: ScenarioRepository = Depends(get_scenario_repository),
):
    """Generate the next battle using the stored campaign's continuity, then record it."""
    record = _require_campaign(campaigns, campaign_id)
    request = CampaignScenarioRequest.model_validate({
        **body.model_dump(exclude={"requested_planet"}),
        "campaign": record.to_context(),
        "requested_planet": body.requested_planet,
    })
    merged, legacy = compose_campaign_input(request)
    result = await generate(merged, settings, legacy, rewriter=rewriter)

    saved = scenarios.save(merged, result.narrative, result.ai_used, campaign_id=campaign_id)
    campaigns.link_scenario(campaign_id, saved.id)
    return CampaignGenerateResponse(**result.model_dump(), scenario_id=saved.id)
