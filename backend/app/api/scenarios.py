"""Scenario API: generation endpoints, option catalogs and scenario history."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from backend.app.api.deps import get_rewriter, get_scenario_repository, get_settings
from backend.app.catalog import options as catalog_options
from backend.app.catalog.models import PlanetDef
from backend.app.config import GenerationSettings
from backend.app.core.continuity import compose_campaign_input
from backend.app.core.generator import generate
from backend.app.core.llm_provider import TextRewriter
from backend.app.core.repositories import ScenarioRepository
from backend.app.models.api import GenerateResponse
from backend.app.models.campaign import CampaignScenarioRequest
from backend.app.models.records import ScenarioRecord
from backend.app.models.scenario import ScenarioInput

router = APIRouter(prefix="/api", tags=["scenarios"])


@router.post("/generate", response_model=GenerateResponse, response_model_exclude_none=True)
async def generate_scenario(
    body: ScenarioInput,
    settings: GenerationSettings = Depends(get_settings),
    rewriter: TextRewriter | None = Depends(get_rewriter),
    scenarios: ScenarioRepository = Depends(get_scenario_repository),
):
    """Generate a one-off scenario. Always returns a usable narrative."""
    result = await generate(body, settings, rewriter=rewriter)
    scenarios.save(body, result.narrative, result.ai_used)
    return GenerateResponse(**result.model_dump())


@router.post(
    "/campaign-generate", response_model=GenerateResponse, response_model_exclude_none=True,
)
async def generate_campaign_scenario(
    body: CampaignScenarioRequest,
    settings: GenerationSettings = Depends(get_settings),
    rewriter: TextRewriter | None = Depends(get_rewriter),
    scenarios: ScenarioRepository = Depends(get_scenario_repository),
):
    """Generate the next battle of a caller-supplied campaign (continuity folded into stakes)."""
    merged, legacy = compose_campaign_input(body)
    result = await generate(merged, settings, legacy, rewriter=rewriter)
    scenarios.save(merged, result.narrative, result.ai_used, campaign_id=body.campaign.id or None)
    return GenerateResponse(**result.model_dump())


@router.get("/options/factions")
def list_factions():
    return {"items": catalog_options.faction_options()}


@router.get("/options/factions/{faction_key}/subfactions")
def list_subfactions(faction_key: str):
    return {"items": catalog_options.subfaction_options(faction_key)}


@router.get("/options/segmentums")
def list_segmentums():
    return {"items": catalog_options.segmentum_options()}


@router.get("/options/planets")
def list_planets(segmentum: str | None = Query(None, description="Filter by segmentum")):
    return {"items": catalog_options.planet_options(segmentum)}


@router.get("/options/tones")
def list_tones():
    return {"items": catalog_options.tone_options()}


@router.get("/options/planet-pick", response_model=PlanetDef)
def pick_planet(
    segmentum: str | None = Query(None),
    biome: str | None = Query(None),
    faction: str | None = Query(None, description="Faction key; narrows by allegiance"),
    seed: str | None = Query(None, description="Same seed, same planet"),
):
    return catalog_options.pick_planet(segmentum=segmentum, biome=biome, faction_key=faction, seed=seed)


@router.get("/scenarios", response_model=list[ScenarioRecord])
def list_scenarios(
    campaign_id: str | None = Query(None, alias="campaignId"),
    scenarios: ScenarioRepository = Depends(get_scenario_repository),
):
    """Scenario history, newest first."""
    return scenarios.list_scenarios(campaign_id)


@router.get("/scenarios/{scenario_id}", response_model=ScenarioRecord)
def get_scenario(
    scenario_id: str,
    scenarios: ScenarioRepository = Depends(get_scenario_repository),
):
    record = scenarios.get(scenario_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Scenario not found")
    return record
