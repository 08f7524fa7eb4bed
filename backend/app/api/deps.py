"""FastAPI dependencies: settings, rewriter and repositories.

Tests swap these through ``app.dependency_overrides``.
"""
from __future__ import annotations

from functools import lru_cache

from backend.app.config import GenerationSettings
from backend.app.core.llm_provider import TextRewriter
from backend.app.core.repositories import (
    CampaignRepository,
    InMemoryCampaignRepository,
    InMemoryScenarioRepository,
    ScenarioRepository,
)


@lru_cache(maxsize=1)
def get_settings() -> GenerationSettings:
    return GenerationSettings.from_env()


def get_rewriter() -> TextRewriter | None:
    """None lets the generator build a client from the settings."""
    return None


@lru_cache(maxsize=1)
def get_campaign_repository() -> CampaignRepository:
    return InMemoryCampaignRepository()


@lru_cache(maxsize=1)
def get_scenario_repository() -> ScenarioRepository:
    return InMemoryScenarioRepository()
