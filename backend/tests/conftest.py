"""Pytest setup: force template-only generation and share small fixtures."""
from __future__ import annotations

import os

import pytest

from backend.app.config import GenerationSettings
from backend.app.models.campaign import CampaignContext
from backend.app.models.scenario import ScenarioInput


def pytest_sessionstart(session) -> None:
    """Never reach a real provider from the test suite."""
    os.environ["WARHOST_AI_ENABLED"] = "0"
    for key in ("WARHOST_AI_API_KEY", "OPENAI_API_KEY", "ANTHROPIC_API_KEY"):
        os.environ.pop(key, None)


class FakeRewriter:
    """TextRewriter double: returns a canned reply or raises, and records prompts."""

    def __init__(self, reply: str = "", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls: list[tuple[str, str | None]] = []

    async def complete(self, prompt: str, system_prompt: str | None = None) -> str:
        self.calls.append((prompt, system_prompt))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def ai_settings() -> GenerationSettings:
    return GenerationSettings(ai_enabled=True, provider="openai", model="test-model", api_key="sk-test")


@pytest.fixture
def template_settings() -> GenerationSettings:
    return GenerationSettings(ai_enabled=False)


@pytest.fixture
def sample_input() -> ScenarioInput:
    return ScenarioInput.model_validate({
        "campaignName": "Ashes of Vigilus",
        "battleFormat": "2v2",
        "planet": "armageddon",
        "tone": "grimdark",
        "stakes": "Hold the hive spire",
        "warhosts": [
            {"name": "Warhost Alpha", "players": [
                {"factionKey": "space-marines", "subKey": "ultramarines"},
                {"factionKey": "astra-militarum"},
            ]},
            {"name": "Warhost Beta", "players": [{"factionKey": "orks"}]},
        ],
    })


@pytest.fixture
def armageddon_campaign() -> CampaignContext:
    return CampaignContext.model_validate({
        "id": "camp-1",
        "name": "Third War",
        "tone": "grimdark",
        "mode": "planetary",
        "planetName": "Armageddon",
        "previousEpisodes": [
            {"scenarioId": "s1", "planetName": "Armageddon", "outcomeSummary": "Orks repelled"},
            {"scenarioId": "s2", "planetName": "Armageddon", "outcomeSummary": "Fortress held"},
        ],
    })


@pytest.fixture
def make_rewriter():
    """Factory for ``FakeRewriter`` doubles."""
    return FakeRewriter
