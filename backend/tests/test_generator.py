"""Generation orchestrator: template-only, enhanced, rejected and failed paths."""
from __future__ import annotations

import pytest

from backend.app.config import GenerationSettings
from backend.app.constants import AI_ERROR_MAX_CHARS
from backend.app.core.generator import generate, prepare_input, with_roster
from backend.app.core.llm_provider import LLMProviderError
from backend.app.core.narrative_builder import build_narrative
from backend.app.catalog.roster import build_roster_block


def _fallback(data) -> str:
    prepared = prepare_input(data)
    return with_roster(build_narrative(prepared), build_roster_block(prepared.warhosts))


def test_prepare_input_resolves_catalog_keys_and_labels(sample_input):
    prepared = prepare_input(sample_input)
    assert prepared.planet == "Armageddon"
    assert prepared.tone == "Grimdark (Baseline)"
    assert prepared.player_faction == "Adeptus Astartes (Space Marines): Ultramarines, Astra Militarum"
    assert prepared.other_factions == "Orks"
    assert prepared.players_count == 3


@pytest.mark.asyncio
async def test_disabled_returns_template_with_roster(sample_input, template_settings, make_rewriter):
    fake = make_rewriter(reply="unused")
    result = await generate(sample_input, template_settings, rewriter=fake)
    assert result.ai_used is False
    assert result.ai_error is None
    assert result.narrative == _fallback(sample_input)
    assert result.narrative.endswith("Forces Roster:\n- Warhost Alpha: Adeptus Astartes (Space Marines): Ultramarines; Astra Militarum\n- Warhost Beta: Orks\n")
    assert fake.calls == []


@pytest.mark.asyncio
async def test_missing_credential_forces_template(sample_input, make_rewriter):
    fake = make_rewriter(reply="unused")
    settings = GenerationSettings(ai_enabled=True, api_key="  ")
    result = await generate(sample_input, settings, rewriter=fake)
    assert result.ai_used is False
    assert fake.calls == []


@pytest.mark.asyncio
async def test_no_warhosts_means_no_roster_block(template_settings):
    from backend.app.models.scenario import ScenarioInput

    data = ScenarioInput(campaign_name="Solo")
    result = await generate(data, template_settings)
    assert "Forces Roster:" not in result.narrative
    assert result.narrative == build_narrative(prepare_input(data))


@pytest.mark.asyncio
async def test_accepted_rewrite_is_returned(sample_input, ai_settings, make_rewriter):
    base = build_narrative(prepare_input(sample_input))
    rewrite = base.replace("The guns speak first.", "Thunder rolls over the hive.")
    fake = make_rewriter(reply=f"```markdown\n{rewrite}\n```")
    result = await generate(sample_input, ai_settings, rewriter=fake)
    assert result.ai_used is True
    assert result.ai_error is None
    assert result.narrative == rewrite.strip()
    prompt, _ = fake.calls[0]
    assert "Warhost Alpha" in prompt


@pytest.mark.asyncio
async def test_short_rewrite_falls_back_without_diagnostic(sample_input, ai_settings, make_rewriter):
    result = await generate(sample_input, ai_settings, rewriter=make_rewriter(reply="# Short"))
    assert result.ai_used is False
    assert result.ai_error is None
    assert result.narrative == _fallback(sample_input)


@pytest.mark.asyncio
async def test_provider_failure_falls_back_with_truncated_error(sample_input, ai_settings, make_rewriter):
    fake = make_rewriter(error=LLMProviderError("OpenAI-compatible HTTP error 500: " + "x" * 1000))
    result = await generate(sample_input, ai_settings, rewriter=fake)
    assert result.ai_used is False
    assert result.narrative == _fallback(sample_input)
    assert result.ai_error.startswith("OpenAI-compatible HTTP error 500")
    assert len(result.ai_error) <= AI_ERROR_MAX_CHARS


@pytest.mark.asyncio
async def test_unexpected_exception_is_contained(sample_input, ai_settings, make_rewriter):
    result = await generate(sample_input, ai_settings, rewriter=make_rewriter(error=RuntimeError()))
    assert result.ai_used is False
    assert result.ai_error == "RuntimeError"
    assert result.narrative


@pytest.mark.asyncio
async def test_unknown_provider_is_reported_not_raised(sample_input):
    settings = GenerationSettings(ai_enabled=True, provider="carrier-pigeon", api_key="k")
    result = await generate(sample_input, settings)
    assert result.ai_used is False
    assert "carrier-pigeon" in result.ai_error
