"""Enhancement adapter: fence stripping, acceptance rule and prompt contents."""
from __future__ import annotations

import pytest

from backend.app.core.enhancer import (
    TEAM_FRAMING,
    accept_rewrite,
    build_system_prompt,
    build_user_prompt,
    enhance,
    unwrap_markdown,
)
from backend.app.core.llm_provider import LLMProviderError
from backend.app.models.campaign import LegacyCampaignContext, LegacyOutcome

BASE = "# Title\n\n## Opening Brief\n" + "Template prose. " * 20


@pytest.mark.parametrize("raw,expected", [
    ("```md\n# Title\nBody\n```", "# Title\nBody"),
    ("```Markdown\n# Title\n```", "# Title"),
    ("```\n# Title\n```", "# Title"),
    ("  \n```md\n# Title\n```\n ", "# Title"),
    ("```md\n# Title\nno closing fence", "# Title\nno closing fence"),
    ("```markdown\n# Title```", "# Title"),
    ("# Plain\nText", "# Plain\nText"),
    ("", ""),
    (None, ""),
])
def test_unwrap_markdown(raw, expected):
    assert unwrap_markdown(raw) == expected


def test_accept_rewrite_threshold():
    base = "x" * 100
    assert accept_rewrite(base, "y" * 51) == "y" * 51
    assert accept_rewrite(base, "y" * 50) is None
    assert accept_rewrite(base, "   " + "y" * 49 + "   ") is None
    assert accept_rewrite(base, None) is None


def test_team_framing_covers_every_format():
    assert set(TEAM_FRAMING) == {"1v1", "2v2", "3v3", "4v4", "ffa", "2v2v2v2"}
    assert TEAM_FRAMING["1v1"] == TEAM_FRAMING["4v4"]
    assert "free-for-all" in TEAM_FRAMING["ffa"]
    assert "allied pairs" in TEAM_FRAMING["2v2v2v2"]
    assert TEAM_FRAMING["ffa"] in build_system_prompt("ffa")


def test_system_prompt_states_structure_rules():
    prompt = build_system_prompt("1v1")
    assert "section order" in prompt
    assert '40"x60"' in prompt
    assert "+3 RP" in prompt
    assert "EVERY team" in prompt
    assert "code fences" in prompt


def test_user_prompt_layout():
    legacy = LegacyCampaignContext(
        mode="planetary",
        primary_planet="Armageddon",
        battle_index=1,
        continuity={"previous_episodes_count": 1},
        last_outcomes=(LegacyOutcome(notes="Orks repelled"),),
    )
    prompt = build_user_prompt(
        BASE,
        {"campaignName": "C", "battleFormat": "2v2", "playersCount": None},
        roster_text="Forces Roster:\n- A: Orks\n",
        continuity_context=legacy,
    )
    assert prompt.startswith("Input (JSON, minimal):\n```json\n")
    assert "playersCount" not in prompt
    assert "Warhosts Roster (use ALL below):\nForces Roster:" in prompt
    assert '"primaryPlanet": "Armageddon"' in prompt
    assert '"notes": "Orks repelled"' in prompt
    assert prompt.endswith("```md\n" + BASE + "\n```")
    assert prompt.index("Warhosts Roster") < prompt.index("Campaign Context:") < prompt.index("```md")


@pytest.mark.asyncio
async def test_enhance_returns_unwrapped_rewrite(make_rewriter):
    rewrite = "# Title\n\n## Opening Brief\n" + "Grim prose. " * 20
    fake = make_rewriter(reply=f"```md\n{rewrite}\n```")
    result = await enhance(BASE, {"battleFormat": "ffa"}, rewriter=fake)
    assert result == rewrite.strip()
    prompt, system_prompt = fake.calls[0]
    assert TEAM_FRAMING["ffa"] in system_prompt
    assert BASE in prompt


@pytest.mark.asyncio
async def test_enhance_rejects_short_rewrite(make_rewriter):
    fake = make_rewriter(reply="too short")
    assert await enhance(BASE, {"battleFormat": "1v1"}, rewriter=fake) == BASE


@pytest.mark.asyncio
async def test_enhance_propagates_provider_errors(make_rewriter):
    fake = make_rewriter(error=LLMProviderError("HTTP 500"))
    with pytest.raises(LLMProviderError):
        await enhance(BASE, {}, rewriter=fake)
