"""Enhancement adapter: prompt construction, fence stripping, acceptance rule.

The rewriter is injected (any ``TextRewriter``), so this module never knows
which provider it talks to. Failures raised by the rewriter propagate; the
generator decides how to fall back.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Optional

from backend.app.constants import (
    BOARD_LENGTH_IN,
    BOARD_WIDTH_IN,
    ENHANCE_MIN_LENGTH_RATIO,
    RP_RULES,
)
from backend.app.core.llm_provider import TextRewriter
from backend.app.models.campaign import LegacyCampaignContext

logger = logging.getLogger(__name__)

_TWO_SIDED = (
    "Team framing: this is a two-sided battle. Treat the first Warhost as one side and every "
    "other Warhost as the opposing side; allies within a side share a cause but keep their own voice."
)

TEAM_FRAMING: Dict[str, str] = {
    "1v1": _TWO_SIDED,
    "2v2": _TWO_SIDED,
    "3v3": _TWO_SIDED,
    "4v4": _TWO_SIDED,
    "ffa": (
        "Team framing: this is a free-for-all. Present four independent rivals, each with its own "
        "motive and a reason to distrust everyone else; no alliances are assumed."
    ),
    "2v2v2v2": (
        "Team framing: four allied pairs contest the field. Present each pair as an uneasy pact with "
        "a shared aim, and make the rivalry between pairs explicit."
    ),
}

_FENCED_MD = re.compile(r"^```(?:md|markdown)\s*\n([\s\S]*?)\n```$", re.IGNORECASE)
_FENCED_ANY = re.compile(r"^```\s*\n([\s\S]*?)\n```$")
_OPEN_FENCE_LINE = re.compile(r"^```[^\n]*\n?")
_TRAILING_FENCE = re.compile(r"```$")


def build_system_prompt(battle_format: str) -> str:
    reward = RP_RULES["earn"]["narrative_objective"]
    rules = [
        "You are a Warhammer 40,000 narrative campaign engine.",
        "Enhance the provided Markdown scenario with vivid grimdark prose,",
        "while preserving the section order and every tabletop rule mechanic verbatim; rewrite prose and voice only.",
        f'Keep all distances in inches on a {BOARD_WIDTH_IN}"x{BOARD_LENGTH_IN}" board.',
        f"Each faction must keep exactly one narrative objective with the same mechanics and reward (+{reward} RP).",
        "Keep risk scores and their tables; you may clarify wording.",
        "Use EVERY team listed in the Warhost roster and give each team a distinct voice in its own intro.",
        "If a Campaign Context is provided, maintain continuity: reference prior outcomes, relics, "
        "location damage and absent characters where appropriate.",
        "Output ONLY raw Markdown; do not wrap your answer in code fences.",
    ]
    framing = TEAM_FRAMING.get(battle_format, _TWO_SIDED)
    return " ".join(rules) + "\n\n" + framing


def _context_summary(context: LegacyCampaignContext) -> Dict[str, Any]:
    return {
        "mode": context.mode,
        "primaryPlanet": context.primary_planet,
        "battleIndex": context.battle_index,
        "continuity": context.continuity,
        "lastOutcomes": [
            {"i": i, "notes": outcome.notes}
            for i, outcome in enumerate(context.last_outcomes)
        ],
    }


def build_user_prompt(
    base_markdown: str,
    scenario_summary: Dict[str, Any],
    roster_text: Optional[str] = None,
    continuity_context: Optional[LegacyCampaignContext] = None,
) -> str:
    minimal = {k: v for k, v in scenario_summary.items() if v is not None}
    parts = [
        "Input (JSON, minimal):",
        "```json",
        json.dumps(minimal, indent=2, ensure_ascii=False),
        "```",
    ]
    if roster_text:
        parts.append(f"\nWarhosts Roster (use ALL below):\n{roster_text}")
    if continuity_context is not None:
        parts.append("Campaign Context:")
        parts.append(json.dumps(_context_summary(continuity_context), indent=2, ensure_ascii=False))
    parts.extend([
        "",
        "Base Markdown to enhance (preserve structure & rules exactly; improve prose only):",
        "```md",
        base_markdown,
        "```",
    ])
    return "\n".join(parts)


def unwrap_markdown(text: str | None) -> str:
    """Strip an accidental ```md / ```markdown / bare fence wrapper.

    >>> unwrap_markdown("```md\\n# Title\\n```")
    '# Title'
    >>> unwrap_markdown("```markdown\\n# Title")
    '# Title'
    """
    txt = (text or "").strip()

    m = _FENCED_MD.match(txt)
    if m:
        return m.group(1).strip()

    m = _FENCED_ANY.match(txt)
    if m:
        return m.group(1).strip()

    # Opening fence without a tidy close
    if txt.startswith("```"):
        txt = _OPEN_FENCE_LINE.sub("", txt, count=1)
        return _TRAILING_FENCE.sub("", txt).strip()

    return txt


def accept_rewrite(base: str, candidate: str | None) -> str | None:
    """Return the stripped candidate if it exceeds the minimum length ratio, else None."""
    if not isinstance(candidate, str):
        return None
    stripped = candidate.strip()
    if len(stripped) > len(base) * ENHANCE_MIN_LENGTH_RATIO:
        return stripped
    return None


async def enhance(
    base_markdown: str,
    scenario_summary: Dict[str, Any],
    roster_text: Optional[str] = None,
    continuity_context: Optional[LegacyCampaignContext] = None,
    *,
    rewriter: TextRewriter,
) -> str:
    """
    Rewrite the template prose through ``rewriter``.

    Args:
        base_markdown: Template document from the narrative builder
        scenario_summary: Minimal input fields (campaignName, battleFormat, ...)
        roster_text: Roster lines, one per Warhost
        continuity_context: Reduced campaign context, if any

    Returns:
        The accepted rewrite, or ``base_markdown`` verbatim when the rewrite
        is too short to trust.

    Raises:
        LLMProviderError: transport or provider failure (not caught here)
    """
    battle_format = str(scenario_summary.get("battleFormat") or "1v1")
    system_prompt = build_system_prompt(battle_format)
    user_prompt = build_user_prompt(base_markdown, scenario_summary, roster_text, continuity_context)

    raw = await rewriter.complete(user_prompt, system_prompt=system_prompt)
    accepted = accept_rewrite(base_markdown, unwrap_markdown(raw))
    if accepted is None:
        logger.info(
            "Rewrite rejected: %d chars against a %d char template",
            len((raw or "").strip()),
            len(base_markdown),
        )
        return base_markdown
    return accepted
