"""Deterministic Markdown scenario builder.

``build_narrative`` is pure: same ``ScenarioInput`` in, byte-identical document
out. No clock, no randomness, no I/O. Section order is fixed:

    Title -> Opening Brief -> Faction Briefings -> Narrative Objectives
    -> Post-Battle Summary -> Next Hook

The enhancement prompt relies on this order staying put.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from backend.app.constants import (
    BOARD_LENGTH_IN,
    BOARD_WIDTH_IN,
    DEFAULTS,
    LIMITS,
    OBJECTIVE_RADIUS_IN,
    RP_RULES,
)
from backend.app.core.text_utils import clamp_text, or_default
from backend.app.models.scenario import ScenarioInput

SECTION_HEADINGS: tuple[str, ...] = (
    "# ",
    "## Opening Brief",
    "## Faction Briefings",
    "## Narrative Objectives",
    "## Post-Battle Summary",
    "## Next Hook",
)


@dataclass(frozen=True)
class _Fields:
    campaign_name: str
    battle_format: str
    player_faction: str
    other_factions: str
    planet: str
    tone: str
    stakes: str


def _resolve_fields(data: ScenarioInput, limits: Mapping[str, int]) -> _Fields:
    def pick(key: str) -> str:
        return or_default(clamp_text(getattr(data, key), limits.get(key)), DEFAULTS[key])

    return _Fields(
        campaign_name=pick("campaign_name"),
        battle_format=data.battle_format or DEFAULTS["battle_format"],
        player_faction=pick("player_faction"),
        other_factions=pick("other_factions"),
        planet=pick("planet"),
        tone=pick("tone"),
        stakes=pick("stakes"),
    )


def _title(f: _Fields) -> str:
    return (
        f"# {f.campaign_name} — {f.planet}\n"
        f"**Format:** {f.battle_format.upper()} • **Tone:** {f.tone} • **Stake:** {f.stakes}\n"
        "\n"
        "---"
    )


def _opening_brief(f: _Fields) -> str:
    return (
        "## Opening Brief\n"
        f"The guns speak first. **{f.player_faction}** descend upon **{f.planet}** to prosecute "
        f"a limited operation against **{f.other_factions}**. Command expectations: "
        "*short, brutal exchanges*, a mobile center, and flanks trading bodies for inches. "
        f"The stake — **{f.stakes}** — will decide who dictates the next move.\n"
        "\n"
        "> *Operational Notes:* Expect counter-actions on mid-board terrain. "
        "Priority is tempo over attrition: secure, extract, and deny."
    )


def _faction_briefings(f: _Fields) -> str:
    return (
        "## Faction Briefings\n"
        f"### {f.player_faction}\n"
        "Doctrinal advance under fire. Secure the asset, control the clock, and refuse wasteful "
        "melees. Mid-board must be held just long enough to complete the uplink and extract.\n"
        "\n"
        f"### Opposition ({f.other_factions})\n"
        "Exploit overextension, jam rituals, and trade units to stall extraction lanes. "
        "Punish isolated carriers and force resets on actions.\n"
        "\n"
        "---"
    )


def _risk_table(rows: tuple[tuple[str, str], ...]) -> str:
    lines = ["  | Factor | Reason |", "  |---|---|"]
    lines.extend(f"  | {factor} | {reason} |" for factor, reason in rows)
    return "\n".join(lines)


def _objectives(f: _Fields) -> str:
    r = OBJECTIVE_RADIUS_IN
    reward = RP_RULES["earn"]["narrative_objective"]
    primary_risk = _risk_table((
        ("Exposure", "Multi-turn action in the mid-board invites contesting fire."),
        ("Complexity", "Action → carry → extract adds steps to fail."),
        ("Contest", "Two markers ease access, but both are outside DZs."),
    ))
    opposing_risk = _risk_table((
        ("Exposure", "Central, but completion is single-turn."),
        ("Control", "Aura taxes opposing actions without needing extract."),
        ("Contest", "Dispel exists, but costs the enemy tempo."),
    ))
    return (
        "## Narrative Objectives (Matched-Play Compatible)\n"
        f'**Board:** {BOARD_WIDTH_IN}"x{BOARD_LENGTH_IN}" • **Objective radius:** {r}" '
        "• **Deployment:** neutral/standard\n"
        "\n"
        f"### {f.player_faction} — “Secure the Proof”\n"
        '- **Markers:** Place **2** Objective Markers, each **>6"** from any table edge and '
        '**>9"** from each other; neither may start in a deployment zone.\n'
        "- **Action — *Uplink*** *(Infantry/Character only)*:\n"
        f'  - Start at **end of your Movement** while within **{r}"** of a Marker and '
        f'**no enemy** within **{r}"**.\n'
        "  - Acting unit **cannot Shoot or Charge** this turn.\n"
        "  - Completes at the **start of your next Command phase** if still uncontested "
        f'(unit not destroyed/falling back; no enemy within {r}").\n'
        "- **On Success:** Unit gains the **Data Core** (it carries the item).\n"
        "- **Extract:** End a Movement phase **wholly within your deployment zone** while "
        "carrying the Core to bank it.\n"
        "- **Drop/Pickup:** If carrier is destroyed, place a **40mm token** at that spot. "
        'Any Infantry/Character within **1"** at end of Movement may pick it up.\n'
        "- **When Scored:** **End of battle** if the Core was Extracted.\n"
        f"- **Reward:** **+{reward} RP**.\n"
        "- **Risk Score:** **4/5**\n"
        "\n"
        f"{primary_risk}\n"
        "\n"
        "---\n"
        "\n"
        f"### {f.other_factions} — “Deny the Signal”\n"
        '- **Ritual Site:** Place **1** Ritual token at **table center** (within 1").\n'
        "- **Action — *Jam*** *(any Infantry)*:\n"
        f'  - Start at **end of your Movement** within **{r}"** of center and '
        f'**no enemy** within **{r}"**.\n'
        "  - Unit **cannot Shoot or Charge** this turn.\n"
        "  - **Completes at end of your turn.**\n"
        f'- **On Success:** Place a **{r}" Jamming Field** token. While active, '
        '**enemy Actions within 6" of center fail on a D6 roll of 1–2** '
        "(roll when the Action would complete).\n"
        "- **Dispel:** Enemy Infantry/Character may take **Action — Dispel** (same timing); "
        "on completion, **remove** the Jamming Field.\n"
        "- **When Scored:** **End of battle** if a Jamming Field is active.\n"
        f"- **Reward:** **+{reward} RP**.\n"
        "- **Risk Score:** **3/5**\n"
        "\n"
        f"{opposing_risk}"
    )


def _post_battle_summary() -> str:
    earn = RP_RULES["earn"]
    spend = RP_RULES["spend"]
    return (
        "## Post-Battle Summary (fill after game)\n"
        "Record decisive moments, who completed which narrative objective, and whether both "
        "players agreed on a **Cinematic Moment**.\n"
        "\n"
        "### RP / CGP Economy\n"
        "**Earn**\n"
        f"- **+{earn['narrative_objective']} RP**: Complete your narrative objective\n"
        f"- **+{earn['vp_win']} RP**: Win by standard VP\n"
        f"- **+{earn['cinematic_moment']} RP**: Cinematic Moment *(only if opponent agrees)*\n"
        "\n"
        "**Spend**\n"
        f"- **{spend['revive_named']} RP**: Revive a fallen **named** character "
        "(otherwise skips next game)\n"
        f"- **{spend['reroll_mission_or_secondary']} RP**: Re-roll mission type or secondary\n"
        f"- **{spend['win_deployment_roll']} RP**: Win the deployment roll-off\n"
        f"- **{spend['force_redeploy_one_enemy_unit']} RP**: Force opponent to redeploy **one** "
        "unit into the half DZ **you** choose\n"
        f"- **{spend['free_stratagem']} RP**: Use **one** Stratagem for free once\n"
        f"- **{spend['buy_cgp']} RP**: **Buy 1 CGP** (Campaign Game Point)\n"
        "\n"
        f"> **Death Rule:** If a **named** character dies and isn't revived for "
        f"{spend['revive_named']} RP, they **must skip** the next game."
    )


def _next_hook() -> str:
    return (
        "## Next Hook\n"
        "A second signal whispers beyond no-man's-land. Do you press the advantage, or draw "
        "the foe into a kill-corridor and bleed them dry?\n"
    )


def build_narrative(data: ScenarioInput, limits: Mapping[str, int] = LIMITS) -> str:
    """Build the Markdown scenario document in the fixed section order."""
    f = _resolve_fields(data, limits)
    sections = [
        _title(f),
        _opening_brief(f),
        _faction_briefings(f),
        _objectives(f),
        _post_battle_summary(),
        _next_hook(),
    ]
    return "\n\n".join(sections)
