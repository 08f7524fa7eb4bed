"""Centralized tuning constants shared across the app."""
from __future__ import annotations

# Placeholders used when a scenario field is empty
DEFAULTS: dict[str, str] = {
    "campaign_name": "Untitled Campaign",
    "battle_format": "1v1",
    "player_faction": "Faction",
    "other_factions": "Opponents",
    "planet": "Theater",
    "tone": "Tone",
    "stakes": "Primary objective",
}

# Max characters kept per free-text field
LIMITS: dict[str, int] = {
    "campaign_name": 120,
    "player_faction": 80,
    "other_factions": 160,
    "planet": 80,
    "tone": 40,
    "stakes": 400,
}

# Resonance Point (RP) economy
RP_RULES: dict[str, dict[str, int]] = {
    "earn": {
        "narrative_objective": 3,
        "vp_win": 1,
        "cinematic_moment": 1,  # only if opponent agrees
    },
    "spend": {
        "revive_named": 2,
        "reroll_mission_or_secondary": 2,
        "win_deployment_roll": 3,
        "force_redeploy_one_enemy_unit": 3,
        "free_stratagem": 4,
        "buy_cgp": 5,
    },
}

# Table geometry (inches)
BOARD_WIDTH_IN = 40
BOARD_LENGTH_IN = 60
OBJECTIVE_RADIUS_IN = 3

# Battle formats, in menu order
BATTLE_FORMATS: tuple[str, ...] = ("1v1", "2v2", "3v3", "4v4", "ffa", "2v2v2v2")

# Continuity composition
CONTINUITY_MAX_EPISODES = 6
CONTINUITY_TAG_PREFIX = "Continuity → "
CONTINUITY_PART_SEP = "; "
CONTINUITY_PRIOR_SEP = " | "
CONTINUITY_STAKES_SEP = " || "
UNSPECIFIED_WORLD = "Unspecified World"

# Enhancement acceptance and diagnostics
ENHANCE_MIN_LENGTH_RATIO = 0.5
AI_ERROR_MAX_CHARS = 240

# Provider timeouts (seconds)
AI_TIMEOUT_MIN = 15.0
AI_TIMEOUT_MAX = 120.0
AI_TIMEOUT_DEFAULT = 60.0

# Roster formatting
ROSTER_UNASSIGNED = "(unassigned)"
ROSTER_DEFAULT_NAME = "Warhost"
ROSTER_HEADER = "Forces Roster:"

# Scenario history retention
SCENARIO_HISTORY_MAX = 100
