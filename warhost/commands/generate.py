"""`warhost generate`: build a scenario document from a JSON input file."""
from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

from backend.app.config import GenerationSettings
from backend.app.core.continuity import compose_campaign_input
from backend.app.core.generator import generate
from backend.app.models.campaign import CampaignScenarioRequest
from backend.app.models.scenario import ScenarioInput

_CAMPAIGN_KEYS = frozenset({"campaign", "requestedPlanet", "requested_planet"})


def register(subparsers) -> None:
    p = subparsers.add_parser("generate", help="Generate a narrative scenario from JSON input")
    p.add_argument("--input", required=True, help="Scenario input JSON (camelCase or snake_case keys)")
    p.add_argument("--campaign", default=None, help="Campaign context JSON for continuity")
    p.add_argument("--requested-planet", default=None, help="Next planet override (campaign mode)")
    p.add_argument("--output", default=None, help="Write Markdown here instead of stdout")
    p.add_argument("--no-ai", action="store_true", help="Skip text enhancement; template only")
    p.set_defaults(func=run)


def _read_json(path: str) -> object:
    return json.loads(Path(path).read_text(encoding="utf-8"))


def run(args) -> int:
    try:
        raw_input = _read_json(args.input)
        raw_campaign = _read_json(args.campaign) if args.campaign else None
    except (OSError, json.JSONDecodeError) as exc:
        print(f"Cannot read input: {exc}", file=sys.stderr)
        return 1
    if not isinstance(raw_input, dict):
        print("Input JSON must be an object", file=sys.stderr)
        return 1

    settings = GenerationSettings.from_env()
    if args.no_ai:
        settings = settings.without_ai()

    legacy = None
    if raw_campaign is not None:
        fields = {k: v for k, v in raw_input.items() if k not in _CAMPAIGN_KEYS}
        request = CampaignScenarioRequest.model_validate({
            **fields,
            "campaign": raw_campaign,
            "requested_planet": args.requested_planet or raw_input.get("requestedPlanet"),
        })
        data, legacy = compose_campaign_input(request)
    else:
        data = ScenarioInput.model_validate(raw_input)

    result = asyncio.run(generate(data, settings, legacy))

    if args.output:
        Path(args.output).write_text(result.narrative, encoding="utf-8")
        print(f"Wrote {args.output} (enhanced={'yes' if result.ai_used else 'no'})")
    else:
        print(result.narrative)
    if result.ai_error:
        print(f"Enhancement fell back to template: {result.ai_error}", file=sys.stderr)
    return 0
