"""`warhost settings`: show the resolved text-enhancement configuration."""
from __future__ import annotations

from backend.app.config import GenerationSettings


def register(subparsers) -> None:
    p = subparsers.add_parser("settings", help="Show effective enhancement provider/model config")
    p.set_defaults(func=run)


def run(args) -> int:
    settings = GenerationSettings.from_env()
    print("Effective enhancement config (after env overrides):")
    print()
    print(f"- enabled: {settings.ai_enabled}")
    print(f"- provider: {settings.provider}")
    print(f"- model: {settings.model}")
    print(f"- credential: {'set' if settings.api_key else 'missing'}")
    print(f"- base_url: {settings.base_url or '(provider default)'}")
    print(f"- timeout: {settings.timeout_seconds:.0f}s")
    print(f"- temperature: {settings.temperature}")
    if not settings.enhancement_available:
        print("\nEnhancement unavailable: generation returns template narratives.")
    print("\nOverride pattern:")
    print("  WARHOST_AI_ENABLED, WARHOST_AI_PROVIDER, WARHOST_AI_MODEL, WARHOST_AI_API_KEY")
    print("  WARHOST_AI_BASE_URL, WARHOST_AI_TIMEOUT, WARHOST_AI_TEMPERATURE")
    return 0
