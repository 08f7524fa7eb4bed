"""App config: text-enhancement provider selection and env overrides.

Settings are read from the environment once (``GenerationSettings.from_env()``)
and passed explicitly into the generator, so core code never touches
``os.environ``.

Env (WARHOST_* first, legacy names as fallback):
    WARHOST_AI_ENABLED / AI_ENABLED        "0" disables enhancement
    WARHOST_AI_PROVIDER                    openai (default), anthropic, openai_compat
    WARHOST_AI_MODEL / OPENAI_MODEL        model id (default gpt-4o-mini)
    WARHOST_AI_API_KEY / OPENAI_API_KEY / ANTHROPIC_API_KEY
    WARHOST_AI_BASE_URL                    optional endpoint override
    WARHOST_AI_TIMEOUT                     seconds, clamped to 15..120
    WARHOST_AI_TEMPERATURE                 default 0.7
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace

from backend.app.constants import AI_TIMEOUT_DEFAULT, AI_TIMEOUT_MAX, AI_TIMEOUT_MIN
from shared.config import _env_first

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER = "openai"
DEFAULT_MODEL = "gpt-4o-mini"
SUPPORTED_PROVIDERS: tuple[str, ...] = ("openai", "openai_compat", "anthropic")


def _float_env(raw: str, default: float) -> float:
    try:
        return float(raw) if raw else default
    except ValueError:
        logger.warning("Ignoring non-numeric value %r, using %s", raw, default)
        return default


def clamp_timeout(seconds: float | None) -> float:
    """Keep provider timeouts within the supported window."""
    if seconds is None:
        return AI_TIMEOUT_DEFAULT
    return max(AI_TIMEOUT_MIN, min(AI_TIMEOUT_MAX, float(seconds)))


@dataclass(frozen=True)
class GenerationSettings:
    """Explicit configuration for one generation call."""

    ai_enabled: bool = True
    provider: str = DEFAULT_PROVIDER
    model: str = DEFAULT_MODEL
    api_key: str = ""
    base_url: str = ""
    timeout_seconds: float = AI_TIMEOUT_DEFAULT
    temperature: float = 0.7
    max_tokens: int = 4096

    @property
    def enhancement_available(self) -> bool:
        """True only when enhancement is switched on and a credential exists."""
        return bool(self.ai_enabled and self.api_key.strip())

    def without_ai(self) -> "GenerationSettings":
        return replace(self, ai_enabled=False)

    @classmethod
    def from_env(cls) -> "GenerationSettings":
        provider = _env_first("WARHOST_AI_PROVIDER", default=DEFAULT_PROVIDER).lower()
        if provider not in SUPPORTED_PROVIDERS:
            logger.warning("Unknown WARHOST_AI_PROVIDER=%r, using %s", provider, DEFAULT_PROVIDER)
            provider = DEFAULT_PROVIDER

        key_names = ["WARHOST_AI_API_KEY"]
        key_names.append("ANTHROPIC_API_KEY" if provider == "anthropic" else "OPENAI_API_KEY")

        enabled_raw = _env_first("WARHOST_AI_ENABLED", "AI_ENABLED", default="1")
        return cls(
            ai_enabled=enabled_raw != "0",
            provider=provider,
            model=_env_first("WARHOST_AI_MODEL", "OPENAI_MODEL", default=DEFAULT_MODEL),
            api_key=_env_first(*key_names),
            base_url=_env_first("WARHOST_AI_BASE_URL"),
            timeout_seconds=clamp_timeout(
                _float_env(os.environ.get("WARHOST_AI_TIMEOUT", "").strip(), AI_TIMEOUT_DEFAULT)
            ),
            temperature=_float_env(os.environ.get("WARHOST_AI_TEMPERATURE", "").strip(), 0.7),
        )


def log_resolved_settings(settings: GenerationSettings) -> None:
    """Log resolved enhancement config at startup (no secrets)."""
    logger.info(
        "Enhancement config: enabled=%s provider=%s model=%s credential=%s timeout=%.0fs",
        settings.ai_enabled,
        settings.provider,
        settings.model,
        "set" if settings.api_key else "missing",
        settings.timeout_seconds,
    )
