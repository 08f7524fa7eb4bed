"""Text-rewriting provider abstraction: Anthropic and OpenAI-compatible backends.

Each provider implements ``TextRewriter``. ``create_provider()`` dispatches on
``GenerationSettings.provider``. Clients open a fresh ``httpx.AsyncClient``
per call, bounded by the configured timeout; there are no retries.
"""
from __future__ import annotations

import json as _json
import logging
from typing import Any, Dict, Optional, Protocol, runtime_checkable

import httpx

from backend.app.config import GenerationSettings, clamp_timeout

logger = logging.getLogger(__name__)

OPENAI_BASE_URL = "https://api.openai.com"
ANTHROPIC_BASE_URL = "https://api.anthropic.com"
ANTHROPIC_VERSION = "2023-06-01"


class LLMProviderError(Exception):
    """Raised when a rewrite request fails."""


@runtime_checkable
class TextRewriter(Protocol):
    """Pluggable rewriting capability: prompt in, raw response text out."""

    async def complete(self, prompt: str, system_prompt: Optional[str] = None) -> str:
        ...


async def _post_json(
    label: str,
    url: str,
    payload: Dict[str, Any],
    headers: Dict[str, str],
    timeout: float,
) -> Dict[str, Any]:
    """POST and decode JSON, mapping every httpx failure onto LLMProviderError."""
    try:
        async with httpx.AsyncClient(timeout=httpx.Timeout(timeout)) as client:
            response = await client.post(url, json=payload, headers=headers)
            response.raise_for_status()
    except httpx.TimeoutException as exc:
        raise LLMProviderError(f"{label} request timed out after {timeout:.0f}s") from exc
    except httpx.ConnectError as exc:
        raise LLMProviderError(f"Cannot connect to {label} API at {url}") from exc
    except httpx.HTTPStatusError as exc:
        raise LLMProviderError(
            f"{label} HTTP error {exc.response.status_code}: {exc.response.text[:500]}"
        ) from exc
    except httpx.HTTPError as exc:
        raise LLMProviderError(f"{label} network error: {exc}") from exc

    try:
        body = response.json()
    except _json.JSONDecodeError as exc:
        raise LLMProviderError(f"{label} returned non-JSON response") from exc
    if not isinstance(body, dict):
        raise LLMProviderError(f"{label} returned unexpected response shape")
    return body


class AnthropicClient:
    """Client for Anthropic's Messages API."""

    def __init__(
        self,
        model: str,
        api_key: str,
        base_url: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.7,
        timeout: float | None = None,
    ):
        self.model = model
        self.api_key = api_key
        self.base_url = (base_url or ANTHROPIC_BASE_URL).rstrip("/")
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout = clamp_timeout(timeout)

    async def complete(self, prompt: str, system_prompt: Optional[str] = None) -> str:
        """Call Anthropic Messages API."""
        if not self.api_key:
            raise LLMProviderError("Anthropic API key not set")

        payload: Dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system_prompt:
            payload["system"] = system_prompt

        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
        }
        body = await _post_json(
            "Anthropic", f"{self.base_url}/v1/messages", payload, headers, self.timeout,
        )

        # Extract text from content blocks
        text_parts = []
        for block in body.get("content", []) or []:
            if isinstance(block, dict) and block.get("type") == "text":
                text_parts.append(block.get("text", ""))
        return "".join(text_parts)


class OpenAICompatClient:
    """Client for OpenAI-compatible chat completions (OpenAI, OpenRouter, vLLM, ...)."""

    def __init__(
        self,
        model: str,
        api_key: str = "",
        base_url: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.7,
        timeout: float | None = None,
    ):
        self.model = model
        self.api_key = api_key
        self.base_url = (base_url or OPENAI_BASE_URL).rstrip("/")
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout = clamp_timeout(timeout)

    async def complete(self, prompt: str, system_prompt: Optional[str] = None) -> str:
        """Call the chat completions endpoint and return the first choice's content."""
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }

        headers: Dict[str, str] = {"content-type": "application/json"}
        if self.api_key:
            headers["authorization"] = f"Bearer {self.api_key}"

        body = await _post_json(
            "OpenAI-compatible",
            f"{self.base_url}/v1/chat/completions",
            payload,
            headers,
            self.timeout,
        )
        choices = body.get("choices") or []
        if not choices or not isinstance(choices[0], dict):
            return ""
        message = choices[0].get("message") or {}
        return message.get("content") or ""


def create_provider(settings: GenerationSettings) -> TextRewriter:
    """Factory: create a rewriting client for the configured provider.

    Supported providers: 'openai', 'openai_compat', 'anthropic'.
    """
    provider = settings.provider
    if provider == "anthropic":
        return AnthropicClient(
            model=settings.model,
            api_key=settings.api_key,
            base_url=settings.base_url or None,
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
            timeout=settings.timeout_seconds,
        )
    elif provider in ("openai", "openai_compat"):
        return OpenAICompatClient(
            model=settings.model,
            api_key=settings.api_key,
            base_url=settings.base_url or None,
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
            timeout=settings.timeout_seconds,
        )
    else:
        raise NotImplementedError(
            f"Provider '{provider}' not supported. Supported: openai, openai_compat, anthropic."
        )
