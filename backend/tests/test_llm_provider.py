"""Async provider clients against mocked HTTP (respx)."""
from __future__ import annotations

import json

import httpx
import pytest
import respx

from backend.app.config import GenerationSettings
from backend.app.core.llm_provider import (
    AnthropicClient,
    LLMProviderError,
    OpenAICompatClient,
    TextRewriter,
    create_provider,
)


@pytest.mark.asyncio
async def test_openai_complete_sends_messages_and_returns_content():
    with respx.mock(base_url="https://api.openai.com") as mock:
        route = mock.post("/v1/chat/completions").respond(
            200, json={"choices": [{"message": {"content": "# Rewritten"}}]},
        )
        client = OpenAICompatClient(model="gpt-4o-mini", api_key="sk-test", temperature=0.7)
        text = await client.complete("user prompt", system_prompt="system prompt")

    assert text == "# Rewritten"
    request = route.calls.last.request
    assert request.headers["authorization"] == "Bearer sk-test"
    payload = json.loads(request.content)
    assert payload["model"] == "gpt-4o-mini"
    assert payload["temperature"] == 0.7
    assert payload["messages"] == [
        {"role": "system", "content": "system prompt"},
        {"role": "user", "content": "user prompt"},
    ]


@pytest.mark.asyncio
async def test_openai_http_error_maps_to_provider_error():
    with respx.mock(base_url="https://api.openai.com") as mock:
        mock.post("/v1/chat/completions").respond(429, text="rate limited")
        client = OpenAICompatClient(model="m", api_key="k")
        with pytest.raises(LLMProviderError, match="HTTP error 429"):
            await client.complete("p")


@pytest.mark.asyncio
async def test_openai_timeout_maps_to_provider_error():
    with respx.mock(base_url="https://api.openai.com") as mock:
        mock.post("/v1/chat/completions").mock(side_effect=httpx.ReadTimeout("slow"))
        client = OpenAICompatClient(model="m", api_key="k")
        with pytest.raises(LLMProviderError, match="timed out"):
            await client.complete("p")


@pytest.mark.asyncio
async def test_openai_non_json_body_maps_to_provider_error():
    with respx.mock(base_url="https://api.openai.com") as mock:
        mock.post("/v1/chat/completions").respond(200, text="<html>oops</html>")
        client = OpenAICompatClient(model="m", api_key="k")
        with pytest.raises(LLMProviderError, match="non-JSON"):
            await client.complete("p")


@pytest.mark.asyncio
async def test_openai_empty_choices_returns_empty_string():
    with respx.mock(base_url="https://api.openai.com") as mock:
        mock.post("/v1/chat/completions").respond(200, json={"choices": []})
        assert await OpenAICompatClient(model="m", api_key="k").complete("p") == ""


@pytest.mark.asyncio
async def test_openai_compat_uses_custom_base_url():
    with respx.mock(base_url="http://localhost:8080") as mock:
        mock.post("/v1/chat/completions").respond(
            200, json={"choices": [{"message": {"content": "ok"}}]},
        )
        client = OpenAICompatClient(model="m", base_url="http://localhost:8080/")
        assert await client.complete("p") == "ok"


@pytest.mark.asyncio
async def test_anthropic_joins_text_blocks():
    with respx.mock(base_url="https://api.anthropic.com") as mock:
        route = mock.post("/v1/messages").respond(200, json={
            "content": [
                {"type": "text", "text": "# Part one"},
                {"type": "tool_use", "id": "x"},
                {"type": "text", "text": " and two"},
            ],
        })
        client = AnthropicClient(model="claude-test", api_key="ak")
        text = await client.complete("p", system_prompt="s")

    assert text == "# Part one and two"
    request = route.calls.last.request
    assert request.headers["x-api-key"] == "ak"
    assert request.headers["anthropic-version"] == "2023-06-01"


@pytest.mark.asyncio
async def test_anthropic_without_key_fails_fast():
    with pytest.raises(LLMProviderError, match="key not set"):
        await AnthropicClient(model="m", api_key="").complete("p")


def test_create_provider_dispatch():
    openai = create_provider(GenerationSettings(provider="openai", api_key="k", timeout_seconds=5))
    anthropic = create_provider(GenerationSettings(provider="anthropic", api_key="k"))
    assert isinstance(openai, OpenAICompatClient)
    assert isinstance(anthropic, AnthropicClient)
    assert isinstance(openai, TextRewriter)
    assert openai.timeout == 15.0
    with pytest.raises(NotImplementedError):
        create_provider(GenerationSettings(provider="ollama"))
