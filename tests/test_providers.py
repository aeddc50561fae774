"""Tests for the provider adapters and registry."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from app.core.config import Settings
from app.core.orchestrator import AggregatedGenerationError, Orchestrator
from app.core.providers import (
    DEFAULT_SYSTEM_PROMPT,
    ClaudeProvider,
    GeminiProvider,
    OpenAIProvider,
    ProviderError,
    ProviderRegistry,
    build_provider_registry,
)
from app.core.schemas_generation import GenerationTask, TaskKind
from app.core.task_classifier import classify_task


def _task(kind: TaskKind = TaskKind.DOCUMENT, system_prompt: str | None = None) -> GenerationTask:
    return GenerationTask("openai", kind, "prompt", system_prompt=system_prompt)


def _openai_response(text: str | None) -> MagicMock:
    response = MagicMock()
    response.choices = [MagicMock(message=MagicMock(content=text))]
    return response


class TestOpenAIProvider:
    @pytest.mark.asyncio
    async def test_uses_task_profile(self):
        provider = OpenAIProvider("key", "gpt-4o")
        provider._client = MagicMock()
        provider._client.chat.completions.create = AsyncMock(return_value=_openai_response("hola"))

        assert await provider.generate(_task(TaskKind.TEST_GENERATION)) == "hola"

        kwargs = provider._client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["max_tokens"] == 12000
        assert kwargs["messages"][0] == {"role": "system", "content": DEFAULT_SYSTEM_PROMPT}
        assert kwargs["messages"][1] == {"role": "user", "content": "prompt"}

    @pytest.mark.asyncio
    async def test_task_system_prompt_overrides_default(self):
        provider = OpenAIProvider("key", "gpt-4o")
        provider._client = MagicMock()
        provider._client.chat.completions.create = AsyncMock(return_value=_openai_response(None))

        assert await provider.generate(_task(system_prompt="Eres analista")) == ""
        kwargs = provider._client.chat.completions.create.call_args.kwargs
        assert kwargs["messages"][0]["content"] == "Eres analista"

    @pytest.mark.asyncio
    async def test_sdk_errors_become_provider_errors(self):
        provider = OpenAIProvider("key", "gpt-4o")
        provider._client = MagicMock()
        provider._client.chat.completions.create = AsyncMock(side_effect=RuntimeError("timeout"))

        with pytest.raises(ProviderError) as exc_info:
            await provider.generate(_task())
        assert str(exc_info.value) == "timeout"
        assert exc_info.value.provider == "openai"

    @pytest.mark.asyncio
    async def test_missing_key(self):
        with pytest.raises(ProviderError, match="API key no está configurada"):
            await OpenAIProvider(None, "gpt-4o").generate(_task())


class TestClaudeProvider:
    @pytest.mark.asyncio
    async def test_joins_text_blocks(self):
        provider = ClaudeProvider("key", "claude-sonnet-4-20250514")
        response = MagicMock()
        response.content = [
            MagicMock(type="text", text="Hola "),
            MagicMock(type="tool_use"),
            MagicMock(type="text", text="mundo"),
        ]
        provider._client = MagicMock()
        provider._client.messages.create = AsyncMock(return_value=response)

        assert await provider.generate(_task(TaskKind.EXTRACTION)) == "Hola mundo"
        kwargs = provider._client.messages.create.call_args.kwargs
        assert kwargs["system"] == DEFAULT_SYSTEM_PROMPT
        assert kwargs["max_tokens"] == 10000


class TestGeminiProvider:
    def test_json_tasks_request_json(self):
        provider = GeminiProvider("key", "gemini-2.5-flash")

        body = provider._build_body("p", "s", classify_task(TaskKind.EXTRACTION))
        assert body["generationConfig"]["responseMimeType"] == "application/json"
        assert body["systemInstruction"] == {"parts": [{"text": "s"}]}

        body = provider._build_body("p", "s", classify_task(TaskKind.DOCUMENT))
        assert "responseMimeType" not in body["generationConfig"]

    @pytest.mark.asyncio
    async def test_reads_candidate_parts(self):
        provider = GeminiProvider("key", "gemini-2.5-flash", base_url="https://gemini.test/v1/")
        response = MagicMock()
        response.json.return_value = {
            "candidates": [{"content": {"parts": [{"text": "uno "}, {"text": "dos"}]}}]
        }

        with patch("app.core.providers.gemini_provider.httpx.AsyncClient") as mock_client:
            post = AsyncMock(return_value=response)
            mock_client.return_value.__aenter__.return_value.post = post
            assert await provider.generate(_task()) == "uno dos"

        assert post.call_args.args[0] == "https://gemini.test/v1/models/gemini-2.5-flash:generateContent"
        assert post.call_args.kwargs["headers"] == {"x-goog-api-key": "key"}
        assert "params" not in post.call_args.kwargs

    @pytest.mark.asyncio
    async def test_blocked_prompt(self):
        provider = GeminiProvider("key", "gemini-2.5-flash")
        response = MagicMock()
        response.json.return_value = {"promptFeedback": {"blockReason": "SAFETY"}}

        with patch("app.core.providers.gemini_provider.httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.post = AsyncMock(
                return_value=response
            )
            with pytest.raises(ProviderError, match="SAFETY"):
                await provider.generate(_task())

    @pytest.mark.asyncio
    async def test_http_error_does_not_expose_key(self):
        real_client = httpx.AsyncClient
        transport = httpx.MockTransport(lambda request: httpx.Response(401, request=request))
        provider = GeminiProvider("SECRET-KEY-123", "gemini-2.5-flash")
        orchestrator = Orchestrator(ProviderRegistry([provider]), fallback_order=[])

        with patch(
            "app.core.providers.gemini_provider.httpx.AsyncClient",
            lambda **kwargs: real_client(transport=transport, **kwargs),
        ):
            with pytest.raises(AggregatedGenerationError) as exc_info:
                await orchestrator.generate(GenerationTask("gemini", TaskKind.DOCUMENT, "prompt"))

        attempt = exc_info.value.attempts[0]
        assert attempt.error == "Gemini HTTP 401"
        assert "SECRET-KEY-123" not in str(exc_info.value)


class TestBuildProviderRegistry:
    def test_registers_every_provider(self):
        registry = build_provider_registry(Settings(OPENAI_API_KEY="sk-test"))
        assert sorted(registry.ids()) == ["claude", "copilot", "gemini", "grok", "openai"]
        assert registry.get("openai").is_configured
        assert not registry.get("claude").is_configured

    def test_models_and_endpoints_from_settings(self):
        settings = Settings(GROK_MODEL="grok-3", GROK_BASE_URL="https://x.test/v1")
        grok = build_provider_registry(settings).get("grok")
        assert grok.model == "grok-3"
        assert grok.base_url == "https://x.test/v1"
