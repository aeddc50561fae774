"""Tests for the provider fallback chain."""

import pytest

from app.core.orchestrator import (
    EMPTY_RESPONSE_REASON,
    NOT_REGISTERED_REASON,
    AggregatedGenerationError,
    Orchestrator,
)
from app.core.providers import OpenAIProvider, ProviderRegistry
from app.core.schemas_generation import GenerationTask, TaskKind
from tests.fakes.fake_providers import (
    ALL_PROVIDERS,
    answering,
    build_fake_orchestrator,
    failing,
    total_calls,
)


def _task(provider_id: str = "copilot", kind: TaskKind = TaskKind.DOCUMENT) -> GenerationTask:
    return GenerationTask(provider_id=provider_id, kind=kind, payload="prompt")


class TestProviderOrder:
    def test_selected_provider_first_without_duplicates(self):
        orchestrator = build_fake_orchestrator([])
        assert orchestrator.provider_order("claude") == [
            "claude",
            "copilot",
            "gemini",
            "openai",
            "grok",
        ]

    def test_unknown_selection_is_tried_first(self):
        orchestrator = build_fake_orchestrator([])
        assert orchestrator.provider_order("mistral") == ["mistral", *ALL_PROVIDERS]

    def test_default_order_comes_from_settings(self):
        orchestrator = Orchestrator(ProviderRegistry())
        assert orchestrator.fallback_order == ALL_PROVIDERS

    def test_offline_id(self):
        assert Orchestrator.is_offline("demo")
        assert Orchestrator.is_offline(None)
        assert not Orchestrator.is_offline("openai")


class TestGenerate:
    @pytest.mark.asyncio
    async def test_first_provider_answers(self):
        providers = [answering("copilot", "hola"), answering("gemini", "no")]
        result = await build_fake_orchestrator(providers).generate(_task())

        assert result.content == "hola"
        assert result.provider == "copilot"
        assert result.attempts == []
        assert providers[1].calls == 0

    @pytest.mark.asyncio
    async def test_four_failures_then_result(self):
        providers = [failing(p) for p in ALL_PROVIDERS[:4]] + [answering("grok", "result")]
        result = await build_fake_orchestrator(providers).generate(_task("copilot"))

        assert result.content == "result"
        assert result.provider == "grok"
        assert [a.provider for a in result.attempts] == ALL_PROVIDERS[:4]
        assert all(a.error == "connection refused" for a in result.attempts)
        assert [p.calls for p in providers] == [1, 1, 1, 1, 1]

    @pytest.mark.asyncio
    async def test_all_providers_fail(self):
        providers = [failing(p, f"{p} caído") for p in ALL_PROVIDERS]

        with pytest.raises(AggregatedGenerationError) as exc_info:
            await build_fake_orchestrator(providers).generate(_task("openai"))

        attempts = exc_info.value.attempts
        assert [a.provider for a in attempts] == ["openai", "copilot", "gemini", "claude", "grok"]
        assert total_calls(providers) == 5
        for provider_id in ALL_PROVIDERS:
            assert f"{provider_id}: {provider_id} caído" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_unregistered_provider_is_recorded(self):
        providers = [answering("openai", "texto")]
        result = await build_fake_orchestrator(providers).generate(_task("claude"))

        assert result.provider == "openai"
        assert [(a.provider, a.error) for a in result.attempts] == [
            ("claude", NOT_REGISTERED_REASON),
            ("copilot", NOT_REGISTERED_REASON),
            ("gemini", NOT_REGISTERED_REASON),
        ]

    @pytest.mark.asyncio
    async def test_empty_response_advances_chain(self):
        providers = [answering("copilot", "   "), answering("gemini", "contenido")]
        result = await build_fake_orchestrator(providers).generate(_task())

        assert result.provider == "gemini"
        assert result.attempts[0].error == EMPTY_RESPONSE_REASON

    @pytest.mark.asyncio
    async def test_missing_api_key_fails_attempt(self):
        registry = ProviderRegistry([OpenAIProvider(None, "gpt-4o")])
        orchestrator = Orchestrator(registry, fallback_order=[])

        with pytest.raises(AggregatedGenerationError) as exc_info:
            await orchestrator.generate(_task("openai"))

        assert exc_info.value.attempts[0].error == "OpenAI API key no está configurada"

    @pytest.mark.asyncio
    async def test_offline_provider_is_rejected(self):
        with pytest.raises(ValueError):
            await build_fake_orchestrator([]).generate(_task("demo"))

    @pytest.mark.asyncio
    async def test_task_reaches_provider_unchanged(self):
        provider = answering("copilot", "ok")
        task = GenerationTask("copilot", TaskKind.EXTRACTION, "minuta", system_prompt="sys")
        await build_fake_orchestrator([provider]).generate(task)
        assert provider.tasks == [task]
