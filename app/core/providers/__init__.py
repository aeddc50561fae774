"""Text-generation providers and the registry that holds them."""

from app.core.config import Settings, get_settings
from app.core.providers.base import (
    DEFAULT_SYSTEM_PROMPT,
    BaseProvider,
    ProviderError,
    ProviderRegistry,
)
from app.core.providers.claude_provider import ClaudeProvider
from app.core.providers.gemini_provider import GeminiProvider
from app.core.providers.openai_provider import CopilotProvider, GrokProvider, OpenAIProvider


def build_provider_registry(settings: Settings | None = None) -> ProviderRegistry:
    """
    Build a registry with every supported provider.

    Providers without credentials are still registered; they fail their attempt with a
    ProviderError so the fallback chain records why they were skipped.

    Args:
        settings: Settings to read keys and models from (defaults to get_settings())

    Returns:
        ProviderRegistry keyed by provider id
    """
    settings = settings or get_settings()
    timeout = settings.PROVIDER_TIMEOUT_SECONDS
    return ProviderRegistry(
        [
            CopilotProvider(
                settings.COPILOT_API_KEY,
                settings.COPILOT_MODEL,
                timeout,
                base_url=settings.COPILOT_BASE_URL,
            ),
            GeminiProvider(
                settings.GEMINI_API_KEY,
                settings.GEMINI_MODEL,
                timeout,
                base_url=settings.GEMINI_BASE_URL,
            ),
            OpenAIProvider(settings.OPENAI_API_KEY, settings.OPENAI_MODEL, timeout),
            ClaudeProvider(settings.ANTHROPIC_API_KEY, settings.CLAUDE_MODEL, timeout),
            GrokProvider(
                settings.XAI_API_KEY,
                settings.GROK_MODEL,
                timeout,
                base_url=settings.GROK_BASE_URL,
            ),
        ]
    )


__all__ = [
    "DEFAULT_SYSTEM_PROMPT",
    "BaseProvider",
    "ClaudeProvider",
    "CopilotProvider",
    "GeminiProvider",
    "GrokProvider",
    "OpenAIProvider",
    "ProviderError",
    "ProviderRegistry",
    "build_provider_registry",
]
