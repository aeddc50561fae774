"""Provider fallback chain.

The orchestrator walks a prioritized provider list (the selected provider first, then
the configured global order) and returns the first non-empty answer. Each provider
gets exactly one attempt; providers are awaited one after another.
"""

import logging

from app.core.config import get_settings
from app.core.logging import get_logger, log_with_context
from app.core.providers.base import ProviderRegistry
from app.core.schemas_generation import (
    OFFLINE_PROVIDER_ID,
    GenerationResult,
    GenerationTask,
    ProviderAttempt,
)

logger = get_logger(__name__)

NOT_REGISTERED_REASON = "proveedor no registrado"
EMPTY_RESPONSE_REASON = "respuesta vacía"


class AggregatedGenerationError(Exception):
    """Every provider of the chain failed; carries one attempt per provider."""

    def __init__(self, attempts: list[ProviderAttempt]):
        self.attempts = attempts
        details = "\n".join(f"{a.provider}: {a.error}" for a in attempts)
        super().__init__(
            "No se pudo generar el contenido con ningún modelo de IA disponible. "
            f"Errores:\n{details}"
        )


class Orchestrator:
    """Runs generation tasks against a registry of providers."""

    def __init__(self, registry: ProviderRegistry, fallback_order: list[str] | None = None):
        self.registry = registry
        self.fallback_order = (
            fallback_order if fallback_order is not None else get_settings().fallback_order
        )

    @staticmethod
    def is_offline(provider_id: str | None) -> bool:
        """True for the offline id; callers produce local content instead of generating."""
        return (provider_id or OFFLINE_PROVIDER_ID) == OFFLINE_PROVIDER_ID

    def provider_order(self, provider_id: str) -> list[str]:
        """Selected provider first, then the global order without duplicates."""
        order = [provider_id]
        order += [p for p in self.fallback_order if p != provider_id]
        return order

    async def generate(self, task: GenerationTask) -> GenerationResult:
        """
        Run a task through the fallback chain.

        Args:
            task: Generation task; task.provider_id is tried first

        Returns:
            GenerationResult from the first provider with a non-empty answer

        Raises:
            ValueError: If called with the offline provider id
            AggregatedGenerationError: If every provider failed or answered empty
        """
        if self.is_offline(task.provider_id):
            raise ValueError("Offline provider does not generate through the orchestrator")

        attempts: list[ProviderAttempt] = []

        for provider_id in self.provider_order(task.provider_id):
            provider = self.registry.get(provider_id)
            if provider is None:
                attempts.append(ProviderAttempt(provider_id, NOT_REGISTERED_REASON))
                continue

            log_with_context(
                logger,
                logging.INFO,
                "Attempting generation",
                provider=provider_id,
                task_kind=task.kind.value,
            )
            try:
                content = await provider.generate(task)
            except Exception as e:
                reason = str(e) or e.__class__.__name__
                logger.warning(f"Provider {provider_id} failed: {reason}")
                attempts.append(ProviderAttempt(provider_id, reason))
                continue

            if not content or not content.strip():
                logger.warning(f"Provider {provider_id} returned an empty response")
                attempts.append(ProviderAttempt(provider_id, EMPTY_RESPONSE_REASON))
                continue

            log_with_context(
                logger,
                logging.INFO,
                "Generation succeeded",
                provider=provider_id,
                task_kind=task.kind.value,
                failed_attempts=len(attempts),
            )
            return GenerationResult(content=content, provider=provider_id, attempts=attempts)

        logger.error(f"All {len(attempts)} providers failed for {task.kind.value}")
        raise AggregatedGenerationError(attempts)
