"""Provider interface and registry.

Every text-generation backend implements BaseProvider. Providers are plain instances
held by a ProviderRegistry that the orchestrator receives at construction time.
"""

from abc import ABC, abstractmethod

from app.core.logging import get_logger
from app.core.schemas_generation import GenerationTask
from app.core.task_classifier import TaskProfile, classify_task

logger = get_logger(__name__)

DEFAULT_SYSTEM_PROMPT = (
    "Eres un experto en documentación de casos de uso. Genera documentos profesionales "
    "siguiendo exactamente las reglas proporcionadas."
)


class ProviderError(Exception):
    """Raised when a provider cannot produce text (network, auth, missing key, bad payload)."""

    def __init__(self, message: str, provider: str | None = None):
        super().__init__(message)
        self.provider = provider


class BaseProvider(ABC):
    """Base class for text-generation providers."""

    provider_id: str = ""
    display_name: str = ""

    def __init__(self, api_key: str | None, model: str, timeout: float = 120.0):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout

    @property
    def is_configured(self) -> bool:
        """True when the provider has credentials."""
        return bool(self.api_key)

    async def generate(self, task: GenerationTask) -> str:
        """
        Run one task against this provider.

        Args:
            task: Generation task; its kind selects token budget and temperature

        Returns:
            Raw response text (may be empty)

        Raises:
            ProviderError: On missing credentials or any call failure
        """
        if not self.is_configured:
            raise ProviderError(
                f"{self.display_name or self.provider_id} API key no está configurada",
                provider=self.provider_id,
            )

        profile = classify_task(task.kind)
        system_prompt = task.system_prompt or DEFAULT_SYSTEM_PROMPT
        try:
            return await self._complete(task.payload, system_prompt, profile)
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderError(str(e) or e.__class__.__name__, provider=self.provider_id) from e

    @abstractmethod
    async def _complete(self, prompt: str, system_prompt: str, profile: TaskProfile) -> str:
        """Call the backend and return its text."""
        pass


class ProviderRegistry:
    """Providers keyed by provider id."""

    def __init__(self, providers: list[BaseProvider] | None = None):
        self._providers: dict[str, BaseProvider] = {}
        for provider in providers or []:
            self.register(provider)

    def register(self, provider: BaseProvider) -> None:
        self._providers[provider.provider_id] = provider
        logger.debug(f"Registered provider: {provider.provider_id}")

    def get(self, provider_id: str) -> BaseProvider | None:
        return self._providers.get(provider_id)

    def ids(self) -> list[str]:
        return list(self._providers)

    def __contains__(self, provider_id: object) -> bool:
        return provider_id in self._providers

    def __len__(self) -> int:
        return len(self._providers)
