"""OpenAI-compatible chat providers: OpenAI, Grok (xAI) and Copilot."""

from openai import AsyncOpenAI

from app.core.providers.base import BaseProvider
from app.core.task_classifier import TaskProfile


class OpenAIProvider(BaseProvider):
    """Chat completions through the OpenAI SDK."""

    provider_id = "openai"
    display_name = "OpenAI"

    def __init__(
        self,
        api_key: str | None,
        model: str,
        timeout: float = 120.0,
        base_url: str | None = None,
    ):
        super().__init__(api_key, model, timeout)
        self.base_url = base_url
        self._client: AsyncOpenAI | None = None

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
            )
        return self._client

    async def _complete(self, prompt: str, system_prompt: str, profile: TaskProfile) -> str:
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            max_tokens=profile.max_tokens,
            temperature=profile.temperature,
        )
        return response.choices[0].message.content or ""


class GrokProvider(OpenAIProvider):
    """xAI Grok via its OpenAI-compatible endpoint."""

    provider_id = "grok"
    display_name = "Grok"


class CopilotProvider(OpenAIProvider):
    """Copilot via an OpenAI-compatible endpoint."""

    provider_id = "copilot"
    display_name = "Copilot"
