"""Anthropic Claude provider."""

from anthropic import AsyncAnthropic

from app.core.providers.base import BaseProvider
from app.core.task_classifier import TaskProfile


class ClaudeProvider(BaseProvider):
    provider_id = "claude"
    display_name = "Anthropic"

    def __init__(self, api_key: str | None, model: str, timeout: float = 120.0):
        super().__init__(api_key, model, timeout)
        self._client: AsyncAnthropic | None = None

    @property
    def client(self) -> AsyncAnthropic:
        if self._client is None:
            self._client = AsyncAnthropic(api_key=self.api_key, timeout=self.timeout)
        return self._client

    async def _complete(self, prompt: str, system_prompt: str, profile: TaskProfile) -> str:
        response = await self.client.messages.create(
            model=self.model,
            max_tokens=profile.max_tokens,
            temperature=profile.temperature,
            system=system_prompt,
            messages=[{"role": "user", "content": prompt}],
        )
        # Concatenate text blocks; non-text blocks carry no prose
        return "".join(
            getattr(block, "text", "") for block in response.content if block.type == "text"
        )
