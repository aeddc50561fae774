"""Google Gemini provider over the generateContent REST endpoint."""

import httpx

from app.core.providers.base import BaseProvider, ProviderError
from app.core.task_classifier import TaskProfile


class GeminiProvider(BaseProvider):
    provider_id = "gemini"
    display_name = "Gemini"

    def __init__(
        self,
        api_key: str | None,
        model: str,
        timeout: float = 120.0,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
    ):
        super().__init__(api_key, model, timeout)
        self.base_url = base_url.rstrip("/")

    def _build_body(self, prompt: str, system_prompt: str, profile: TaskProfile) -> dict:
        config = {
            "maxOutputTokens": profile.max_tokens,
            "temperature": profile.temperature,
        }
        if profile.expects_json:
            config["responseMimeType"] = "application/json"
        return {
            "systemInstruction": {"parts": [{"text": system_prompt}]},
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": config,
        }

    async def _complete(self, prompt: str, system_prompt: str, profile: TaskProfile) -> str:
        url = f"{self.base_url}/models/{self.model}:generateContent"
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(
                url,
                headers={"x-goog-api-key": self.api_key},
                json=self._build_body(prompt, system_prompt, profile),
            )
            try:
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                # The exception text carries the request URL; report the status only
                raise ProviderError(
                    f"Gemini HTTP {e.response.status_code}", provider=self.provider_id
                ) from e
            data = response.json()

        candidates = data.get("candidates") or []
        if not candidates:
            reason = (data.get("promptFeedback") or {}).get("blockReason", "sin candidatos")
            raise ProviderError(f"Gemini no devolvió contenido: {reason}", provider=self.provider_id)

        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(part.get("text", "") for part in parts)
