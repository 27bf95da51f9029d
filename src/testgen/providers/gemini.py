"""Gemini LLM provider over the Generative Language REST API."""

from typing import Any, Optional

import httpx

from testgen.providers.base import LLMProvider, ProviderConfig, ProviderError


class GeminiLLMProvider(LLMProvider):
    """LLM provider using ``models/{model}:generateContent``."""

    def __init__(self, config: ProviderConfig, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        super().__init__(config)
        self.model_name = config.model_name
        self.base_url = config.base_url or "https://generativelanguage.googleapis.com/v1beta"

        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "x-goog-api-key": config.api_key or "",
                "Content-Type": "application/json",
            },
            timeout=config.timeout,
            transport=transport,
        )

    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: float = 0.2,
        json_output: bool = False,
        model: Optional[str] = None,
    ) -> str:
        generation_config: dict[str, Any] = {"temperature": temperature}
        if max_tokens:
            generation_config["maxOutputTokens"] = max_tokens
        if json_output:
            generation_config["responseMimeType"] = "application/json"

        payload: dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": generation_config,
        }
        if system_prompt:
            payload["systemInstruction"] = {"parts": [{"text": system_prompt}]}

        try:
            response = await self.client.post(f"/models/{model or self.model_name}:generateContent", json=payload)
            response.raise_for_status()
            data = response.json()
            parts = data["candidates"][0]["content"]["parts"]
            text = "".join(part.get("text", "") for part in parts)
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                message=f"Gemini API error: {e.response.status_code} - {e.response.text}",
                provider="gemini",
                original_error=e,
            ) from e
        except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError) as e:
            raise ProviderError(
                message=f"LLM generation failed: {e}",
                provider="gemini",
                original_error=e,
            ) from e

        if not text:
            raise ProviderError(message="LLM returned an empty response", provider="gemini")
        return text

    async def close(self) -> None:
        await self.client.aclose()
