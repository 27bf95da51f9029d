"""OpenAI LLM Provider implementation.

This module provides an OpenAI-compatible LLM provider using the chat
completions API (also works with Ollama and other compatible endpoints).
"""

from typing import Any, Optional

import httpx

from testgen.providers.base import LLMProvider, ProviderConfig, ProviderError


class OpenAILLMProvider(LLMProvider):
    """LLM provider using OpenAI API (or compatible endpoints like Ollama)."""

    def __init__(self, config: ProviderConfig, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        """Initialize the OpenAI LLM provider.

        Args:
            config: Provider configuration with api_key, model_name, etc.
            transport: Optional httpx transport, used by tests
        """
        super().__init__(config)
        self.api_key = config.api_key
        self.model_name = config.model_name
        self.base_url = config.base_url or "https://api.openai.com/v1"

        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {self.api_key}",
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
        """Generate text completion using the chat completions endpoint.

        ``json_output`` turns on JSON mode (``response_format: json_object``),
        so the answer is always a JSON object.
        """
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        payload: dict[str, Any] = {
            "model": model or self.model_name,
            "messages": messages,
            "temperature": temperature,
            **self.config.extra_params,
        }
        if max_tokens:
            payload["max_tokens"] = max_tokens
        if json_output:
            payload["response_format"] = {"type": "json_object"}

        try:
            response = await self.client.post("/chat/completions", json=payload)
            response.raise_for_status()
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                message=f"OpenAI API error: {e.response.status_code} - {e.response.text}",
                provider="openai",
                original_error=e,
            ) from e
        except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError) as e:
            raise ProviderError(
                message=f"LLM generation failed: {e}",
                provider="openai",
                original_error=e,
            ) from e

        if not content:
            raise ProviderError(message="LLM returned an empty response", provider="openai")
        return content

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()
