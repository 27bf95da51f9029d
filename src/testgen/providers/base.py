"""Abstract base class for LLM providers.

Why this exists:
- Allows swapping between LLM backends (OpenAI-compatible, Gemini)
- Enables testing with scripted providers
- Provides a stable interface as providers evolve

How to extend:
1. Subclass LLMProvider
2. Implement ``generate``
3. Register in ``testgen.providers.create_llm_provider``
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from pydantic import BaseModel

from testgen.core.errors import RemoteServiceError


class ProviderConfig(BaseModel):
    """Base configuration for all providers."""

    provider_type: str
    model_name: str
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    timeout: float = 120.0
    extra_params: dict[str, Any] = {}


class LLMProvider(ABC):
    """Abstract interface for LLM providers."""

    def __init__(self, config: ProviderConfig) -> None:
        """Initialize provider with configuration."""
        self.config = config

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: float = 0.2,
        json_output: bool = False,
        model: Optional[str] = None,
    ) -> str:
        """Generate a completion.

        Args:
            prompt: User prompt
            system_prompt: Optional system prompt
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature
            json_output: Ask the backend for a JSON response where supported
            model: Override the configured model for this call

        Returns:
            Generated text

        Raises:
            ProviderError: If generation fails
        """
        pass

    async def close(self) -> None:
        """Release network resources."""
        pass


class ProviderError(RemoteServiceError):
    """Base exception for LLM provider errors."""

    def __init__(self, message: str, provider: str, original_error: Optional[Exception] = None):
        self.provider = provider
        super().__init__(message, service=provider, original_error=original_error)
