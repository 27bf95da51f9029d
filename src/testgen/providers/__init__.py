"""Provider abstractions: LLM backends."""

from testgen.config.schema import LLMConfig
from testgen.providers.base import LLMProvider, ProviderConfig, ProviderError


def create_llm_provider(config: ProviderConfig) -> LLMProvider:
    """Factory function to create LLM providers based on configuration.

    Args:
        config: Provider configuration with provider_type

    Returns:
        Initialized LLM provider

    Raises:
        ValueError: If provider_type is unknown

    Example:
        config = ProviderConfig(provider_type="gemini", model_name="gemini-2.5-flash")
        provider = create_llm_provider(config)
    """
    provider_type = config.provider_type.lower()

    if provider_type == "openai":
        from testgen.providers.openai_llm import OpenAILLMProvider

        return OpenAILLMProvider(config)

    elif provider_type == "gemini":
        from testgen.providers.gemini import GeminiLLMProvider

        return GeminiLLMProvider(config)

    else:
        raise ValueError(
            f"Unknown LLM provider type: '{provider_type}'. "
            f"Supported types: openai, gemini"
        )


def provider_config_from(llm: LLMConfig) -> ProviderConfig:
    """Build a ProviderConfig from the application's LLM section."""
    return ProviderConfig(
        provider_type=llm.provider.value,
        model_name=llm.model_name,
        api_key=llm.api_key,
        base_url=llm.base_url,
        timeout=llm.timeout,
        extra_params=llm.extra_params,
    )


__all__ = [
    "LLMProvider",
    "ProviderConfig",
    "ProviderError",
    "create_llm_provider",
    "provider_config_from",
]
