"""
LLM Provider Factory - Creates the configured LLM provider instance.
"""

from .base import LLMProvider
from .chat_completions import ChatCompletionsProvider

# Providers that speak the OpenAI chat/completions wire format
SUPPORTED_PROVIDERS = ("huggingface", "openai")


def create_llm_provider(
    provider: str = "huggingface",
    api_key: str = "",
    model: str = "",
    endpoint_url: str = "",
    **kwargs
) -> LLMProvider:
    """
    Create an LLM provider instance based on configuration.

    Args:
        provider: Provider name ("huggingface" or "openai")
        api_key: Bearer credential for the endpoint
        model: Model identifier sent with every request
        endpoint_url: Full chat/completions URL
        **kwargs: timeout, default_temperature, default_max_tokens

    Returns:
        LLMProvider instance

    Raises:
        ValueError: for an unknown provider or missing credential/endpoint
    """
    if provider not in SUPPORTED_PROVIDERS:
        raise ValueError(f"Unsupported LLM provider: {provider}")
    if not api_key or not endpoint_url or not model:
        raise ValueError("LLM provider requires api_key, model and endpoint_url")

    return ChatCompletionsProvider(
        api_key=api_key,
        model=model,
        endpoint_url=endpoint_url,
        provider_name=provider,
        **kwargs
    )
