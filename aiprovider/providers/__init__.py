"""AI provider registry."""

import logging
from typing import Optional

import httpx

from ..errors import ConfigurationError, UnsupportedProviderError
from ..models.ai_config import AIConfig
from .base import AIProvider
from .claude_provider import ClaudeProvider
from .openai_provider import OpenAIProvider

__all__ = [
    "AIProvider",
    "ClaudeProvider",
    "OpenAIProvider",
    "PROVIDERS",
    "create_client",
]

logger = logging.getLogger(__name__)

PROVIDERS = {
    "claude": ClaudeProvider,
    "openai": OpenAIProvider,
}


def create_client(
    config: Optional[AIConfig], http_client: Optional[httpx.Client] = None
) -> AIProvider:
    """Instantiate the correct AIProvider for ``config.provider``.

    Args:
        config: Provider settings; model, max_tokens and temperature may be
            left at their zero values to get the provider defaults.
        http_client: Optional ``httpx.Client`` handed to the vendor SDK
            (custom proxies, test transports).

    Returns:
        Configured AIProvider instance.

    Raises:
        ConfigurationError: *config* is missing or has no API key.
        UnsupportedProviderError: the provider name is not known.
    """
    if config is None:
        raise ConfigurationError("configuration is required")

    logger.info("Creating AI client for provider: %s", config.provider)

    provider_cls = PROVIDERS.get((config.provider or "").strip().lower())
    if provider_cls is None:
        raise UnsupportedProviderError(f"unsupported provider: {config.provider}")
    return provider_cls(config, http_client=http_client)
