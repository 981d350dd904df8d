"""Configuration loaded from environment variables (and a ``.env`` file)."""

import logging
import os
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlparse

from dotenv import load_dotenv

from .errors import ConfigurationError, UnsupportedProviderError
from .models.ai_config import AIConfig

logger = logging.getLogger(__name__)


def validate_endpoint_url(endpoint: str) -> None:
    """Raise ConfigurationError unless *endpoint* is an http(s) URL with a host.

    Empty values are accepted and mean "use the provider default".
    """
    if not endpoint:
        return

    parsed = urlparse(endpoint)
    if not parsed.scheme:
        raise ConfigurationError(
            f"invalid endpoint {endpoint!r}: URL must include protocol scheme (http:// or https://)"
        )
    if parsed.scheme not in ("http", "https"):
        raise ConfigurationError(
            f"invalid endpoint {endpoint!r}: URL protocol must be http or https, got: {parsed.scheme}"
        )
    if not parsed.hostname or " " in parsed.netloc:
        raise ConfigurationError(f"invalid endpoint {endpoint!r}: URL must include a valid hostname")
    if parsed.query:
        raise ConfigurationError(
            f"invalid endpoint {endpoint!r}: URL must not contain query parameters"
        )


def _int_env(name: str) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return 0
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc


def _float_env(name: str) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return 0.0
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc


@dataclass
class Config:
    # Which backend create_client() should build: "claude" or "openai".
    ai_provider: str = "claude"

    # Claude
    claude_api_key: str = field(default="", repr=False)
    claude_api_endpoint: str = ""      # empty: https://api.anthropic.com
    claude_model: str = ""             # empty: provider default

    # OpenAI (or any Chat Completions compatible endpoint)
    openai_api_key: str = field(default="", repr=False)
    openai_api_endpoint: str = ""      # empty: https://api.openai.com/v1
    openai_model: str = ""

    # Shared generation settings; 0 means "provider default".
    max_tokens: int = 0
    temperature: float = 0.0

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "Config":
        """Read settings from the process environment after loading ``.env``.

        Variables already set in the environment win over the file.
        """
        load_dotenv(env_file)

        config = cls(
            ai_provider=os.getenv("AI_PROVIDER", "claude").strip().lower(),
            claude_api_key=os.getenv("CLAUDE_API_KEY") or os.getenv("ANTHROPIC_API_KEY", ""),
            claude_api_endpoint=os.getenv("CLAUDE_API_ENDPOINT", ""),
            claude_model=os.getenv("CLAUDE_MODEL", ""),
            openai_api_key=os.getenv("OPENAI_API_KEY", ""),
            openai_api_endpoint=os.getenv("OPENAI_API_ENDPOINT", ""),
            openai_model=os.getenv("OPENAI_MODEL", ""),
            max_tokens=_int_env("AI_MAX_TOKENS"),
            temperature=_float_env("AI_TEMPERATURE"),
        )
        validate_endpoint_url(config.claude_api_endpoint)
        validate_endpoint_url(config.openai_api_endpoint)

        if os.getenv("AI_TEMPERATURE", "").strip() and config.temperature == 0.0:
            logger.warning(
                "AI_TEMPERATURE=0 is treated as unset; the provider default temperature applies"
            )
        return config

    def to_ai_config(self, provider: Optional[str] = None) -> AIConfig:
        """Build the AIConfig for *provider* (default: ``ai_provider``).

        Raises:
            ConfigurationError: the provider is unknown or its API key is unset.
        """
        provider = (provider or self.ai_provider).lower()
        if provider == "claude":
            api_key, endpoint, model = (
                self.claude_api_key, self.claude_api_endpoint, self.claude_model,
            )
            key_var = "CLAUDE_API_KEY"
        elif provider == "openai":
            api_key, endpoint, model = (
                self.openai_api_key, self.openai_api_endpoint, self.openai_model,
            )
            key_var = "OPENAI_API_KEY"
        else:
            raise UnsupportedProviderError(
                f"Unknown AI_PROVIDER '{provider}'. Supported values: 'claude', 'openai'."
            )

        if not api_key:
            raise ConfigurationError(f"{key_var} is required when AI_PROVIDER={provider}")

        return AIConfig(
            provider=provider,
            api_key=api_key,
            base_url=endpoint or None,
            model=model,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )

