"""Provider-agnostic client for Claude and OpenAI code completion/generation."""

from .completion.context import ContextProcessor
from .config import Config
from .errors import (
    APIError,
    AuthenticationError,
    ConfigurationError,
    InvalidRequestError,
    NotFoundError,
    ParseError,
    PermissionDeniedError,
    ProviderError,
    RateLimitError,
    TemplateError,
    TransportError,
    UnsupportedProviderError,
)
from .models.ai_config import AIConfig
from .models.requests import (
    CodeContext,
    CodeGenerationRequest,
    CodeGenerationResponse,
    CompletionRequest,
    CompletionResponse,
    StyleAnalysis,
)
from .models.wire import WireMessage
from .providers import AIProvider, ClaudeProvider, OpenAIProvider, create_client
from .templates import substitute_variables

__all__ = [
    "AIConfig",
    "AIProvider",
    "APIError",
    "AuthenticationError",
    "ClaudeProvider",
    "CodeContext",
    "CodeGenerationRequest",
    "CodeGenerationResponse",
    "CompletionRequest",
    "CompletionResponse",
    "Config",
    "ConfigurationError",
    "ContextProcessor",
    "InvalidRequestError",
    "NotFoundError",
    "OpenAIProvider",
    "ParseError",
    "PermissionDeniedError",
    "ProviderError",
    "RateLimitError",
    "StyleAnalysis",
    "TemplateError",
    "TransportError",
    "UnsupportedProviderError",
    "WireMessage",
    "create_client",
    "substitute_variables",
]
