"""Exception hierarchy shared by all providers.

Template and configuration problems are programmer errors and always propagate.
Transport, API and parse failures are raised by the low-level calls
(``send``, ``call_with_prompt``, ``validate_credentials``) and absorbed into the
``error`` field by ``generate_completion`` / ``generate_code``.
"""

from typing import Optional


class ProviderError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(ProviderError, ValueError):
    """Missing or invalid client configuration."""


class UnsupportedProviderError(ConfigurationError):
    pass


class TemplateError(ProviderError, ValueError):
    """Prompt template could not be processed."""


class InvalidRequestError(ProviderError, ValueError):
    """The caller passed a request that violates its contract (e.g. cursor out of range)."""


class TransportError(ProviderError):
    """No HTTP response was obtained (connection failure, timeout)."""


class ParseError(ProviderError):
    """The provider answered with a body that is not valid JSON."""


class APIError(ProviderError):
    """The provider answered with an HTTP error status."""

    kind = "api_error"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_type: str = "",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_type = error_type


class AuthenticationError(APIError):
    kind = "authentication"


class PermissionDeniedError(APIError):
    kind = "permission"


class NotFoundError(APIError):
    kind = "not_found"


class RateLimitError(APIError):
    kind = "rate_limit"


# Provider error "type" / "code" strings for both backends.
_ERROR_TYPES = {
    "authentication_error": AuthenticationError,
    "invalid_api_key": AuthenticationError,
    "permission_error": PermissionDeniedError,
    "not_found_error": NotFoundError,
    "model_not_found": NotFoundError,
    "rate_limit_error": RateLimitError,
    "rate_limit_exceeded": RateLimitError,
    "insufficient_quota": RateLimitError,
}

_STATUS_CODES = {
    401: AuthenticationError,
    403: PermissionDeniedError,
    404: NotFoundError,
    429: RateLimitError,
}


def classify_api_error(
    status_code: Optional[int],
    error_type: str = "",
    message: str = "",
) -> APIError:
    """Build the most specific APIError for a failed provider call.

    The provider's error type string takes precedence over the HTTP status.
    """
    cls = _ERROR_TYPES.get(error_type) or _STATUS_CODES.get(status_code, APIError)
    return cls(message, status_code=status_code, error_type=error_type)
