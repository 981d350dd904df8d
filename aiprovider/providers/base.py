"""Abstract base class for AI providers.

A provider turns a prompt into one HTTP call against its backend and maps the
reply onto ``WireResponse``. The completion/generation entry points are shared
here; subclasses only describe their wire format.
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Optional

import httpx

from ..completion.prompts import PromptBuilder
from ..completion.response_parser import calculate_confidence, extract_code, extract_suggestions
from ..errors import (
    APIError,
    AuthenticationError,
    ConfigurationError,
    InvalidRequestError,
    ParseError,
    PermissionDeniedError,
    TemplateError,
    TransportError,
    classify_api_error,
)
from ..models.ai_config import AIConfig
from ..models.requests import (
    CodeGenerationRequest,
    CodeGenerationResponse,
    CompletionRequest,
    CompletionResponse,
)
from ..models.wire import WireMessage, WireRequest, WireResponse
from ..templates import substitute_variables
from ..transport import HTTPRequest, HTTPResponse, SDKTransport

logger = logging.getLogger(__name__)

PARSE_FAILURE_MESSAGE = "Failed to parse response"

MESSAGE_ROLES = ("system", "user", "assistant")


class AIProvider(ABC):
    """Uniform interface for any AI backend.

    The configuration is resolved once in ``__init__``: empty model, zero
    max_tokens and zero temperature are replaced by the class defaults. Instances
    keep no per-call state and can be shared across threads.
    """

    name = ""
    DEFAULT_MODEL = ""
    DEFAULT_BASE_URL = ""
    DEFAULT_MAX_TOKENS = 1000
    DEFAULT_TEMPERATURE = 0.7
    DEFAULT_TIMEOUT = 30.0
    API_PATH = ""

    VALIDATION_PROMPT = "Hello"
    VALIDATION_MAX_TOKENS = 10
    VALIDATION_TEMPERATURE = 0.1

    # False when the backend takes system text outside the message list.
    SYSTEM_ROLE_IN_MESSAGES = True

    # Confidence reported for a reply without any content blocks; None means
    # score it like any other reply.
    EMPTY_RESPONSE_CONFIDENCE: Optional[float] = None

    prompt_builder: PromptBuilder = PromptBuilder()

    def __init__(self, config: AIConfig, http_client: Optional[httpx.Client] = None) -> None:
        if config is None:
            raise ConfigurationError("configuration is required")
        if not config.api_key or not config.api_key.strip():
            raise ConfigurationError("API key is required")

        self._config = config.with_defaults(
            model=self.DEFAULT_MODEL,
            max_tokens=self.DEFAULT_MAX_TOKENS,
            temperature=self.DEFAULT_TEMPERATURE,
        )
        self._transport = self._create_transport(self._config, http_client)

        if self._config.base_url:
            logger.info(
                "%s client created with model: %s, base URL: %s",
                self.name, self._config.model, self._config.base_url,
            )
        else:
            logger.info("%s client created with model: %s", self.name, self._config.model)

    # ------------------------------------------------------------------
    # Provider specifics
    # ------------------------------------------------------------------

    @abstractmethod
    def _create_transport(
        self, config: AIConfig, http_client: Optional[httpx.Client]
    ) -> SDKTransport:
        """Build the SDK-backed transport for this backend."""

    @abstractmethod
    def _request_headers(self) -> dict:
        """Extra headers for every request; the SDK client adds authentication."""

    @abstractmethod
    def parse_wire_response(self, body: bytes) -> WireResponse:
        """Decode a successful response body.

        Raises:
            ParseError: the body is not a JSON object, or a known field has
                the wrong type.
        """

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> AIConfig:
        """The resolved configuration (defaults applied)."""
        return self._config

    @property
    def model_name(self) -> str:
        return self._config.model

    # ------------------------------------------------------------------
    # Wire level
    # ------------------------------------------------------------------

    def build_wire_request(
        self,
        prompt: str,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> WireRequest:
        """Wrap *prompt* as a single user message; unset parameters use the config."""
        return WireRequest(
            model=model or self._config.model,
            max_tokens=max_tokens if max_tokens is not None else self._config.max_tokens,
            temperature=temperature if temperature is not None else self._config.temperature,
            messages=(WireMessage(role="user", content=prompt),),
        )

    def send(self, wire_request: WireRequest, timeout: Optional[float] = None) -> WireResponse:
        """Perform one HTTP call and parse the reply.

        Raises:
            TransportError: no response was received (including timeouts).
            APIError: the backend answered with status >= 400.
            ParseError: the success body is not valid JSON.
        """
        response = self._post(wire_request, timeout)
        return self.parse_wire_response(response.body)

    def validate_credentials(self, timeout: Optional[float] = None) -> None:
        """Check the API key with a minimal request; only the status code is read.

        Raises:
            AuthenticationError: HTTP 401.
            PermissionDeniedError: HTTP 403.
            APIError: any other status >= 400.
            TransportError: no response was received.
        """
        logger.info("Validating %s API credentials", self.name)
        wire_request = self.build_wire_request(
            self.VALIDATION_PROMPT,
            max_tokens=self.VALIDATION_MAX_TOKENS,
            temperature=self.VALIDATION_TEMPERATURE,
        )
        try:
            response = self._transport.execute(self._http_request(wire_request), timeout)
        except TransportError as exc:
            logger.error("Credential validation request failed: %s", exc)
            raise TransportError(f"credential validation failed: {exc}") from exc

        if response.status_code == 401:
            raise AuthenticationError("invalid API key", status_code=401)
        if response.status_code == 403:
            raise PermissionDeniedError(
                "API key does not have required permissions", status_code=403
            )
        if response.status_code >= 400:
            raise self._api_error(response)

        logger.info("%s API credentials validated successfully", self.name)

    def close(self) -> None:
        """Release pooled connections held by the underlying SDK client."""
        self._transport.close()

    # ------------------------------------------------------------------
    # Prompt level
    # ------------------------------------------------------------------

    def call_with_prompt(self, prompt: str, timeout: Optional[float] = None) -> bytes:
        """Send *prompt* as-is and return the raw response body."""
        return self._post(self.build_wire_request(prompt), timeout).body

    def call_with_prompt_and_variables(
        self, prompt: str, variables_json: str, timeout: Optional[float] = None
    ) -> bytes:
        """Substitute ``{{name}}`` variables into *prompt*, then ``call_with_prompt``.

        Example::

            provider.call_with_prompt_and_variables(
                "Hello {{name}}, please review this {{language}} code.",
                '{"name": "Alice", "language": "Go"}',
            )

        Raises:
            TemplateError: empty template or invalid variables JSON.
        """
        logger.info("Processing prompt with variables for %s API", self.name)
        try:
            processed = substitute_variables(prompt, variables_json)
        except TemplateError as exc:
            logger.error("Variable substitution failed: %s", exc)
            raise
        return self.call_with_prompt(processed, timeout)

    def call_with_messages(self, messages, timeout: Optional[float] = None) -> bytes:
        """Send a multi-turn conversation and return the raw response body.

        Example::

            provider.call_with_messages([
                WireMessage("system", "You are a helpful assistant."),
                WireMessage("user", "What is the capital of France?"),
                WireMessage("assistant", "The capital of France is Paris."),
                WireMessage("user", "What about Germany?"),
            ])

        Raises:
            InvalidRequestError: no messages, an unknown role or non-string content.
            TransportError, APIError: as for ``call_with_prompt``.
        """
        messages = tuple(messages)
        if not messages:
            raise InvalidRequestError("at least one message is required")
        for message in messages:
            if not isinstance(message, WireMessage) or message.role not in MESSAGE_ROLES:
                raise InvalidRequestError(f"invalid message: {message!r}")
            if not isinstance(message.content, str):
                raise InvalidRequestError(f"message content must be a string: {message!r}")

        logger.info("Processing conversation with %d messages", len(messages))

        system = ""
        if not self.SYSTEM_ROLE_IN_MESSAGES:
            system = "\n\n".join(m.content for m in messages if m.role == "system")
            messages = tuple(m for m in messages if m.role != "system")
            if not messages:
                raise InvalidRequestError("at least one user or assistant message is required")

        wire_request = replace(self.build_wire_request(""), messages=messages, system=system)
        return self._post(wire_request, timeout).body

    def generate_completion(
        self, request: CompletionRequest, timeout: Optional[float] = None
    ) -> CompletionResponse:
        """Complete code at ``request.cursor``.

        Provider failures never raise: they come back in ``error`` with no
        suggestions and zero confidence. A cursor outside the code raises
        ``InvalidRequestError``.
        """
        logger.info("Generating completion for language: %s", request.language)
        prompt = self.prompt_builder.build_completion_prompt(request)

        try:
            wire_response = self.send(self.build_wire_request(prompt), timeout)
        except ParseError as exc:
            logger.error("Failed to parse completion response: %s", exc)
            return CompletionResponse.failed(PARSE_FAILURE_MESSAGE)
        except (TransportError, APIError) as exc:
            return CompletionResponse.failed(f"ERROR: {exc}")

        suggestions = extract_suggestions(wire_response)
        confidence = calculate_confidence(wire_response, self.EMPTY_RESPONSE_CONFIDENCE)
        logger.info("Generated %d completion suggestions", len(suggestions))
        return CompletionResponse(suggestions=suggestions, confidence=confidence)

    def generate_code(
        self, request: CodeGenerationRequest, timeout: Optional[float] = None
    ) -> CodeGenerationResponse:
        """Generate code from a natural-language prompt; failures land in ``error``."""
        logger.info("Generating code for language: %s", request.language)
        prompt = self.prompt_builder.build_code_generation_prompt(request)

        try:
            wire_response = self.send(self.build_wire_request(prompt), timeout)
        except ParseError as exc:
            logger.error("Failed to parse code generation response: %s", exc)
            return CodeGenerationResponse.failed(PARSE_FAILURE_MESSAGE)
        except (TransportError, APIError) as exc:
            return CodeGenerationResponse.failed(f"ERROR: {exc}")

        code = extract_code(wire_response)
        logger.info("Generated code with %d characters", len(code))
        return CodeGenerationResponse(code=code)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _http_request(self, wire_request: WireRequest) -> HTTPRequest:
        return HTTPRequest(
            method="POST",
            path=self.API_PATH,
            headers=self._request_headers(),
            body=wire_request.to_dict(),
        )

    def _post(self, wire_request: WireRequest, timeout: Optional[float]) -> HTTPResponse:
        response = self._transport.execute(self._http_request(wire_request), timeout)
        if response.status_code >= 400:
            error = self._api_error(response)
            logger.error("%s request failed: %s", self.name, error)
            raise error
        return response

    @staticmethod
    def _api_error(response: HTTPResponse) -> APIError:
        """Build an APIError from an error body, falling back to the bare status."""
        error_type = ""
        message = ""
        try:
            payload = json.loads(response.body)
        except (ValueError, TypeError):
            payload = None

        if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
            error = payload["error"]
            message = error.get("message") or ""
            error_type = error.get("code") or error.get("type") or ""

        if message:
            text = f"API error: {message}"
        else:
            text = f"API error: HTTP {response.status_code}"
        return classify_api_error(response.status_code, error_type, text)

    @staticmethod
    def _load_json(body: bytes) -> dict:
        try:
            payload = json.loads(body)
        except ValueError as exc:
            raise ParseError(f"failed to parse response: {exc}") from exc
        if not isinstance(payload, dict):
            raise ParseError(
                f"failed to parse response: expected a JSON object, got {type(payload).__name__}"
            )
        return payload

    @staticmethod
    def _field(payload: dict, key: str, kind: type, default):
        """``payload[key]`` if it has type *kind*; *default* when missing or null.

        Raises:
            ParseError: the value is present with another type.
        """
        value = payload.get(key)
        if value is None:
            return default
        if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
            raise ParseError(
                f"failed to parse response: {key!r} should be {kind.__name__}, "
                f"got {type(value).__name__}"
            )
        return value
