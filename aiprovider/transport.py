"""Single-shot HTTP execution on top of a vendor SDK client.

The Anthropic and OpenAI SDK clients both expose generic ``get``/``post``/...
methods that accept ``cast_to=httpx.Response`` and hand back the raw response.
``SDKTransport`` wraps those so an adapter can send a method, path, headers and
body, and get back a status code and raw bytes. Error statuses are returned, not
raised, so the adapter can classify them itself.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

import httpx

from .errors import TransportError

logger = logging.getLogger(__name__)

_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")


@dataclass(frozen=True)
class HTTPRequest:
    method: str
    path: str
    headers: dict = field(default_factory=dict)
    body: Optional[dict] = None


@dataclass(frozen=True)
class HTTPResponse:
    status_code: int
    body: bytes
    headers: dict = field(default_factory=dict)


class SDKTransport:
    """Executes one request through an SDK client; never retries.

    Args:
        client: An ``anthropic.Anthropic`` or ``openai.OpenAI`` instance created
            with ``max_retries=0``.
        connection_error: The SDK's "no response" exception class
            (``APIConnectionError``, which also covers timeouts).
        status_error: The SDK's HTTP-status exception class (``APIStatusError``).
        sdk_error: The SDK's base exception class (``AnthropicError`` /
            ``OpenAIError``). Any other SDK failure, such as a raw response it
            cannot build, is reported as TransportError.
    """

    def __init__(
        self,
        client,
        connection_error: type,
        status_error: type,
        sdk_error: Optional[type] = None,
    ) -> None:
        self._client = client
        self._connection_error = connection_error
        self._status_error = status_error
        self._sdk_error = sdk_error or ()

    def execute(self, request: HTTPRequest, timeout: Optional[float] = None) -> HTTPResponse:
        method = request.method.upper()
        if method not in _METHODS:
            raise ValueError(f"Unsupported HTTP method: {request.method}")

        options: dict = {"headers": dict(request.headers)}
        if timeout is not None:
            options["timeout"] = timeout

        kwargs: dict = {"cast_to": httpx.Response, "options": options}
        if method != "GET" and request.body is not None:
            kwargs["body"] = request.body

        sender = getattr(self._client, method.lower())
        try:
            response = sender(request.path, **kwargs)
        except self._status_error as exc:
            response = exc.response
        except self._connection_error as exc:
            logger.error("%s %s failed without a response: %s", method, request.path, exc)
            raise TransportError(f"request failed: {exc}") from exc
        except self._sdk_error as exc:
            logger.error("%s %s failed in the SDK client: %s", method, request.path, exc)
            raise TransportError(f"request failed: {exc}") from exc

        if not isinstance(response, httpx.Response):
            raise TransportError(
                f"request failed: expected an httpx.Response, got {type(response).__name__}"
            )
        body = response.read()
        logger.debug("%s %s -> %d", method, request.path, response.status_code)
        return HTTPResponse(
            status_code=response.status_code,
            body=body,
            headers=dict(response.headers),
        )

    def close(self) -> None:
        self._client.close()
