"""Claude (Anthropic Messages API) provider."""

from typing import Optional

import httpx

from ..completion.prompts import PromptBuilder
from ..errors import ParseError
from ..models.ai_config import AIConfig
from ..models.wire import ContentBlock, Usage, WireResponse
from ..transport import SDKTransport
from .base import AIProvider

ANTHROPIC_VERSION = "2023-06-01"


class ClaudeProvider(AIProvider):
    name = "Claude"
    DEFAULT_MODEL = "claude-3-sonnet-20240229"
    DEFAULT_BASE_URL = "https://api.anthropic.com"
    API_PATH = "/v1/messages"

    # The Messages API takes system text as a top-level field.
    SYSTEM_ROLE_IN_MESSAGES = False

    prompt_builder = PromptBuilder()

    def _create_transport(
        self, config: AIConfig, http_client: Optional[httpx.Client]
    ) -> SDKTransport:
        try:
            import anthropic
        except ImportError as exc:
            raise ImportError(
                "Install the 'anthropic' package to use the Claude provider: "
                "pip install anthropic"
            ) from exc

        client = anthropic.Anthropic(
            api_key=config.api_key,
            base_url=config.base_url or self.DEFAULT_BASE_URL,
            timeout=self.DEFAULT_TIMEOUT,
            max_retries=0,
            http_client=http_client,
        )
        return SDKTransport(
            client,
            connection_error=anthropic.APIConnectionError,
            status_error=anthropic.APIStatusError,
            sdk_error=anthropic.AnthropicError,
        )

    def _request_headers(self) -> dict:
        # x-api-key is sent by the SDK client from the configured key.
        return {"anthropic-version": ANTHROPIC_VERSION}

    def parse_wire_response(self, body: bytes) -> WireResponse:
        payload = self._load_json(body)

        blocks = []
        for block in self._field(payload, "content", list, []):
            if not isinstance(block, dict):
                raise ParseError("failed to parse response: content block is not an object")
            blocks.append(ContentBlock(
                type=self._field(block, "type", str, ""),
                text=self._field(block, "text", str, ""),
            ))

        usage = self._field(payload, "usage", dict, {})
        return WireResponse(
            content=blocks,
            stop_reason=self._field(payload, "stop_reason", str, ""),
            id=self._field(payload, "id", str, ""),
            type=self._field(payload, "type", str, ""),
            role=self._field(payload, "role", str, ""),
            model=self._field(payload, "model", str, ""),
            stop_sequence=self._field(payload, "stop_sequence", str, None),
            usage=Usage(
                input_tokens=self._field(usage, "input_tokens", int, 0),
                output_tokens=self._field(usage, "output_tokens", int, 0),
            ),
        )
