"""OpenAI (Chat Completions API) provider.

Works with any endpoint that speaks the Chat Completions protocol; point
``base_url`` at it (Azure OpenAI, a local server, ...). ``choices[i]`` become
content blocks in order and the first choice's ``finish_reason`` becomes the
stop reason.
"""

from typing import Optional

import httpx

from ..completion.prompts import OpenAIPromptBuilder
from ..errors import ParseError
from ..models.ai_config import AIConfig
from ..models.wire import ContentBlock, Usage, WireResponse
from ..transport import SDKTransport
from .base import AIProvider


class OpenAIProvider(AIProvider):
    name = "OpenAI"
    DEFAULT_MODEL = "gpt-4o-mini"
    DEFAULT_BASE_URL = "https://api.openai.com/v1"
    DEFAULT_TIMEOUT = 25.0
    API_PATH = "/chat/completions"

    VALIDATION_MAX_TOKENS = 5
    EMPTY_RESPONSE_CONFIDENCE = 0.0

    prompt_builder = OpenAIPromptBuilder()

    def _create_transport(
        self, config: AIConfig, http_client: Optional[httpx.Client]
    ) -> SDKTransport:
        try:
            import openai
        except ImportError as exc:
            raise ImportError(
                "Install the 'openai' package to use the OpenAI provider: "
                "pip install openai"
            ) from exc

        client = openai.OpenAI(
            api_key=config.api_key,
            base_url=config.base_url or self.DEFAULT_BASE_URL,
            timeout=self.DEFAULT_TIMEOUT,
            max_retries=0,
            http_client=http_client,
        )
        return SDKTransport(
            client,
            connection_error=openai.APIConnectionError,
            status_error=openai.APIStatusError,
            sdk_error=openai.OpenAIError,
        )

    def _request_headers(self) -> dict:
        # Authorization: Bearer is sent by the SDK client.
        return {}

    def parse_wire_response(self, body: bytes) -> WireResponse:
        payload = self._load_json(body)

        choices = []
        for choice in self._field(payload, "choices", list, []):
            if not isinstance(choice, dict):
                raise ParseError("failed to parse response: choice is not an object")
            choices.append(choice)

        blocks = []
        roles = []
        for choice in choices:
            message = self._field(choice, "message", dict, {})
            blocks.append(ContentBlock(type="text", text=self._field(message, "content", str, "")))
            roles.append(self._field(message, "role", str, ""))

        usage = self._field(payload, "usage", dict, {})
        return WireResponse(
            content=blocks,
            stop_reason=self._field(choices[0], "finish_reason", str, "") if choices else "",
            id=self._field(payload, "id", str, ""),
            type=self._field(payload, "object", str, ""),
            role=roles[0] if roles else "",
            model=self._field(payload, "model", str, ""),
            usage=Usage(
                input_tokens=self._field(usage, "prompt_tokens", int, 0),
                output_tokens=self._field(usage, "completion_tokens", int, 0),
            ),
        )
