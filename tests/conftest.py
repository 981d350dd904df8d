"""Shared pytest fixtures."""

import json

import httpx
import pytest

from aiprovider.models.ai_config import AIConfig
from aiprovider.models.requests import CodeContext
from aiprovider.providers import ClaudeProvider, OpenAIProvider


class StubServer:
    """Answers every request sent through ``client()`` with one canned reply.

    Requests are recorded so tests can inspect URL, headers and JSON body.
    """

    def __init__(self) -> None:
        self.requests: list = []

    def client(self, status_code: int = 200, json_body=None, content=None, exc=None) -> httpx.Client:
        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            if exc is not None:
                raise exc
            if content is not None:
                return httpx.Response(status_code, content=content)
            return httpx.Response(status_code, json=json_body if json_body is not None else {})

        return httpx.Client(transport=httpx.MockTransport(handler))

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    @property
    def last_json(self) -> dict:
        return json.loads(self.last_request.content)


def claude_reply(text="", stop_reason="end_turn", blocks=None) -> dict:
    """A Messages API success body."""
    if blocks is None:
        blocks = [{"type": "text", "text": text}]
    return {
        "id": "msg_01",
        "type": "message",
        "role": "assistant",
        "model": "claude-3-sonnet-20240229",
        "content": blocks,
        "stop_reason": stop_reason,
        "stop_sequence": None,
        "usage": {"input_tokens": 12, "output_tokens": 7},
    }


def openai_reply(*texts, finish_reason="stop") -> dict:
    """A Chat Completions success body with one choice per text."""
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "gpt-4o-mini",
        "choices": [
            {
                "index": i,
                "message": {"role": "assistant", "content": text},
                "finish_reason": finish_reason,
            }
            for i, text in enumerate(texts)
        ],
        "usage": {"prompt_tokens": 20, "completion_tokens": 5, "total_tokens": 25},
    }


@pytest.fixture
def stub_server() -> StubServer:
    return StubServer()


@pytest.fixture
def claude_config() -> AIConfig:
    return AIConfig(provider="claude", api_key="sk-ant-test")


@pytest.fixture
def openai_config() -> AIConfig:
    return AIConfig(provider="openai", api_key="sk-test")


@pytest.fixture
def make_claude(claude_config, stub_server):
    """Build a ClaudeProvider whose HTTP calls hit ``stub_server``."""

    def _make(config=None, **reply) -> ClaudeProvider:
        return ClaudeProvider(config or claude_config, http_client=stub_server.client(**reply))

    return _make


@pytest.fixture
def make_openai(openai_config, stub_server):
    """Build an OpenAIProvider whose HTTP calls hit ``stub_server``."""

    def _make(config=None, **reply) -> OpenAIProvider:
        return OpenAIProvider(config or openai_config, http_client=stub_server.client(**reply))

    return _make


@pytest.fixture
def go_context() -> CodeContext:
    return CodeContext(
        current_function="handleRequest",
        imports=['import "fmt"', 'import "net/http"'],
        project_type="Go HTTP",
    )
