"""Tests for create_client."""

import pytest

from aiprovider.errors import ConfigurationError, UnsupportedProviderError
from aiprovider.models.ai_config import AIConfig
from aiprovider.providers import ClaudeProvider, OpenAIProvider, create_client


class TestCreateClient:
    def test_claude(self, claude_config):
        client = create_client(claude_config)
        assert isinstance(client, ClaudeProvider)
        assert client.model_name == "claude-3-sonnet-20240229"
        client.close()

    def test_openai(self, openai_config):
        client = create_client(openai_config)
        assert isinstance(client, OpenAIProvider)
        assert client.model_name == "gpt-4o-mini"
        client.close()

    @pytest.mark.parametrize("name", ["Claude", " OPENAI "])
    def test_provider_name_case_insensitive(self, name):
        client = create_client(AIConfig(provider=name, api_key="k"))
        assert client.name.lower() == name.strip().lower()
        client.close()

    def test_model_override(self):
        client = create_client(AIConfig(provider="openai", api_key="k", model="gpt-4o"))
        assert client.model_name == "gpt-4o"
        client.close()

    def test_unknown_provider(self):
        with pytest.raises(UnsupportedProviderError, match="unsupported provider: gemini"):
            create_client(AIConfig(provider="gemini", api_key="k"))

    def test_unknown_provider_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            create_client(AIConfig(provider="", api_key="k"))

    def test_missing_config(self):
        with pytest.raises(ConfigurationError, match="configuration is required"):
            create_client(None)

    @pytest.mark.parametrize("provider", ["claude", "openai"])
    def test_missing_api_key(self, provider):
        with pytest.raises(ConfigurationError, match="API key is required"):
            create_client(AIConfig(provider=provider))

    def test_http_client_passed_through(self, claude_config, stub_server):
        http_client = stub_server.client(json_body={"content": []})
        client = create_client(claude_config, http_client=http_client)
        client.call_with_prompt("x")
        assert len(stub_server.requests) == 1
