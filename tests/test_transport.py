"""Tests for SDKTransport using a mocked SDK client."""

import httpx
import pytest

from aiprovider.errors import TransportError
from aiprovider.transport import HTTPRequest, SDKTransport


class FakeSDKError(Exception):
    pass


class FakeConnectionError(FakeSDKError):
    pass


class FakeStatusError(FakeSDKError):
    def __init__(self, response):
        super().__init__(f"status {response.status_code}")
        self.response = response


@pytest.fixture
def sdk_client(mocker):
    return mocker.MagicMock()


@pytest.fixture
def transport(sdk_client) -> SDKTransport:
    return SDKTransport(
        sdk_client,
        connection_error=FakeConnectionError,
        status_error=FakeStatusError,
        sdk_error=FakeSDKError,
    )


class TestSDKTransport:
    def test_post_forwards_path_headers_body(self, transport, sdk_client):
        sdk_client.post.return_value = httpx.Response(200, content=b'{"ok": true}')

        response = transport.execute(
            HTTPRequest(method="POST", path="/v1/messages", headers={"x-api-key": "k"}, body={"a": 1}),
            timeout=2.5,
        )

        sdk_client.post.assert_called_once_with(
            "/v1/messages",
            cast_to=httpx.Response,
            options={"headers": {"x-api-key": "k"}, "timeout": 2.5},
            body={"a": 1},
        )
        assert response.status_code == 200
        assert response.body == b'{"ok": true}'

    def test_timeout_omitted_when_not_given(self, transport, sdk_client):
        sdk_client.post.return_value = httpx.Response(200, content=b"{}")
        transport.execute(HTTPRequest(method="post", path="/x", body={}))
        assert "timeout" not in sdk_client.post.call_args.kwargs["options"]

    def test_get_sends_no_body(self, transport, sdk_client):
        sdk_client.get.return_value = httpx.Response(200, content=b"[]")
        transport.execute(HTTPRequest(method="GET", path="/models", body={"ignored": True}))
        assert "body" not in sdk_client.get.call_args.kwargs

    def test_error_status_returned_not_raised(self, transport, sdk_client):
        error_response = httpx.Response(
            429, content=b'{"error": {"message": "slow"}}', headers={"retry-after": "3"}
        )
        sdk_client.post.side_effect = FakeStatusError(error_response)

        response = transport.execute(HTTPRequest(method="POST", path="/x", body={}))

        assert response.status_code == 429
        assert response.body == b'{"error": {"message": "slow"}}'
        assert response.headers["retry-after"] == "3"

    def test_connection_error_raises_transport_error(self, transport, sdk_client):
        sdk_client.post.side_effect = FakeConnectionError("Connection error.")
        with pytest.raises(TransportError, match="request failed: Connection error."):
            transport.execute(HTTPRequest(method="POST", path="/x", body={}))

    def test_unsupported_method(self, transport):
        with pytest.raises(ValueError, match="Unsupported HTTP method"):
            transport.execute(HTTPRequest(method="TRACE", path="/x"))

    def test_close(self, transport, sdk_client):
        transport.close()
        sdk_client.close.assert_called_once_with()

    def test_other_sdk_error_raises_transport_error(self, transport, sdk_client):
        sdk_client.post.side_effect = FakeSDKError("could not build response")
        with pytest.raises(TransportError, match="request failed: could not build response"):
            transport.execute(HTTPRequest(method="POST", path="/x", body={}))

    def test_non_sdk_error_propagates(self, transport, sdk_client):
        sdk_client.post.side_effect = KeyError("bug")
        with pytest.raises(KeyError):
            transport.execute(HTTPRequest(method="POST", path="/x", body={}))

    def test_unexpected_response_type_raises_transport_error(self, transport, sdk_client):
        sdk_client.post.return_value = {"parsed": "object"}
        with pytest.raises(TransportError, match="expected an httpx.Response"):
            transport.execute(HTTPRequest(method="POST", path="/x", body={}))

    def test_sdk_error_optional(self, sdk_client):
        transport = SDKTransport(
            sdk_client, connection_error=FakeConnectionError, status_error=FakeStatusError
        )
        sdk_client.post.side_effect = FakeSDKError("boom")
        with pytest.raises(FakeSDKError):
            transport.execute(HTTPRequest(method="POST", path="/x", body={}))
