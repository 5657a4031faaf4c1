"""Tests for GeminiClient."""

import aiohttp
import pytest
from aioresponses import aioresponses

from gembridge.gateway.clients.gemini_client import (
    DEFAULT_BASE_URL,
    GeminiClient,
    GeminiClientConfig,
    UpstreamError,
    parse_backend_message,
)
from gembridge.gateway.transforms.types import BackendCall

BASE_URL = "https://gemini.test/v1/models"
GENERATE_URL = f"{BASE_URL}/gemini-pro:generateContent?key=test-key"

GENERATE_CALL = BackendCall(
    model="gemini-pro",
    method="generateContent",
    payload={"contents": [{"parts": [{"text": "Hi"}]}]},
)


class TestGeminiClientConfig:
    """Tests for GeminiClientConfig defaults."""

    def test_default_values(self):
        """Config should have sensible defaults."""
        config = GeminiClientConfig()

        assert config.base_url == DEFAULT_BASE_URL
        assert config.base_url == "https://generativelanguage.googleapis.com/v1/models"
        assert config.connect_timeout == 10.0
        assert config.read_timeout == 300.0


class TestGeminiClientUrl:
    """Tests for backend URL building."""

    def test_url_for_each_method(self):
        """URL is {base}/{model}:{method}."""
        client = GeminiClient(config=GeminiClientConfig(base_url=BASE_URL + "/"))

        assert client.url_for(GENERATE_CALL) == f"{BASE_URL}/gemini-pro:generateContent"
        assert (
            client.url_for(BackendCall(model="text-embedding-004", method="batchEmbedContents"))
            == f"{BASE_URL}/text-embedding-004:batchEmbedContents"
        )


class TestGeminiClientSend:
    """Tests for GeminiClient.send()."""

    @pytest.fixture
    async def client(self):
        client = GeminiClient(config=GeminiClientConfig(base_url=BASE_URL))
        await client.connect()
        yield client
        await client.close()

    async def test_successful_request(self, client):
        """Successful request returns the decoded body."""
        with aioresponses() as m:
            m.post(GENERATE_URL, payload={"candidates": [{"text": "Hello!"}]})

            response = await client.send(GENERATE_CALL, "test-key", trace_id="test")

            assert response == {"candidates": [{"text": "Hello!"}]}

    async def test_sends_payload_and_key(self, client):
        """Payload is sent as JSON and the key as a query parameter."""
        with aioresponses() as m:
            m.post(GENERATE_URL, payload={})

            await client.send(GENERATE_CALL, "test-key")

            [(method, url)] = list(m.requests.keys())
            assert method == "POST"
            assert url.query["key"] == "test-key"
            [request_call] = m.requests[(method, url)]
            assert request_call.kwargs["json"] == GENERATE_CALL.payload

    async def test_error_status_raises(self, client):
        """Non-2xx raises UpstreamError carrying the backend message."""
        with aioresponses() as m:
            m.post(
                GENERATE_URL,
                status=429,
                payload={
                    "error": {
                        "code": 429,
                        "message": "Quota exceeded",
                        "status": "RESOURCE_EXHAUSTED",
                    }
                },
            )

            with pytest.raises(UpstreamError) as exc_info:
                await client.send(GENERATE_CALL, "test-key")

            assert exc_info.value.status_code == 429
            assert exc_info.value.backend_message == "Quota exceeded"
            assert str(exc_info.value) == "Upstream returned 429"

    async def test_no_retry(self, client):
        """A failure is not retried; the second mocked response is never used."""
        with aioresponses() as m:
            m.post(GENERATE_URL, status=500, body="Server error")
            m.post(GENERATE_URL, payload={"candidates": []})

            with pytest.raises(UpstreamError) as exc_info:
                await client.send(GENERATE_CALL, "test-key")

            assert exc_info.value.status_code == 500
            assert exc_info.value.backend_message is None
            assert exc_info.value.response_body == "Server error"

    async def test_malformed_body_raises(self, client):
        """A 200 with a non-JSON body raises UpstreamError with 502."""
        with aioresponses() as m:
            m.post(GENERATE_URL, status=200, body="<html>oops</html>")

            with pytest.raises(UpstreamError) as exc_info:
                await client.send(GENERATE_CALL, "test-key")

            assert exc_info.value.status_code == 502

    async def test_non_object_body_raises(self, client):
        """A 200 with a JSON array raises UpstreamError."""
        with aioresponses() as m:
            m.post(GENERATE_URL, status=200, payload=[1, 2])

            with pytest.raises(UpstreamError):
                await client.send(GENERATE_CALL, "test-key")

    async def test_connection_error_propagates(self, client):
        """Transport failures propagate as aiohttp errors."""
        with aioresponses() as m:
            m.post(GENERATE_URL, exception=aiohttp.ClientConnectionError("refused"))

            with pytest.raises(aiohttp.ClientConnectionError):
                await client.send(GENERATE_CALL, "test-key")

    async def test_client_not_connected_raises(self):
        """Sending without connecting should raise RuntimeError."""
        client = GeminiClient(config=GeminiClientConfig(base_url=BASE_URL))

        with pytest.raises(RuntimeError, match="not connected"):
            await client.send(GENERATE_CALL, "test-key")


class TestParseBackendMessage:
    """Tests for Gemini error body parsing."""

    def test_structured_error(self):
        """error.message is extracted."""
        assert parse_backend_message('{"error": {"message": "API key not valid"}}') == (
            "API key not valid"
        )

    @pytest.mark.parametrize(
        "body",
        [None, "", "not json", "[]", '{"error": "flat"}', '{"error": {"code": 400}}'],
    )
    def test_no_message(self, body):
        """Anything without a structured message yields None."""
        assert parse_backend_message(body) is None
