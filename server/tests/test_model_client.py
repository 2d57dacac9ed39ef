"""Tests for ModelClient — request shape and the never-raise fallback contract."""
import base64
import json

import httpx
import pytest

from integrations.openai.client import ModelClient, _guess_image_mime, _image_data_url
from integrations.openai.prompts import FALLBACK_MESSAGE


JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 16
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


def _completion(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def _client(handler):
    return ModelClient(
        endpoint="https://llm.test",
        model="gpt-4o",
        api_key="sk-test",
        transport=httpx.MockTransport(handler),
    )


# ---------------------------------------------------------------------------
# Image encoding
# ---------------------------------------------------------------------------

class TestImageEncoding:
    def test_jpeg(self):
        assert _guess_image_mime(JPEG_BYTES) == "image/jpeg"

    def test_png(self):
        assert _guess_image_mime(PNG_BYTES) == "image/png"

    def test_gif(self):
        assert _guess_image_mime(b"GIF89a" + b"\x00" * 8) == "image/gif"

    def test_webp(self):
        assert _guess_image_mime(b"RIFF\x00\x00\x00\x00WEBPVP8 ") == "image/webp"

    def test_unknown_defaults_to_jpeg(self):
        assert _guess_image_mime(b"not an image") == "image/jpeg"

    def test_data_url_round_trips_bytes(self):
        url = _image_data_url(PNG_BYTES)
        prefix = "data:image/png;base64,"
        assert url.startswith(prefix)
        assert base64.b64decode(url[len(prefix):]) == PNG_BYTES


# ---------------------------------------------------------------------------
# Successful calls
# ---------------------------------------------------------------------------

class TestAnalyze:
    @pytest.mark.asyncio
    async def test_image_request_shape(self):
        captured = {}

        def handler(request):
            captured["url"] = str(request.url)
            captured["auth"] = request.headers.get("authorization")
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json=_completion("  Food Rating 🍔  "))

        client = _client(handler)
        result = await client.analyze("system", "user", JPEG_BYTES)
        await client.close()

        assert result == "Food Rating 🍔"
        assert captured["url"] == "https://llm.test/v1/chat/completions"
        assert captured["auth"] == "Bearer sk-test"

        body = captured["body"]
        assert body["model"] == "gpt-4o"
        assert body["temperature"] == 0.2
        assert body["max_tokens"] == 512
        assert "stream" not in body
        assert body["messages"][0] == {"role": "system", "content": "system"}

        user_content = body["messages"][1]["content"]
        assert user_content[0] == {"type": "text", "text": "user"}
        assert user_content[1]["type"] == "image_url"
        assert user_content[1]["image_url"]["url"].startswith("data:image/jpeg;base64,")

    @pytest.mark.asyncio
    async def test_text_only_request_uses_plain_content(self):
        captured = {}

        def handler(request):
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json=_completion("Drink more water 💧"))

        client = _client(handler)
        result = await client.analyze("persona", "How much water should I drink?")

        assert result == "Drink more water 💧"
        assert captured["body"]["messages"][1]["content"] == "How much water should I drink?"

    @pytest.mark.asyncio
    async def test_single_request_per_call(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(503, text="overloaded")

        client = _client(handler)
        await client.analyze("s", "u")
        assert len(calls) == 1


# ---------------------------------------------------------------------------
# Failures degrade to the fallback string
# ---------------------------------------------------------------------------

class TestFallback:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(500, text="internal error"),
            httpx.Response(429, json={"error": {"message": "quota exceeded"}}),
            httpx.Response(200, text="this is not json"),
            httpx.Response(200, json={"unexpected": "shape"}),
            httpx.Response(200, json={"choices": []}),
            httpx.Response(200, json=_completion(None)),
            httpx.Response(200, json=_completion("   ")),
        ],
    )
    async def test_bad_responses_return_fallback(self, response):
        client = _client(lambda request: response)
        assert await client.analyze("s", "u", JPEG_BYTES) == FALLBACK_MESSAGE

    @pytest.mark.asyncio
    async def test_timeout_returns_fallback(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        client = _client(handler)
        assert await client.analyze("s", "u") == FALLBACK_MESSAGE

    @pytest.mark.asyncio
    async def test_connection_error_returns_fallback(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = _client(handler)
        assert await client.analyze("s", "u") == FALLBACK_MESSAGE
