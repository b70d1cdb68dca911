"""Tests for the embed clients against a mocked HTTP transport."""

import json

import httpx
import pytest

from shared.clients.ClientInterface import ClientRequestError
from shared.clients.embed.google.EmbedClientGoogle import EmbedClientGoogle
from shared.clients.embed.openai.EmbedClientOpenai import EmbedClientOpenai
from shared.clients.embed.supabase.EmbedClientSupabase import EmbedClientSupabase


class TestEmbedClientGoogle:

    @pytest.mark.asyncio
    async def test_embed_content_request(self, backend_env, helper_config, attach_transport) -> None:
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["headers"] = request.headers
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"embedding": {"values": [0.1, 2, -0.3]}})

        client = EmbedClientGoogle(helper_config)
        attach_transport(client, handler)

        vector = await client.do_embed("бухта Мучке")

        assert vector == [0.1, 2.0, -0.3]
        assert seen["url"] == "https://generativelanguage.googleapis.com/v1beta/models/text-embedding-004:embedContent"
        assert seen["headers"]["x-goog-api-key"] == "google-key"
        assert seen["body"] == {
            "model": "models/text-embedding-004",
            "content": {"parts": [{"text": "бухта Мучке"}]},
        }

    def test_model_is_configurable(self, backend_env, monkeypatch, helper_config) -> None:
        monkeypatch.setenv("EMBED_GOOGLE_MODEL", "gemini-embedding-001")

        client = EmbedClientGoogle(helper_config)

        assert client.get_endpoint_embedding() == "/models/gemini-embedding-001:embedContent"

    @pytest.mark.asyncio
    async def test_error_status_raises(self, backend_env, helper_config, attach_transport) -> None:
        client = EmbedClientGoogle(helper_config)
        attach_transport(client, lambda request: httpx.Response(429, json={"error": "quota"}))

        with pytest.raises(ClientRequestError) as exc_info:
            await client.do_embed("текст")

        assert exc_info.value.status_code == 429

    @pytest.mark.asyncio
    async def test_missing_values_raise_value_error(self, backend_env, helper_config, attach_transport) -> None:
        client = EmbedClientGoogle(helper_config)
        attach_transport(client, lambda request: httpx.Response(200, json={"embedding": {}}))

        with pytest.raises(ValueError):
            await client.do_embed("текст")

    def test_missing_api_key_fails_validation(self, monkeypatch, helper_config) -> None:
        monkeypatch.delenv("EMBED_GOOGLE_API_KEY", raising=False)

        with pytest.raises(ValueError):
            EmbedClientGoogle(helper_config)


class TestEmbedClientSupabase:

    @pytest.mark.asyncio
    async def test_edge_function_request(self, backend_env, helper_config, attach_transport) -> None:
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["headers"] = request.headers
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"embedding": [0.4, 0.5]})

        client = EmbedClientSupabase(helper_config)
        attach_transport(client, handler)

        vector = await client.do_embed("акт")

        assert vector == [0.4, 0.5]
        assert seen["url"] == "https://case.supabase.co/functions/v1/embed"
        assert seen["headers"]["authorization"] == "Bearer anon-key"
        assert seen["headers"]["apikey"] == "anon-key"
        assert seen["body"] == {"text": "акт"}

    @pytest.mark.asyncio
    async def test_non_numeric_vector_is_rejected(self, backend_env, helper_config, attach_transport) -> None:
        client = EmbedClientSupabase(helper_config)
        attach_transport(client, lambda request: httpx.Response(200, json={"embedding": ["a", "b"]}))

        with pytest.raises(ValueError):
            await client.do_embed("акт")


class TestEmbedClientOpenai:

    @pytest.mark.asyncio
    async def test_first_item_by_index_is_returned(self, backend_env, helper_config, attach_transport) -> None:
        payload = {"data": [{"index": 1, "embedding": [9.0]}, {"index": 0, "embedding": [1.0, 2.0]}]}
        client = EmbedClientOpenai(helper_config)
        attach_transport(client, lambda request: httpx.Response(200, json=payload))

        vector = await client.do_embed("текст")

        assert vector == [1.0, 2.0]

    def test_payload_carries_model(self, backend_env, helper_config) -> None:
        client = EmbedClientOpenai(helper_config)

        assert client.get_embed_payload("x") == {"model": "text-embedding-3-small", "input": "x"}


@pytest.mark.asyncio
async def test_request_before_boot_raises(backend_env, helper_config) -> None:
    client = EmbedClientGoogle(helper_config)

    with pytest.raises(RuntimeError):
        await client.do_embed("текст")
