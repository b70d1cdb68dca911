"""Tests for the engine-selecting client managers."""

import pytest

from shared.clients.embed.EmbedClientManager import EmbedClientManager
from shared.clients.embed.google.EmbedClientGoogle import EmbedClientGoogle
from shared.clients.embed.supabase.EmbedClientSupabase import EmbedClientSupabase
from shared.clients.llm.LLMClientManager import LLMClientManager
from shared.clients.llm.gemini.LLMClientGemini import LLMClientGemini
from shared.clients.store.StoreClientManager import StoreClientManager
from shared.clients.store.supabase.StoreClientSupabase import StoreClientSupabase


class TestEmbedClientManager:

    def test_engines_keep_configured_order(self, backend_env, monkeypatch, helper_config) -> None:
        monkeypatch.setenv("EMBED_ENGINES", "[supabase, Google]")

        clients = EmbedClientManager(helper_config).get_clients()

        assert [type(c) for c in clients] == [EmbedClientSupabase, EmbedClientGoogle]

    def test_more_than_two_engines_are_truncated(self, backend_env, monkeypatch, helper_config) -> None:
        monkeypatch.setenv("EMBED_ENGINES", "[google,supabase,openai]")

        clients = EmbedClientManager(helper_config).get_clients()

        assert [c.get_engine_name() for c in clients] == ["google", "supabase"]

    def test_unsupported_engine_raises(self, backend_env, monkeypatch, helper_config) -> None:
        monkeypatch.setenv("EMBED_ENGINES", "[cohere]")

        with pytest.raises(ValueError, match="Unsupported Embed engine"):
            EmbedClientManager(helper_config)

    def test_missing_engine_list_raises(self, monkeypatch, helper_config) -> None:
        monkeypatch.delenv("EMBED_ENGINES", raising=False)

        with pytest.raises(ValueError):
            EmbedClientManager(helper_config)


class TestSingleEngineManagers:

    def test_store_defaults_to_supabase(self, backend_env, monkeypatch, helper_config) -> None:
        monkeypatch.delenv("STORE_ENGINE", raising=False)

        assert isinstance(StoreClientManager(helper_config).get_client(), StoreClientSupabase)

    def test_llm_defaults_to_gemini(self, backend_env, monkeypatch, helper_config) -> None:
        monkeypatch.delenv("LLM_ENGINE", raising=False)

        assert isinstance(LLMClientManager(helper_config).get_client(), LLMClientGemini)

    def test_unsupported_store_engine_raises(self, backend_env, monkeypatch, helper_config) -> None:
        monkeypatch.setenv("STORE_ENGINE", "qdrant")

        with pytest.raises(ValueError, match="Unsupported store engine"):
            StoreClientManager(helper_config)
