"""
Shared test fixtures for the case assistant test suite.

Provides: HelperConfig with a plain logger, backend env configuration,
mocked store / embedding collaborators and an httpx MockTransport hook.
"""

import logging
from typing import Callable
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from shared.helper.HelperConfig import HelperConfig
from shared.models.document import SearchCandidate
from shared.models.search import EmbedResult, StoreResult


@pytest.fixture
def helper_config() -> HelperConfig:
    """Provide a HelperConfig backed by a plain stdlib logger."""
    return HelperConfig(logger=logging.getLogger("tests"))


@pytest.fixture
def backend_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Set the environment every backend client needs."""
    monkeypatch.setenv("STORE_SUPABASE_BASE_URL", "https://case.supabase.co")
    monkeypatch.setenv("STORE_SUPABASE_API_KEY", "anon-key")
    monkeypatch.setenv("EMBED_GOOGLE_API_KEY", "google-key")
    monkeypatch.setenv("EMBED_SUPABASE_BASE_URL", "https://case.supabase.co")
    monkeypatch.setenv("EMBED_SUPABASE_API_KEY", "anon-key")
    monkeypatch.setenv("EMBED_OPENAI_API_KEY", "openai-key")
    monkeypatch.setenv("LLM_GEMINI_API_KEY", "gemini-key")
    monkeypatch.setenv("APP_ADMIN_PASSWORD", "s3cret-pass")


def candidate(id: int | str, title: str | None = None, content: str = "", similarity: float | None = None, source: str | None = None) -> SearchCandidate:
    """Build a SearchCandidate with readable defaults."""
    return SearchCandidate(
        id=id,
        title=title if title is not None else f"Документ {id}",
        content=content or f"Текст документа {id}",
        source=source,
        similarity=similarity,
    )


@pytest.fixture
def make_candidate() -> Callable[..., SearchCandidate]:
    return candidate


@pytest.fixture
def mock_embedder() -> MagicMock:
    """EmbeddingProvider stand-in that always produces a vector."""
    embedder = MagicMock()
    embedder.embed = AsyncMock(return_value=EmbedResult(vector=[0.1, 0.2, 0.3], engine="google"))
    return embedder


@pytest.fixture
def mock_store() -> MagicMock:
    """StoreClientInterface stand-in whose searches all return empty results."""
    store = MagicMock()
    store.get_text_search_config.return_value = "russian"
    store.get_engine_name.return_value = "supabase"
    store.do_vector_search = AsyncMock(return_value=StoreResult())
    store.do_keyword_search = AsyncMock(return_value=StoreResult())
    store.do_substring_search = AsyncMock(return_value=StoreResult())
    return store


@pytest.fixture
def attach_transport() -> Callable:
    """Return a function that boots a client against an httpx MockTransport handler."""

    def _attach(client, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        client._client = httpx.AsyncClient(transport=httpx.MockTransport(handler), timeout=client.timeout)

    return _attach
