"""Tests for the Gemini chat client."""

import json

import httpx
import pytest

from shared.clients.ClientInterface import ClientRequestError
from shared.clients.llm.gemini.LLMClientGemini import LLMClientGemini
from shared.models.chat import ChatTurn


def gemini_answer(text: str = "Ответ", chunks: list | None = None) -> dict:
    candidate: dict = {"content": {"role": "model", "parts": [{"text": text}]}, "finishReason": "STOP"}
    if chunks is not None:
        candidate["groundingMetadata"] = {"groundingChunks": chunks}
    return {"candidates": [candidate]}


@pytest.fixture
def gemini(backend_env, helper_config) -> LLMClientGemini:
    return LLMClientGemini(helper_config)


class TestPayload:

    def test_history_roles_are_mapped(self, gemini) -> None:
        history = [
            ChatTurn(role="user", content="Кто истец?"),
            ChatTurn(role="assistant", content="АО «Дальтрансуголь»."),
        ]

        payload = gemini.get_chat_payload("SYSTEM", history, "А ответчик?")

        assert payload["systemInstruction"] == {"parts": [{"text": "SYSTEM"}]}
        assert [c["role"] for c in payload["contents"]] == ["user", "model", "user"]
        assert payload["contents"][-1]["parts"][0]["text"] == "А ответчик?"
        assert "tools" not in payload

    def test_web_grounding_adds_search_tool(self, backend_env, monkeypatch, helper_config) -> None:
        monkeypatch.setenv("LLM_GEMINI_WEB_GROUNDING", "true")

        payload = LLMClientGemini(helper_config).get_chat_payload("SYSTEM", [], "Вопрос")

        assert payload["tools"] == [{"google_search": {}}]


class TestResponse:

    def test_text_parts_are_joined(self, gemini) -> None:
        data = {"candidates": [{"content": {"parts": [{"text": "Часть 1. "}, {"text": "Часть 2."}]}}]}

        assert gemini.extract_chat_response(data).text == "Часть 1. Часть 2."

    def test_web_citations_are_deduplicated(self, gemini) -> None:
        chunks = [
            {"web": {"uri": "https://example.org/a", "title": "КоАП"}},
            {"web": {"uri": "https://example.org/a", "title": "КоАП (копия)"}},
            {"web": {"uri": "https://example.org/b"}},
            {"retrievedContext": {"uri": "ignored"}},
        ]

        completion = gemini.extract_chat_response(gemini_answer(chunks=chunks))

        assert [(c.title, c.url) for c in completion.web_citations] == [
            ("КоАП", "https://example.org/a"),
            ("https://example.org/b", "https://example.org/b"),
        ]

    def test_no_candidates_raises(self, gemini) -> None:
        with pytest.raises(ValueError, match="no candidates"):
            gemini.extract_chat_response({"promptFeedback": {"blockReason": "SAFETY"}})

    def test_empty_text_raises(self, gemini) -> None:
        with pytest.raises(ValueError):
            gemini.extract_chat_response({"candidates": [{"content": {"parts": []}, "finishReason": "MAX_TOKENS"}]})


class TestRequest:

    @pytest.mark.asyncio
    async def test_do_chat_posts_generate_content(self, gemini, attach_transport) -> None:
        seen: list = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=gemini_answer("Проверка была 12.03.2024."))

        attach_transport(gemini, handler)

        completion = await gemini.do_chat("SYSTEM", [], "Когда была проверка?")

        assert completion.text == "Проверка была 12.03.2024."
        assert completion.web_citations == []
        assert seen[0].url.path == "/v1beta/models/gemini-3-flash-preview:generateContent"
        assert seen[0].headers["x-goog-api-key"] == "gemini-key"
        assert json.loads(seen[0].content)["contents"][0]["role"] == "user"

    @pytest.mark.asyncio
    async def test_rejected_request_raises_with_status(self, gemini, attach_transport) -> None:
        attach_transport(gemini, lambda request: httpx.Response(403, json={"error": {"status": "PERMISSION_DENIED"}}))

        with pytest.raises(ClientRequestError) as exc_info:
            await gemini.do_chat("SYSTEM", [], "Вопрос")

        assert exc_info.value.status_code == 403
