"""Tests for document chunking and the ingest service."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from server.models.requests import UploadRequest
from services.kb_ingest.IngestService import (
    DEFAULT_CATEGORY,
    IngestService,
    make_chunk_title,
    split_into_chunks,
)
from shared.models.document import DocumentChunk
from shared.models.search import EmbedResult, FailureKind

WORDS = " ".join(f"w{i:03d}" for i in range(200))


class TestSplitIntoChunks:

    def test_short_text_is_one_chunk(self) -> None:
        assert split_into_chunks("  Акт проверки  ", chunk_size=100, overlap=10) == ["Акт проверки"]

    def test_blank_text_gives_no_chunks(self) -> None:
        assert split_into_chunks(" \n ", chunk_size=100, overlap=10) == []

    def test_chunks_respect_size(self) -> None:
        chunks = split_into_chunks(WORDS, chunk_size=100, overlap=20)

        assert len(chunks) > 1
        assert all(len(chunk) <= 100 for chunk in chunks)

    def test_consecutive_chunks_overlap(self) -> None:
        chunks = split_into_chunks(WORDS, chunk_size=100, overlap=20)

        for previous, current in zip(chunks, chunks[1:]):
            assert current.split()[0] in previous.split()

    def test_every_word_is_kept(self) -> None:
        chunks = split_into_chunks(WORDS, chunk_size=100, overlap=20)

        covered = {word for chunk in chunks for word in chunk.split()}
        assert covered == set(WORDS.split())

    def test_cuts_at_paragraph_break(self) -> None:
        text = "A" * 60 + "\n\n" + "B" * 60

        chunks = split_into_chunks(text, chunk_size=100, overlap=10)

        assert chunks[0] == "A" * 60
        assert chunks[-1].endswith("B" * 60)

    @pytest.mark.parametrize("chunk_size, overlap", [(100, 50), (100, -1), (0, 0)])
    def test_invalid_parameters_raise(self, chunk_size, overlap) -> None:
        with pytest.raises(ValueError):
            split_into_chunks(WORDS, chunk_size=chunk_size, overlap=overlap)

    def test_chunk_titles(self) -> None:
        assert make_chunk_title("Акт", 1, 1) == "Акт"
        assert make_chunk_title("Акт", 2, 3) == "Акт (часть 2)"


@pytest.fixture
def ingest_store() -> MagicMock:
    store = MagicMock()
    counter = iter(range(1, 1000))

    async def insert(chunk):
        return DocumentChunk(id=next(counter), title=chunk.title)

    store.do_insert_chunk = AsyncMock(side_effect=insert)
    return store


class TestIngestService:

    @pytest.mark.asyncio
    async def test_single_chunk_document(self, helper_config, mock_embedder, ingest_store) -> None:
        service = IngestService(helper_config, mock_embedder, ingest_store)

        response = await service.ingest(UploadRequest(title="Предписание №5", content="Устранить нарушения."))

        assert response.success
        assert response.message == "Загружено 1 документ(ов)"
        assert response.embedded == 1
        chunk = ingest_store.do_insert_chunk.call_args.args[0]
        assert chunk.title == "Предписание №5"
        assert chunk.source == "Предписание №5"
        assert chunk.category == DEFAULT_CATEGORY
        assert chunk.embedding == [0.1, 0.2, 0.3]

    @pytest.mark.asyncio
    async def test_long_document_gets_numbered_parts(self, monkeypatch, helper_config, mock_embedder, ingest_store) -> None:
        monkeypatch.setenv("INGEST_CHUNK_SIZE", "100")
        monkeypatch.setenv("INGEST_CHUNK_OVERLAP", "20")
        service = IngestService(helper_config, mock_embedder, ingest_store)

        response = await service.ingest(
            UploadRequest(title="Акт", content=WORDS, source="Росприроднадзор", category="акт")
        )

        titles = [call.args[0].title for call in ingest_store.do_insert_chunk.call_args_list]
        assert titles[0] == "Акт (часть 1)"
        assert titles[-1] == f"Акт (часть {len(titles)})"
        assert [doc.id for doc in response.documents] == list(range(1, len(titles) + 1))
        assert all(call.args[0].source == "Росприроднадзор" for call in ingest_store.do_insert_chunk.call_args_list)

    @pytest.mark.asyncio
    async def test_chunk_without_embedding_is_still_stored(self, helper_config, mock_embedder, ingest_store) -> None:
        mock_embedder.embed.return_value = EmbedResult(failure=FailureKind.TIMEOUT)
        service = IngestService(helper_config, mock_embedder, ingest_store)

        response = await service.ingest(UploadRequest(title="Письмо", content="Текст письма."))

        assert response.embedded == 0
        assert len(response.documents) == 1
        assert ingest_store.do_insert_chunk.call_args.args[0].embedding is None

    @pytest.mark.asyncio
    async def test_store_failure_propagates(self, helper_config, mock_embedder) -> None:
        store = MagicMock()
        store.do_insert_chunk = AsyncMock(side_effect=RuntimeError("insert rejected"))
        service = IngestService(helper_config, mock_embedder, store)

        with pytest.raises(RuntimeError):
            await service.ingest(UploadRequest(title="Письмо", content="Текст письма."))
