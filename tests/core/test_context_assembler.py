"""Tests for the context block renderer."""

from server.core.ContextAssembler import (
    BLOCK_DELIMITER,
    DEFAULT_SOURCE,
    DEFAULT_TITLE,
    NOT_FOUND_MARKER,
    ContextMode,
    format_app_context,
    format_context,
)
from shared.models.document import DocumentChunk


def chunk(id: int, title: str | None = None, content: str = "текст", source: str | None = None) -> DocumentChunk:
    return DocumentChunk(id=id, title=title, content=content, source=source)


class TestFormatContext:

    def test_empty_list_yields_not_found_marker(self) -> None:
        assert format_context([]) == NOT_FOUND_MARKER

    def test_empty_list_yields_marker_in_terse_mode_too(self) -> None:
        assert format_context([], ContextMode.TERSE) == NOT_FOUND_MARKER

    def test_single_document_contains_title_and_content(self) -> None:
        block = format_context([chunk(1, title="Акт проверки", content="Сброс сточных вод", source="Росприроднадзор")])

        assert "Акт проверки" in block
        assert "Сброс сточных вод" in block
        assert "Источник: Росприроднадзор" in block
        assert NOT_FOUND_MARKER.strip() not in block

    def test_verbose_header_counts_documents(self) -> None:
        block = format_context([chunk(1), chunk(2), chunk(3)])

        assert "=== ДОКУМЕНТЫ ИЗ БАЗЫ ЗНАНИЙ (3 шт.) ===" in block
        assert block.rstrip().endswith("=== КОНЕЦ ДОКУМЕНТОВ ===")

    def test_documents_are_numbered_in_retrieval_order(self) -> None:
        block = format_context([chunk(5, title="Второй"), chunk(2, title="Первый")])

        assert block.index('[Документ 1: "Второй"]') < block.index('[Документ 2: "Первый"]')
        assert block.count(BLOCK_DELIMITER) == 1

    def test_missing_title_and_source_use_defaults(self) -> None:
        block = format_context([chunk(1)])

        assert DEFAULT_TITLE in block
        assert f"Источник: {DEFAULT_SOURCE}" in block

    def test_duplicates_are_not_removed(self) -> None:
        doc = chunk(1, title="Повтор")

        block = format_context([doc, doc])

        assert block.count("Повтор") == 2

    def test_long_content_is_not_truncated(self) -> None:
        content = "слово " * 5000

        block = format_context([chunk(1, content=content)])

        assert content in block

    def test_terse_mode_omits_header_and_sources(self) -> None:
        block = format_context([chunk(1, title="Письмо", content="Ответ на запрос", source="ведомство")], "terse")

        assert block == "\n\n[Документ 1: Письмо]\nОтвет на запрос"
        assert "Источник" not in block

    def test_block_starts_with_blank_line(self) -> None:
        assert format_context([chunk(1)]).startswith("\n\n")


class TestFormatAppContext:

    def test_blank_context_renders_nothing(self) -> None:
        assert format_app_context(None) == ""
        assert format_app_context("   ") == ""

    def test_context_is_labelled(self) -> None:
        block = format_app_context("  Открыта вкладка: Хронология  ")

        assert block.startswith("\n\n=== КОНТЕКСТ ПРИЛОЖЕНИЯ ===\n")
        assert "Открыта вкладка: Хронология\n" in block
