"""Renders retrieved chunks and application context into prompt text blocks."""

from enum import Enum

from shared.models.document import DocumentChunk

NOT_FOUND_MARKER = "\n\n[ДОКУМЕНТЫ ИЗ БАЗЫ ЗНАНИЙ: не найдено релевантных документов]"
DEFAULT_TITLE = "Без названия"
DEFAULT_SOURCE = "не указан"
BLOCK_DELIMITER = "\n\n---\n\n"


class ContextMode(str, Enum):
    VERBOSE = "verbose"
    TERSE = "terse"


def _render_verbose(index: int, doc: DocumentChunk) -> str:
    return (
        f'[Документ {index}: "{doc.title or DEFAULT_TITLE}"]\n'
        f"Источник: {doc.source or DEFAULT_SOURCE}\n"
        f"Содержание:\n{doc.content}"
    )


def _render_terse(index: int, doc: DocumentChunk) -> str:
    return f"[Документ {index}: {doc.title or DEFAULT_TITLE}]\n{doc.content}"


def format_context(documents: list[DocumentChunk], mode: ContextMode | str = ContextMode.VERBOSE) -> str:
    """Render retrieved chunks as one delimited text block.

    Never truncates or deduplicates; an empty list yields NOT_FOUND_MARKER.

    Args:
        documents (list[DocumentChunk]): Chunks in retrieval order.
        mode (ContextMode | str): "verbose" adds a header/footer and source lines, "terse" does not.

    Returns:
        str: The context block, starting with a blank line so it can be appended to a message.
    """
    if not documents:
        return NOT_FOUND_MARKER

    mode = ContextMode(mode)
    if mode is ContextMode.TERSE:
        blocks = [_render_terse(i, doc) for i, doc in enumerate(documents, start=1)]
        return "\n\n" + BLOCK_DELIMITER.join(blocks)

    blocks = [_render_verbose(i, doc) for i, doc in enumerate(documents, start=1)]
    return (
        f"\n\n=== ДОКУМЕНТЫ ИЗ БАЗЫ ЗНАНИЙ ({len(documents)} шт.) ===\n\n"
        f"{BLOCK_DELIMITER.join(blocks)}"
        "\n\n=== КОНЕЦ ДОКУМЕНТОВ ==="
    )


def format_app_context(app_context: str | None) -> str:
    """Render application-state context (what the user sees in the app) as its own block.

    Returns:
        str: The labelled block, or "" when there is no context.
    """
    if not app_context or not app_context.strip():
        return ""
    return (
        "\n\n=== КОНТЕКСТ ПРИЛОЖЕНИЯ ===\n"
        f"{app_context.strip()}"
        "\n=== КОНЕЦ КОНТЕКСТА ПРИЛОЖЕНИЯ ==="
    )
