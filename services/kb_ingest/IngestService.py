"""Knowledge base ingest service.

Splits a source document into overlapping chunks, embeds each chunk via the
EmbeddingProvider and inserts it into the document store. A chunk whose
embedding fails is still stored (without a vector) so keyword and substring
search can find it.
"""

from server.models.requests import UploadRequest
from server.models.responses import UploadedChunk, UploadResponse
from shared.clients.embed.EmbeddingProvider import EmbeddingProvider
from shared.clients.store.StoreClientInterface import StoreClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.document import NewDocumentChunk

CHUNK_SIZE = 1500       # characters per text chunk
CHUNK_OVERLAP = 150     # character overlap between consecutive chunks
DEFAULT_CATEGORY = "документ"


def split_into_chunks(text: str, chunk_size: int = CHUNK_SIZE, overlap: int = CHUNK_OVERLAP) -> list[str]:
    """Split a document's text into overlapping windows.

    Window ends snap back to the last paragraph break, or failing that the
    last line break or space, as long as that keeps at least half a window.
    The next window starts overlap characters before the previous end,
    moved forward to a word boundary.

    Args:
        text (str): The full document text.
        chunk_size (int): Maximum characters per chunk.
        overlap (int): Characters shared between consecutive chunks; must be below chunk_size // 2.

    Returns:
        list[str]: Ordered, stripped, non-empty chunks.

    Raises:
        ValueError: If the size/overlap combination cannot make progress.
    """
    if chunk_size <= 0 or overlap < 0 or overlap >= chunk_size // 2:
        raise ValueError(f"Invalid chunking parameters: chunk_size={chunk_size}, overlap={overlap}.")
    text = text.strip()
    if not text:
        return []
    if len(text) <= chunk_size:
        return [text]

    chunks: list[str] = []
    start = 0
    while start < len(text):
        end = min(start + chunk_size, len(text))
        if end < len(text):
            window = text[start:end]
            cut = window.rfind("\n\n")
            if cut < chunk_size // 2:
                cut = max(window.rfind("\n"), window.rfind(" "))
            if cut >= chunk_size // 2:
                end = start + cut

        chunk = text[start:end].strip()
        if chunk:
            chunks.append(chunk)
        if end >= len(text):
            break

        next_start = end - overlap
        boundary = text.find(" ", next_start, end)
        start = boundary + 1 if boundary != -1 else next_start
    return chunks


def make_chunk_title(title: str, index: int, total: int) -> str:
    return f"{title} (часть {index})" if total > 1 else title


class IngestService:
    """Turns an uploaded document into stored, embedded knowledge base chunks."""

    def __init__(
        self,
        helper_config: HelperConfig,
        embedding_provider: EmbeddingProvider,
        store_client: StoreClientInterface,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._embedder = embedding_provider
        self._store = store_client
        self.chunk_size = int(helper_config.get_number_val("INGEST_CHUNK_SIZE", default=CHUNK_SIZE))
        self.chunk_overlap = int(helper_config.get_number_val("INGEST_CHUNK_OVERLAP", default=CHUNK_OVERLAP))

    ##########################################
    ############### CORE #####################
    ##########################################

    async def ingest(self, request: UploadRequest) -> UploadResponse:
        """Chunk, embed and store one document.

        Args:
            request (UploadRequest): Title, full text and optional source/category.

        Returns:
            UploadResponse: The stored chunk ids/titles and how many were embedded.

        Raises:
            ClientRequestError: If the store rejects an insert. Chunks inserted
                before the failure remain stored.
        """
        chunks = split_into_chunks(request.content, self.chunk_size, self.chunk_overlap)
        source = request.source or request.title
        category = request.category or DEFAULT_CATEGORY
        self.logging.info("Ingesting '%s': %d chunk(s).", request.title, len(chunks))

        stored: list[UploadedChunk] = []
        embedded = 0
        for index, chunk_text in enumerate(chunks, start=1):
            embed_result = await self._embedder.embed(chunk_text)
            if embed_result.ok:
                embedded += 1
            else:
                self.logging.warning(
                    "Chunk %d of '%s' stored without embedding (%s).",
                    index, request.title, embed_result.failure,
                )

            row = await self._store.do_insert_chunk(
                NewDocumentChunk(
                    title=make_chunk_title(request.title, index, len(chunks)),
                    content=chunk_text,
                    source=source,
                    category=category,
                    embedding=embed_result.vector,
                )
            )
            stored.append(UploadedChunk(id=row.id, title=row.title))

        self.logging.info(
            "Ingested '%s': %d chunk(s) stored, %d embedded.", request.title, len(stored), embedded
        )
        return UploadResponse(
            success=True,
            message=f"Загружено {len(stored)} документ(ов)",
            documents=stored,
            embedded=embedded,
        )
