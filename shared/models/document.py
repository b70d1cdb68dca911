"""Pydantic models for knowledge base data.

Hierarchy:
  DocumentChunk    : the unit stored in and retrieved from the document store.
  SearchCandidate  : a chunk returned by one search method, optionally scored.
  DocumentLink     : catalogue entry for a case document shown to users.
"""

from pydantic import BaseModel, ConfigDict


class DocumentChunk(BaseModel):
    """A bounded slice of a source document.

    The id is the only key used for deduplication across search methods;
    two chunks with identical content but different ids are distinct.
    """

    model_config = ConfigDict(extra="ignore")

    id: str | int
    title: str | None = None
    content: str = ""
    source: str | None = None
    category: str | None = None
    embedding: list[float] | None = None


class SearchCandidate(DocumentChunk):
    """A chunk as returned by a single search method.

    similarity is only set by vector search.
    """

    similarity: float | None = None

    def to_chunk(self) -> DocumentChunk:
        return DocumentChunk(**self.model_dump(exclude={"similarity"}))


class NewDocumentChunk(BaseModel):
    """A chunk prepared for insertion; the store assigns the id."""

    title: str
    content: str
    source: str
    category: str
    embedding: list[float] | None = None


class DocumentLink(BaseModel):
    """A case document listed in the catalogue (external link or stored file)."""

    model_config = ConfigDict(extra="ignore")

    id: str | int | None = None
    title: str
    description: str = ""
    url: str
    type: str = "link"
    file_name: str | None = None
    original_name: str | None = None
    file_size: int | None = None
    storage: str = "external"
    is_default: bool = False
    created_at: str | None = None
