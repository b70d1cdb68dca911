"""Typed request and result structures crossing the store / provider boundary."""

from enum import Enum

from pydantic import BaseModel, Field

from shared.models.document import SearchCandidate


class FailureKind(str, Enum):
    """Why a provider call produced no usable value."""

    NOT_CONFIGURED = "not_configured"
    UNAVAILABLE = "unavailable"
    TIMEOUT = "timeout"
    HTTP_ERROR = "http_error"
    MALFORMED_RESPONSE = "malformed_response"
    EMPTY_INPUT = "empty_input"


class VectorSearchRequest(BaseModel):
    """Nearest-neighbour search over stored chunk embeddings."""

    embedding: list[float]
    match_threshold: float = Field(ge=-1.0, le=1.0)
    match_count: int = Field(gt=0)


class KeywordSearchRequest(BaseModel):
    """Full-text search over chunk content; stemming is done by the store."""

    query: str
    limit: int = Field(gt=0)
    text_search_config: str = "russian"


class SubstringSearchRequest(BaseModel):
    """Case-insensitive containment search; terms are OR'd in a single query.

    Attributes:
        terms:  Literal substrings to look for.
        field:  The chunk field to match against ("title" or "content").
        limit:  Result cap.
    """

    terms: list[str]
    field: str = "title"
    limit: int = Field(gt=0)


class StoreResult(BaseModel):
    """Outcome of one document store search.

    On failure, candidates is empty and failure says why. An empty,
    successful result means the store found nothing.
    """

    candidates: list[SearchCandidate] = []
    failure: FailureKind | None = None
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None


class EmbedResult(BaseModel):
    """Outcome of an embedding attempt; vector is None when unavailable."""

    vector: list[float] | None = None
    engine: str | None = None
    failure: FailureKind | None = None

    @property
    def ok(self) -> bool:
        return self.vector is not None
