from pydantic import BaseModel

from shared.models.chat import WebCitation
from shared.models.document import DocumentLink


class ChatResponse(BaseModel):
    response: str
    sources: list[str]
    web_sources: list[WebCitation] = []


class SearchResultItem(BaseModel):
    id: str | int
    title: str | None
    source: str | None
    category: str | None
    content: str


class SearchResponse(BaseModel):
    query: str
    results: list[SearchResultItem]
    total: int
    context: str


class UploadedChunk(BaseModel):
    id: str | int
    title: str | None


class UploadResponse(BaseModel):
    success: bool
    message: str
    documents: list[UploadedChunk]
    embedded: int


class DocumentLinksResponse(BaseModel):
    documents: list[DocumentLink]


class DocumentLinkResponse(BaseModel):
    success: bool
    message: str
    document: DocumentLink | None = None


class HealthResponse(BaseModel):
    status: str
    version: str
    embed_engines: list[str]
    store_engine: str
    llm_engine: str
