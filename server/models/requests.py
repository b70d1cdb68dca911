from pydantic import BaseModel, Field

from shared.models.chat import ChatTurn


class ChatRequest(BaseModel):
    message: str | None = None
    history: list[ChatTurn] = []
    app_context: str | None = None


class SearchRequest(BaseModel):
    query: str | None = None
    limit: int | None = Field(default=None, gt=0, le=50)


class UploadRequest(BaseModel):
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    source: str | None = None
    category: str | None = None


class DocumentLinkRequest(BaseModel):
    title: str = Field(min_length=1)
    url: str = Field(min_length=1)
    description: str = ""
    type: str = "link"
    file_name: str | None = None
    original_name: str | None = None
    file_size: int | None = None
    storage: str = "external"
