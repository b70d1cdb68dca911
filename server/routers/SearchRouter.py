from fastapi import APIRouter, HTTPException, Request

from server.core.ContextAssembler import format_context
from server.models.requests import SearchRequest
from server.models.responses import SearchResponse, SearchResultItem

router = APIRouter(prefix="/search", tags=["search"])


@router.post("")
async def search(request: Request, body: SearchRequest) -> SearchResponse:
    """Run hybrid retrieval without calling the chat service.

    Returns the merged chunks and the context block exactly as the chat
    endpoint would send them, which makes retrieval quality inspectable.

    Raises:
        HTTPException: 400 if the query is missing.
    """
    if not body.query or not body.query.strip():
        raise HTTPException(status_code=400, detail="Query is required")

    retriever = request.app.state.retriever
    documents = await retriever.retrieve(body.query, body.limit)
    context = format_context(documents, request.app.state.chat_service.context_mode)
    return SearchResponse(
        query=body.query,
        results=[
            SearchResultItem(
                id=doc.id,
                title=doc.title,
                source=doc.source,
                category=doc.category,
                content=doc.content,
            )
            for doc in documents
        ],
        total=len(documents),
        context=context,
    )
