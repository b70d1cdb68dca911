from fastapi import APIRouter, HTTPException, Request

from server.models.requests import ChatRequest
from server.models.responses import ChatResponse

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("")
async def chat(request: Request, body: ChatRequest) -> ChatResponse:
    """Answer a question about the case from the knowledge base.

    Args:
        request (Request): FastAPI request (provides app.state.chat_service).
        body (ChatRequest): Message, conversation history and optional app context.

    Returns:
        ChatResponse: Answer text with knowledge base and web citations.

    Raises:
        HTTPException: 400 if the message is missing, 500 if the chat service fails.
    """
    if not body.message or not body.message.strip():
        raise HTTPException(status_code=400, detail="Message is required")

    chat_service = request.app.state.chat_service
    try:
        return await chat_service.answer(body)
    except Exception as exc:
        request.app.state.logging.error("Chat API error: %s", exc)
        if "API_KEY" in str(exc).upper() or getattr(exc, "status_code", None) in (401, 403):
            raise HTTPException(status_code=500, detail="Invalid API key configuration")
        raise HTTPException(status_code=500, detail=f"Failed to generate response: {exc}")
