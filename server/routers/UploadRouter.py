from fastapi import APIRouter, Depends, HTTPException, Request

from server.dependencies.auth import verify_admin_password
from server.models.requests import UploadRequest
from server.models.responses import UploadResponse

router = APIRouter(prefix="/upload", tags=["knowledge base"])


@router.post("")
async def upload_document(
    request: Request,
    body: UploadRequest,
    _: None = Depends(verify_admin_password),
) -> UploadResponse:
    """Add a text document to the knowledge base (chunked and embedded).

    Raises:
        HTTPException: 500 if the store rejects the chunks.
    """
    ingest_service = request.app.state.ingest_service
    try:
        return await ingest_service.ingest(body)
    except Exception as exc:
        request.app.state.logging.error("Upload error for '%s': %s", body.title, exc)
        raise HTTPException(status_code=500, detail=f"Ошибка загрузки документа: {exc}")
