from fastapi import APIRouter, Depends, HTTPException, Request

from server.dependencies.auth import verify_admin_password
from server.models.requests import DocumentLinkRequest
from server.models.responses import DocumentLinkResponse, DocumentLinksResponse
from shared.models.document import DocumentLink

router = APIRouter(prefix="/documents", tags=["documents"])


@router.get("")
async def list_documents(request: Request) -> DocumentLinksResponse:
    """List the case document catalogue, newest first."""
    store_client = request.app.state.store_client
    try:
        links = await store_client.do_list_links()
    except Exception as exc:
        request.app.state.logging.error("Fetch documents error: %s", exc)
        raise HTTPException(status_code=500, detail="Ошибка загрузки документов")
    return DocumentLinksResponse(documents=links)


@router.post("")
async def add_document(
    request: Request,
    body: DocumentLinkRequest,
    _: None = Depends(verify_admin_password),
) -> DocumentLinkResponse:
    """Add a document link to the catalogue."""
    store_client = request.app.state.store_client
    try:
        stored = await store_client.do_insert_link(DocumentLink(**body.model_dump()))
    except Exception as exc:
        request.app.state.logging.error("Add document error: %s", exc)
        raise HTTPException(status_code=500, detail="Ошибка добавления документа")
    request.app.state.logging.info("[Documents] Added: %r", body.title)
    return DocumentLinkResponse(success=True, message="Документ добавлен", document=stored)


@router.delete("/{link_id}")
async def delete_document(
    request: Request,
    link_id: str,
    _: None = Depends(verify_admin_password),
) -> DocumentLinkResponse:
    """Remove a document link from the catalogue."""
    store_client = request.app.state.store_client
    try:
        await store_client.do_delete_link(link_id)
    except Exception as exc:
        request.app.state.logging.error("Delete document error: %s", exc)
        raise HTTPException(status_code=500, detail="Ошибка удаления документа")
    request.app.state.logging.info("[Documents] Deleted: %s", link_id)
    return DocumentLinkResponse(success=True, message="Документ удалён")
