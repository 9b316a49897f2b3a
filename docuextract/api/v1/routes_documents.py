from __future__ import annotations

import base64
from pathlib import Path

from fastapi import APIRouter, Depends, File, Query, Response, UploadFile

from docuextract.api.dependencies import failed_call_error, get_app_settings, get_session
from docuextract.application.session.review_session import ReviewSession
from docuextract.core.config import Settings
from docuextract.core.logging import get_logger
from docuextract.domain.records.models import StoredDocument
from docuextract.models.schemas import DocumentListResponse, DocumentSummary, ProcessRequest
from docuextract.observability.errors import to_http_error

router = APIRouter(prefix="/v1/documents", tags=["documents"])

_MIME_BY_SUFFIX = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
}


async def _process(session: ReviewSession, image: str) -> StoredDocument:
    document = await session.process_image(image)
    if document is None:
        raise failed_call_error("EXTRACTION_FAILED", session)
    return document


@router.post("", response_model=StoredDocument, status_code=201)
async def process_document(body: ProcessRequest, session: ReviewSession = Depends(get_session)):
    return await _process(session, body.image)


@router.post("/upload", response_model=StoredDocument, status_code=201)
async def upload_document(
    file: UploadFile = File(...),
    settings: Settings = Depends(get_app_settings),
    session: ReviewSession = Depends(get_session),
):
    logger = get_logger(__name__)
    logger.info(
        "upload_received",
        extra={"uploaded_filename": file.filename, "uploaded_content_type": file.content_type},
    )

    suffix = Path(file.filename or "").suffix.lower()
    if suffix not in _MIME_BY_SUFFIX:
        raise to_http_error("UNSUPPORTED_FILE_TYPE")

    max_bytes = settings.MAX_UPLOAD_MB * 1024 * 1024
    try:
        content = await file.read(max_bytes + 1)
    except Exception as e:
        raise to_http_error("UPLOAD_READ_FAILED", message=f"Failed to read uploaded file: {e}")
    finally:
        await file.close()
    if len(content) > max_bytes:
        raise to_http_error("PAYLOAD_TOO_LARGE")
    if not content:
        raise to_http_error("UPLOAD_READ_FAILED", message="Uploaded file is empty")

    image = f"data:{_MIME_BY_SUFFIX[suffix]};base64,{base64.b64encode(content).decode('ascii')}"
    return await _process(session, image)


@router.get("", response_model=DocumentListResponse)
async def list_documents(
    q: str = Query(default="", description="Case-insensitive match on dealer, model or document type"),
    session: ReviewSession = Depends(get_session),
):
    documents = session.search(q)
    return DocumentListResponse(total=len(documents), items=[DocumentSummary.from_document(d) for d in documents])


@router.get("/{document_id}", response_model=StoredDocument)
async def get_document(document_id: str, session: ReviewSession = Depends(get_session)):
    return session.require_document(document_id)


@router.delete("/{document_id}", status_code=204)
async def delete_document(document_id: str, session: ReviewSession = Depends(get_session)):
    session.delete(document_id)
    return Response(status_code=204)


@router.post("/{document_id}/open", response_model=StoredDocument)
async def open_document(document_id: str, session: ReviewSession = Depends(get_session)):
    return session.open_document(document_id)
