from __future__ import annotations

from typing import Any

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from docuextract.core.logging import get_logger, get_request_id
from docuextract.domain.errors.exceptions import DocuExtractError

_logger = get_logger(__name__)


ERROR_REGISTRY: dict[str, dict[str, Any]] = {
    "UNSUPPORTED_FILE_TYPE": {
        "status": 400,
        "message": "Unsupported file type. Allowed: jpg, jpeg, png, webp",
    },
    "UPLOAD_READ_FAILED": {
        "status": 400,
        "message": "Failed to read uploaded file",
    },
    "PAYLOAD_TOO_LARGE": {
        "status": 413,
        "message": "Uploaded file is too large",
    },
    "EXTRACTION_FAILED": {
        "status": 502,
        "message": "Extraction service call failed",
    },
    "GENERATION_FAILED": {
        "status": 502,
        "message": "Generation service call failed",
    },
    "SESSION_UNAVAILABLE": {
        "status": 503,
        "message": "Review session is not initialized",
    },
}


def to_http_error(
    code: str,
    *,
    message: str | None = None,
    status: int | None = None,
    **extra: Any,
) -> HTTPException:
    meta = ERROR_REGISTRY.get(code, {"status": 500, "message": code})
    status_code = int(status or meta.get("status", 500))
    detail_msg = message or str(meta.get("message", code))
    return HTTPException(status_code=status_code, detail={"code": code, "message": detail_msg, **extra})


async def handle_docuextract_error(request: Request, exc: DocuExtractError) -> JSONResponse:
    """Render review precondition errors as problem details."""
    _logger.warning(
        "review_error",
        extra={"error_code": exc.error_code, "path": request.url.path, "http_status": exc.http_status},
    )
    return JSONResponse(
        status_code=exc.http_status,
        content={**exc.to_dict(), "instance": request.url.path, "request_id": get_request_id()},
    )
