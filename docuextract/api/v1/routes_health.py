from fastapi import APIRouter, Depends, Request

from docuextract.api.dependencies import get_app_settings, get_session
from docuextract.application.session.review_session import ReviewSession
from docuextract.core.config import Settings
from docuextract.core.logging import get_logger

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(request: Request, settings: Settings = Depends(get_app_settings)):
    """Liveness check: process is up."""
    get_logger(__name__).debug("health", extra={"path": str(request.url.path)})
    return {"status": "ok", "service": settings.APP_NAME}


@router.get("/ready")
async def ready(
    settings: Settings = Depends(get_app_settings),
    session: ReviewSession = Depends(get_session),
):
    """Readiness check: session is up and the record history loaded.

    A history that failed to load still answers 200 (the store runs empty),
    with the load diagnostic attached.
    """
    body = {"status": "ok", "service": settings.APP_NAME, "records": len(session.store)}
    if session.store.load_error:
        body.update({"status": "degraded", "store_load_error": session.store.load_error})
    return body
