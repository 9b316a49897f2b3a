from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from docuextract.api.v1.routes_documents import router as documents_router
from docuextract.api.v1.routes_generations import router as generations_router
from docuextract.api.v1.routes_health import router as health_router
from docuextract.api.v1.routes_session import router as session_router
from docuextract.application.services.factories import (
    build_extraction_adapter,
    build_generation_adapter,
    build_state_adapter,
)
from docuextract.application.session.preferences import Theme
from docuextract.application.session.review_session import ReviewSession
from docuextract.core.config import Settings, get_settings
from docuextract.core.logging import RequestIdMiddleware, configure_logging, get_logger
from docuextract.domain.errors.exceptions import DocuExtractError
from docuextract.domain.ports.extraction_port import ExtractionPort, GenerationPort
from docuextract.domain.ports.state_port import StatePort
from docuextract.observability.errors import handle_docuextract_error
from docuextract.observability.metrics import MetricsMiddleware
from docuextract.observability.metrics import router as metrics_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger = get_logger(__name__)
    settings: Settings = app.state.settings
    overrides = app.state.overrides

    session = ReviewSession.open(
        overrides.get("state") or build_state_adapter(settings),
        overrides.get("extraction") or build_extraction_adapter(settings),
        overrides.get("generation") or build_generation_adapter(settings),
        default_theme=Theme(settings.DEFAULT_THEME),
        operator=settings.OPERATOR_NAME,
        cost_per_extraction_usd=settings.COST_PER_EXTRACTION_USD,
    )
    app.state.session = session
    logger.info(
        "service_startup",
        extra={
            "env": settings.ENV,
            "log_level": settings.LOG_LEVEL,
            "records": len(session.store),
            "store_load_error": session.store.load_error,
        },
    )
    try:
        yield
    finally:
        app.state.session = None
        logger.info("service_shutdown")


def create_app(
    settings: Settings | None = None,
    *,
    state: StatePort | None = None,
    extraction: ExtractionPort | None = None,
    generation: GenerationPort | None = None,
) -> FastAPI:
    """Build the API; the ports default to the disk store and the Gemini adapters."""
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.state.settings = settings
    app.state.overrides = {"state": state, "extraction": extraction, "generation": generation}
    app.state.session = None

    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(MetricsMiddleware)

    app.add_exception_handler(DocuExtractError, handle_docuextract_error)

    app.include_router(health_router)
    app.include_router(documents_router)
    app.include_router(session_router)
    app.include_router(generations_router)
    app.include_router(metrics_router)
    return app


app = create_app()
