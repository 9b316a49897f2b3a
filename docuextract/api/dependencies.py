from fastapi import Request

from docuextract.application.session.review_session import ReviewSession
from docuextract.core.config import Settings
from docuextract.observability.errors import to_http_error


async def get_session(request: Request) -> ReviewSession:
    """Review session created by the app lifespan; 503 outside of it."""
    session = getattr(request.app.state, "session", None)
    if session is None:
        raise to_http_error("SESSION_UNAVAILABLE")
    return session


async def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def failed_call_error(code: str, session: ReviewSession):
    """HTTP error for a failed external call, carrying the session's advisory."""
    advisory = session.advisory
    return to_http_error(code, advisory=advisory.model_dump(mode="json") if advisory else None)
