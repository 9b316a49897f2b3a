from __future__ import annotations

import logging
import sys
import uuid
import contextvars
from contextlib import contextmanager
from typing import Iterator, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from fastapi import Request

# Context vars carried across async tasks and picked up by the log filter
_request_id_ctx: contextvars.ContextVar[str] = contextvars.ContextVar("request_id", default="-")
_document_id_ctx: contextvars.ContextVar[str] = contextvars.ContextVar("document_id", default="-")


def get_request_id() -> str:
    return _request_id_ctx.get()


def get_document_id() -> str:
    return _document_id_ctx.get()


@contextmanager
def document_context(document_id: str | None) -> Iterator[None]:
    """Tag every log line emitted inside the block with the given document id."""
    token = _document_id_ctx.set(document_id or "-")
    try:
        yield
    finally:
        _document_id_ctx.reset(token)


class ContextFilter(logging.Filter):
    """Inject request_id and document_id from contextvars into log records."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003 (shadow builtins)
        record.request_id = get_request_id()
        record.document_id = get_document_id()
        return True


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging with one stdout handler.

    Called from the app factory. Safe to call repeatedly.
    """
    root = logging.getLogger()
    root.setLevel(level.upper())

    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level.upper())
    handler.addFilter(ContextFilter())
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s | %(levelname)s | %(name)s | request_id=%(request_id)s doc=%(document_id)s | %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
    )
    root.addHandler(handler)

    # httpx logs every request line at INFO, which drowns the review events
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Attach an X-Request-ID to each request/response and to the log context."""

    async def dispatch(self, request: Request, call_next):
        incoming: Optional[str] = request.headers.get("X-Request-ID")
        rid = incoming or uuid.uuid4().hex
        request.state.request_id = rid
        token = _request_id_ctx.set(rid)
        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = rid
            return response
        finally:
            _request_id_ctx.reset(token)
