from __future__ import annotations

import time
from typing import Callable, Awaitable

from fastapi import APIRouter, Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware

http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests processed",
    labelnames=("endpoint", "method", "status"),
)
http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    labelnames=("endpoint", "method"),
    buckets=(0.05, 0.1, 0.2, 0.5, 1.0, 2.0, 5.0, 10.0),
)
extraction_duration_seconds = Histogram(
    "extraction_duration_seconds",
    "Extraction service call duration in seconds",
    buckets=(0.5, 1.0, 2.0, 5.0, 10.0, 20.0, 60.0),
)
extractions_total = Counter(
    "extractions_total",
    "Extraction calls by outcome",
    labelnames=("outcome",),
)
advisories_total = Counter(
    "advisories_total",
    "External call failures by advisory kind",
    labelnames=("kind",),
)
corrections_total = Counter("corrections_total", "Operator corrections applied")
relations_total = Counter(
    "relations_total",
    "Relation changes by action",
    labelnames=("action",),
)


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]):
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            _observe(request, "500", start)
            raise
        _observe(request, str(getattr(response, "status_code", 200)), start)
        return response


def _observe(request: Request, status: str, start: float) -> None:
    endpoint = _endpoint_label(request)
    method = request.method
    http_requests_total.labels(endpoint=endpoint, method=method, status=status).inc()
    http_request_duration_seconds.labels(endpoint=endpoint, method=method).observe(time.perf_counter() - start)


def _endpoint_label(request: Request) -> str:
    # Prefer the route template (/v1/documents/{document_id}) over the raw path
    route = request.scope.get("route")
    path = getattr(route, "path", None) or getattr(route, "path_format", None)
    if isinstance(path, str) and path:
        return path
    return request.url.path


def record_extraction(seconds: float, *, ok: bool) -> None:
    extraction_duration_seconds.observe(seconds)
    extractions_total.labels(outcome="success" if ok else "failure").inc()


def inc_advisory(kind: str) -> None:
    advisories_total.labels(kind=kind).inc()


def inc_correction() -> None:
    corrections_total.inc()


def inc_relation(action: str) -> None:
    relations_total.labels(action=action).inc()


router = APIRouter(tags=["observability"])


@router.get("/metrics")
async def metrics_endpoint():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
