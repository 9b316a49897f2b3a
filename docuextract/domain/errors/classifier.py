"""
Classification of external service failures into operator advisories.

Rules are case-insensitive substring checks on the failure text, evaluated in
order; the first matching rule wins and unmatched failures fall back to the
generic ``service`` advisory that echoes the raw text.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx
from pydantic import BaseModel


class ErrorKind(str, Enum):
    NETWORK = "network"
    FORMAT = "format"
    QUALITY = "quality"
    SERVICE = "service"


@dataclass(frozen=True)
class AdvisorySpec:
    """Fixed texts shown for one error kind."""

    title: str
    message: str | None  # None: echo the raw failure text
    suggestion: str


ADVISORY_SPECS: dict[ErrorKind, AdvisorySpec] = {
    ErrorKind.NETWORK: AdvisorySpec(
        "Network Interrupted", "Could not establish connection.", "Check your connection."
    ),
    ErrorKind.FORMAT: AdvisorySpec("Content Blocked", "AI flagged content.", "Try another document."),
    ErrorKind.QUALITY: AdvisorySpec(
        "Extraction Failed", "AI couldn't identify fields.", "Ensure document is clear."
    ),
    ErrorKind.SERVICE: AdvisorySpec("Engine Error", None, "Try refreshing."),
}

CLASSIFICATION_RULES: tuple[tuple[ErrorKind, tuple[str, ...]], ...] = (
    (ErrorKind.NETWORK, ("fetch", "network", "offline")),
    (ErrorKind.FORMAT, ("safety", "blocked")),
    (ErrorKind.QUALITY, ("json", "unexpected token", "empty response")),
)

FALLBACK_MESSAGE = "Unexpected error."


class ErrorAdvisory(BaseModel):
    """User-facing description of a failed external call."""

    kind: ErrorKind
    title: str
    message: str
    suggestion: str


def build_advisory(kind: ErrorKind, raw_message: str = "") -> ErrorAdvisory:
    spec = ADVISORY_SPECS[kind]
    return ErrorAdvisory(
        kind=kind,
        title=spec.title,
        message=spec.message or raw_message or FALLBACK_MESSAGE,
        suggestion=spec.suggestion,
    )


def _raw_text(error: Any) -> str:
    if error is None:
        return ""
    if isinstance(error, str):
        return error
    try:
        return str(error) if isinstance(error, BaseException) else repr(error)
    except Exception:
        return type(error).__name__


def classify_error(error: Any) -> ErrorAdvisory:
    """Map a failure (exception, message or None) to an advisory. Never raises."""
    raw = _raw_text(error)
    # Transport failures can carry OS-level text that matches no rule
    if isinstance(error, httpx.TransportError):
        return build_advisory(ErrorKind.NETWORK, raw)

    lowered = raw.lower()
    for kind, needles in CLASSIFICATION_RULES:
        if any(needle in lowered for needle in needles):
            return build_advisory(kind, raw)
    return build_advisory(ErrorKind.SERVICE, raw)
