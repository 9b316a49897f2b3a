"""Exception hierarchy for review operations.

Record mutations (corrections, relations, store lookups) raise these instead of
silently ignoring bad input. The store is never touched when one is raised, so
callers may treat them as non-fatal. Each error carries a stable code and an
HTTP status and renders itself as RFC 7807 Problem Details.
"""

from typing import Any, Optional


class DocuExtractError(Exception):
    """Base exception for all review errors.

    Attributes:
        message: Human-readable error message
        error_code: Application-specific error code
        http_status: HTTP status code to return
        details: Additional context (dict)
    """

    error_code: str = "DOCUEXTRACT_ERROR"
    http_status: int = 400

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to RFC 7807 Problem Details format."""
        return {
            "type": f"/errors/{self.error_code}",
            "title": self.message,
            "status": self.http_status,
            "code": self.error_code,
            "details": self.details,
        }


class NoActiveRecordError(DocuExtractError):
    """An operation needs an active record but the session has none."""

    error_code = "NO_ACTIVE_RECORD"
    http_status = 409

    def __init__(self) -> None:
        super().__init__("No active record in the session")


class NoGeneratedImageError(DocuExtractError):
    """Processing of a generated image was requested before one was generated."""

    error_code = "NO_GENERATED_IMAGE"
    http_status = 409

    def __init__(self) -> None:
        super().__init__("No generated image in the session")


class RecordNotFoundError(DocuExtractError):
    """The referenced record is not in the store.

    Args:
        document_id: Identifier of the missing record
    """

    error_code = "RECORD_NOT_FOUND"
    http_status = 404

    def __init__(self, document_id: str):
        super().__init__("Record not found", details={"document_id": document_id})


class UnknownFieldError(DocuExtractError):
    """The field key does not name one of the seven document fields."""

    error_code = "UNKNOWN_FIELD"
    http_status = 422

    def __init__(self, field_key: str):
        super().__init__(f"Unknown field: {field_key}", details={"field": field_key})


class FieldNotLinkableError(DocuExtractError):
    """The field exists but cannot take part in a relation (documentType)."""

    error_code = "FIELD_NOT_LINKABLE"
    http_status = 422

    def __init__(self, field_key: str):
        super().__init__(f"Field cannot be linked: {field_key}", details={"field": field_key})


class SelfRelationError(DocuExtractError):
    """Source and target of a relation are the same record."""

    error_code = "SELF_RELATION"
    http_status = 422

    def __init__(self, document_id: str):
        super().__init__("A record cannot be linked to itself", details={"document_id": document_id})
