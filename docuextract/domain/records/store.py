"""Record store: the ordered, persisted collection of processed documents.

Newest record first. The whole sequence is written through the StatePort after
every change and read back in one piece when the store is loaded.
"""

from __future__ import annotations

from typing import Any, Callable, Iterator

from pydantic import TypeAdapter

from docuextract.core.logging import get_logger
from docuextract.domain.ports.state_port import StatePort
from docuextract.domain.records.models import StoredDocument

HISTORY_KEY = "docu_history"

_documents_adapter = TypeAdapter(list[StoredDocument])
_logger = get_logger(__name__)


def serialize_documents(documents: list[StoredDocument]) -> list[dict[str, Any]]:
    return [d.model_dump(by_alias=True, exclude_none=True) for d in documents]


def deserialize_documents(payload: Any) -> list[StoredDocument]:
    """Parse a stored history payload; raises ValueError (pydantic ValidationError) when malformed."""
    if payload is None:
        return []
    return _documents_adapter.validate_python(payload)


class RecordStore:
    def __init__(
        self,
        state: StatePort,
        documents: list[StoredDocument] | None = None,
        *,
        load_error: str | None = None,
    ) -> None:
        self._state = state
        self._documents: list[StoredDocument] = list(documents or [])
        self.load_error = load_error

    @classmethod
    def load(cls, state: StatePort) -> "RecordStore":
        """Read the persisted history.

        A corrupt or unreadable payload yields an empty store with ``load_error`` set;
        the previous records stay on disk until the next write replaces them.
        """
        try:
            documents = deserialize_documents(state.read_json(HISTORY_KEY))
        except (OSError, ValueError) as exc:
            _logger.error("record_store_load_failed", extra={"error": str(exc)[:500]})
            return cls(state, load_error=f"{type(exc).__name__}: {exc}")
        _logger.info("record_store_loaded", extra={"count": len(documents)})
        return cls(state, documents)

    @property
    def documents(self) -> list[StoredDocument]:
        return list(self._documents)

    def __len__(self) -> int:
        return len(self._documents)

    def __iter__(self) -> Iterator[StoredDocument]:
        return iter(list(self._documents))

    def ids(self) -> list[str]:
        return [d.id for d in self._documents]

    def get(self, document_id: str) -> StoredDocument | None:
        for doc in self._documents:
            if doc.id == document_id:
                return doc
        return None

    def insert(self, document: StoredDocument) -> None:
        self._commit([document, *self._documents])
        _logger.info("record_inserted", extra={"record_id": document.id, "count": len(self._documents)})

    def delete(self, document_id: str) -> bool:
        """Remove the record with ``document_id``. Returns False (and writes nothing) if absent."""
        kept = [d for d in self._documents if d.id != document_id]
        if len(kept) == len(self._documents):
            return False
        self._commit(kept)
        _logger.info("record_deleted", extra={"record_id": document_id, "count": len(kept)})
        return True

    def replace(
        self,
        document_id: str,
        updater: Callable[[StoredDocument], StoredDocument],
    ) -> StoredDocument | None:
        """Swap the record with ``document_id`` for ``updater(record)``, keeping its position."""
        for index, doc in enumerate(self._documents):
            if doc.id == document_id:
                updated = updater(doc)
                documents = list(self._documents)
                documents[index] = updated
                self._commit(documents)
                return updated
        return None

    def search(self, query: str) -> list[StoredDocument]:
        """Records whose dealer name, model name or document type contains ``query``."""
        if not query or not query.strip():
            return list(self._documents)
        needle = query.lower()
        return [
            d
            for d in self._documents
            if needle in d.data.dealer_name.value.lower()
            or needle in d.data.model_name.value.lower()
            or needle in d.data.document_type.value.lower()
        ]

    def _commit(self, documents: list[StoredDocument]) -> None:
        # The in-memory list only changes once the write went through
        self._state.write_json(HISTORY_KEY, serialize_documents(documents))
        self._documents = documents
        # A successful write supersedes whatever failed to load
        self.load_error = None
