"""Review session: the operator's working state.

Owns the record store, the active working copy, the current advisory and the
theme. Every edit to the active record is written back into the store entry with
the same id. The two external calls are the only awaits; everything else runs
to completion, so overlapping calls resolve in whatever order they finish and
the last one to finish wins.
"""

from __future__ import annotations

import time
import uuid
from typing import Any, Callable

from docuextract.core.dates import utc_now_iso
from docuextract.core.logging import document_context, get_logger
from docuextract.application.session.preferences import Theme, load_theme, save_theme
from docuextract.domain.errors.classifier import ErrorAdvisory, classify_error
from docuextract.domain.errors.exceptions import (
    NoActiveRecordError,
    NoGeneratedImageError,
    RecordNotFoundError,
)
from docuextract.domain.ports.extraction_port import ExtractionPort, GenerationPort
from docuextract.domain.ports.state_port import StatePort
from docuextract.domain.records import relations as graph
from docuextract.domain.records.corrections import DEFAULT_OPERATOR, apply_correction
from docuextract.domain.records.metrics import DEFAULT_COST_PER_EXTRACTION_USD, compute_metrics
from docuextract.domain.records.models import Relation, StoredDocument
from docuextract.domain.records.store import RecordStore
from docuextract.observability.metrics import inc_advisory, inc_correction, inc_relation, record_extraction

_logger = get_logger(__name__)


class ReviewSession:
    def __init__(
        self,
        *,
        store: RecordStore,
        state: StatePort,
        extraction: ExtractionPort,
        generation: GenerationPort,
        operator: str = DEFAULT_OPERATOR,
        cost_per_extraction_usd: float = DEFAULT_COST_PER_EXTRACTION_USD,
        theme: Theme = Theme.LIGHT,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.store = store
        self._state = state
        self._extraction = extraction
        self._generation = generation
        self._operator = operator
        self._cost = cost_per_extraction_usd
        self._clock = clock
        self.theme = theme
        self.active: StoredDocument | None = None
        self.advisory: ErrorAdvisory | None = None
        self.generated_image: str | None = None

    @classmethod
    def open(
        cls,
        state: StatePort,
        extraction: ExtractionPort,
        generation: GenerationPort,
        *,
        default_theme: Theme = Theme.LIGHT,
        **kwargs: Any,
    ) -> "ReviewSession":
        """Start a session from persisted state (history and theme)."""
        return cls(
            store=RecordStore.load(state),
            state=state,
            extraction=extraction,
            generation=generation,
            theme=load_theme(state, default_theme),
            **kwargs,
        )

    # ------------------------------------------------------------------
    # External calls
    # ------------------------------------------------------------------

    async def process_image(self, image: str) -> StoredDocument | None:
        """Extract fields from ``image`` and store the result as the new active record.

        Returns None when the extraction call fails; the failure is then available
        as ``advisory``.
        """
        self.advisory = None
        started = self._clock()
        try:
            data = await self._extraction.extract(image)
        except Exception as exc:
            record_extraction(self._clock() - started, ok=False)
            self._fail("extraction", exc)
            return None
        elapsed = self._clock() - started
        record_extraction(elapsed, ok=True)

        document = StoredDocument(
            id=str(uuid.uuid4()),
            timestamp=utc_now_iso(),
            image=image,
            data=data,
            metrics=compute_metrics(data, round(elapsed * 1000), cost_usd=self._cost),
            relations=[],
        )
        self.store.insert(document)
        self.active = document
        with document_context(document.id):
            _logger.info(
                "document_processed",
                extra={
                    "latency_ms": document.metrics.latency_ms,
                    "accuracy": round(document.metrics.document_accuracy, 2),
                },
            )
        return document

    async def reprocess(self) -> StoredDocument | None:
        """Run extraction again on the active record's image, producing a new record."""
        return await self.process_image(self.require_active().image)

    async def generate_image(self, prompt: str) -> str | None:
        if not prompt.strip():
            return None
        self.advisory = None
        try:
            image = await self._generation.generate(prompt)
        except Exception as exc:
            self._fail("generation", exc)
            return None
        self.generated_image = image
        _logger.info("image_generated", extra={"prompt_chars": len(prompt)})
        return image

    async def process_generated_image(self) -> StoredDocument | None:
        if not self.generated_image:
            raise NoGeneratedImageError()
        self.active = None
        return await self.process_image(self.generated_image)

    def _fail(self, call: str, exc: BaseException) -> None:
        advisory = classify_error(exc)
        self.advisory = advisory
        inc_advisory(advisory.kind.value)
        _logger.warning(
            f"{call}_failed",
            extra={"kind": advisory.kind.value, "error": str(exc)[:300]},
        )

    def dismiss_advisory(self) -> None:
        self.advisory = None

    # ------------------------------------------------------------------
    # Active record
    # ------------------------------------------------------------------

    def require_active(self) -> StoredDocument:
        if self.active is None:
            raise NoActiveRecordError()
        return self.active

    def require_document(self, document_id: str) -> StoredDocument:
        document = self.store.get(document_id)
        if document is None:
            raise RecordNotFoundError(document_id)
        return document

    def open_document(self, document_id: str) -> StoredDocument:
        self.active = self.require_document(document_id)
        self.advisory = None
        return self.active

    def discard(self) -> None:
        self.active = None

    def correct(self, field_key: Any, raw_value: Any) -> StoredDocument:
        """Apply an operator correction to the active record and mirror it into the store."""
        active = self.require_active()
        data = apply_correction(active.data, field_key, raw_value, user=self._operator)
        if data is active.data:
            return active

        with document_context(active.id):
            self._write_back(active.id, lambda d: d.model_copy(update={"data": data}))
            self.active = active.model_copy(update={"data": data})
            inc_correction()
            _logger.info("correction_applied", extra={"field": str(getattr(field_key, "value", field_key))})
        return self.active

    def link(self, source_field: Any, target_doc_id: str, target_field: Any) -> Relation:
        active = self.require_active()
        target = self.require_document(target_doc_id)
        relation = graph.create_relation(source_field, active, target, target_field)
        linked = graph.add_relation(active, relation)
        relations = linked.relations
        with document_context(active.id):
            self._write_back(active.id, lambda d: d.model_copy(update={"relations": relations}))
            self.active = linked
            inc_relation("created")
            _logger.info(
                "relation_created",
                extra={"relation_id": relation.id, "target_doc_id": target_doc_id},
            )
        return relation

    def unlink(self, relation_id: str) -> bool:
        active = self.require_active()
        updated = graph.remove_relation(active, relation_id)
        if len(updated.relations) == len(active.relations):
            return False
        relations = updated.relations
        with document_context(active.id):
            self._write_back(active.id, lambda d: d.model_copy(update={"relations": relations}))
            self.active = updated
            inc_relation("removed")
            _logger.info("relation_removed", extra={"relation_id": relation_id})
        return True

    def link_candidates(self) -> list[StoredDocument]:
        return graph.link_candidates(self.store, self.require_active())

    def stale_relations(self) -> list[Relation]:
        return graph.stale_relations(self.require_active(), self.store.ids())

    def _write_back(self, document_id: str, updater: Callable[[StoredDocument], StoredDocument]) -> None:
        if self.store.replace(document_id, updater) is None:
            _logger.warning("active_record_not_in_store")

    # ------------------------------------------------------------------
    # Store and preferences
    # ------------------------------------------------------------------

    def search(self, query: str) -> list[StoredDocument]:
        return self.store.search(query)

    def delete(self, document_id: str) -> bool:
        removed = self.store.delete(document_id)
        if self.active is not None and self.active.id == document_id:
            self.active = None
        return removed

    def set_theme(self, theme: Theme) -> Theme:
        self.theme = Theme(theme)
        save_theme(self._state, self.theme)
        return self.theme

    def toggle_theme(self) -> Theme:
        return self.set_theme(self.theme.toggled())
