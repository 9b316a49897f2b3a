from __future__ import annotations

from typing import Union

from pydantic import Field, StrictBool, StrictInt

from docuextract.application.session.preferences import Theme
from docuextract.domain.errors.classifier import ErrorAdvisory
from docuextract.domain.records.models import Relation, StoredDocument, WireModel


class ProcessRequest(WireModel):
    image: str = Field(min_length=1, description="Data URL or bare base64 image payload")


class CorrectionRequest(WireModel):
    # Strict members: 575 stays an int, true stays a bool
    value: Union[StrictBool, StrictInt, float, str]


class RelationRequest(WireModel):
    source_field: str
    target_doc_id: str
    target_field: str


class GenerationRequest(WireModel):
    prompt: str = Field(min_length=1, pattern=r"\S")


class ThemeRequest(WireModel):
    theme: Theme


class ThemeResponse(WireModel):
    theme: Theme


class GenerationResponse(WireModel):
    image: str


class AdvisoryResponse(WireModel):
    advisory: ErrorAdvisory | None = None


class DocumentSummary(WireModel):
    id: str
    timestamp: str
    document_type: str
    dealer_name: str
    model_name: str
    document_accuracy: float
    relation_count: int

    @classmethod
    def from_document(cls, doc: StoredDocument) -> "DocumentSummary":
        return cls(
            id=doc.id,
            timestamp=doc.timestamp,
            document_type=doc.data.document_type.value,
            dealer_name=doc.data.dealer_name.value,
            model_name=doc.data.model_name.value,
            document_accuracy=doc.metrics.document_accuracy,
            relation_count=len(doc.relations),
        )


class DocumentListResponse(WireModel):
    total: int
    items: list[DocumentSummary]


class RelationView(WireModel):
    relation: Relation
    stale: bool


class RelationListResponse(WireModel):
    relations: list[RelationView]


class ActiveRecordResponse(WireModel):
    document: StoredDocument
    stale_relation_ids: list[str]
