"""Record models: extracted fields, corrections, relations and stored documents.

Attribute names are snake_case; the persisted and wire form is camelCase
(``dealerName``, ``isEdited``, ``targetDocId`` ...), produced with
``model_dump(by_alias=True)``.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class WireModel(BaseModel):
    """Base for models persisted/exchanged with camelCase keys."""

    # model_name is a schema field, not a pydantic hook
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, protected_namespaces=())


class BoundingBox(WireModel):
    """Box in the normalized 0-1000 space. Bounds are not checked against each other."""

    ymin: float
    xmin: float
    ymax: float
    xmax: float


class CorrectionEntry(WireModel):
    """One line of a field's correction log."""

    model_config = ConfigDict(frozen=True)

    old_value: Any = None
    new_value: Any = None
    timestamp: str
    user: str


class ExtractedField(WireModel, Generic[T]):
    """A single extracted attribute with its confidence and correction history."""

    value: T
    confidence: float
    bounding_box: BoundingBox | None = None
    is_edited: bool | None = None
    history: list[CorrectionEntry] | None = None


class DocumentData(WireModel):
    """The closed seven-field extraction schema."""

    model_config = ConfigDict(extra="forbid")

    document_type: ExtractedField[str]
    dealer_name: ExtractedField[str]
    model_name: ExtractedField[str]
    horse_power: ExtractedField[float]
    asset_cost: ExtractedField[float]
    dealer_signature: ExtractedField[bool]
    dealer_stamp: ExtractedField[bool]


class ProcessingMetrics(WireModel):
    latency_ms: float
    cost_estimate_usd: float
    document_accuracy: float


class Relation(WireModel):
    """Link from a field of the owning record to a field of another record.

    target_value and target_doc_name are copied when the link is made and are
    never refreshed.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    source_field: str
    target_doc_id: str
    target_field: str
    target_value: Any = None
    target_doc_name: str


class StoredDocument(WireModel):
    id: str
    timestamp: str
    image: str
    data: DocumentData
    metrics: ProcessingMetrics
    relations: list[Relation] = Field(default_factory=list)
