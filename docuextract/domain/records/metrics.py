from __future__ import annotations

from docuextract.domain.records.fields import FieldKey, get_field
from docuextract.domain.records.models import DocumentData, ProcessingMetrics

# Flat price of one extraction call
DEFAULT_COST_PER_EXTRACTION_USD = 0.002

# Presence fields (signature, stamp) do not count towards accuracy
ACCURACY_FIELDS: tuple[FieldKey, ...] = (
    FieldKey.DOCUMENT_TYPE,
    FieldKey.DEALER_NAME,
    FieldKey.MODEL_NAME,
    FieldKey.HORSE_POWER,
    FieldKey.ASSET_COST,
)


def document_accuracy(data: DocumentData) -> float:
    """Mean confidence of the accuracy fields, as a percentage."""
    total = sum(get_field(data, key).confidence for key in ACCURACY_FIELDS)
    return total / len(ACCURACY_FIELDS) * 100


def compute_metrics(
    data: DocumentData,
    latency_ms: float,
    *,
    cost_usd: float = DEFAULT_COST_PER_EXTRACTION_USD,
) -> ProcessingMetrics:
    return ProcessingMetrics(
        latency_ms=latency_ms,
        cost_estimate_usd=cost_usd,
        document_accuracy=document_accuracy(data),
    )
