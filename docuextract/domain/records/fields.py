"""Field keys of the document schema and their accessors.

The schema is closed: the seven keys below are the only fields a record has,
and six of them (everything but documentType) can take part in relations.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from docuextract.domain.errors.exceptions import FieldNotLinkableError, UnknownFieldError
from docuextract.domain.records.models import DocumentData, ExtractedField


class FieldKey(str, Enum):
    DOCUMENT_TYPE = "documentType"
    DEALER_NAME = "dealerName"
    MODEL_NAME = "modelName"
    HORSE_POWER = "horsePower"
    ASSET_COST = "assetCost"
    DEALER_SIGNATURE = "dealerSignature"
    DEALER_STAMP = "dealerStamp"


_ATTRS: dict[FieldKey, str] = {
    FieldKey.DOCUMENT_TYPE: "document_type",
    FieldKey.DEALER_NAME: "dealer_name",
    FieldKey.MODEL_NAME: "model_name",
    FieldKey.HORSE_POWER: "horse_power",
    FieldKey.ASSET_COST: "asset_cost",
    FieldKey.DEALER_SIGNATURE: "dealer_signature",
    FieldKey.DEALER_STAMP: "dealer_stamp",
}

LINKABLE_FIELDS: tuple[FieldKey, ...] = (
    FieldKey.DEALER_NAME,
    FieldKey.MODEL_NAME,
    FieldKey.HORSE_POWER,
    FieldKey.ASSET_COST,
    FieldKey.DEALER_SIGNATURE,
    FieldKey.DEALER_STAMP,
)

NUMERIC_FIELDS = frozenset({FieldKey.HORSE_POWER, FieldKey.ASSET_COST})
PRESENCE_FIELDS = frozenset({FieldKey.DEALER_SIGNATURE, FieldKey.DEALER_STAMP})


def parse_field_key(key: Any) -> FieldKey:
    """Resolve a wire key ("dealerName") or attribute name ("dealer_name") to a FieldKey."""
    if isinstance(key, FieldKey):
        return key
    if isinstance(key, str):
        try:
            return FieldKey(key)
        except ValueError:
            for field_key, attr in _ATTRS.items():
                if attr == key:
                    return field_key
    raise UnknownFieldError(str(key))


def parse_linkable_key(key: Any) -> FieldKey:
    field_key = parse_field_key(key)
    if field_key not in LINKABLE_FIELDS:
        raise FieldNotLinkableError(field_key.value)
    return field_key


def get_field(data: DocumentData, key: Any) -> ExtractedField:
    return getattr(data, _ATTRS[parse_field_key(key)])


def replace_field(data: DocumentData, key: Any, field: ExtractedField) -> DocumentData:
    """Return a copy of ``data`` with one field swapped; ``data`` itself is untouched."""
    return data.model_copy(update={_ATTRS[parse_field_key(key)]: field})
