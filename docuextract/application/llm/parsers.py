from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from docuextract.domain.records.fields import NUMERIC_FIELDS, PRESENCE_FIELDS, FieldKey
from docuextract.domain.records.models import DocumentData


def split_data_url(image: str) -> tuple[str, str]:
    """Return (mime_type, base64_payload) for a data URL or a bare base64 string."""
    if image.startswith("data:") and "," in image:
        header, payload = image.split(",", 1)
        mime = header[len("data:"):].split(";", 1)[0] or "image/jpeg"
        return mime, payload
    return "image/jpeg", image


def _default_value(key: FieldKey) -> Any:
    if key in NUMERIC_FIELDS:
        return 0.0
    if key in PRESENCE_FIELDS:
        return False
    return ""


def _normalize_field(key: FieldKey, raw: Any) -> dict[str, Any]:
    obj = dict(raw) if isinstance(raw, dict) else {}
    if obj.get("value") is None:
        obj["value"] = _default_value(key)
    if obj.get("confidence") is None:
        obj["confidence"] = 0.0
    if not obj.get("boundingBox"):
        obj.pop("boundingBox", None)
    return obj


def parse_document_data(content: str) -> DocumentData:
    """Parse the extraction JSON text into the seven-field schema.

    Fields the model left out get an empty value and zero confidence; keys outside
    the schema are dropped.
    """
    try:
        obj = json.loads(content.strip())
    except json.JSONDecodeError as exc:
        raise ValueError(f"Extraction response is not valid JSON: {exc}") from exc
    if not isinstance(obj, dict):
        raise ValueError("Extraction response JSON is not an object")

    normalized = {key.value: _normalize_field(key, obj.get(key.value)) for key in FieldKey}
    try:
        return DocumentData.model_validate(normalized)
    except ValidationError as exc:
        raise ValueError(f"Extraction response JSON does not match the document schema: {exc}") from exc
