from __future__ import annotations

from typing import Any


def build_extraction_prompt() -> str:
    return (
        "You are a document AI assistant. Classify this document image and extract the fields below "
        "as strict JSON. The text may be in English, Hindi or Gujarati. Give every field a confidence "
        "between 0 and 1.\n"
        'documentType: "Invoice" (tax invoice, bill, payment details), "Quotation" (estimate, '
        'pro-forma, offer) or "Other".\n'
        "dealerName: dealer name (fuzzy match). modelName: model name (exact match).\n"
        'horsePower: numeric only ("50 HP" -> 50). assetCost: numeric digits only.\n'
        "dealerSignature, dealerStamp: presence as a boolean, plus a bounding box "
        "(ymin, xmin, ymax, xmax normalized to 0-1000) when present."
    )


def _field_schema(value_type: str, *, with_box: bool = False) -> dict[str, Any]:
    properties: dict[str, Any] = {
        "value": {"type": value_type},
        "confidence": {"type": "NUMBER"},
    }
    if with_box:
        properties["boundingBox"] = {
            "type": "OBJECT",
            "properties": {k: {"type": "NUMBER"} for k in ("ymin", "xmin", "ymax", "xmax")},
        }
    return {"type": "OBJECT", "properties": properties, "required": ["value", "confidence"]}


EXTRACTION_RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "documentType": _field_schema("STRING"),
        "dealerName": _field_schema("STRING"),
        "modelName": _field_schema("STRING"),
        "horsePower": _field_schema("NUMBER"),
        "assetCost": _field_schema("NUMBER"),
        "dealerSignature": _field_schema("BOOLEAN", with_box=True),
        "dealerStamp": _field_schema("BOOLEAN", with_box=True),
    },
    "required": [
        "documentType",
        "dealerName",
        "modelName",
        "horsePower",
        "assetCost",
        "dealerSignature",
        "dealerStamp",
    ],
}
