"""Operator corrections of extracted fields.

A correction replaces a field's value, marks it as edited, pins confidence to
1.0 and appends an entry to the field's history. Setting a field to the value
it already has changes nothing.
"""

from __future__ import annotations

import math
import re
from typing import Any

from docuextract.core.dates import utc_now_iso
from docuextract.domain.records.fields import (
    NUMERIC_FIELDS,
    PRESENCE_FIELDS,
    FieldKey,
    get_field,
    parse_field_key,
    replace_field,
)
from docuextract.domain.records.models import CorrectionEntry, DocumentData

DEFAULT_OPERATOR = "Operator"

_NUMBER_PREFIX = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INFINITY_PREFIX = re.compile(r"^([+-]?)Infinity")
_TRUTHY = {"true", "yes", "1", "present", "on"}


def parse_number(raw: Any) -> float:
    """Parse the leading number of ``raw``; NaN when there is none.

    "50 HP" -> 50.0, "1e3" -> 1000.0, "abc" -> nan.
    """
    if isinstance(raw, bool):
        return float(raw)
    if isinstance(raw, (int, float)):
        return float(raw)
    text = str(raw).strip()
    infinity = _INFINITY_PREFIX.match(text)
    if infinity is not None:
        return -math.inf if infinity.group(1) == "-" else math.inf
    match = _NUMBER_PREFIX.match(text)
    if match is None:
        return math.nan
    return float(match.group(0))


def parse_presence(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, (int, float)):
        return raw != 0
    return str(raw).strip().lower() in _TRUTHY


def render_text(raw: Any) -> str:
    """Text form of operator input for text fields: 575 -> "575", 5.0 -> "5", True -> "true"."""
    if isinstance(raw, str):
        return raw
    if isinstance(raw, bool):
        return "true" if raw else "false"
    if isinstance(raw, float) and raw.is_integer():
        return str(int(raw))
    return str(raw)


def coerce_value(key: FieldKey, raw: Any) -> Any:
    """Convert raw operator input to the type of the field named by ``key``."""
    if key in NUMERIC_FIELDS:
        return parse_number(raw)
    if key in PRESENCE_FIELDS:
        return parse_presence(raw)
    return render_text(raw)


def apply_correction(
    data: DocumentData,
    field_key: Any,
    raw_value: Any,
    *,
    user: str = DEFAULT_OPERATOR,
    timestamp: str | None = None,
) -> DocumentData:
    """Apply one operator edit and return the resulting record data.

    Returns ``data`` itself when the parsed value equals the current one.
    NaN never equals itself, so re-entering an unparseable number is logged
    as a new correction each time.

    Raises:
        UnknownFieldError: ``field_key`` is not a schema field.
    """
    key = parse_field_key(field_key)
    current = get_field(data, key)
    new_value = coerce_value(key, raw_value)
    if current.value == new_value:
        return data

    entry = CorrectionEntry(
        old_value=current.value,
        new_value=new_value,
        timestamp=timestamp or utc_now_iso(),
        user=user,
    )
    updated = current.model_copy(
        update={
            "value": new_value,
            "is_edited": True,
            "confidence": 1.0,
            "history": [*(current.history or []), entry],
        }
    )
    return replace_field(data, key, updated)
