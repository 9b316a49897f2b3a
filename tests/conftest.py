from __future__ import annotations

import copy
from typing import Any

import pytest

from docuextract.domain.ports.extraction_port import ExtractionPort, GenerationPort
from docuextract.domain.ports.state_port import StatePort
from docuextract.domain.records.models import (
    DocumentData,
    ProcessingMetrics,
    StoredDocument,
)


# ============================== HELPERS ==================================

def build_data(
    *,
    document_type: str = "Invoice",
    dealer_name: str = "Acme Tractors",
    model_name: str = "MX-50",
    horse_power: float = 50.0,
    asset_cost: float = 650000.0,
    dealer_signature: bool = True,
    dealer_stamp: bool = False,
    confidences: tuple[float, ...] = (0.98, 0.95, 0.9, 0.95, 0.98, 0.9, 0.8),
) -> DocumentData:
    values = (document_type, dealer_name, model_name, horse_power, asset_cost, dealer_signature, dealer_stamp)
    keys = ("document_type", "dealer_name", "model_name", "horse_power", "asset_cost", "dealer_signature", "dealer_stamp")
    return DocumentData(
        **{k: {"value": v, "confidence": c} for k, v, c in zip(keys, values, confidences)}
    )


def build_document(doc_id: str, **data_kwargs: Any) -> StoredDocument:
    return StoredDocument(
        id=doc_id,
        timestamp="2024-05-01T10:00:00.000Z",
        image="data:image/png;base64,AAAA",
        data=build_data(**data_kwargs),
        metrics=ProcessingMetrics(latency_ms=1200, cost_estimate_usd=0.002, document_accuracy=95.2),
    )


class MemoryState(StatePort):
    """In-memory StatePort; keeps a deep copy of every write."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self.values: dict[str, Any] = dict(initial or {})
        self.writes: list[str] = []

    def read_json(self, key: str) -> Any | None:
        return copy.deepcopy(self.values.get(key))

    def write_json(self, key: str, obj: Any) -> None:
        self.values[key] = copy.deepcopy(obj)
        self.writes.append(key)


class BrokenState(MemoryState):
    def read_json(self, key: str) -> Any | None:
        raise ValueError("Expecting value: line 1 column 1 (char 0)")


class FlakyWriteState(MemoryState):
    """Writes raise OSError while ``failing`` is set."""

    failing = False

    def write_json(self, key: str, obj: Any) -> None:
        if self.failing:
            raise OSError(28, "No space left on device")
        super().write_json(key, obj)


class FakeExtraction(ExtractionPort):
    def __init__(self, result: DocumentData | None = None, error: BaseException | None = None) -> None:
        self.result = result or build_data()
        self.error = error
        self.images: list[str] = []

    async def extract(self, image: str) -> DocumentData:
        self.images.append(image)
        if self.error is not None:
            raise self.error
        return self.result


class FakeGeneration(GenerationPort):
    def __init__(self, image: str = "data:image/png;base64,R0VO", error: BaseException | None = None) -> None:
        self.image = image
        self.error = error
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.image


# ============================== FIXTURES ==================================

@pytest.fixture
def make_data():
    return build_data


@pytest.fixture
def make_document():
    return build_document


@pytest.fixture
def memory_state() -> MemoryState:
    return MemoryState()
