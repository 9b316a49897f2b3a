"""Ports for the external AI services.

Both calls may fail with an arbitrary exception; its message is what the error
classifier sees.
"""

from __future__ import annotations

from typing import Protocol

from docuextract.domain.records.models import DocumentData


class ExtractionPort(Protocol):
    """Reads the seven schema fields off an encoded document image."""

    async def extract(self, image: str) -> DocumentData: ...


class GenerationPort(Protocol):
    """Renders a document image from a text prompt, returned as a data URL."""

    async def generate(self, prompt: str) -> str: ...
