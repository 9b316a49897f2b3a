"""StatePort protocol for durable session state.

Holds whole JSON documents under a handful of fixed keys (record history,
theme preference). Implementations live in the infrastructure layer.
"""

from __future__ import annotations

from typing import Any, Protocol


class StatePort(Protocol):
    """Abstraction over the key/value store backing the review session."""

    def read_json(self, key: str) -> Any | None:
        """Return the stored document, None when the key was never written.

        Raises ValueError when the stored bytes are not valid JSON.
        """
        ...

    def write_json(self, key: str, obj: Any) -> None: ...
