"""Local disk adapter implementing StatePort.

Layout: <base_dir>/<key>.json, one file per key, each rewritten in full.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from docuextract.domain.ports.state_port import StatePort


class LocalDiskStateAdapter(StatePort):
    def __init__(self, base_dir: Path) -> None:
        self._base_dir = Path(base_dir)

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def path_for(self, key: str) -> Path:
        return self._base_dir / f"{key}.json"

    def read_json(self, key: str) -> Any | None:
        src = self.path_for(key)
        if not src.exists():
            return None
        with src.open("r", encoding="utf-8") as f:
            return json.load(f)

    def write_json(self, key: str, obj: Any) -> None:
        dest = self.path_for(key)
        dest.parent.mkdir(parents=True, exist_ok=True)
        # Write to a sibling temp file and swap it in so a crash never leaves half a file
        fd, tmp_name = tempfile.mkstemp(prefix=f".{key}.", suffix=".tmp", dir=dest.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(obj, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, dest)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
