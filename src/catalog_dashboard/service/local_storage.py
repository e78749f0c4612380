"""File-backed key-value slots, the local stand-in for browser storage."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Optional


class LocalStorage:
    """Named string slots kept in one JSON object on disk.

    Every write rewrites the whole file so a reader never observes a partial
    update from this process.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def get_item(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        slots = self._read_all()
        slots[key] = value
        self._write_all(slots)

    def remove_item(self, key: str) -> None:
        slots = self._read_all()
        if slots.pop(key, None) is not None:
            self._write_all(slots)

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        with self.path.open(encoding="utf-8") as handle:
            return json.load(handle)

    def _write_all(self, slots: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as handle:
            json.dump(slots, handle, indent=2)
        tmp_path.replace(self.path)
