"""
Persisted integer store for the chant count.

Write-through: every set() hits disk so a crash never loses a name.
"""

from pathlib import Path
from typing import Dict, Protocol
import json
import threading


COUNT_KEY = "chantCount"


class CountStore(Protocol):
    """Narrow key-value contract the counter depends on."""

    def get(self, key: str) -> int: ...

    def set(self, key: str, value: int) -> None: ...


class MemoryCountStore:
    """In-process store. Used by tests and ephemeral runs."""

    def __init__(self, initial: Dict[str, int] | None = None):
        self.values: Dict[str, int] = dict(initial or {})

    def get(self, key: str) -> int:
        return self.values.get(key, 0)

    def set(self, key: str, value: int) -> None:
        self.values[key] = value


class JsonCountStore:
    """
    Integer store backed by a small JSON object file.

    Missing or unreadable file reads as 0 for every key.

    Usage:
        store = JsonCountStore(config.state_file)
        store.set("chantCount", 42)
    """

    def __init__(self, path: Path):
        self.path = path
        self._lock = threading.Lock()
        self._values: Dict[str, int] = self._read()

    def get(self, key: str) -> int:
        with self._lock:
            return int(self._values.get(key, 0))

    def set(self, key: str, value: int) -> None:
        with self._lock:
            self._values[key] = int(value)
            self._write()

    def _read(self) -> Dict[str, int]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path) as f:
                data = json.load(f)
            return {k: int(v) for k, v in data.items()}
        except Exception as e:
            print(f"[Store] Error reading {self.path}: {e}")
            return {}

    def _write(self) -> None:
        """Write atomically via a temp file (must hold lock)."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(".tmp")
            with open(tmp, "w") as f:
                json.dump(self._values, f)
            tmp.replace(self.path)
        except Exception as e:
            print(f"[Store] Failed to write {self.path}: {e}")
