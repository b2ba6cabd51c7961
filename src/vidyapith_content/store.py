"""Persistent key-value stores shared by every content cache."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Protocol

from vidyapith_content.errors import PersistWriteFailed
from vidyapith_content.io_utils import atomic_write_text

_SAFE_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStore(Protocol):
    """String-to-string store. Components keep to disjoint keys."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryKeyValueStore:
    """In-process store, mostly for tests and embedding."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def remove(self, key: str) -> None:
        self._values.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._values)


class FileKeyValueStore:
    """One text file per key under a root directory, written atomically."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root).expanduser().resolve()
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY_RE.match(key):
            raise ValueError(f"invalid store key: {key!r}")
        return self.root / f"{key}.txt"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError):
            # unreadable entries behave like missing ones
            return None

    def set(self, key: str, value: str) -> None:
        try:
            atomic_write_text(self._path(key), value)
        except OSError as exc:
            raise PersistWriteFailed(f"failed to write {key}: {exc}") from exc

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    def keys(self) -> list[str]:
        return sorted(path.stem for path in self.root.glob("*.txt"))
