"""Persistence primitives for the local cache.

Keys are POSIX-style paths relative to the store root, e.g.
``tickets/1/5/catalog.json``. Writes overwrite and are not atomic.
"""
import json
from pathlib import Path, PurePosixPath
from typing import Any, Protocol


def dump_json(data: Any) -> str:
    """Compact UTF-8 JSON, the format of every JSON file in the cache."""
    return json.dumps(data, ensure_ascii=False, separators=(",", ":"))


class Store(Protocol):
    """Minimal file-system surface used by the harvester."""

    def exists(self, key: str) -> bool: ...

    def mkdir(self, key: str) -> None: ...

    def read_text(self, key: str) -> str: ...

    def read_bytes(self, key: str) -> bytes: ...

    def write_text(self, key: str, text: str) -> None: ...

    def write_bytes(self, key: str, data: bytes) -> None: ...

    def listdir(self, key: str) -> list[str]: ...


class FileStore:
    """Store backed by a directory on disk."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def path(self, key: str) -> Path:
        return self.root / PurePosixPath(key) if key else self.root

    def exists(self, key: str) -> bool:
        return self.path(key).exists()

    def mkdir(self, key: str) -> None:
        self.path(key).mkdir(parents=True, exist_ok=True)

    def read_text(self, key: str) -> str:
        return self.path(key).read_text(encoding="utf-8")

    def read_bytes(self, key: str) -> bytes:
        return self.path(key).read_bytes()

    def write_text(self, key: str, text: str) -> None:
        path = self.path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")

    def write_bytes(self, key: str, data: bytes) -> None:
        path = self.path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    def listdir(self, key: str) -> list[str]:
        path = self.path(key)
        if not path.is_dir():
            return []
        return sorted(entry.name for entry in path.iterdir())


class MemoryStore:
    """In-memory Store, used to exercise cache logic without disk I/O."""

    def __init__(self):
        self.files: dict[str, bytes] = {}
        self.dirs: set[str] = {""}
        self.writes: list[str] = []  # keys in write order

    def exists(self, key: str) -> bool:
        key = _normalize(key)
        return key in self.files or key in self.dirs

    def mkdir(self, key: str) -> None:
        key = _normalize(key)
        parts = PurePosixPath(key).parts
        for i in range(1, len(parts) + 1):
            self.dirs.add("/".join(parts[:i]))

    def read_text(self, key: str) -> str:
        return self.read_bytes(key).decode("utf-8")

    def read_bytes(self, key: str) -> bytes:
        key = _normalize(key)
        if key not in self.files:
            raise FileNotFoundError(key)
        return self.files[key]

    def write_text(self, key: str, text: str) -> None:
        self.write_bytes(key, text.encode("utf-8"))

    def write_bytes(self, key: str, data: bytes) -> None:
        key = _normalize(key)
        parent = str(PurePosixPath(key).parent)
        if parent != ".":
            self.mkdir(parent)
        self.files[key] = bytes(data)
        self.writes.append(key)

    def listdir(self, key: str) -> list[str]:
        key = _normalize(key)
        prefix = f"{key}/" if key else ""
        names = set()
        for entry in list(self.files) + list(self.dirs):
            if entry and entry.startswith(prefix):
                names.add(entry[len(prefix):].split("/", 1)[0])
        return sorted(names)


def _normalize(key: str) -> str:
    key = str(PurePosixPath(key)) if key else ""
    return "" if key == "." else key
