from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Protocol


class SessionStore(Protocol):
    """Persistence collaborator: holds one serialized session."""

    def load(self) -> Optional[Dict[str, Any]]:
        ...

    def save(self, data: Dict[str, Any]) -> None:
        ...


class MemoryStore:
    def __init__(self, data: Optional[Dict[str, Any]] = None) -> None:
        self.data = data

    def load(self) -> Optional[Dict[str, Any]]:
        if self.data is None:
            return None
        return json.loads(json.dumps(self.data))

    def save(self, data: Dict[str, Any]) -> None:
        self.data = json.loads(json.dumps(data))


class JsonFileStore:
    """Stores the session as a JSON document, replaced atomically on save."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)

    def load(self) -> Optional[Dict[str, Any]]:
        if not self.path.is_file():
            return None
        return json.loads(self.path.read_text(encoding="utf-8"))

    def save(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data), encoding="utf-8")
        os.replace(tmp, self.path)
