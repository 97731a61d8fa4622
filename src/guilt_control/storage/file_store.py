from __future__ import annotations

import os
import re
import tempfile
from pathlib import Path
from typing import Optional

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")


def _file_name(key: str) -> str:
    name = _UNSAFE.sub("_", key.strip()).strip(".")
    return (name or "_") + ".blob"


class FileBlobStore:
    """One file per key under ``directory``.

    Writes go to a temp file in the same directory and are then renamed over
    the target, so a crash mid-write leaves the previous blob intact.
    I/O errors propagate.
    """

    def __init__(self, directory: str | Path) -> None:
        self._dir = Path(directory)
        self._dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        return self._dir / _file_name(key)

    def get(self, key: str) -> Optional[bytes]:
        p = self.path_for(key)
        if not p.exists():
            return None
        return p.read_bytes()

    def set(self, key: str, data: bytes) -> None:
        target = self.path_for(key)
        fd, tmp = tempfile.mkstemp(prefix=target.name, suffix=".tmp", dir=self._dir)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp, target)
        except Exception:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise
