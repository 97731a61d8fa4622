from __future__ import annotations

from typing import Dict, Optional


class InMemoryBlobStore:
    """Dict-backed blob store. Contents live as long as the instance."""

    def __init__(self, initial: Optional[Dict[str, bytes]] = None) -> None:
        self._blobs: Dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> Optional[bytes]:
        return self._blobs.get(key)

    def set(self, key: str, data: bytes) -> None:
        self._blobs[key] = bytes(data)
