from __future__ import annotations

from typing import Optional, Protocol


class BlobStore(Protocol):
    def get(self, key: str) -> Optional[bytes]: ...

    def set(self, key: str, data: bytes) -> None: ...
