from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Callable, Iterable, List, Optional

from guilt_control.config.logging import get_logger, log_event
from guilt_control.core.exceptions import BlobDecodeError
from guilt_control.core.models import TapEvent
from guilt_control.core.time import utc_now
from guilt_control.core.validation import sanitize_minutes
from guilt_control.storage.base import BlobStore
from guilt_control.store.codec import decode_events, decode_legacy, encode_events


logger = get_logger(__name__)

STORAGE_KEY = "TapHistoryStore.entries"


class Ordering(str, Enum):
    ASCENDING = "ASCENDING"
    DESCENDING = "DESCENDING"


class EventStore:
    """Ordered tap history persisted through a blob store.

    The collection is always sorted ascending by timestamp. Every mutation
    rewrites the whole collection under ``STORAGE_KEY``. Storage problems are
    logged and never raised: a bad blob loads as empty, a failed write leaves
    the in-memory state authoritative for the session.
    """

    def __init__(self, blobs: BlobStore, *, clock: Callable[[], datetime] = utc_now) -> None:
        self._blobs = blobs
        self._clock = clock
        self._events: List[TapEvent] = []
        self.load()

    # CRUD

    def add(self, minutes: int = 0, at: Optional[datetime] = None) -> TapEvent:
        event = TapEvent(timestamp=at if at is not None else self._clock(), minutes_wasted=sanitize_minutes(minutes))
        self._events.append(event)
        self._sort()
        self.persist()
        return event

    def add_tap(self, minutes: int = 0) -> TapEvent:
        return self.add(minutes)

    def add_manual(self, at: datetime, minutes: int) -> TapEvent:
        return self.add(minutes, at=at)

    def update(self, event: TapEvent) -> bool:
        for idx, existing in enumerate(self._events):
            if existing.id == event.id:
                self._events[idx] = event
                self._sort()
                self.persist()
                return True
        log_event(logger, logging.DEBUG, "update_skipped", id=event.id, reason="not_found")
        return False

    def delete_by_id(self, event_id: str) -> int:
        before = len(self._events)
        self._events = [e for e in self._events if e.id != event_id]
        self.persist()
        return before - len(self._events)

    def delete_by_positions(self, positions: Iterable[int], ordering: Ordering = Ordering.ASCENDING) -> int:
        view = self.list()
        if ordering == Ordering.DESCENDING:
            view.reverse()

        doomed = set()
        for pos in positions:
            if 0 <= pos < len(view):
                doomed.add(view[pos].id)
            else:
                log_event(logger, logging.DEBUG, "delete_position_ignored", position=pos, size=len(view))

        self._events = [e for e in self._events if e.id not in doomed]
        self.persist()
        return len(doomed)

    def clear_all(self) -> None:
        self._events = []
        self.persist()

    def list(self) -> List[TapEvent]:
        return list(self._events)

    @property
    def count(self) -> int:
        return len(self._events)

    @property
    def last_tap(self) -> Optional[datetime]:
        return self._events[-1].timestamp if self._events else None

    # Persistence

    def persist(self) -> None:
        try:
            self._blobs.set(STORAGE_KEY, encode_events(self._events))
        except Exception:
            log_event(logger, logging.ERROR, "persist_failed", exc_info=True, key=STORAGE_KEY, events=len(self._events))

    def load(self) -> None:
        try:
            data = self._blobs.get(STORAGE_KEY)
        except Exception:
            log_event(logger, logging.ERROR, "load_failed", exc_info=True, key=STORAGE_KEY)
            data = None

        if data is None:
            self._events = []
            return

        try:
            self._events = decode_events(data)
            self._sort()
            log_event(logger, logging.INFO, "loaded", key=STORAGE_KEY, events=len(self._events))
            return
        except BlobDecodeError as e:
            current_error = e

        try:
            self._events = decode_legacy(data)
        except BlobDecodeError as legacy_error:
            log_event(
                logger,
                logging.WARNING,
                "load_discarded",
                key=STORAGE_KEY,
                current_error=current_error,
                legacy_error=legacy_error,
            )
            self._events = []
            return

        self._sort()
        log_event(logger, logging.INFO, "migrated_legacy", key=STORAGE_KEY, events=len(self._events))
        self.persist()

    def _sort(self) -> None:
        # Stable: equal timestamps keep insertion order.
        self._events.sort(key=lambda e: e.timestamp)
