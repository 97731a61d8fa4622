from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.interval import IntervalTrigger

from guilt_control.config.logging import get_logger, log_event
from guilt_control.core.time import utc_now
from guilt_control.scoring.model import ScoreModel, ScoreSnapshot
from guilt_control.store.event_store import EventStore


logger = get_logger(__name__)

JOB_ID = "decay_refresh"


class DecayRefresher:
    """Re-run the score model on a fixed interval so the color heals over time.

    Each tick reads a fresh snapshot of the store and hands the result to
    ``on_update``. The refresher owns its scheduler; call ``stop()`` when the
    consumer goes away.
    """

    def __init__(
        self,
        store: EventStore,
        model: ScoreModel,
        on_update: Callable[[ScoreSnapshot], None],
        *,
        interval_seconds: int = 60,
        clock: Callable[[], datetime] = utc_now,
        scheduler: Optional[BaseScheduler] = None,
    ) -> None:
        self.store = store
        self.model = model
        self.on_update = on_update
        self.interval_seconds = interval_seconds
        self.clock = clock
        self.scheduler = scheduler or BackgroundScheduler(timezone="UTC")

    def refresh_now(self) -> ScoreSnapshot:
        snapshot = self.model.recompute(self.clock(), self.store.list())
        try:
            self.on_update(snapshot)
        except Exception:
            log_event(logger, logging.ERROR, "refresh_callback_failed", exc_info=True, progress=round(snapshot.progress, 4))
        return snapshot

    def start(self) -> None:
        self.refresh_now()
        self.scheduler.add_job(
            self.refresh_now,
            IntervalTrigger(seconds=self.interval_seconds),
            id=JOB_ID,
            replace_existing=True,
        )
        log_event(logger, logging.INFO, "refresher_started", interval_seconds=self.interval_seconds)
        # Blocks when the scheduler is a BlockingScheduler.
        self.scheduler.start()

    def stop(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            log_event(logger, logging.INFO, "refresher_stopped")

    @property
    def running(self) -> bool:
        return bool(self.scheduler.running)
