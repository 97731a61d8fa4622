import unittest
from datetime import datetime, timedelta, timezone

from apscheduler.schedulers.background import BackgroundScheduler

from guilt_control.refresh.scheduler import JOB_ID, DecayRefresher
from guilt_control.scoring.model import ScoreModel
from guilt_control.storage.memory_store import InMemoryBlobStore
from guilt_control.store.event_store import EventStore


START = datetime(2026, 10, 16, 8, 0, tzinfo=timezone.utc)


class _Clock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


class TestDecayRefresher(unittest.TestCase):
    def setUp(self):
        self.clock = _Clock(START)
        self.store = EventStore(InMemoryBlobStore(), clock=self.clock)
        self.store.add(120)
        self.seen = []

    def test_refresh_reflects_elapsed_time(self):
        refresher = DecayRefresher(self.store, ScoreModel(), self.seen.append, clock=self.clock)
        refresher.refresh_now()
        self.clock.now = START + timedelta(hours=12)
        refresher.refresh_now()
        self.clock.now = START + timedelta(hours=24)
        refresher.refresh_now()
        self.assertEqual([round(s.progress, 6) for s in self.seen], [1.0, 0.5, 0.0])
        self.assertTrue(self.seen[0].is_critical)
        self.assertFalse(self.seen[1].is_critical)

    def test_callback_errors_are_logged(self):
        def boom(snapshot):
            raise RuntimeError("view gone")

        refresher = DecayRefresher(self.store, ScoreModel(), boom, clock=self.clock)
        with self.assertLogs("guilt_control.refresh.scheduler", level="ERROR"):
            snapshot = refresher.refresh_now()
        self.assertEqual(snapshot.count, 1)

    def test_start_schedules_and_stop_releases(self):
        scheduler = BackgroundScheduler(timezone="UTC")
        refresher = DecayRefresher(
            self.store, ScoreModel(), self.seen.append, interval_seconds=60, clock=self.clock, scheduler=scheduler
        )
        refresher.start()
        try:
            self.assertTrue(refresher.running)
            self.assertIsNotNone(scheduler.get_job(JOB_ID))
            self.assertEqual(len(self.seen), 1)
        finally:
            refresher.stop()
        self.assertFalse(refresher.running)
        refresher.stop()


if __name__ == "__main__":
    unittest.main()
