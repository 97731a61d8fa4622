import logging
import os
import unittest
from unittest import mock

from guilt_control.config.logging import get_logger, log_event, setup_logging
from guilt_control.config.settings import Settings, load_settings
from guilt_control.core.validation import clamp_tap_minutes, sanitize_minutes


class TestSanitizeMinutes(unittest.TestCase):
    def test_numbers(self):
        self.assertEqual(sanitize_minutes(12), 12)
        self.assertEqual(sanitize_minutes(-4), 0)
        self.assertEqual(sanitize_minutes(7.9), 7)
        self.assertEqual(sanitize_minutes(float("nan"), default=3), 3)

    def test_strings_keep_digits(self):
        self.assertEqual(sanitize_minutes("  42 min"), 42)
        self.assertEqual(sanitize_minutes("-5"), 0)
        self.assertEqual(sanitize_minutes(" +8"), 8)
        self.assertEqual(sanitize_minutes("2.9"), 2)
        self.assertEqual(sanitize_minutes("min12"), 12)
        self.assertEqual(sanitize_minutes("", default=9), 9)
        self.assertEqual(sanitize_minutes("abc"), 0)

    def test_other_types_use_default(self):
        self.assertEqual(sanitize_minutes(None, default=2), 2)
        self.assertEqual(sanitize_minutes(True), 0)

    def test_tap_minutes_range(self):
        self.assertEqual(clamp_tap_minutes(0), 1)
        self.assertEqual(clamp_tap_minutes(30), 30)
        self.assertEqual(clamp_tap_minutes("9999"), 600)


class TestSettings(unittest.TestCase):
    def test_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(load_settings(), Settings())

    def test_env_overrides(self):
        env = {
            "GUILT_DATA_DIR": "/tmp/guilt",
            "GUILT_LOG_LEVEL": "debug",
            "GUILT_REPAIR_WINDOW_SECONDS": "3600",
            "GUILT_FULL_SCALE_MINUTES": "60",
            "GUILT_GAMMA": "1.0",
            "GUILT_REFRESH_SECONDS": "5",
            "GUILT_TAP_MINUTES": "900",
        }
        with mock.patch.dict(os.environ, env, clear=True):
            s = load_settings()
        self.assertEqual(s.data_dir, "/tmp/guilt")
        self.assertEqual(s.log_level, "DEBUG")
        self.assertEqual(s.repair_window_seconds, 3600.0)
        self.assertEqual(s.full_scale_minutes, 60.0)
        self.assertEqual(s.gamma, 1.0)
        self.assertEqual(s.refresh_seconds, 5)
        self.assertEqual(s.tap_minutes, 600)

    def test_unusable_floats_fall_back(self):
        env = {"GUILT_GAMMA": "-1", "GUILT_REPAIR_WINDOW_SECONDS": "inf", "GUILT_FULL_SCALE_MINUTES": "nan"}
        with mock.patch.dict(os.environ, env, clear=True):
            s = load_settings()
        self.assertEqual(s.gamma, 0.88)
        self.assertEqual(s.repair_window_seconds, 86400)
        self.assertEqual(s.full_scale_minutes, 120.0)
        with mock.patch.dict(os.environ, {"GUILT_GAMMA": "0"}, clear=True):
            self.assertEqual(load_settings().gamma, 0.88)

    def test_unparseable_values_fall_back(self):
        with mock.patch.dict(os.environ, {"GUILT_GAMMA": "steep", "GUILT_REFRESH_SECONDS": "soon"}, clear=True):
            s = load_settings()
        self.assertEqual(s.gamma, 0.88)
        self.assertEqual(s.refresh_seconds, 60)


class TestLogging(unittest.TestCase):
    def test_log_event_renders_key_values(self):
        logger = get_logger("guilt_control.test")
        with self.assertLogs(logger, level="INFO") as cm:
            log_event(logger, logging.INFO, "loaded", key="TapHistoryStore.entries", events=3)
        self.assertEqual(cm.records[0].getMessage(), "loaded key=TapHistoryStore.entries events=3")

    def test_setup_logging_quiets_scheduler(self):
        setup_logging("DEBUG")
        self.assertEqual(logging.getLogger("apscheduler").level, logging.WARNING)


if __name__ == "__main__":
    unittest.main()
