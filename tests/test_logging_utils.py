import unittest

from logging_utils import get_log_level, log_event, set_log_level


class TestLoggingUtils(unittest.TestCase):
    def setUp(self):
        previous = get_log_level()
        self.addCleanup(set_log_level, previous)

    def test_fields_appended_to_message(self):
        with self.assertLogs("papaplayer", level="INFO") as captured:
            log_event("INFO", "Round", "Round lost", score=120, misses=14)
        self.assertEqual(len(captured.records), 1)
        self.assertEqual(captured.records[0].getMessage(), "Round lost | score=120 misses=14")
        self.assertEqual(captured.records[0].tag, "Round")

    def test_float_fields_rounded(self):
        with self.assertLogs("papaplayer", level="INFO") as captured:
            log_event("INFO", "Danger", "Fill rose", fill=0.123456)
        self.assertEqual(captured.records[0].getMessage(), "Fill rose | fill=0.123")

    def test_warn_alias(self):
        with self.assertLogs("papaplayer", level="WARNING") as captured:
            log_event("warn", "Config", "Falling back")
        self.assertEqual(captured.records[0].levelname, "WARNING")

    def test_fatal_alias_and_unknown_level(self):
        with self.assertLogs("papaplayer", level="DEBUG") as captured:
            log_event("fatal", "Round", "Playback gone")
            log_event("loud", "Round", "Unknown level")
        self.assertEqual([record.levelname for record in captured.records], ["CRITICAL", "INFO"])
        self.assertEqual(captured.records[0].tag, "Round")

    def test_set_log_level(self):
        set_log_level("debug")
        self.assertEqual(get_log_level(), "DEBUG")
        set_log_level("")
        self.assertEqual(get_log_level(), "INFO")


if __name__ == "__main__":
    unittest.main()
