import threading
import unittest

from round_controller import RoundController
from playback_fakes import FixedBubbleRandom, RecordingPlayback


def expected_fill(misses, impact=0.02 + 0.055, max_fill=1.0):
    fill = 0.0
    for _ in range(misses):
        fill = min(max_fill, fill + impact)
    return fill


class TestSnapshotConsistency(unittest.TestCase):
    def test_reader_thread_never_sees_half_applied_tick(self):
        controller = RoundController(RecordingPlayback(), rng=FixedBubbleRandom(lane=0, size=64.0))
        controller.toggle_game_mode()
        controller.load_track("song.mp3", autoplay=True)

        done = threading.Event()
        seen = []

        def drive():
            try:
                for k in range(1, 121):
                    controller.advance(k * 0.25, energy=1.0)
            finally:
                done.set()

        def read():
            while not done.is_set():
                seen.append(controller.snapshot())
            seen.append(controller.snapshot())

        writer = threading.Thread(target=drive)
        reader = threading.Thread(target=read)
        reader.start()
        writer.start()
        writer.join(timeout=30.0)
        reader.join(timeout=30.0)
        self.assertFalse(writer.is_alive())
        self.assertFalse(reader.is_alive())

        self.assertTrue(seen[-1].lost)
        for snapshot in seen:
            self.assertAlmostEqual(snapshot.fill_level, expected_fill(snapshot.misses), places=9)
            self.assertEqual(snapshot.lost, snapshot.misses >= 14)
            self.assertEqual(snapshot.lost, snapshot.fill_level == 1.0)
            for view in snapshot.notes:
                self.assertLessEqual(view.note.target_time, snapshot.current_time + 2.2 + 1e-9)
                if not snapshot.lost:
                    self.assertGreaterEqual(view.note.target_time, snapshot.current_time)


if __name__ == "__main__":
    unittest.main()
