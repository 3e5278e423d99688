import unittest

from note_motion import lane_offset_x, note_seed, sticky_progress


class TestNoteMotion(unittest.TestCase):
    def test_seed_is_stable_and_normalized(self):
        self.assertEqual(note_seed(17), note_seed(17))
        for note_id in range(1, 200):
            self.assertGreaterEqual(note_seed(note_id), 0.0)
            self.assertLess(note_seed(note_id), 1.0)

    def test_sticky_progress_bounds(self):
        for step in range(101):
            progress = step / 100.0
            value = sticky_progress(progress, size=50.0, seed=0.3, now=step * 0.07)
            self.assertGreaterEqual(value, 0.0)
            self.assertLessEqual(value, 1.05)
        self.assertEqual(sticky_progress(1.0, size=24.0, seed=0.9, now=4.0), 1.0)

    def test_heavy_bubbles_lag(self):
        light = sticky_progress(0.5, size=24.0, seed=0.0, now=0.0)
        heavy = sticky_progress(0.5, size=64.0, seed=0.0, now=0.0)
        self.assertLess(heavy, light)

    def test_lane_offset_stays_inside_lane(self):
        for step in range(100):
            x = lane_offset_x(
                lane=2,
                lane_width=120.0,
                size=60.0,
                progress=0.2,
                seed=0.4,
                now=step * 0.13,
                submerge_ratio=1.0,
            )
            self.assertGreaterEqual(x, 240.0 + 37.2 - 1e-9)
            self.assertLessEqual(x, 360.0 - 37.2 + 1e-9)

    def test_narrow_lane_uses_center(self):
        x = lane_offset_x(lane=0, lane_width=20.0, size=64.0, progress=0.5, seed=0.1, now=1.0)
        self.assertEqual(x, 10.0)


if __name__ == "__main__":
    unittest.main()
