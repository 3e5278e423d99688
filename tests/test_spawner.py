import random
import unittest

from config import RhythmConfig
from spawner import Spawner
from playback_fakes import FixedBubbleRandom


class TestSpawner(unittest.TestCase):
    def setUp(self):
        self.config = RhythmConfig()
        self.spawner = Spawner(self.config, random.Random(11))

    def test_interval_at_energy_floor(self):
        self.assertAlmostEqual(self.spawner.spawn_interval(0.1), 0.96, places=9)
        self.assertAlmostEqual(self.spawner.spawn_interval(0.0), 0.96, places=9)

    def test_louder_audio_shortens_interval(self):
        self.assertLess(self.spawner.spawn_interval(0.9), self.spawner.spawn_interval(0.3))
        self.assertAlmostEqual(self.spawner.spawn_interval(1.0), 0.6, places=9)

    def test_interval_bounded_below(self):
        steep = Spawner(RhythmConfig(spawn_interval_energy_scale=0.9), random.Random(1))
        self.assertAlmostEqual(steep.spawn_interval(1.0), 0.45, places=9)

    def test_quiet_audio_never_spawns(self):
        for elapsed in (0.5, 1.0, 10.0, 1000.0):
            self.assertFalse(self.spawner.should_spawn(time_seconds=elapsed, energy=0.14, last_spawn_time=0.0))
        self.assertFalse(self.spawner.should_spawn(time_seconds=1000.0, energy=0.15, last_spawn_time=0.0))

    def test_spawn_respects_interval(self):
        self.assertFalse(self.spawner.should_spawn(time_seconds=10.5, energy=0.5, last_spawn_time=10.0))
        self.assertTrue(self.spawner.should_spawn(time_seconds=10.8, energy=0.5, last_spawn_time=10.0))

    def test_travel_duration_mapping(self):
        self.assertAlmostEqual(self.spawner.travel_duration_for_size(64.0), 2.2, places=9)
        self.assertAlmostEqual(self.spawner.travel_duration_for_size(24.0), 4.2, places=9)
        self.assertAlmostEqual(self.spawner.travel_duration_for_size(44.0), 3.2, places=9)

    def test_created_notes_stay_in_bounds(self):
        for index in range(200):
            note = self.spawner.create_note(note_id=index, time_seconds=float(index))
            self.assertIn(note.lane, range(4))
            self.assertGreaterEqual(note.size, 24.0)
            self.assertLessEqual(note.size, 64.0)
            self.assertAlmostEqual(note.target_time, note.spawn_time + note.travel_duration)

    def test_seeded_sequences_repeat(self):
        first = Spawner(self.config, random.Random(5))
        second = Spawner(self.config, random.Random(5))
        notes_a = [first.create_note(note_id=i, time_seconds=0.0) for i in range(10)]
        notes_b = [second.create_note(note_id=i, time_seconds=0.0) for i in range(10)]
        self.assertEqual(notes_a, notes_b)

    def test_injected_source_controls_lane_and_size(self):
        spawner = Spawner(self.config, FixedBubbleRandom(lane=3, size=24.0))
        note = spawner.maybe_spawn(time_seconds=2.0, energy=0.8, last_spawn_time=0.0, note_id_source=lambda: 99)
        self.assertIsNotNone(note)
        self.assertEqual(note.note_id, 99)
        self.assertEqual(note.lane, 3)
        self.assertAlmostEqual(note.travel_duration, 4.2)

    def test_maybe_spawn_does_not_consume_ids_when_idle(self):
        issued = []

        def next_id():
            issued.append(1)
            return len(issued)

        self.assertIsNone(
            self.spawner.maybe_spawn(time_seconds=0.1, energy=0.8, last_spawn_time=0.0, note_id_source=next_id)
        )
        self.assertEqual(issued, [])


if __name__ == "__main__":
    unittest.main()
