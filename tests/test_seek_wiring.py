import unittest

from game_clock import GameClock
from round_controller import RoundController
from simulated_player import SimulatedPlayer
from playback_fakes import FixedBubbleRandom, RecordingPlayback
from qt_support import ensure_core_app


class SnapshotOnSeekPlayback(RecordingPlayback):
    """Records what the round looked like at the moment playback was told to seek."""

    def __init__(self, controller_ref):
        super().__init__()
        self._controller_ref = controller_ref
        self.seen_at_seek = []

    def seek(self, time_seconds):
        super().seek(time_seconds)
        self.seen_at_seek.append(self._controller_ref[0].snapshot())


class TestSeekWiring(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.app = ensure_core_app()

    def build_round(self):
        player = SimulatedPlayer(default_duration_seconds=300.0)
        controller = RoundController(player, rng=FixedBubbleRandom(lane=0, size=64.0))
        clock = GameClock(controller)
        player.on_time_update = clock.on_time_updated
        player.on_audio_energy = clock.on_energy_updated
        player.on_track_finished = clock.on_track_finished
        lost = []
        clock.roundLost.connect(lambda: lost.append(True))
        controller.toggle_game_mode()
        controller.load_track("song.mp3", autoplay=True)
        return player, controller, lost

    def flood_until(self, player, controller, fill_level):
        for _ in range(400):
            player.step(0.25)
            snapshot = controller.snapshot()
            self.assertFalse(snapshot.lost)
            if snapshot.fill_level >= fill_level and snapshot.notes:
                return snapshot
        self.fail("fill level never reached")

    def test_seek_with_live_notes_does_not_count_misses(self):
        player, controller, lost = self.build_round()
        before = self.flood_until(player, controller, 0.8)

        target = before.current_time + 100.0
        controller.seek(target)

        after = controller.snapshot()
        self.assertEqual(lost, [])
        self.assertFalse(after.lost)
        self.assertEqual(after.misses, 0)
        self.assertEqual(after.fill_level, 0.0)
        self.assertEqual(after.notes, ())
        self.assertEqual(after.current_time, target)
        self.assertTrue(player.is_playing)
        self.assertFalse(player.is_fading)

    def test_repeat_one_restart_keeps_playing(self):
        player, controller, lost = self.build_round()
        self.flood_until(player, controller, 0.8)

        self.assertFalse(controller.on_track_finished(repeat_one=True))

        self.assertEqual(lost, [])
        self.assertFalse(player.is_fading)
        self.assertTrue(player.is_playing)
        self.assertEqual(controller.snapshot().misses, 0)
        self.assertEqual(controller.current_time, 0.0)

    def test_round_is_reset_before_playback_seeks(self):
        controller_ref = []
        playback = SnapshotOnSeekPlayback(controller_ref)
        controller = RoundController(playback, rng=FixedBubbleRandom())
        controller_ref.append(controller)
        controller.toggle_game_mode()
        controller.load_track("song.mp3", autoplay=True)
        for k in range(1, 9):
            controller.advance(k * 0.25, energy=1.0)
        self.assertTrue(controller.snapshot().notes)

        controller.seek(60.0)

        seen = playback.seen_at_seek[-1]
        self.assertEqual(seen.notes, ())
        self.assertEqual(seen.current_time, 60.0)
        self.assertEqual(seen.fill_level, 0.0)


if __name__ == "__main__":
    unittest.main()
