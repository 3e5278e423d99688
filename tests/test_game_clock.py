import unittest

from callouts import PARTY_ENDED_TEXT
from game_clock import GameClock
from rhythm_models import LaneTap
from round_controller import RoundController
from playback_fakes import FixedBubbleRandom, RecordingPlayback
from qt_support import ensure_core_app


class TestGameClock(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.app = ensure_core_app()

    def setUp(self):
        self.playback = RecordingPlayback()
        self.controller = RoundController(self.playback, rng=FixedBubbleRandom())
        self.clock = GameClock(self.controller)
        self.snapshots = []
        self.callouts = []
        self.lost = []
        self.finished = []
        self.clock.snapshotUpdated.connect(self.snapshots.append)
        self.clock.calloutAdded.connect(self.callouts.append)
        self.clock.roundLost.connect(lambda: self.lost.append(True))
        self.clock.trackFinished.connect(self.finished.append)
        self.controller.toggle_game_mode()
        self.controller.load_track("song.mp3", autoplay=True)

    def tick(self, k):
        self.clock.on_energy_updated(1.0)
        self.clock.on_time_updated(k * 0.25, 180.0)

    def test_each_tick_emits_snapshot(self):
        for k in range(1, 5):
            self.tick(k)
        self.assertEqual(len(self.snapshots), 4)
        self.assertEqual(self.snapshots[-1].current_time, 1.0)
        self.assertEqual(len(self.snapshots[-1].notes), 1)

    def test_lane_tap_resolves_hit(self):
        for k in range(1, 5):
            self.tick(k)
        self.clock.on_lane_tapped(LaneTap(time_seconds=1.0, lane=0))
        self.assertEqual(self.snapshots[-1].score, 153)
        count = len(self.snapshots)
        self.clock.on_lane_tapped(LaneTap(time_seconds=1.0, lane=0))
        self.assertEqual(len(self.snapshots), count)

    def test_note_tap_resolves_hit(self):
        for k in range(1, 5):
            self.tick(k)
        note_id = self.snapshots[-1].notes[0].note.note_id
        self.clock.on_note_tapped(note_id)
        self.assertEqual(self.controller.snapshot().combo, 1)

    def test_loss_emits_signals_once(self):
        for k in range(1, 80):
            self.tick(k)
        self.assertEqual(self.lost, [True])
        self.assertEqual(self.callouts[-1].text, PARTY_ENDED_TEXT)
        self.assertTrue(self.snapshots[-1].lost)

    def test_track_finished_reports_advance(self):
        self.clock.on_track_finished()
        self.clock.set_repeat_one(True)
        self.clock.on_track_finished()
        self.assertEqual(self.finished, [True, False])


if __name__ == "__main__":
    unittest.main()
