import unittest

from playback_port import PlaybackPort
from simulated_player import EnergyScript, SimulatedPlayer


class TestSimulatedPlayer(unittest.TestCase):
    def setUp(self):
        self.player = SimulatedPlayer(track_durations={"short": 2.0})
        self.events = []
        self.player.on_time_update = lambda t, d: self.events.append(("time", t, d))
        self.player.on_audio_energy = lambda value: self.events.append(("energy", value))
        self.player.on_track_finished = lambda: self.events.append(("finished",))

    def test_implements_playback_port(self):
        self.assertIsInstance(self.player, PlaybackPort)

    def test_ticks_report_time_then_energy(self):
        self.assertEqual(self.player.load("short", autoplay=True, volume=0.9), 2.0)
        self.player.step(0.25)
        self.assertEqual([event[0] for event in self.events], ["time", "energy"])
        self.assertEqual(self.events[0][1], 0.25)
        self.assertEqual(self.events[0][2], 2.0)

    def test_no_ticks_while_paused(self):
        self.player.load("short", autoplay=False, volume=0.9)
        self.player.step(1.0)
        self.assertEqual(self.events, [])
        self.assertTrue(self.player.play_pause())
        self.player.step(0.5)
        self.assertEqual(len([event for event in self.events if event[0] == "time"]), 2)

    def test_track_end_reports_finished(self):
        self.player.load("short", autoplay=True, volume=0.9)
        for _ in range(10):
            self.player.step(0.25)
        self.assertEqual(self.events.count(("finished",)), 1)
        self.assertFalse(self.player.is_playing)
        self.assertEqual(self.player.current_playback_time(), 2.0)

    def test_fade_out_and_stop(self):
        self.player.load("unknown", autoplay=True, volume=0.8)
        self.player.fade_out_and_stop(2.0)
        self.player.step(1.0)
        self.assertTrue(self.player.is_fading)
        self.assertAlmostEqual(self.player.volume, 0.4)
        self.player.step(1.0)
        self.assertFalse(self.player.is_playing)
        self.assertFalse(self.player.is_fading)

    def test_seek_emits_tick(self):
        self.player.load("short", autoplay=False, volume=0.9)
        self.player.seek(5.0)
        self.assertEqual(self.events[0], ("time", 2.0, 2.0))

    def test_energy_script_stays_normalized(self):
        script = EnergyScript(quiet_spans=((30.0, 40.0),))
        for step in range(600):
            self.assertGreaterEqual(script.energy_at(step * 0.1), 0.0)
            self.assertLessEqual(script.energy_at(step * 0.1), 1.0)
        self.assertEqual(script.energy_at(35.0), 0.05)


if __name__ == "__main__":
    unittest.main()
