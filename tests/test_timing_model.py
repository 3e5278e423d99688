import unittest

from timing_model import TimingModel, energy_from_decibels, sanitize_energy


class TestTimingModel(unittest.TestCase):
    def setUp(self):
        self.model = TimingModel()

    def test_invalid_times_rejected(self):
        self.assertTrue(self.model.update_time(3.0, 120.0))
        self.assertFalse(self.model.update_time(float("nan")))
        self.assertFalse(self.model.update_time(float("inf")))
        self.assertFalse(self.model.update_time("later"))
        self.assertEqual(self.model.current_time_seconds(), 3.0)
        self.assertEqual(self.model.duration_seconds(), 120.0)

    def test_negative_time_clamps_to_zero(self):
        self.assertTrue(self.model.update_time(-1.0))
        self.assertEqual(self.model.current_time_seconds(), 0.0)

    def test_seek_and_reset_energy(self):
        self.model.update_energy(0.7)
        self.model.seek(30.0)
        self.assertEqual(self.model.snapshot().current_time_seconds, 30.0)
        self.assertEqual(self.model.energy(), 0.7)
        self.model.reset_energy()
        self.assertEqual(self.model.energy(), 0.0)

    def test_sanitize_energy(self):
        self.assertEqual(sanitize_energy(-0.5), 0.0)
        self.assertEqual(sanitize_energy(float("nan")), 0.0)
        self.assertEqual(sanitize_energy(1.5), 1.0)
        self.assertEqual(sanitize_energy(0.4), 0.4)
        self.assertEqual(sanitize_energy(None), 0.0)

    def test_decibel_mapping(self):
        self.assertEqual(energy_from_decibels(-60.0), 0.0)
        self.assertEqual(energy_from_decibels(-80.0), 0.0)
        self.assertAlmostEqual(energy_from_decibels(-30.0), 0.5)
        self.assertEqual(energy_from_decibels(6.0), 1.0)


if __name__ == "__main__":
    unittest.main()
