import unittest

from note_field import NoteField
from rhythm_models import Note


def make_note(note_id, lane, spawn_time, travel_duration, size=40.0):
    return Note(note_id=note_id, lane=lane, spawn_time=spawn_time, size=size, travel_duration=travel_duration)


class TestNoteField(unittest.TestCase):
    def setUp(self):
        self.field = NoteField()

    def test_earliest_deadline_in_lane(self):
        self.field.add(make_note(1, 0, 0.0, 4.0))
        self.field.add(make_note(2, 0, 1.0, 2.2))
        self.field.add(make_note(3, 1, 0.0, 1.0))
        self.assertEqual(self.field.earliest_in_lane(0).note_id, 2)
        self.assertEqual(self.field.earliest_in_lane(1).note_id, 3)
        self.assertIsNone(self.field.earliest_in_lane(2))

    def test_exact_tie_picks_lowest_id(self):
        self.field.add(make_note(8, 2, 1.0, 2.0))
        self.field.add(make_note(5, 2, 0.0, 3.0))
        self.assertEqual(self.field.earliest_in_lane(2).note_id, 5)

    def test_overdue_uses_strict_comparison_and_deadline_order(self):
        self.field.add(make_note(1, 0, 0.0, 3.0))
        self.field.add(make_note(2, 1, 0.0, 2.0))
        self.field.add(make_note(3, 2, 0.0, 5.0))
        self.assertEqual([n.note_id for n in self.field.overdue_notes(2.0)], [])
        self.assertEqual([n.note_id for n in self.field.pop_overdue(3.5)], [2, 1])
        self.assertEqual(len(self.field), 1)
        self.assertIn(3, self.field)

    def test_remove_is_single_shot(self):
        self.field.add(make_note(1, 0, 0.0, 3.0))
        self.assertIsNotNone(self.field.remove(1))
        self.assertIsNone(self.field.remove(1))
        self.assertIsNone(self.field.get(1))

    def test_views_report_clamped_progress(self):
        self.field.add(make_note(1, 0, 10.0, 2.0))
        self.assertEqual(self.field.views(9.0)[0].progress, 0.0)
        self.assertAlmostEqual(self.field.views(11.5)[0].progress, 0.75)
        self.assertEqual(self.field.views(13.0)[0].progress, 1.0)

    def test_clear(self):
        self.field.add(make_note(1, 0, 0.0, 3.0))
        self.field.clear()
        self.assertEqual(self.field.notes(), [])


if __name__ == "__main__":
    unittest.main()
