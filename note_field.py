# -*- coding: utf-8 -*-
########################
# note_field.py
########################
# Purpose:
# - Own the set of live notes (bubbles) for the current round.
# - Provide queries for rendering (progress views), lane candidates for hits, and overdue notes for misses.
#
# Design notes:
# - No Qt usage. Pure gameplay logic.
# - This module owns the notes; a note leaves the field exactly once (hit or miss).
# - Deterministic ordering everywhere: (target_time, note_id).
#
########################
# Interfaces:
# Public classes:
# - class NoteField
#   - add(note: Note) -> None
#   - get(note_id: int) -> Optional[Note]
#   - remove(note_id: int) -> Optional[Note]
#   - clear() -> None
#   - notes() -> list[Note]
#   - notes_in_lane(lane: int) -> list[Note]
#   - earliest_in_lane(lane: int) -> Optional[Note]
#   - overdue_notes(time_seconds: float) -> list[Note]
#   - pop_overdue(time_seconds: float) -> list[Note]
#   - views(time_seconds: float) -> list[NoteView]
#
# Inputs:
# - Notes from Spawner; ids from HitResolver; tick time from DangerEngine.
#
# Outputs:
# - Note views for rendering and candidate selection for HitResolver and DangerEngine.
#
########################

from __future__ import annotations

from typing import Dict, List, Optional

import rhythm_models


def _deadline_key(note: rhythm_models.Note):
    return (float(note.target_time), int(note.note_id))


class NoteField:
    def __init__(self) -> None:
        self._notes: Dict[int, rhythm_models.Note] = {}

    def __len__(self) -> int:
        return len(self._notes)

    def __contains__(self, note_id: object) -> bool:
        return note_id in self._notes

    def add(self, note: rhythm_models.Note) -> None:
        self._notes[int(note.note_id)] = note

    def get(self, note_id: int) -> Optional[rhythm_models.Note]:
        return self._notes.get(int(note_id))

    def remove(self, note_id: int) -> Optional[rhythm_models.Note]:
        return self._notes.pop(int(note_id), None)

    def clear(self) -> None:
        self._notes.clear()

    def notes(self) -> List[rhythm_models.Note]:
        # Insertion order equals spawn order.
        return list(self._notes.values())

    def notes_in_lane(self, lane: int) -> List[rhythm_models.Note]:
        lane_key = int(lane)
        return sorted((note for note in self._notes.values() if note.lane == lane_key), key=_deadline_key)

    def earliest_in_lane(self, lane: int) -> Optional[rhythm_models.Note]:
        candidates = self.notes_in_lane(lane)
        if not candidates:
            return None
        return candidates[0]

    def overdue_notes(self, time_seconds: float) -> List[rhythm_models.Note]:
        now = float(time_seconds)
        expired = [note for note in self._notes.values() if now > note.target_time]
        expired.sort(key=_deadline_key)
        return expired

    def pop_overdue(self, time_seconds: float) -> List[rhythm_models.Note]:
        expired = self.overdue_notes(time_seconds)
        for note in expired:
            self._notes.pop(int(note.note_id), None)
        return expired

    def views(self, time_seconds: float) -> List[rhythm_models.NoteView]:
        return [
            rhythm_models.NoteView(note=note, progress=note.progress_at(time_seconds))
            for note in self._notes.values()
        ]


def _run_unit_tests() -> None:
    field = NoteField()
    field.add(rhythm_models.Note(note_id=1, lane=0, spawn_time=0.0, size=30.0, travel_duration=4.0))
    field.add(rhythm_models.Note(note_id=2, lane=0, spawn_time=1.0, size=60.0, travel_duration=2.2))
    field.add(rhythm_models.Note(note_id=3, lane=1, spawn_time=0.5, size=40.0, travel_duration=1.0))

    earliest = field.earliest_in_lane(0)
    assert earliest is not None and earliest.note_id == 2
    assert field.earliest_in_lane(3) is None

    expired = field.pop_overdue(3.3)
    assert [note.note_id for note in expired] == [3, 2]
    assert len(field) == 1

    assert field.remove(1) is not None
    assert field.remove(1) is None


if __name__ == "__main__":
    _run_unit_tests()
    print("note_field.py: ok")
