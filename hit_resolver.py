# -*- coding: utf-8 -*-
########################
# hit_resolver.py
########################
# Purpose:
# - Tap resolution and scoring.
# - Converts a tap on a bubble (by id) or a lane press (earliest deadline in that lane)
#   into a note removal, a score/combo update, a splash and a ripple.
#
# Design notes:
# - No Qt usage. Pure gameplay logic.
# - NoteField owns the notes. Removal happens before scoring, so a note can be scored at most once.
# - Lost rounds ignore taps. Unknown ids, empty lanes and out of range lanes are no-ops.
# - Lane ties on target_time go to the lowest note id.
#
########################
# Interfaces:
# Public functions:
# - hit_points(size: float) -> int
# - hit_ripple_strength(size: float, max_size: float) -> float
#
# Public classes:
# - class HitResolver
#   - __init__(note_field: NoteField, event_bus: EventBus, rhythm_config: config.RhythmConfig)
#   - hit(state: RoundState, note_id: int, *, now: float) -> Optional[HitResult]
#   - hit_lane(state: RoundState, lane: int, *, now: float) -> Optional[HitResult]
#
# Inputs:
# - Note id or lane index from the user input surface, current playback time.
#
# Outputs:
# - HitResult records. Mutates RoundState (score, combo, high_combo) and appends to EventBus.
#
########################

from __future__ import annotations

import math
from typing import Optional

import config
import event_bus
import note_field
import rhythm_models


def hit_points(size: float) -> int:
    return int(math.floor(25.0 + float(size) * 2.0))


def hit_ripple_strength(size: float, max_size: float) -> float:
    return 0.45 + (float(size) / float(max_size)) * 0.5


class HitResolver:
    def __init__(
        self,
        note_field_obj: note_field.NoteField,
        event_bus_obj: event_bus.EventBus,
        rhythm_config: config.RhythmConfig,
    ) -> None:
        self._note_field = note_field_obj
        self._event_bus = event_bus_obj
        self._config = rhythm_config

    def hit(
        self,
        state: rhythm_models.RoundState,
        note_id: int,
        *,
        now: float,
    ) -> Optional[rhythm_models.HitResult]:
        if state.lost:
            return None

        note = self._note_field.remove(note_id)
        if note is None:
            return None

        progress = note.progress_at(now)
        splash = self._event_bus.add_splash(lane=note.lane, progress=progress, size=note.size, now=now)
        ripple = self._event_bus.add_ripple(
            lane=note.lane,
            strength=hit_ripple_strength(note.size, self._config.max_bubble_size),
            now=now,
        )
        points = hit_points(note.size)
        state.apply_hit(points)

        return rhythm_models.HitResult(
            note=note,
            progress=progress,
            points=points,
            splash=splash,
            ripple=ripple,
        )

    def hit_lane(
        self,
        state: rhythm_models.RoundState,
        lane: int,
        *,
        now: float,
    ) -> Optional[rhythm_models.HitResult]:
        if state.lost:
            return None
        if not 0 <= int(lane) < int(self._config.lane_count):
            return None

        candidate = self._note_field.earliest_in_lane(lane)
        if candidate is None:
            return None
        return self.hit(state, candidate.note_id, now=now)


def _run_unit_tests() -> None:
    rhythm_config = config.RhythmConfig()
    ids = rhythm_models.IdSource()
    field = note_field.NoteField()
    bus = event_bus.EventBus(config.EventConfig(), ids)
    resolver = HitResolver(field, bus, rhythm_config)
    state = rhythm_models.RoundState()

    field.add(rhythm_models.Note(note_id=ids.next_id(), lane=2, spawn_time=0.0, size=40.0, travel_duration=4.0))
    result = resolver.hit_lane(state, 2, now=1.0)
    assert result is not None
    assert result.points == 105
    assert abs(result.progress - 0.25) < 1e-9
    assert state.combo == 1 and state.high_combo == 1 and state.score == 105
    assert len(bus.splashes()) == 1 and len(bus.ripples()) == 1

    assert resolver.hit(state, result.note.note_id, now=1.1) is None
    assert resolver.hit_lane(state, 2, now=1.1) is None
    assert resolver.hit_lane(state, 9, now=1.1) is None


if __name__ == "__main__":
    _run_unit_tests()
    print("hit_resolver.py: ok")
