# -*- coding: utf-8 -*-
########################
# spawner.py
########################
# Purpose:
# - Decide when and where new bubbles (notes) appear, driven by playback time and loudness.
#
# Design notes:
# - No Qt usage. Pure gameplay logic.
# - Randomness comes from an injected random.Random so sequences are reproducible.
# - Louder audio shortens the spawn gap. Quiet passages (intensity at or below the threshold)
#   never spawn, however long they last.
# - Larger bubbles travel faster (shorter travel duration).
# - The caller guards lost and paused rounds; this module only answers "spawn now?".
#
########################
# Interfaces:
# Public classes:
# - class Spawner
#   - __init__(rhythm_config: config.RhythmConfig, rng: Optional[random.Random] = None)
#   - intensity(energy: float) -> float
#   - spawn_interval(energy: float) -> float
#   - should_spawn(*, time_seconds: float, energy: float, last_spawn_time: float) -> bool
#   - travel_duration_for_size(size: float) -> float
#   - create_note(*, note_id: int, time_seconds: float) -> rhythm_models.Note
#   - maybe_spawn(*, time_seconds: float, energy: float, last_spawn_time: float, note_id_source) -> Optional[Note]
#
# Inputs:
# - Sanitized time and energy from TimingModel, RoundState.last_spawn_time.
#
# Outputs:
# - New Note objects for NoteField.
#
########################

from __future__ import annotations

import random
from typing import Callable, Optional

import config
import rhythm_models


class Spawner:
    def __init__(self, rhythm_config: config.RhythmConfig, rng: Optional[random.Random] = None) -> None:
        self._config = rhythm_config
        self._rng = rng if rng is not None else random.Random()

    def intensity(self, energy: float) -> float:
        return max(float(energy), float(self._config.energy_floor))

    def spawn_interval(self, energy: float) -> float:
        intensity = self.intensity(energy)
        interval = float(self._config.base_spawn_interval_seconds) - intensity * float(
            self._config.spawn_interval_energy_scale
        )
        return max(float(self._config.min_spawn_interval_seconds), interval)

    def should_spawn(self, *, time_seconds: float, energy: float, last_spawn_time: float) -> bool:
        intensity = self.intensity(energy)
        if intensity <= float(self._config.energy_threshold):
            return False
        return float(time_seconds) - float(last_spawn_time) >= self.spawn_interval(energy)

    def travel_duration_for_size(self, size: float) -> float:
        min_size = float(self._config.min_bubble_size)
        max_size = float(self._config.max_bubble_size)
        duration_factor = (max_size - float(size)) / (max_size - min_size)
        min_travel = float(self._config.min_travel_seconds)
        max_travel = float(self._config.max_travel_seconds)
        return min_travel + duration_factor * (max_travel - min_travel)

    def create_note(self, *, note_id: int, time_seconds: float) -> rhythm_models.Note:
        lane = self._rng.randrange(int(self._config.lane_count))
        size = self._rng.uniform(float(self._config.min_bubble_size), float(self._config.max_bubble_size))
        return rhythm_models.Note(
            note_id=int(note_id),
            lane=int(lane),
            spawn_time=float(time_seconds),
            size=float(size),
            travel_duration=self.travel_duration_for_size(size),
        )

    def maybe_spawn(
        self,
        *,
        time_seconds: float,
        energy: float,
        last_spawn_time: float,
        note_id_source: Callable[[], int],
    ) -> Optional[rhythm_models.Note]:
        if not self.should_spawn(time_seconds=time_seconds, energy=energy, last_spawn_time=last_spawn_time):
            return None
        return self.create_note(note_id=note_id_source(), time_seconds=time_seconds)


def _run_unit_tests() -> None:
    spawner = Spawner(config.RhythmConfig(), random.Random(7))
    assert abs(spawner.spawn_interval(0.0) - 0.96) < 1e-9
    assert abs(spawner.spawn_interval(1.0) - 0.6) < 1e-9
    assert not spawner.should_spawn(time_seconds=100.0, energy=0.14, last_spawn_time=0.0)
    assert spawner.should_spawn(time_seconds=1.0, energy=0.5, last_spawn_time=0.0)

    assert abs(spawner.travel_duration_for_size(64.0) - 2.2) < 1e-9
    assert abs(spawner.travel_duration_for_size(24.0) - 4.2) < 1e-9

    note = spawner.create_note(note_id=5, time_seconds=3.0)
    assert 0 <= note.lane < 4
    assert 24.0 <= note.size <= 64.0
    assert note.spawn_time == 3.0


if __name__ == "__main__":
    _run_unit_tests()
    print("spawner.py: ok")
