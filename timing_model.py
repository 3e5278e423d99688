# -*- coding: utf-8 -*-
########################
# timing_model.py
########################
# Purpose:
# - Single source of truth for playback time and loudness in gameplay.
# - Sanitizes the raw tick values reported by the audio playback collaborator.
#
# Design notes:
# - Gameplay code must use TimingModel.current_time_seconds and TimingModel.energy.
# - No Qt usage. Keep this module pure and deterministic.
# - Time: NaN or infinite values mean "no advance", negative values clamp to 0.
# - Energy: NaN or negative values become 0, values above 1 clamp to 1.
#
########################
# Interfaces:
# Public dataclasses:
# - TimingSnapshot(current_time_seconds: float, duration_seconds: float, energy: float)
#
# Public functions:
# - sanitize_energy(value: float) -> float
# - energy_from_decibels(power_db: float) -> float
#
# Public classes:
# - class TimingModel
#   - current_time_seconds() -> float
#   - duration_seconds() -> float
#   - energy() -> float
#   - update_time(time_seconds: float, duration_seconds: Optional[float] = None) -> bool
#   - update_energy(value: float) -> None
#   - seek(time_seconds: float) -> None
#   - reset_energy() -> None
#   - snapshot() -> TimingSnapshot
#
# Inputs:
# - tick(time, duration) and energy(value) from the playback collaborator.
#
# Outputs:
# - Sanitized time and energy used by RoundController.
#
########################

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Optional


@dataclass(frozen=True)
class TimingSnapshot:
    current_time_seconds: float
    duration_seconds: float
    energy: float


def sanitize_energy(value: float) -> float:
    try:
        energy = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(energy) or energy < 0.0:
        return 0.0
    return min(energy, 1.0)


def energy_from_decibels(power_db: float) -> float:
    """Map metered average power (dBFS, -60..0) to a normalized loudness value."""
    return sanitize_energy((float(power_db) + 60.0) / 60.0)


class TimingModel:
    def __init__(self) -> None:
        self._current_time_seconds = 0.0
        self._duration_seconds = 0.0
        self._energy = 0.0

    def current_time_seconds(self) -> float:
        return float(self._current_time_seconds)

    def duration_seconds(self) -> float:
        return float(self._duration_seconds)

    def energy(self) -> float:
        return float(self._energy)

    def update_time(self, time_seconds: float, duration_seconds: Optional[float] = None) -> bool:
        """Apply a tick. Returns False when the reported time is unusable."""
        try:
            value = float(time_seconds)
        except (TypeError, ValueError):
            return False
        if not math.isfinite(value):
            return False
        if value < 0.0:
            value = 0.0
        self._current_time_seconds = value

        if duration_seconds is not None:
            duration = float(duration_seconds)
            if math.isfinite(duration) and duration >= 0.0:
                self._duration_seconds = duration
        return True

    def update_energy(self, value: float) -> None:
        self._energy = sanitize_energy(value)

    def seek(self, time_seconds: float) -> None:
        self.update_time(time_seconds)

    def reset_energy(self) -> None:
        self._energy = 0.0

    def snapshot(self) -> TimingSnapshot:
        return TimingSnapshot(
            current_time_seconds=self.current_time_seconds(),
            duration_seconds=self.duration_seconds(),
            energy=self.energy(),
        )


def _run_unit_tests() -> None:
    model = TimingModel()
    assert model.update_time(-5.0)
    assert model.current_time_seconds() == 0.0

    assert model.update_time(1.5, 200.0)
    assert not model.update_time(float("nan"))
    assert abs(model.current_time_seconds() - 1.5) < 1e-9
    assert model.duration_seconds() == 200.0

    model.update_energy(-1.0)
    assert model.energy() == 0.0
    model.update_energy(float("nan"))
    assert model.energy() == 0.0
    model.update_energy(3.0)
    assert model.energy() == 1.0

    assert energy_from_decibels(-60.0) == 0.0
    assert energy_from_decibels(0.0) == 1.0
    assert abs(energy_from_decibels(-30.0) - 0.5) < 1e-9


if __name__ == "__main__":
    _run_unit_tests()
    print("timing_model.py: ok")
