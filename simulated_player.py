# -*- coding: utf-8 -*-
########################
# simulated_player.py
########################
# Purpose:
# - In-process stand-in for the audio playback collaborator.
# - Implements PlaybackPort and reports time, duration, loudness and track end through callbacks,
#   at the same tick cadence as the desktop player (0.25 s).
#
# Design notes:
# - No audio decoding and no DSP. Loudness comes from a scripted, deterministic envelope
#   (beat pulses plus a slow section swell) so harness runs are reproducible.
# - Time only advances while playing; step() is driven by the host loop (harness, tests, a QTimer).
# - fade_out_and_stop ramps volume to zero over the given duration, then stops.
#
########################
# Interfaces:
# Public dataclasses:
# - EnergyScript(bpm: float, base_level: float, pulse_level: float, swell_period_seconds: float,
#                quiet_spans: tuple[tuple[float, float], ...])
#   - energy_at(time_seconds: float) -> float
#
# Public classes:
# - class SimulatedPlayer (PlaybackPort)
#   - Callbacks: on_time_update(time, duration), on_audio_energy(value), on_track_finished()
#   - load(track, *, autoplay, volume) -> float
#   - play_pause() -> bool
#   - seek(time_seconds) -> None
#   - set_volume(volume) -> None
#   - stop() -> None
#   - fade_out_and_stop(duration_seconds) -> None
#   - resume() -> None
#   - current_playback_time() -> float
#   - step(delta_seconds: float) -> None
#
########################

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Callable, Dict, Optional, Tuple

import timing_model


@dataclass(frozen=True)
class EnergyScript:
    bpm: float = 120.0
    base_level: float = 0.35
    pulse_level: float = 0.45
    swell_period_seconds: float = 16.0
    quiet_spans: Tuple[Tuple[float, float], ...] = ()

    def energy_at(self, time_seconds: float) -> float:
        t = float(time_seconds)
        for span_start, span_end in self.quiet_spans:
            if span_start <= t < span_end:
                return 0.05
        beat_phase = (t * float(self.bpm) / 60.0) % 1.0
        pulse = math.exp(-beat_phase * 6.0)
        swell = 0.5 + 0.5 * math.sin(2.0 * math.pi * t / float(self.swell_period_seconds))
        value = float(self.base_level) * (0.6 + 0.4 * swell) + float(self.pulse_level) * pulse
        return timing_model.sanitize_energy(value)


class SimulatedPlayer:
    def __init__(
        self,
        *,
        track_durations: Optional[Dict[str, float]] = None,
        default_duration_seconds: float = 180.0,
        energy_script: Optional[EnergyScript] = None,
        tick_interval_seconds: float = 0.25,
    ) -> None:
        self.on_time_update: Optional[Callable[[float, float], None]] = None
        self.on_audio_energy: Optional[Callable[[float], None]] = None
        self.on_track_finished: Optional[Callable[[], None]] = None

        self._track_durations = dict(track_durations or {})
        self._default_duration_seconds = float(default_duration_seconds)
        self._energy_script = energy_script or EnergyScript()
        self._tick_interval_seconds = float(tick_interval_seconds)

        self._track: Optional[str] = None
        self._duration_seconds = 0.0
        self._time_seconds = 0.0
        self._is_playing = False
        self._volume = 0.9
        self._since_last_tick = 0.0

        self._fade_total_seconds = 0.0
        self._fade_elapsed_seconds = 0.0
        self._fade_start_volume = 0.0
        self._is_fading = False

    # PlaybackPort

    def load(self, track: str, *, autoplay: bool, volume: float) -> float:
        self._cancel_fade()
        self._track = str(track)
        self._duration_seconds = float(self._track_durations.get(self._track, self._default_duration_seconds))
        self._time_seconds = 0.0
        self._since_last_tick = 0.0
        self._volume = float(volume)
        self._is_playing = bool(autoplay)
        return self._duration_seconds

    def play_pause(self) -> bool:
        if self._track is None:
            return False
        self._cancel_fade()
        self._is_playing = not self._is_playing
        return self._is_playing

    def seek(self, time_seconds: float) -> None:
        if self._track is None:
            return
        self._time_seconds = min(max(float(time_seconds), 0.0), self._duration_seconds)
        self._emit_tick()

    def set_volume(self, volume: float) -> None:
        self._volume = float(volume)

    def stop(self) -> None:
        self._is_playing = False
        self._cancel_fade()

    def fade_out_and_stop(self, duration_seconds: float) -> None:
        if not self._is_playing:
            return
        if self._volume <= 0.001 or float(duration_seconds) <= 0.0:
            self.stop()
            return
        self._is_fading = True
        self._fade_total_seconds = float(duration_seconds)
        self._fade_elapsed_seconds = 0.0
        self._fade_start_volume = self._volume

    def resume(self) -> None:
        if self._track is not None:
            self._is_playing = True

    def current_playback_time(self) -> float:
        return float(self._time_seconds)

    # Introspection

    @property
    def is_playing(self) -> bool:
        return bool(self._is_playing)

    @property
    def is_fading(self) -> bool:
        return bool(self._is_fading)

    @property
    def volume(self) -> float:
        return float(self._volume)

    @property
    def duration_seconds(self) -> float:
        return float(self._duration_seconds)

    # Host loop

    def step(self, delta_seconds: float) -> None:
        if not self._is_playing or self._track is None:
            return

        delta = max(0.0, float(delta_seconds))
        self._time_seconds += delta
        self._since_last_tick += delta
        self._advance_fade(delta)

        if self._time_seconds >= self._duration_seconds:
            self._time_seconds = self._duration_seconds
            self._is_playing = False
            self._emit_tick()
            if self.on_track_finished is not None:
                self.on_track_finished()
            return

        if not self._is_playing:
            return

        while self._since_last_tick >= self._tick_interval_seconds:
            self._since_last_tick -= self._tick_interval_seconds
            self._emit_tick()

    def _emit_tick(self) -> None:
        if self.on_time_update is not None:
            self.on_time_update(self._time_seconds, max(self._duration_seconds, 1.0))
        if self.on_audio_energy is not None:
            self.on_audio_energy(self._energy_script.energy_at(self._time_seconds))

    def _advance_fade(self, delta_seconds: float) -> None:
        if not self._is_fading:
            return
        self._fade_elapsed_seconds += delta_seconds
        progress = min(self._fade_elapsed_seconds / self._fade_total_seconds, 1.0)
        self._volume = max(0.0, self._fade_start_volume * (1.0 - progress))
        if progress >= 1.0:
            self.stop()

    def _cancel_fade(self) -> None:
        self._is_fading = False
        self._fade_elapsed_seconds = 0.0


def _run_unit_tests() -> None:
    ticks = []
    player = SimulatedPlayer(track_durations={"song": 2.0})
    player.on_time_update = lambda time_seconds, duration: ticks.append(time_seconds)
    assert player.load("song", autoplay=True, volume=0.8) == 2.0
    player.step(0.5)
    assert len(ticks) == 2

    player.fade_out_and_stop(1.0)
    player.step(0.5)
    assert player.is_fading and abs(player.volume - 0.4) < 1e-9
    player.step(0.6)
    assert not player.is_playing and not player.is_fading

    script = EnergyScript(quiet_spans=((10.0, 20.0),))
    assert script.energy_at(12.0) < 0.15
    assert 0.0 <= script.energy_at(3.3) <= 1.0


if __name__ == "__main__":
    _run_unit_tests()
    print("simulated_player.py: ok")
