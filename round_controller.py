# -*- coding: utf-8 -*-
########################
# round_controller.py
########################
# Purpose:
# - Owns one game-mode session per track playback and ties the gameplay pipeline together:
#   TimingModel + Spawner + NoteField + HitResolver + DangerEngine + EventBus.
# - Holds the playback facing state (game mode flag, playing flag, current track) and issues
#   commands to the audio playback collaborator through PlaybackPort.
#
# Design notes:
# - No Qt usage. GameClock adapts this controller to Qt signals.
# - Single writer: ticks, taps, resets and snapshots are serialized with one RLock, so a tap never
#   resolves a note that a tick already expired and readers never see a half applied tick.
# - advance(time, energy) is the only step function; it returns a TickResult with an immutable
#   RoundSnapshot plus the events emitted during the step. Renderers re-query snapshot().
# - Game steps run only while game mode is enabled, playback is running and the round is not lost.
#   Event pruning runs on every accepted tick of an enabled round, lost rounds included.
# - Any seek while game mode is enabled resets the round (no mid round resume after a scrub).
#   The reset happens before playback is told to seek, so a tick reported during the seek lands
#   on the fresh round.
#
########################
# Interfaces:
# Public classes:
# - class RoundController
#   - __init__(playback: PlaybackPort, *, app_config: Optional[AppConfig] = None,
#              rng: Optional[random.Random] = None, on_play_counted: Optional[Callable[[str], None]] = None,
#              volume: float = 0.9)
#   - Properties: game_mode_enabled, is_playing, current_track, current_time, volume, latest_energy, app_config
#   - load_track(track: str, *, autoplay: bool, count_play: bool = True) -> bool
#   - play_pause() -> bool
#   - start() / resume() -> None
#   - pause() -> None
#   - stop() -> None
#   - set_volume(volume: float) -> None
#   - toggle_game_mode() -> bool
#   - reset_round(*, keep_enabled: bool = True) -> None
#   - restart_round() -> bool
#   - seek(time_seconds: float) -> None
#   - hit(note_id: int) -> Optional[HitResult]
#   - hit_lane(lane: int) -> Optional[HitResult]
#   - on_energy(value: float) -> None
#   - on_tick(time_seconds: float, duration_seconds: Optional[float] = None) -> TickResult
#   - advance(time_seconds: float, energy: Optional[float] = None, duration_seconds: Optional[float] = None) -> TickResult
#   - on_track_finished(*, repeat_one: bool = False) -> bool
#   - round_state() -> RoundState (copy)
#   - snapshot() -> RoundSnapshot
#
# Inputs:
# - Playback ticks (time, duration), energy values, finished callbacks.
# - User intents: hit(note_id), hit_lane(lane), restart_round(), toggle_game_mode(), seek(time).
#
# Outputs:
# - TickResult / RoundSnapshot for renderers.
# - PlaybackPort commands (load, play_pause, seek, set_volume, stop, fade_out_and_stop, resume).
#
########################

from __future__ import annotations

import dataclasses
import random
import threading
from typing import Callable, List, Optional

import callouts
import config
import danger_engine
import event_bus
import hit_resolver
import note_field
import playback_port
import rhythm_models
import spawner
import timing_model
from logging_utils import log_event


class RoundController:
    def __init__(
        self,
        playback: playback_port.PlaybackPort,
        *,
        app_config: Optional[config.AppConfig] = None,
        rng: Optional[random.Random] = None,
        on_play_counted: Optional[Callable[[str], None]] = None,
        volume: float = 0.9,
    ) -> None:
        self._lock = threading.RLock()
        self._playback = playback
        self._config = app_config or config.AppConfig()
        self._rng = rng if rng is not None else random.Random()
        self._on_play_counted = on_play_counted

        self._ids = rhythm_models.IdSource()
        self._timing = timing_model.TimingModel()
        self._state = rhythm_models.RoundState()
        self._note_field = note_field.NoteField()
        self._event_bus = event_bus.EventBus(self._config.events, self._ids)
        self._spawner = spawner.Spawner(self._config.rhythm, self._rng)
        self._hit_resolver = hit_resolver.HitResolver(self._note_field, self._event_bus, self._config.rhythm)
        self._danger_engine = danger_engine.DangerEngine(
            self._note_field,
            self._event_bus,
            callouts.CalloutPolicy(cooldown_seconds=self._config.danger.callout_cooldown_seconds, rng=self._rng),
            self._config.rhythm,
            self._config.danger,
        )

        self._game_mode_enabled = False
        self._is_playing = False
        self._current_track: Optional[str] = None
        self._volume = float(volume)

    # -----------------
    # Read side
    # -----------------

    @property
    def app_config(self) -> config.AppConfig:
        return self._config

    @property
    def game_mode_enabled(self) -> bool:
        return bool(self._game_mode_enabled)

    @property
    def is_playing(self) -> bool:
        return bool(self._is_playing)

    @property
    def current_track(self) -> Optional[str]:
        return self._current_track

    @property
    def current_time(self) -> float:
        return self._timing.current_time_seconds()

    @property
    def volume(self) -> float:
        return float(self._volume)

    @property
    def latest_energy(self) -> float:
        return self._timing.energy()

    def round_state(self) -> rhythm_models.RoundState:
        with self._lock:
            return dataclasses.replace(self._state)

    def snapshot(self) -> rhythm_models.RoundSnapshot:
        with self._lock:
            now = self._timing.current_time_seconds()
            return rhythm_models.RoundSnapshot(
                notes=tuple(self._note_field.views(now)),
                splashes=tuple(self._event_bus.splashes()),
                ripples=tuple(self._event_bus.ripples()),
                callouts=tuple(self._event_bus.callouts()),
                score=int(self._state.score),
                combo=int(self._state.combo),
                high_combo=int(self._state.high_combo),
                misses=int(self._state.misses),
                fill_level=float(self._state.fill_level),
                lost=bool(self._state.lost),
                lane_count=int(self._config.rhythm.lane_count),
                target_zone_ratio=float(self._config.rhythm.target_zone_ratio),
                game_mode_enabled=bool(self._game_mode_enabled),
                is_playing=bool(self._is_playing),
                current_time=float(now),
                duration=self._timing.duration_seconds(),
            )

    # -----------------
    # Transport
    # -----------------

    def load_track(self, track: str, *, autoplay: bool, count_play: bool = True) -> bool:
        with self._lock:
            try:
                duration_seconds = self._playback.load(str(track), autoplay=bool(autoplay), volume=self._volume)
            except Exception as exc:
                self._is_playing = False
                log_event("ERROR", "Round", "Track load failed", track=track, error=exc)
                return False

            self._current_track = str(track)
            self._timing.update_time(0.0, duration_seconds)
            if self._game_mode_enabled:
                self._reset_locked(keep_enabled=True)

            self._is_playing = bool(autoplay)
            if autoplay and count_play and self._on_play_counted is not None:
                self._on_play_counted(self._current_track)
            return True

    def play_pause(self) -> bool:
        with self._lock:
            if self._current_track is None:
                return False
            self._is_playing = bool(self._playback.play_pause())
            return self._is_playing

    def start(self) -> None:
        self.resume()

    def resume(self) -> None:
        with self._lock:
            if self._current_track is None:
                return
            self._playback.resume()
            self._is_playing = True

    def pause(self) -> None:
        with self._lock:
            if not self._is_playing:
                return
            self._is_playing = bool(self._playback.play_pause())

    def stop(self) -> None:
        with self._lock:
            self._playback.stop()
            self._is_playing = False

    def set_volume(self, volume: float) -> None:
        with self._lock:
            self._volume = min(max(float(volume), 0.0), 1.0)
            self._playback.set_volume(self._volume)

    def seek(self, time_seconds: float) -> None:
        with self._lock:
            self._timing.seek(time_seconds)
            if self._game_mode_enabled:
                self._reset_locked(keep_enabled=True)
            # Playback may report the new position synchronously; the old round is gone by then.
            self._playback.seek(float(time_seconds))

    def on_track_finished(self, *, repeat_one: bool = False) -> bool:
        """Returns True when the host should advance to the next track."""
        with self._lock:
            if repeat_one:
                self.seek(0.0)
                self._playback.resume()
                self._is_playing = True
                return False
            self._is_playing = False
            return True

    # -----------------
    # Round lifecycle
    # -----------------

    def toggle_game_mode(self) -> bool:
        with self._lock:
            self._game_mode_enabled = not self._game_mode_enabled
            self._reset_locked(keep_enabled=True)
            log_event("INFO", "Round", "Game mode toggled", enabled=self._game_mode_enabled)
            return self._game_mode_enabled

    def reset_round(self, *, keep_enabled: bool = True) -> None:
        with self._lock:
            self._reset_locked(keep_enabled=keep_enabled)

    def restart_round(self) -> bool:
        with self._lock:
            if not self._game_mode_enabled or self._current_track is None:
                return False
            self._reset_locked(keep_enabled=True)
            self.seek(0.0)
            self.load_track(self._current_track, autoplay=True, count_play=False)
            log_event("INFO", "Round", "Round restarted", track=self._current_track)
            return True

    def _reset_locked(self, *, keep_enabled: bool) -> None:
        self._note_field.clear()
        self._event_bus.clear()
        self._state.reset(self._timing.current_time_seconds())
        self._timing.reset_energy()
        if not keep_enabled:
            self._game_mode_enabled = False
        log_event(
            "DEBUG",
            "Round",
            "Round reset",
            time=f"{self._timing.current_time_seconds():.2f}",
            game_mode=self._game_mode_enabled,
        )

    # -----------------
    # Input path
    # -----------------

    def hit(self, note_id: int) -> Optional[rhythm_models.HitResult]:
        with self._lock:
            if not self._game_mode_enabled:
                return None
            return self._hit_resolver.hit(self._state, note_id, now=self._timing.current_time_seconds())

    def hit_lane(self, lane: int) -> Optional[rhythm_models.HitResult]:
        with self._lock:
            if not self._game_mode_enabled:
                return None
            return self._hit_resolver.hit_lane(self._state, lane, now=self._timing.current_time_seconds())

    # -----------------
    # Clock path
    # -----------------

    def on_energy(self, value: float) -> None:
        with self._lock:
            self._timing.update_energy(value)

    def on_tick(self, time_seconds: float, duration_seconds: Optional[float] = None) -> rhythm_models.TickResult:
        return self.advance(time_seconds, duration_seconds=duration_seconds)

    def advance(
        self,
        time_seconds: float,
        energy: Optional[float] = None,
        duration_seconds: Optional[float] = None,
    ) -> rhythm_models.TickResult:
        with self._lock:
            if energy is not None:
                self._timing.update_energy(energy)
            if not self._timing.update_time(time_seconds, duration_seconds):
                return rhythm_models.TickResult(snapshot=self.snapshot())

            now = self._timing.current_time_seconds()
            if self._game_mode_enabled:
                self._event_bus.prune(now)

            if not (self._game_mode_enabled and self._is_playing and not self._state.lost):
                return rhythm_models.TickResult(snapshot=self.snapshot())

            events: List[rhythm_models.GameEvent] = []
            batch = self._danger_engine.process_overdue(self._state, now=now)
            for miss in batch.misses:
                events.append(miss.ripple)
                if miss.callout is not None:
                    events.append(miss.callout)

            spawned: List[rhythm_models.Note] = []
            if batch.lost_now:
                if batch.terminal_callout is not None:
                    events.append(batch.terminal_callout)
                self._is_playing = False
                self._playback.fade_out_and_stop(float(self._config.danger.loss_fade_out_seconds))
                log_event(
                    "INFO",
                    "Round",
                    "Round lost",
                    score=self._state.score,
                    misses=self._state.misses,
                    high_combo=self._state.high_combo,
                )
            else:
                note = self._spawner.maybe_spawn(
                    time_seconds=now,
                    energy=self._timing.energy(),
                    last_spawn_time=self._state.last_spawn_time,
                    note_id_source=self._ids.next_id,
                )
                if note is not None:
                    self._note_field.add(note)
                    self._state.last_spawn_time = now
                    spawned.append(note)

            return rhythm_models.TickResult(
                snapshot=self.snapshot(),
                events=events,
                spawned_notes=spawned,
                misses=list(batch.misses),
                lost_now=bool(batch.lost_now),
            )
