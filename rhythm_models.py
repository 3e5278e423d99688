# -*- coding: utf-8 -*-
########################
# rhythm_models.py
########################
# Purpose:
# - Core data models for the bubble rhythm game.
# - Defines notes, cosmetic events (splash, ripple, callout), the mutable round counters,
#   and the immutable snapshot handed to renderers.
#
# Design notes:
# - Keep these models stable. Prefer extending with new optional fields rather than breaking changes.
# - No Qt usage. These are plain dataclasses.
# - Notes and events are frozen. Only RoundState is mutable, and only the spawner, hit resolver
#   and danger engine write to it (through RoundController).
#
########################
# Interfaces:
# Public dataclasses:
# - Note(note_id: int, lane: int, spawn_time: float, size: float, travel_duration: float)
#   - target_time -> float
#   - progress_at(time_seconds: float) -> float
# - NoteView(note: Note, progress: float)
# - SplashEvent(event_id: int, lane: int, progress: float, size: float, created_time: float)
# - RippleEvent(event_id: int, lane: int, strength: float, created_time: float)
# - CalloutEvent(event_id: int, text: str, created_time: float)
# - LaneTap(time_seconds: float, lane: int)
# - RoundState(score, combo, high_combo, misses, fill_level, lost, last_spawn_time,
#              last_callout_bucket, last_callout_time)
#   - apply_hit(points: int) -> None
#   - apply_miss(fill_impact: float, max_fill: float) -> None
#   - reset(current_time: float) -> None
# - HitResult(note: Note, progress: float, points: int, splash: SplashEvent, ripple: RippleEvent)
# - MissResult(note: Note, previous_fill: float, new_fill: float, ripple: RippleEvent,
#              callout: Optional[CalloutEvent])
# - RoundSnapshot(...) read-only view for rendering
# - TickResult(snapshot: RoundSnapshot, events: list, spawned_notes: list, misses: list, lost_now: bool)
#
# Public functions:
# - clamp01(value: float) -> float
# - IdSource: monotonically increasing integer ids
#
# Inputs/Outputs:
# - These types are exchanged between Spawner, NoteField, HitResolver, DangerEngine, EventBus,
#   RoundController and the Qt adapters.
#
########################

from __future__ import annotations

from dataclasses import dataclass, field
import itertools
from typing import List, Optional, Tuple, Union


def clamp01(value: float) -> float:
    return min(max(float(value), 0.0), 1.0)


class IdSource:
    """Shared counter for note and event ids. Lower id means created earlier."""

    def __init__(self, start: int = 1) -> None:
        self._counter = itertools.count(int(start))

    def next_id(self) -> int:
        return next(self._counter)


@dataclass(frozen=True)
class Note:
    note_id: int
    lane: int
    spawn_time: float
    size: float
    travel_duration: float

    @property
    def target_time(self) -> float:
        return float(self.spawn_time) + float(self.travel_duration)

    def progress_at(self, time_seconds: float) -> float:
        if self.travel_duration <= 0.0:
            return 1.0
        return clamp01((float(time_seconds) - float(self.spawn_time)) / float(self.travel_duration))


@dataclass(frozen=True)
class NoteView:
    note: Note
    progress: float


@dataclass(frozen=True)
class SplashEvent:
    event_id: int
    lane: int
    progress: float
    size: float
    created_time: float


@dataclass(frozen=True)
class RippleEvent:
    event_id: int
    lane: int
    strength: float
    created_time: float


@dataclass(frozen=True)
class CalloutEvent:
    event_id: int
    text: str
    created_time: float


@dataclass(frozen=True)
class LaneTap:
    time_seconds: float
    lane: int


GameEvent = Union[SplashEvent, RippleEvent, CalloutEvent]


@dataclass
class RoundState:
    score: int = 0
    combo: int = 0
    high_combo: int = 0
    misses: int = 0
    fill_level: float = 0.0
    lost: bool = False
    last_spawn_time: float = 0.0
    last_callout_bucket: int = -1
    last_callout_time: float = 0.0

    def apply_hit(self, points: int) -> None:
        self.combo += 1
        if self.combo > self.high_combo:
            self.high_combo = self.combo
        self.score += int(points)

    def apply_miss(self, fill_impact: float, max_fill: float = 1.0) -> None:
        self.misses += 1
        self.combo = 0
        self.fill_level = min(float(max_fill), max(0.0, self.fill_level + float(fill_impact)))
        if self.fill_level >= float(max_fill):
            self.lost = True

    def reset(self, current_time: float) -> None:
        self.score = 0
        self.combo = 0
        self.high_combo = 0
        self.misses = 0
        self.fill_level = 0.0
        self.lost = False
        self.last_spawn_time = float(current_time)
        self.last_callout_bucket = -1
        self.last_callout_time = 0.0


@dataclass(frozen=True)
class HitResult:
    note: Note
    progress: float
    points: int
    splash: SplashEvent
    ripple: RippleEvent


@dataclass(frozen=True)
class MissResult:
    note: Note
    previous_fill: float
    new_fill: float
    ripple: RippleEvent
    callout: Optional[CalloutEvent] = None


@dataclass(frozen=True)
class RoundSnapshot:
    notes: Tuple[NoteView, ...]
    splashes: Tuple[SplashEvent, ...]
    ripples: Tuple[RippleEvent, ...]
    callouts: Tuple[CalloutEvent, ...]
    score: int
    combo: int
    high_combo: int
    misses: int
    fill_level: float
    lost: bool
    lane_count: int
    target_zone_ratio: float
    game_mode_enabled: bool
    is_playing: bool
    current_time: float
    duration: float


@dataclass(frozen=True)
class TickResult:
    snapshot: RoundSnapshot
    events: List[GameEvent] = field(default_factory=list)
    spawned_notes: List[Note] = field(default_factory=list)
    misses: List[MissResult] = field(default_factory=list)
    lost_now: bool = False


def _run_unit_tests() -> None:
    note = Note(note_id=1, lane=2, spawn_time=10.0, size=40.0, travel_duration=2.0)
    assert abs(note.target_time - 12.0) < 1e-9
    assert note.progress_at(9.0) == 0.0
    assert abs(note.progress_at(11.0) - 0.5) < 1e-9
    assert note.progress_at(20.0) == 1.0

    state = RoundState()
    state.apply_hit(50)
    state.apply_hit(50)
    assert state.combo == 2 and state.high_combo == 2 and state.score == 100
    state.apply_miss(0.5)
    assert state.combo == 0 and state.high_combo == 2 and state.misses == 1
    state.apply_miss(0.75)
    assert state.fill_level == 1.0 and state.lost

    state.reset(current_time=3.0)
    assert state == RoundState(last_spawn_time=3.0)

    ids = IdSource()
    assert [ids.next_id() for _ in range(3)] == [1, 2, 3]


if __name__ == "__main__":
    _run_unit_tests()
    print("rhythm_models.py: ok")
