# -*- coding: utf-8 -*-
########################
# danger_engine.py
########################
# Purpose:
# - Miss detection and the flood (danger) meter.
# - Expires notes whose target time has passed, raises the fill level by a size driven impact,
#   emits ripples and callouts, and detects the loss transition.
#
# Design notes:
# - No Qt usage and no I/O. The loss transition is reported through MissBatch.lost_now;
#   RoundController stops playback.
# - Overdue notes are processed in ascending (target_time, note_id) order so callout bucket
#   crossings happen in deadline order.
# - Fill impact uses the bubble's visual size on purpose: bigger missed bubbles flood more.
# - Once the round is lost, further misses are not processed until a reset.
#
########################
# Interfaces:
# Public dataclasses:
# - MissBatch(misses: list[MissResult], lost_now: bool, terminal_callout: Optional[CalloutEvent])
#
# Public functions:
# - miss_ripple_strength(size: float, max_size: float) -> float
#
# Public classes:
# - class DangerEngine
#   - __init__(note_field, event_bus, callout_policy, rhythm_config, danger_config)
#   - fill_impact(size: float) -> float
#   - register_miss(state: RoundState, note: Note, *, now: float) -> MissResult
#   - process_overdue(state: RoundState, *, now: float) -> MissBatch
#
# Inputs:
# - Tick time from RoundController.
#
# Outputs:
# - MissBatch. Mutates RoundState (misses, combo, fill_level, lost, callout fields) and appends to EventBus.
#
########################

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

import callouts
import config
import event_bus
import note_field
import rhythm_models


def miss_ripple_strength(size: float, max_size: float) -> float:
    return 0.9 + (float(size) / float(max_size)) * 0.8


@dataclass(frozen=True)
class MissBatch:
    misses: List[rhythm_models.MissResult] = field(default_factory=list)
    lost_now: bool = False
    terminal_callout: Optional[rhythm_models.CalloutEvent] = None


class DangerEngine:
    def __init__(
        self,
        note_field_obj: note_field.NoteField,
        event_bus_obj: event_bus.EventBus,
        callout_policy: callouts.CalloutPolicy,
        rhythm_config: config.RhythmConfig,
        danger_config: config.DangerConfig,
    ) -> None:
        self._note_field = note_field_obj
        self._event_bus = event_bus_obj
        self._callout_policy = callout_policy
        self._rhythm_config = rhythm_config
        self._danger_config = danger_config

    def fill_impact(self, size: float) -> float:
        min_size = float(self._rhythm_config.min_bubble_size)
        max_size = float(self._rhythm_config.max_bubble_size)
        normalized_size = (float(size) - min_size) / (max_size - min_size)
        normalized_size = rhythm_models.clamp01(normalized_size)
        return float(self._danger_config.base_fill_impact) + normalized_size * float(
            self._danger_config.size_fill_impact
        )

    def register_miss(
        self,
        state: rhythm_models.RoundState,
        note: rhythm_models.Note,
        *,
        now: float,
    ) -> rhythm_models.MissResult:
        previous_fill = float(state.fill_level)
        state.apply_miss(self.fill_impact(note.size), max_fill=float(self._danger_config.max_fill))
        ripple = self._event_bus.add_ripple(
            lane=note.lane,
            strength=miss_ripple_strength(note.size, self._rhythm_config.max_bubble_size),
            now=now,
        )

        callout_event: Optional[rhythm_models.CalloutEvent] = None
        text = self._callout_policy.evaluate(
            state,
            previous_fill=previous_fill,
            new_fill=state.fill_level,
            now=now,
        )
        if text is not None:
            callout_event = self._event_bus.add_callout(text=text, now=now)

        return rhythm_models.MissResult(
            note=note,
            previous_fill=previous_fill,
            new_fill=float(state.fill_level),
            ripple=ripple,
            callout=callout_event,
        )

    def process_overdue(self, state: rhythm_models.RoundState, *, now: float) -> MissBatch:
        if state.lost:
            return MissBatch()

        misses: List[rhythm_models.MissResult] = []
        for note in self._note_field.overdue_notes(now):
            if state.lost:
                # Overdue leftovers of the losing tick leave the field without counting.
                self._note_field.remove(note.note_id)
                continue
            # Removal first; a note already taken by a hit is skipped.
            if self._note_field.remove(note.note_id) is None:
                continue
            misses.append(self.register_miss(state, note, now=now))

        if state.lost:
            terminal = self._event_bus.add_callout(text=callouts.PARTY_ENDED_TEXT, now=now)
            return MissBatch(misses=misses, lost_now=True, terminal_callout=terminal)
        return MissBatch(misses=misses)


def _run_unit_tests() -> None:
    import random

    rhythm_config = config.RhythmConfig()
    ids = rhythm_models.IdSource()
    field_obj = note_field.NoteField()
    bus = event_bus.EventBus(config.EventConfig(), ids)
    policy = callouts.CalloutPolicy(rng=random.Random(3))
    engine = DangerEngine(field_obj, bus, policy, rhythm_config, config.DangerConfig())
    state = rhythm_models.RoundState()

    assert abs(engine.fill_impact(64.0) - 0.075) < 1e-9
    assert abs(engine.fill_impact(24.0) - 0.02) < 1e-9

    lost_batch = None
    for index in range(20):
        field_obj.add(rhythm_models.Note(note_id=ids.next_id(), lane=index % 4, spawn_time=float(index), size=64.0, travel_duration=2.2))
        batch = engine.process_overdue(state, now=float(index) + 3.0)
        if batch.lost_now:
            lost_batch = batch
            break
    assert lost_batch is not None
    assert state.lost and state.fill_level == 1.0 and state.misses == 14
    assert lost_batch.terminal_callout is not None
    assert engine.process_overdue(state, now=100.0).misses == []


if __name__ == "__main__":
    _run_unit_tests()
    print("danger_engine.py: ok")
