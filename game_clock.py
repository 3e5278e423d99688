# -*- coding: utf-8 -*-
########################
# game_clock.py
########################
# Purpose:
# - Qt bridge between the audio playback collaborator and RoundController.
# - Receives tick, energy and finished notifications as slots, advances the round, and emits
#   RoundSnapshot updates for UI subscribers.
#
# Design notes:
# - Gameplay logic lives in RoundController. This module only adapts it to Qt signals.
# - Emits snapshotUpdated after every tick and every resolved tap so views re-query nothing.
# - calloutAdded fires once per new CalloutEvent (including the terminal "party ended" line).
#
########################
# Interfaces:
# Public classes:
# - class GameClock(PyQt6.QtCore.QObject)
#   - Signals:
#     - snapshotUpdated(RoundSnapshot)
#     - calloutAdded(CalloutEvent)
#     - roundLost()
#     - trackFinished(bool)   (True when the host should advance the library)
#   - Methods:
#     - controller() -> RoundController
#     - snapshot() -> RoundSnapshot
#     - set_repeat_one(bool) -> None
#   - Slots:
#     - on_time_updated(time_seconds: float, duration_seconds: float) -> None
#     - on_energy_updated(value: float) -> None
#     - on_track_finished() -> None
#     - on_lane_tapped(lane_tap: LaneTap) -> None
#     - on_note_tapped(note_id: int) -> None
#
# Inputs:
# - Playback collaborator callbacks and InputRouter signals.
#
# Outputs:
# - Qt signals for UI subscribers.
#
########################

from __future__ import annotations

from typing import Optional

from PyQt6.QtCore import QObject, pyqtSignal

import rhythm_models
import round_controller


class GameClock(QObject):
    snapshotUpdated = pyqtSignal(object)
    calloutAdded = pyqtSignal(object)
    roundLost = pyqtSignal()
    trackFinished = pyqtSignal(bool)

    def __init__(self, controller: round_controller.RoundController, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._controller = controller
        self._repeat_one = False

    def controller(self) -> round_controller.RoundController:
        return self._controller

    def snapshot(self) -> rhythm_models.RoundSnapshot:
        return self._controller.snapshot()

    def set_repeat_one(self, repeat_one: bool) -> None:
        self._repeat_one = bool(repeat_one)

    def on_time_updated(self, time_seconds: float, duration_seconds: float) -> None:
        result = self._controller.on_tick(float(time_seconds), float(duration_seconds))
        for event in result.events:
            if isinstance(event, rhythm_models.CalloutEvent):
                self.calloutAdded.emit(event)
        if result.lost_now:
            self.roundLost.emit()
        self.snapshotUpdated.emit(result.snapshot)

    def on_energy_updated(self, value: float) -> None:
        self._controller.on_energy(float(value))

    def on_track_finished(self) -> None:
        should_advance = self._controller.on_track_finished(repeat_one=self._repeat_one)
        self.trackFinished.emit(bool(should_advance))
        self._emit_snapshot()

    def on_lane_tapped(self, lane_tap: object) -> None:
        lane = getattr(lane_tap, "lane", None)
        if lane is None:
            return
        if self._controller.hit_lane(int(lane)) is not None:
            self._emit_snapshot()

    def on_note_tapped(self, note_id: int) -> None:
        if self._controller.hit(int(note_id)) is not None:
            self._emit_snapshot()

    def _emit_snapshot(self) -> None:
        self.snapshotUpdated.emit(self._controller.snapshot())
