# -*- coding: utf-8 -*-
########################
# input_router.py
########################
# Purpose:
# - Keyboard front end for the bubble game.
# - Turns QKeyEvent presses into lane taps (rhythm_models.LaneTap) or round commands (restart,
#   game mode toggle) and publishes them as Qt signals.
#
# Design notes:
# - One binding table: every routed key maps to either a lane index or a command name.
# - A press fires once. Auto repeat and a second press of a key that is still down are swallowed
#   and counted as ignored.
# - Playback time for the tap comes from an injected callable; a broken provider yields 0.0.
# - Lane bindings beyond the configured lane count are left out of the table.
#
########################
# Interfaces:
# Public classes:
# - class InputRouter(PyQt6.QtCore.QObject)
#   - Signals:
#     - laneTapped(rhythm_models.LaneTap)
#     - restartRequested()
#     - gameModeToggleRequested()
#   - Methods:
#     - handle_key_press(event) -> bool     (True when the key is routed)
#     - handle_key_release(event) -> bool
#     - clear_pressed_keys() -> None
#     - reset_stats() -> None
#   - Properties: key_to_lane_map, total_presses, ignored_presses
#
# Inputs:
# - Key events from the host window (anything exposing key() and isAutoRepeat()).
#
# Outputs:
# - LaneTap for GameClock.on_lane_tapped, command signals for the host.
#
########################

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Set

from PyQt6.QtCore import QObject, Qt, pyqtSignal
from PyQt6.QtGui import QKeyEvent

import rhythm_models

COMMAND_RESTART = "restart"
COMMAND_TOGGLE_GAME_MODE = "toggle_game_mode"

# Home row first, arrows as the alternate set. Index in each tuple is the lane.
_LANE_KEY_ROWS = (
    (Qt.Key.Key_A, Qt.Key.Key_S, Qt.Key.Key_D, Qt.Key.Key_F),
    (Qt.Key.Key_Left, Qt.Key.Key_Down, Qt.Key.Key_Up, Qt.Key.Key_Right),
)

_COMMAND_KEYS = {
    Qt.Key.Key_R: COMMAND_RESTART,
    Qt.Key.Key_G: COMMAND_TOGGLE_GAME_MODE,
}


@dataclass(frozen=True)
class _Binding:
    lane: Optional[int] = None
    command: Optional[str] = None


def default_lane_keys(lane_count: int = 4) -> Dict[int, int]:
    """Key code -> lane for A/S/D/F and the arrow keys, limited to lane_count lanes."""
    lanes: Dict[int, int] = {}
    for row in _LANE_KEY_ROWS:
        for lane_index, key in enumerate(row[: max(int(lane_count), 0)]):
            lanes[int(key)] = lane_index
    return lanes


class InputRouter(QObject):
    laneTapped = pyqtSignal(object)
    restartRequested = pyqtSignal()
    gameModeToggleRequested = pyqtSignal()

    def __init__(
        self,
        time_provider: Callable[[], float],
        parent: Optional[QObject] = None,
        key_to_lane_map: Optional[Dict[int, int]] = None,
        lane_count: int = 4,
    ) -> None:
        super().__init__(parent)
        self._time_provider = time_provider

        lane_keys = dict(key_to_lane_map) if key_to_lane_map is not None else default_lane_keys(lane_count)
        self._bindings: Dict[int, _Binding] = {key: _Binding(lane=lane) for key, lane in lane_keys.items()}
        for key, command in _COMMAND_KEYS.items():
            self._bindings.setdefault(int(key), _Binding(command=command))

        self._keys_down: Set[int] = set()
        self._total_presses = 0
        self._ignored_presses = 0

    @property
    def key_to_lane_map(self) -> Dict[int, int]:
        return {key: binding.lane for key, binding in self._bindings.items() if binding.lane is not None}

    @property
    def total_presses(self) -> int:
        return self._total_presses

    @property
    def ignored_presses(self) -> int:
        return self._ignored_presses

    def handle_key_press(self, event: QKeyEvent) -> bool:
        key_code = int(event.key())
        binding = self._bindings.get(key_code)
        if binding is None:
            return False

        if event.isAutoRepeat() or key_code in self._keys_down:
            self._ignored_presses += 1
            return True

        self._keys_down.add(key_code)
        self._total_presses += 1
        self._dispatch(binding)
        return True

    def handle_key_release(self, event: QKeyEvent) -> bool:
        key_code = int(event.key())
        if not event.isAutoRepeat():
            self._keys_down.discard(key_code)
        return key_code in self._bindings

    def clear_pressed_keys(self) -> None:
        """Forget held keys, e.g. after the window loses focus."""
        self._keys_down.clear()

    def reset_stats(self) -> None:
        self._total_presses = 0
        self._ignored_presses = 0

    def _dispatch(self, binding: _Binding) -> None:
        if binding.command == COMMAND_RESTART:
            self.restartRequested.emit()
        elif binding.command == COMMAND_TOGGLE_GAME_MODE:
            self.gameModeToggleRequested.emit()
        elif binding.lane is not None:
            self.laneTapped.emit(rhythm_models.LaneTap(time_seconds=self._tap_time(), lane=int(binding.lane)))

    def _tap_time(self) -> float:
        try:
            return float(self._time_provider())
        except (TypeError, ValueError):
            return 0.0


def _run_unit_tests() -> None:
    lanes = default_lane_keys()
    assert lanes[int(Qt.Key.Key_A)] == 0
    assert lanes[int(Qt.Key.Key_F)] == 3
    assert lanes[int(Qt.Key.Key_Up)] == 2

    narrow = default_lane_keys(2)
    assert int(Qt.Key.Key_D) not in narrow
    assert narrow[int(Qt.Key.Key_Down)] == 1

    router = InputRouter(lambda: 1.25)
    assert int(Qt.Key.Key_R) not in router.key_to_lane_map
    assert router.key_to_lane_map == lanes


if __name__ == "__main__":
    _run_unit_tests()
    print("input_router.py: ok")
