# -*- coding: utf-8 -*-
########################
# playback_port.py
########################
# Purpose:
# - Port interface for the audio playback collaborator.
# - RoundController issues commands through this protocol; the collaborator reports back by calling
#   RoundController.on_tick / on_energy / on_track_finished (directly or via GameClock).
#
# Design notes:
# - Attribute and method based, so hosts can pass any object with these methods.
# - No Qt usage.
#
########################
# Interfaces:
# Public protocols:
# - PlaybackPort
#   - load(track: str, *, autoplay: bool, volume: float) -> float   (returns duration seconds)
#   - play_pause() -> bool   (returns True when now playing)
#   - seek(time_seconds: float) -> None
#   - set_volume(volume: float) -> None
#   - stop() -> None
#   - fade_out_and_stop(duration_seconds: float) -> None
#   - resume() -> None
#   - current_playback_time() -> float
#
########################

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class PlaybackPort(Protocol):
    def load(self, track: str, *, autoplay: bool, volume: float) -> float:
        ...

    def play_pause(self) -> bool:
        ...

    def seek(self, time_seconds: float) -> None:
        ...

    def set_volume(self, volume: float) -> None:
        ...

    def stop(self) -> None:
        ...

    def fade_out_and_stop(self, duration_seconds: float) -> None:
        ...

    def resume(self) -> None:
        ...

    def current_playback_time(self) -> float:
        ...
