# -*- coding: utf-8 -*-
########################
# liquid_surface.py
########################
# Purpose:
# - Procedural height function for the flood liquid surface drawn behind the bubbles.
# - Base level follows the flood meter, two ambient traveling sine waves add motion, and every live
#   ripple adds a damped wavelet centered on its lane.
#
# Design notes:
# - No Qt usage. Pure math, safe to evaluate from a render cadence on an immutable snapshot.
# - Superposition model: linear sum of the ambient waves and one wavelet per ripple.
#   This is not a fluid solver; it can be sampled at any resolution along x.
# - y grows downward (screen coordinates): y = 0 is the top of the arena.
# - Ripples with negative age or older than the ripple lifetime contribute nothing.
#
########################
# Interfaces:
# Public functions:
# - base_level(area_height: float, fill_level: float) -> float
# - ambient_offset(x: float, now: float, *, primary_amplitude: float = 7.0, secondary_amplitude: float = 4.0) -> float
# - ripple_offset(x: float, now: float, *, ripples, width: float, lane_count: int, ripple_lifetime: float) -> float
#
# Public classes:
# - class LiquidSurface
#   - __init__(*, width: float, area_height: float, lane_count: int, surface_config, event_config)
#     (ripple lifetime comes from EventConfig so it matches EventBus pruning)
#   - height(x: float, now: float, *, fill_level: float, ripples) -> float
#   - sample_profile(now: float, *, fill_level: float, ripples, step: Optional[float] = None) -> list[tuple[float, float]]
#   - from_snapshot(snapshot: RoundSnapshot, *, width: float, area_height: float, app_config) -> LiquidSurface
#
# Inputs:
# - Fill level and live RippleEvents from a RoundSnapshot, render time, arena geometry.
#
# Outputs:
# - Surface heights for a renderer.
#
########################

from __future__ import annotations

import math
from typing import Iterable, List, Optional, Tuple

import config
import rhythm_models


RIPPLE_GAIN = 14.0
RIPPLE_DECAY_RATE = 2.1
RIPPLE_ANGULAR_SPEED = 18.0
RIPPLE_WAVE_NUMBER = 0.055
MIN_RIPPLE_SPREAD = 30.0
RIPPLE_SPREAD_RATIO = 0.18


def base_level(area_height: float, fill_level: float) -> float:
    return float(area_height) * (1.0 - rhythm_models.clamp01(fill_level))


def ambient_offset(
    x: float,
    now: float,
    *,
    primary_amplitude: float = 7.0,
    secondary_amplitude: float = 4.0,
) -> float:
    primary = math.sin(float(x) * 0.018 + float(now) * 2.0)
    secondary = math.sin(float(x) * 0.042 + float(now) * 1.24)
    return primary * float(primary_amplitude) + secondary * float(secondary_amplitude)


def lane_center_x(lane: int, *, width: float, lane_count: int) -> float:
    return float(width) * (float(lane) + 0.5) / float(max(int(lane_count), 1))


def ripple_offset(
    x: float,
    now: float,
    *,
    ripples: Iterable[rhythm_models.RippleEvent],
    width: float,
    lane_count: int,
    ripple_lifetime: float = 1.35,
) -> float:
    spread = max(MIN_RIPPLE_SPREAD, float(width) * RIPPLE_SPREAD_RATIO)
    total = 0.0
    for ripple in ripples:
        age = float(now) - float(ripple.created_time)
        if age < 0.0 or age > float(ripple_lifetime):
            continue
        distance = abs(float(x) - lane_center_x(ripple.lane, width=width, lane_count=lane_count))
        influence = math.exp(-distance / spread)
        decay = math.exp(-age * RIPPLE_DECAY_RATE)
        wave = math.sin(age * RIPPLE_ANGULAR_SPEED - distance * RIPPLE_WAVE_NUMBER)
        total += wave * influence * decay * float(ripple.strength) * RIPPLE_GAIN
    return total


class LiquidSurface:
    def __init__(
        self,
        *,
        width: float,
        area_height: float,
        lane_count: int = 4,
        surface_config: Optional[config.SurfaceConfig] = None,
        event_config: Optional[config.EventConfig] = None,
    ) -> None:
        self._width = float(width)
        self._area_height = float(area_height)
        self._lane_count = int(lane_count)
        self._surface_config = surface_config or config.SurfaceConfig()
        # Same lifetime the event bus prunes with.
        self._ripple_lifetime = float((event_config or config.EventConfig()).ripple_lifetime_seconds)

    @classmethod
    def from_snapshot(
        cls,
        snapshot: rhythm_models.RoundSnapshot,
        *,
        width: float,
        area_height: float,
        app_config: Optional[config.AppConfig] = None,
    ) -> "LiquidSurface":
        resolved_config = app_config or config.AppConfig()
        return cls(
            width=width,
            area_height=area_height,
            lane_count=snapshot.lane_count,
            surface_config=resolved_config.surface,
            event_config=resolved_config.events,
        )

    @property
    def width(self) -> float:
        return self._width

    @property
    def area_height(self) -> float:
        return self._area_height

    @property
    def ripple_lifetime(self) -> float:
        return self._ripple_lifetime

    def height(
        self,
        x: float,
        now: float,
        *,
        fill_level: float,
        ripples: Iterable[rhythm_models.RippleEvent] = (),
    ) -> float:
        y = base_level(self._area_height, fill_level)
        y += ambient_offset(
            x,
            now,
            primary_amplitude=self._surface_config.primary_amplitude,
            secondary_amplitude=self._surface_config.secondary_amplitude,
        )
        y += ripple_offset(
            x,
            now,
            ripples=ripples,
            width=self._width,
            lane_count=self._lane_count,
            ripple_lifetime=self._ripple_lifetime,
        )
        return y

    def sample_profile(
        self,
        now: float,
        *,
        fill_level: float,
        ripples: Iterable[rhythm_models.RippleEvent] = (),
        step: Optional[float] = None,
    ) -> List[Tuple[float, float]]:
        step_value = float(step) if step is not None else float(self._surface_config.sample_step)
        if step_value <= 0.0:
            raise ValueError("step must be positive")

        ripple_list = list(ripples)
        samples: List[Tuple[float, float]] = []
        x = 0.0
        while x < self._width:
            samples.append((x, self.height(x, now, fill_level=fill_level, ripples=ripple_list)))
            x += step_value
        samples.append((self._width, self.height(self._width, now, fill_level=fill_level, ripples=ripple_list)))
        return samples


def _run_unit_tests() -> None:
    surface = LiquidSurface(width=400.0, area_height=300.0)
    assert base_level(300.0, 0.25) == 225.0
    assert abs(surface.height(0.0, 0.0, fill_level=0.0) - 300.0) < 1e-9

    ripple = rhythm_models.RippleEvent(event_id=1, lane=1, strength=1.0, created_time=10.0)
    assert ripple_offset(150.0, 9.0, ripples=[ripple], width=400.0, lane_count=4) == 0.0
    assert ripple_offset(150.0, 11.4, ripples=[ripple], width=400.0, lane_count=4) == 0.0
    assert ripple_offset(150.0, 10.05, ripples=[ripple], width=400.0, lane_count=4) != 0.0

    profile = surface.sample_profile(1.0, fill_level=0.5, ripples=[ripple], step=5.0)
    assert profile[0][0] == 0.0 and profile[-1][0] == 400.0
    assert len(profile) == 81


if __name__ == "__main__":
    _run_unit_tests()
    print("liquid_surface.py: ok")
