# -*- coding: utf-8 -*-
########################
# event_bus.py
########################
# Purpose:
# - Short lived cosmetic events created by hits and misses: splashes, ripples and callouts.
# - Each kind expires purely by age against its fixed lifetime.
#
# Design notes:
# - No Qt usage. Pure gameplay logic.
# - Events are frozen and never mutated after creation.
# - An event is removed when now - created_time > lifetime (strictly greater).
#
########################
# Interfaces:
# Public classes:
# - class EventBus
#   - __init__(event_config: config.EventConfig, id_source: rhythm_models.IdSource)
#   - add_splash(*, lane: int, progress: float, size: float, now: float) -> SplashEvent
#   - add_ripple(*, lane: int, strength: float, now: float) -> RippleEvent
#   - add_callout(*, text: str, now: float) -> CalloutEvent
#   - prune(now: float) -> None
#   - splashes() -> list[SplashEvent]
#   - ripples() -> list[RippleEvent]
#   - callouts() -> list[CalloutEvent]
#   - live_splashes(now) / live_ripples(now) / live_callouts(now) -> list
#   - clear() -> None
#
# Inputs:
# - Event requests from HitResolver and DangerEngine; tick time from RoundController.
#
# Outputs:
# - Event lists for rendering and for the liquid surface model.
#
########################

from __future__ import annotations

from typing import List, Sequence, TypeVar

import config
import rhythm_models

_EventT = TypeVar("_EventT", rhythm_models.SplashEvent, rhythm_models.RippleEvent, rhythm_models.CalloutEvent)


def _is_alive(created_time: float, now: float, lifetime_seconds: float) -> bool:
    return not (float(now) - float(created_time) > float(lifetime_seconds))


def _filter_alive(events: Sequence[_EventT], now: float, lifetime_seconds: float) -> List[_EventT]:
    return [event for event in events if _is_alive(event.created_time, now, lifetime_seconds)]


class EventBus:
    def __init__(self, event_config: config.EventConfig, id_source: rhythm_models.IdSource) -> None:
        self._config = event_config
        self._id_source = id_source
        self._splashes: List[rhythm_models.SplashEvent] = []
        self._ripples: List[rhythm_models.RippleEvent] = []
        self._callouts: List[rhythm_models.CalloutEvent] = []

    def add_splash(self, *, lane: int, progress: float, size: float, now: float) -> rhythm_models.SplashEvent:
        splash = rhythm_models.SplashEvent(
            event_id=self._id_source.next_id(),
            lane=int(lane),
            progress=rhythm_models.clamp01(progress),
            size=float(size),
            created_time=float(now),
        )
        self._splashes.append(splash)
        return splash

    def add_ripple(self, *, lane: int, strength: float, now: float) -> rhythm_models.RippleEvent:
        ripple = rhythm_models.RippleEvent(
            event_id=self._id_source.next_id(),
            lane=int(lane),
            strength=float(strength),
            created_time=float(now),
        )
        self._ripples.append(ripple)
        return ripple

    def add_callout(self, *, text: str, now: float) -> rhythm_models.CalloutEvent:
        callout = rhythm_models.CalloutEvent(
            event_id=self._id_source.next_id(),
            text=str(text),
            created_time=float(now),
        )
        self._callouts.append(callout)
        return callout

    def prune(self, now: float) -> None:
        self._splashes = _filter_alive(self._splashes, now, self._config.splash_lifetime_seconds)
        self._ripples = _filter_alive(self._ripples, now, self._config.ripple_lifetime_seconds)
        self._callouts = _filter_alive(self._callouts, now, self._config.callout_lifetime_seconds)

    def splashes(self) -> List[rhythm_models.SplashEvent]:
        return list(self._splashes)

    def ripples(self) -> List[rhythm_models.RippleEvent]:
        return list(self._ripples)

    def callouts(self) -> List[rhythm_models.CalloutEvent]:
        return list(self._callouts)

    # Age filtered queries for render frames between ticks.

    def live_splashes(self, now: float) -> List[rhythm_models.SplashEvent]:
        return _filter_alive(self._splashes, now, self._config.splash_lifetime_seconds)

    def live_ripples(self, now: float) -> List[rhythm_models.RippleEvent]:
        return _filter_alive(self._ripples, now, self._config.ripple_lifetime_seconds)

    def live_callouts(self, now: float) -> List[rhythm_models.CalloutEvent]:
        return _filter_alive(self._callouts, now, self._config.callout_lifetime_seconds)

    def clear(self) -> None:
        self._splashes = []
        self._ripples = []
        self._callouts = []


def _run_unit_tests() -> None:
    bus = EventBus(config.EventConfig(), rhythm_models.IdSource())
    bus.add_splash(lane=1, progress=0.4, size=30.0, now=10.0)
    bus.prune(10.5)
    assert len(bus.splashes()) == 1
    bus.prune(10.56)
    assert bus.splashes() == []

    bus.add_ripple(lane=0, strength=1.0, now=0.0)
    bus.add_callout(text="hey", now=0.0)
    bus.prune(1.35)
    assert len(bus.ripples()) == 1
    bus.prune(1.4)
    assert bus.ripples() == [] and len(bus.callouts()) == 1


if __name__ == "__main__":
    _run_unit_tests()
    print("event_bus.py: ok")
