# -*- coding: utf-8 -*-
########################
# callouts.py
########################
# Purpose:
# - Narrative "party" callouts that escalate with the flood meter.
# - Rate limits callouts so a burst of misses produces a few lines, not one per miss.
#
# Design notes:
# - No Qt usage. Pure gameplay logic.
# - The policy state (last bucket and last callout time) lives in RoundState so a round reset clears it.
# - A callout fires only when the fill strictly increased, the new bucket is above 0, and either a
#   higher bucket was reached or the cooldown has elapsed.
#
########################
# Interfaces:
# Public constants:
# - CALLOUT_LINES: dict[int, tuple[str, ...]]
# - PARTY_ENDED_TEXT: str
#
# Public functions:
# - fill_bucket(fill_level: float) -> int
#
# Public classes:
# - class CalloutPolicy
#   - __init__(*, cooldown_seconds: float, rng: Optional[random.Random] = None)
#   - should_fire(state: RoundState, *, previous_fill: float, new_fill: float, now: float) -> bool
#   - evaluate(state: RoundState, *, previous_fill: float, new_fill: float, now: float) -> Optional[str]
#   - pick_line(bucket: int) -> str
#
# Inputs:
# - Fill levels before and after a miss from DangerEngine.
#
# Outputs:
# - Callout text to append to the EventBus, RoundState callout fields updated in place.
#
########################

from __future__ import annotations

import random
from typing import Dict, Optional, Tuple

import rhythm_models


PARTY_ENDED_TEXT = "Party got over. Speakers got drowned."
FALLBACK_TEXT = "Keep the party alive!"

CALLOUT_LINES: Dict[int, Tuple[str, ...]] = {
    1: (
        "Crowd's getting loud, keep the floor clear!",
        "Water creeping in, but the party's still on!",
        "Speakers are filling up! This party can't get over this soon.",
    ),
    2: (
        "The bass is wobbling, pop faster!",
        "DJ says move, the deck's getting wet!",
        "The vibe is slipping, save the speakers!",
    ),
    3: (
        "We're close to a shutdown, clear those bubbles!",
        "Party alert: speakers almost flooded!",
        "This dance floor is seconds from silence!",
    ),
    4: (
        "Final warning! Save the party now!",
        "Speakers are choking on water!",
        "One more miss and this party is over!",
    ),
}

# (threshold, bucket), highest first.
_BUCKET_THRESHOLDS = ((0.85, 4), (0.65, 3), (0.45, 2), (0.22, 1))


def fill_bucket(fill_level: float) -> int:
    fill = float(fill_level)
    for threshold, bucket in _BUCKET_THRESHOLDS:
        if fill >= threshold:
            return bucket
    return 0


class CalloutPolicy:
    def __init__(self, *, cooldown_seconds: float = 1.6, rng: Optional[random.Random] = None) -> None:
        self._cooldown_seconds = float(cooldown_seconds)
        self._rng = rng if rng is not None else random.Random()

    def should_fire(
        self,
        state: rhythm_models.RoundState,
        *,
        previous_fill: float,
        new_fill: float,
        now: float,
    ) -> bool:
        if not float(new_fill) > float(previous_fill):
            return False
        bucket = fill_bucket(new_fill)
        if bucket <= 0:
            return False
        crossed_into_new_bucket = bucket > int(state.last_callout_bucket)
        cooldown_passed = float(now) - float(state.last_callout_time) > self._cooldown_seconds
        return crossed_into_new_bucket or cooldown_passed

    def pick_line(self, bucket: int) -> str:
        lines = CALLOUT_LINES.get(min(int(bucket), 4))
        if not lines:
            return FALLBACK_TEXT
        return self._rng.choice(lines)

    def evaluate(
        self,
        state: rhythm_models.RoundState,
        *,
        previous_fill: float,
        new_fill: float,
        now: float,
    ) -> Optional[str]:
        if not self.should_fire(state, previous_fill=previous_fill, new_fill=new_fill, now=now):
            return None
        bucket = fill_bucket(new_fill)
        text = self.pick_line(bucket)
        state.last_callout_bucket = max(int(state.last_callout_bucket), bucket)
        state.last_callout_time = float(now)
        return text


def _run_unit_tests() -> None:
    assert [fill_bucket(value) for value in (0.0, 0.22, 0.45, 0.65, 0.85, 1.0)] == [0, 1, 2, 3, 4, 4]

    policy = CalloutPolicy(cooldown_seconds=1.6, rng=random.Random(1))
    state = rhythm_models.RoundState()
    first = policy.evaluate(state, previous_fill=0.20, new_fill=0.30, now=5.0)
    assert first in CALLOUT_LINES[1]
    assert state.last_callout_bucket == 1
    assert policy.evaluate(state, previous_fill=0.30, new_fill=0.32, now=6.0) is None
    assert policy.evaluate(state, previous_fill=0.32, new_fill=0.34, now=6.7) is not None
    assert policy.evaluate(state, previous_fill=0.34, new_fill=0.34, now=20.0) is None


if __name__ == "__main__":
    _run_unit_tests()
    print("callouts.py: ok")
