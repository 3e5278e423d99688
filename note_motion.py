# -*- coding: utf-8 -*-
########################
# note_motion.py
########################
# Purpose:
# - Display helpers for bubble motion: per note seed, eased "sticky" rise with wobble, and
#   horizontal jitter/drift inside the lane.
#
# Design notes:
# - No Qt usage. Presentation math only; hit timing is untouched (a note still reaches the
#   hit line at spawn_time + travel_duration).
# - Seeds are a stable hash of the note id, never wall clock or Python's salted hash().
#
########################
# Interfaces:
# Public functions:
# - note_seed(note_id: int) -> float  (in [0, 1))
# - sticky_progress(progress: float, *, size: float, seed: float, now: float,
#                   min_size: float = 24.0, max_size: float = 64.0) -> float
# - lane_offset_x(*, lane: int, lane_width: float, size: float, progress: float, seed: float,
#                 now: float, submerge_ratio: float = 0.0) -> float
#
# Inputs:
# - NoteView values and render time.
#
# Outputs:
# - Display positions for renderers.
#
########################

from __future__ import annotations

import hashlib
import math

_SEED_BUCKETS = 997


def note_seed(note_id: int) -> float:
    digest = hashlib.sha1(str(int(note_id)).encode("utf-8")).digest()
    scalar = int.from_bytes(digest[:8], "big") % _SEED_BUCKETS
    return scalar / float(_SEED_BUCKETS)


def sticky_progress(
    progress: float,
    *,
    size: float,
    seed: float,
    now: float,
    min_size: float = 24.0,
    max_size: float = 64.0,
) -> float:
    clamped = min(max(float(progress), 0.0), 1.0)
    heavy_factor = min(max((float(size) - min_size) / (max_size - min_size), 0.0), 1.0)
    eased = clamped ** (1.22 + heavy_factor * 0.22)
    wobble = math.sin(clamped * 9.0 + float(now) * 3.2 + float(seed) * 6.0) * 0.012 * (1.0 - clamped)
    return min(max(eased + wobble, 0.0), 1.05)


def lane_offset_x(
    *,
    lane: int,
    lane_width: float,
    size: float,
    progress: float,
    seed: float,
    now: float,
    submerge_ratio: float = 0.0,
) -> float:
    """Horizontal position of a bubble center, kept inside its lane padding."""
    clamped = min(max(float(progress), 0.0), 1.0)
    lane_x = float(lane_width) * (float(lane) + 0.5)
    jitter = math.sin(float(now) * 2.6 + float(seed) * 10.0) * (1.0 - clamped) * 2.2

    drift_amplitude = float(lane_width) * 0.26 * min(max(float(submerge_ratio), 0.0), 1.0)
    drift_speed = 1.3 + float(seed) * 1.1
    drift_phase = float(seed) * math.pi * 2.0 + float(lane) * 0.6
    drift = math.sin(float(now) * drift_speed + drift_phase) * drift_amplitude

    edge_padding = max(18.0, float(size) * 0.62)
    lane_min_x = float(lane) * float(lane_width) + edge_padding
    lane_max_x = float(lane + 1) * float(lane_width) - edge_padding
    if lane_min_x > lane_max_x:
        return lane_x
    return min(max(lane_x + jitter + drift, lane_min_x), lane_max_x)


def _run_unit_tests() -> None:
    assert note_seed(42) == note_seed(42)
    assert 0.0 <= note_seed(7) < 1.0
    assert 0.0 <= sticky_progress(0.0, size=40.0, seed=0.5, now=3.0) <= 0.012
    assert sticky_progress(1.0, size=40.0, seed=0.5, now=3.0) == 1.0
    x = lane_offset_x(lane=1, lane_width=100.0, size=40.0, progress=0.3, seed=0.2, now=1.0, submerge_ratio=1.0)
    assert 100.0 + 24.8 - 1e-9 <= x <= 200.0 - 24.8 + 1e-9


if __name__ == "__main__":
    _run_unit_tests()
    print("note_motion.py: ok")
