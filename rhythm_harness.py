# -*- coding: utf-8 -*-
########################
# rhythm_harness.py
########################
# Purpose:
# - Headless gameplay harness for local testing and balancing.
# - Integrates SimulatedPlayer + GameClock + RoundController with an autoplay "bot" that taps lanes,
#   and prints a JSON summary of the round.
#
# Design notes:
# - Uses the same wiring a desktop host uses: player callbacks -> GameClock slots -> RoundController.
# - Deterministic for a given --seed (spawns, callout lines and bot misses share seeded sources).
# - --run-tests runs the pure logic self checks of every gameplay module.
#
########################
# Interfaces:
# Public dataclasses:
# - HarnessOptions(seconds: float, seed: int, accuracy: float, frame_seconds: float, track: str, ...)
# - HarnessSummary(score, high_combo, misses, hits, fill_level, lost, lost_at_seconds, callouts, ...)
#
# Public functions:
# - run_simulation(options: HarnessOptions, app_config: Optional[AppConfig] = None) -> HarnessSummary
# - build_argument_parser() -> argparse.ArgumentParser
# - main() -> int
#
# Inputs:
# - Command line options and the resolved AppConfig.
#
# Outputs:
# - JSON summary on stdout.
#
########################

from __future__ import annotations

from dataclasses import asdict, dataclass, field
import argparse
import json
import random
import sys
from typing import List, Optional

from PyQt6.QtCore import QCoreApplication

import config
import game_clock
import rhythm_models
import round_controller
import simulated_player
from logging_utils import log_event, set_log_level


@dataclass
class HarnessOptions:
    seconds: float = 60.0
    seed: int = 7
    accuracy: float = 0.85
    frame_seconds: float = 1.0 / 60.0
    track: str = "simulated"
    bpm: float = 120.0
    tap_progress: float = 0.85


@dataclass
class HarnessSummary:
    score: int = 0
    high_combo: int = 0
    misses: int = 0
    hits: int = 0
    fill_level: float = 0.0
    lost: bool = False
    lost_at_seconds: Optional[float] = None
    spawned: int = 0
    callouts: List[str] = field(default_factory=list)


class _AutoplayBot:
    """Taps the lane of every bubble that has risen past tap_progress, missing some on purpose."""

    def __init__(self, *, accuracy: float, tap_progress: float, rng: random.Random) -> None:
        self._accuracy = float(accuracy)
        self._tap_progress = float(tap_progress)
        self._rng = rng
        self._decided: set = set()

    def taps_for(self, snapshot: rhythm_models.RoundSnapshot) -> List[int]:
        lanes: List[int] = []
        for view in snapshot.notes:
            note_id = view.note.note_id
            if note_id in self._decided or view.progress < self._tap_progress:
                continue
            self._decided.add(note_id)
            if self._rng.random() <= self._accuracy:
                lanes.append(int(view.note.lane))
        return lanes


def run_simulation(options: HarnessOptions, app_config: Optional[config.AppConfig] = None) -> HarnessSummary:
    resolved_config = app_config or config.AppConfig()
    summary = HarnessSummary()

    player = simulated_player.SimulatedPlayer(
        default_duration_seconds=max(float(options.seconds), 1.0) + 1.0,
        energy_script=simulated_player.EnergyScript(bpm=float(options.bpm)),
    )
    controller = round_controller.RoundController(
        player,
        app_config=resolved_config,
        rng=random.Random(int(options.seed)),
    )
    clock = game_clock.GameClock(controller)

    player.on_time_update = clock.on_time_updated
    player.on_audio_energy = clock.on_energy_updated
    player.on_track_finished = clock.on_track_finished

    def on_callout(callout: rhythm_models.CalloutEvent) -> None:
        summary.callouts.append(callout.text)

    def on_lost() -> None:
        summary.lost_at_seconds = round(controller.current_time, 3)

    clock.calloutAdded.connect(on_callout)
    clock.roundLost.connect(on_lost)

    bot = _AutoplayBot(
        accuracy=options.accuracy,
        tap_progress=options.tap_progress,
        rng=random.Random(int(options.seed) + 1),
    )

    controller.toggle_game_mode()
    if not controller.load_track(options.track, autoplay=True):
        return summary

    seen_notes: set = set()
    elapsed = 0.0
    while elapsed < float(options.seconds) and player.is_playing:
        player.step(float(options.frame_seconds))
        elapsed += float(options.frame_seconds)

        snapshot = controller.snapshot()
        for view in snapshot.notes:
            seen_notes.add(view.note.note_id)
        for lane in bot.taps_for(snapshot):
            if controller.hit_lane(lane) is not None:
                summary.hits += 1

    final = controller.snapshot()
    summary.score = final.score
    summary.high_combo = final.high_combo
    summary.misses = final.misses
    summary.fill_level = round(final.fill_level, 4)
    summary.lost = final.lost
    summary.spawned = len(seen_notes)

    log_event(
        "INFO",
        "Harness",
        "Simulation finished",
        seconds=options.seconds,
        score=summary.score,
        misses=summary.misses,
        lost=summary.lost,
    )
    return summary


def _run_chunk_tests() -> None:
    import callouts
    import danger_engine
    import event_bus
    import hit_resolver
    import input_router
    import liquid_surface
    import note_field
    import note_motion
    import spawner
    import timing_model

    for module in (
        rhythm_models,
        timing_model,
        spawner,
        note_field,
        event_bus,
        callouts,
        hit_resolver,
        danger_engine,
        liquid_surface,
        note_motion,
        input_router,
        simulated_player,
    ):
        module._run_unit_tests()

    first = run_simulation(HarnessOptions(seconds=20.0, seed=3))
    second = run_simulation(HarnessOptions(seconds=20.0, seed=3))
    assert asdict(first) == asdict(second)

    doomed = run_simulation(HarnessOptions(seconds=120.0, seed=5, accuracy=0.0))
    assert doomed.lost
    assert doomed.hits == 0
    assert doomed.callouts[-1] == "Party got over. Speakers got drowned."


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Headless bubble rhythm harness")
    parser.add_argument("--run-tests", action="store_true", help="Run pure logic tests.")
    parser.add_argument("--seconds", type=float, default=60.0, help="Simulated playback length.")
    parser.add_argument("--seed", type=int, default=7, help="Seed for spawns, callouts and the autoplay bot.")
    parser.add_argument("--accuracy", type=float, default=0.85, help="Chance the bot taps a bubble (0..1).")
    parser.add_argument("--bpm", type=float, default=120.0, help="Tempo of the scripted loudness envelope.")
    parser.add_argument("--log-level", default="INFO", help="DEBUG, INFO, WARNING or ERROR.")
    return parser


def main() -> int:
    args = build_argument_parser().parse_args()
    set_log_level(args.log_level)

    _qt_app = QCoreApplication.instance() or QCoreApplication(sys.argv)

    if args.run_tests:
        _run_chunk_tests()
        print("Chunk tests passed.")
        return 0

    try:
        app_config, _config_path = config.get_config()
    except (OSError, ValueError) as exc:
        print(json.dumps({"ok": False, "error": str(exc)}, ensure_ascii=False, indent=2))
        return 2

    options = HarnessOptions(
        seconds=float(args.seconds),
        seed=int(args.seed),
        accuracy=min(max(float(args.accuracy), 0.0), 1.0),
        bpm=float(args.bpm),
    )
    summary = run_simulation(options, app_config)
    print(json.dumps({"ok": True, "summary": asdict(summary)}, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
