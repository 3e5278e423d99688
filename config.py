"""
config.py

Typed configuration loading and validation for the papaplayer rhythm game.

Design goals
- Load at most one UTF-8 JSON config file
- Validate with pydantic (defaults included)
- Support environment variable overrides
- No other I/O beyond reading the config file (no directory creation)

Config file location
- If PAPAPLAYER_CONFIG_PATH is set, that file is used and must exist.
- Otherwise these paths are searched in order and the first one that exists is used:
  1) ./papaplayer_config.json (current working directory)
  2) <user config dir>/papaplayer/papaplayer_config.json
- If none exists, the built-in defaults are used.

Example config file (papaplayer_config.json)
{
  "rhythm": {
    "lane_count": 4,
    "min_bubble_size": 24,
    "max_bubble_size": 64,
    "target_zone_ratio": 0.82
  },
  "events": {
    "splash_lifetime_seconds": 0.55
  },
  "danger": {
    "callout_cooldown_seconds": 1.6,
    "loss_fade_out_seconds": 3.6
  }
}
"""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from platformdirs import user_config_dir
from pydantic import BaseModel, Field, ValidationError, model_validator


class RhythmConfig(BaseModel):
    lane_count: int = Field(default=4, ge=1, le=12, description="Number of bubble lanes.")
    min_bubble_size: float = Field(default=24.0, gt=0.0, description="Smallest bubble diameter.")
    max_bubble_size: float = Field(default=64.0, gt=0.0, description="Largest bubble diameter.")
    min_travel_seconds: float = Field(default=2.2, gt=0.0, description="Travel time of the largest bubble.")
    max_travel_seconds: float = Field(default=4.2, gt=0.0, description="Travel time of the smallest bubble.")
    target_zone_ratio: float = Field(default=0.82, ge=0.0, le=1.0, description="Hit line position as arena height ratio.")
    energy_floor: float = Field(default=0.1, ge=0.0, le=1.0)
    energy_threshold: float = Field(default=0.15, ge=0.0, le=1.0, description="Spawning stops at or below this.")
    min_spawn_interval_seconds: float = Field(default=0.45, gt=0.0)
    base_spawn_interval_seconds: float = Field(default=1.0, gt=0.0)
    spawn_interval_energy_scale: float = Field(default=0.4, ge=0.0)

    @model_validator(mode="after")
    def validate_ranges(self) -> "RhythmConfig":
        if self.max_bubble_size <= self.min_bubble_size:
            raise ValueError("max_bubble_size must be greater than min_bubble_size")
        if self.max_travel_seconds < self.min_travel_seconds:
            raise ValueError("max_travel_seconds must not be less than min_travel_seconds")
        return self


class EventConfig(BaseModel):
    splash_lifetime_seconds: float = Field(default=0.55, gt=0.0)
    ripple_lifetime_seconds: float = Field(default=1.35, gt=0.0)
    callout_lifetime_seconds: float = Field(default=2.8, gt=0.0)


class DangerConfig(BaseModel):
    max_fill: float = Field(default=1.0, gt=0.0, le=1.0)
    base_fill_impact: float = Field(default=0.02, ge=0.0, description="Flood added by the smallest missed bubble.")
    size_fill_impact: float = Field(default=0.055, ge=0.0, description="Extra flood for a max size bubble.")
    callout_cooldown_seconds: float = Field(default=1.6, ge=0.0)
    loss_fade_out_seconds: float = Field(default=3.6, ge=0.0)


class SurfaceConfig(BaseModel):
    primary_amplitude: float = Field(default=7.0, ge=0.0)
    secondary_amplitude: float = Field(default=4.0, ge=0.0)
    sample_step: float = Field(default=5.0, gt=0.0, description="Pixel step for sampled surface profiles.")


class AppConfig(BaseModel):
    rhythm: RhythmConfig = Field(default_factory=RhythmConfig)
    events: EventConfig = Field(default_factory=EventConfig)
    danger: DangerConfig = Field(default_factory=DangerConfig)
    surface: SurfaceConfig = Field(default_factory=SurfaceConfig)


def _default_config_candidates() -> List[Path]:
    config_directory = Path(user_config_dir("papaplayer", "papaplayer"))
    return [
        Path.cwd() / "papaplayer_config.json",
        config_directory / "papaplayer_config.json",
    ]


def _resolve_config_path() -> Optional[Path]:
    explicit_path_text = os.environ.get("PAPAPLAYER_CONFIG_PATH", "").strip()
    if explicit_path_text:
        explicit_path = Path(explicit_path_text)
        if not explicit_path.exists():
            raise FileNotFoundError(f"PAPAPLAYER_CONFIG_PATH points to a missing file: {explicit_path}")
        return explicit_path

    for candidate_path in _default_config_candidates():
        if candidate_path.exists():
            return candidate_path

    return None


def _read_json_file_utf8(config_path: Path) -> Dict[str, Any]:
    try:
        raw_text = config_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise
    except OSError as exception:
        raise OSError(f"Failed to read config file: {config_path}. Error: {exception}") from exception

    try:
        parsed = json.loads(raw_text)
    except json.JSONDecodeError as exception:
        raise ValueError(f"Config file is not valid JSON: {config_path}. Error: {exception}") from exception

    if not isinstance(parsed, dict):
        raise ValueError(f"Config file root must be a JSON object: {config_path}")

    return parsed


# (environment variable, config section, field, parser)
_ENVIRONMENT_OVERRIDES: Tuple[Tuple[str, str, str, Callable[[str], Any]], ...] = (
    ("PAPAPLAYER_LANE_COUNT", "rhythm", "lane_count", int),
    ("PAPAPLAYER_TARGET_ZONE_RATIO", "rhythm", "target_zone_ratio", float),
    ("PAPAPLAYER_LOSS_FADE_OUT_SECONDS", "danger", "loss_fade_out_seconds", float),
    ("PAPAPLAYER_CALLOUT_COOLDOWN_SECONDS", "danger", "callout_cooldown_seconds", float),
)


def _apply_environment_overrides(config_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    Layer PAPAPLAYER_* variables over the file values.

    Unparseable values are skipped. Range checks happen in pydantic validation afterwards.
    """
    merged: Dict[str, Any] = dict(config_dict)
    for env_name, section_name, field_name, parse in _ENVIRONMENT_OVERRIDES:
        value_text = os.environ.get(env_name, "").strip()
        if not value_text:
            continue
        try:
            value = parse(value_text)
        except ValueError:
            continue
        section = merged.get(section_name)
        section = dict(section) if isinstance(section, dict) else {}
        section[field_name] = value
        merged[section_name] = section
    return merged


def load_config(config_path: Optional[Path] = None) -> Tuple[AppConfig, Optional[Path]]:
    """Resolve, read, override and validate. Returns the config and the file it came from (or None)."""
    resolved_path = config_path if config_path is not None else _resolve_config_path()
    file_values = _read_json_file_utf8(resolved_path) if resolved_path is not None else {}

    try:
        app_config = AppConfig.model_validate(_apply_environment_overrides(file_values))
    except ValidationError as exception:
        source_text = str(resolved_path) if resolved_path is not None else "(defaults)"
        raise ValueError(f"Config validation failed for {source_text}:\n{exception}") from exception

    return app_config, resolved_path


@lru_cache(maxsize=1)
def get_config() -> Tuple[AppConfig, Optional[Path]]:
    return load_config()


def to_json(app_config: AppConfig) -> str:
    return json.dumps(app_config.model_dump(), ensure_ascii=False, indent=2)


def main() -> int:
    try:
        app_config, resolved_path = load_config()
        payload: Dict[str, Any] = {
            "ok": True,
            "config_path": None if resolved_path is None else str(resolved_path),
            "config": app_config.model_dump(),
        }
        exit_code = 0
    except (OSError, ValueError) as exception:
        payload = {"ok": False, "error": str(exception)}
        exit_code = 2

    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
