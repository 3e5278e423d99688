# -*- coding: utf-8 -*-
########################
# logging_utils.py
########################
# Purpose:
# - Tagged console logging shared by the rhythm game components.
# - Every line reads "[LEVEL][Tag] message | key=value ...".
#
# Design notes:
# - One stdlib logger named "papaplayer" with a single stream handler, installed once on import.
# - The tag travels in the record's extra dict through a LoggerAdapter.
# - Floats in the key=value tail are rounded to three decimals so tick logs stay readable.
# - "WARN" and "FATAL" are accepted as level aliases; unknown names fall back to INFO.
#
########################
# Interfaces:
# Public functions:
# - log_event(level: str, tag: str, message: str, **fields) -> None
# - set_log_level(level: str) -> None
# - get_log_level() -> str
#
# Inputs:
# - Level names, tags and key/value fields from RoundController and the harness.
#
# Outputs:
# - Lines on stderr through the "papaplayer" logger.
#
########################

from __future__ import annotations

import logging
from typing import Any

LOGGER_NAME = "papaplayer"
DEFAULT_TAG = "Game"

_logger = logging.getLogger(LOGGER_NAME)
if not _logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[%(levelname)s][%(tag)s] %(message)s"))
    _logger.addHandler(handler)
    _logger.setLevel(logging.INFO)

_LEVEL_ALIASES = {"WARN": "WARNING", "FATAL": "CRITICAL"}


class _TagAdapter(logging.LoggerAdapter):
    def process(self, msg: Any, kwargs: dict[str, Any]):
        kwargs.setdefault("extra", {})["tag"] = kwargs.pop("tag", DEFAULT_TAG)
        return msg, kwargs


_tagged = _TagAdapter(_logger, {})


def _level_value(level: str) -> int:
    name = (level or "INFO").upper()
    name = _LEVEL_ALIASES.get(name, name)
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else logging.INFO


def _format_field(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:.3f}"
    return str(value)


def log_event(level: str, tag: str, message: str, **fields: Any) -> None:
    """Log message under tag, appending key=value fields when provided."""
    if fields:
        tail = " ".join(f"{key}={_format_field(value)}" for key, value in fields.items())
        message = f"{message} | {tail}"
    _tagged.log(_level_value(level), message, tag=tag)


def set_log_level(level: str) -> None:
    """Set the game log level (DEBUG/INFO/WARNING/ERROR)."""
    _logger.setLevel(_level_value(level))


def get_log_level() -> str:
    return logging.getLevelName(_logger.level)
