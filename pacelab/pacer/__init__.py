"""Breathing pacer package."""

from .config import (
    PacerConfig,
    SessionConfig,
    parse_seconds,
    MIN_BREATH_MS,
    MAX_BREATH_MS,
    MIN_CYCLE_LIMIT,
    MAX_CYCLE_LIMIT,
    DEFAULT_CYCLE_LIMIT,
)
from .engine import (
    PacerEngine,
    PacerMode,
    Phase,
    EngineSnapshot,
    COUNTDOWN_START,
    DISPLAY_TICK_MS,
    RESTART_DELAY_MS,
)

__all__ = [
    "PacerConfig",
    "SessionConfig",
    "parse_seconds",
    "MIN_BREATH_MS",
    "MAX_BREATH_MS",
    "MIN_CYCLE_LIMIT",
    "MAX_CYCLE_LIMIT",
    "DEFAULT_CYCLE_LIMIT",
    "PacerEngine",
    "PacerMode",
    "Phase",
    "EngineSnapshot",
    "COUNTDOWN_START",
    "DISPLAY_TICK_MS",
    "RESTART_DELAY_MS",
]
