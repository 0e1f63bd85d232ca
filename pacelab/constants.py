"""Process-wide paths and environment-driven settings for PaceLab."""

from __future__ import annotations

import os
from pathlib import Path


APP_NAME = "PaceLab"

# ── paths ────────────────────────────────────────────────────────────────

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / APP_NAME
DEFAULT_TONE_CACHE_DIR = APP_SUPPORT_DIR / "tones"

# ── environment ──────────────────────────────────────────────────────────

LOG_LEVEL_ENV = "PACELAB_LOG_LEVEL"
CACHE_DIR_ENV = "PACELAB_CACHE_DIR"

DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_log_level() -> str:
    """Console log level from ``PACELAB_LOG_LEVEL`` (default INFO)."""
    return os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper()


def get_tone_cache_dir() -> Path:
    """Directory holding the synthesized WAV cues."""
    override = os.environ.get(CACHE_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return DEFAULT_TONE_CACHE_DIR
