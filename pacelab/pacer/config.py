"""User-editable breathing pacer configuration.

Values live in memory for the lifetime of the window and start from the
defaults below on every launch.  Each field is written through a setter
that validates its input; a rejected write leaves the previous value in
place and returns ``False`` so an editor can revert its text.

Usage::

    config = PacerConfig()
    config.set_breath_in_seconds("4.5")      # True
    config.set_breath_out_ms(90_000)         # False, out of range
    session = config.snapshot()              # frozen copy for one run
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from numbers import Real

from ..audio.tones import ToneProfile

logger = logging.getLogger(__name__)


# ── limits & defaults ─────────────────────────────────────────────────────

MIN_BREATH_MS = 500
MAX_BREATH_MS = 60_000

MIN_CYCLE_LIMIT = 1
MAX_CYCLE_LIMIT = 100
DEFAULT_CYCLE_LIMIT = 5  # suggested value when the bound is switched on

DEFAULT_BREATH_IN_MS = 4000
DEFAULT_BREATH_OUT_MS = 6000

CUES_PER_CYCLE = 2


@dataclass(frozen=True)
class SessionConfig:
    """Immutable configuration captured when a run starts."""

    breath_in_ms: int = DEFAULT_BREATH_IN_MS
    breath_out_ms: int = DEFAULT_BREATH_OUT_MS
    cycle_limit: int | None = None
    sound_enabled: bool = True
    visual_enabled: bool = True
    tone_profile: ToneProfile = ToneProfile.SINE
    countdown_tones: bool = False

    @property
    def bounded(self) -> bool:
        return self.cycle_limit is not None


def _is_number(value: object) -> bool:
    return (
        isinstance(value, Real)
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def parse_seconds(text: str) -> int | None:
    """Convert an editor's seconds string (``"4.5"``) to milliseconds.

    Returns ``None`` when the text is not a finite number.
    """
    try:
        seconds = float(str(text).strip())
    except ValueError:
        return None
    if not math.isfinite(seconds):
        return None
    return round(seconds * 1000)


class PacerConfig:
    """Validated, mutable pacer settings."""

    def __init__(self) -> None:
        self._breath_in_ms: int = DEFAULT_BREATH_IN_MS
        self._breath_out_ms: int = DEFAULT_BREATH_OUT_MS
        self._cycle_limit: int | None = None
        self._sound_enabled: bool = True
        self._visual_enabled: bool = True
        self._tone_profile: ToneProfile = ToneProfile.SINE
        self._countdown_tones: bool = False

    # ══════════════════════════════════════════════════════════════════
    #  READ-ONLY VIEW
    # ══════════════════════════════════════════════════════════════════

    @property
    def breath_in_ms(self) -> int:
        return self._breath_in_ms

    @property
    def breath_out_ms(self) -> int:
        return self._breath_out_ms

    @property
    def cycle_limit(self) -> int | None:
        return self._cycle_limit

    @property
    def sound_enabled(self) -> bool:
        return self._sound_enabled

    @property
    def visual_enabled(self) -> bool:
        return self._visual_enabled

    @property
    def tone_profile(self) -> ToneProfile:
        return self._tone_profile

    @property
    def countdown_tones(self) -> bool:
        return self._countdown_tones

    @property
    def cycle_duration_ms(self) -> int:
        return self._breath_in_ms + self._breath_out_ms

    @property
    def beeps_per_minute(self) -> int:
        """Audible cues per minute (one at each phase boundary)."""
        return round(60_000 * CUES_PER_CYCLE / self.cycle_duration_ms)

    def snapshot(self) -> SessionConfig:
        return SessionConfig(
            breath_in_ms=self._breath_in_ms,
            breath_out_ms=self._breath_out_ms,
            cycle_limit=self._cycle_limit,
            sound_enabled=self._sound_enabled,
            visual_enabled=self._visual_enabled,
            tone_profile=self._tone_profile,
            countdown_tones=self._countdown_tones,
        )

    # ══════════════════════════════════════════════════════════════════
    #  SETTERS
    # ══════════════════════════════════════════════════════════════════

    def set_breath_in_ms(self, value: object) -> bool:
        ms = self._validate_breath("breath_in_ms", value)
        if ms is None:
            return False
        self._breath_in_ms = ms
        return True

    def set_breath_out_ms(self, value: object) -> bool:
        ms = self._validate_breath("breath_out_ms", value)
        if ms is None:
            return False
        self._breath_out_ms = ms
        return True

    def set_breath_in_seconds(self, text: str) -> bool:
        ms = parse_seconds(text)
        if ms is None:
            logger.debug("Rejected breath_in seconds %r: not a number", text)
            return False
        return self.set_breath_in_ms(ms)

    def set_breath_out_seconds(self, text: str) -> bool:
        ms = parse_seconds(text)
        if ms is None:
            logger.debug("Rejected breath_out seconds %r: not a number", text)
            return False
        return self.set_breath_out_ms(ms)

    def set_cycle_limit(self, value: object) -> bool:
        """Bound the run to *value* cycles, or ``None`` to run until stopped."""
        if value is None:
            self._cycle_limit = None
            return True
        if (
            not _is_number(value)
            or value != int(value)
            or not MIN_CYCLE_LIMIT <= value <= MAX_CYCLE_LIMIT
        ):
            logger.debug("Rejected cycle_limit %r", value)
            return False
        self._cycle_limit = int(value)
        return True

    def set_sound_enabled(self, enabled: bool) -> bool:
        return self._set_flag("_sound_enabled", enabled)

    def set_visual_enabled(self, enabled: bool) -> bool:
        return self._set_flag("_visual_enabled", enabled)

    def set_countdown_tones(self, enabled: bool) -> bool:
        return self._set_flag("_countdown_tones", enabled)

    def set_tone_profile(self, value: ToneProfile | str) -> bool:
        try:
            self._tone_profile = ToneProfile(value)
        except ValueError:
            logger.debug("Rejected tone_profile %r", value)
            return False
        return True

    # ── internal ──────────────────────────────────────────────────────

    def _validate_breath(self, name: str, value: object) -> int | None:
        if not _is_number(value) or not MIN_BREATH_MS <= value <= MAX_BREATH_MS:
            logger.debug("Rejected %s %r: outside [%d, %d] ms",
                         name, value, MIN_BREATH_MS, MAX_BREATH_MS)
            return None
        return round(value)

    def _set_flag(self, attr: str, value: object) -> bool:
        if not isinstance(value, bool):
            logger.debug("Rejected %s %r: not a bool", attr.lstrip("_"), value)
            return False
        setattr(self, attr, value)
        return True
