"""Breathing pacer state machine for PaceLab.

States
------
IDLE        Nothing scheduled — waiting for the user to start.
COUNTDOWN   3, 2, 1, GO — one step per second.
RUNNING     Alternating INHALE / EXHALE phases.
STOPPED     Transient: announced on stop or natural completion, then IDLE.

Transitions
-----------
IDLE → COUNTDOWN                      (start)
COUNTDOWN → RUNNING                   (countdown reaches 0, plus 1 s)
RUNNING → STOPPED → IDLE              (stop, or cycle limit reached)
COUNTDOWN → STOPPED → IDLE            (stop)

Scheduling
----------
Every transition (countdown steps and phase boundaries) goes through a
single armed slot: one single-shot ``QTimer`` plus the step it will
perform.  Arming replaces whatever was armed, so at most one transition
is ever pending and ``stop()`` cancels it with one call.

The 100 ms display ticker is a separate periodic timer.  It only counts
``phase_remaining_ms`` down for the UI; it never changes mode, phase, or
cycle.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from ..audio.tones import ToneKind
from .config import PacerConfig, SessionConfig

logger = logging.getLogger(__name__)


# ── enums ─────────────────────────────────────────────────────────────────


class PacerMode(Enum):
    IDLE = "idle"
    COUNTDOWN = "countdown"
    RUNNING = "running"
    STOPPED = "stopped"


class Phase(Enum):
    INHALE = "inhale"
    EXHALE = "exhale"


class _Step(Enum):
    COUNTDOWN = "countdown"   # decrement the countdown
    GO = "go"                 # leave the countdown, begin breathing
    PHASE_END = "phase_end"   # current phase is over


# ── constants ─────────────────────────────────────────────────────────────

COUNTDOWN_START = 3
COUNTDOWN_STEP_MS = 1000
GO_DELAY_MS = 1000
DISPLAY_TICK_MS = 100
RESTART_DELAY_MS = 100

_PHASE_CUES: dict[Phase, ToneKind] = {
    Phase.INHALE: ToneKind.INHALE,
    Phase.EXHALE: ToneKind.EXHALE,
}


@dataclass(frozen=True)
class EngineSnapshot:
    """Read-only view of the engine at one instant."""

    mode: PacerMode
    countdown_value: int | None = None
    current_phase: Phase | None = None
    cycle_index: int | None = None
    phase_remaining_ms: int | None = None


# ── engine ────────────────────────────────────────────────────────────────


class PacerEngine(QObject):
    """Qt-based breathing pacer: countdown, then alternating phases.

    Signals
    -------
    state_changed(mode: PacerMode)
        Emitted on every mode transition (STOPPED is always followed
        by IDLE).
    countdown_changed(value: int)
        3, 2, 1, 0 during the countdown.
    phase_changed(phase: Phase, cycle_index: int | None)
        Emitted when a phase begins.  ``cycle_index`` is None for
        unbounded runs.
    tick(remaining_ms: int)
        Display-only countdown of the current phase, every 100 ms.
    cue(kind: ToneKind)
        A tone was requested (only while sound is enabled).
    session_completed(cycles: int)
        A bounded run finished all of its cycles.
    """

    state_changed = pyqtSignal(object)
    countdown_changed = pyqtSignal(int)
    phase_changed = pyqtSignal(object, object)
    tick = pyqtSignal(int)
    cue = pyqtSignal(object)
    session_completed = pyqtSignal(int)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        config: PacerConfig | None = None,
        tones: object | None = None,
    ) -> None:
        super().__init__(parent)

        # ── configuration ─────────────────────────────────────────────
        self._config: PacerConfig = config or PacerConfig()
        self._tones = tones  # anything with play(kind, profile)
        self._session: SessionConfig | None = None

        # ── run state ─────────────────────────────────────────────────
        self._mode: PacerMode = PacerMode.IDLE
        self._countdown_value: int | None = None
        self._phase: Phase | None = None
        self._cycle: int = 0
        self._remaining_ms: int | None = None

        # Bumped on every start and shutdown; entry sequences compare it
        # after each emit and bail out if a subscriber stopped the run.
        self._run: int = 0

        # ── armed transition slot ─────────────────────────────────────
        self._armed: _Step | None = None
        self._transition_timer = QTimer(self)
        self._transition_timer.setSingleShot(True)
        self._transition_timer.timeout.connect(self._on_transition)

        # ── display ticker (cosmetic) ─────────────────────────────────
        self._display_timer = QTimer(self)
        self._display_timer.setInterval(DISPLAY_TICK_MS)
        self._display_timer.timeout.connect(self._on_display_tick)

        # ── deferred start for restart() ──────────────────────────────
        self._restarting: bool = False
        self._restart_timer = QTimer(self)
        self._restart_timer.setSingleShot(True)
        self._restart_timer.setInterval(RESTART_DELAY_MS)
        self._restart_timer.timeout.connect(self._on_restart_due)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def config(self) -> PacerConfig:
        """The editable configuration; read at the next ``start()``."""
        return self._config

    @property
    def session(self) -> SessionConfig | None:
        """Configuration frozen for the current run (None when IDLE)."""
        return self._session

    @property
    def mode(self) -> PacerMode:
        return self._mode

    @property
    def is_active(self) -> bool:
        """True during the countdown or while breathing."""
        return self._mode in (PacerMode.COUNTDOWN, PacerMode.RUNNING)

    @property
    def restart_pending(self) -> bool:
        """True between ``restart()`` and the fresh ``start()``."""
        return self._restarting or self._restart_timer.isActive()

    @property
    def countdown_value(self) -> int | None:
        return self._countdown_value

    @property
    def current_phase(self) -> Phase | None:
        return self._phase

    @property
    def cycle_index(self) -> int | None:
        """1-based cycle number; only for bounded runs while RUNNING."""
        if self._mode != PacerMode.RUNNING or not self._session.bounded:
            return None
        return self._cycle

    @property
    def cycle_limit(self) -> int | None:
        return self._session.cycle_limit if self._session else None

    @property
    def phase_remaining_ms(self) -> int | None:
        return self._remaining_ms

    @property
    def phase_duration_ms(self) -> int:
        """Configured length of the current phase (0 when not RUNNING)."""
        if self._phase is None or self._session is None:
            return 0
        if self._phase == Phase.INHALE:
            return self._session.breath_in_ms
        return self._session.breath_out_ms

    @property
    def phase_progress(self) -> float:
        """0.0 → 1.0 elapsed fraction of the current phase."""
        duration = self.phase_duration_ms
        if duration <= 0 or self._remaining_ms is None:
            return 0.0
        elapsed = duration - self._remaining_ms
        return max(0.0, min(1.0, elapsed / duration))

    @property
    def breath_scale(self) -> float:
        """Relative size of the breathing circle.

        Grows 0 → 1 while inhaling and shrinks 1 → 0 while exhaling.
        """
        if self._phase is None:
            return 0.0
        progress = self.phase_progress
        return progress if self._phase == Phase.INHALE else 1.0 - progress

    def snapshot(self) -> EngineSnapshot:
        return EngineSnapshot(
            mode=self._mode,
            countdown_value=self._countdown_value,
            current_phase=self._phase,
            cycle_index=self.cycle_index,
            phase_remaining_ms=self._remaining_ms,
        )

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self) -> None:
        """Begin the countdown.  Only valid from IDLE."""
        if self._mode != PacerMode.IDLE:
            return
        self._restart_timer.stop()
        self._run += 1
        run = self._run
        self._session = self._config.snapshot()
        self._countdown_value = COUNTDOWN_START
        logger.info(
            "Starting session: in=%dms out=%dms limit=%s",
            self._session.breath_in_ms,
            self._session.breath_out_ms,
            self._session.cycle_limit or "none",
        )
        self._arm(_Step.COUNTDOWN, COUNTDOWN_STEP_MS)
        self._set_mode(PacerMode.COUNTDOWN)
        if self._superseded(run):
            return
        self.countdown_changed.emit(self._countdown_value)
        if self._superseded(run):
            return
        self._countdown_cue(self._countdown_value)

    def stop(self) -> None:
        """Cancel everything and return to IDLE.  Safe from any mode."""
        self._restart_timer.stop()
        # STOPPED only appears while a shutdown is already under way
        if self._mode in (PacerMode.IDLE, PacerMode.STOPPED):
            return
        logger.info("Stopping session from %s", self._mode.value)
        self._shutdown()

    def restart(self) -> None:
        """Stop, then start a fresh run after a short delay."""
        self._restarting = True
        try:
            self.stop()
        finally:
            self._restarting = False
        self._restart_timer.start()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: transition mechanics
    # ══════════════════════════════════════════════════════════════════

    def _arm(self, step: _Step, delay_ms: int) -> None:
        """Schedule the next transition, replacing any armed one."""
        self._armed = step
        self._transition_timer.start(delay_ms)

    def _disarm(self) -> None:
        self._transition_timer.stop()
        self._armed = None

    def _on_transition(self) -> None:
        step = self._armed
        self._armed = None
        if step is None:
            logger.debug("Ignoring transition with nothing armed")
            return

        if step == _Step.COUNTDOWN:
            self._advance_countdown()
        elif step == _Step.GO:
            self._begin_breathing()
        else:
            self._finish_phase()

    def _advance_countdown(self) -> None:
        run = self._run
        self._countdown_value -= 1
        if self._countdown_value > 0:
            self._arm(_Step.COUNTDOWN, COUNTDOWN_STEP_MS)
        else:
            self._arm(_Step.GO, GO_DELAY_MS)
        self.countdown_changed.emit(self._countdown_value)
        if self._superseded(run):
            return
        self._countdown_cue(self._countdown_value)

    def _begin_breathing(self) -> None:
        self._countdown_value = None
        self._cycle = 1
        self._phase = Phase.INHALE
        self._remaining_ms = self._session.breath_in_ms
        run = self._run
        self._set_mode(PacerMode.RUNNING)
        if self._superseded(run):
            return
        self._announce_phase()

    def _finish_phase(self) -> None:
        if self._phase == Phase.INHALE:
            self._enter_phase(Phase.EXHALE)
            return

        # Exhale over, one full cycle done
        limit = self._session.cycle_limit
        if limit is not None and self._cycle >= limit:
            self._complete()
            return
        self._cycle += 1
        self._enter_phase(Phase.INHALE)

    def _enter_phase(self, phase: Phase) -> None:
        self._phase = phase
        self._remaining_ms = self.phase_duration_ms
        self._announce_phase()

    def _announce_phase(self) -> None:
        run = self._run
        phase = self._phase
        logger.debug("Phase %s (cycle %d)", phase.value, self._cycle)
        self._arm(_Step.PHASE_END, self.phase_duration_ms)
        # Realign the cosmetic ticker with the new phase boundary
        self._display_timer.start()
        self.phase_changed.emit(phase, self.cycle_index)
        if self._superseded(run):
            return
        self.tick.emit(self._remaining_ms)
        if self._superseded(run):
            return
        self._cue(_PHASE_CUES[phase])

    def _complete(self) -> None:
        cycles = self._cycle
        logger.info("Session complete after %d cycles", cycles)
        run = self._run
        self.session_completed.emit(cycles)
        if self._superseded(run):
            return
        self._shutdown()

    def _shutdown(self) -> None:
        self._run += 1
        self._disarm()
        self._display_timer.stop()
        self._session = None
        self._countdown_value = None
        self._phase = None
        self._cycle = 0
        self._remaining_ms = None
        self._set_mode(PacerMode.STOPPED)
        self._set_mode(PacerMode.IDLE)

    def _on_display_tick(self) -> None:
        if self._mode != PacerMode.RUNNING or self._remaining_ms is None:
            return
        self._remaining_ms = max(0, self._remaining_ms - DISPLAY_TICK_MS)
        self.tick.emit(self._remaining_ms)

    def _on_restart_due(self) -> None:
        self.start()

    def _superseded(self, run: int) -> bool:
        return run != self._run

    def _set_mode(self, new_mode: PacerMode) -> None:
        self._mode = new_mode
        self.state_changed.emit(new_mode)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: audio cues (best effort)
    # ══════════════════════════════════════════════════════════════════

    def _countdown_cue(self, value: int) -> None:
        if self._session.countdown_tones:
            self._cue(ToneKind.COUNTDOWN if value > 0 else ToneKind.GO)

    def _cue(self, kind: ToneKind) -> None:
        if not self._session.sound_enabled:
            return
        run = self._run
        profile = self._session.tone_profile
        self.cue.emit(kind)
        if self._tones is None or self._superseded(run):
            return
        try:
            self._tones.play(kind, profile)
        except Exception as e:
            logger.warning("Could not play %s cue: %s", kind.value, e)
