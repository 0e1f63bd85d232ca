"""Breathing pacer page — the Metronome tab.

Two stacked pages:
    - Settings: durations, cycle limit, sound / visual toggles, tone
      profile picker, session info, and the Start button.
    - Session: full-page countdown ("3, 2, 1, GO!"), then the breathing
      circle, remaining seconds, phase label, and Stop / Restart.

All decisions live in ``PacerEngine`` and ``PacerConfig``; this widget
only forwards user edits and renders engine signals.
"""

from __future__ import annotations

import math
from typing import Callable

from PyQt6.QtCore import Qt, QTimer, pyqtSignal
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QFormLayout, QStackedWidget,
    QLabel, QPushButton, QLineEdit, QFrame, QCheckBox, QSpinBox,
    QButtonGroup, QSlider,
)

from ..audio.tones import ToneManager, ToneProfile, PROFILE_LABELS
from ..pacer.config import (
    PacerConfig, MIN_BREATH_MS, MAX_BREATH_MS,
    DEFAULT_CYCLE_LIMIT, MIN_CYCLE_LIMIT, MAX_CYCLE_LIMIT,
)
from ..pacer.engine import PacerEngine, PacerMode, Phase
from .breathing_circle import BreathingCircle


PHASE_LABELS: dict[Phase, str] = {
    Phase.INHALE: "Breathe In",
    Phase.EXHALE: "Breathe Out",
}

PREVIEW_DELAY_MS = 100

# Slider covers the everyday range in half-second steps; the text field
# accepts the full configurable range.
SLIDER_STEP_MS = 500
SLIDER_MIN_MS = 1000
BREATH_IN_SLIDER_MAX_MS = 10_000
BREATH_OUT_SLIDER_MAX_MS = 15_000
SETTINGS_PAGE, SESSION_PAGE = 0, 1


def format_remaining(ms: int | None) -> str:
    """Whole seconds left in the phase, rounded up (``"4s"``)."""
    return f"{math.ceil(max(0, ms or 0) / 1000)}s"


def format_seconds(ms: int) -> str:
    """``4000`` → ``"4"``, ``4500`` → ``"4.5"``."""
    return f"{ms / 1000:g}"


class DurationEditor(QWidget):
    """One breath duration: an exact seconds field plus a slider.

    Moving the slider writes immediately.  Text is only written on Save
    (or Return); Cancel restores the configured value.  Rejected text
    stays in the field for correction.
    """

    changed = pyqtSignal(int)  # accepted duration in ms

    def __init__(
        self,
        read_ms: Callable[[], int],
        write_ms: Callable[[int], bool],
        write_seconds: Callable[[str], bool],
        slider_max_ms: int,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._read_ms = read_ms
        self._write_ms = write_ms
        self._write_seconds = write_seconds

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(6)

        row = QHBoxLayout()
        row.setSpacing(6)
        self.edit = QLineEdit(self)
        self.edit.setPlaceholderText(
            f"Enter seconds ({format_seconds(MIN_BREATH_MS)}-"
            f"{format_seconds(MAX_BREATH_MS)})"
        )
        row.addWidget(self.edit, 1)
        self.save_btn = QPushButton("Save", self)
        self.cancel_btn = QPushButton("Cancel", self)
        for btn in (self.save_btn, self.cancel_btn):
            btn.setObjectName("secondaryButton")
            # Clicking must not pull focus out of the field first
            btn.setFocusPolicy(Qt.FocusPolicy.NoFocus)
            row.addWidget(btn)
        layout.addLayout(row)

        self.slider = QSlider(Qt.Orientation.Horizontal, self)
        self.slider.setRange(
            SLIDER_MIN_MS // SLIDER_STEP_MS, slider_max_ms // SLIDER_STEP_MS,
        )
        self.slider.setSingleStep(1)
        self.slider.setPageStep(2)
        layout.addWidget(self.slider)

        self.edit.returnPressed.connect(self.save)
        self.save_btn.clicked.connect(self.save)
        self.cancel_btn.clicked.connect(self.cancel)
        self.slider.valueChanged.connect(self._on_slider_moved)
        self.refresh()

    def refresh(self) -> None:
        """Show the configured value in both the field and the slider."""
        ms = self._read_ms()
        self.edit.setText(format_seconds(ms))
        # Values outside the slider range pin it to the nearest end
        self.slider.blockSignals(True)
        self.slider.setValue(round(ms / SLIDER_STEP_MS))
        self.slider.blockSignals(False)

    def save(self) -> bool:
        if not self._write_seconds(self.edit.text()):
            return False
        self.refresh()
        self.changed.emit(self._read_ms())
        return True

    def cancel(self) -> None:
        self.refresh()

    def _on_slider_moved(self, steps: int) -> None:
        if self._write_ms(steps * SLIDER_STEP_MS):
            self.refresh()
            self.changed.emit(self._read_ms())


class PacerWidget(QWidget):
    """Settings card plus full-page breathing session display."""

    session_visible_changed = pyqtSignal(bool)

    def __init__(
        self,
        engine: PacerEngine,
        tones: ToneManager | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._engine = engine
        self._tones = tones
        self._build_ui()
        self._connect_signals()
        self._populate()

    @property
    def config(self) -> PacerConfig:
        return self._engine.config

    # ══════════════════════════════════════════════════════════════════
    #  BUILD UI
    # ══════════════════════════════════════════════════════════════════

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        self._stack = QStackedWidget(self)
        root.addWidget(self._stack)

        self._stack.addWidget(self._build_settings_page())
        self._stack.addWidget(self._build_session_page())

    def _build_settings_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)
        layout.setContentsMargins(16, 12, 16, 12)
        layout.setSpacing(16)

        self._start_btn = QPushButton("Start Breathing Session", page)
        self._start_btn.setObjectName("primaryButton")
        layout.addWidget(self._start_btn, alignment=Qt.AlignmentFlag.AlignCenter)

        card = QFrame(page)
        card.setObjectName("card")
        layout.addWidget(card)
        form_root = QVBoxLayout(card)
        form_root.setContentsMargins(24, 20, 24, 20)
        form_root.setSpacing(14)

        form_root.addWidget(self._section_label("Settings"))
        self._mode_label = QLabel(card)
        self._mode_label.setObjectName("mutedLabel")
        self._mode_label.setWordWrap(True)
        form_root.addWidget(self._mode_label)

        form = QFormLayout()
        form.setHorizontalSpacing(20)
        form.setVerticalSpacing(10)

        # ── durations (seconds, validated by PacerConfig) ────────────
        c = self.config
        self._breath_in_editor = DurationEditor(
            lambda: c.breath_in_ms, c.set_breath_in_ms, c.set_breath_in_seconds,
            BREATH_IN_SLIDER_MAX_MS, card,
        )
        form.addRow("Breath in (s):", self._breath_in_editor)

        self._breath_out_editor = DurationEditor(
            lambda: c.breath_out_ms, c.set_breath_out_ms, c.set_breath_out_seconds,
            BREATH_OUT_SLIDER_MAX_MS, card,
        )
        form.addRow("Breath out (s):", self._breath_out_editor)

        # ── optional cycle limit ─────────────────────────────────────
        limit_row = QHBoxLayout()
        self._limit_cb = QCheckBox("Limit cycles", card)
        self._limit_spin = QSpinBox(card)
        self._limit_spin.setRange(MIN_CYCLE_LIMIT, MAX_CYCLE_LIMIT)
        self._limit_spin.setValue(DEFAULT_CYCLE_LIMIT)
        limit_row.addWidget(self._limit_cb)
        limit_row.addWidget(self._limit_spin)
        limit_wrapper = QWidget(card)
        limit_wrapper.setLayout(limit_row)
        form.addRow("Cycles:", limit_wrapper)

        # ── toggles ──────────────────────────────────────────────────
        self._sound_cb = QCheckBox("Enable breathing beeps", card)
        form.addRow("Sound:", self._sound_cb)
        self._visual_cb = QCheckBox("Show breathing instructions", card)
        form.addRow("Visual cues:", self._visual_cb)
        self._countdown_cb = QCheckBox("Beep during the countdown", card)
        form.addRow("", self._countdown_cb)

        form_root.addLayout(form)

        # ── tone profile picker ──────────────────────────────────────
        self._tone_label = QLabel("Sound type", card)
        form_root.addWidget(self._tone_label)
        tone_row = QHBoxLayout()
        tone_row.setSpacing(8)
        self._tone_group = QButtonGroup(card)
        self._tone_group.setExclusive(True)
        self._tone_buttons: dict[ToneProfile, QPushButton] = {}
        for profile in ToneProfile:
            btn = QPushButton(PROFILE_LABELS[profile], card)
            btn.setObjectName("secondaryButton")
            btn.setCheckable(True)
            self._tone_group.addButton(btn)
            self._tone_buttons[profile] = btn
            tone_row.addWidget(btn)
        form_root.addLayout(tone_row)

        # ── session info ─────────────────────────────────────────────
        form_root.addWidget(self._section_label("Session Info"))
        self._info_label = QLabel(card)
        self._info_label.setObjectName("mutedLabel")
        form_root.addWidget(self._info_label)

        layout.addStretch()
        return page

    def _build_session_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)
        layout.setContentsMargins(16, 24, 16, 16)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        # ── countdown view ───────────────────────────────────────────
        self._countdown_view = QWidget(page)
        cd_layout = QVBoxLayout(self._countdown_view)
        cd_layout.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._countdown_label = QLabel("3", self._countdown_view)
        self._countdown_label.setObjectName("countdownLabel")
        self._countdown_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._countdown_hint = QLabel("Get ready...", self._countdown_view)
        self._countdown_hint.setObjectName("mutedLabel")
        self._countdown_hint.setAlignment(Qt.AlignmentFlag.AlignCenter)
        cd_layout.addWidget(self._countdown_label)
        cd_layout.addWidget(self._countdown_hint)
        layout.addWidget(self._countdown_view)

        # ── breathing view ───────────────────────────────────────────
        self._breathing_view = QWidget(page)
        br_layout = QVBoxLayout(self._breathing_view)
        br_layout.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._circle = BreathingCircle(self._breathing_view)
        br_layout.addWidget(self._circle, alignment=Qt.AlignmentFlag.AlignCenter)
        self._time_label = QLabel("", self._breathing_view)
        self._time_label.setObjectName("timeLabel")
        self._time_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        br_layout.addWidget(self._time_label)
        self._phase_label = QLabel("", self._breathing_view)
        self._phase_label.setObjectName("phaseLabel")
        self._phase_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        br_layout.addWidget(self._phase_label)
        self._cycle_label = QLabel("", self._breathing_view)
        self._cycle_label.setObjectName("mutedLabel")
        self._cycle_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        br_layout.addWidget(self._cycle_label)
        layout.addWidget(self._breathing_view)

        layout.addStretch()

        # ── controls ─────────────────────────────────────────────────
        btn_row = QHBoxLayout()
        btn_row.setSpacing(12)
        btn_row.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._stop_btn = QPushButton("Stop Session", page)
        self._stop_btn.setObjectName("dangerButton")
        self._restart_btn = QPushButton("Restart", page)
        self._restart_btn.setObjectName("secondaryButton")
        btn_row.addWidget(self._stop_btn)
        btn_row.addWidget(self._restart_btn)
        layout.addLayout(btn_row)
        return page

    @staticmethod
    def _section_label(text: str) -> QLabel:
        lbl = QLabel(text)
        lbl.setObjectName("sectionLabel")
        return lbl

    # ══════════════════════════════════════════════════════════════════
    #  SIGNALS
    # ══════════════════════════════════════════════════════════════════

    def _connect_signals(self) -> None:
        self._start_btn.clicked.connect(self._engine.start)
        self._stop_btn.clicked.connect(self._engine.stop)
        self._restart_btn.clicked.connect(self._engine.restart)

        self._breath_in_editor.changed.connect(self._refresh_info)
        self._breath_out_editor.changed.connect(self._refresh_info)
        self._limit_cb.toggled.connect(self._on_limit_changed)
        self._limit_spin.valueChanged.connect(self._on_limit_changed)
        self._sound_cb.toggled.connect(self._on_sound_toggled)
        self._visual_cb.toggled.connect(self._on_visual_toggled)
        self._countdown_cb.toggled.connect(self._on_countdown_toggled)
        for profile, btn in self._tone_buttons.items():
            btn.clicked.connect(
                lambda _checked=False, p=profile: self._on_profile_chosen(p)
            )

        self._engine.state_changed.connect(self._on_state_changed)
        self._engine.countdown_changed.connect(self._on_countdown_changed)
        self._engine.phase_changed.connect(self._on_phase_changed)
        self._engine.tick.connect(self._on_tick)

    def _populate(self) -> None:
        """Mirror the current config into the editors."""
        c = self.config
        self._breath_in_editor.refresh()
        self._breath_out_editor.refresh()
        self._limit_cb.setChecked(c.cycle_limit is not None)
        self._limit_spin.setValue(c.cycle_limit or DEFAULT_CYCLE_LIMIT)
        self._limit_spin.setEnabled(c.cycle_limit is not None)
        self._sound_cb.setChecked(c.sound_enabled)
        self._visual_cb.setChecked(c.visual_enabled)
        self._countdown_cb.setChecked(c.countdown_tones)
        self._tone_buttons[c.tone_profile].setChecked(True)
        self._refresh_info()

    # ── editor slots ──────────────────────────────────────────────────

    def _on_limit_changed(self, *_args) -> None:
        bounded = self._limit_cb.isChecked()
        self._limit_spin.setEnabled(bounded)
        self.config.set_cycle_limit(self._limit_spin.value() if bounded else None)
        self._refresh_info()

    def _on_sound_toggled(self, checked: bool) -> None:
        self.config.set_sound_enabled(checked)
        self._countdown_cb.setEnabled(checked)
        self._tone_label.setVisible(checked)
        for btn in self._tone_buttons.values():
            btn.setVisible(checked)
        self._refresh_info()

    def _on_visual_toggled(self, checked: bool) -> None:
        self.config.set_visual_enabled(checked)

    def _on_countdown_toggled(self, checked: bool) -> None:
        self.config.set_countdown_tones(checked)

    def _on_profile_chosen(self, profile: ToneProfile) -> None:
        self.config.set_tone_profile(profile)
        self._refresh_info()
        if self._tones is not None and self.config.sound_enabled:
            QTimer.singleShot(PREVIEW_DELAY_MS, lambda: self._tones.preview(profile))

    def _refresh_info(self) -> None:
        c = self.config
        if c.cycle_limit is None:
            self._mode_label.setText(
                "Infinite breathing session: continues until you stop it."
            )
            session = "Infinite (continuous)"
        else:
            self._mode_label.setText(
                f"Session ends after {c.cycle_limit} breathing cycles."
            )
            session = f"{c.cycle_limit} cycles"
        sound = PROFILE_LABELS[c.tone_profile] if c.sound_enabled else "Disabled"
        self._info_label.setText(
            f"Session: {session}\n"
            f"Breath In: {format_seconds(c.breath_in_ms)}s\n"
            f"Breath Out: {format_seconds(c.breath_out_ms)}s\n"
            f"Cycle Duration: {format_seconds(c.cycle_duration_ms)}s\n"
            f"Beeps per Minute: {c.beeps_per_minute}\n"
            f"Sound: {sound}"
        )

    # ── engine slots ──────────────────────────────────────────────────

    def _on_state_changed(self, mode: PacerMode) -> None:
        if mode == PacerMode.COUNTDOWN:
            self._countdown_view.setVisible(True)
            self._breathing_view.setVisible(False)
            self._restart_btn.setVisible(False)
            self._show_page(SESSION_PAGE)
        elif mode == PacerMode.RUNNING:
            self._countdown_view.setVisible(False)
            session = self._engine.session
            visual = session is not None and session.visual_enabled
            self._breathing_view.setVisible(visual)
            self._restart_btn.setVisible(True)
        elif mode == PacerMode.IDLE and not self._engine.restart_pending:
            self._circle.apply_phase(None)
            self._circle.set_scale(0.0)
            self._show_page(SETTINGS_PAGE)

    def _on_countdown_changed(self, value: int) -> None:
        if value > 0:
            self._countdown_label.setText(str(value))
            self._countdown_hint.setText("Get ready...")
        else:
            self._countdown_label.setText("GO!")
            self._countdown_hint.setText("Begin with breath in")

    def _on_phase_changed(self, phase: Phase, cycle_index: int | None) -> None:
        self._phase_label.setText(PHASE_LABELS[phase])
        self._circle.apply_phase(phase)
        if cycle_index is None:
            self._cycle_label.setVisible(False)
        else:
            self._cycle_label.setText(
                f"Cycle {cycle_index} of {self._engine.cycle_limit}"
            )
            self._cycle_label.setVisible(True)

    def _on_tick(self, remaining_ms: int) -> None:
        self._time_label.setText(format_remaining(remaining_ms))
        self._circle.set_scale(self._engine.breath_scale)

    def _show_page(self, index: int) -> None:
        if self._stack.currentIndex() == index:
            return
        self._stack.setCurrentIndex(index)
        self.session_visible_changed.emit(index == SESSION_PAGE)
