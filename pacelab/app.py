"""Main application window for PaceLab."""

from __future__ import annotations

import logging

from PyQt6.QtGui import QKeySequence, QShortcut
from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QTabWidget, QStatusBar,
)

from .audio.tones import ToneManager
from .pacer.config import PacerConfig
from .pacer.engine import PacerEngine
from .ui.calculator_widget import CalculatorWidget
from .ui.pacer_widget import PacerWidget
from .ui.styles import build_stylesheet

logger = logging.getLogger(__name__)

STATUS_TIMEOUT_MS = 3000


class PaceLabApp(QMainWindow):
    """Main application window: calculator and breathing pacer tabs."""

    def __init__(self, *, tones: ToneManager | None = None) -> None:
        super().__init__()
        self.setWindowTitle("PaceLab")
        self.setMinimumSize(520, 720)
        self.resize(560, 820)
        self.setStyleSheet(build_stylesheet())

        # ── shared audio handle (one per process) ─────────────────────
        self._tones = tones if tones is not None else ToneManager(parent=self)

        # ── pacer engine ──────────────────────────────────────────────
        self._pacer_config = PacerConfig()
        self._pacer_engine = PacerEngine(
            self, config=self._pacer_config, tones=self._tones,
        )

        # ── central widget ────────────────────────────────────────────
        central = QWidget()
        self.setCentralWidget(central)
        root_layout = QVBoxLayout(central)
        root_layout.setContentsMargins(16, 12, 16, 12)
        root_layout.setSpacing(8)

        self._tabs = QTabWidget(central)
        root_layout.addWidget(self._tabs)

        self._calculator = CalculatorWidget(self._tabs)
        self._tabs.addTab(self._calculator, "VO2 Max Calculator")

        self._pacer = PacerWidget(self._pacer_engine, self._tones, self._tabs)
        self._tabs.addTab(self._pacer, "Metronome")

        self.setStatusBar(QStatusBar(self))

        # ── wiring ────────────────────────────────────────────────────
        self._calculator.status_message.connect(self._show_status)
        self._pacer.session_visible_changed.connect(self._on_session_visible)
        self._pacer_engine.session_completed.connect(self._on_session_completed)

        stop_shortcut = QShortcut(QKeySequence("Escape"), self)
        stop_shortcut.activated.connect(self._pacer_engine.stop)

    @property
    def pacer_engine(self) -> PacerEngine:
        return self._pacer_engine

    @property
    def calculator(self) -> CalculatorWidget:
        return self._calculator

    @property
    def pacer(self) -> PacerWidget:
        return self._pacer

    # ── slots ─────────────────────────────────────────────────────────

    def _show_status(self, message: str) -> None:
        self.statusBar().showMessage(message, STATUS_TIMEOUT_MS)

    def _on_session_visible(self, visible: bool) -> None:
        """The breathing display takes over the window while a run is live."""
        self._tabs.tabBar().setVisible(not visible)
        self.statusBar().setVisible(not visible)

    def _on_session_completed(self, cycles: int) -> None:
        self._show_status(f"Session complete: {cycles} cycles")

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self._pacer_engine.stop()
        logger.debug("Main window closed")
        super().closeEvent(event)
