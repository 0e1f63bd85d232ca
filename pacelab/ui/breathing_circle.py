"""Growing / shrinking breathing circle rendered with QPainter.

- A thin outer track marks the full-breath size.
- The inner disc grows while inhaling and shrinks while exhaling,
  following ``PacerEngine.breath_scale``.
- Colour-coded by phase with a short animated blend between phases.
"""

from __future__ import annotations

from PyQt6.QtCore import Qt, QRectF, QVariantAnimation, QEasingCurve
from PyQt6.QtGui import QPainter, QPen, QColor, QRadialGradient
from PyQt6.QtWidgets import QWidget

from ..pacer.engine import Phase
from .styles import PHASE_COLORS


def _lerp_color(c1: QColor, c2: QColor, t: float) -> QColor:
    """Linearly interpolate between two QColors."""
    t = max(0.0, min(1.0, t))
    return QColor(
        int(c1.red()   + (c2.red()   - c1.red())   * t),
        int(c1.green() + (c2.green() - c1.green()) * t),
        int(c1.blue()  + (c2.blue()  - c1.blue())  * t),
        int(c1.alpha() + (c2.alpha() - c1.alpha()) * t),
    )


class BreathingCircle(QWidget):
    """Custom-painted breathing guide."""

    DIAMETER = 312
    TRACK_THICKNESS = 4
    MIN_DISC = 20  # px, so the disc never vanishes entirely

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setMinimumSize(self.DIAMETER + 24, self.DIAMETER + 24)

        self._scale: float = 0.0
        self._phase: Phase | None = None

        fill_hex, track_hex = PHASE_COLORS[None]
        self._fill_color = QColor(fill_hex)
        self._track_color = QColor(track_hex)
        self._old_fill = QColor(self._fill_color)
        self._target_fill = QColor(self._fill_color)

        self._color_anim = QVariantAnimation(self)
        self._color_anim.setDuration(400)
        self._color_anim.setStartValue(0.0)
        self._color_anim.setEndValue(1.0)
        self._color_anim.setEasingCurve(QEasingCurve.Type.InOutQuad)
        self._color_anim.valueChanged.connect(self._on_color_anim)

    # ── public API ────────────────────────────────────────────────────

    @property
    def scale(self) -> float:
        return self._scale

    @property
    def phase(self) -> Phase | None:
        return self._phase

    def set_scale(self, scale: float) -> None:
        """Disc size as a fraction (0..1) of the full-breath diameter."""
        self._scale = max(0.0, min(1.0, scale))
        self.update()

    def apply_phase(self, phase: Phase | None) -> None:
        """Blend to the colour of a new phase."""
        self._phase = phase
        fill_hex, track_hex = PHASE_COLORS.get(phase, PHASE_COLORS[None])
        self._track_color = QColor(track_hex)
        self._old_fill = QColor(self._fill_color)
        self._target_fill = QColor(fill_hex)
        self._color_anim.stop()
        self._color_anim.start()

    # ── slots ─────────────────────────────────────────────────────────

    def _on_color_anim(self, value: object) -> None:
        self._fill_color = _lerp_color(self._old_fill, self._target_fill, float(value))
        self.update()

    # ── painting ──────────────────────────────────────────────────────

    def paintEvent(self, event) -> None:  # type: ignore[override]
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        cx, cy = self.width() / 2, self.height() / 2
        diameter = max(100, min(self.width(), self.height()) - 24)
        radius = diameter / 2

        # ── outer track ──────────────────────────────────────────────
        painter.setPen(QPen(self._track_color, self.TRACK_THICKNESS))
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawEllipse(QRectF(cx - radius, cy - radius, diameter, diameter))

        # ── inner disc ───────────────────────────────────────────────
        inner = max(self.MIN_DISC, self._scale * (diameter - 2 * self.TRACK_THICKNESS))
        r = inner / 2
        gradient = QRadialGradient(cx, cy, r)
        gradient.setColorAt(0.0, self._fill_color.lighter(120))
        gradient.setColorAt(1.0, self._fill_color)
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(gradient)
        painter.drawEllipse(QRectF(cx - r, cy - r, inner, inner))

        painter.end()
