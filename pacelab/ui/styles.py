"""QSS stylesheet, palette, and phase colors for PaceLab."""

from __future__ import annotations

from ..pacer.engine import Phase

# ── breathing circle colors: (fill, track) per phase ────────────────────

PHASE_COLORS: dict[Phase | None, tuple[str, str]] = {
    Phase.INHALE: ("#89B4FA", "#313154"),   # cool blue
    Phase.EXHALE: ("#A6E3A1", "#313154"),   # soft green
    None:         ("#4A4A5E", "#313154"),   # countdown / idle
}

PALETTE: dict[str, str] = {
    "bg":           "#1A1A2E",
    "bg_secondary": "#232340",
    "surface":      "#2A2A4A",
    "accent":       "#CBA6F7",
    "accent2":      "#89B4FA",
    "text":         "#E2E2F0",
    "text_muted":   "#7A7A9A",
    "danger":       "#F38BA8",
    "border":       "#313154",
}


# ── font resolution ───────────────────────────────────────────────────

_resolved_font: str | None = None


def resolve_font_family() -> str:
    """Detect the best available system font.  Must be called after
    QApplication is created (font database needs the app context)."""
    global _resolved_font
    if _resolved_font is None:
        try:
            from PyQt6.QtGui import QFontDatabase
            families = set(QFontDatabase.families())
            for candidate in ("SF Pro", ".AppleSystemUIFont"):
                if candidate in families:
                    _resolved_font = candidate
                    break
            else:
                _resolved_font = "Helvetica Neue"
        except Exception:
            _resolved_font = "Helvetica Neue"
    return _resolved_font


# ── QSS builder ───────────────────────────────────────────────────────


def build_stylesheet(palette: dict[str, str] | None = None) -> str:
    p = palette or PALETTE
    font = resolve_font_family()
    return f"""
    /* ── global ─────────────────────────────────── */
    QWidget {{
        background-color: {p['bg']};
        color: {p['text']};
        font-family: "{font}", "Helvetica Neue", Arial;
        font-size: 14px;
    }}

    QMainWindow {{
        background-color: {p['bg']};
    }}

    QFrame#card {{
        background-color: {p['bg_secondary']};
        border: 1px solid {p['border']};
        border-radius: 14px;
    }}

    QLabel#sectionLabel {{
        color: {p['accent']};
        font-size: 15px;
        font-weight: 700;
        background: transparent;
    }}

    QLabel#mutedLabel {{
        color: {p['text_muted']};
        font-size: 12px;
        background: transparent;
    }}

    QLabel#errorLabel {{
        color: {p['danger']};
        font-size: 12px;
        background: transparent;
    }}

    QLabel#resultValue {{
        color: {p['accent2']};
        font-weight: 600;
        background: transparent;
    }}

    QLabel#countdownLabel {{
        font-size: 96px;
        font-weight: 300;
        background: transparent;
    }}

    QLabel#phaseLabel {{
        font-size: 44px;
        font-weight: 300;
        background: transparent;
    }}

    QLabel#timeLabel {{
        font-size: 28px;
        font-weight: 300;
        background: transparent;
    }}

    /* ── buttons ─────────────────────────────────── */
    QPushButton {{
        background-color: {p['bg_secondary']};
        color: {p['text']};
        border: 1px solid {p['border']};
        border-radius: 10px;
        padding: 10px 24px;
        font-size: 14px;
        font-weight: 600;
    }}

    QPushButton:hover {{
        background-color: {p['surface']};
        border-color: {p['accent']};
    }}

    QPushButton:pressed {{
        background-color: {p['accent']};
        color: {p['bg']};
    }}

    QPushButton#primaryButton {{
        background-color: {p['accent']};
        color: {p['bg']};
        border: none;
        font-size: 17px;
        padding: 14px 40px;
        border-radius: 12px;
        font-weight: 700;
    }}

    QPushButton#primaryButton:hover {{
        background-color: {p['accent2']};
    }}

    QPushButton#secondaryButton {{
        background-color: transparent;
        color: {p['text_muted']};
        border: 1px solid {p['border']};
        font-size: 13px;
        padding: 8px 16px;
        border-radius: 8px;
    }}

    QPushButton#secondaryButton:checked {{
        color: {p['bg']};
        background-color: {p['accent']};
        border-color: {p['accent']};
    }}

    QPushButton#dangerButton {{
        background-color: transparent;
        color: {p['danger']};
        border: 1px solid {p['border']};
        font-size: 13px;
        padding: 8px 16px;
        border-radius: 8px;
    }}

    QPushButton#dangerButton:hover {{
        background-color: {p['danger']};
        color: {p['bg']};
        border-color: {p['danger']};
    }}

    /* ── inputs ──────────────────────────────────── */
    QLineEdit, QSpinBox, QComboBox {{
        background-color: {p['bg']};
        color: {p['text']};
        border: 1px solid {p['border']};
        border-radius: 8px;
        padding: 6px 12px;
        font-size: 13px;
    }}

    QLineEdit:focus, QSpinBox:focus, QComboBox:focus {{
        border-color: {p['accent']};
    }}

    QCheckBox {{
        background: transparent;
        spacing: 8px;
    }}

    /* ── tab widget ──────────────────────────────── */
    QTabWidget::pane {{
        border: none;
    }}

    QTabBar::tab {{
        background-color: transparent;
        color: {p['text_muted']};
        padding: 8px 20px;
        border: none;
        font-weight: 600;
    }}

    QTabBar::tab:selected {{
        color: {p['accent']};
        border-bottom: 2px solid {p['accent']};
    }}
    """
