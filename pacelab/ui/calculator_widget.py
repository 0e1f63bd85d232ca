"""VO2max calculator page.

Layout (top → bottom):
    - Input card: age, weight, height, PAR, sex, Calculate button,
      with an inline error under each field
    - Results card (hidden until the first valid calculation): BMI,
      Part 1 and Part 2 values at four decimals, each with a copy button,
      plus "Copy All Results"
"""

from __future__ import annotations

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QApplication, QWidget, QVBoxLayout, QHBoxLayout, QGridLayout,
    QLabel, QPushButton, QLineEdit, QComboBox, QFrame,
)

from ..calculator.formulas import (
    RESULT_ROWS, FitnessResults, InvalidInputError,
    evaluate, format_value, parse_inputs,
)


_NUMERIC_FIELDS: tuple[tuple[str, str, str], ...] = (
    ("age", "Age (years)", "Enter your age"),
    ("weight", "Weight (kg)", "Enter your weight in kg"),
    ("height", "Height (m)", "Enter your height in meters"),
    ("par", "PAR Score (0-15)", "Physical Activity Rating (0-15)"),
)


class CalculatorWidget(QWidget):
    """Input form and results for the VO2max calculator."""

    status_message = pyqtSignal(str)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._results: FitnessResults | None = None
        self._edits: dict[str, QLineEdit] = {}
        self._errors: dict[str, QLabel] = {}
        self._value_labels: dict[str, QLabel] = {}
        self._build_ui()

    @property
    def results(self) -> FitnessResults | None:
        return self._results

    # ── build ─────────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(16, 12, 16, 12)
        root.setSpacing(16)

        # ── input card ───────────────────────────────────────────────
        card = QFrame(self)
        card.setObjectName("card")
        root.addWidget(card)
        form = QVBoxLayout(card)
        form.setContentsMargins(24, 20, 24, 20)
        form.setSpacing(6)

        title = QLabel("Input Parameters", card)
        title.setObjectName("sectionLabel")
        form.addWidget(title)

        for field, label, placeholder in _NUMERIC_FIELDS:
            form.addWidget(QLabel(label, card))
            edit = QLineEdit(card)
            edit.setPlaceholderText(placeholder)
            edit.returnPressed.connect(self.calculate)
            self._edits[field] = edit
            form.addWidget(edit)
            if field == "par":
                hint = QLabel(
                    "Physical Activity Rating scale from 0 (lazy) to 15 (very active)",
                    card,
                )
                hint.setObjectName("mutedLabel")
                form.addWidget(hint)
            form.addWidget(self._make_error_label(field, card))

        form.addWidget(QLabel("Sex", card))
        self._sex_combo = QComboBox(card)
        self._sex_combo.addItem("Select sex", None)
        self._sex_combo.addItem("Female", 0)
        self._sex_combo.addItem("Male", 1)
        form.addWidget(self._sex_combo)
        form.addWidget(self._make_error_label("sex", card))

        self._calc_btn = QPushButton("Calculate VO2MAX", card)
        self._calc_btn.setObjectName("primaryButton")
        self._calc_btn.clicked.connect(self.calculate)
        form.addWidget(self._calc_btn)

        # ── results card ─────────────────────────────────────────────
        self._results_card = QFrame(self)
        self._results_card.setObjectName("card")
        self._results_card.setVisible(False)
        root.addWidget(self._results_card)

        res_layout = QVBoxLayout(self._results_card)
        res_layout.setContentsMargins(24, 20, 24, 20)

        head = QHBoxLayout()
        res_title = QLabel("Calculation Results", self._results_card)
        res_title.setObjectName("sectionLabel")
        head.addWidget(res_title)
        head.addStretch()
        self._copy_all_btn = QPushButton("Copy All Results", self._results_card)
        self._copy_all_btn.setObjectName("secondaryButton")
        self._copy_all_btn.clicked.connect(self.copy_all)
        head.addWidget(self._copy_all_btn)
        res_layout.addLayout(head)

        grid = QGridLayout()
        grid.setVerticalSpacing(8)
        row = 0
        section = None
        for _attr, sec, label, unit in RESULT_ROWS:
            if sec != section:
                header = QLabel(sec, self._results_card)
                header.setObjectName("sectionLabel")
                grid.addWidget(header, row, 0, 1, 3)
                row += 1
                section = sec
            grid.addWidget(QLabel(f"{label}:", self._results_card), row, 0)
            value = QLabel("", self._results_card)
            value.setObjectName("resultValue")
            value.setAlignment(Qt.AlignmentFlag.AlignRight)
            self._value_labels[label] = value
            grid.addWidget(value, row, 1)
            copy_btn = QPushButton("Copy", self._results_card)
            copy_btn.setObjectName("secondaryButton")
            copy_btn.clicked.connect(
                lambda _checked=False, lbl=label: self.copy_value(lbl)
            )
            grid.addWidget(copy_btn, row, 2)
            row += 1
        res_layout.addLayout(grid)

        root.addStretch()

    def _make_error_label(self, field: str, parent: QWidget) -> QLabel:
        lbl = QLabel("", parent)
        lbl.setObjectName("errorLabel")
        lbl.setVisible(False)
        self._errors[field] = lbl
        return lbl

    # ── actions ───────────────────────────────────────────────────────────

    def raw_values(self) -> dict[str, object]:
        raw: dict[str, object] = {
            field: edit.text() for field, edit in self._edits.items()
        }
        raw["sex"] = self._sex_combo.currentData()
        return raw

    def calculate(self) -> FitnessResults | None:
        """Validate the form and show results; None if invalid."""
        try:
            inputs = parse_inputs(self.raw_values())
        except InvalidInputError as e:
            self._show_errors(e.errors)
            return None

        self._show_errors({})
        self._results = evaluate(inputs)
        for _sec, label, value, unit in self._results.rows():
            self._value_labels[label].setText(f"{format_value(value)} {unit}")
        self._results_card.setVisible(True)
        return self._results

    def copy_value(self, label: str) -> None:
        if self._results is None:
            return
        for _sec, row_label, value, _unit in self._results.rows():
            if row_label == label:
                QApplication.clipboard().setText(format_value(value))
                self.status_message.emit(f"Copied {label} to clipboard!")
                return

    def copy_all(self) -> None:
        if self._results is None:
            return
        QApplication.clipboard().setText(self._results.report())
        self.status_message.emit("All results copied to clipboard!")

    def _show_errors(self, errors: dict[str, str]) -> None:
        for field, lbl in self._errors.items():
            message = errors.get(field, "")
            lbl.setText(message)
            lbl.setVisible(bool(message))

