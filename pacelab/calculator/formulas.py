"""VO2max and cycle-ergometer test formulas.

Part 1 — training estimates
---------------------------
- BMI = weight / height²
- VO2max estimate (non-exercise model from PAR, age, BMI, sex)
- Wmax estimate, stage-1 power, and the per-stage increment for an
  eight-stage ramp after stage 1

Part 2 — fitness categories
---------------------------
- Predicted VO2max from age, sex, and weight in pounds
- Trained (x1.2) and untrained (x0.8 .. x1.0) reference bands

Every step consumes the previous results at full precision; rounding to
four decimals happens only when a value is displayed.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Mapping


DISPLAY_DECIMALS = 4
LB_PER_KG = 2.2

FEMALE = 0
MALE = 1

_BMI = "Body Mass Index"
_PART1 = "Part 1: Training Estimates"
_PART2 = "Part 2: Fitness Categories"

# (attribute, section, label, unit) in display order
RESULT_ROWS: tuple[tuple[str, str, str, str], ...] = (
    ("bmi", _BMI, "BMI", "kg/m²"),
    ("vo2max_estimate", _PART1, "VO2MAX Estimate", "ml/kg/min"),
    ("wmax_estimate", _PART1, "WMAX Estimate", "watts"),
    ("stage1_power", _PART1, "Stage 1 Power", "watts"),
    ("subsequent_power", _PART1, "Subsequent Power", "watts"),
    ("predicted_vo2max", _PART2, "Predicted VO2MAX", "ml/kg/min"),
    ("trained_vo2max", _PART2, "Trained VO2MAX", "ml/kg/min"),
    ("untrained_lower", _PART2, "Untrained Lower Bound", "ml/kg/min"),
    ("untrained_upper", _PART2, "Untrained Upper Bound", "ml/kg/min"),
)


class InvalidInputError(ValueError):
    """Raised by :func:`parse_inputs`; ``errors`` maps field → message."""

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = dict(errors)
        detail = "; ".join(f"{k}: {v}" for k, v in self.errors.items())
        super().__init__(f"Invalid calculator input ({detail})")


@dataclass(frozen=True)
class FitnessInputs:
    age: float      # years
    weight: float   # kg
    height: float   # m
    par: float      # Physical Activity Rating, 0-15
    sex: int        # 0 = female, 1 = male


@dataclass(frozen=True)
class FitnessResults:
    bmi: float
    vo2max_estimate: float
    wmax_estimate: float
    stage1_power: float
    subsequent_power: float
    predicted_vo2max: float
    trained_vo2max: float
    untrained_lower: float
    untrained_upper: float

    def rows(self) -> Iterator[tuple[str, str, float, str]]:
        """Yield ``(section, label, value, unit)`` in display order."""
        for attr, section, label, unit in RESULT_ROWS:
            yield (section, label, getattr(self, attr), unit)

    def report(self) -> str:
        """Plain-text summary of every result, for the clipboard."""
        lines = ["VO2MAX Calculator Results"]
        section = None
        for sec, label, value, unit in self.rows():
            if sec != section:
                lines.append("")
                if sec != _BMI:
                    lines.append(sec)
                section = sec
            lines.append(f"{label}: {format_value(value)} {unit}")
        return "\n".join(lines)


def format_value(value: float) -> str:
    return f"{value:.{DISPLAY_DECIMALS}f}"


# ── evaluation ───────────────────────────────────────────────────────────


def body_mass_index(weight: float, height: float) -> float:
    return weight / (height * height)


def vo2max_estimate(par: float, age: float, bmi: float, sex: int) -> float:
    return 56.363 + 1.921 * par - 0.381 * age - 0.754 * bmi + 10.987 * sex


def predicted_vo2max(age: float, sex: int, weight: float) -> float:
    return 79.9 - 0.39 * age - 13.7 * sex - 0.127 * (weight * LB_PER_KG)


def evaluate(inputs: FitnessInputs) -> FitnessResults:
    """Compute all nine outputs for *inputs* (assumed validated)."""
    bmi = body_mass_index(inputs.weight, inputs.height)

    # Part 1
    vo2 = vo2max_estimate(inputs.par, inputs.age, bmi, inputs.sex)
    wmax = ((vo2 - 7) * inputs.weight / 1.8) / 6.12
    stage1 = wmax * 0.25
    subsequent = (wmax - stage1) / 8

    # Part 2
    predicted = predicted_vo2max(inputs.age, inputs.sex, inputs.weight)

    return FitnessResults(
        bmi=bmi,
        vo2max_estimate=vo2,
        wmax_estimate=wmax,
        stage1_power=stage1,
        subsequent_power=subsequent,
        predicted_vo2max=predicted,
        trained_vo2max=predicted * 1.2,
        untrained_lower=predicted * 0.8,
        untrained_upper=predicted * 1.0,
    )


# ── validation ───────────────────────────────────────────────────────────

FIELD_LABELS: dict[str, str] = {
    "age": "Age",
    "weight": "Weight",
    "height": "Height",
    "par": "PAR",
    "sex": "Sex",
}


def validate_inputs(
    age: float, weight: float, height: float, par: float, sex: int,
) -> dict[str, str]:
    """Return ``{field: message}`` for every out-of-range value."""
    errors: dict[str, str] = {}
    if age < 1:
        errors["age"] = "Age must be at least 1"
    elif age > 150:
        errors["age"] = "Age must be less than 150"
    if weight < 1:
        errors["weight"] = "Weight must be greater than 0"
    if height < 0.1:
        errors["height"] = "Height must be greater than 0"
    if par < 0:
        errors["par"] = "PAR must be at least 0"
    elif par > 15:
        errors["par"] = "PAR must be 15 or less"
    if sex not in (FEMALE, MALE):
        errors["sex"] = "Sex must be 0 (female) or 1 (male)"
    return errors


def _coerce(value: object) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip())
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def parse_inputs(raw: Mapping[str, object]) -> FitnessInputs:
    """Build :class:`FitnessInputs` from editor text.

    Raises :class:`InvalidInputError` listing every missing, non-numeric,
    or out-of-range field.
    """
    values: dict[str, float] = {}
    errors: dict[str, str] = {}
    for field, label in FIELD_LABELS.items():
        text = raw.get(field)
        if text is None or str(text).strip() == "":
            errors[field] = f"{label} is required"
            continue
        number = _coerce(text)
        if number is None:
            errors[field] = f"{label} must be a number"
            continue
        values[field] = number

    if not errors:
        errors = validate_inputs(**values)
    if errors:
        raise InvalidInputError(errors)

    return FitnessInputs(
        age=values["age"],
        weight=values["weight"],
        height=values["height"],
        par=values["par"],
        sex=int(values["sex"]),
    )
