"""UI package."""

from .pacer_widget import PacerWidget
from .calculator_widget import CalculatorWidget
from .breathing_circle import BreathingCircle

__all__ = [
    "PacerWidget",
    "CalculatorWidget",
    "BreathingCircle",
]
