"""Fitness calculator package."""

from .formulas import (
    FitnessInputs,
    FitnessResults,
    InvalidInputError,
    RESULT_ROWS,
    evaluate,
    format_value,
    parse_inputs,
    validate_inputs,
)

__all__ = [
    "FitnessInputs",
    "FitnessResults",
    "InvalidInputError",
    "RESULT_ROWS",
    "evaluate",
    "format_value",
    "parse_inputs",
    "validate_inputs",
]
