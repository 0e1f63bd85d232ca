"""PaceLab — VO2max calculator and breathing pacer."""

__version__ = "0.1.0"
