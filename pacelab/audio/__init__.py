"""Audio package."""

from .tones import (
    ToneManager,
    ToneKind,
    ToneProfile,
    ToneSpec,
    PROFILE_LABELS,
    tone_spec,
    synthesize,
)

__all__ = [
    "ToneManager",
    "ToneKind",
    "ToneProfile",
    "ToneSpec",
    "PROFILE_LABELS",
    "tone_spec",
    "synthesize",
]
