"""Breathing cue synthesis and playback using numpy + QSoundEffect.

Every cue is a short oscillator burst with an exponential fade, generated
programmatically as a WAV file.  Files are cached to disk so subsequent
launches only have to load them.

Cue kinds
---------
- ``inhale``     — 800 Hz, marks the start of a breath in
- ``exhale``     — 600 Hz, marks the start of a breath out
- ``countdown``  — 440 Hz tick for 3, 2, 1 (optional)
- ``go``         — 880 Hz, the end of the countdown (optional)

Tone profiles change waveform, gain and pitch, never timing:

=========  ==========  =====  =====
profile    waveform    gain   pitch
=========  ==========  =====  =====
sine       sine        0.30   x1.0
bell       triangle    0.30   x1.5
chime      square      0.10   x1.0
soft       sine        0.15   x0.8
=========  ==========  =====  =====
"""

from __future__ import annotations

import io
import logging
import wave
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import numpy as np

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect

from ..constants import get_tone_cache_dir

logger = logging.getLogger(__name__)


SAMPLE_RATE = 44100
FADE_FLOOR = 0.01      # exponential ramp target gain
ATTACK_SAMPLES = 220   # ~5 ms linear fade-in


class ToneProfile(Enum):
    SINE = "sine"
    BELL = "bell"
    CHIME = "chime"
    SOFT = "soft"


class ToneKind(Enum):
    INHALE = "inhale"
    EXHALE = "exhale"
    COUNTDOWN = "countdown"
    GO = "go"


PROFILE_LABELS: dict[ToneProfile, str] = {
    ToneProfile.SINE: "Classic",
    ToneProfile.BELL: "Bell",
    ToneProfile.CHIME: "Chime",
    ToneProfile.SOFT: "Soft",
}

# (base frequency Hz, duration s)
_KIND_BASE: dict[ToneKind, tuple[float, float]] = {
    ToneKind.INHALE: (800.0, 0.20),
    ToneKind.EXHALE: (600.0, 0.20),
    ToneKind.COUNTDOWN: (440.0, 0.15),
    ToneKind.GO: (880.0, 0.30),
}

# (waveform, gain, pitch multiplier)
_PROFILE_VOICING: dict[ToneProfile, tuple[str, float, float]] = {
    ToneProfile.SINE: ("sine", 0.30, 1.0),
    ToneProfile.BELL: ("triangle", 0.30, 1.5),
    ToneProfile.CHIME: ("square", 0.10, 1.0),
    ToneProfile.SOFT: ("sine", 0.15, 0.8),
}


@dataclass(frozen=True)
class ToneSpec:
    frequency: float
    waveform: str
    gain: float
    duration_s: float


def tone_spec(kind: ToneKind, profile: ToneProfile) -> ToneSpec:
    """Resolve the oscillator settings for one cue."""
    base_freq, duration = _KIND_BASE[kind]
    waveform, gain, pitch = _PROFILE_VOICING[profile]
    return ToneSpec(
        frequency=base_freq * pitch,
        waveform=waveform,
        gain=gain,
        duration_s=duration,
    )


# ═══════════════════════════════════════════════════════════════════════════
#  WAV SYNTHESIS
# ═══════════════════════════════════════════════════════════════════════════


def _oscillator(waveform: str, freq: float, duration_s: float) -> np.ndarray:
    """Unit-amplitude periodic wave at *freq* Hz."""
    t = np.linspace(0, duration_s, int(SAMPLE_RATE * duration_s), endpoint=False)
    phase = 2 * np.pi * freq * t
    if waveform == "sine":
        return np.sin(phase)
    if waveform == "triangle":
        return (2 / np.pi) * np.arcsin(np.sin(phase))
    if waveform == "square":
        return np.sign(np.sin(phase))
    raise ValueError(f"Unknown waveform: {waveform!r}")


def _fade_envelope(length: int, gain: float) -> np.ndarray:
    """Exponential ramp from *gain* down to FADE_FLOOR, with a short attack."""
    env = np.geomspace(gain, FADE_FLOOR, length)
    a = min(ATTACK_SAMPLES, length)
    if a > 0:
        env[:a] *= np.linspace(0.0, 1.0, a)
    return env


def _to_wav_bytes(samples: np.ndarray) -> bytes:
    """Convert a float64 numpy array (-1..1) to 16-bit PCM WAV bytes."""
    samples = np.clip(samples, -1.0, 1.0)
    int_samples = (samples * 32767).astype(np.int16)

    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(int_samples.tobytes())
    return buf.getvalue()


def synthesize(spec: ToneSpec) -> bytes:
    """Render *spec* as a mono WAV file, padded so playback doesn't clip."""
    tone = _oscillator(spec.waveform, spec.frequency, spec.duration_s)
    tone = tone * _fade_envelope(len(tone), spec.gain)
    padded = np.concatenate([tone, np.zeros(int(SAMPLE_RATE * 0.03))])
    return _to_wav_bytes(padded)


def cue_filename(kind: ToneKind, profile: ToneProfile) -> str:
    return f"{profile.value}_{kind.value}.wav"


# ═══════════════════════════════════════════════════════════════════════════
#  TONE MANAGER
# ═══════════════════════════════════════════════════════════════════════════


class ToneManager(QObject):
    """Shared audio handle: synthesis, caching, and best-effort playback.

    Created once per process and reused by every pacing run.  Nothing in
    here raises to the caller; when audio is unavailable the cues are
    simply skipped.

    Usage::

        tones = ToneManager(parent=self)
        tones.set_volume(70)
        tones.play(ToneKind.INHALE, ToneProfile.BELL)
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        cache_dir: Path | None = None,
    ) -> None:
        super().__init__(parent)
        self._enabled = True
        self._volume = 1.0  # 0.0–1.0
        self._cache_dir = cache_dir or get_tone_cache_dir()
        self._effects: dict[tuple[ToneProfile, ToneKind], QSoundEffect] = {}
        self._available = False

        try:
            self._ensure_wav_files()
            self._load_effects()
            self._available = True
        except Exception as e:
            logger.warning("Audio cues unavailable: %s", e)

    # ── public API ────────────────────────────────────────────────────

    @property
    def available(self) -> bool:
        return self._available

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def volume(self) -> int:
        """Current volume as 0-100 integer."""
        return round(self._volume * 100)

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def set_volume(self, level: int) -> None:
        """Set volume (0-100).  Updates all loaded effects."""
        self._volume = max(0, min(level, 100)) / 100.0
        for effect in self._effects.values():
            effect.setVolume(self._volume)

    def play(self, kind: ToneKind, profile: ToneProfile) -> None:
        """Play one cue.  No-op if disabled, unavailable, or unknown."""
        if not self._enabled:
            return
        effect = self._effects.get((profile, kind))
        if effect is None:
            return
        try:
            effect.play()
        except Exception as e:
            logger.warning("Failed to play %s/%s cue: %s",
                           profile.value, kind.value, e)

    def preview(self, profile: ToneProfile) -> None:
        """Sample a profile (the inhale cue) from the settings panel."""
        self.play(ToneKind.INHALE, profile)

    # ── internal ──────────────────────────────────────────────────────

    def _ensure_wav_files(self) -> None:
        """Generate any missing WAV files to the cache directory."""
        self._cache_dir.mkdir(parents=True, exist_ok=True)
        for profile in ToneProfile:
            for kind in ToneKind:
                path = self._cache_dir / cue_filename(kind, profile)
                if not path.exists():
                    path.write_bytes(synthesize(tone_spec(kind, profile)))

    def _load_effects(self) -> None:
        """Create QSoundEffect instances from cached WAV files."""
        for profile in ToneProfile:
            for kind in ToneKind:
                path = self._cache_dir / cue_filename(kind, profile)
                if path.exists():
                    effect = QSoundEffect(self)
                    effect.setSource(QUrl.fromLocalFile(str(path)))
                    effect.setVolume(self._volume)
                    self._effects[(profile, kind)] = effect
        logger.debug("Loaded %d audio cues from %s",
                     len(self._effects), self._cache_dir)
