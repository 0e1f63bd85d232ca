"""Tests for cue synthesis, WAV caching, and the ToneManager."""

import io
import wave

import numpy as np
import pytest

from pacelab.audio.tones import (
    ToneKind, ToneManager, ToneProfile, ToneSpec,
    PROFILE_LABELS, SAMPLE_RATE,
    _fade_envelope, _oscillator, cue_filename, synthesize, tone_spec,
)


def _read_wav(data: bytes):
    with wave.open(io.BytesIO(data), "rb") as wf:
        params = wf.getparams()
        frames = np.frombuffer(wf.readframes(params.nframes), dtype=np.int16)
    return params, frames


# ═══════════════════════════════════════════════════════════════════════════
#  TONE SPECS
# ═══════════════════════════════════════════════════════════════════════════


class TestToneSpec:

    def test_classic_inhale_and_exhale(self):
        assert tone_spec(ToneKind.INHALE, ToneProfile.SINE) == ToneSpec(
            frequency=800.0, waveform="sine", gain=0.30, duration_s=0.20,
        )
        assert tone_spec(ToneKind.EXHALE, ToneProfile.SINE).frequency == 600.0

    def test_bell_raises_pitch(self):
        spec = tone_spec(ToneKind.INHALE, ToneProfile.BELL)
        assert spec.waveform == "triangle"
        assert spec.frequency == pytest.approx(1200.0)

    def test_soft_is_quieter_and_lower(self):
        spec = tone_spec(ToneKind.EXHALE, ToneProfile.SOFT)
        assert spec.gain == pytest.approx(0.15)
        assert spec.frequency == pytest.approx(480.0)

    def test_chime_is_square(self):
        assert tone_spec(ToneKind.INHALE, ToneProfile.CHIME).waveform == "square"

    @pytest.mark.parametrize("profile", list(ToneProfile))
    def test_profile_never_changes_duration(self, profile):
        for kind in ToneKind:
            assert (tone_spec(kind, profile).duration_s
                    == tone_spec(kind, ToneProfile.SINE).duration_s)

    def test_every_profile_has_a_label(self):
        assert set(PROFILE_LABELS) == set(ToneProfile)
        assert PROFILE_LABELS[ToneProfile.SINE] == "Classic"

    def test_cue_filename(self):
        assert cue_filename(ToneKind.GO, ToneProfile.BELL) == "bell_go.wav"


# ═══════════════════════════════════════════════════════════════════════════
#  SYNTHESIS
# ═══════════════════════════════════════════════════════════════════════════


class TestSynthesis:

    def test_wav_format(self):
        data = synthesize(tone_spec(ToneKind.INHALE, ToneProfile.SINE))
        params, frames = _read_wav(data)
        assert params.nchannels == 1
        assert params.sampwidth == 2
        assert params.framerate == SAMPLE_RATE
        # 0.2 s tone plus 0.03 s of silence
        assert len(frames) == int(SAMPLE_RATE * 0.2) + int(SAMPLE_RATE * 0.03)

    def test_tail_is_silent(self):
        _params, frames = _read_wav(
            synthesize(tone_spec(ToneKind.EXHALE, ToneProfile.SINE))
        )
        assert not frames[-int(SAMPLE_RATE * 0.03):].any()

    def test_peak_stays_within_gain(self):
        spec = tone_spec(ToneKind.GO, ToneProfile.CHIME)
        _params, frames = _read_wav(synthesize(spec))
        assert np.abs(frames).max() <= spec.gain * 32767 + 1

    @pytest.mark.parametrize("waveform", ["sine", "triangle", "square"])
    def test_oscillator_is_unit_amplitude(self, waveform):
        wave_ = _oscillator(waveform, 440.0, 0.1)
        assert len(wave_) == int(SAMPLE_RATE * 0.1)
        assert np.abs(wave_).max() <= 1.0 + 1e-9

    def test_unknown_waveform_raises(self):
        with pytest.raises(ValueError, match="Unknown waveform"):
            _oscillator("sawtooth", 440.0, 0.1)

    def test_envelope_fades_to_floor(self):
        env = _fade_envelope(1000, 0.3)
        assert env[0] == 0.0
        assert env[-1] == pytest.approx(0.01)
        # decaying after the attack
        assert np.all(np.diff(env[300:]) <= 0)


# ═══════════════════════════════════════════════════════════════════════════
#  TONE MANAGER
# ═══════════════════════════════════════════════════════════════════════════


@pytest.mark.usefixtures("qapp")
class TestToneManager:

    def test_generates_every_cue(self, tmp_path):
        mgr = ToneManager(cache_dir=tmp_path)
        assert mgr.available
        for profile in ToneProfile:
            for kind in ToneKind:
                assert (tmp_path / cue_filename(kind, profile)).exists()
        assert len(mgr._effects) == len(ToneProfile) * len(ToneKind)

    def test_existing_files_are_reused(self, tmp_path):
        ToneManager(cache_dir=tmp_path)
        target = tmp_path / cue_filename(ToneKind.INHALE, ToneProfile.SINE)
        mtime = target.stat().st_mtime_ns
        ToneManager(cache_dir=tmp_path)
        assert target.stat().st_mtime_ns == mtime

    def test_default_cache_dir_follows_environment(self, tone_cache):
        ToneManager()
        assert (tone_cache / "sine_inhale.wav").exists()

    def test_unwritable_cache_dir_disables_audio(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("occupied")
        mgr = ToneManager(cache_dir=blocker / "tones")
        assert not mgr.available
        # playback stays silent rather than raising
        mgr.play(ToneKind.INHALE, ToneProfile.SINE)
        mgr.preview(ToneProfile.BELL)

    def test_volume_clamped(self, tmp_path):
        mgr = ToneManager(cache_dir=tmp_path)
        mgr.set_volume(150)
        assert mgr.volume == 100
        mgr.set_volume(-10)
        assert mgr.volume == 0
        mgr.set_volume(40)
        assert mgr.volume == 40
        assert all(e.volume() == pytest.approx(0.4)
                   for e in mgr._effects.values())

    def test_disabled_manager_skips_playback(self, tmp_path):
        mgr = ToneManager(cache_dir=tmp_path)
        played = []
        for effect in mgr._effects.values():
            effect.play = lambda: played.append(True)
        mgr.set_enabled(False)
        mgr.play(ToneKind.INHALE, ToneProfile.SINE)
        assert played == []
        assert not mgr.enabled

    def test_play_uses_matching_effect(self, tmp_path):
        mgr = ToneManager(cache_dir=tmp_path)
        played = []
        for key, effect in mgr._effects.items():
            effect.play = lambda key=key: played.append(key)
        mgr.play(ToneKind.EXHALE, ToneProfile.BELL)
        mgr.preview(ToneProfile.SOFT)
        assert played == [
            (ToneProfile.BELL, ToneKind.EXHALE),
            (ToneProfile.SOFT, ToneKind.INHALE),
        ]

    def test_play_failure_is_swallowed(self, tmp_path):
        mgr = ToneManager(cache_dir=tmp_path)

        def boom():
            raise RuntimeError("device lost")

        mgr._effects[(ToneProfile.SINE, ToneKind.GO)].play = boom
        mgr.play(ToneKind.GO, ToneProfile.SINE)
