"""Shared pytest fixtures for PaceLab tests."""

import os
import sys
import pytest

# Widgets and timers need a platform plugin even on headless CI
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication

from pacelab.pacer.config import PacerConfig
from pacelab.pacer.engine import PacerEngine

from helpers import FakeTones


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def tone_cache(tmp_path, monkeypatch):
    """Keep synthesized cues out of the real application-support dir."""
    path = tmp_path / "tones"
    monkeypatch.setenv("PACELAB_CACHE_DIR", str(path))
    return path


@pytest.fixture
def config():
    """Default configuration: 4 s in, 6 s out, unbounded, sound on."""
    return PacerConfig()


@pytest.fixture
def tones():
    return FakeTones()


@pytest.fixture
def engine(qapp, config, tones):
    """Fresh PacerEngine with a recording tone player."""
    return PacerEngine(parent=None, config=config, tones=tones)


@pytest.fixture
def bounded_engine(qapp, tones):
    """Engine limited to 3 cycles with short 1 s / 2 s phases."""
    cfg = PacerConfig()
    cfg.set_breath_in_ms(1000)
    cfg.set_breath_out_ms(2000)
    cfg.set_cycle_limit(3)
    return PacerEngine(parent=None, config=cfg, tones=tones)
