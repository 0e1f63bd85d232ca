"""Shared test helpers for PaceLab."""

from pacelab.pacer.engine import PacerEngine, PacerMode


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class FakeTones:
    """Records ``play`` calls; optionally fails like a missing audio device."""

    def __init__(self, fail: bool = False):
        self.played: list = []
        self.fail = fail

    def play(self, kind, profile):
        self.played.append((kind, profile))
        if self.fail:
            raise RuntimeError("audio device unavailable")

    @property
    def kinds(self) -> list:
        return [kind for kind, _profile in self.played]


def fire_transition(engine: PacerEngine) -> int:
    """Fire the armed transition immediately; return its scheduled delay."""
    timer = engine._transition_timer
    assert timer.isActive(), "no transition armed"
    delay = timer.interval()
    timer.stop()
    engine._on_transition()
    return delay


def run_to_running(engine: PacerEngine) -> int:
    """Start and fast-forward through the countdown; return elapsed ms."""
    engine.start()
    elapsed = 0
    for _ in range(10):
        if engine.mode == PacerMode.RUNNING:
            break
        elapsed += fire_transition(engine)
    return elapsed


def display_ticks(engine: PacerEngine, count: int) -> None:
    for _ in range(count):
        engine._on_display_tick()
