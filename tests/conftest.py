"""Pytest configuration and shared fixtures."""

import os

# Headless pygame: must be set before pygame is imported anywhere
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import numpy as np
import pytest

from cyberpulse.config import VisualizerConfig
from cyberpulse.scheduler import FrameClock

N_BINS = 64


class RecordingSurface:
    """
    In-memory DrawingSurface that records every primitive call.

    ``pixels``/``put_pixels`` operate on a real numpy frame so compositing
    can be asserted on.
    """

    def __init__(self, width: int = 320, height: int = 240, ready: bool = True):
        self.width = width
        self.height = height
        self.is_ready = ready
        self.frame = np.zeros((height, width, 3), dtype=np.uint8)
        self.calls: list[tuple] = []

    @property
    def ready(self) -> bool:
        return self.is_ready

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    def resize(self, width, height):
        self.calls.append(("resize", width, height))
        self.width, self.height = width, height
        self.frame = np.zeros((height, width, 3), dtype=np.uint8)

    def fill_rect(self, rect, color, alpha=1.0):
        self.calls.append(("fill_rect", tuple(rect), color, alpha))

    def circle(self, center, radius, color, alpha=1.0, width=0):
        self.calls.append(("circle", center, radius, color, alpha, width))

    def line(self, start, end, color, width=1.0, alpha=1.0, glow=0.0, round_cap=False):
        self.calls.append(("line", start, end, color, width, alpha, glow, round_cap))

    def lines(self, segments, color, width=1.0, alpha=1.0):
        self.calls.append(("lines", list(segments), color, width, alpha))

    def radial_gradient(self, center, radius, stops):
        self.calls.append(("radial_gradient", center, radius, list(stops)))

    def flush_glow(self, radius):
        self.calls.append(("flush_glow", radius))

    def text(self, position, text, color, alpha=1.0):
        self.calls.append(("text", position, text, color, alpha))

    def pixels(self):
        return self.frame.copy()

    def put_pixels(self, frame):
        self.calls.append(("put_pixels",))
        self.frame = np.array(frame, dtype=np.uint8)

    def named(self, name: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == name]

    def call_order(self) -> list[str]:
        return [c[0] for c in self.calls]


class ConstantSource:
    """Spectrum source returning the same values every tick."""

    def __init__(self, values):
        self.values = np.asarray(values, dtype=np.float32)
        self.reads = 0

    def get_spectrum(self, buffer):
        self.reads += 1
        buffer[:] = self.values


class SequenceSource:
    """Spectrum source stepping through a list of spectra, holding the last."""

    def __init__(self, spectra):
        self.spectra = [np.asarray(s, dtype=np.float32) for s in spectra]
        self.index = 0

    def get_spectrum(self, buffer):
        buffer[:] = self.spectra[min(self.index, len(self.spectra) - 1)]
        self.index += 1


def bass_spectrum(level: float, n_bins: int = N_BINS, bass_end: int = 10) -> np.ndarray:
    """Spectrum with only the bass band lit at ``level`` (0-1)."""
    spectrum = np.zeros(n_bins, dtype=np.float32)
    spectrum[:bass_end] = level * 255.0
    return spectrum


@pytest.fixture
def recording_surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def frame_clock() -> FrameClock:
    return FrameClock()


@pytest.fixture
def small_config() -> VisualizerConfig:
    """Small, seeded config that keeps tests fast and deterministic."""
    cfg = VisualizerConfig(width=320, height=240, seed=7)
    cfg.particles.count = 40
    return cfg.validate()


@pytest.fixture
def kick_spectrum() -> np.ndarray:
    """Ten saturated bass bins followed by fifty-four silent bins."""
    spectrum = np.zeros(N_BINS, dtype=np.float32)
    spectrum[:10] = 255.0
    return spectrum


@pytest.fixture
def random_spectra() -> list[np.ndarray]:
    """Reproducible random byte spectra."""
    rng = np.random.default_rng(42)
    return [rng.integers(0, 256, N_BINS).astype(np.float32) for _ in range(50)]


@pytest.fixture
def sample_rate() -> int:
    return 22050


@pytest.fixture
def temp_audio_file(tmp_path, sample_rate):
    """Two seconds of a 120 BPM low click track over a quiet sine."""
    import soundfile as sf

    duration = 2.0
    t = np.linspace(0, duration, int(sample_rate * duration), endpoint=False)
    y = 0.1 * np.sin(2 * np.pi * 440.0 * t)

    samples_per_beat = int(sample_rate * 0.5)
    click_len = int(sample_rate * 0.05)
    for start in range(0, len(y), samples_per_beat):
        end = min(start + click_len, len(y))
        n = end - start
        y[start:end] += 0.8 * np.sin(2 * np.pi * 80.0 * t[:n]) * np.exp(-np.linspace(0, 5, n))

    audio_path = tmp_path / "clicks.wav"
    sf.write(audio_path, y.astype(np.float32), sample_rate)
    return audio_path
