"""Tests for bass onset detection."""

import numpy as np
import pytest

from cyberpulse.core.bands import BandAnalyzer
from cyberpulse.core.beat import BeatDetector


class TestBeatDetector:
    """Tests for single-derivative onset detection."""

    def test_silence_never_fires(self):
        detector = BeatDetector()
        analyzer = BandAnalyzer()
        silent = np.zeros(64, dtype=np.float32)
        for _ in range(500):
            assert detector.update(analyzer.analyze(silent).bass) is None

    def test_rise_above_threshold_fires(self):
        detector = BeatDetector(threshold=0.15, base_force=15.0, scale_factor=20.0)
        detector.previous_bass = 0.1
        event = detector.update(0.3)
        assert event is not None
        assert event.delta == pytest.approx(0.2)
        assert event.intensity == pytest.approx(15.0 + 0.2 * 20.0)
        assert event.intensity >= detector.base_force

    def test_rise_at_threshold_does_not_fire(self):
        detector = BeatDetector(threshold=0.25)
        detector.previous_bass = 0.25
        assert detector.update(0.5) is None

    def test_falling_bass_never_fires(self):
        detector = BeatDetector()
        detector.previous_bass = 1.0
        assert detector.update(0.0) is None

    def test_previous_bass_updated_every_tick(self):
        detector = BeatDetector()
        for bass in (0.05, 0.1, 0.9, 0.85, 0.0):
            detector.update(bass)
            assert detector.previous_bass == bass

    def test_sustained_bass_fires_once(self):
        detector = BeatDetector()
        events = [detector.update(1.0) for _ in range(30)]
        assert sum(e is not None for e in events) == 1
        assert events[0] is not None

    def test_input_clamped(self):
        detector = BeatDetector()
        event = detector.update(3.0)
        assert event is not None
        assert detector.previous_bass == 1.0

    def test_reset(self):
        detector = BeatDetector()
        detector.update(0.8)
        detector.reset()
        assert detector.previous_bass == 0.0
