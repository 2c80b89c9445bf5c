"""Tests for band analysis."""

import numpy as np
import pytest

from cyberpulse.core.bands import BandAnalyzer, BandIntensity, analyze_bands
from cyberpulse.errors import InvalidBandBoundary


class TestBandAnalyzer:
    def test_outputs_in_unit_range(self, random_spectra):
        analyzer = BandAnalyzer(64, 10, 40)
        for spectrum in random_spectra:
            bands = analyzer.analyze(spectrum)
            for value in (bands.bass, bands.mid, bands.treble):
                assert 0.0 <= value <= 1.0

    def test_kick_spectrum_is_pure_bass(self, kick_spectrum):
        bands = BandAnalyzer(64, 10, 40).analyze(kick_spectrum)
        assert bands == BandIntensity(bass=1.0, mid=0.0, treble=0.0)

    def test_band_means(self):
        spectrum = np.zeros(64, dtype=np.float32)
        spectrum[:10] = 51.0
        spectrum[10:40] = 102.0
        spectrum[40:] = 255.0
        bands = BandAnalyzer(64, 10, 40).analyze(spectrum)
        assert bands.bass == pytest.approx(0.2)
        assert bands.mid == pytest.approx(0.4)
        assert bands.treble == pytest.approx(1.0)

    def test_out_of_range_values_clamped(self):
        spectrum = np.zeros(64, dtype=np.float32)
        spectrum[:10] = 1000.0
        spectrum[10:40] = -50.0
        bands = BandAnalyzer(64, 10, 40).analyze(spectrum)
        assert bands.bass == 1.0
        assert bands.mid == 0.0

    def test_does_not_mutate_input(self):
        spectrum = np.full(64, 300.0, dtype=np.float32)
        BandAnalyzer(64, 10, 40).analyze(spectrum)
        assert spectrum[0] == 300.0

    def test_silence(self):
        bands = BandAnalyzer().analyze(np.zeros(64, dtype=np.float32))
        assert bands.as_dict() == {"bass": 0.0, "mid": 0.0, "treble": 0.0}


class TestBandBoundaries:
    @pytest.mark.parametrize(
        "bass_end, mid_end",
        [(0, 40), (10, 10), (40, 10), (10, 64), (10, 70), (-1, 40)],
    )
    def test_invalid_boundaries_rejected(self, bass_end, mid_end):
        with pytest.raises(InvalidBandBoundary):
            BandAnalyzer(64, bass_end, mid_end)

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            BandAnalyzer(64, 40, 10)

    def test_explicit_split_function(self):
        spectrum = np.arange(8, dtype=np.float32) * 30.0
        bands = analyze_bands(spectrum, 2, 5)
        assert bands.bass == pytest.approx(15.0 / 255.0)
        assert bands.mid == pytest.approx(90.0 / 255.0)
        assert bands.treble == pytest.approx(180.0 / 255.0)

    def test_explicit_split_validates(self):
        with pytest.raises(InvalidBandBoundary):
            analyze_bands(np.zeros(8), 5, 8)
