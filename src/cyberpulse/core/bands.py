"""
Band analysis.

Splits a magnitude spectrum into bass, mid and treble ranges and
normalizes each band's mean to [0, 1].
"""

from dataclasses import dataclass

import numpy as np

from cyberpulse.errors import InvalidBandBoundary

MAX_MAGNITUDE = 255.0


@dataclass(frozen=True)
class BandIntensity:
    """Normalized band levels for one tick, each in [0, 1]."""

    bass: float = 0.0
    mid: float = 0.0
    treble: float = 0.0

    def as_dict(self) -> dict[str, float]:
        return {"bass": self.bass, "mid": self.mid, "treble": self.treble}


SILENT = BandIntensity()


def check_band_boundaries(n_bins: int, bass_end: int, mid_end: int):
    """
    Validate split points for an ``n_bins`` spectrum.

    Raises:
        InvalidBandBoundary: If any band would be empty or the indices
            fall outside [0, n_bins].
    """
    if n_bins <= 0 or not (0 < bass_end < mid_end < n_bins):
        raise InvalidBandBoundary(bass_end, mid_end, n_bins)


def _band_mean(values: np.ndarray) -> float:
    level = float(values.mean()) / MAX_MAGNITUDE
    return min(1.0, max(0.0, level))


def analyze_bands(spectrum: np.ndarray, bass_end: int, mid_end: int) -> BandIntensity:
    """
    Compute band intensities with explicit split points.

    Args:
        spectrum: (N,) magnitudes; values outside [0, 255] are clamped.
        bass_end: Exclusive end index of the bass band.
        mid_end: Exclusive end index of the mid band.

    Returns:
        BandIntensity with every field in [0, 1].
    """
    values = np.clip(np.asarray(spectrum, dtype=np.float32), 0.0, MAX_MAGNITUDE)
    check_band_boundaries(len(values), bass_end, mid_end)
    return BandIntensity(
        bass=_band_mean(values[:bass_end]),
        mid=_band_mean(values[bass_end:mid_end]),
        treble=_band_mean(values[mid_end:]),
    )


class BandAnalyzer:
    """
    Band analyzer with split points fixed at construction.

    Boundaries are validated once here so that ``analyze`` can run
    inside a tick without any failure path.
    """

    def __init__(self, n_bins: int = 64, bass_end: int = 10, mid_end: int = 40):
        check_band_boundaries(n_bins, bass_end, mid_end)
        self.n_bins = n_bins
        self.bass_end = bass_end
        self.mid_end = mid_end
        self._scratch = np.zeros(n_bins, dtype=np.float32)

    def analyze(self, spectrum: np.ndarray) -> BandIntensity:
        """
        Analyze one snapshot of length ``n_bins``.

        Args:
            spectrum: (n_bins,) magnitudes.

        Returns:
            BandIntensity for this tick.
        """
        np.clip(spectrum, 0.0, MAX_MAGNITUDE, out=self._scratch)
        values = self._scratch
        return BandIntensity(
            bass=_band_mean(values[: self.bass_end]),
            mid=_band_mean(values[self.bass_end : self.mid_end]),
            treble=_band_mean(values[self.mid_end :]),
        )
