"""
Frequency snapshot sampling.

Pulls one magnitude spectrum per tick from an attached source and
degrades to silence when there is nothing to sample.
"""

import logging
from typing import Protocol

import numpy as np

logger = logging.getLogger(__name__)

MAX_MAGNITUDE = 255.0


class SpectrumSource(Protocol):
    """Anything that can report the current magnitude spectrum."""

    def get_spectrum(self, buffer: np.ndarray) -> None:
        """Fill ``buffer`` in place with magnitudes in [0, 255]."""
        ...


class FrequencySampler:
    """
    Produces a fixed-length spectrum every tick.

    The returned array is reused between calls and overwritten on the
    next ``sample()``; copy it if it must outlive the tick.
    """

    def __init__(self, n_bins: int = 64, source: SpectrumSource | None = None):
        if n_bins <= 0:
            raise ValueError(f"n_bins must be positive, got {n_bins}")
        self.n_bins = n_bins
        self._source = source
        # Float scratch buffer so out-of-range writes survive until clamping
        self._raw = np.zeros(n_bins, dtype=np.float32)
        self._spectrum = np.zeros(n_bins, dtype=np.float32)
        self._warned_missing = False
        self._failing = False

    @property
    def source(self) -> SpectrumSource | None:
        return self._source

    @property
    def has_source(self) -> bool:
        return self._source is not None

    def attach(self, source: SpectrumSource):
        """Replace the current source with ``source``."""
        if self._source is not None and self._source is not source:
            logger.info("Replacing spectrum source %r with %r", self._source, source)
        else:
            logger.info("Attached spectrum source %r", source)
        self._source = source
        self._warned_missing = False
        self._failing = False

    def detach(self):
        """Drop the current source; subsequent samples are silent."""
        if self._source is not None:
            logger.info("Detached spectrum source %r", self._source)
        self._source = None

    def silence(self) -> np.ndarray:
        """Zero the snapshot and return it."""
        self._spectrum.fill(0.0)
        return self._spectrum

    def sample(self, is_playing: bool = True) -> np.ndarray:
        """
        Take this tick's snapshot.

        Args:
            is_playing: Polled playback flag. When False the snapshot is silent.

        Returns:
            (n_bins,) float32 array with values clamped to [0, 255].
        """
        if self._source is None:
            if not self._warned_missing:
                logger.debug("No spectrum source attached; sampling silence")
                self._warned_missing = True
            return self.silence()

        if not is_playing:
            return self.silence()

        self._raw.fill(0.0)
        try:
            self._source.get_spectrum(self._raw)
        except Exception:
            # Logged once per run of failures; the next good read re-arms it
            if not self._failing:
                logger.exception("Spectrum source failed; sampling silence until it recovers")
                self._failing = True
            return self.silence()
        if self._failing:
            logger.info("Spectrum source %r recovered", self._source)
            self._failing = False

        np.nan_to_num(self._raw, copy=False, nan=0.0, posinf=MAX_MAGNITUDE, neginf=0.0)
        np.clip(self._raw, 0.0, MAX_MAGNITUDE, out=self._spectrum)
        return self._spectrum
