"""
Exception types raised by the CyberPulse engine.
"""


class CyberPulseError(Exception):
    """Base class for all CyberPulse errors."""


class InvalidBandBoundary(CyberPulseError, ValueError):
    """Band split points are out of range or produce an empty band."""

    def __init__(self, bass_end: int, mid_end: int, n_bins: int):
        self.bass_end = bass_end
        self.mid_end = mid_end
        self.n_bins = n_bins
        super().__init__(
            f"Invalid band boundaries bass_end={bass_end}, mid_end={mid_end} "
            f"for {n_bins} bins (need 0 < bass_end < mid_end < n_bins)"
        )


class SurfaceUnavailable(CyberPulseError, RuntimeError):
    """The drawing surface is missing or not ready to be drawn on."""
