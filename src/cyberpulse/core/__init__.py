"""Per-tick audio analysis: sampling, band split and beat detection."""

from cyberpulse.core.bands import BandAnalyzer, BandIntensity
from cyberpulse.core.beat import BeatDetector, BeatEvent
from cyberpulse.core.sampler import FrequencySampler, SpectrumSource

__all__ = [
    "BandAnalyzer",
    "BandIntensity",
    "BeatDetector",
    "BeatEvent",
    "FrequencySampler",
    "SpectrumSource",
]
