"""Spectrum sources backed by external media."""

from cyberpulse.io.audio_source import AudioFileSpectrum

__all__ = ["AudioFileSpectrum"]
