"""
Spectrum source backed by an audio file.

The file is decoded once with librosa and transformed into a short-window
magnitude spectrogram. Each ``get_spectrum`` call reads the frame under
the current playback position and reports it the way a browser analyser
node does: temporally smoothed magnitudes mapped from a decibel window
onto bytes.
"""

import logging
from pathlib import Path
from typing import Callable, Union

import librosa
import numpy as np

logger = logging.getLogger(__name__)


class AudioFileSpectrum:
    """
    Serve byte spectra for an audio file at the transport's position.

    Args:
        audio_path: File to decode (anything librosa can load).
        position: Zero-argument callable returning the playback position in seconds.
        n_bins: Number of output bins; the FFT size is twice this.
        sample_rate: Decode sample rate. At the default 44.1 kHz each bin
            spans about 344 Hz, matching a browser analyser with FFT size 128.
        smoothing: Time constant blending each read with the previous one (0-1).
        min_db: Decibel level mapped to 0.
        max_db: Decibel level mapped to 255.
    """

    def __init__(
        self,
        audio_path: Union[str, Path],
        position: Callable[[], float],
        n_bins: int = 64,
        sample_rate: int = 44100,
        smoothing: float = 0.8,
        min_db: float = -100.0,
        max_db: float = -30.0,
    ):
        if not 0.0 <= smoothing < 1.0:
            raise ValueError(f"smoothing must be in [0, 1), got {smoothing}")
        if max_db <= min_db:
            raise ValueError("max_db must be greater than min_db")

        self.audio_path = Path(audio_path)
        self.position = position
        self.n_bins = n_bins
        self.n_fft = n_bins * 2
        self.smoothing = smoothing
        self.min_db = min_db
        self.max_db = max_db

        logger.info("Decoding audio: %s", self.audio_path)
        y, self.sample_rate = librosa.load(self.audio_path, sr=sample_rate, mono=True)
        self.duration = librosa.get_duration(y=y, sr=self.sample_rate)
        self.hop_length = self.n_fft
        self.magnitudes = self._magnitude_frames(y)
        self._smoothed = np.zeros(n_bins, dtype=np.float32)
        logger.info(
            "Prepared %d spectrum frames (%.1fs at %d Hz)",
            self.magnitudes.shape[1],
            self.duration,
            self.sample_rate,
        )

    def _magnitude_frames(self, y: np.ndarray) -> np.ndarray:
        """(n_bins, n_frames) linear magnitudes, normalized by FFT size."""
        if len(y) < self.n_fft:
            y = np.pad(y, (0, self.n_fft - len(y)))
        stft = librosa.stft(
            y,
            n_fft=self.n_fft,
            hop_length=self.hop_length,
            window="blackman",
            center=False,
        )
        # Drop the Nyquist bin so the frame has exactly n_bins values
        return (np.abs(stft[: self.n_bins]) / self.n_fft).astype(np.float32)

    def bin_frequencies(self) -> np.ndarray:
        """Center frequency in Hz of each output bin."""
        return librosa.fft_frequencies(sr=self.sample_rate, n_fft=self.n_fft)[: self.n_bins]

    def frame_index(self, seconds: float) -> int:
        frame = int(seconds * self.sample_rate / self.hop_length)
        return min(max(frame, 0), self.magnitudes.shape[1] - 1)

    def reset(self):
        """Forget smoothing history, e.g. after a seek."""
        self._smoothed.fill(0.0)

    def to_bytes(self, magnitudes: np.ndarray) -> np.ndarray:
        """Map linear magnitudes through the decibel window onto [0, 255]."""
        db = 20.0 * np.log10(np.maximum(magnitudes, 1e-12))
        scaled = (db - self.min_db) * (255.0 / (self.max_db - self.min_db))
        return np.clip(np.floor(scaled), 0.0, 255.0)

    def get_spectrum(self, buffer: np.ndarray):
        """Fill ``buffer`` with the byte spectrum at the current position."""
        current = self.magnitudes[:, self.frame_index(self.position())]
        self._smoothed = self.smoothing * self._smoothed + (1.0 - self.smoothing) * current
        buffer[:] = self.to_bytes(self._smoothed)[: len(buffer)]

    def __repr__(self) -> str:
        return f"AudioFileSpectrum({self.audio_path.name!r})"
