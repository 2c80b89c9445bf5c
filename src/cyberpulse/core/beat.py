"""
Bass onset detection.

A single-derivative detector: a beat fires when bass rises by more
than ``threshold`` between consecutive ticks.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class BeatEvent:
    """A detected onset. ``intensity`` scales the pulse impulse."""

    intensity: float
    delta: float


class BeatDetector:
    """
    Emits at most one BeatEvent per tick.

    The previous bass level is overwritten on every call, whether or
    not the current tick produced an event.
    """

    def __init__(
        self,
        threshold: float = 0.15,
        base_force: float = 15.0,
        scale_factor: float = 20.0,
    ):
        self.threshold = threshold
        self.base_force = base_force
        self.scale_factor = scale_factor
        self.previous_bass = 0.0

    def reset(self):
        self.previous_bass = 0.0

    def update(self, bass: float) -> BeatEvent | None:
        """
        Feed this tick's bass level.

        Args:
            bass: Normalized bass intensity in [0, 1].

        Returns:
            A BeatEvent if the rise exceeded the threshold, else None.
        """
        bass = min(1.0, max(0.0, bass))
        delta = bass - self.previous_bass
        self.previous_bass = bass

        if delta > self.threshold:
            return BeatEvent(
                intensity=self.base_force + delta * self.scale_factor,
                delta=delta,
            )
        return None
