"""
Frame compositing.

Trail persistence before the primary draw, and bass-gated chromatic
aberration after it.
"""

import numpy as np

from cyberpulse.config import EffectsConfig
from cyberpulse.surface import DrawingSurface


def shift_horizontal(frame: np.ndarray, offset: int) -> np.ndarray:
    """
    Translate a frame by ``offset`` pixels along x, filling with black.

    Args:
        frame: (H, W, C) array.
        offset: Positive shifts right, negative shifts left.

    Returns:
        New array of the same shape.
    """
    result = np.zeros_like(frame)
    w = frame.shape[1]
    if offset == 0:
        result[:] = frame
    elif 0 < offset < w:
        result[:, offset:] = frame[:, : w - offset]
    elif -w < offset < 0:
        result[:, : w + offset] = frame[:, -offset:]
    return result


def screen_blend(base: np.ndarray, layer: np.ndarray) -> np.ndarray:
    """
    Screen-blend two uint8 frames: ``1 - (1 - a)(1 - b)``.

    Returns:
        uint8 frame, never darker than either input.
    """
    a = base.astype(np.float32) / 255.0
    b = layer.astype(np.float32) / 255.0
    screen = 1.0 - (1.0 - a) * (1.0 - b)
    return (np.clip(screen, 0.0, 1.0) * 255 + 0.5).astype(np.uint8)


def offset_screen(frame: np.ndarray, offset: int = 3) -> np.ndarray:
    """
    Screen the frame with copies of itself shifted right then left.

    The second pass reads the already-blended result, the same as drawing
    a canvas onto itself twice.

    Args:
        frame: (H, W, 3) uint8 RGB array.
        offset: Horizontal shift in pixels.

    Returns:
        (H, W, 3) uint8 RGB array.
    """
    if offset <= 0:
        return frame
    result = screen_blend(frame, shift_horizontal(frame, offset))
    return screen_blend(result, shift_horizontal(result, -offset))


class CompositeEffects:
    """Per-tick persistence fill and conditional aberration pass."""

    def __init__(self, config: EffectsConfig | None = None):
        self.cfg = config or EffectsConfig()

    def persist(self, surface: DrawingSurface):
        """Cover the previous frame with a partially opaque background fill."""
        width, height = surface.size
        surface.fill_rect(
            (0, 0, width, height),
            self.cfg.background_color,
            alpha=self.cfg.trail_alpha / 255.0,
        )

    def should_aberrate(self, bass: float, is_playing: bool) -> bool:
        cfg = self.cfg
        return (
            cfg.aberration_enabled
            and is_playing
            and cfg.aberration_offset > 0
            and bass > cfg.aberration_threshold
        )

    def apply_aberration(self, surface: DrawingSurface, bass: float, is_playing: bool) -> bool:
        """
        Run the aberration pass over the frame drawn so far.

        Returns:
            True if the frame was modified, False if the step was skipped.
        """
        if not self.should_aberrate(bass, is_playing):
            return False

        frame = surface.pixels()
        surface.put_pixels(offset_screen(frame, offset=self.cfg.aberration_offset))
        return True
