"""
Radial spectrum renderer.

Each frequency bin becomes a spoke around the canvas center:
- Bin index → angle (one full turn across the spectrum)
- Bin magnitude → spoke length, line width and glow
- Bass → extra length on every spoke and the inner energy glow
- Color policy → tri-band fixed colors or a continuous hue sweep
"""

import colorsys
import math
from dataclasses import dataclass

import numpy as np

from cyberpulse.config import RadialConfig
from cyberpulse.core.bands import BandIntensity
from cyberpulse.surface import DrawingSurface

Color = tuple[int, int, int]


@dataclass(frozen=True)
class SpokeGeometry:
    """Resolved drawing parameters for one bin."""

    index: int
    angle: float
    start: tuple[float, float]
    end: tuple[float, float]
    length: float
    width: float
    glow: float
    color: Color


class TriBandColors:
    """Fixed color per band, keyed by bin index range."""

    def __init__(self, bass_end: int, mid_end: int, bass: Color, mid: Color, treble: Color):
        self.bass_end = bass_end
        self.mid_end = mid_end
        self.bass = bass
        self.mid = mid
        self.treble = treble

    def color_for(self, index: int, n_bins: int) -> Color:
        if index < self.bass_end:
            return self.bass
        if index >= self.mid_end:
            return self.treble
        return self.mid


class HueSweepColors:
    """Continuous hue sweep, ``hue = index / n_bins * 360``."""

    def __init__(self, saturation: float = 1.0, lightness: float = 0.5):
        self.saturation = saturation
        self.lightness = lightness
        self._cache: dict[tuple[int, int], Color] = {}

    def color_for(self, index: int, n_bins: int) -> Color:
        key = (index, n_bins)
        color = self._cache.get(key)
        if color is None:
            r, g, b = colorsys.hls_to_rgb(index / n_bins, self.lightness, self.saturation)
            color = (int(r * 255), int(g * 255), int(b * 255))
            self._cache[key] = color
        return color


def make_color_policy(config: RadialConfig, bass_end: int, mid_end: int):
    """Build the color policy named by ``config.color_policy``."""
    if config.color_policy == "hue":
        return HueSweepColors(config.hue_saturation, config.hue_lightness)
    if config.color_policy == "tri-band":
        return TriBandColors(
            bass_end, mid_end, config.bass_color, config.mid_color, config.treble_color
        )
    raise ValueError(f"Unknown color policy: {config.color_policy!r}")


class RadialSpectrumRenderer:
    """Draws the spectrum as spokes radiating from an inner ring."""

    def __init__(self, config: RadialConfig | None = None, bass_end: int = 10, mid_end: int = 40):
        self.cfg = config or RadialConfig()
        self.colors = make_color_policy(self.cfg, bass_end, mid_end)

    def inner_radius(self, width: float, height: float) -> float:
        return min(width, height) * self.cfg.inner_radius_ratio

    def spokes(
        self,
        spectrum: np.ndarray,
        bass: float,
        center: tuple[float, float],
        inner_radius: float,
        is_playing: bool,
    ) -> list[SpokeGeometry]:
        """
        Compute per-bin geometry without drawing.

        Args:
            spectrum: (N,) magnitudes in [0, 255].
            bass: Normalized bass intensity.
            center: Ring center in surface coordinates.
            inner_radius: Radius where every spoke starts.
            is_playing: Glow is suppressed when playback is inactive.

        Returns:
            One SpokeGeometry per bin, in bin order.
        """
        cfg = self.cfg
        n = len(spectrum)
        cx, cy = center
        radius_scale = inner_radius * cfg.length_ratio
        boost = bass * cfg.bass_boost

        result = []
        for i in range(n):
            amp = min(1.0, max(0.0, float(spectrum[i]) / 255.0))
            angle = (i / n) * 2.0 * math.pi
            length = amp * radius_scale + boost
            cos_a = math.cos(angle)
            sin_a = math.sin(angle)
            start = (cx + cos_a * inner_radius, cy + sin_a * inner_radius)
            end = (cx + cos_a * (inner_radius + length), cy + sin_a * (inner_radius + length))
            result.append(
                SpokeGeometry(
                    index=i,
                    angle=angle,
                    start=start,
                    end=end,
                    length=length,
                    width=cfg.base_line_width + amp * cfg.line_width_gain,
                    glow=amp * cfg.max_glow if is_playing else 0.0,
                    color=self.colors.color_for(i, n),
                )
            )
        return result

    def draw_energy_glow(
        self,
        surface: DrawingSurface,
        center: tuple[float, float],
        inner_radius: float,
        bass: float,
    ):
        """Soft ring of bass-colored light around the spoke origin."""
        if not self.cfg.energy_glow or bass <= 0.0:
            return
        color = self.cfg.energy_glow_color
        surface.radial_gradient(
            center,
            inner_radius * 1.5,
            [
                (0.0, (0, 0, 0), 0.0),
                (0.5, color, bass * self.cfg.energy_glow_alpha),
                (1.0, (0, 0, 0), 0.0),
            ],
        )

    def draw(
        self,
        surface: DrawingSurface,
        spectrum: np.ndarray,
        bands: BandIntensity,
        center: tuple[float, float],
        is_playing: bool,
        glow_radius: int = 8,
        inner_radius: float | None = None,
    ) -> list[SpokeGeometry]:
        """
        Draw the energy glow and all spokes.

        Args:
            inner_radius: Spoke origin radius; derived from the surface size if None.

        Returns:
            The geometry that was drawn.
        """
        if inner_radius is None:
            inner_radius = self.inner_radius(*surface.size)
        self.draw_energy_glow(surface, center, inner_radius, bands.bass)

        geometry = self.spokes(spectrum, bands.bass, center, inner_radius, is_playing)
        for spoke in geometry:
            surface.line(
                spoke.start,
                spoke.end,
                spoke.color,
                width=spoke.width,
                glow=spoke.glow,
                round_cap=True,
            )
        if is_playing:
            surface.flush_glow(glow_radius)
        return geometry
