"""
Configuration for the CyberPulse visualizer.

All tunables live in plain dataclasses grouped by pipeline stage.
A JSON file with one object per section can be loaded with
``load_config`` and is validated before any tick runs.
"""

import json
from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any, Union

from cyberpulse.core.bands import check_band_boundaries

COLOR_POLICIES = ("tri-band", "hue")
PULSE_MODELS = ("smoothed", "oscillator")

Color = tuple[int, int, int]


@dataclass
class BandConfig:
    """Spectrum size and the bin indices splitting bass/mid/treble."""

    n_bins: int = 64
    bass_end: int = 10
    mid_end: int = 40


@dataclass
class BeatConfig:
    """Single-threshold onset detector constants."""

    threshold: float = 0.15
    base_force: float = 15.0
    scale_factor: float = 20.0


@dataclass
class ParticleConfig:
    """Ambient particle field."""

    count: int = 150
    max_speed: float = 0.25  # px per tick, per axis
    min_size: float = 0.5
    max_size: float = 2.5
    amplification: float = 5.0  # advection multiplier at full bass
    size_boost: float = 3.0  # 0 disables bass-driven size scaling
    base_opacity: float = 0.1
    bass_opacity: float = 0.4
    color: Color = (0, 210, 255)


@dataclass
class RadialConfig:
    """Radial spectrum bars."""

    color_policy: str = "tri-band"  # "tri-band" or "hue"
    inner_radius_ratio: float = 0.25  # of min(width, height)
    length_ratio: float = 0.8  # of inner radius
    bass_boost: float = 20.0
    base_line_width: float = 3.0
    line_width_gain: float = 8.0
    max_glow: float = 20.0
    bass_color: Color = (36, 11, 54)
    mid_color: Color = (0, 210, 255)
    treble_color: Color = (255, 0, 85)
    hue_saturation: float = 1.0
    hue_lightness: float = 0.5
    energy_glow: bool = True
    energy_glow_color: Color = (36, 11, 54)
    energy_glow_alpha: float = 0.2  # at full bass


@dataclass
class PulseConfig:
    """Focal pulse body."""

    model: str = "oscillator"  # "smoothed" or "oscillator"
    base_radius_ratio: float = 0.08  # of min(width, height)
    color: Color = (0, 210, 255)
    core_color: Color = (255, 0, 85)

    # Smoothed-scale model
    smoothing: float = 0.2
    bass_gain: float = 0.6

    # Damped-oscillator model
    stiffness: float = 60.0
    damping: float = 6.0
    angular_damping: float = 4.0
    impulse_scale: float = 6.0  # px/s of velocity per unit beat intensity
    spin_scale: float = 0.15  # rad/s per unit beat intensity
    dt: float = 1.0 / 60.0


@dataclass
class EffectsConfig:
    """Persistence trail and chromatic aberration."""

    background_color: Color = (5, 5, 5)
    trail_alpha: int = 180  # 0-255 opacity of the per-tick background fill
    aberration_enabled: bool = True
    aberration_threshold: float = 0.4
    aberration_offset: int = 3
    glow_radius: int = 8


@dataclass
class OverlayConfig:
    """Tech grid, crosshair and status line."""

    enabled: bool = True
    grid_size: int = 50
    grid_color: Color = (0, 210, 255)
    grid_alpha: float = 0.05
    crosshair_size: int = 20
    crosshair_color: Color = (255, 0, 85)
    crosshair_alpha: float = 0.2
    show_status: bool = False
    parallax: float = 0.1


@dataclass
class VisualizerConfig:
    """Top-level configuration for one visualizer session."""

    width: int = 1280
    height: int = 720
    fps: int = 60
    seed: int | None = None
    parallax: float = 0.5
    pointer_range: float = 20.0

    bands: BandConfig = field(default_factory=BandConfig)
    beat: BeatConfig = field(default_factory=BeatConfig)
    particles: ParticleConfig = field(default_factory=ParticleConfig)
    radial: RadialConfig = field(default_factory=RadialConfig)
    pulse: PulseConfig = field(default_factory=PulseConfig)
    effects: EffectsConfig = field(default_factory=EffectsConfig)
    overlay: OverlayConfig = field(default_factory=OverlayConfig)

    def validate(self) -> "VisualizerConfig":
        """
        Check cross-field constraints.

        Raises:
            InvalidBandBoundary: If a band would be empty or out of range.
            ValueError: For any other out-of-range setting.

        Returns:
            self, so calls can be chained.
        """
        b = self.bands
        check_band_boundaries(b.n_bins, b.bass_end, b.mid_end)

        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Canvas size must be positive, got {self.width}x{self.height}")
        if self.fps <= 0:
            raise ValueError(f"fps must be positive, got {self.fps}")
        if self.beat.threshold < 0:
            raise ValueError("beat.threshold must be >= 0")
        if self.particles.count < 0:
            raise ValueError("particles.count must be >= 0")
        if self.particles.min_size > self.particles.max_size:
            raise ValueError("particles.min_size must not exceed particles.max_size")
        if self.radial.color_policy not in COLOR_POLICIES:
            raise ValueError(
                f"radial.color_policy must be one of {COLOR_POLICIES}, "
                f"got {self.radial.color_policy!r}"
            )
        if self.pulse.model not in PULSE_MODELS:
            raise ValueError(
                f"pulse.model must be one of {PULSE_MODELS}, got {self.pulse.model!r}"
            )
        if not 0.0 < self.pulse.smoothing <= 1.0:
            raise ValueError("pulse.smoothing must be in (0, 1]")
        if self.pulse.stiffness <= 0 or self.pulse.damping <= 0 or self.pulse.dt <= 0:
            raise ValueError("pulse.stiffness, pulse.damping and pulse.dt must be positive")
        if not 0 <= self.effects.trail_alpha <= 255:
            raise ValueError("effects.trail_alpha must be in [0, 255]")
        return self


def _build(cls, data: dict[str, Any], section: str):
    """Build dataclass ``cls`` from ``data``, recursing into nested sections."""
    if not isinstance(data, dict):
        raise ValueError(f"Config section '{section}' must be an object")

    known = {f.name: f for f in fields(cls)}
    unknown = set(data) - set(known)
    if unknown:
        raise ValueError(
            f"Unknown config keys in '{section}': {', '.join(sorted(unknown))}"
        )

    kwargs = {}
    defaults = cls()
    for name, value in data.items():
        current = getattr(defaults, name)
        if is_dataclass(current):
            kwargs[name] = _build(type(current), value, f"{section}.{name}")
        elif isinstance(current, tuple):
            kwargs[name] = tuple(int(v) for v in value)
        else:
            kwargs[name] = value
    return cls(**kwargs)


def config_from_dict(data: dict[str, Any]) -> VisualizerConfig:
    """
    Build and validate a VisualizerConfig from a plain dict.

    Args:
        data: Mapping shaped like the dataclasses (nested sections as dicts).

    Returns:
        Validated configuration.
    """
    return _build(VisualizerConfig, data, "root").validate()


def load_config(path: Union[str, Path]) -> VisualizerConfig:
    """
    Load a JSON config file.

    Args:
        path: Path to a JSON file.

    Returns:
        Validated configuration.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return config_from_dict(data)
