"""
Focal pulse body.

Two interchangeable models share one interface:

- ``SmoothedPulse`` eases its scale toward a bass-derived target.
- ``OscillatorPulse`` is a damped spring held at the canvas center and
  kicked in a random direction on every beat, integrated with
  semi-implicit Euler at a fixed step.

Both settle back to rest once beats stop.
"""

import math

import numpy as np

from cyberpulse.config import PulseConfig
from cyberpulse.core.bands import BandIntensity
from cyberpulse.core.beat import BeatEvent
from cyberpulse.surface import DrawingSurface


class SmoothedPulse:
    """Exponentially smoothed scale, no positional motion."""

    def __init__(self, config: PulseConfig | None = None):
        self.cfg = config or PulseConfig()
        self.scale = 1.0

    @property
    def position(self) -> tuple[float, float]:
        return (0.0, 0.0)

    @property
    def velocity(self) -> tuple[float, float]:
        return (0.0, 0.0)

    @property
    def angle(self) -> float:
        return 0.0

    def target_for(self, bass: float) -> float:
        return 1.0 + bass * self.cfg.bass_gain

    def step(self, target: float) -> float:
        """
        Move scale a fixed fraction of the way to ``target``.

        With a smoothing factor in (0, 1] this approaches the target
        monotonically and never overshoots it.
        """
        self.scale += (target - self.scale) * self.cfg.smoothing
        return self.scale

    def update(self, bands: BandIntensity, beat: BeatEvent | None = None):
        self.step(self.target_for(bands.bass))

    def is_at_rest(self, tolerance: float = 1e-3) -> bool:
        return abs(self.scale - self.target_for(0.0)) < tolerance

    def draw(
        self,
        surface: DrawingSurface,
        center: tuple[float, float],
        base_radius: float,
        bands: BandIntensity,
    ):
        _draw_body(surface, center, base_radius * self.scale, self.angle, bands, self.cfg)


class OscillatorPulse(SmoothedPulse):
    """
    Damped spring-mass body perturbed by beat impulses.

    ``position`` is the displacement from the rest point in pixels;
    ``angle`` is a cosmetic spin that decays under angular damping.
    """

    def __init__(self, config: PulseConfig | None = None, rng: np.random.Generator | None = None):
        super().__init__(config)
        self.rng = rng if rng is not None else np.random.default_rng()
        self.x = 0.0
        self.y = 0.0
        self.vx = 0.0
        self.vy = 0.0
        self._angle = 0.0
        self.angular_velocity = 0.0

    @property
    def position(self) -> tuple[float, float]:
        return (self.x, self.y)

    @property
    def velocity(self) -> tuple[float, float]:
        return (self.vx, self.vy)

    @property
    def angle(self) -> float:
        return self._angle

    def apply_impulse(self, intensity: float):
        """Add an instantaneous velocity kick proportional to ``intensity``."""
        direction = self.rng.uniform(0.0, 2.0 * math.pi)
        magnitude = intensity * self.cfg.impulse_scale
        self.vx += math.cos(direction) * magnitude
        self.vy += math.sin(direction) * magnitude
        self.angular_velocity += self.rng.uniform(-1.0, 1.0) * intensity * self.cfg.spin_scale

    def integrate(self, dt: float | None = None):
        """One semi-implicit Euler step: velocity first, then position."""
        cfg = self.cfg
        dt = cfg.dt if dt is None else dt

        ax = -cfg.stiffness * self.x - cfg.damping * self.vx
        ay = -cfg.stiffness * self.y - cfg.damping * self.vy
        self.vx += ax * dt
        self.vy += ay * dt
        self.x += self.vx * dt
        self.y += self.vy * dt

        self.angular_velocity -= cfg.angular_damping * self.angular_velocity * dt
        self._angle = (self._angle + self.angular_velocity * dt) % (2.0 * math.pi)

    def energy(self) -> float:
        """Spring potential plus kinetic energy (unit mass)."""
        potential = 0.5 * self.cfg.stiffness * (self.x * self.x + self.y * self.y)
        kinetic = 0.5 * (self.vx * self.vx + self.vy * self.vy)
        return potential + kinetic

    def update(self, bands: BandIntensity, beat: BeatEvent | None = None):
        if beat is not None:
            self.apply_impulse(beat.intensity)
        self.integrate()
        self.step(self.target_for(bands.bass))

    def is_at_rest(self, tolerance: float = 1e-3) -> bool:
        return (
            self.energy() < tolerance
            and abs(self.angular_velocity) < tolerance
            and super().is_at_rest(tolerance)
        )

    def draw(
        self,
        surface: DrawingSurface,
        center: tuple[float, float],
        base_radius: float,
        bands: BandIntensity,
    ):
        body_center = (center[0] + self.x, center[1] + self.y)
        _draw_body(surface, body_center, base_radius * self.scale, self._angle, bands, self.cfg)


def _draw_body(
    surface: DrawingSurface,
    center: tuple[float, float],
    radius: float,
    angle: float,
    bands: BandIntensity,
    cfg: PulseConfig,
):
    if radius <= 0:
        return
    # Core brightens with bass, rim with treble
    surface.circle(center, radius * 0.6, cfg.core_color, alpha=0.25 + bands.bass * 0.5)
    surface.circle(center, radius, cfg.color, alpha=0.5 + bands.treble * 0.5, width=2)
    tip = (center[0] + math.cos(angle) * radius, center[1] + math.sin(angle) * radius)
    surface.line(center, tip, cfg.color, width=2, alpha=0.6)


def make_pulse(config: PulseConfig, rng: np.random.Generator | None = None) -> SmoothedPulse:
    """Build the pulse model named by ``config.model``."""
    if config.model == "smoothed":
        return SmoothedPulse(config)
    if config.model == "oscillator":
        return OscillatorPulse(config, rng)
    raise ValueError(f"Unknown pulse model: {config.model!r}")
