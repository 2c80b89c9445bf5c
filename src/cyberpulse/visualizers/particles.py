"""
Ambient particle field.

A fixed population of drifting motes on a toroidal canvas. Bass speeds
up advection and makes particles larger and more opaque; nothing is ever
spawned or destroyed, particles leaving one edge re-enter at the other.
"""

from dataclasses import dataclass

import numpy as np

from cyberpulse.config import ParticleConfig
from cyberpulse.surface import DrawingSurface


@dataclass
class Particle:
    """Snapshot of a single particle."""

    x: float
    y: float
    vx: float
    vy: float
    size: float
    color: tuple[int, int, int]
    life: float


def wrap(values: np.ndarray, bound: float) -> np.ndarray:
    """
    Wrap values into [0, bound) in place.

    ``np.mod`` can return exactly ``bound`` for tiny negative inputs due
    to rounding, so those are folded back to 0.
    """
    np.mod(values, bound, out=values)
    values[values >= bound] = 0.0
    return values


class ParticleField:
    """
    Struct-of-arrays particle simulation.

    Positions, velocities and sizes are stored as float64 numpy arrays so
    a tick is a handful of vectorized operations.
    """

    def __init__(
        self,
        width: float,
        height: float,
        config: ParticleConfig | None = None,
        rng: np.random.Generator | None = None,
    ):
        self.cfg = config or ParticleConfig()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.width = float(width)
        self.height = float(height)

        n = self.cfg.count
        self.x = self.rng.uniform(0.0, self.width, n)
        self.y = self.rng.uniform(0.0, self.height, n)
        self.vx = self.rng.uniform(-self.cfg.max_speed, self.cfg.max_speed, n)
        self.vy = self.rng.uniform(-self.cfg.max_speed, self.cfg.max_speed, n)
        self.size = self.rng.uniform(self.cfg.min_size, self.cfg.max_size, n)
        self.life = self.rng.uniform(0.0, 1.0, n)

    def __len__(self) -> int:
        return len(self.x)

    def __getitem__(self, index: int) -> Particle:
        return Particle(
            x=float(self.x[index]),
            y=float(self.y[index]),
            vx=float(self.vx[index]),
            vy=float(self.vy[index]),
            size=float(self.size[index]),
            color=self.cfg.color,
            life=float(self.life[index]),
        )

    def resize(self, width: float, height: float):
        """Adopt new bounds; out-of-range particles wrap on the next update."""
        self.width = float(width)
        self.height = float(height)

    def speed_multiplier(self, bass: float) -> float:
        return 1.0 + bass * self.cfg.amplification

    def update(self, bass: float):
        """
        Advance every particle one tick.

        Args:
            bass: Normalized bass intensity in [0, 1].
        """
        factor = self.speed_multiplier(bass)
        self.x += self.vx * factor
        self.y += self.vy * factor
        wrap(self.x, self.width)
        wrap(self.y, self.height)

    def opacity(self, bass: float) -> float:
        return min(1.0, self.cfg.base_opacity + bass * self.cfg.bass_opacity)

    def draw(
        self,
        surface: DrawingSurface,
        bass: float,
        offset: tuple[float, float] = (0.0, 0.0),
    ):
        """
        Draw all particles as translucent discs.

        Args:
            surface: Target surface.
            bass: Normalized bass intensity driving opacity and size.
            offset: Parallax translation applied to every particle.
        """
        alpha = self.opacity(bass)
        scale = 1.0 + bass * self.cfg.size_boost
        ox, oy = offset
        color = self.cfg.color
        for x, y, size in zip(self.x, self.y, self.size):
            surface.circle((x + ox, y + oy), size * scale, color, alpha)
