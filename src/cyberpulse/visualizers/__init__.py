"""Drawable layers of the CyberPulse frame."""

from cyberpulse.visualizers.overlay import Overlay
from cyberpulse.visualizers.particles import Particle, ParticleField
from cyberpulse.visualizers.pulse import OscillatorPulse, SmoothedPulse, make_pulse
from cyberpulse.visualizers.radial import RadialSpectrumRenderer

__all__ = [
    "OscillatorPulse",
    "Overlay",
    "Particle",
    "ParticleField",
    "RadialSpectrumRenderer",
    "SmoothedPulse",
    "make_pulse",
]
