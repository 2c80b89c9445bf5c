"""
Frame orchestrator for the CyberPulse visualizer.

Runs one fixed-order pass per tick: sample, band split, beat detection,
persistence fill, particles, radial spectrum, pulse body, aberration and
overlay. All state that survives between ticks lives in ``RenderState``.
"""

from dataclasses import dataclass, field

import numpy as np

from cyberpulse.composite import CompositeEffects
from cyberpulse.config import VisualizerConfig
from cyberpulse.core.bands import SILENT, BandAnalyzer, BandIntensity
from cyberpulse.core.beat import BeatDetector, BeatEvent
from cyberpulse.core.sampler import FrequencySampler, SpectrumSource
from cyberpulse.surface import DrawingSurface
from cyberpulse.visualizers.overlay import Overlay
from cyberpulse.visualizers.particles import ParticleField
from cyberpulse.visualizers.pulse import SmoothedPulse, make_pulse
from cyberpulse.visualizers.radial import RadialSpectrumRenderer


@dataclass(frozen=True)
class FrameContext:
    """Canvas bounds and pointer offset observed at the start of a tick."""

    width: int
    height: int
    pointer_offset: tuple[float, float] = (0.0, 0.0)


@dataclass
class RenderState:
    """Everything that persists from one tick to the next."""

    beat_detector: BeatDetector
    particles: ParticleField
    pulse: SmoothedPulse
    frame_index: int = 0
    bands: BandIntensity = SILENT
    beat: BeatEvent | None = None
    beat_count: int = 0
    aberration_applied: bool = False
    spectrum: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.float32))


class FrameRenderer:
    """
    Renders audio-reactive frames onto a DrawingSurface.

    Stateless apart from the sampler's scratch buffers; call
    ``new_state`` once per session and pass the result to every
    ``render`` call.
    """

    def __init__(self, config: VisualizerConfig | None = None):
        self.cfg = (config or VisualizerConfig()).validate()
        bands = self.cfg.bands

        self.sampler = FrequencySampler(bands.n_bins)
        self.analyzer = BandAnalyzer(bands.n_bins, bands.bass_end, bands.mid_end)
        self.radial = RadialSpectrumRenderer(self.cfg.radial, bands.bass_end, bands.mid_end)
        self.effects = CompositeEffects(self.cfg.effects)
        self.overlay = Overlay(self.cfg.overlay)

    def new_state(self, width: int, height: int) -> RenderState:
        """
        Build fresh per-session state for a ``width`` x ``height`` canvas.

        The configured seed makes particle layout and beat impulse
        directions reproducible.
        """
        cfg = self.cfg
        rng = np.random.default_rng(cfg.seed)
        return RenderState(
            beat_detector=BeatDetector(
                threshold=cfg.beat.threshold,
                base_force=cfg.beat.base_force,
                scale_factor=cfg.beat.scale_factor,
            ),
            particles=ParticleField(width, height, cfg.particles, rng),
            pulse=make_pulse(cfg.pulse, rng),
        )

    def _sync_source(self, source: SpectrumSource | None):
        if source is self.sampler.source:
            return
        if source is None:
            self.sampler.detach()
        else:
            self.sampler.attach(source)

    def render(
        self,
        state: RenderState,
        source: SpectrumSource | None,
        is_playing: bool,
        context: FrameContext,
        surface: DrawingSurface,
    ) -> RenderState:
        """
        Draw one frame.

        Args:
            state: Session state, mutated in place.
            source: Spectrum source for this tick (None samples silence).
            is_playing: Polled playback flag.
            context: Bounds and pointer offset for this tick.
            surface: Target surface, already sized to ``context``.

        Returns:
            The same ``state``, for convenience.
        """
        cfg = self.cfg
        width, height = context.width, context.height

        # --- Analysis ---

        self._sync_source(source)
        spectrum = self.sampler.sample(is_playing)
        bands = self.analyzer.analyze(spectrum)
        beat = state.beat_detector.update(bands.bass)

        # --- Primary draw ---

        self.effects.persist(surface)

        px, py = context.pointer_offset
        offset = (px * cfg.parallax, py * cfg.parallax)
        center = (width / 2.0 + offset[0], height / 2.0 + offset[1])

        particles = state.particles
        if (particles.width, particles.height) != (float(width), float(height)):
            particles.resize(width, height)
        particles.update(bands.bass)
        particles.draw(surface, bands.bass, offset)

        self.radial.draw(
            surface,
            spectrum,
            bands,
            center,
            is_playing,
            glow_radius=cfg.effects.glow_radius,
            inner_radius=self.radial.inner_radius(width, height),
        )

        state.pulse.update(bands, beat)
        state.pulse.draw(
            surface, center, min(width, height) * cfg.pulse.base_radius_ratio, bands
        )

        # --- Post-processing ---

        state.aberration_applied = self.effects.apply_aberration(
            surface, bands.bass, is_playing
        )
        self.overlay.draw(surface, context.pointer_offset, is_playing)

        state.frame_index += 1
        state.bands = bands
        state.beat = beat
        if beat is not None:
            state.beat_count += 1
        state.spectrum = spectrum.copy()
        return state
