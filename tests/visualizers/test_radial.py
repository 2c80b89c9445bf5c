"""Tests for the radial spectrum renderer."""

import math

import numpy as np
import pytest

from cyberpulse.config import RadialConfig
from cyberpulse.core.bands import BandIntensity
from cyberpulse.visualizers.radial import (
    HueSweepColors,
    RadialSpectrumRenderer,
    TriBandColors,
)

from conftest import RecordingSurface


@pytest.fixture
def renderer():
    return RadialSpectrumRenderer(RadialConfig(), bass_end=10, mid_end=40)


class TestGeometry:
    def test_one_spoke_per_bin_evenly_spaced(self, renderer):
        spokes = renderer.spokes(np.zeros(64), 0.0, (0.0, 0.0), 50.0, True)
        assert len(spokes) == 64
        step = 2.0 * math.pi / 64
        for i, spoke in enumerate(spokes):
            assert spoke.angle == pytest.approx(i * step)

    def test_silence_has_zero_length_and_base_width(self, renderer):
        for spoke in renderer.spokes(np.zeros(64), 0.0, (0.0, 0.0), 50.0, True):
            assert spoke.length == 0.0
            assert spoke.width == 3.0
            assert spoke.glow == 0.0

    def test_length_width_glow(self, renderer):
        spectrum = np.full(64, 255.0)
        spokes = renderer.spokes(spectrum, 0.5, (0.0, 0.0), 100.0, True)
        assert spokes[0].length == pytest.approx(100.0 * 0.8 + 0.5 * 20.0)
        assert spokes[0].width == pytest.approx(11.0)
        assert spokes[0].glow == pytest.approx(20.0)

    def test_spokes_start_on_inner_ring(self, renderer):
        spokes = renderer.spokes(np.full(64, 128.0), 0.0, (100.0, 50.0), 40.0, True)
        for spoke in spokes:
            dx = spoke.start[0] - 100.0
            dy = spoke.start[1] - 50.0
            assert math.hypot(dx, dy) == pytest.approx(40.0)
            ex = spoke.end[0] - 100.0
            ey = spoke.end[1] - 50.0
            assert math.hypot(ex, ey) == pytest.approx(40.0 + spoke.length)

    def test_no_glow_when_not_playing(self, renderer):
        spokes = renderer.spokes(np.full(64, 255.0), 1.0, (0.0, 0.0), 50.0, False)
        assert all(s.glow == 0.0 for s in spokes)

    def test_inner_radius(self, renderer):
        assert renderer.inner_radius(800, 600) == pytest.approx(150.0)


class TestColorPolicies:
    def test_tri_band_follows_boundaries(self):
        colors = TriBandColors(10, 40, (1, 1, 1), (2, 2, 2), (3, 3, 3))
        assert colors.color_for(0, 64) == (1, 1, 1)
        assert colors.color_for(9, 64) == (1, 1, 1)
        assert colors.color_for(10, 64) == (2, 2, 2)
        assert colors.color_for(39, 64) == (2, 2, 2)
        assert colors.color_for(40, 64) == (3, 3, 3)
        assert colors.color_for(63, 64) == (3, 3, 3)

    def test_hue_sweep(self):
        colors = HueSweepColors()
        assert colors.color_for(0, 64) == (255, 0, 0)
        # One third of the way round is green
        r, g, b = colors.color_for(64 // 3 + 1, 64)
        assert g > r and g > b

    def test_hue_policy_selected_by_config(self):
        renderer = RadialSpectrumRenderer(RadialConfig(color_policy="hue"))
        assert isinstance(renderer.colors, HueSweepColors)

    def test_unknown_policy(self):
        with pytest.raises(ValueError):
            RadialSpectrumRenderer(RadialConfig(color_policy="plaid"))


class TestDraw:
    def test_draw_playing(self, renderer):
        surface = RecordingSurface(400, 400)
        spectrum = np.full(64, 200.0)
        bands = BandIntensity(bass=0.8, mid=0.5, treble=0.5)
        renderer.draw(surface, spectrum, bands, (200.0, 200.0), True, glow_radius=6)

        assert len(surface.named("line")) == 64
        assert all(call[7] for call in surface.named("line"))  # round caps
        assert surface.named("flush_glow") == [("flush_glow", 6)]
        [gradient] = surface.named("radial_gradient")
        assert gradient[2] == pytest.approx(100.0 * 1.5)
        assert gradient[3][1][2] == pytest.approx(0.8 * 0.2)

    def test_draw_standby(self, renderer):
        surface = RecordingSurface(400, 400)
        renderer.draw(surface, np.zeros(64), BandIntensity(), (200.0, 200.0), False)
        assert not surface.named("flush_glow")
        assert not surface.named("radial_gradient")
        assert all(call[6] == 0.0 for call in surface.named("line"))
