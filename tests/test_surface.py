"""Tests for the pygame drawing surface (headless)."""

import numpy as np
import pygame
import pytest

from cyberpulse.surface import PygameSurface


@pytest.fixture
def surface():
    return PygameSurface.offscreen(64, 48)


class TestLifecycle:
    def test_offscreen_ready(self, surface):
        assert surface.ready
        assert surface.size == (64, 48)

    def test_unattached_not_ready(self):
        empty = PygameSurface()
        assert not empty.ready
        assert empty.size == (0, 0)

    def test_resize_preserves_content(self, surface):
        surface.fill_rect((0, 0, 64, 48), (200, 10, 10))
        surface.resize(100, 80)
        assert surface.size == (100, 80)
        frame = surface.pixels()
        assert frame.shape == (80, 100, 3)
        assert tuple(frame[10, 10]) == (200, 10, 10)
        assert tuple(frame[70, 90]) == (0, 0, 0)


class TestPrimitives:
    def test_opaque_fill(self, surface):
        surface.fill_rect((0, 0, 64, 48), (5, 5, 5))
        assert (surface.pixels() == 5).all()

    def test_translucent_fill_blends(self, surface):
        surface.fill_rect((0, 0, 64, 48), (0, 0, 0))
        surface.fill_rect((0, 0, 64, 48), (255, 255, 255), alpha=0.5)
        value = surface.pixels()[20, 20, 0]
        assert 120 <= value <= 135

    def test_translucent_circle(self, surface):
        surface.circle((32, 24), 6, (0, 210, 255), alpha=0.5)
        frame = surface.pixels()
        assert frame[24, 32, 2] > 0
        assert frame[24, 32, 2] < 255
        assert not frame[0, 0].any()

    def test_line(self, surface):
        surface.line((0, 24), (63, 24), (255, 0, 85), width=3)
        assert tuple(surface.pixels()[24, 32]) == (255, 0, 85)

    def test_batched_lines(self, surface):
        surface.lines([((10, 0), (10, 47)), ((0, 10), (63, 10))], (255, 255, 255), alpha=0.5)
        frame = surface.pixels()
        assert frame[30, 10, 0] > 0
        assert frame[10, 40, 0] > 0
        assert frame[30, 40, 0] == 0

    def test_glow_is_deferred_until_flush(self, surface):
        surface.line((10, 24), (54, 24), (0, 210, 255), width=2, alpha=0.0, glow=20.0)
        assert not surface.pixels().any()
        surface.flush_glow(4)
        frame = surface.pixels()
        assert frame[24, 32, 2] > 0
        # Blur spreads the stroke past its width
        assert frame[32, 32, 2] > 0

    def test_flush_without_glow_is_noop(self, surface):
        surface.fill_rect((0, 0, 64, 48), (9, 9, 9))
        surface.flush_glow(8)
        assert (surface.pixels() == 9).all()

    def test_radial_gradient(self, surface):
        surface.radial_gradient(
            (32, 24), 20, [(0.0, (0, 0, 0), 0.0), (0.5, (255, 255, 255), 1.0), (1.0, (0, 0, 0), 0.0)]
        )
        frame = surface.pixels()
        assert frame[24, 42, 0] > frame[24, 32, 0]

    def test_put_pixels_round_trip(self, surface):
        frame = np.zeros((48, 64, 3), dtype=np.uint8)
        frame[5, 7] = (1, 2, 3)
        surface.put_pixels(frame)
        np.testing.assert_array_equal(surface.pixels(), frame)

    def test_wraps_existing_surface(self):
        raw = pygame.Surface((10, 10))
        raw.fill((40, 50, 60))
        wrapped = PygameSurface(raw)
        assert tuple(wrapped.pixels()[5, 5]) == (40, 50, 60)
