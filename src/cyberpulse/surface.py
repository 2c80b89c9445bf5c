"""
Drawing surface abstraction and its pygame implementation.

The renderer only talks to the ``DrawingSurface`` protocol; the
pygame backend is what the live preview and most tests use.
"""

import logging
from typing import Protocol, Sequence

import numpy as np
import pygame
from PIL import Image, ImageFilter

logger = logging.getLogger(__name__)

Color = tuple[int, int, int]
Point = tuple[float, float]

# Glow strength (in px of blur) that maps to a fully opaque glow stroke
GLOW_FULL = 20.0


class DrawingSurface(Protocol):
    """Primitives the visualizer needs from its host canvas."""

    @property
    def ready(self) -> bool: ...

    @property
    def size(self) -> tuple[int, int]: ...

    def resize(self, width: int, height: int) -> None: ...

    def fill_rect(
        self, rect: tuple[float, float, float, float], color: Color, alpha: float = 1.0
    ) -> None: ...

    def circle(
        self, center: Point, radius: float, color: Color, alpha: float = 1.0, width: int = 0
    ) -> None: ...

    def line(
        self,
        start: Point,
        end: Point,
        color: Color,
        width: float = 1.0,
        alpha: float = 1.0,
        glow: float = 0.0,
        round_cap: bool = False,
    ) -> None: ...

    def lines(
        self,
        segments: Sequence[tuple[Point, Point]],
        color: Color,
        width: float = 1.0,
        alpha: float = 1.0,
    ) -> None: ...

    def radial_gradient(
        self, center: Point, radius: float, stops: Sequence[tuple[float, Color, float]]
    ) -> None: ...

    def flush_glow(self, radius: int) -> None: ...

    def text(self, position: Point, text: str, color: Color, alpha: float = 1.0) -> None: ...

    def pixels(self) -> np.ndarray: ...

    def put_pixels(self, frame: np.ndarray) -> None: ...


def _alpha_byte(alpha: float) -> int:
    return int(round(min(1.0, max(0.0, alpha)) * 255))


def _screen(base: np.ndarray, layer: np.ndarray) -> np.ndarray:
    """Screen blend two float arrays in [0, 1]."""
    return 1.0 - (1.0 - base) * (1.0 - layer)


class PygameSurface:
    """
    DrawingSurface backed by a ``pygame.Surface``.

    Pass ``display=True`` to wrap the window surface; resizing then
    re-creates the video mode instead of allocating an offscreen surface.
    """

    def __init__(self, surface: pygame.Surface | None = None, display: bool = False):
        self._surface = surface
        self._display = display
        self._glow_layer: pygame.Surface | None = None
        self._glow_dirty = False
        self._font: pygame.font.Font | None = None

    @classmethod
    def offscreen(cls, width: int, height: int) -> "PygameSurface":
        return cls(pygame.Surface((width, height)))

    @property
    def surface(self) -> pygame.Surface | None:
        return self._surface

    @property
    def ready(self) -> bool:
        if self._surface is None:
            return False
        if self._display and pygame.display.get_surface() is None:
            return False
        w, h = self._surface.get_size()
        return w > 0 and h > 0

    @property
    def size(self) -> tuple[int, int]:
        if self._surface is None:
            return (0, 0)
        return self._surface.get_size()

    def resize(self, width: int, height: int):
        if self._surface is not None and self._surface.get_size() == (width, height):
            return
        if self._display:
            self._surface = pygame.display.set_mode((width, height), pygame.RESIZABLE)
        else:
            old = self._surface
            self._surface = pygame.Surface((width, height))
            if old is not None:
                self._surface.blit(old, (0, 0))
        self._glow_layer = None
        self._glow_dirty = False
        logger.debug("Surface resized to %dx%d", width, height)

    def fill_rect(self, rect, color: Color, alpha: float = 1.0):
        x, y, w, h = (int(round(v)) for v in rect)
        if alpha >= 1.0:
            self._surface.fill(color, pygame.Rect(x, y, w, h))
            return
        if alpha <= 0.0 or w <= 0 or h <= 0:
            return
        # Solid layer alpha-blitted over the target
        fade = pygame.Surface((w, h))
        fade.fill(color)
        fade.set_alpha(_alpha_byte(alpha))
        self._surface.blit(fade, (x, y))

    def circle(self, center: Point, radius: float, color: Color, alpha: float = 1.0, width: int = 0):
        if radius <= 0:
            return
        if alpha >= 1.0:
            pygame.draw.circle(self._surface, color, center, radius, width)
            return
        if alpha <= 0.0:
            return
        r = int(np.ceil(radius)) + 1
        sprite = pygame.Surface((r * 2, r * 2), pygame.SRCALPHA)
        pygame.draw.circle(sprite, (*color, _alpha_byte(alpha)), (r, r), radius, width)
        self._surface.blit(sprite, (center[0] - r, center[1] - r))

    def _stroke(self, target: pygame.Surface, start, end, rgba, width: int, round_cap: bool):
        pygame.draw.line(target, rgba, start, end, width)
        if round_cap and width > 2:
            cap = width / 2.0
            pygame.draw.circle(target, rgba, start, cap)
            pygame.draw.circle(target, rgba, end, cap)

    def line(
        self,
        start: Point,
        end: Point,
        color: Color,
        width: float = 1.0,
        alpha: float = 1.0,
        glow: float = 0.0,
        round_cap: bool = False,
    ):
        px = max(1, int(round(width)))
        if glow > 0.0:
            if self._glow_layer is None:
                self._glow_layer = pygame.Surface(self._surface.get_size(), pygame.SRCALPHA)
            glow_alpha = _alpha_byte(glow / GLOW_FULL)
            glow_width = px + max(1, int(round(glow * 0.5)))
            self._stroke(self._glow_layer, start, end, (*color, glow_alpha), glow_width, True)
            self._glow_dirty = True

        if alpha >= 1.0:
            self._stroke(self._surface, start, end, color, px, round_cap)
            return
        if alpha <= 0.0:
            return
        layer = pygame.Surface(self._surface.get_size(), pygame.SRCALPHA)
        self._stroke(layer, start, end, (*color, _alpha_byte(alpha)), px, round_cap)
        self._surface.blit(layer, (0, 0))

    def lines(self, segments, color: Color, width: float = 1.0, alpha: float = 1.0):
        """Stroke many independent segments sharing one style in a single blit."""
        if not segments or alpha <= 0.0:
            return
        px = max(1, int(round(width)))
        if alpha >= 1.0:
            for start, end in segments:
                pygame.draw.line(self._surface, color, start, end, px)
            return
        layer = pygame.Surface(self._surface.get_size(), pygame.SRCALPHA)
        rgba = (*color, _alpha_byte(alpha))
        for start, end in segments:
            pygame.draw.line(layer, rgba, start, end, px)
        self._surface.blit(layer, (0, 0))

    def flush_glow(self, radius: int):
        """
        Blur the accumulated glow strokes and screen-blend them in.

        Args:
            radius: Gaussian blur radius in pixels.
        """
        if not self._glow_dirty or self._glow_layer is None:
            return

        rgba = pygame.image.tostring(self._glow_layer, "RGBA")
        img = Image.frombytes("RGBA", self._glow_layer.get_size(), rgba)
        if radius > 0:
            img = img.filter(ImageFilter.GaussianBlur(radius=radius))
        glow = np.asarray(img, dtype=np.float32) / 255.0
        glow_rgb = glow[:, :, :3] * glow[:, :, 3:4]

        frame = self.pixels().astype(np.float32) / 255.0
        blended = _screen(frame, glow_rgb)
        self.put_pixels((np.clip(blended, 0.0, 1.0) * 255).astype(np.uint8))

        self._glow_layer.fill((0, 0, 0, 0))
        self._glow_dirty = False

    def radial_gradient(self, center: Point, radius: float, stops, steps: int = 24):
        """
        Approximate a radial gradient with concentric filled circles.

        Args:
            center: Gradient center.
            radius: Outer radius.
            stops: Sequence of (position in [0, 1], color, alpha), ascending.
            steps: Number of rings.
        """
        if radius <= 0 or not stops:
            return
        r = int(np.ceil(radius))
        layer = pygame.Surface((r * 2, r * 2), pygame.SRCALPHA)

        positions = [s[0] for s in stops]
        for i in range(steps, 0, -1):
            t = i / steps
            rgba = []
            for channel in range(3):
                rgba.append(int(np.interp(t, positions, [s[1][channel] for s in stops])))
            a = float(np.interp(t, positions, [s[2] for s in stops]))
            rgba.append(_alpha_byte(a))
            pygame.draw.circle(layer, rgba, (r, r), radius * t)

        self._surface.blit(layer, (center[0] - r, center[1] - r))

    def text(self, position: Point, text: str, color: Color, alpha: float = 1.0):
        if self._font is None:
            if not pygame.font.get_init():
                pygame.font.init()
            self._font = pygame.font.SysFont("monospace", 12)
        rendered = self._font.render(text, True, color)
        if alpha < 1.0:
            rendered.set_alpha(_alpha_byte(alpha))
        self._surface.blit(rendered, position)

    def pixels(self) -> np.ndarray:
        """Copy the surface to an (H, W, 3) uint8 array."""
        arr = pygame.surfarray.array3d(self._surface)
        # pygame uses (width, height), numpy expects (height, width)
        return np.transpose(arr, (1, 0, 2))

    def put_pixels(self, frame: np.ndarray):
        """Write an (H, W, 3) uint8 array back to the surface."""
        pygame.surfarray.blit_array(self._surface, np.transpose(frame, (1, 0, 2)))
