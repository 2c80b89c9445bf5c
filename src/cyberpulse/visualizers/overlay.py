"""Tech grid, center crosshair and status line drawn on top of each frame."""

from cyberpulse.config import OverlayConfig
from cyberpulse.surface import DrawingSurface


def grid_segments(
    width: float, height: float, spacing: int, offset: tuple[float, float]
) -> list[tuple[tuple[float, float], tuple[float, float]]]:
    """Vertical then horizontal grid lines, shifted by ``offset`` (wrapped to one cell)."""
    if spacing <= 0:
        return []
    ox = offset[0] % spacing
    oy = offset[1] % spacing
    segments = []
    x = ox
    while x < width:
        segments.append(((x, 0.0), (x, height)))
        x += spacing
    y = oy
    while y < height:
        segments.append(((0.0, y), (width, y)))
        y += spacing
    return segments


class Overlay:
    """Static HUD layer; follows the pointer slightly for parallax."""

    def __init__(self, config: OverlayConfig | None = None):
        self.cfg = config or OverlayConfig()

    def draw(
        self,
        surface: DrawingSurface,
        pointer: tuple[float, float],
        is_playing: bool,
    ):
        cfg = self.cfg
        if not cfg.enabled:
            return
        width, height = surface.size
        offset = (pointer[0] * cfg.parallax, pointer[1] * cfg.parallax)

        surface.lines(
            grid_segments(width, height, cfg.grid_size, offset),
            cfg.grid_color,
            width=1,
            alpha=cfg.grid_alpha,
        )

        cx, cy = width / 2.0, height / 2.0
        arm = cfg.crosshair_size
        surface.lines(
            [((cx - arm, cy), (cx + arm, cy)), ((cx, cy - arm), (cx, cy + arm))],
            cfg.crosshair_color,
            width=1,
            alpha=cfg.crosshair_alpha,
        )

        if cfg.show_status:
            status = "VISUALIZING" if is_playing else "STANDBY"
            surface.text((16.0, height - 28.0), f"SYSTEM_STATUS: {status}", cfg.grid_color, 0.6)
