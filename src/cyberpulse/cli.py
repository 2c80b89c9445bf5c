"""
CLI entry point for the CyberPulse live visualizer.

Usage:
    cyberpulse [audio_file ...] [options]
    python -m cyberpulse [audio_file ...] [options]

Keys:
    space   pause / resume
    n       next track
    e       eject (visuals fall back to standby)
    left/right seek 5 s
    up/down volume
    esc     quit
"""

import argparse
import logging
import sys
from pathlib import Path

import pygame

from cyberpulse.config import (
    COLOR_POLICIES,
    PULSE_MODELS,
    VisualizerConfig,
    load_config,
)
from cyberpulse.errors import CyberPulseError
from cyberpulse.io.audio_source import AudioFileSpectrum
from cyberpulse.renderer import FrameRenderer
from cyberpulse.scheduler import AnimationScheduler, FrameClock
from cyberpulse.surface import PygameSurface

logger = logging.getLogger(__name__)

SEEK_STEP = 5.0  # seconds per left/right key press


def format_time(seconds: float) -> str:
    """Format seconds as ``m:ss``."""
    seconds = max(0.0, seconds)
    mins = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{mins}:{secs:02d}"


class MixerTransport:
    """
    Minimal playback transport on top of ``pygame.mixer.music``.

    ``get_pos`` keeps counting from the original ``play()`` call after a
    ``set_pos`` seek, so the position is tracked as the seek target plus
    the time elapsed since the seek.
    """

    def __init__(self, volume: float = 0.7, music=None):
        self.music = music if music is not None else pygame.mixer.music
        self.path: Path | None = None
        self.duration = 0.0
        self.paused = False
        self.volume = volume
        self._offset = 0.0
        self._anchor_ms = 0

    @property
    def loaded(self) -> bool:
        return self.path is not None

    def load(self, path: Path, duration: float = 0.0):
        self.music.load(str(path))
        self.music.set_volume(self.volume)
        self.music.play()
        self.path = path
        self.duration = duration
        self.paused = False
        self._offset = 0.0
        self._anchor_ms = max(0, self.music.get_pos())

    def toggle(self):
        if not self.loaded:
            return
        if self.paused:
            self.music.unpause()
        else:
            self.music.pause()
        self.paused = not self.paused

    def eject(self):
        self.music.stop()
        self.music.unload()
        self.path = None
        self.duration = 0.0
        self.paused = False
        self._offset = 0.0
        self._anchor_ms = 0

    def change_volume(self, delta: float):
        self.volume = min(1.0, max(0.0, self.volume + delta))
        self.music.set_volume(self.volume)

    def position(self) -> float:
        if not self.loaded:
            return 0.0
        elapsed = max(0, self.music.get_pos() - self._anchor_ms) / 1000.0
        position = self._offset + elapsed
        if self.duration > 0:
            position = min(position, self.duration)
        return position

    def seek(self, seconds: float) -> bool:
        """
        Jump to ``seconds`` (clamped to the track).

        Returns:
            True if the mixer accepted the new position.
        """
        if not self.loaded:
            return False
        target = max(0.0, seconds)
        if self.duration > 0:
            target = min(target, self.duration)
        try:
            self.music.set_pos(target)
        except pygame.error as e:
            logger.warning("Seek not supported for %s: %s", self.path, e)
            return False
        self._offset = target
        self._anchor_ms = max(0, self.music.get_pos())
        return True

    def is_playing(self) -> bool:
        return self.loaded and not self.paused and bool(self.music.get_busy())

    def time_readout(self) -> str:
        return f"{format_time(self.position())} / {format_time(self.duration)}"


def build_config(args: argparse.Namespace) -> VisualizerConfig:
    """Merge an optional JSON config file with CLI overrides."""
    cfg = load_config(args.config) if args.config else VisualizerConfig()

    if args.width:
        cfg.width = args.width
    if args.height:
        cfg.height = args.height
    if args.fps:
        cfg.fps = args.fps
    if args.seed is not None:
        cfg.seed = args.seed
    if args.color_policy:
        cfg.radial.color_policy = args.color_policy
    if args.pulse_model:
        cfg.pulse.model = args.pulse_model
    if args.trail is not None:
        cfg.effects.trail_alpha = args.trail
    if args.no_aberration:
        cfg.effects.aberration_enabled = False
    if args.no_overlay:
        cfg.overlay.enabled = False
    if args.status:
        cfg.overlay.show_status = True
    return cfg.validate()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="cyberpulse",
        description="Audio-reactive spectrum, particle and pulse visualizer",
    )
    parser.add_argument(
        "audio",
        type=Path,
        nargs="*",
        help="Audio files to play in order (wav, mp3, ogg, flac)",
    )

    parser.add_argument("--width", type=int, default=None, help="Window width (default: 1280)")
    parser.add_argument("--height", type=int, default=None, help="Window height (default: 720)")
    parser.add_argument("-f", "--fps", type=int, default=None, help="Target frame rate (default: 60)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for particles and impulses")

    parser.add_argument(
        "--color-policy", type=str, default=None, choices=COLOR_POLICIES,
        help="Spectrum coloring (default: tri-band)",
    )
    parser.add_argument(
        "--pulse-model", type=str, default=None, choices=PULSE_MODELS,
        help="Focal body model (default: oscillator)",
    )
    parser.add_argument(
        "-t", "--trail", type=int, default=None,
        help="Background fill opacity 0-255, lower leaves longer trails (default: 180)",
    )
    parser.add_argument("--no-aberration", action="store_true", help="Disable chromatic aberration")
    parser.add_argument("--no-overlay", action="store_true", help="Disable grid and crosshair")
    parser.add_argument("--status", action="store_true", help="Show the status line")

    parser.add_argument(
        "--config", type=Path, default=None,
        help="JSON config file (CLI flags override its values)",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-vv for debug)")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None):
    args = parse_args(argv)

    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    for path in args.audio:
        if not path.exists():
            print(f"Error: Audio file not found: {path}", file=sys.stderr)
            sys.exit(1)
    if args.config and not args.config.exists():
        print(f"Error: Config file not found: {args.config}", file=sys.stderr)
        sys.exit(1)

    try:
        cfg = build_config(args)
    except (CyberPulseError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    pygame.init()
    try:
        _run(cfg, args.audio)
    except CyberPulseError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        pygame.quit()


def seek_by(transport: MixerTransport, source: AudioFileSpectrum | None, delta: float) -> bool:
    """Seek relative to the current position and drop stale spectrum smoothing."""
    if not transport.seek(transport.position() + delta):
        return False
    if source is not None:
        source.reset()
    return True


def window_caption(transport: MixerTransport) -> str:
    if not transport.loaded:
        return "CyberPulse"
    return f"CyberPulse - {transport.path.name}  {transport.time_readout()}"


def _run(cfg: VisualizerConfig, playlist: list[Path]):
    screen = pygame.display.set_mode((cfg.width, cfg.height), pygame.RESIZABLE)
    pygame.display.set_caption("CyberPulse")
    surface = PygameSurface(screen, display=True)

    transport = MixerTransport()
    renderer = FrameRenderer(cfg)
    frames = FrameClock()
    scheduler = AnimationScheduler(renderer, surface, frames, is_playing=transport.is_playing)

    track = -1
    source: AudioFileSpectrum | None = None

    def load_next():
        nonlocal track, source
        if not playlist:
            return
        track = (track + 1) % len(playlist)
        path = playlist[track]
        print(f"Loading: {path}")
        # A new file gets a fresh source; renderer state carries over
        source = AudioFileSpectrum(path, transport.position, n_bins=cfg.bands.n_bins)
        transport.load(path, source.duration)
        scheduler.attach_source(source)
        print(f"  Duration: {source.duration:.1f}s")

    if playlist:
        pygame.mixer.init()
        load_next()

    clock = pygame.time.Clock()
    caption = ""
    scheduler.start()
    try:
        while scheduler.running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    scheduler.stop()
                elif event.type == pygame.VIDEORESIZE:
                    scheduler.on_resize(event.w, event.h)
                elif event.type == pygame.MOUSEMOTION:
                    scheduler.on_pointer(event.pos[0], event.pos[1], *surface.size)
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        scheduler.stop()
                    elif event.key == pygame.K_SPACE:
                        transport.toggle()
                    elif event.key == pygame.K_n:
                        load_next()
                    elif event.key == pygame.K_e and transport.loaded:
                        transport.eject()
                        scheduler.detach_source()
                        source = None
                        print("Ejected")
                    elif event.key == pygame.K_LEFT and transport.loaded:
                        seek_by(transport, source, -SEEK_STEP)
                    elif event.key == pygame.K_RIGHT and transport.loaded:
                        seek_by(transport, source, SEEK_STEP)
                    elif event.key == pygame.K_UP and transport.loaded:
                        transport.change_volume(0.05)
                    elif event.key == pygame.K_DOWN and transport.loaded:
                        transport.change_volume(-0.05)

            frames.fire()
            title = window_caption(transport)
            if title != caption:
                pygame.display.set_caption(title)
                caption = title
            pygame.display.flip()
            clock.tick(cfg.fps)
    finally:
        scheduler.stop()
        if transport.loaded:
            transport.eject()


if __name__ == "__main__":
    main()
