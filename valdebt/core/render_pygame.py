"""
Pygame Renderer
===============

Draws a GameState onto a pygame surface: scrolling perspective grid,
falling objects, the player, particles, floating texts and overlays.

Rendering never changes the state. Text that reaches the screen comes from a
label resolver; the renderer itself only knows label keys.
"""

from __future__ import annotations

import math
import random
from functools import lru_cache
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np
import pygame

from valdebt.core.config_loader import GameConfig, get_config
from valdebt.core.game_state import FallingObject, GameState
from valdebt.core.kinds import VisualTag

LabelResolver = Callable[[str], str]
Point = Tuple[float, float]

LABEL_BULL_MARKET = "bullMarket"
LABEL_MARKET_CRASH = "marketCrash"
LABEL_COMBO = "combo"
LABEL_LEVEL = "level"

# Palette
CYBER_SKY = (208, 240, 253)
CYBER_GRID = (0, 194, 255)
DEEP_BYTE = (10, 0, 71)
TURBO_LIME = (57, 255, 20)
GLITCH_PINK = (255, 0, 255)
CRASH_RED = (255, 60, 60)
WHITE = (255, 255, 255)

GRID_ALPHA = 77
HORIZON_FRACTION = 0.3
GRID_LINES = 20


def identity_labels(key: str) -> str:
    """Fallback resolver that shows the raw key."""
    return key


@lru_cache(maxsize=16)
def _font(size: int) -> "pygame.font.Font":
    if not pygame.font.get_init():
        pygame.font.init()
    return pygame.font.Font(None, size)


def _rotate(points: Sequence[Point], cx: float, cy: float, angle: float) -> List[Point]:
    """Rotate local points around the origin and move them to (cx, cy)."""
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    return [
        (cx + px * cos_a - py * sin_a, cy + px * sin_a + py * cos_a)
        for px, py in points
    ]


def _rect_points(x: float, y: float, w: float, h: float) -> List[Point]:
    return [(x, y), (x + w, y), (x + w, y + h), (x, y + h)]


def _star_points(spikes: int, outer: float, inner: float) -> List[Point]:
    points = []
    for i in range(spikes * 2):
        r = outer if i % 2 == 0 else inner
        angle = math.pi * i / spikes - math.pi / 2
        points.append((math.cos(angle) * r, math.sin(angle) * r))
    return points


def _polygon(surface, color, points, outline=DEEP_BYTE, width: int = 3) -> None:
    pygame.draw.polygon(surface, color, points)
    if outline is not None:
        pygame.draw.polygon(surface, outline, points, width)


def _glyph(surface, text: str, cx: float, cy: float, size: int, color=DEEP_BYTE) -> None:
    rendered = _font(size).render(text, True, color)
    surface.blit(rendered, rendered.get_rect(center=(int(cx), int(cy))))


# --- Per-kind drawers --------------------------------------------------------

def _draw_house(surface, obj: FallingObject, frame: int) -> None:
    s = obj.size
    cx, cy, a = obj.center_x, obj.center_y, obj.rotation
    _polygon(surface, TURBO_LIME, _rotate(_rect_points(-s / 2 + 4, -4, s - 8, s / 2 + 4), cx, cy, a))
    _polygon(surface, TURBO_LIME, _rotate([(-s / 2, -4), (0, -s / 2), (s / 2, -4)], cx, cy, a))
    _polygon(surface, DEEP_BYTE, _rotate(_rect_points(-5, 6, 10, s / 2 - 6), cx, cy, a), outline=None)
    _glyph(surface, "$", cx, cy - s / 4, 18)


def _draw_chart(surface, obj: FallingObject, frame: int) -> None:
    s = obj.size
    cx, cy, a = obj.center_x, obj.center_y, obj.rotation
    _polygon(surface, TURBO_LIME, _rotate(_rect_points(-s / 2, -s / 2, s, s), cx, cy, a))
    trend = [(-s / 2 + 6, s / 4), (-s / 8, 0), (s / 8, s / 8), (s / 2 - 6, -s / 3)]
    pygame.draw.lines(surface, DEEP_BYTE, False, _rotate(trend, cx, cy, a), 3)


def _draw_book(surface, obj: FallingObject, frame: int) -> None:
    s = obj.size
    cx, cy, a = obj.center_x, obj.center_y, obj.rotation
    _polygon(surface, TURBO_LIME, _rotate(_rect_points(-s / 2 + 4, -s / 2, s - 8, s), cx, cy, a))
    spine = _rotate([(-s / 2 + 12, -s / 2), (-s / 2 + 12, s / 2)], cx, cy, a)
    pygame.draw.line(surface, DEEP_BYTE, spine[0], spine[1], 3)
    _glyph(surface, "$", cx + 4, cy, 18)


def _draw_tower(surface, obj: FallingObject, frame: int) -> None:
    s = obj.size
    cx, cy, a = obj.center_x, obj.center_y, obj.rotation
    _polygon(surface, TURBO_LIME, _rotate(_rect_points(-s / 3, -s / 2, 2 * s / 3, s), cx, cy, a))
    for row in range(3):
        for col in range(2):
            wx = -s / 5 + col * s / 5
            wy = -s / 3 + row * s / 4
            window = _rotate(_rect_points(wx, wy, s / 10, s / 10), cx, cy, a)
            _polygon(surface, DEEP_BYTE, window, outline=None)


def _draw_wrench(surface, obj: FallingObject, frame: int) -> None:
    s = obj.size
    cx, cy, a = obj.center_x, obj.center_y, obj.rotation
    _polygon(surface, GLITCH_PINK, _rotate(_rect_points(-s / 10, -s / 2 + 8, s / 5, s - 8), cx, cy, a))
    head = _rotate([(0, -s / 2 + 6)], cx, cy, a)[0]
    pygame.draw.circle(surface, GLITCH_PINK, (int(head[0]), int(head[1])), int(s / 4))
    pygame.draw.circle(surface, DEEP_BYTE, (int(head[0]), int(head[1])), int(s / 4), 3)


def _draw_spike(surface, obj: FallingObject, frame: int) -> None:
    s = obj.size
    cx, cy, a = obj.center_x, obj.center_y, obj.rotation
    _polygon(surface, GLITCH_PINK, _rotate(_star_points(8, s / 2, s / 3.5), cx, cy, a))
    _glyph(surface, "!", cx, cy, 22)


def _draw_crash(surface, obj: FallingObject, frame: int) -> None:
    s = obj.size
    cx, cy, a = obj.center_x, obj.center_y, obj.rotation
    color = CRASH_RED
    if obj.flashing and (frame // 6) % 2:
        color = WHITE
    _polygon(surface, color, _rotate(_star_points(12, s / 2, s / 3), cx, cy, a))
    _glyph(surface, "!!", cx, cy, 24)


_DRAWERS: Dict[VisualTag, Callable[..., None]] = {
    VisualTag.HOUSE: _draw_house,
    VisualTag.CHART: _draw_chart,
    VisualTag.BOOK: _draw_book,
    VisualTag.TOWER: _draw_tower,
    VisualTag.WRENCH: _draw_wrench,
    VisualTag.SPIKE: _draw_spike,
    VisualTag.CRASH: _draw_crash,
}


# --- Scene layers ------------------------------------------------------------

def _draw_grid(surface, width: int, height: int, offset: float) -> None:
    """Scrolling perspective grid."""
    surface.fill(CYBER_SKY)
    overlay = pygame.Surface((width, height), pygame.SRCALPHA)
    color = (*CYBER_GRID, GRID_ALPHA)

    cx = width / 2
    horizon = height * HORIZON_FRACTION
    for i in range(-GRID_LINES, GRID_LINES + 1):
        x = cx + i * (width / GRID_LINES)
        pygame.draw.line(overlay, color, (cx + i * 20, horizon), (x, height))

    for i in range(GRID_LINES + 1):
        t = (i + (offset % 1)) / GRID_LINES
        y = horizon + t * t * (height - horizon)
        pygame.draw.line(overlay, color, (0, y), (width, y))

    surface.blit(overlay, (0, 0))


def _draw_player(surface, x: float, y: float, pw: float, ph: float, rng: random.Random) -> None:
    """The portfolio jetpack."""
    bx = x - pw / 2
    by = y - ph / 2

    body = pygame.Rect(int(bx + 8), int(by), int(pw - 16), int(ph - 10))
    pygame.draw.rect(surface, DEEP_BYTE, body)
    pygame.draw.rect(surface, CYBER_GRID, body, 3)

    pygame.draw.rect(surface, CYBER_GRID, pygame.Rect(int(bx), int(by + 10), 12, 30))
    pygame.draw.rect(surface, CYBER_GRID, pygame.Rect(int(bx + pw - 12), int(by + 10), 12, 30))
    pygame.draw.rect(surface, TURBO_LIME, pygame.Rect(int(bx + 20), int(by + 8), int(pw - 40), 16))

    flicker = rng.random() * 8
    for fx in (bx + 16, bx + pw - 24):
        pygame.draw.rect(surface, TURBO_LIME, pygame.Rect(int(fx), int(by + ph - 10), 8, int(10 + flicker)))
        pygame.draw.rect(surface, GLITCH_PINK, pygame.Rect(int(fx + 2), int(by + ph - 6), 4, int(6 + flicker * 0.6)))


def _draw_particles(surface, state: GameState) -> None:
    for p in state.particles:
        size = max(1, int(p.size))
        alpha = int(255 * max(0.0, min(1.0, p.life / p.max_life)))
        dot = pygame.Surface((size, size), pygame.SRCALPHA)
        dot.fill((*p.color, alpha))
        surface.blit(dot, (int(p.x - size / 2), int(p.y - size / 2)))


def _draw_floating_texts(surface, state: GameState) -> None:
    for t in state.floating_texts:
        rendered = _font(28).render(t.text, True, t.color)
        rendered.set_alpha(int(255 * max(0.0, min(1.0, t.life / t.max_life))))
        surface.blit(rendered, rendered.get_rect(center=(int(t.x), int(t.y))))


def _draw_overlays(surface, state: GameState, width: int, height: int, labels: LabelResolver) -> None:
    if state.is_bull_market:
        text = f"{labels(LABEL_BULL_MARKET)}  x{state.combo}"
        rendered = _font(40).render(text, True, TURBO_LIME)
        surface.blit(rendered, rendered.get_rect(center=(width // 2, int(height * 0.12))))
    elif state.combo > 1:
        text = f"{labels(LABEL_COMBO)} {state.combo}"
        rendered = _font(28).render(text, True, DEEP_BYTE)
        surface.blit(rendered, rendered.get_rect(center=(width // 2, int(height * 0.12))))

    if state.flash_alpha > 0:
        flash = pygame.Surface((width, height))
        flash.fill(WHITE)
        flash.set_alpha(int(255 * min(1.0, state.flash_alpha)))
        surface.blit(flash, (0, 0))

    if state.is_over:
        rendered = _font(64).render(labels(LABEL_MARKET_CRASH), True, GLITCH_PINK)
        surface.blit(rendered, rendered.get_rect(center=(width // 2, height // 2)))


def render(
    surface: "pygame.Surface",
    state: GameState,
    width: int,
    height: int,
    label_resolver: Optional[LabelResolver] = None,
    rng: Optional[random.Random] = None,
    config: Optional[GameConfig] = None
) -> None:
    """
    Draw one frame.

    Args:
        surface: Target surface; must be at least width x height.
        state: State to draw. Not modified.
        width: Canvas width in pixels.
        height: Canvas height in pixels.
        label_resolver: Maps label keys to display strings.
        rng: Random source for shake and thruster flicker.
        config: Game configuration. Uses default if None.
    """
    if config is None:
        config = get_config()
    if rng is None:
        rng = random.Random()
    labels = label_resolver or identity_labels

    frame = pygame.Surface((width, height))
    _draw_grid(frame, width, height, state.grid_offset)

    for obj in state.objects:
        _DRAWERS[_visual_for(obj, config)](frame, obj, state.frame)

    _draw_player(
        frame,
        state.player_x * width,
        state.player_y * height,
        config.player.width,
        config.player.height,
        rng
    )
    _draw_particles(frame, state)
    _draw_floating_texts(frame, state)
    _draw_overlays(frame, state, width, height, labels)

    shake_x = shake_y = 0
    if state.screen_shake > 0:
        shake_x = int((rng.random() - 0.5) * state.screen_shake * 2)
        shake_y = int((rng.random() - 0.5) * state.screen_shake * 2)

    surface.fill(DEEP_BYTE)
    surface.blit(frame, (shake_x, shake_y))


def _visual_for(obj: FallingObject, config: GameConfig) -> VisualTag:
    return _visual_table(config)[obj.kind]


@lru_cache(maxsize=4)
def _visual_table(config: GameConfig):
    return {e.kind: e.visual for e in config.entities}


def render_to_array(
    state: GameState,
    width: int,
    height: int,
    label_resolver: Optional[LabelResolver] = None,
    rng: Optional[random.Random] = None,
    config: Optional[GameConfig] = None
) -> np.ndarray:
    """
    Render to an RGB array.

    Returns:
        (height, width, 3) uint8 array.
    """
    surface = pygame.Surface((width, height))
    render(surface, state, width, height, label_resolver, rng, config)
    array = pygame.surfarray.array3d(surface)
    return np.transpose(array, (1, 0, 2))
