"""
Game State
==========

Immutable data model threaded through the frame loop, plus the lifecycle
commands that create and restart runs.

Every frame produces a new GameState; nothing is mutated in place.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from valdebt.core.collision import Rect
from valdebt.core.config_loader import Color, GameConfig, get_config
from valdebt.core.events import GameEvent
from valdebt.core.kinds import Category, EntityKind, GameStatus


@dataclass(frozen=True)
class FallingObject:
    """An object falling through the playfield. (x, y) is the top-left corner."""
    x: float
    y: float
    size: float
    category: Category
    kind: EntityKind
    points: int
    speed: float
    rotation: float = 0.0
    terminal: bool = False
    flashing: bool = False

    @property
    def center_x(self) -> float:
        return self.x + self.size / 2

    @property
    def center_y(self) -> float:
        return self.y + self.size / 2

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.size, self.size)

    @property
    def is_asset(self) -> bool:
        return self.category == Category.ASSET


@dataclass(frozen=True)
class Particle:
    x: float
    y: float
    vx: float
    vy: float
    life: int
    max_life: int
    color: Color
    size: float


@dataclass(frozen=True)
class FloatingText:
    x: float
    y: float
    text: str
    color: Color
    life: int
    max_life: int


@dataclass(frozen=True)
class GameState:
    """
    Root aggregate for one game.

    The frame driver owns the only reference and replaces it after every
    update. `events` holds the cues produced by the transition that created
    this state; the driver forwards them to the audio sink.
    """
    score: int = 0
    lives: int = 3
    max_lives: int = 3
    player_x: float = 0.5
    player_y: float = 0.85
    objects: Tuple[FallingObject, ...] = ()
    particles: Tuple[Particle, ...] = ()
    floating_texts: Tuple[FloatingText, ...] = ()
    status: GameStatus = GameStatus.MENU
    difficulty: int = 1
    high_score: int = 0
    combo: int = 0
    combo_timer: int = 0
    is_bull_market: bool = False
    next_milestone: int = 1000
    speed_multiplier: float = 1.0
    grid_offset: float = 0.0
    screen_shake: float = 0.0
    flash_alpha: float = 0.0
    frame: int = 0
    gains: Dict[EntityKind, int] = field(default_factory=dict)
    losses: Dict[EntityKind, int] = field(default_factory=dict)
    events: Tuple[GameEvent, ...] = ()

    @property
    def is_playing(self) -> bool:
        return self.status == GameStatus.PLAYING

    @property
    def is_over(self) -> bool:
        return self.status == GameStatus.GAMEOVER

    def player_rect(self, canvas_width: float, canvas_height: float, config: Optional[GameConfig] = None) -> Rect:
        """Player bounding box in pixels for the given canvas."""
        if config is None:
            config = get_config()
        return Rect.from_center(
            self.player_x * canvas_width,
            self.player_y * canvas_height,
            config.player.width,
            config.player.height
        )


def clamp_player_x(x: float, config: Optional[GameConfig] = None) -> float:
    """Clamp a normalized horizontal position into the safe input range."""
    if config is None:
        config = get_config()
    if x != x:  # NaN
        return config.player.start_x
    return max(config.player.min_x, min(config.player.max_x, float(x)))


def create_initial_state(
    config: Optional[GameConfig] = None,
    high_score: int = 0
) -> GameState:
    """
    Build the menu state shown before the first run.

    Args:
        config: Game configuration. Uses default if None.
        high_score: Value loaded from persistence; negatives read as 0.
    """
    if config is None:
        config = get_config()

    return GameState(
        score=0,
        lives=config.player.max_lives,
        max_lives=config.player.max_lives,
        player_x=clamp_player_x(config.player.start_x, config),
        player_y=config.player.anchor_y,
        status=GameStatus.MENU,
        difficulty=1,
        high_score=max(0, int(high_score)),
        next_milestone=config.difficulty.first_milestone,
        speed_multiplier=1.0,
    )


def start_run(state: GameState, config: Optional[GameConfig] = None) -> GameState:
    """
    Start a fresh run, keeping only the high score.

    The caller must reset its Spawner alongside this (CoreGame.start_run does).
    """
    fresh = create_initial_state(config, state.high_score)
    return dataclasses.replace(
        fresh,
        player_x=state.player_x,
        status=GameStatus.PLAYING,
        events=(GameEvent.AMBIENT_ON,)
    )


def apply_player_input(state: GameState, x: float, config: Optional[GameConfig] = None) -> GameState:
    """Return a state whose player position is the clamped input value."""
    clamped = clamp_player_x(x, config)
    if clamped == state.player_x:
        return state
    return dataclasses.replace(state, player_x=clamped)


class PlayerIntent:
    """
    Last-value-wins player input.

    Pointer moves set the position directly; held keys nudge it by
    `keyboard_step` once per sampled frame.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()
        self._config = config
        self._x = config.player.start_x
        self._direction = 0

    @property
    def x(self) -> float:
        return self._x

    def point_at(self, normalized_x: float) -> None:
        self._x = clamp_player_x(normalized_x, self._config)

    def hold(self, direction: int) -> None:
        """Set held key direction: -1 left, 0 none, +1 right."""
        self._direction = max(-1, min(1, int(direction)))

    def sample(self) -> float:
        """Advance held-key motion by one frame and return the position."""
        if self._direction:
            self._x = clamp_player_x(
                self._x + self._direction * self._config.player.keyboard_step,
                self._config
            )
        return self._x

    def reset(self) -> None:
        self._x = self._config.player.start_x
        self._direction = 0
