"""
Simulation Step
===============

One frame of the game: spawn, move, collide, score, decay effects.

`update` reads only the state it was given and returns a new one. The only
other thing it touches is the Spawner passed in, whose clock and random
stream belong to the same game.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import List, Optional

from valdebt.core.config_loader import GameConfig, get_config
from valdebt.core.events import GameEvent
from valdebt.core.feedback import (
    floating_text,
    format_points,
    particle_burst,
    step_floating_texts,
    step_particles,
)
from valdebt.core.collision import aabb_intersects
from valdebt.core.game_state import FallingObject, FloatingText, GameState, Particle
from valdebt.core.kinds import GameStatus
from valdebt.core.scoring import ScoreTracker, advance_milestone, difficulty_for_score
from valdebt.core.spawner import Spawner

logger = logging.getLogger(__name__)


def _move(obj: FallingObject, config: GameConfig) -> FallingObject:
    spin = config.effects.asset_spin if obj.is_asset else config.effects.liability_spin
    return dataclasses.replace(obj, y=obj.y + obj.speed, rotation=obj.rotation + spin)


def update(
    state: GameState,
    canvas_width: float,
    canvas_height: float,
    spawner: Spawner,
    config: Optional[GameConfig] = None
) -> GameState:
    """
    Advance the game by one frame.

    Args:
        state: State at frame entry. Returned unchanged unless playing.
        canvas_width: Playfield width in pixels.
        canvas_height: Playfield height in pixels.
        spawner: This game's spawner.
        config: Game configuration. Uses default if None.

    Returns:
        The next state. Its `events` lists the cues raised this frame.
    """
    if state.status != GameStatus.PLAYING:
        return state

    if config is None:
        config = get_config()

    effects = config.effects
    colors = config.colors
    events: List[GameEvent] = []

    grid_offset = (
        state.grid_offset + config.difficulty.grid_scroll_rate * state.difficulty
    ) % config.difficulty.grid_wrap

    difficulty = max(state.difficulty, difficulty_for_score(state.score, config))

    next_milestone, speed_multiplier = advance_milestone(
        state.score, state.next_milestone, state.speed_multiplier, config
    )

    tracker = ScoreTracker(state, config)
    if tracker.tick_bull_market():
        events.append(GameEvent.BULL_MARKET_END)

    objects = list(state.objects)
    spawned = spawner.maybe_spawn(
        state.score, canvas_width, speed_multiplier=speed_multiplier, difficulty=difficulty
    )
    if spawned is not None:
        objects.append(spawned)

    player = state.player_rect(canvas_width, canvas_height, config)
    rng = spawner.rng

    survivors: List[FallingObject] = []
    new_particles: List[Particle] = list(state.particles)
    new_texts: List[FloatingText] = list(state.floating_texts)
    shake = state.screen_shake
    flash = state.flash_alpha

    for obj in objects:
        moved = _move(obj, config)
        origin = (moved.center_x, moved.center_y)

        if aabb_intersects(player, moved.rect):
            if moved.is_asset:
                hit = tracker.apply_asset(moved)
                flash = max(flash, effects.asset_flash)
                new_particles.extend(particle_burst(
                    origin, colors.asset, config.particles.value, rng
                ))
                new_texts.append(floating_text(
                    origin, format_points(hit.points), colors.text_positive, config
                ))
                events.append(GameEvent.POSITIVE_HIT)
                if hit.bull_market_started:
                    events.append(GameEvent.BULL_MARKET_START)
            else:
                hit = tracker.apply_liability(moved)
                if hit.terminal:
                    shake = max(shake, effects.terminal_shake)
                    flash = max(flash, effects.terminal_flash)
                    color, band = colors.terminal, config.particles.terminal
                    events.append(GameEvent.TERMINAL_HIT)
                else:
                    shake = max(shake, effects.liability_shake)
                    color, band = colors.liability, config.particles.debt
                    events.append(GameEvent.NEGATIVE_HIT)
                new_particles.extend(particle_burst(origin, color, band, rng))
                new_texts.append(floating_text(
                    origin, format_points(hit.points), colors.text_negative, config
                ))
            continue

        # Fully below the bottom edge
        if moved.y > canvas_height + moved.size:
            continue

        survivors.append(moved)

    score = tracker.clamped_score
    lives = max(0, min(state.max_lives, tracker.lives))

    status = state.status
    high_score = state.high_score
    if lives == 0:
        status = GameStatus.GAMEOVER
        events.append(GameEvent.GAME_OVER)
        events.append(GameEvent.AMBIENT_OFF)
        if score > high_score:
            high_score = score
            events.append(GameEvent.NEW_HIGH_SCORE)
        logger.info("game over at frame %d with score %d", state.frame + 1, score)

    return dataclasses.replace(
        state,
        score=score,
        lives=lives,
        objects=tuple(survivors),
        particles=step_particles(new_particles, config.particles.gravity),
        floating_texts=step_floating_texts(new_texts, config.floating_text.drift),
        status=status,
        difficulty=difficulty,
        high_score=high_score,
        combo=tracker.combo,
        combo_timer=tracker.combo_timer,
        is_bull_market=tracker.is_bull_market,
        next_milestone=next_milestone,
        speed_multiplier=speed_multiplier,
        grid_offset=grid_offset,
        screen_shake=max(0.0, shake - effects.shake_decay),
        flash_alpha=max(0.0, flash - effects.flash_decay),
        frame=state.frame + 1,
        gains=tracker.gains,
        losses=tracker.losses,
        events=tuple(events),
    )
