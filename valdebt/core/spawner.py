"""
Spawner - Timed Weighted Drops
==============================

Decides when the next object falls and which kind it is. Timing state lives
on the Spawner instance, one per game, so games never share a clock.
"""

from __future__ import annotations

import logging
import random
from typing import List, Optional, Tuple

from valdebt.core.config_loader import GameConfig, get_config
from valdebt.core.entity_catalog import EntityCatalog, EntityDef, get_catalog
from valdebt.core.game_state import FallingObject
from valdebt.core.scoring import debt_bias, difficulty_for_score

logger = logging.getLogger(__name__)


class Spawner:
    """
    Frame-counting spawner with re-rolled intervals.

    After every spawn the next interval is drawn as
    max(min_interval, base_interval - difficulty * interval_per_tier) + jitter,
    so the cadence never settles into a fixed rhythm.

    Kind selection is a weighted choice over the catalog; as score grows the
    liability weights scale up and the asset weights scale down, each floored
    so no kind disappears.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        catalog: Optional[EntityCatalog] = None
    ):
        """
        Initialize spawner.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility. Random if None.
            catalog: Entity catalog. Built from config if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._catalog = catalog if catalog is not None else get_catalog(config)
        self._seed = seed
        self._rng = random.Random(seed)

        self._frames_since_spawn: int = 0
        self._target_interval: int = self._roll_interval(0)
        self._spawned: int = 0

    @property
    def rng(self) -> random.Random:
        """Random source shared with the feedback generators of this game."""
        return self._rng

    @property
    def frames_since_spawn(self) -> int:
        return self._frames_since_spawn

    @property
    def target_interval(self) -> int:
        return self._target_interval

    @property
    def spawned_count(self) -> int:
        """Objects emitted since the last reset."""
        return self._spawned

    def base_interval_for(self, score: int, difficulty: Optional[int] = None) -> int:
        """
        Interval before jitter.

        Args:
            score: Current score.
            difficulty: Tier held by the game state. The tier derived from
                score is used if None or lower.
        """
        spawn = self._config.spawn
        tier = difficulty_for_score(score, self._config)
        if difficulty is not None:
            tier = max(tier, difficulty)
        return max(spawn.min_interval, spawn.base_interval - tier * spawn.interval_per_tier)

    def _roll_interval(self, score: int, difficulty: Optional[int] = None) -> int:
        return self.base_interval_for(score, difficulty) + self._rng.randint(0, self._config.spawn.jitter)

    def weights_for(self, score: int) -> List[Tuple[EntityDef, float]]:
        """Spawn weights for every kind after applying the debt bias."""
        bias = debt_bias(score, self._config)
        floor = self._config.spawn.floor_weight
        weighted = []
        for entity_def in self._catalog:
            if entity_def.is_asset:
                weight = entity_def.weight * (1.0 - bias)
            else:
                weight = entity_def.weight * (1.0 + bias)
            weighted.append((entity_def, max(floor, weight)))
        return weighted

    def _weighted_choice(self, score: int) -> EntityDef:
        """Choose a kind weighted by the biased catalog weights."""
        weighted = self.weights_for(score)
        total = sum(w for _, w in weighted)
        r = self._rng.random() * total
        cumulative = 0.0
        for entity_def, weight in weighted:
            cumulative += weight
            if r < cumulative:
                return entity_def
        return weighted[-1][0]

    def _spawn_x(self, size: float, canvas_width: float) -> float:
        """Top-left x so the object starts fully inside the canvas."""
        half = size / 2
        if canvas_width <= size:
            return canvas_width / 2 - half
        center = self._rng.uniform(half, canvas_width - half)
        return center - half

    def maybe_spawn(
        self,
        current_score: int,
        canvas_width: float,
        elapsed_frames: int = 1,
        speed_multiplier: float = 1.0,
        difficulty: Optional[int] = None
    ) -> Optional[FallingObject]:
        """
        Advance the spawn clock and emit an object when the interval is due.

        Args:
            current_score: Score used for difficulty and debt bias.
            canvas_width: Playfield width in pixels.
            elapsed_frames: Frames since the previous call.
            speed_multiplier: Global speed multiplier applied to the base speed.
            difficulty: Tier held by the game state; shortens the next
                interval even after a loss lowers the score.

        Returns:
            A new FallingObject above the top edge, or None.
        """
        self._frames_since_spawn += max(0, elapsed_frames)
        if self._frames_since_spawn < self._target_interval:
            return None

        self._frames_since_spawn = 0
        self._target_interval = self._roll_interval(current_score, difficulty)

        entity_def = self._weighted_choice(current_score)
        size = entity_def.size
        obj = FallingObject(
            x=self._spawn_x(size, canvas_width),
            y=-size,
            size=size,
            category=entity_def.category,
            kind=entity_def.kind,
            points=entity_def.points,
            speed=entity_def.speed * speed_multiplier,
            rotation=0.0,
            terminal=entity_def.is_terminal,
            flashing=entity_def.is_flashing
        )
        self._spawned += 1
        logger.debug(
            "spawned %s at x=%.1f (next in %d frames)",
            obj.kind.value, obj.x, self._target_interval
        )
        return obj

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Clear timing state for a new run.

        Args:
            seed: New random seed. Keeps the current stream if None.
        """
        if seed is not None:
            self._seed = seed
            self._rng = random.Random(seed)
        self._frames_since_spawn = 0
        self._target_interval = self._roll_interval(0)
        self._spawned = 0
