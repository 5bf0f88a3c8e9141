"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple, Optional

import yaml

from valdebt.core.kinds import Category, EntityKind, VisualTag


Color = Tuple[int, int, int]


@dataclass(frozen=True)
class PlayerConfig:
    """Player box, input range and lives."""
    width: float
    height: float
    anchor_y: float        # Vertical centre as a fraction of canvas height
    start_x: float
    min_x: float
    max_x: float
    keyboard_step: float
    max_lives: int


@dataclass(frozen=True)
class SpawnConfig:
    """Spawn cadence and debt bias."""
    base_interval: int
    min_interval: int
    interval_per_tier: int
    jitter: int
    max_debt_bias: float
    bias_score_scale: float
    floor_weight: float


@dataclass(frozen=True)
class DifficultyConfig:
    """Tier steps and speed milestones."""
    tier_step: int
    first_milestone: int
    milestone_step: int
    speed_bump: float
    grid_scroll_rate: float
    grid_wrap: float


@dataclass(frozen=True)
class ScoringConfig:
    """Combo and bull-market parameters."""
    combo_threshold: int
    bull_market_duration: int
    bull_market_multiplier: int


@dataclass(frozen=True)
class EffectsConfig:
    """Screen shake, flash and spin rates."""
    asset_flash: float
    liability_shake: float
    terminal_shake: float
    terminal_flash: float
    flash_decay: float
    shake_decay: float
    asset_spin: float
    liability_spin: float


@dataclass(frozen=True)
class BurstConfig:
    """Size and value bands for one kind of particle burst."""
    count: int
    speed_min: float
    speed_max: float
    life_min: int
    life_max: int
    size_min: float
    size_max: float


@dataclass(frozen=True)
class ParticleConfig:
    """Particle gravity and the band for each burst type."""
    gravity: float
    value: BurstConfig
    debt: BurstConfig
    terminal: BurstConfig


@dataclass(frozen=True)
class FloatingTextConfig:
    life: int
    drift: float


@dataclass(frozen=True)
class PersistenceConfig:
    high_score_path: str
    high_score_key: str


@dataclass(frozen=True)
class ObservationConfig:
    """Parameters for the Gymnasium wrapper."""
    canvas_width: int
    canvas_height: int
    max_objects: int
    frame_skip: int
    max_frames: int


@dataclass(frozen=True)
class ColorConfig:
    asset: Color
    liability: Color
    terminal: Color
    text_positive: Color
    text_negative: Color


@dataclass(frozen=True)
class EntityConfig:
    """Configuration for a single spawnable kind."""
    kind: EntityKind
    category: Category
    points: int
    speed: float
    size: float
    weight: float
    visual: VisualTag
    label_key: str
    terminal: bool = False   # Catching it ends the run immediately
    flashing: bool = False


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    player: PlayerConfig
    spawn: SpawnConfig
    difficulty: DifficultyConfig
    scoring: ScoringConfig
    effects: EffectsConfig
    particles: ParticleConfig
    floating_text: FloatingTextConfig
    persistence: PersistenceConfig
    observation: ObservationConfig
    colors: ColorConfig
    entities: Tuple[EntityConfig, ...]

    @property
    def num_entity_kinds(self) -> int:
        return len(self.entities)

    def get_entity(self, kind: EntityKind) -> EntityConfig:
        """Get entity config by kind."""
        for entity in self.entities:
            if entity.kind == kind:
                return entity
        raise KeyError(f"Unknown entity kind: {kind}")


def _parse_color(color_data: List) -> Color:
    """Parse RGB color from YAML."""
    if len(color_data) != 3:
        raise ValueError(f"Color must have 3 values [R, G, B], got {color_data}")
    return (int(color_data[0]), int(color_data[1]), int(color_data[2]))


def _parse_entity(entity_data: dict) -> EntityConfig:
    """Parse a single entity row from YAML."""
    try:
        kind = EntityKind(entity_data["kind"])
        category = Category(entity_data["category"])
        visual = VisualTag(entity_data["visual"])
    except ValueError as e:
        raise ValueError(f"Invalid entity row {entity_data.get('kind')!r}: {e}") from e

    return EntityConfig(
        kind=kind,
        category=category,
        points=int(entity_data["points"]),
        speed=float(entity_data["speed"]),
        size=float(entity_data["size"]),
        weight=float(entity_data["weight"]),
        visual=visual,
        label_key=str(entity_data.get("label_key", kind.value)),
        terminal=bool(entity_data.get("terminal", False)),
        flashing=bool(entity_data.get("flashing", False))
    )


def _parse_burst(burst_data: dict) -> BurstConfig:
    """Parse one particle burst band from YAML."""
    return BurstConfig(
        count=int(burst_data["count"]),
        speed_min=float(burst_data["speed_min"]),
        speed_max=float(burst_data["speed_max"]),
        life_min=int(burst_data["life_min"]),
        life_max=int(burst_data["life_max"]),
        size_min=float(burst_data["size_min"]),
        size_max=float(burst_data["size_max"])
    )


def _validate_burst(name: str, burst: BurstConfig) -> None:
    if burst.count < 0:
        raise ValueError(f"particles.{name}.count must be >= 0, got {burst.count}")
    if not 1 <= burst.life_min <= burst.life_max:
        raise ValueError(
            f"particles.{name} life band must satisfy 1 <= life_min <= life_max, "
            f"got [{burst.life_min}, {burst.life_max}]"
        )
    if not 0.0 <= burst.speed_min <= burst.speed_max:
        raise ValueError(
            f"particles.{name} speed band must satisfy 0 <= speed_min <= speed_max, "
            f"got [{burst.speed_min}, {burst.speed_max}]"
        )
    if not 0.0 < burst.size_min <= burst.size_max:
        raise ValueError(
            f"particles.{name} size band must satisfy 0 < size_min <= size_max, "
            f"got [{burst.size_min}, {burst.size_max}]"
        )


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    kinds = [e.kind for e in config.entities]
    if len(set(kinds)) != len(kinds):
        raise ValueError(f"Duplicate entity kinds in config: {kinds}")

    missing = set(EntityKind) - set(kinds)
    if missing:
        raise ValueError(f"Entity kinds missing from config: {sorted(k.value for k in missing)}")

    for entity in config.entities:
        # Point sign must agree with category
        if entity.category == Category.ASSET and entity.points <= 0:
            raise ValueError(f"Asset {entity.kind.value} must have positive points")
        if entity.category == Category.LIABILITY and entity.points >= 0:
            raise ValueError(f"Liability {entity.kind.value} must have negative points")
        if entity.terminal and entity.category != Category.LIABILITY:
            raise ValueError(f"Only liabilities can be terminal, got {entity.kind.value}")
        if entity.weight <= 0 or entity.size <= 0 or entity.speed <= 0:
            raise ValueError(f"Entity {entity.kind.value} needs positive weight, size and speed")

    if config.spawn.min_interval < 1:
        raise ValueError(f"spawn.min_interval must be >= 1, got {config.spawn.min_interval}")

    if config.spawn.base_interval < config.spawn.min_interval:
        raise ValueError(
            f"spawn.base_interval ({config.spawn.base_interval}) must be >= "
            f"spawn.min_interval ({config.spawn.min_interval})"
        )

    if not 0.0 <= config.spawn.max_debt_bias < 1.0:
        raise ValueError(f"spawn.max_debt_bias must be in [0, 1), got {config.spawn.max_debt_bias}")

    if not 0.0 <= config.player.min_x < config.player.max_x <= 1.0:
        raise ValueError(
            f"player input range must satisfy 0 <= min_x < max_x <= 1, "
            f"got [{config.player.min_x}, {config.player.max_x}]"
        )

    if config.player.max_lives < 1:
        raise ValueError(f"player.max_lives must be >= 1, got {config.player.max_lives}")

    if config.difficulty.tier_step < 1 or config.difficulty.milestone_step < 1:
        raise ValueError("difficulty.tier_step and difficulty.milestone_step must be >= 1")

    if config.difficulty.speed_bump < 1.0:
        raise ValueError(f"difficulty.speed_bump must be >= 1.0, got {config.difficulty.speed_bump}")

    if config.scoring.combo_threshold < 1 or config.scoring.bull_market_duration < 1:
        raise ValueError("scoring.combo_threshold and scoring.bull_market_duration must be >= 1")

    _validate_burst("value", config.particles.value)
    _validate_burst("debt", config.particles.debt)
    _validate_burst("terminal", config.particles.terminal)

    if config.floating_text.life < 1:
        raise ValueError(f"floating_text.life must be >= 1, got {config.floating_text.life}")


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    player_data = raw["player"]
    player = PlayerConfig(
        width=float(player_data["width"]),
        height=float(player_data["height"]),
        anchor_y=float(player_data["anchor_y"]),
        start_x=float(player_data.get("start_x", 0.5)),
        min_x=float(player_data.get("min_x", 0.05)),
        max_x=float(player_data.get("max_x", 0.95)),
        keyboard_step=float(player_data.get("keyboard_step", 0.015)),
        max_lives=int(player_data["max_lives"])
    )

    spawn_data = raw["spawn"]
    spawn = SpawnConfig(
        base_interval=int(spawn_data["base_interval"]),
        min_interval=int(spawn_data["min_interval"]),
        interval_per_tier=int(spawn_data.get("interval_per_tier", 5)),
        jitter=int(spawn_data.get("jitter", 0)),
        max_debt_bias=float(spawn_data.get("max_debt_bias", 0.5)),
        bias_score_scale=float(spawn_data.get("bias_score_scale", 10000)),
        floor_weight=float(spawn_data.get("floor_weight", 1.0))
    )

    difficulty_data = raw["difficulty"]
    difficulty = DifficultyConfig(
        tier_step=int(difficulty_data["tier_step"]),
        first_milestone=int(difficulty_data["first_milestone"]),
        milestone_step=int(difficulty_data["milestone_step"]),
        speed_bump=float(difficulty_data["speed_bump"]),
        grid_scroll_rate=float(difficulty_data.get("grid_scroll_rate", 0.02)),
        grid_wrap=float(difficulty_data.get("grid_wrap", 20.0))
    )

    scoring_data = raw["scoring"]
    scoring = ScoringConfig(
        combo_threshold=int(scoring_data["combo_threshold"]),
        bull_market_duration=int(scoring_data["bull_market_duration"]),
        bull_market_multiplier=int(scoring_data.get("bull_market_multiplier", 2))
    )

    effects_data = raw["effects"]
    effects = EffectsConfig(
        asset_flash=float(effects_data["asset_flash"]),
        liability_shake=float(effects_data["liability_shake"]),
        terminal_shake=float(effects_data.get("terminal_shake", effects_data["liability_shake"])),
        terminal_flash=float(effects_data.get("terminal_flash", effects_data["asset_flash"])),
        flash_decay=float(effects_data["flash_decay"]),
        shake_decay=float(effects_data["shake_decay"]),
        asset_spin=float(effects_data["asset_spin"]),
        liability_spin=float(effects_data["liability_spin"])
    )

    particle_data = raw["particles"]
    particles = ParticleConfig(
        gravity=float(particle_data["gravity"]),
        value=_parse_burst(particle_data["value"]),
        debt=_parse_burst(particle_data["debt"]),
        terminal=_parse_burst(particle_data.get("terminal", particle_data["debt"]))
    )

    text_data = raw["floating_text"]
    floating_text = FloatingTextConfig(
        life=int(text_data["life"]),
        drift=float(text_data["drift"])
    )

    persistence_data = raw.get("persistence", {})
    persistence = PersistenceConfig(
        high_score_path=str(persistence_data.get("high_score_path", "~/.valdebt/highscore.json")),
        high_score_key=str(persistence_data.get("high_score_key", "valdebt_highscore"))
    )

    obs_data = raw.get("observation", {})
    observation = ObservationConfig(
        canvas_width=int(obs_data.get("canvas_width", 960)),
        canvas_height=int(obs_data.get("canvas_height", 540)),
        max_objects=int(obs_data.get("max_objects", 32)),
        frame_skip=int(obs_data.get("frame_skip", 1)),
        max_frames=int(obs_data.get("max_frames", 18000))
    )

    color_data = raw["colors"]
    colors = ColorConfig(
        asset=_parse_color(color_data["asset"]),
        liability=_parse_color(color_data["liability"]),
        terminal=_parse_color(color_data.get("terminal", color_data["liability"])),
        text_positive=_parse_color(color_data.get("text_positive", color_data["asset"])),
        text_negative=_parse_color(color_data.get("text_negative", color_data["liability"]))
    )

    entities = tuple(_parse_entity(e) for e in raw["entities"])

    config = GameConfig(
        player=player,
        spawn=spawn,
        difficulty=difficulty,
        scoring=scoring,
        effects=effects,
        particles=particles,
        floating_text=floating_text,
        persistence=persistence,
        observation=observation,
        colors=colors,
        entities=entities
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
