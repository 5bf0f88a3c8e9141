"""
Val & Debt Core - the frame simulation and its collaborators.

Main exports:
- CoreGame: Game session (state + spawner + persistence + audio cues)
- update: Pure one-frame state transition
- Spawner: Timed weighted spawner, one per game
- CatchEnv: Gymnasium environment for agents
- GameConfig: Configuration loaded from game_config.yaml
"""

from valdebt.core.config_loader import GameConfig, load_config
from valdebt.core.kinds import Category, EntityKind, GameStatus, VisualTag
from valdebt.core.entity_catalog import EntityCatalog, EntityDef
from valdebt.core.game_state import (
    GameState,
    FallingObject,
    Particle,
    FloatingText,
    PlayerIntent,
    create_initial_state,
    start_run,
    apply_player_input,
)
from valdebt.core.spawner import Spawner
from valdebt.core.simulation import update
from valdebt.core.collision import Rect, aabb_intersects, check_collision
from valdebt.core.feedback import particle_burst, floating_text
from valdebt.core.events import GameEvent, NullAudio, dispatch_events
from valdebt.core.persistence import HighScoreStore, InMemoryHighScoreStore
from valdebt.core.report import RunReport, build_run_report
from valdebt.core.game import CoreGame
from valdebt.core.env_gym import CatchEnv

__all__ = [
    "GameConfig",
    "load_config",
    "Category",
    "EntityKind",
    "GameStatus",
    "VisualTag",
    "EntityCatalog",
    "EntityDef",
    "GameState",
    "FallingObject",
    "Particle",
    "FloatingText",
    "PlayerIntent",
    "create_initial_state",
    "start_run",
    "apply_player_input",
    "Spawner",
    "update",
    "Rect",
    "aabb_intersects",
    "check_collision",
    "particle_burst",
    "floating_text",
    "GameEvent",
    "NullAudio",
    "dispatch_events",
    "HighScoreStore",
    "InMemoryHighScoreStore",
    "RunReport",
    "build_run_report",
    "CoreGame",
    "CatchEnv",
]
