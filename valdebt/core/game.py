"""
Core Game
=========

Game session orchestrating state, spawner, persistence and audio cues.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from valdebt.core.config_loader import GameConfig, get_config
from valdebt.core.entity_catalog import EntityCatalog, get_catalog
from valdebt.core.events import AudioSink, NullAudio, dispatch_events
from valdebt.core.game_state import (
    GameState,
    PlayerIntent,
    apply_player_input,
    create_initial_state,
    start_run,
)
from valdebt.core.kinds import GameStatus
from valdebt.core.persistence import InMemoryHighScoreStore
from valdebt.core.report import RunReport, build_run_report
from valdebt.core.simulation import update
from valdebt.core.spawner import Spawner

logger = logging.getLogger(__name__)


class CoreGame:
    """
    Main game session.

    Owns:
    - The current GameState (replaced every frame)
    - This game's Spawner
    - The player intent sampled at the start of each frame
    - The high-score store and audio sink collaborators

    The frame driver calls `step` once per display frame and then draws
    `state` with the renderer.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        store=None,
        audio: Optional[AudioSink] = None
    ):
        """
        Initialize game.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility.
            store: High-score store with load_high_score/save_high_score.
                In-memory if None.
            audio: Audio sink for cues. Silent if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._seed = seed
        self._catalog = get_catalog(config)
        self._spawner = Spawner(config, seed, self._catalog)
        self._store = store if store is not None else InMemoryHighScoreStore()
        self._audio = audio if audio is not None else NullAudio()
        self._intent = PlayerIntent(config)

        self._state = create_initial_state(config, self._store.load_high_score())
        self._run_start_high_score = self._state.high_score

    @property
    def config(self) -> GameConfig:
        return self._config

    @property
    def catalog(self) -> EntityCatalog:
        return self._catalog

    @property
    def spawner(self) -> Spawner:
        return self._spawner

    @property
    def intent(self) -> PlayerIntent:
        """Input collaborator writes here; read once per step."""
        return self._intent

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def score(self) -> int:
        return self._state.score

    @property
    def is_over(self) -> bool:
        return self._state.status == GameStatus.GAMEOVER

    def start_run(self, seed: Optional[int] = None) -> GameState:
        """
        Begin a fresh run from the menu or after game over.

        Resets the spawner together with the state so no timing carries over.
        """
        if seed is not None:
            self._seed = seed
        self._spawner.reset(seed)
        self._state = start_run(self._state, self._config)
        self._run_start_high_score = self._state.high_score
        dispatch_events(self._state.events, self._audio)
        logger.info("run started (high score %d)", self._state.high_score)
        return self._state

    def step(self, width: float, height: float) -> GameState:
        """
        Run one frame: sample input, update, persist on game over, emit cues.

        Args:
            width: Canvas width in pixels.
            height: Canvas height in pixels.
        """
        previous = apply_player_input(self._state, self._intent.sample(), self._config)
        state = update(previous, width, height, self._spawner, self._config)

        if state is previous:
            self._state = state
            return state

        if previous.status == GameStatus.PLAYING and state.status == GameStatus.GAMEOVER:
            if state.high_score > previous.high_score:
                self._store.save_high_score(state.high_score)

        self._state = state
        dispatch_events(state.events, self._audio)
        return state

    def run_report(self) -> RunReport:
        """Investment breakdown of the current (usually finished) run."""
        return build_run_report(self._state, self._catalog, self._run_start_high_score)

    def get_info(self) -> Dict[str, Any]:
        """Summary dict for logs and the Gymnasium wrapper."""
        s = self._state
        return {
            "score": s.score,
            "lives": s.lives,
            "difficulty": s.difficulty,
            "combo": s.combo,
            "is_bull_market": s.is_bull_market,
            "speed_multiplier": s.speed_multiplier,
            "frame": s.frame,
            "objects": len(s.objects),
            "status": s.status.value,
            "high_score": s.high_score,
            "events": [e.value for e in s.events],
        }
