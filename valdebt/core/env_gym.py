"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to the catch game.
Reward is always 0.0 - agents compute their own from info["delta_score"].
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Union
import numpy as np

import gymnasium as gym
from gymnasium import spaces

from valdebt.core.config_loader import GameConfig, load_config
from valdebt.core.game import CoreGame
from valdebt.core.kinds import EntityKind
from valdebt.core.persistence import InMemoryHighScoreStore

_KIND_INDEX = {kind: i for i, kind in enumerate(EntityKind)}


class CatchEnv(gym.Env):
    """
    Val & Debt as a Gymnasium environment.

    Action Space:
        Box(low=0.0, high=1.0, shape=(), dtype=float32)
        Normalized player X; clamped to the configured safe range.

    Observation Space:
        Dict of scalars plus fixed-size object arrays padded with a mask.
        Objects beyond max_objects (nearest to the bottom first) are dropped.

    Reward:
        Always 0.0. Use info["delta_score"] and info["lives"].
    """

    metadata = {
        "render_modes": ["human", "rgb_array"],
        "render_fps": 60,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        render_mode: Optional[str] = None,
        frame_skip: Optional[int] = None,
        debug: bool = False,
    ):
        """
        Initialize environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            render_mode: "human" for window, "rgb_array" for numpy, None for headless.
            frame_skip: Frames simulated per step. Uses config if None.
            debug: If True, prints per-step diagnostics.
        """
        super().__init__()

        self._config = load_config(config_path)
        self.render_mode = render_mode
        self._debug = debug

        obs_cfg = self._config.observation
        self._width = obs_cfg.canvas_width
        self._height = obs_cfg.canvas_height
        self._max_objects = obs_cfg.max_objects
        self._frame_skip = max(1, frame_skip or obs_cfg.frame_skip)
        self._max_frames = obs_cfg.max_frames

        self._game = CoreGame(config=self._config, store=InMemoryHighScoreStore())
        self._screen = None

        self.action_space = spaces.Box(low=0.0, high=1.0, shape=(), dtype=np.float32)
        self.observation_space = self._build_observation_space()

        if self._debug:
            print(f"[DEBUG] CatchEnv initialized")
            print(f"[DEBUG]   Canvas: {self._width}x{self._height}")
            print(f"[DEBUG]   Frame skip: {self._frame_skip}")

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        max_obj = self._max_objects
        num_kinds = len(EntityKind)
        return spaces.Dict({
            "player_x": spaces.Box(low=0, high=1, shape=(), dtype=np.float32),
            "score": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "lives": spaces.Box(low=0, high=self._config.player.max_lives, shape=(), dtype=np.int32),
            "difficulty": spaces.Box(low=1, high=np.iinfo(np.int32).max, shape=(), dtype=np.int32),
            "combo": spaces.Box(low=0, high=np.iinfo(np.int32).max, shape=(), dtype=np.int32),
            "bull_market": spaces.Discrete(2),
            "speed_multiplier": spaces.Box(low=1, high=np.inf, shape=(), dtype=np.float32),
            "objects_count": spaces.Box(low=0, high=max_obj, shape=(), dtype=np.int32),
            "obj_kind": spaces.Box(low=-1, high=num_kinds, shape=(max_obj,), dtype=np.int16),
            "obj_x": spaces.Box(low=-np.inf, high=np.inf, shape=(max_obj,), dtype=np.float32),
            "obj_y": spaces.Box(low=-np.inf, high=np.inf, shape=(max_obj,), dtype=np.float32),
            "obj_speed": spaces.Box(low=0, high=np.inf, shape=(max_obj,), dtype=np.float32),
            "obj_points": spaces.Box(low=-np.inf, high=np.inf, shape=(max_obj,), dtype=np.float32),
            "obj_mask": spaces.MultiBinary(max_obj),
        })

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment and start a run.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        self._game.intent.reset()
        self._game.start_run(seed=seed)

        info = self._game.get_info()
        info["delta_score"] = 0
        return self._build_obs(), info

    def step(
        self,
        action: Union[float, np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one step (frame_skip frames with the same player position).

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
            Reward is always 0.0.
        """
        if isinstance(action, np.ndarray):
            action = float(action.item() if action.ndim == 0 else action[0])

        score_before = self._game.score
        self._game.intent.point_at(float(action))

        events = []
        for _ in range(self._frame_skip):
            state = self._game.step(self._width, self._height)
            events.extend(e.value for e in state.events)
            if self._game.is_over:
                break

        terminated = self._game.is_over
        truncated = not terminated and self._game.state.frame >= self._max_frames

        info = self._game.get_info()
        info["delta_score"] = self._game.score - score_before
        info["events"] = events

        if self._debug:
            print(f"[DEBUG] Step: action={action:.3f}, delta_score={info['delta_score']}, "
                  f"lives={info['lives']}, objects={info['objects']}")
            if terminated:
                print(f"[DEBUG] TERMINATED at frame {info['frame']}")

        return self._build_obs(), 0.0, terminated, truncated, info

    def _build_obs(self) -> Dict[str, np.ndarray]:
        """Pack the current state into fixed-size arrays."""
        state = self._game.state
        max_obj = self._max_objects

        obj_kind = np.full(max_obj, -1, dtype=np.int16)
        obj_x = np.zeros(max_obj, dtype=np.float32)
        obj_y = np.zeros(max_obj, dtype=np.float32)
        obj_speed = np.zeros(max_obj, dtype=np.float32)
        obj_points = np.zeros(max_obj, dtype=np.float32)
        obj_mask = np.zeros(max_obj, dtype=np.int8)

        # Lowest objects are the most urgent
        objects = sorted(state.objects, key=lambda o: o.y, reverse=True)[:max_obj]
        for i, obj in enumerate(objects):
            obj_kind[i] = _KIND_INDEX[obj.kind]
            obj_x[i] = obj.center_x
            obj_y[i] = obj.center_y
            obj_speed[i] = obj.speed
            obj_points[i] = obj.points
            obj_mask[i] = 1

        return {
            "player_x": np.array(state.player_x, dtype=np.float32),
            "score": np.array(state.score, dtype=np.int64),
            "lives": np.array(state.lives, dtype=np.int32),
            "difficulty": np.array(state.difficulty, dtype=np.int32),
            "combo": np.array(state.combo, dtype=np.int32),
            "bull_market": int(state.is_bull_market),
            "speed_multiplier": np.array(state.speed_multiplier, dtype=np.float32),
            "objects_count": np.array(len(objects), dtype=np.int32),
            "obj_kind": obj_kind,
            "obj_x": obj_x,
            "obj_y": obj_y,
            "obj_speed": obj_speed,
            "obj_points": obj_points,
            "obj_mask": obj_mask,
        }

    def _render_to_array(self) -> np.ndarray:
        from valdebt.core.render_pygame import render_to_array
        return render_to_array(
            self._game.state, self._width, self._height, config=self._config
        )

    def render(self) -> Optional[np.ndarray]:
        """
        Render the current game state.

        Returns:
            RGB array if render_mode is "rgb_array", None otherwise.
        """
        if self.render_mode == "rgb_array":
            return self._render_to_array()

        if self.render_mode == "human":
            import pygame
            from valdebt.core.render_pygame import render

            if self._screen is None:
                pygame.init()
                self._screen = pygame.display.set_mode((self._width, self._height))
                pygame.display.set_caption("Val & Debt")
            render(self._screen, self._game.state, self._width, self._height, config=self._config)
            pygame.event.pump()
            pygame.display.flip()

        return None

    def close(self) -> None:
        """Clean up resources."""
        if self._screen is not None:
            import pygame
            pygame.display.quit()
            self._screen = None

    @property
    def game(self) -> CoreGame:
        """Access to underlying game (for debugging/tools)."""
        return self._game

    @property
    def config(self) -> GameConfig:
        return self._config
