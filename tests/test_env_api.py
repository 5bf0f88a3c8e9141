"""
Tests for Gymnasium environment API.
"""

import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pytest
import numpy as np

from valdebt.core.config_loader import load_config
from valdebt.core.env_gym import CatchEnv


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def env():
    env = CatchEnv()
    yield env
    env.close()


class TestCatchEnv:
    """Test single environment API."""

    def test_reset_returns_obs_and_info(self, env):
        """Reset should return (observation, info) tuple."""
        result = env.reset(seed=42)

        assert isinstance(result, tuple)
        assert len(result) == 2

        obs, info = result
        assert isinstance(obs, dict)
        assert isinstance(info, dict)
        assert info["status"] == "playing"
        assert info["delta_score"] == 0

    def test_observation_structure(self, env, config):
        """Observation should have expected keys and shapes."""
        obs, _ = env.reset(seed=42)
        max_obj = config.observation.max_objects

        for key in ("player_x", "score", "lives", "difficulty", "combo",
                    "bull_market", "speed_multiplier", "objects_count"):
            assert key in obs

        for key in ("obj_kind", "obj_x", "obj_y", "obj_speed", "obj_points", "obj_mask"):
            assert obs[key].shape == (max_obj,)

    def test_observation_in_space(self, env):
        obs, _ = env.reset(seed=42)
        assert env.observation_space.contains(obs)

        for _ in range(100):
            obs, _, terminated, truncated, _ = env.step(0.5)
            assert env.observation_space.contains(obs)
            if terminated or truncated:
                break

    def test_step_returns_five_tuple(self, env):
        env.reset(seed=42)
        result = env.step(np.float32(0.3))

        assert len(result) == 5
        obs, reward, terminated, truncated, info = result
        assert reward == 0.0
        assert isinstance(terminated, bool)
        assert isinstance(truncated, bool)
        assert "delta_score" in info
        assert "events" in info

    def test_action_sets_player_position(self, env, config):
        env.reset(seed=42)
        obs, *_ = env.step(np.array(0.25, dtype=np.float32))
        assert float(obs["player_x"]) == pytest.approx(0.25)

        obs, *_ = env.step(np.array([5.0], dtype=np.float32))
        assert float(obs["player_x"]) == pytest.approx(config.player.max_x)

    def test_mask_matches_count(self, env):
        env.reset(seed=1)
        for _ in range(300):
            obs, _, terminated, truncated, _ = env.step(0.05)
            assert int(obs["obj_mask"].sum()) == int(obs["objects_count"])
            assert np.all(obs["obj_kind"][obs["obj_mask"] == 0] == -1)
            if terminated or truncated:
                break

    def test_deterministic_with_seed(self):
        env1 = CatchEnv()
        env2 = CatchEnv()
        try:
            obs1, _ = env1.reset(seed=7)
            obs2, _ = env2.reset(seed=7)
            for i in range(300):
                action = (i % 10) / 10
                obs1, *_ = env1.step(action)
                obs2, *_ = env2.step(action)
            for key in obs1:
                np.testing.assert_array_equal(obs1[key], obs2[key])
        finally:
            env1.close()
            env2.close()

    def test_truncation_at_frame_limit(self, env):
        env.reset(seed=3)
        env._max_frames = 5

        truncated = False
        for _ in range(5):
            _, _, terminated, truncated, info = env.step(0.5)
        assert truncated
        assert info["frame"] == 5

    def test_frame_skip(self):
        env = CatchEnv(frame_skip=4)
        try:
            env.reset(seed=0)
            _, _, _, _, info = env.step(0.5)
            assert info["frame"] == 4
        finally:
            env.close()

    def test_rgb_array_render(self, config):
        env = CatchEnv(render_mode="rgb_array")
        try:
            env.reset(seed=0)
            env.step(0.5)
            frame = env.render()
            assert frame.shape == (config.observation.canvas_height, config.observation.canvas_width, 3)
            assert frame.dtype == np.uint8
        finally:
            env.close()
