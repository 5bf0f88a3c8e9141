"""
Tests for the CoreGame session: lifecycle, input, persistence and audio cues.
"""

import dataclasses

import pytest

from valdebt.core.config_loader import load_config
from valdebt.core.events import GameEvent, RecordingAudio
from valdebt.core.game import CoreGame
from valdebt.core.game_state import FallingObject
from valdebt.core.kinds import EntityKind, GameStatus
from valdebt.core.persistence import InMemoryHighScoreStore


WIDTH = 960
HEIGHT = 540


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def audio():
    return RecordingAudio()


@pytest.fixture
def store():
    return InMemoryHighScoreStore(500)


@pytest.fixture
def game(config, store, audio):
    return CoreGame(config=config, seed=42, store=store, audio=audio)


def drop_on_player(game, kind, **changes):
    """Put one object of `kind` right above the player and apply state changes."""
    d = game.catalog[kind]
    obj = FallingObject(
        x=WIDTH / 2 - d.size / 2,
        y=400.0,
        size=d.size,
        category=d.category,
        kind=d.kind,
        points=d.points,
        speed=d.speed,
        terminal=d.is_terminal,
        flashing=d.is_flashing
    )
    game._state = dataclasses.replace(game.state, objects=(obj,), **changes)


class TestLifecycle:
    """Menu, run start and restart."""

    def test_starts_in_menu_with_stored_high_score(self, game):
        assert game.state.status == GameStatus.MENU
        assert game.state.high_score == 500
        assert game.state.lives == 3

    def test_menu_does_not_advance(self, game, audio):
        before = game.state
        assert game.step(WIDTH, HEIGHT) is before
        assert audio.cues == []

    def test_start_run_enters_playing_and_starts_ambient(self, game, audio):
        state = game.start_run()

        assert state.status == GameStatus.PLAYING
        assert state.score == 0
        assert audio.ambient

    def test_start_run_resets_spawner(self, game):
        game.start_run()
        for _ in range(200):
            game.step(WIDTH, HEIGHT)

        game.start_run()
        assert game.spawner.frames_since_spawn == 0
        assert game.spawner.spawned_count == 0
        assert game.state.objects == ()
        assert game.state.frame == 0

    def test_restarts_keep_spawn_gaps(self, game, config):
        spawn_ticks = []
        tick = 0
        for frames in (70, 10, 45, 0, 120, 900):
            game.start_run()
            game.intent.point_at(0.0)
            seen = game.spawner.spawned_count
            for _ in range(frames):
                game.step(WIDTH, HEIGHT)
                tick += 1
                if game.spawner.spawned_count > seen:
                    seen = game.spawner.spawned_count
                    spawn_ticks.append(tick)
                if game.is_over:
                    break

        gaps = [b - a for a, b in zip(spawn_ticks, spawn_ticks[1:])]
        assert len(gaps) >= 5
        assert min(gaps) >= config.spawn.min_interval

    def test_seeded_games_are_identical(self, config):
        g1 = CoreGame(config=config, seed=5)
        g2 = CoreGame(config=config, seed=5)
        g1.start_run()
        g2.start_run()

        for _ in range(600):
            s1 = g1.step(WIDTH, HEIGHT)
            s2 = g2.step(WIDTH, HEIGHT)
            assert s1 == s2


class TestInput:
    """Player intent sampling."""

    def test_pointer_moves_player(self, game):
        game.start_run()
        game.intent.point_at(0.2)
        assert game.step(WIDTH, HEIGHT).player_x == pytest.approx(0.2)

    def test_pointer_is_clamped(self, game, config):
        game.start_run()
        game.intent.point_at(2.0)
        assert game.step(WIDTH, HEIGHT).player_x == pytest.approx(config.player.max_x)

        game.intent.point_at(float("nan"))
        assert game.step(WIDTH, HEIGHT).player_x == pytest.approx(config.player.start_x)

    def test_held_key_moves_every_frame(self, game, config):
        game.start_run()
        game.intent.hold(1)
        for _ in range(4):
            game.step(WIDTH, HEIGHT)

        expected = config.player.start_x + 4 * config.player.keyboard_step
        assert game.state.player_x == pytest.approx(expected)

    def test_intent_reset(self, game, config):
        game.intent.point_at(0.1)
        game.intent.hold(-1)
        game.intent.reset()
        assert game.intent.sample() == config.player.start_x


class TestGameOver:
    """Persistence and cues on the game-over transition."""

    def test_new_high_score_is_saved(self, game, store, audio):
        game.start_run()
        drop_on_player(game, EntityKind.MAINTENANCE, score=900, lives=1)
        state = game.step(WIDTH, HEIGHT)

        assert game.is_over
        assert state.high_score == 850
        assert store.load_high_score() == 850
        assert store.saves == 1
        assert not audio.ambient
        assert GameEvent.NEGATIVE_HIT in audio.cues
        assert GameEvent.GAME_OVER in audio.cues
        assert GameEvent.NEW_HIGH_SCORE in audio.cues

    def test_lower_score_is_not_saved(self, game, store):
        game.start_run()
        drop_on_player(game, EntityKind.MARKET_CRASH, score=100)
        game.step(WIDTH, HEIGHT)

        assert game.is_over
        assert store.saves == 0
        assert store.load_high_score() == 500

    def test_save_happens_once(self, game, store):
        game.start_run()
        drop_on_player(game, EntityKind.MARKET_CRASH, score=2000)
        for _ in range(5):
            game.step(WIDTH, HEIGHT)

        assert store.saves == 1

    def test_restart_keeps_high_score(self, game):
        game.start_run()
        drop_on_player(game, EntityKind.MAINTENANCE, score=900, lives=1)
        game.step(WIDTH, HEIGHT)

        state = game.start_run()
        assert state.status == GameStatus.PLAYING
        assert state.high_score == 850
        assert state.score == 0
        assert state.lives == 3

    def test_run_report(self, game):
        game.start_run()
        drop_on_player(game, EntityKind.STOCKS)
        game.step(WIDTH, HEIGHT)
        drop_on_player(game, EntityKind.MARKET_CRASH)
        game.step(WIDTH, HEIGHT)

        report = game.run_report()
        assert report.total_gains == 150
        assert report.total_losses == 500
        assert report.final_score == 0
        assert not report.is_new_high_score


class TestInfo:
    """get_info summary."""

    def test_info_keys(self, game):
        game.start_run()
        info = game.get_info()
        for key in ("score", "lives", "difficulty", "combo", "is_bull_market",
                    "speed_multiplier", "frame", "objects", "status", "high_score", "events"):
            assert key in info
        assert info["status"] == "playing"
        assert info["events"] == ["ambient_on"]
