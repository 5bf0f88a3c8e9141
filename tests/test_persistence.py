"""
Tests for high score persistence.
"""

import json

import pytest

from valdebt.core.config_loader import load_config
from valdebt.core.persistence import HighScoreStore, InMemoryHighScoreStore


@pytest.fixture
def config():
    return load_config()


class TestHighScoreStore:
    """Test the JSON file store."""

    def test_save_then_load(self, config, tmp_path):
        store = HighScoreStore(tmp_path / "hs.json", config)
        store.save_high_score(4200)

        assert store.load_high_score() == 4200
        assert HighScoreStore(tmp_path / "hs.json", config).load_high_score() == 4200

    def test_file_uses_configured_key(self, config, tmp_path):
        path = tmp_path / "hs.json"
        HighScoreStore(path, config).save_high_score(10)

        with open(path) as f:
            assert json.load(f) == {config.persistence.high_score_key: 10}

    def test_missing_file_reads_zero(self, config, tmp_path):
        assert HighScoreStore(tmp_path / "absent.json", config).load_high_score() == 0

    @pytest.mark.parametrize("content", [
        "not json at all",
        '{"valdebt_highscore": "abc"}',
        '{"valdebt_highscore": -5}',
        '{"valdebt_highscore": true}',
        "[1, 2, 3]",
    ])
    def test_invalid_content_reads_zero(self, config, tmp_path, content):
        path = tmp_path / "hs.json"
        path.write_text(content)
        assert HighScoreStore(path, config).load_high_score() == 0

    def test_bare_number_is_accepted(self, config, tmp_path):
        path = tmp_path / "hs.json"
        path.write_text("1234")
        assert HighScoreStore(path, config).load_high_score() == 1234

    def test_creates_parent_directories(self, config, tmp_path):
        store = HighScoreStore(tmp_path / "a" / "b" / "hs.json", config)
        store.save_high_score(7)
        assert store.load_high_score() == 7

    def test_unwritable_path_does_not_raise(self, config, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("")
        store = HighScoreStore(blocker / "hs.json", config)

        store.save_high_score(99)
        assert store.load_high_score() == 0


class TestInMemoryStore:
    """Test the process-local store."""

    def test_round_trip(self):
        store = InMemoryHighScoreStore()
        assert store.load_high_score() == 0
        store.save_high_score(300)
        assert store.load_high_score() == 300
        assert store.saves == 1

    def test_negative_initial_is_zero(self):
        assert InMemoryHighScoreStore(-10).load_high_score() == 0
