"""
High Score Persistence
======================

Best-effort storage for the single high-score value. A failing store never
interrupts the game: reads fall back to 0 and writes are logged and dropped.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Union

from valdebt.core.config_loader import GameConfig, get_config

logger = logging.getLogger(__name__)


def _coerce_score(value) -> int:
    """Interpret a stored value as a non-negative int; anything else is 0."""
    if isinstance(value, bool):
        return 0
    try:
        score = int(value)
    except (TypeError, ValueError):
        return 0
    return max(0, score)


class HighScoreStore:
    """
    JSON-file store keyed by the configured high-score key.

    The file holds a small object so other values can share it later, e.g.
    {"valdebt_highscore": 4200}.
    """

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        config: Optional[GameConfig] = None
    ):
        """
        Args:
            path: File location. Uses persistence.high_score_path if None.
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()
        if path is None:
            path = config.persistence.high_score_path
        self._path = Path(path).expanduser()
        self._key = config.persistence.high_score_key

    @property
    def path(self) -> Path:
        return self._path

    def load_high_score(self) -> int:
        """Stored high score, or 0 if missing or unreadable."""
        try:
            with open(self._path, "r") as f:
                data = json.load(f)
        except FileNotFoundError:
            return 0
        except (OSError, ValueError) as e:
            logger.warning("could not read high score from %s: %s", self._path, e)
            return 0

        if isinstance(data, dict):
            return _coerce_score(data.get(self._key, 0))
        return _coerce_score(data)

    def save_high_score(self, score: int) -> None:
        """Write the high score. Failures are logged, never raised."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "w") as f:
                json.dump({self._key: _coerce_score(score)}, f)
        except (OSError, TypeError, ValueError) as e:
            logger.warning("could not save high score to %s: %s", self._path, e)


class InMemoryHighScoreStore:
    """Process-local store for tests and agent training."""

    def __init__(self, initial: int = 0):
        self._value = _coerce_score(initial)
        self.saves = 0

    def load_high_score(self) -> int:
        return self._value

    def save_high_score(self, score: int) -> None:
        self._value = _coerce_score(score)
        self.saves += 1
