"""
Scoring System
==============

Hit outcomes, combo/bull-market rules, difficulty tiers and speed milestones.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from valdebt.core.config_loader import GameConfig, get_config
from valdebt.core.game_state import FallingObject, GameState
from valdebt.core.kinds import EntityKind


def difficulty_for_score(score: int, config: Optional[GameConfig] = None) -> int:
    """Difficulty tier as a step function of score (tier 1 at score 0)."""
    if config is None:
        config = get_config()
    return 1 + max(0, score) // config.difficulty.tier_step


def debt_bias(score: int, config: Optional[GameConfig] = None) -> float:
    """Fraction by which spawn weights tilt toward liabilities."""
    if config is None:
        config = get_config()
    spawn = config.spawn
    if spawn.bias_score_scale <= 0:
        return spawn.max_debt_bias
    return min(spawn.max_debt_bias, max(0, score) / spawn.bias_score_scale)


def advance_milestone(
    score: int,
    next_milestone: int,
    speed_multiplier: float,
    config: Optional[GameConfig] = None
) -> Tuple[int, float]:
    """
    Apply at most one speed bump when the score has reached the milestone.

    Returns:
        (next_milestone, speed_multiplier), unchanged if not reached.
    """
    if config is None:
        config = get_config()
    if score >= next_milestone:
        return (
            next_milestone + config.difficulty.milestone_step,
            speed_multiplier * config.difficulty.speed_bump
        )
    return next_milestone, speed_multiplier


@dataclass
class ScoreEvent:
    """Record of a single catch."""
    kind: EntityKind
    points: int
    lives_lost: int = 0
    doubled: bool = False
    terminal: bool = False
    bull_market_started: bool = False

    def __repr__(self) -> str:
        if self.terminal:
            return f"ScoreEvent(terminal {self.kind.value}={self.points})"
        if self.doubled:
            return f"ScoreEvent({self.kind.value}={self.points}, doubled)"
        return f"ScoreEvent({self.kind.value}={self.points})"


class ScoreTracker:
    """
    Working copy of the scoring fields for one frame.

    Built from the entry-time state, fed every catch in iteration order,
    then folded back into the next state. Score is clamped only in
    `clamped_score` so intermediate sums may go negative.
    """

    def __init__(self, state: GameState, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self.score: int = state.score
        self.lives: int = state.lives
        self.combo: int = state.combo
        self.combo_timer: int = state.combo_timer
        self.is_bull_market: bool = state.is_bull_market
        self.gains: Dict[EntityKind, int] = dict(state.gains)
        self.losses: Dict[EntityKind, int] = dict(state.losses)

    @property
    def clamped_score(self) -> int:
        return max(0, self.score)

    def tick_bull_market(self) -> bool:
        """
        Count down the bull-market window by one frame.

        Returns:
            True if the window closed on this tick.
        """
        if self.combo_timer <= 0:
            return False
        self.combo_timer -= 1
        if self.combo_timer == 0:
            self.is_bull_market = False
            # A new streak is needed for the next window
            self.combo = 0
            return True
        return False

    def apply_asset(self, obj: FallingObject) -> ScoreEvent:
        """Score a caught asset and advance the combo."""
        scoring = self._config.scoring
        doubled = self.is_bull_market
        points = obj.points * scoring.bull_market_multiplier if doubled else obj.points

        self.score += points
        self.combo += 1
        self.gains[obj.kind] = self.gains.get(obj.kind, 0) + points

        started = False
        if self.combo >= scoring.combo_threshold and not self.is_bull_market:
            self.is_bull_market = True
            self.combo_timer = scoring.bull_market_duration
            started = True

        return ScoreEvent(
            kind=obj.kind,
            points=points,
            doubled=doubled,
            bull_market_started=started
        )

    def apply_liability(self, obj: FallingObject) -> ScoreEvent:
        """
        Apply a caught liability.

        Terminal kinds drop lives to zero regardless of how many remain;
        their point delta still applies.
        """
        lives_before = self.lives
        if obj.terminal:
            self.lives = 0
        else:
            self.lives = max(0, self.lives - 1)

        self.score += obj.points
        self.losses[obj.kind] = self.losses.get(obj.kind, 0) + abs(obj.points)
        self._break_combo()

        return ScoreEvent(
            kind=obj.kind,
            points=obj.points,
            lives_lost=lives_before - self.lives,
            terminal=obj.terminal
        )

    def _break_combo(self) -> None:
        self.combo = 0
        self.combo_timer = 0
        self.is_bull_market = False
