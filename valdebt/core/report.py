"""
Run Report
==========

End-of-run investment summary built from the per-kind gain/loss counters.
Only label keys are produced; the host resolves them to display text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from valdebt.core.entity_catalog import EntityCatalog, get_catalog
from valdebt.core.game_state import GameState
from valdebt.core.kinds import EntityKind


PERFORMANCE_POSITIVE = "performanceAnalysisPositive"
PERFORMANCE_NEGATIVE = "performanceAnalysisNegative"


@dataclass(frozen=True)
class BreakdownLine:
    kind: EntityKind
    label_key: str
    amount: int


@dataclass(frozen=True)
class RunReport:
    final_score: int
    high_score: int
    is_new_high_score: bool
    total_gains: int
    total_losses: int
    assets: Tuple[BreakdownLine, ...]
    liabilities: Tuple[BreakdownLine, ...]
    performance_key: str

    @property
    def net(self) -> int:
        return self.total_gains - self.total_losses


def build_run_report(
    state: GameState,
    catalog: Optional[EntityCatalog] = None,
    previous_high_score: Optional[int] = None
) -> RunReport:
    """
    Summarize a finished (or running) game.

    Args:
        state: The state to summarize.
        catalog: Entity catalog for label keys. Uses default if None.
        previous_high_score: High score before this run; when given, the
            new-high-score flag compares against it.
    """
    if catalog is None:
        catalog = get_catalog()

    assets = tuple(
        BreakdownLine(d.kind, d.label_key, state.gains.get(d.kind, 0))
        for d in catalog.assets
    )
    liabilities = tuple(
        BreakdownLine(d.kind, d.label_key, state.losses.get(d.kind, 0))
        for d in catalog.liabilities
    )
    total_gains = sum(line.amount for line in assets)
    total_losses = sum(line.amount for line in liabilities)

    if previous_high_score is None:
        is_new = state.score > 0 and state.score >= state.high_score
    else:
        is_new = state.score > previous_high_score

    return RunReport(
        final_score=state.score,
        high_score=state.high_score,
        is_new_high_score=is_new,
        total_gains=total_gains,
        total_losses=total_losses,
        assets=assets,
        liabilities=liabilities,
        performance_key=PERFORMANCE_POSITIVE if total_gains > total_losses else PERFORMANCE_NEGATIVE
    )
