"""
Tests for the end-of-run report.
"""

import dataclasses

import pytest

from valdebt.core.config_loader import load_config
from valdebt.core.entity_catalog import EntityCatalog
from valdebt.core.game_state import create_initial_state
from valdebt.core.kinds import EntityKind, GameStatus
from valdebt.core.report import PERFORMANCE_NEGATIVE, PERFORMANCE_POSITIVE, build_run_report


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def catalog(config):
    return EntityCatalog(config)


def finished(config, **changes):
    state = create_initial_state(config)
    return dataclasses.replace(state, status=GameStatus.GAMEOVER, lives=0, **changes)


class TestRunReport:
    """Test breakdown and verdict."""

    def test_breakdown_lists_every_kind(self, config, catalog):
        state = finished(config, gains={EntityKind.STOCKS: 300}, losses={EntityKind.MAINTENANCE: 50})
        report = build_run_report(state, catalog)

        assert [line.kind for line in report.assets] == [d.kind for d in catalog.assets]
        assert [line.kind for line in report.liabilities] == [d.kind for d in catalog.liabilities]
        amounts = {line.kind: line.amount for line in report.assets + report.liabilities}
        assert amounts[EntityKind.STOCKS] == 300
        assert amounts[EntityKind.MAINTENANCE] == 50
        assert amounts[EntityKind.FAMILY_HOME] == 0

    def test_label_keys_come_from_catalog(self, config, catalog):
        report = build_run_report(finished(config), catalog)
        assert report.assets[0].label_key == catalog.assets[0].label_key

    def test_positive_verdict(self, config, catalog):
        state = finished(config, gains={EntityKind.EDUCATION: 400}, losses={EntityKind.INTEREST_HIKE: 100})
        report = build_run_report(state, catalog)

        assert report.total_gains == 400
        assert report.total_losses == 100
        assert report.net == 300
        assert report.performance_key == PERFORMANCE_POSITIVE

    def test_tie_is_negative_verdict(self, config, catalog):
        state = finished(config, gains={EntityKind.STOCKS: 150}, losses={EntityKind.MARKET_CRASH: 150})
        assert build_run_report(state, catalog).performance_key == PERFORMANCE_NEGATIVE

    def test_new_high_score_against_previous(self, config, catalog):
        state = finished(config, score=900, high_score=900)
        assert build_run_report(state, catalog, previous_high_score=500).is_new_high_score
        assert not build_run_report(state, catalog, previous_high_score=900).is_new_high_score

    def test_new_high_score_without_previous(self, config, catalog):
        assert build_run_report(finished(config, score=900, high_score=900), catalog).is_new_high_score
        assert not build_run_report(finished(config, score=0, high_score=0), catalog).is_new_high_score
