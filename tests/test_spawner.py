"""
Tests for the timed weighted spawner.
"""

import pytest
from collections import Counter

from valdebt.core.config_loader import load_config
from valdebt.core.entity_catalog import EntityCatalog
from valdebt.core.kinds import Category, EntityKind
from valdebt.core.spawner import Spawner


WIDTH = 960


@pytest.fixture
def config():
    return load_config()


def _run(spawner, frames, score=0, width=WIDTH):
    """Drive the spawner for `frames` frames and collect (frame, object) pairs."""
    spawned = []
    for frame in range(frames):
        obj = spawner.maybe_spawn(score, width)
        if obj is not None:
            spawned.append((frame, obj))
    return spawned


class TestSpawnTiming:
    """Test interval handling."""

    def test_first_spawn_waits_for_interval(self, config):
        spawner = Spawner(config, seed=7)
        base = spawner.base_interval_for(0)
        spawned = _run(spawner, base + config.spawn.jitter + 1)

        assert len(spawned) == 1
        first_frame = spawned[0][0] + 1  # frames counted, not indices
        assert base <= first_frame <= base + config.spawn.jitter

    def test_spawns_never_closer_than_min_interval(self, config):
        spawner = Spawner(config, seed=3)
        frames = [f for f, _ in _run(spawner, 5000, score=50000)]

        assert len(frames) > 10
        gaps = [b - a for a, b in zip(frames, frames[1:])]
        assert min(gaps) >= config.spawn.min_interval

    def test_interval_shrinks_with_difficulty(self, config):
        spawner = Spawner(config, seed=1)
        assert spawner.base_interval_for(0) > spawner.base_interval_for(2000)
        assert spawner.base_interval_for(10 ** 9) == config.spawn.min_interval

    def test_held_difficulty_overrides_score_tier(self, config):
        spawner = Spawner(config, seed=1)
        spawn = config.spawn
        assert spawner.base_interval_for(0, difficulty=5) == max(
            spawn.min_interval, spawn.base_interval - 5 * spawn.interval_per_tier
        )
        assert spawner.base_interval_for(2000, difficulty=1) == spawner.base_interval_for(2000)

    def test_elapsed_frames_advance_clock(self, config):
        spawner = Spawner(config, seed=5)
        obj = spawner.maybe_spawn(0, WIDTH, elapsed_frames=spawner.target_interval)
        assert obj is not None
        assert spawner.frames_since_spawn == 0

    def test_reset_clears_timing(self, config):
        spawner = Spawner(config, seed=11)
        _run(spawner, 30)
        assert spawner.frames_since_spawn > 0

        spawner.reset()
        assert spawner.frames_since_spawn == 0
        assert spawner.spawned_count == 0


class TestSpawnDeterminism:
    """Test seeded reproducibility."""

    def test_deterministic_with_seed(self, config):
        s1 = Spawner(config, seed=42)
        s2 = Spawner(config, seed=42)

        seq1 = [(f, o.kind, o.x) for f, o in _run(s1, 2000)]
        seq2 = [(f, o.kind, o.x) for f, o in _run(s2, 2000)]

        assert seq1 == seq2

    def test_different_seeds_differ(self, config):
        seq1 = [(f, o.kind, o.x) for f, o in _run(Spawner(config, seed=42), 2000)]
        seq2 = [(f, o.kind, o.x) for f, o in _run(Spawner(config, seed=123), 2000)]

        assert seq1 != seq2

    def test_reset_with_seed_restores_sequence(self, config):
        spawner = Spawner(config, seed=9)
        seq1 = [(f, o.kind, o.x) for f, o in _run(spawner, 1000)]

        spawner.reset(seed=9)
        seq2 = [(f, o.kind, o.x) for f, o in _run(spawner, 1000)]

        assert seq1 == seq2

    def test_separate_spawners_do_not_share_clock(self, config):
        s1 = Spawner(config, seed=1)
        s2 = Spawner(config, seed=1)
        _run(s1, 40)

        assert s2.frames_since_spawn == 0


class TestSpawnedObjects:
    """Test the objects produced."""

    def test_object_starts_above_top_edge(self, config):
        spawner = Spawner(config, seed=2)
        for _, obj in _run(spawner, 1000):
            assert obj.y == -obj.size
            assert obj.rotation == 0.0

    def test_object_fully_inside_canvas_horizontally(self, config):
        spawner = Spawner(config, seed=4)
        for _, obj in _run(spawner, 3000):
            assert obj.x >= 0
            assert obj.x + obj.size <= WIDTH

    def test_narrow_canvas_centers_object(self, config):
        spawner = Spawner(config, seed=4)
        spawned = _run(spawner, 500, width=30)

        assert spawned
        for _, obj in spawned:
            assert obj.center_x == pytest.approx(15)

    def test_fields_copied_from_catalog(self, config):
        catalog = EntityCatalog(config)
        spawner = Spawner(config, seed=8, catalog=catalog)
        for _, obj in _run(spawner, 2000):
            entity_def = catalog[obj.kind]
            assert obj.points == entity_def.points
            assert obj.size == entity_def.size
            assert obj.category == entity_def.category
            assert obj.terminal == entity_def.is_terminal
            assert obj.speed == pytest.approx(entity_def.speed)

    def test_speed_multiplier_applied(self, config):
        catalog = EntityCatalog(config)
        spawner = Spawner(config, seed=8, catalog=catalog)
        obj = spawner.maybe_spawn(0, WIDTH, elapsed_frames=1000, speed_multiplier=1.5)
        assert obj.speed == pytest.approx(catalog[obj.kind].speed * 1.5)

    def test_all_kinds_eventually_spawn(self, config):
        spawner = Spawner(config, seed=0)
        kinds = {o.kind for _, o in _run(spawner, 60000)}
        assert kinds == set(EntityKind)


class TestSpawnWeights:
    """Test debt bias on kind selection."""

    def test_no_bias_at_zero_score(self, config):
        spawner = Spawner(config, seed=0)
        for entity_def, weight in spawner.weights_for(0):
            assert weight == pytest.approx(max(config.spawn.floor_weight, entity_def.weight))

    def test_bias_tilts_toward_liabilities(self, config):
        spawner = Spawner(config, seed=0)
        low = dict((d.kind, w) for d, w in spawner.weights_for(0))
        high = dict((d.kind, w) for d, w in spawner.weights_for(1_000_000))

        catalog = EntityCatalog(config)
        for entity_def in catalog:
            if entity_def.category == Category.ASSET:
                assert high[entity_def.kind] <= low[entity_def.kind]
            else:
                assert high[entity_def.kind] > low[entity_def.kind]

    def test_weights_never_below_floor(self, config):
        spawner = Spawner(config, seed=0)
        for _, weight in spawner.weights_for(10 ** 9):
            assert weight >= config.spawn.floor_weight

    def test_high_score_spawns_more_liabilities(self, config):
        def liability_share(score):
            spawner = Spawner(config, seed=21)
            counts = Counter(o.category for _, o in _run(spawner, 40000, score=score))
            return counts[Category.LIABILITY] / sum(counts.values())

        assert liability_share(20000) > liability_share(0)
