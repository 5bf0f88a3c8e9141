"""
Performance Benchmark
=====================

Measures simulation, environment and render throughput for performance tuning.

Usage:
    python -m tools.benchmark_speed [--steps S] [--quick] [--no-render]
"""

from __future__ import annotations

import argparse
import sys
import time
import numpy as np

from valdebt.core.config_loader import load_config
from valdebt.core.game import CoreGame
from valdebt.core.env_gym import CatchEnv


def benchmark_core_game(
    num_steps: int = 1000,
    seed: int = 42
) -> dict:
    """
    Benchmark raw CoreGame frames without Gym overhead.

    Args:
        num_steps: Number of frames.
        seed: Random seed.

    Returns:
        Dict with timing results.
    """
    config = load_config()
    game = CoreGame(config=config, seed=seed)
    rng = np.random.default_rng(seed)
    width = config.observation.canvas_width
    height = config.observation.canvas_height

    # Warmup
    game.start_run(seed=seed)
    for _ in range(10):
        game.intent.point_at(float(rng.uniform(0, 1)))
        game.step(width, height)
        if game.is_over:
            game.start_run()

    # Benchmark
    game.start_run(seed=seed)
    start = time.perf_counter()

    for _ in range(num_steps):
        game.intent.point_at(float(rng.uniform(0, 1)))
        game.step(width, height)
        if game.is_over:
            game.start_run()

    elapsed = time.perf_counter() - start

    return {
        "mode": "core_game",
        "num_steps": num_steps,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_steps / elapsed,
        "ms_per_step": (elapsed * 1000) / num_steps
    }


def benchmark_single_env(
    num_steps: int = 1000,
    seed: int = 42,
    render: bool = False
) -> dict:
    """
    Benchmark CatchEnv step throughput.

    Args:
        num_steps: Number of steps to run.
        seed: Random seed.
        render: If True, also renders an rgb_array every step.

    Returns:
        Dict with timing results.
    """
    env = CatchEnv(render_mode="rgb_array" if render else None)
    rng = np.random.default_rng(seed)

    # Warmup
    obs, _ = env.reset(seed=seed)
    for _ in range(10):
        action = rng.uniform(0, 1)
        obs, _, terminated, truncated, _ = env.step(action)
        if terminated or truncated:
            obs, _ = env.reset()

    # Benchmark
    obs, _ = env.reset(seed=seed)
    start = time.perf_counter()

    for _ in range(num_steps):
        action = rng.uniform(0, 1)
        obs, _, terminated, truncated, _ = env.step(action)
        if render:
            env.render()
        if terminated or truncated:
            obs, _ = env.reset()

    elapsed = time.perf_counter() - start
    env.close()

    return {
        "mode": "env_render" if render else "env",
        "num_steps": num_steps,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_steps / elapsed,
        "ms_per_step": (elapsed * 1000) / num_steps
    }


def run_all_benchmarks(steps: int = 500, include_render: bool = True) -> list:
    """Run comprehensive benchmarks."""
    results = []

    print("=" * 60)
    print("VAL & DEBT PERFORMANCE BENCHMARK")
    print("=" * 60)
    print()

    print("Benchmarking CoreGame (raw)...")
    result = benchmark_core_game(num_steps=steps)
    results.append(result)
    print(f"  Frames/sec: {result['steps_per_second']:.1f}")
    print(f"  ms/frame:   {result['ms_per_step']:.3f}")
    print()

    print("Benchmarking CatchEnv...")
    result = benchmark_single_env(num_steps=steps)
    results.append(result)
    print(f"  Steps/sec: {result['steps_per_second']:.1f}")
    print(f"  ms/step:   {result['ms_per_step']:.3f}")
    print()

    if include_render:
        print("Benchmarking CatchEnv with rgb_array rendering...")
        result = benchmark_single_env(num_steps=steps, render=True)
        results.append(result)
        print(f"  Steps/sec: {result['steps_per_second']:.1f}")
        print(f"  ms/step:   {result['ms_per_step']:.3f}")
        print()

    print("=" * 60)
    print("SUMMARY")
    print("=" * 60)
    print()
    print(f"{'Mode':<20} {'Steps/s':>12} {'ms/step':>10}")
    print("-" * 44)

    for r in results:
        print(f"{r['mode']:<20} {r['steps_per_second']:>12.1f} {r['ms_per_step']:>10.3f}")

    # 60 fps leaves ~16.7 ms per frame
    slowest = max(r["ms_per_step"] for r in results)
    if slowest > 1000 / 60:
        print()
        print(f"WARNING: slowest mode takes {slowest:.2f} ms, above the 60 fps frame budget")

    return results


def main():
    parser = argparse.ArgumentParser(description="Benchmark Val & Debt performance")
    parser.add_argument("--steps", type=int, default=500, help="Steps per benchmark")
    parser.add_argument("--quick", action="store_true", help="Quick benchmark (fewer steps)")
    parser.add_argument("--no-render", action="store_true", help="Skip the rendering benchmark")

    args = parser.parse_args()

    steps = 100 if args.quick else args.steps

    run_all_benchmarks(steps=steps, include_render=not args.no_render)

    return 0


if __name__ == "__main__":
    sys.exit(main())
