#!/usr/bin/env python3
"""Benchmark edge rebuilds under random cell mutations.

Seeds a grid with random mutations, then times replaying a second batch of
mutations (each one that changes a cell triggers a full edge rebuild).

Usage (from the repo root):
    python scripts/bench_edges.py                # default: 5 iterations, 1000 mutations
    python scripts/bench_edges.py -n 10          # 10 iterations
    python scripts/bench_edges.py -m 200 --seed 3
"""

import argparse
import random
import statistics
import sys
import time
from pathlib import Path

# Add the repo root to path
SCRIPT_DIR = Path(__file__).resolve().parent
REPO_DIR = SCRIPT_DIR.parent
sys.path.insert(0, str(REPO_DIR))

from sightline.tilemap import BoundaryGrid  # noqa: E402

GRID_WIDTH = 32
GRID_HEIGHT = 24
TILE_SIZE = 20


def random_mutations(rng, count, width, height):
    """List of (x, y, value) cell writes."""
    return [
        (rng.randrange(width), rng.randrange(height), rng.random() < 0.5)
        for _ in range(count)
    ]


def main():
    parser = argparse.ArgumentParser(
        description="Benchmark boundary edge rebuilds"
    )
    parser.add_argument(
        "-n",
        "--iterations",
        type=int,
        default=5,
        help="Number of iterations (default: 5)",
    )
    parser.add_argument(
        "-m",
        "--mutations",
        type=int,
        default=1000,
        help="Mutations replayed per iteration (default: 1000)",
    )
    parser.add_argument(
        "--seed", type=int, default=1, help="Random seed (default: 1)"
    )
    args = parser.parse_args()

    rng = random.Random(args.seed)
    grid = BoundaryGrid(GRID_WIDTH, GRID_HEIGHT, TILE_SIZE)
    for x, y, value in random_mutations(rng, 100, GRID_WIDTH, GRID_HEIGHT):
        grid.set(x, y, value)
    mutations = random_mutations(
        rng, args.mutations, GRID_WIDTH, GRID_HEIGHT
    )

    print(
        f"Benchmark: {GRID_WIDTH}x{GRID_HEIGHT} grid, "
        f"{args.mutations} mutations, seed={args.seed}"
    )
    print(f"Iterations: {args.iterations}")
    print()

    times_ms = []
    for i in range(args.iterations):
        start = time.perf_counter()
        for x, y, value in mutations:
            grid.set(x, y, value)
        elapsed_ms = (time.perf_counter() - start) * 1000
        times_ms.append(elapsed_ms)
        print(f"  Run {i + 1}: {elapsed_ms:.1f} ms ({len(grid.edges)} edges)")

    median = statistics.median(times_ms)
    mean = statistics.mean(times_ms)
    print()
    print(f"Median: {median:.1f} ms")
    print(f"Mean:   {mean:.1f} ms")
    if len(times_ms) > 1:
        stdev = statistics.stdev(times_ms)
        print(f"Stdev:  {stdev:.1f} ms")


if __name__ == "__main__":
    main()
