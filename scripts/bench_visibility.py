#!/usr/bin/env python3
"""Benchmark visibility queries over a randomly mutated map.

Builds a screen-sized map (1280x960 pixels, 40 px tiles), then times
visibility queries from a sweep of origins, applying one random mutation
every ``--mutate-every`` queries so the edge count drifts like it would
under an interactive editor.

Usage (from the repo root):
    python scripts/bench_visibility.py               # default: 500 queries
    python scripts/bench_visibility.py -q 2000
    python scripts/bench_visibility.py --seed 7 --mutate-every 50
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
from sightline.types import DEFAULT_RADIUS, DEFAULT_TILE_SIZE  # noqa: E402
from sightline.visibility import compute_visibility  # noqa: E402

SCREEN_W = 1280
SCREEN_H = 960


def main():
    parser = argparse.ArgumentParser(
        description="Benchmark visibility polygon queries"
    )
    parser.add_argument(
        "-q",
        "--queries",
        type=int,
        default=500,
        help="Number of timed queries (default: 500)",
    )
    parser.add_argument(
        "--mutate-every",
        type=int,
        default=100,
        help="Apply one random mutation every N queries (default: 100)",
    )
    parser.add_argument(
        "--seed", type=int, default=1, help="Random seed (default: 1)"
    )
    args = parser.parse_args()
    if args.queries <= 0 or args.mutate_every <= 0:
        print(
            "Error: --queries and --mutate-every must be positive",
            file=sys.stderr,
        )
        sys.exit(1)

    ts = DEFAULT_TILE_SIZE
    nx, ny = SCREEN_W // ts, SCREEN_H // ts
    rng = random.Random(args.seed)
    grid = BoundaryGrid(nx, ny, ts)
    for _ in range(1000):
        grid.set(rng.randrange(nx), rng.randrange(ny), rng.random() < 0.5)

    print(
        f"Benchmark: {nx}x{ny} grid ({ts} px tiles), "
        f"{args.queries} queries, seed={args.seed}"
    )
    print()

    times_ms = []
    n_points = []
    min_edges = max_edges = len(grid.edges)
    for i in range(args.queries):
        if i % args.mutate_every == 0:
            grid.set(rng.randrange(nx), rng.randrange(ny), rng.random() < 0.5)
        min_edges = min(min_edges, len(grid.edges))
        max_edges = max(max_edges, len(grid.edges))
        origin = (rng.uniform(1, SCREEN_W - 1), rng.uniform(1, SCREEN_H - 1))

        start = time.perf_counter()
        points = compute_visibility(origin, DEFAULT_RADIUS, grid)
        times_ms.append((time.perf_counter() - start) * 1000)
        n_points.append(len(points))

    print(f"Edges:  {min_edges} - {max_edges}")
    print(f"Points: {min(n_points)} - {max(n_points)}")
    print(f"Median: {statistics.median(times_ms):.2f} ms/query")
    print(f"Mean:   {statistics.mean(times_ms):.2f} ms/query")
    if len(times_ms) > 1:
        print(f"Stdev:  {statistics.stdev(times_ms):.2f} ms/query")


if __name__ == "__main__":
    main()
