#!/usr/bin/env python3
"""Render a scene's edges and visibility fan to a PNG snapshot.

The output PNG embeds the scene, so it can be fed back in as input.

Usage (from the repo root):
    python scripts/render_scene.py scene.json out.png
    python scripts/render_scene.py out.png --origin 300 200     # random map
    python scripts/render_scene.py old.png new.png --origin 50 50 --scale 2
"""

import argparse
import random
import sys
from pathlib import Path

# Add the repo root to path
SCRIPT_DIR = Path(__file__).resolve().parent
REPO_DIR = SCRIPT_DIR.parent
sys.path.insert(0, str(REPO_DIR))

from sightline.render import render_scene  # noqa: E402
from sightline.scene_io import (  # noqa: E402
    build_grid,
    load_scene,
    save_scene_png,
    scene_from_grid,
)
from sightline.tilemap import BoundaryGrid  # noqa: E402
from sightline.types import DEFAULT_TILE_SIZE  # noqa: E402
from sightline.visibility import compute_visibility  # noqa: E402


def _random_grid(seed: int) -> BoundaryGrid:
    rng = random.Random(seed)
    grid = BoundaryGrid(32, 24, DEFAULT_TILE_SIZE)
    for _ in range(200):
        grid.set(rng.randrange(32), rng.randrange(24), rng.random() < 0.5)
    return grid


def main():
    parser = argparse.ArgumentParser(
        description="Render a visibility snapshot to PNG"
    )
    parser.add_argument(
        "paths",
        nargs="+",
        metavar="PATH",
        help="[INPUT] OUTPUT: scene file (.json/.png) and output .png",
    )
    parser.add_argument(
        "--origin",
        type=float,
        nargs=2,
        metavar=("X", "Y"),
        help="Viewpoint in world coordinates (default: scene origin)",
    )
    parser.add_argument("--radius", type=float, help="Ray length")
    parser.add_argument("--scale", type=int, default=1, help="Pixel scale")
    parser.add_argument(
        "--seed",
        type=int,
        default=1,
        help="Seed for the random map when no input is given",
    )
    args = parser.parse_args()

    if len(args.paths) > 2:
        parser.error("expected at most two paths")
    output = args.paths[-1]

    if len(args.paths) == 2:
        try:
            scene = load_scene(args.paths[0])
            grid = build_grid(scene)
        except (OSError, KeyError, ValueError) as e:
            print(f"Error: cannot load {args.paths[0]}: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        grid = _random_grid(args.seed)
        scene = scene_from_grid(grid)

    if args.origin is not None:
        scene.origin = (args.origin[0], args.origin[1])
    if args.radius is not None:
        scene.radius = args.radius

    points = []
    if scene.origin is not None:
        points = compute_visibility(scene.origin, scene.radius, grid)

    img = render_scene(grid, scene.origin, points, scale=args.scale)
    save_scene_png(img, scene, output)
    print(
        f"Wrote {output}: {len(grid.edges)} edges, "
        f"{len(points)} visible points"
    )


if __name__ == "__main__":
    main()
