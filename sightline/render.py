"""Debug snapshots of a grid, its edges and a visibility fan.

Draws what an interactive viewer would show for one frame: occupied tiles,
boundary edges (with a larger marker on each edge's start and a smaller one
on its end), and a ray from the origin to every visibility point.
"""

from __future__ import annotations

from collections.abc import Sequence

from PIL import Image, ImageDraw

from .tilemap import BoundaryGrid
from .types import Point2D, VisibilityPoint

BACKGROUND = (0, 0, 0)
TILE_COLOR = (100, 100, 100)
EDGE_COLOR = (200, 120, 10)
EDGE_START_COLOR = (200, 10, 10)
EDGE_END_COLOR = (200, 200, 10)
RAY_COLOR = (200, 200, 10)
ORIGIN_COLOR = (255, 255, 255)


def render_scene(
    grid: BoundaryGrid,
    origin: Point2D | tuple[float, float] | None = None,
    points: Sequence[VisibilityPoint] = (),
    scale: int = 1,
) -> Image.Image:
    """Render the grid in world coordinates multiplied by ``scale``."""
    if scale <= 0:
        raise ValueError(f"scale must be positive, got {scale!r}")
    ts = grid.tile_size
    w = grid.width * ts * scale
    h = grid.height * ts * scale

    # 1. Background
    img = Image.new("RGB", (w, h), BACKGROUND)
    draw = ImageDraw.Draw(img)

    # 2. Tiles
    occupancy = grid.occupancy()
    for x in range(grid.width):
        for y in range(grid.height):
            if occupancy[x, y]:
                x0 = x * ts * scale
                y0 = y * ts * scale
                draw.rectangle(
                    [x0, y0, x0 + ts * scale - 1, y0 + ts * scale - 1],
                    fill=TILE_COLOR,
                )

    # 3. Edges with endpoint markers
    for e in grid.edges:
        sx, sy = e.start.x * scale, e.start.y * scale
        ex, ey = e.end.x * scale, e.end.y * scale
        draw.line([(sx, sy), (ex, ey)], fill=EDGE_COLOR)
        draw.rectangle([sx - 2, sy - 2, sx + 2, sy + 2], fill=EDGE_START_COLOR)
        draw.rectangle([ex - 1, ey - 1, ex + 1, ey + 1], fill=EDGE_END_COLOR)

    # 4. Rays
    if origin is not None:
        o = Point2D.from_pair(origin)
        ox, oy = o.x * scale, o.y * scale
        for p in points:
            draw.line([(ox, oy), (p.x * scale, p.y * scale)], fill=RAY_COLOR)
        draw.ellipse([ox - 3, oy - 3, ox + 3, oy + 3], fill=ORIGIN_COLOR)

    return img
