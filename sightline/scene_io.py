"""Save and load scenes as PNG (with embedded metadata) or JSON.

A scene is a grid size, a tile size, the list of occupied cells and an
optional viewpoint (see ``SceneParams``). The PNG form stores a rendered
snapshot with the scene JSON embedded in a tEXt chunk (key:
``sightline_scene``), so one file is both a picture and a loadable scene.
Plain JSON files are supported as well.

Used by ``scripts/render_scene.py``.
"""

from __future__ import annotations

import json
from pathlib import Path

from PIL import Image
from PIL.PngImagePlugin import PngInfo

from .tilemap import BoundaryGrid
from .types import DEFAULT_RADIUS, SceneParams

METADATA_KEY = "sightline_scene"


def build_grid(scene: SceneParams) -> BoundaryGrid:
    """Build the grid a scene describes.

    Raises ValueError if a wall lies outside the grid.
    """
    grid = BoundaryGrid(
        scene.width, scene.height, scene.tile_size, scene.solid_border
    )
    occupancy = grid.occupancy()
    for x, y in scene.walls:
        if not grid.in_bounds(x, y):
            raise ValueError(
                f"wall ({x}, {y}) is outside the "
                f"{scene.width}x{scene.height} grid"
            )
        occupancy[x, y] = True
    return BoundaryGrid.from_array(
        occupancy, scene.tile_size, scene.solid_border
    )


def scene_from_grid(
    grid: BoundaryGrid,
    origin: tuple[float, float] | None = None,
    radius: float = DEFAULT_RADIUS,
) -> SceneParams:
    occupancy = grid.occupancy()
    walls = [
        (x, y)
        for x in range(grid.width)
        for y in range(grid.height)
        if occupancy[x, y]
    ]
    return SceneParams(
        width=grid.width,
        height=grid.height,
        tile_size=grid.tile_size,
        walls=walls,
        solid_border=grid.solid_border,
        origin=origin,
        radius=radius,
    )


def save_scene_json(scene: SceneParams, path: str) -> None:
    with open(path, "w") as f:
        json.dump(scene.to_dict(), f, indent=2)


def load_scene_json(path: str) -> SceneParams:
    with open(path) as f:
        return SceneParams.from_dict(json.load(f))


def save_scene_png(img: Image.Image, scene: SceneParams, path: str) -> None:
    """Save a snapshot image with the scene JSON embedded as a PNG tEXt chunk."""
    info = PngInfo()
    info.add_text(METADATA_KEY, json.dumps(scene.to_dict()))
    img.save(path, pnginfo=info)


def load_scene_png(path: str) -> SceneParams:
    """Load a scene from a PNG file's tEXt metadata.

    Raises ValueError if the PNG does not contain scene metadata.
    """
    with Image.open(path) as img:
        text_data = getattr(img, "text", None)
        if not text_data or METADATA_KEY not in text_data:
            raise ValueError(
                f"PNG file does not contain scene metadata (missing '{METADATA_KEY}' chunk)"
            )
        return SceneParams.from_dict(json.loads(text_data[METADATA_KEY]))


_LOADERS = {
    ".png": load_scene_png,
    ".json": load_scene_json,
}


def load_scene(path: str) -> SceneParams:
    """Load a scene saved as JSON or as a snapshot PNG.

    The file suffix picks the reader, case-insensitively. A PNG must carry
    the embedded scene chunk written by ``save_scene_png``.
    """
    loader = _LOADERS.get(Path(path).suffix.lower())
    if loader is None:
        raise ValueError(f"Unsupported file extension: {path}")
    return loader(path)
