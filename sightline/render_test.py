"""Tests for debug snapshot rendering."""

import pytest

from sightline.render import (
    BACKGROUND,
    EDGE_COLOR,
    ORIGIN_COLOR,
    RAY_COLOR,
    TILE_COLOR,
    render_scene,
)
from sightline.tilemap import BoundaryGrid
from sightline.types import VisibilityPoint
from sightline.visibility import compute_visibility


def _grid():
    return BoundaryGrid.from_rows(
        [
            "....",
            ".#..",
            "....",
        ],
        tile_size=10,
    )


def test_image_size_follows_grid_and_scale():
    grid = _grid()
    assert render_scene(grid).size == (40, 30)
    assert render_scene(grid, scale=2).size == (80, 60)


def test_tiles_and_background():
    img = render_scene(_grid())
    assert img.getpixel((15, 15)) == TILE_COLOR
    assert img.getpixel((35, 25)) == BACKGROUND


def test_edges_are_drawn():
    img = render_scene(_grid())
    # Middle of the north edge of the occupied tile
    assert img.getpixel((15, 10)) == EDGE_COLOR


def test_rays_and_origin():
    grid = _grid()
    points = [VisibilityPoint(35.0, 5.0, 0.0)]
    img = render_scene(grid, origin=(5, 5), points=points)
    assert img.getpixel((5, 5)) == ORIGIN_COLOR
    assert img.getpixel((30, 5)) == RAY_COLOR


def test_renders_real_query():
    grid = _grid()
    points = compute_visibility((5, 25), 1000, grid)
    img = render_scene(grid, origin=(5, 25), points=points, scale=3)
    assert img.size == (120, 90)


def test_invalid_scale():
    with pytest.raises(ValueError):
        render_scene(_grid(), scale=0)
