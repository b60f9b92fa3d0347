"""Tests for scene save/load helpers."""

import json

import pytest
from PIL import Image

from sightline.scene_io import (
    build_grid,
    load_scene,
    load_scene_json,
    load_scene_png,
    save_scene_json,
    save_scene_png,
    scene_from_grid,
)
from sightline.tilemap import BoundaryGrid
from sightline.types import SceneParams

SAMPLE_SCENE = {
    "width": 4,
    "height": 3,
    "tile_size": 10,
    "walls": [[1, 1], [2, 1]],
    "solid_border": False,
    "radius": 500.0,
    "origin": [5.0, 5.0],
}


def test_save_and_load_png_roundtrip(tmp_path):
    """Save a scene in a PNG, load it back, and verify equality."""
    scene = SceneParams.from_dict(SAMPLE_SCENE)
    img = Image.new("RGB", (40, 30), "black")
    path = str(tmp_path / "scene.png")

    save_scene_png(img, scene, path)
    loaded = load_scene_png(path)

    assert loaded == scene
    assert loaded.to_dict() == SAMPLE_SCENE


def test_load_png_missing_chunk(tmp_path):
    """A plain PNG without metadata raises ValueError."""
    img = Image.new("RGB", (10, 10), "red")
    path = str(tmp_path / "plain.png")
    img.save(path)

    with pytest.raises(ValueError, match="sightline_scene"):
        load_scene_png(path)


def test_json_roundtrip(tmp_path):
    scene = SceneParams.from_dict(SAMPLE_SCENE)
    path = str(tmp_path / "scene.json")
    save_scene_json(scene, path)

    with open(path) as f:
        assert json.load(f) == SAMPLE_SCENE
    assert load_scene_json(path) == scene


def test_load_scene_dispatches_by_extension(tmp_path):
    scene = SceneParams.from_dict(SAMPLE_SCENE)

    png_path = str(tmp_path / "test.PNG")
    save_scene_png(Image.new("RGB", (4, 4)), scene, png_path)
    assert load_scene(png_path) == scene

    json_path = str(tmp_path / "test.json")
    save_scene_json(scene, json_path)
    assert load_scene(json_path) == scene


@pytest.mark.parametrize("name", ["scene.txt", "scene", "scene.json.bak"])
def test_load_scene_unsupported_extension(tmp_path, name):
    with pytest.raises(ValueError, match="Unsupported"):
        load_scene(str(tmp_path / name))


def test_missing_required_key():
    with pytest.raises(KeyError):
        SceneParams.from_dict({"width": 3})


class TestBuildGrid:
    def test_walls_become_occupied_cells(self):
        grid = build_grid(SceneParams.from_dict(SAMPLE_SCENE))
        assert (grid.width, grid.height, grid.tile_size) == (4, 3, 10)
        assert grid.get(1, 1) and grid.get(2, 1)
        assert grid.occupancy().sum() == 2
        assert [e.as_tuple() for e in grid.edges] == [
            (10, 10, 30, 10),
            (10, 20, 30, 20),
            (10, 10, 10, 20),
            (30, 10, 30, 20),
        ]

    def test_wall_outside_grid(self):
        scene = SceneParams(width=2, height=2, walls=[(2, 0)])
        with pytest.raises(ValueError, match=r"\(2, 0\)"):
            build_grid(scene)

    def test_grid_roundtrip(self):
        grid = BoundaryGrid.from_rows(
            ["#..", ".##"], tile_size=8, solid_border=True
        )
        scene = scene_from_grid(grid, origin=(4.0, 12.0), radius=250.0)
        assert scene.walls == [(0, 0), (1, 1), (2, 1)]
        assert scene.origin == (4.0, 12.0)
        rebuilt = build_grid(scene)
        assert rebuilt.solid_border is True
        assert rebuilt.edges == grid.edges
