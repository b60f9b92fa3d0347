"""Tile occupancy grid and its merged boundary edges.

A ``BoundaryGrid`` owns an ``width x height`` boolean occupancy grid and the
list of axis-aligned segments that outline its occupied regions. The edges
are what the visibility query (visibility.py) uses as occluders, so they are
kept as few and as long as possible: two colinear unit edges that touch along
the sweep direction are always merged into one.

Edges are rebuilt from scratch by ``calculate_edges`` every time a cell
actually changes. The rebuild is a single column-major sweep (x outer, y
inner). For each occupied cell, every side whose neighbour is empty needs an
edge:

  * **North/South** sides run along x. The west neighbour was finished in the
    previous column, so if it emitted an edge on the same side, that edge is
    extended east by one tile instead of starting a new one.
  * **East/West** sides run along y. The north neighbour was the previous
    cell of this column, so an edge it emitted on the same side is extended
    south by one tile.

Cells outside the grid never own an edge, so they can never be extended
from. Whether they count as occupied is a per-grid choice: by default they
do not, so border cells get an outward edge and a full grid is outlined by
its four sides; with ``solid_border=True`` they do, and border cells get no
outward edge. Coordinates are screen-style: north is ``y - 1`` and south is
``y + 1``.

The per-cell edge ids used for the extend-or-allocate decision live only for
the duration of one sweep. Edge ids are positions in the sweep's arena list,
which is frozen into a tuple of ``Edge`` once the sweep ends.
"""

from __future__ import annotations

import math

import numpy as np

from .types import Edge, Point2D

NORTH = 0
SOUTH = 1
EAST = 2
WEST = 3

# Edge cache of a cell that owns no edges (empty cells and virtual tiles).
_NO_EDGES = (-1, -1, -1, -1)

# Arena slots: [x1, y1, x2, y2]
_END_X = 2
_END_Y = 3


def _check_positive_int(name: str, value) -> int:
    if (
        isinstance(value, bool)
        or not isinstance(value, (int, np.integer))
        or value <= 0
    ):
        raise ValueError(f"{name} must be a positive integer, got {value!r}")
    return int(value)


def _extend_or_add(
    arena: list[list[int]],
    neighbour_id: int,
    end_slot: int,
    tile_size: int,
    segment: tuple[int, int, int, int],
) -> int:
    """Grow the neighbour's edge by one tile, or append a new edge.

    Returns the id of the edge now covering this side of the cell.
    """
    if neighbour_id >= 0:
        arena[neighbour_id][end_slot] += tile_size
        return neighbour_id
    arena.append(list(segment))
    return len(arena) - 1


class BoundaryGrid:
    """Occupancy grid whose boundary edges are always up to date."""

    def __init__(
        self,
        width: int,
        height: int,
        tile_size: int = 1,
        solid_border: bool = False,
    ) -> None:
        self._width = _check_positive_int("width", width)
        self._height = _check_positive_int("height", height)
        self._tile_size = _check_positive_int("tile_size", tile_size)
        self._solid_border = bool(solid_border)
        self._cells = np.zeros((self._width, self._height), dtype=bool)
        self._edges: tuple[Edge, ...] = ()
        self._edge_array = np.empty((0, 4), dtype=np.float64)
        self._edge_array.flags.writeable = False

    @classmethod
    def from_array(
        cls, occupancy, tile_size: int = 1, solid_border: bool = False
    ) -> BoundaryGrid:
        """Build a grid from a 2-D array-like indexed ``[x, y]``."""
        arr = np.asarray(occupancy, dtype=bool)
        if arr.ndim != 2:
            raise ValueError(
                f"occupancy must be 2-dimensional, got shape {arr.shape}"
            )
        grid = cls(arr.shape[0], arr.shape[1], tile_size, solid_border)
        grid._cells[:, :] = arr
        grid.calculate_edges()
        return grid

    @classmethod
    def from_rows(
        cls,
        rows: list[str],
        tile_size: int = 1,
        wall: str = "#",
        solid_border: bool = False,
    ) -> BoundaryGrid:
        """Build a grid from text rows, where ``rows[y][x] == wall`` is occupied.

        Handy for writing maps by hand::

            BoundaryGrid.from_rows([
                "#####",
                "#...#",
                "#####",
            ])
        """
        if not rows:
            raise ValueError("rows must contain at least one row")
        width = len(rows[0])
        for y, row in enumerate(rows):
            if len(row) != width:
                raise ValueError(
                    f"row {y} has length {len(row)}, expected {width}"
                )
        occupancy = np.array([[c == wall for c in row] for row in rows])
        return cls.from_array(occupancy.T, tile_size, solid_border)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def tile_size(self) -> int:
        return self._tile_size

    @property
    def solid_border(self) -> bool:
        return self._solid_border

    @property
    def edges(self) -> tuple[Edge, ...]:
        """Boundary edges in the order the last sweep discovered them."""
        return self._edges

    def edge_array(self) -> np.ndarray:
        """Read-only ``(E, 4)`` float array of ``(x1, y1, x2, y2)`` rows."""
        return self._edge_array

    def occupancy(self) -> np.ndarray:
        """Copy of the occupancy grid, indexed ``[x, y]``."""
        return self._cells.copy()

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._height

    def get(self, x: int, y: int) -> bool:
        """Occupancy of cell (x, y).

        Raises IndexError outside the grid; negative indices do not wrap.
        """
        if not self.in_bounds(x, y):
            raise IndexError(
                f"cell ({x}, {y}) is outside the "
                f"{self._width}x{self._height} grid"
            )
        return bool(self._cells[x, y])

    def set(self, x: int, y: int, value: bool) -> None:
        """Set occupancy of cell (x, y) and rebuild edges if it changed.

        Out-of-range cells are ignored: nothing changes and no error is
        raised, so callers can forward raw cursor positions.
        """
        if not self.in_bounds(x, y):
            return
        value = bool(value)
        if self._cells[x, y] != value:
            self._cells[x, y] = value
            self.calculate_edges()

    def fill(self, value: bool) -> None:
        """Set every cell to ``value`` with a single rebuild."""
        self._cells[:, :] = bool(value)
        self.calculate_edges()

    def tile_at(self, px: float, py: float) -> tuple[int, int] | None:
        """Index of the cell containing world point (px, py), or None."""
        x = math.floor(px / self._tile_size)
        y = math.floor(py / self._tile_size)
        if not self.in_bounds(x, y):
            return None
        return (x, y)

    def calculate_edges(self) -> None:
        """Rebuild the edge list from the current occupancy."""
        nx, ny, ts = self._width, self._height, self._tile_size
        outside = self._solid_border
        cells: list[list[bool]] = self._cells.tolist()
        arena: list[list[int]] = []
        # edge_ids[x][y][side] -> arena id of that side's edge, -1 if none
        edge_ids = [[[-1, -1, -1, -1] for _ in range(ny)] for _ in range(nx)]

        for x in range(nx):
            column = cells[x]
            for y in range(ny):
                if not column[y]:
                    continue

                north = column[y - 1] if y > 0 else outside
                south = column[y + 1] if y < ny - 1 else outside
                east = cells[x + 1][y] if x < nx - 1 else outside
                west = cells[x - 1][y] if x > 0 else outside
                west_ids = edge_ids[x - 1][y] if x > 0 else _NO_EDGES
                north_ids = edge_ids[x][y - 1] if y > 0 else _NO_EDGES

                ids = edge_ids[x][y]
                x0, y0 = x * ts, y * ts
                x1, y1 = x0 + ts, y0 + ts

                if not north:
                    ids[NORTH] = _extend_or_add(
                        arena, west_ids[NORTH], _END_X, ts, (x0, y0, x1, y0)
                    )
                if not south:
                    ids[SOUTH] = _extend_or_add(
                        arena, west_ids[SOUTH], _END_X, ts, (x0, y1, x1, y1)
                    )
                if not east:
                    ids[EAST] = _extend_or_add(
                        arena, north_ids[EAST], _END_Y, ts, (x1, y0, x1, y1)
                    )
                if not west:
                    ids[WEST] = _extend_or_add(
                        arena, north_ids[WEST], _END_Y, ts, (x0, y0, x0, y1)
                    )

        self._edges = tuple(
            Edge(Point2D(sx, sy), Point2D(ex, ey)) for sx, sy, ex, ey in arena
        )
        edge_array = np.array(arena, dtype=np.float64).reshape(-1, 4)
        edge_array.flags.writeable = False
        self._edge_array = edge_array

    def __repr__(self) -> str:
        return (
            f"BoundaryGrid(width={self._width}, height={self._height}, "
            f"tile_size={self._tile_size}, solid_border={self._solid_border}, "
            f"edges={len(self._edges)})"
        )
