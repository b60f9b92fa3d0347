"""Data types shared by the tile map, the visibility query and scene files."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_TILE_SIZE = 40
DEFAULT_RADIUS = 1000.0


@dataclass(frozen=True)
class Point2D:
    x: float
    y: float

    @staticmethod
    def from_pair(p: Point2D | tuple[float, float]) -> Point2D:
        if isinstance(p, Point2D):
            return p
        x, y = p
        return Point2D(x, y)


@dataclass(frozen=True)
class Edge:
    """Axis-aligned boundary segment in world (pixel) coordinates.

    ``start`` is always the west end of a horizontal edge and the north end
    of a vertical one.
    """

    start: Point2D
    end: Point2D

    @property
    def is_horizontal(self) -> bool:
        return self.start.y == self.end.y

    @property
    def length(self) -> float:
        return abs(self.end.x - self.start.x) + abs(self.end.y - self.start.y)

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.start.x, self.start.y, self.end.x, self.end.y)


@dataclass(frozen=True)
class VisibilityPoint:
    x: float
    y: float
    angle: float  # radians in [-pi, pi], measured from the query origin


@dataclass
class SceneParams:
    """A grid plus an optional viewpoint, as stored in scene files."""

    width: int
    height: int
    tile_size: int = DEFAULT_TILE_SIZE
    walls: list[tuple[int, int]] = field(default_factory=list)
    solid_border: bool = False
    origin: tuple[float, float] | None = None
    radius: float = DEFAULT_RADIUS

    @staticmethod
    def from_dict(d: dict) -> SceneParams:
        origin = d.get("origin")
        return SceneParams(
            width=d["width"],
            height=d["height"],
            tile_size=d.get("tile_size", DEFAULT_TILE_SIZE),
            walls=[(int(w[0]), int(w[1])) for w in d.get("walls", [])],
            solid_border=d.get("solid_border", False),
            origin=(float(origin[0]), float(origin[1])) if origin else None,
            radius=d.get("radius", DEFAULT_RADIUS),
        )

    def to_dict(self) -> dict:
        d: dict = {
            "width": self.width,
            "height": self.height,
            "tile_size": self.tile_size,
            "walls": [[x, y] for x, y in self.walls],
            "solid_border": self.solid_border,
            "radius": self.radius,
        }
        if self.origin is not None:
            d["origin"] = [self.origin[0], self.origin[1]]
        return d
