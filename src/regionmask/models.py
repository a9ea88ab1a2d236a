"""
Pydantic data models for regionmask.

Regions parsed from DS9 descriptor text flow through these validated models.
Each region exposes a strongly typed geometry payload; the pixel grid model
carries the integer coordinate ranges a mask is addressed by.
"""

from enum import Enum
from typing import Dict, List, Literal, Tuple, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, model_validator


class ShapeKind(str, Enum):
    """Region shapes understood by the rasterizer."""
    CIRCLE = "circle"
    ELLIPSE = "ellipse"
    BOX = "box"
    POLYGON = "polygon"
    ANNULUS = "annulus"
    PANDA = "panda"
    EPANDA = "epanda"


PropertyValue = Union[int, float, str]

Point = Tuple[float, float]


# Typed geometry payloads, one per shape kind

class Circle(BaseModel):
    kind: Literal["circle"] = "circle"
    center: Point
    radius: float

    model_config = ConfigDict(extra="forbid", frozen=True)


class Ellipse(BaseModel):
    """Ellipse, or elliptical annulus when more than one ring is given."""
    kind: Literal["ellipse"] = "ellipse"
    center: Point
    rings: List[Tuple[float, float]]  # (semi-major, semi-minor), outer to inner
    angle: float = 0.0  # degrees

    model_config = ConfigDict(extra="forbid", frozen=True)


class Box(BaseModel):
    """Box, or box annulus when more than one ring is given."""
    kind: Literal["box"] = "box"
    center: Point
    rings: List[Tuple[float, float]]  # (width, height), outer to inner
    angle: float = 0.0  # degrees

    model_config = ConfigDict(extra="forbid", frozen=True)


class Polygon(BaseModel):
    kind: Literal["polygon"] = "polygon"
    vertices: List[Point] = Field(..., min_length=3)

    model_config = ConfigDict(extra="forbid", frozen=True)


class Annulus(BaseModel):
    kind: Literal["annulus"] = "annulus"
    center: Point
    radii: List[float] = Field(..., min_length=2)  # outer to inner

    model_config = ConfigDict(extra="forbid", frozen=True)


class Panda(BaseModel):
    """Pie-annulus: a circular annulus restricted to an angular wedge."""
    kind: Literal["panda"] = "panda"
    center: Point
    start_angle: float
    stop_angle: float
    inner: float
    outer: float

    model_config = ConfigDict(extra="forbid", frozen=True)


class Epanda(BaseModel):
    """Elliptical pie-annulus."""
    kind: Literal["epanda"] = "epanda"
    center: Point
    start_angle: float
    stop_angle: float
    inner: Tuple[float, float]
    outer: Tuple[float, float]
    angle: float = 0.0

    model_config = ConfigDict(extra="forbid", frozen=True)


def _ring_pairs(values):
    """Pair up ring parameters and order them outer to inner by area."""
    pairs = [(values[i], values[i + 1]) for i in range(0, len(values), 2)]
    return sorted(pairs, key=lambda p: abs(p[0] * p[1]), reverse=True)


def _check_arity(kind, n):
    """Return an error message if n coordinates cannot describe kind."""
    if kind == ShapeKind.CIRCLE and n != 3:
        return "circle needs x, y, r"
    if kind in (ShapeKind.ELLIPSE, ShapeKind.BOX) and (n < 5 or n % 2 == 0):
        return f"{kind.value} needs x, y, one or more size pairs and an angle"
    if kind == ShapeKind.POLYGON and (n < 6 or n % 2 == 1):
        return "polygon needs an even number of coordinates for at least 3 vertices"
    if kind == ShapeKind.ANNULUS and n < 4:
        return "annulus needs x, y and at least two radii"
    if kind == ShapeKind.PANDA and n != 8:
        return "panda needs x, y, start, stop, nangle, inner, outer, nradius"
    if kind == ShapeKind.EPANDA and n != 11:
        return "epanda needs x, y, start, stop, nangle, inner a/b, outer a/b, nradius, angle"
    return None


class Region(BaseModel):
    """A single region parsed from a descriptor line."""
    kind: ShapeKind
    inclusion: bool = True
    coordinates: List[float]
    properties: Dict[str, PropertyValue] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _validate_arity(self):
        problem = _check_arity(self.kind, len(self.coordinates))
        if problem:
            raise ValueError(f"{problem} (got {len(self.coordinates)} values)")
        return self

    @property
    def descriptor(self):
        """Render the region back to DS9 descriptor syntax (without properties)."""
        prefix = "" if self.inclusion else "-"
        values = ",".join(f"{c:g}" for c in self.coordinates)
        return f"{prefix}{self.kind.value}({values})"

    def geometry(self):
        """Build the typed geometry payload for this region."""
        c = self.coordinates
        center = (c[0], c[1])

        if self.kind == ShapeKind.CIRCLE:
            return Circle(center=center, radius=c[2])
        if self.kind == ShapeKind.ELLIPSE:
            return Ellipse(center=center, rings=_ring_pairs(c[2:-1]), angle=c[-1])
        if self.kind == ShapeKind.BOX:
            return Box(center=center, rings=_ring_pairs(c[2:-1]), angle=c[-1])
        if self.kind == ShapeKind.POLYGON:
            return Polygon(vertices=[(c[i], c[i + 1]) for i in range(0, len(c), 2)])
        if self.kind == ShapeKind.ANNULUS:
            return Annulus(center=center, radii=sorted(c[2:], reverse=True))
        if self.kind == ShapeKind.PANDA:
            return Panda(center=center, start_angle=c[2], stop_angle=c[3],
                         inner=c[5], outer=c[6])
        if self.kind == ShapeKind.EPANDA:
            return Epanda(center=center, start_angle=c[2], stop_angle=c[3],
                          inner=(c[5], c[6]), outer=(c[7], c[8]), angle=c[10])
        raise TypeError(f"No geometry for region kind {self.kind!r}")


class PixelGrid(BaseModel):
    """
    Integer pixel ranges addressed by a mask.

    Both ranges are inclusive. Arrays over the grid are indexed
    [row, col] = [y - y_min, x - x_min].
    """
    x_min: int
    x_max: int
    y_min: int
    y_max: int

    model_config = ConfigDict(extra="forbid", frozen=True)

    @model_validator(mode="after")
    def _validate_ranges(self):
        if self.x_max < self.x_min or self.y_max < self.y_min:
            raise ValueError(
                f"Empty pixel grid x={self.x_min}..{self.x_max} y={self.y_min}..{self.y_max}"
            )
        return self

    @classmethod
    def from_shape(cls, shape, origin=1):
        """Grid covering a full (rows, cols) image whose first pixel is origin."""
        ny, nx = shape[:2]
        return cls(x_min=origin, x_max=origin + nx - 1,
                   y_min=origin, y_max=origin + ny - 1)

    @property
    def nx(self):
        return self.x_max - self.x_min + 1

    @property
    def ny(self):
        return self.y_max - self.y_min + 1

    @property
    def shape(self):
        """Array shape (rows, cols) of the grid."""
        return (self.ny, self.nx)

    def coordinates(self):
        """
        Logical pixel coordinates of the grid.

        Returns (x, y) as broadcastable float arrays of shapes (1, nx) and
        (ny, 1).
        """
        x = np.arange(self.x_min, self.x_max + 1, dtype=np.float64)[np.newaxis, :]
        y = np.arange(self.y_min, self.y_max + 1, dtype=np.float64)[:, np.newaxis]
        return x, y

    def sub_grid(self, row_start, row_stop, col_start, col_stop):
        """Grid of the inclusive array index window [row_start..row_stop, col_start..col_stop]."""
        return PixelGrid(
            x_min=self.x_min + col_start,
            x_max=self.x_min + col_stop,
            y_min=self.y_min + row_start,
            y_max=self.y_min + row_stop,
        )


class RegionMask:
    """A boolean mask together with the pixel grid it is addressed by."""

    def __init__(self, mask, grid):
        mask = np.asarray(mask, dtype=bool)
        if mask.shape != grid.shape:
            raise ValueError(f"Mask shape {mask.shape} does not match grid shape {grid.shape}")
        self.mask = mask
        self.grid = grid

    def __repr__(self):
        g = self.grid
        return (f"RegionMask(x={g.x_min}..{g.x_max}, y={g.y_min}..{g.y_max}, "
                f"pixels={int(self.mask.sum())})")

    @property
    def x_range(self):
        return (self.grid.x_min, self.grid.x_max)

    @property
    def y_range(self):
        return (self.grid.y_min, self.grid.y_max)

    @property
    def pixel_count(self):
        return int(self.mask.sum())

    def to_summary(self):
        """JSON-friendly description of the mask."""
        return {
            "x_range": list(self.x_range),
            "y_range": list(self.y_range),
            "shape": list(self.mask.shape),
            "pixel_count": self.pixel_count,
        }


class ExtractionResult:
    """Outcome of a single mask extraction."""

    def __init__(self, region_mask, regions, unknown_shapes=(), coords="image", pixels=None):
        self.region_mask = region_mask
        self.regions = list(regions)
        self.unknown_shapes = sorted(unknown_shapes)
        self.coords = coords
        self.pixels = pixels

    @property
    def mask(self):
        return self.region_mask.mask

    @property
    def grid(self):
        return self.region_mask.grid

    def to_summary(self):
        """JSON-friendly summary of the extraction."""
        summary = {
            "coords": self.coords,
            "mask": self.region_mask.to_summary(),
            "regions": [
                {"descriptor": r.descriptor, "properties": dict(r.properties)}
                for r in self.regions
            ],
            "unknown_shapes": list(self.unknown_shapes),
        }
        return summary
