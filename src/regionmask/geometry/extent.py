"""
Bounding extent of a region list.

Used when the caller wants the smallest working grid instead of the full
image: each region contributes conservative bounds and the union of all
bounds is expanded to integer pixel ranges.
"""

import math

from regionmask.errors import NoValidRegionsError
from regionmask.models import Annulus, Box, Circle, Ellipse, Epanda, Panda, PixelGrid, Polygon
from regionmask.tracer import get_tracer, trace


def _centered(center, radius):
    x, y = center
    radius = abs(radius)
    return (x - radius, y - radius, x + radius, y + radius)


def geometry_bounds(geometry):
    """
    Conservative (x0, y0, x1, y1) bounds of a geometry payload.

    Returns None when the bounds are not finite.
    """
    if isinstance(geometry, Circle):
        bounds = _centered(geometry.center, geometry.radius)
    elif isinstance(geometry, Annulus):
        bounds = _centered(geometry.center, max(geometry.radii))
    elif isinstance(geometry, Ellipse):
        bounds = _centered(geometry.center, max(max(abs(a), abs(b)) for a, b in geometry.rings))
    elif isinstance(geometry, Box):
        half_diagonal = max(math.hypot(w, h) for w, h in geometry.rings) / 2
        bounds = _centered(geometry.center, math.ceil(half_diagonal))
    elif isinstance(geometry, Polygon):
        xs = [v[0] for v in geometry.vertices]
        ys = [v[1] for v in geometry.vertices]
        bounds = (min(xs), min(ys), max(xs), max(ys))
    elif isinstance(geometry, Panda):
        bounds = _centered(geometry.center, geometry.outer)
    elif isinstance(geometry, Epanda):
        bounds = _centered(geometry.center, max(abs(v) for v in geometry.outer))
    else:
        raise TypeError(f"No bounds for {type(geometry).__name__}")

    if not all(math.isfinite(b) for b in bounds):
        return None
    return bounds


def region_bounds(region):
    """Conservative (x0, y0, x1, y1) bounds of a region, or None."""
    try:
        return geometry_bounds(region.geometry())
    except (OverflowError, ValueError):
        # ceil() of an infinite box diagonal
        return None


@trace(label="estimate_extent")
def estimate_extent(regions):
    """
    Integer pixel grid enclosing every region.

    Inclusion and exclusion regions both contribute. The lower bounds are
    floored and the upper bounds ceiled.

    Raises NoValidRegionsError if no region has finite bounds.
    """
    tracer = get_tracer()

    x0, y0 = math.inf, math.inf
    x1, y1 = -math.inf, -math.inf

    for region in regions:
        bounds = region_bounds(region)
        if bounds is None:
            tracer.event(f"Region without finite bounds: {region.descriptor}", level="DEBUG")
            continue
        x0 = min(x0, bounds[0])
        y0 = min(y0, bounds[1])
        x1 = max(x1, bounds[2])
        y1 = max(y1, bounds[3])

    if x0 == math.inf:
        raise NoValidRegionsError()

    grid = PixelGrid(
        x_min=math.floor(x0),
        x_max=math.ceil(x1),
        y_min=math.floor(y0),
        y_max=math.ceil(y1),
    )

    tracer.event(f"Extent: {grid.nx}x{grid.ny} pixels", grid=grid)

    return grid
