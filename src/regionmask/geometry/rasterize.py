"""
Per-shape membership grids.

Each rasterizer evaluates one geometry payload at the logical pixel
coordinates of a PixelGrid and returns a boolean array of the grid's shape.
Multi-ring shapes (elliptical, box and circular annuli) alternate
include/exclude from the outermost ring inwards, starting with include.
"""

import numpy as np

from regionmask.geometry.polygon import PolygonLocation, locate_points
from regionmask.models import Annulus, Box, Circle, Ellipse, Epanda, Panda, Polygon


def sincosd(angle):
    """Sine and cosine of an angle in degrees, exact at multiples of 90."""
    angle = float(angle) % 360.0
    if angle == 0.0:
        return 0.0, 1.0
    if angle == 90.0:
        return 1.0, 0.0
    if angle == 180.0:
        return 0.0, -1.0
    if angle == 270.0:
        return -1.0, 0.0
    theta = np.deg2rad(angle)
    return float(np.sin(theta)), float(np.cos(theta))


def rotated_offsets(x, y, center, angle):
    """
    Offsets from center expressed in the shape's rotated frame.

    x' = dx cos(a) + dy sin(a), y' = -dx sin(a) + dy cos(a)
    """
    sin_a, cos_a = sincosd(angle)
    dx = x - center[0]
    dy = y - center[1]
    return dx * cos_a + dy * sin_a, -dx * sin_a + dy * cos_a


def alternate_rings(ring_insides):
    """
    Fold ring membership grids ordered outer to inner.

    The outermost ring is included; each following ring is alternately cut
    out of (AND NOT) and added back to (OR) the running grid.
    """
    rings = iter(ring_insides)
    inside = next(rings).copy()
    include = True
    for ring in rings:
        if include:
            inside &= ~ring
        else:
            inside |= ring
        include = not include
    return inside


def _inside_ellipse(xr, yr, a, b):
    with np.errstate(divide="ignore", invalid="ignore"):
        return xr ** 2 + (yr * (a / b)) ** 2 < a ** 2


def _inside_box(xr, yr, width, height):
    return (np.abs(2 * xr) < width) & (np.abs(2 * yr) < height)


def _in_wedge(theta, start, stop):
    """Angles (degrees) lying counter-clockwise from start to stop."""
    span = (stop - start) % 360.0
    if span == 0.0 and stop != start:
        return np.ones(theta.shape, dtype=bool)
    return (theta - start) % 360.0 <= span


def rasterize_circle(shape, x, y):
    cx, cy = shape.center
    return (x - cx) ** 2 + (y - cy) ** 2 < shape.radius ** 2


def rasterize_ellipse(shape, x, y):
    xr, yr = rotated_offsets(x, y, shape.center, shape.angle)
    return alternate_rings(_inside_ellipse(xr, yr, a, b) for a, b in shape.rings)


def rasterize_box(shape, x, y):
    xr, yr = rotated_offsets(x, y, shape.center, shape.angle)
    return alternate_rings(_inside_box(xr, yr, w, h) for w, h in shape.rings)


def rasterize_annulus(shape, x, y):
    cx, cy = shape.center
    r2 = (x - cx) ** 2 + (y - cy) ** 2
    return alternate_rings(r2 < r ** 2 for r in shape.radii)


def rasterize_polygon(shape, x, y):
    # Boundary pixels belong to the shape for inclusion and exclusion alike
    return locate_points(x, y, shape.vertices) != PolygonLocation.OUTSIDE


def rasterize_panda(shape, x, y):
    cx, cy = shape.center
    dx = x - cx
    dy = y - cy
    r2 = dx ** 2 + dy ** 2
    theta = np.degrees(np.arctan2(dy, dx))
    inside = (r2 >= shape.inner ** 2) & (r2 < shape.outer ** 2)
    return inside & _in_wedge(theta, shape.start_angle, shape.stop_angle)


def rasterize_epanda(shape, x, y):
    xr, yr = rotated_offsets(x, y, shape.center, shape.angle)
    theta = np.degrees(np.arctan2(yr, xr))
    inside = _inside_ellipse(xr, yr, *shape.outer) & ~_inside_ellipse(xr, yr, *shape.inner)
    return inside & _in_wedge(theta, shape.start_angle, shape.stop_angle)


_RASTERIZERS = {
    Circle: rasterize_circle,
    Ellipse: rasterize_ellipse,
    Box: rasterize_box,
    Annulus: rasterize_annulus,
    Polygon: rasterize_polygon,
    Panda: rasterize_panda,
    Epanda: rasterize_epanda,
}


def rasterize_geometry(geometry, grid):
    """
    Membership grid of a geometry payload over a PixelGrid.

    Raises TypeError for a payload type without a rasterizer.
    """
    rasterizer = _RASTERIZERS.get(type(geometry))
    if rasterizer is None:
        raise TypeError(f"No rasterizer for {type(geometry).__name__}")

    x, y = grid.coordinates()
    inside = rasterizer(geometry, x, y)
    return np.broadcast_to(inside, grid.shape).copy()


def rasterize_region(region, grid):
    """Membership grid of a region, ignoring its inclusion flag."""
    return rasterize_geometry(region.geometry(), grid)
