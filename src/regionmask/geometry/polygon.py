"""
Point-in-polygon classification by ray casting.

A point is tested against a closed polygon (edge i joins vertex i to vertex
i + 1, wrapping around). Points exactly on an edge are reported separately
from inside/outside so callers can treat the boundary as part of the shape.
"""

from enum import IntEnum

import numpy as np


class PolygonLocation(IntEnum):
    """Where a point lies relative to a polygon."""
    OUTSIDE = 0
    INSIDE = 1
    BOUNDARY = -1


def ray_intersect_edge(point, p1, p2):
    """
    Classify a point against a single edge.

    Returns BOUNDARY if the point lies on the segment p1-p2, INSIDE (1) if a
    horizontal ray cast from the point towards +x crosses the edge, OUTSIDE (0)
    otherwise.

    A point is on the segment only if it is collinear with it and inside both
    its x range and its y range; checking x alone would put points on the
    extension of a vertical edge on the boundary.
    """
    x, y = point
    dx = p2[0] - p1[0]
    dy = p2[1] - p1[1]

    if ((x - p1[0]) * dy == (y - p1[1]) * dx
            and min(p1[0], p2[0]) <= x <= max(p1[0], p2[0])
            and min(p1[1], p2[1]) <= y <= max(p1[1], p2[1])):
        return PolygonLocation.BOUNDARY

    crosses = ((p1[1] > y) != (p2[1] > y)) and x < dx * (y - p1[1]) / dy + p1[0]
    return PolygonLocation.INSIDE if crosses else PolygonLocation.OUTSIDE


def point_in_polygon(point, vertices):
    """
    Locate a point relative to a polygon.

    Args:
        point: (x, y)
        vertices: sequence of (x, y) vertices, implicitly closed

    Returns:
        PolygonLocation; BOUNDARY as soon as any edge contains the point,
        otherwise the parity of the ray crossings
    """
    xs = [v[0] for v in vertices]
    ys = [v[1] for v in vertices]
    x, y = point

    if x < min(xs) or x > max(xs) or y < min(ys) or y > max(ys):
        return PolygonLocation.OUTSIDE

    crossings = 0
    n = len(vertices)
    for i in range(n):
        hit = ray_intersect_edge(point, vertices[i], vertices[(i + 1) % n])
        if hit == PolygonLocation.BOUNDARY:
            return PolygonLocation.BOUNDARY
        crossings += int(hit)

    return PolygonLocation(crossings % 2)


def locate_points(x, y, vertices):
    """
    Vectorized point_in_polygon over arrays of coordinates.

    Args:
        x, y: broadcastable numpy arrays of point coordinates
        vertices: sequence of (x, y) vertices, implicitly closed

    Returns:
        int8 array with PolygonLocation codes, same semantics as
        point_in_polygon for every point
    """
    x, y = np.broadcast_arrays(np.asarray(x, dtype=np.float64), np.asarray(y, dtype=np.float64))
    verts = np.asarray(vertices, dtype=np.float64)

    in_bbox = ((x >= verts[:, 0].min()) & (x <= verts[:, 0].max())
               & (y >= verts[:, 1].min()) & (y <= verts[:, 1].max()))

    crossings = np.zeros(x.shape, dtype=np.int64)
    boundary = np.zeros(x.shape, dtype=bool)

    for p1, p2 in zip(verts, np.roll(verts, -1, axis=0)):
        dx = p2[0] - p1[0]
        dy = p2[1] - p1[1]

        boundary |= (((x - p1[0]) * dy == (y - p1[1]) * dx)
                     & (x >= min(p1[0], p2[0])) & (x <= max(p1[0], p2[0]))
                     & (y >= min(p1[1], p2[1])) & (y <= max(p1[1], p2[1])))

        straddles = (p1[1] > y) != (p2[1] > y)
        if dy != 0:
            crossings += straddles & (x < dx * (y - p1[1]) / dy + p1[0])

    result = np.where(boundary, int(PolygonLocation.BOUNDARY), crossings % 2).astype(np.int8)
    result[~in_bbox] = int(PolygonLocation.OUTSIDE)
    return result
