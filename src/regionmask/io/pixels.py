"""
Pixel grids addressed like a mask.

The pixel values a mask applies to come from outside the engine, either as
a full image already in memory or as the text listing DS9 returns for
``data image x y width height no``. Both are turned into a float array with
the same PixelGrid as the mask; pixels with no data are NaN.
"""

import re

import numpy as np

from regionmask.tracer import get_tracer


_LISTING_SPLIT_RE = re.compile(r"[,=]")


def cutout(image, grid, origin=1):
    """
    Sub-array of a full image covering grid.

    Args:
        image: 2-D array whose element [0, 0] is the pixel (origin, origin)
        grid: PixelGrid to extract
        origin: logical coordinate of the image's first row and column

    Returns:
        float64 array of shape grid.shape; pixels outside the image are NaN
    """
    image = np.asarray(image)
    out = np.full(grid.shape, np.nan)

    row0 = grid.y_min - origin
    col0 = grid.x_min - origin

    row_start = max(row0, 0)
    row_stop = min(row0 + grid.ny, image.shape[0])
    col_start = max(col0, 0)
    col_stop = min(col0 + grid.nx, image.shape[1])

    if row_start < row_stop and col_start < col_stop:
        out[row_start - row0:row_stop - row0, col_start - col0:col_stop - col0] = \
            image[row_start:row_stop, col_start:col_stop]

    return out


def pixels_from_listing(text, grid):
    """
    Parse a DS9 pixel listing into a grid.

    Each line reads ``x,y = value``. Lines with fewer than three tokens are
    skipped, as are pixels falling outside grid. A token that is not a
    number raises ValueError.
    """
    tracer = get_tracer()

    out = np.full(grid.shape, np.nan)
    n_set = 0

    for line in text.splitlines():
        tokens = [t.strip() for t in _LISTING_SPLIT_RE.split(line)]
        tokens = [t for t in tokens if t]
        if len(tokens) < 3:
            continue

        x, y, value = (float(t) for t in tokens[:3])
        col = int(round(x)) - grid.x_min
        row = int(round(y)) - grid.y_min
        if 0 <= row < grid.ny and 0 <= col < grid.nx:
            out[row, col] = value
            n_set += 1

    tracer.event(f"Parsed pixel listing: {n_set} of {out.size} pixels set")

    return out


def masked_values(pixels, region_mask):
    """Finite pixel values under the set pixels of a mask."""
    values = np.asarray(pixels)[region_mask.mask]
    return values[np.isfinite(values)]
