"""
Cropping of a mask to the smallest rectangle holding a set pixel.
"""

import numpy as np

from regionmask.errors import EmptyMaskError
from regionmask.models import RegionMask
from regionmask.tracer import get_tracer, trace


def true_span(counts):
    """First and last index of a positive entry, or None if there is none."""
    nonzero = np.flatnonzero(counts > 0)
    if nonzero.size == 0:
        return None
    return int(nonzero[0]), int(nonzero[-1])


@trace(label="crop_mask")
def crop_mask(region_mask):
    """
    Shrink a RegionMask to the rows and columns that contain a set pixel.

    The returned mask keeps logical coordinates: its grid origin is shifted
    by the number of rows and columns removed.

    Raises EmptyMaskError if no pixel is set.
    """
    tracer = get_tracer()

    mask = region_mask.mask
    rows = true_span(mask.sum(axis=1))
    cols = true_span(mask.sum(axis=0))

    if rows is None or cols is None:
        raise EmptyMaskError()

    row_start, row_stop = rows
    col_start, col_stop = cols

    grid = region_mask.grid.sub_grid(row_start, row_stop, col_start, col_stop)
    cropped = RegionMask(mask[row_start:row_stop + 1, col_start:col_stop + 1].copy(), grid)

    tracer.event(f"Cropped {mask.shape} -> {cropped.mask.shape}", grid=grid)

    return cropped
