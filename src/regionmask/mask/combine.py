"""
Combination of region memberships into a single mask.

Inclusion regions are OR-ed into a union accumulator; exclusion regions
have their complement AND-ed into an exclusion accumulator. The mask is the
intersection of the two, so region order never changes the result.
"""

import numpy as np

from regionmask.geometry.rasterize import rasterize_region
from regionmask.tracer import get_tracer, trace


@trace(label="combine_regions")
def combine_regions(regions, grid):
    """
    Fold all regions into a boolean mask over grid.

    Args:
        regions: iterable of Region
        grid: PixelGrid the mask is evaluated on

    Returns:
        bool array of shape grid.shape
    """
    tracer = get_tracer()

    union_acc = np.zeros(grid.shape, dtype=bool)
    exclude_acc = np.ones(grid.shape, dtype=bool)

    n_include = 0
    n_exclude = 0

    for region in regions:
        inside = rasterize_region(region, grid)
        if region.inclusion:
            union_acc |= inside
            n_include += 1
        else:
            exclude_acc &= ~inside
            n_exclude += 1

    mask = union_acc & exclude_acc

    tracer.event(
        f"Combined {n_include} inclusion and {n_exclude} exclusion regions",
        pixels=int(mask.sum()),
    )

    return mask
