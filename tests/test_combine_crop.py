"""Tests for mask combination and cropping."""

import itertools

import numpy as np
import pytest


def _grid(x_min, x_max, y_min, y_max):
    from regionmask.models import PixelGrid
    return PixelGrid(x_min=x_min, x_max=x_max, y_min=y_min, y_max=y_max)


def _region(kind, coordinates, inclusion=True):
    from regionmask.models import Region, ShapeKind
    return Region(kind=ShapeKind(kind), coordinates=coordinates, inclusion=inclusion)


class TestCombineRegions:
    """Tests for inclusion/exclusion folding."""

    def test_union_of_inclusions(self):
        from regionmask.geometry.rasterize import rasterize_region
        from regionmask.mask.combine import combine_regions

        grid = _grid(0, 30, 0, 30)
        a = _region("circle", [8, 8, 5])
        b = _region("box", [20, 20, 8, 8, 0])

        mask = combine_regions([a, b], grid)

        expected = rasterize_region(a, grid) | rasterize_region(b, grid)
        np.testing.assert_array_equal(mask, expected)

    def test_exclusion_removes_pixels(self):
        from regionmask.mask.combine import combine_regions

        grid = _grid(-10, 10, -10, 10)
        mask = combine_regions([
            _region("circle", [0, 0, 8]),
            _region("circle", [0, 0, 3], inclusion=False),
        ], grid)

        assert not mask[10, 10]
        assert mask[10, 15]

    def test_identical_exclusion_cancels(self):
        from regionmask.mask.combine import combine_regions

        grid = _grid(-10, 10, -10, 10)
        mask = combine_regions([
            _region("polygon", [0, 0, 6, 0, 6, 6]),
            _region("polygon", [0, 0, 6, 0, 6, 6], inclusion=False),
        ], grid)

        assert not mask.any()

    def test_exclusion_only_is_empty(self):
        from regionmask.mask.combine import combine_regions

        mask = combine_regions([_region("circle", [0, 0, 3], inclusion=False)], _grid(-5, 5, -5, 5))

        assert mask.shape == (11, 11)
        assert not mask.any()

    def test_order_invariant(self):
        from regionmask.mask.combine import combine_regions

        grid = _grid(-12, 12, -12, 12)
        regions = [
            _region("circle", [0, 0, 9]),
            _region("box", [-4, 0, 6, 20, 0], inclusion=False),
            _region("circle", [-4, 3, 2]),
            _region("annulus", [5, 5, 1, 4], inclusion=False),
        ]

        reference = combine_regions(regions, grid)
        for permutation in itertools.permutations(regions):
            np.testing.assert_array_equal(combine_regions(list(permutation), grid), reference)

    def test_exclusion_beats_later_inclusion(self):
        from regionmask.mask.combine import combine_regions

        grid = _grid(-5, 5, -5, 5)
        mask = combine_regions([
            _region("circle", [0, 0, 2], inclusion=False),
            _region("circle", [0, 0, 4]),
        ], grid)

        assert not mask[5, 5]


class TestCropMask:
    """Tests for crop_mask."""

    def _region_mask(self, mask, x_min=1, y_min=1):
        from regionmask.models import RegionMask
        mask = np.asarray(mask, dtype=bool)
        grid = _grid(x_min, x_min + mask.shape[1] - 1, y_min, y_min + mask.shape[0] - 1)
        return RegionMask(mask, grid)

    def test_crop_to_set_pixels(self):
        from regionmask.mask.crop import crop_mask

        mask = np.zeros((10, 12), dtype=bool)
        mask[3, 4] = True
        mask[6, 8] = True

        cropped = crop_mask(self._region_mask(mask, x_min=1, y_min=1))

        assert cropped.mask.shape == (4, 5)
        assert cropped.x_range == (5, 9)
        assert cropped.y_range == (4, 7)
        assert cropped.mask[0, 0] and cropped.mask[-1, -1]
        assert cropped.pixel_count == 2

    def test_no_empty_border(self):
        from regionmask.mask.combine import combine_regions
        from regionmask.mask.crop import crop_mask
        from regionmask.models import RegionMask

        grid = _grid(-20, 20, -20, 20)
        mask = combine_regions([_region("ellipse", [3, -2, 7, 3, 30])], grid)

        cropped = crop_mask(RegionMask(mask, grid))

        for edge in (cropped.mask[0], cropped.mask[-1], cropped.mask[:, 0], cropped.mask[:, -1]):
            assert edge.any()

    def test_crop_keeps_logical_coordinates(self):
        from regionmask.mask.combine import combine_regions
        from regionmask.mask.crop import crop_mask
        from regionmask.models import RegionMask

        grid = _grid(-20, 20, -20, 20)
        region = _region("circle", [5, -3, 2])
        cropped = crop_mask(RegionMask(combine_regions([region], grid), grid))

        center = cropped.mask[-3 - cropped.grid.y_min, 5 - cropped.grid.x_min]
        assert center
        assert cropped.x_range == (4, 6)
        assert cropped.y_range == (-4, -2)

    def test_idempotent(self):
        from regionmask.mask.crop import crop_mask

        mask = np.zeros((8, 8), dtype=bool)
        mask[2:5, 1:3] = True

        once = crop_mask(self._region_mask(mask))
        twice = crop_mask(once)

        assert twice.grid == once.grid
        np.testing.assert_array_equal(twice.mask, once.mask)

    def test_empty_mask_raises(self):
        from regionmask.errors import EmptyMaskError
        from regionmask.mask.crop import crop_mask

        with pytest.raises(EmptyMaskError, match="Empty area"):
            crop_mask(self._region_mask(np.zeros((4, 4))))

    def test_true_span(self):
        from regionmask.mask.crop import true_span

        assert true_span(np.array([0, 0, 2, 0, 1, 0])) == (2, 4)
        assert true_span(np.zeros(3)) is None
