"""
Mask extraction orchestrator for regionmask.

Runs parse -> extent -> combine -> crop on DS9 descriptor text and, when
pixel data is supplied, cuts the matching pixels out of it.
"""

import os
import warnings

from regionmask.config import MaskConfig, check_coords, load_config
from regionmask.errors import EmptyMaskError, NoValidRegionsError
from regionmask.geometry.extent import estimate_extent
from regionmask.io.load_image import load_pixels, validate_pixel_input
from regionmask.io.pixels import cutout, masked_values
from regionmask.io.save_artifacts import DebugArtifactWriter, ensure_dir, save_array, save_image, save_json
from regionmask.mask.combine import combine_regions
from regionmask.mask.crop import crop_mask
from regionmask.models import ExtractionResult, PixelGrid, RegionMask
from regionmask.regions.parse import parse_regions
from regionmask.tracer import get_tracer, trace


@trace(label="extract_mask")
def extract_mask(text, config=None, image_shape=None, image=None):
    """
    Build the mask described by DS9 region text.

    Args:
        text: raw descriptor text
        config: MaskConfig (defaults if None)
        image_shape: (rows, cols) of the full image, needed in full-frame
            mode when no image is given
        image: optional full 2-D pixel array; its cut-out is attached to
            the result

    Returns:
        ExtractionResult

    Raises:
        NoValidRegionsError: no region was parsed or none has finite bounds
        EmptyMaskError: the regions cancel out or cover no pixel
        ValueError: full-frame mode without an image size, or an unsupported
            coordinate system

    Warns:
        UserWarning: unknown shapes were skipped and config.extraction.silent
            is off
    """
    tracer = get_tracer()

    if config is None:
        config = MaskConfig()
    options = config.extraction
    check_coords(options.coords)

    with tracer.span("parse", module="pipeline"):
        parsed = parse_regions(text)

    if parsed.unknown_shapes and not options.silent:
        message = f"Unknown regions found: {sorted(parsed.unknown_shapes)}"
        tracer.event(message, level="WARN")
        warnings.warn(message, UserWarning)

    if not parsed.regions:
        raise NoValidRegionsError()

    with tracer.span("grid", module="pipeline"):
        if options.full:
            if image is not None:
                image_shape = image.shape
            if image_shape is None:
                raise ValueError("Full-frame extraction needs the image shape or the image")
            grid = PixelGrid.from_shape(image_shape, origin=options.pixel_origin)
        else:
            grid = estimate_extent(parsed.regions)

    with tracer.span("combine", module="pipeline"):
        region_mask = RegionMask(combine_regions(parsed.regions, grid), grid)

    if not region_mask.mask.any():
        raise EmptyMaskError()

    if not options.full:
        region_mask = crop_mask(region_mask)

    pixels = None
    if image is not None:
        pixels = cutout(image, region_mask.grid, origin=options.pixel_origin)

    return ExtractionResult(
        region_mask,
        parsed.regions,
        unknown_shapes=parsed.unknown_shapes,
        coords=options.coords,
        pixels=pixels,
    )


def summarize_result(result):
    """JSON-friendly summary of an extraction, with pixel statistics if any."""
    summary = result.to_summary()
    if result.pixels is not None:
        values = masked_values(result.pixels, result.region_mask)
        summary["pixels"] = {
            "count": int(values.size),
            "sum": float(values.sum()) if values.size else 0.0,
            "mean": float(values.mean()) if values.size else None,
        }
    return summary


@trace(label="run_extraction")
def run_extraction(regions_path, out_dir, image_path=None, image_shape=None,
                   config=None, config_path=None, debug=False):
    """
    Extract a mask from a region file and write the outputs.

    Writes to out_dir:
    - mask.png / mask.npy: the mask (row i is y = y_min + i)
    - pixels.npy: the pixel cut-out, when an image is given
    - summary.json: grid ranges, regions and pixel statistics

    Returns:
        ExtractionResult
    """
    tracer = get_tracer()

    if config is None:
        config = load_config(config_path)

    if debug:
        config.debug.enabled = True

    if not os.path.exists(regions_path):
        raise FileNotFoundError(f"Region file not found: {regions_path}")

    image = None
    if image_path:
        errors = validate_pixel_input(image_path)
        if errors:
            for error in errors:
                tracer.event(error, level="ERROR")
            raise ValueError(f"Input validation failed: {errors}")
        image = load_pixels(image_path)

    with open(regions_path, "r", encoding="utf-8") as f:
        text = f.read()

    result = extract_mask(text, config=config, image_shape=image_shape, image=image)

    ensure_dir(out_dir)
    save_image(result.mask, os.path.join(out_dir, "mask.png"))
    save_array(result.mask, os.path.join(out_dir, "mask.npy"))
    if result.pixels is not None:
        save_array(result.pixels, os.path.join(out_dir, "pixels.npy"))

    summary = summarize_result(result)
    summary["regions_path"] = os.path.abspath(regions_path)
    save_json(summary, os.path.join(out_dir, "summary.json"))

    if config.debug.enabled:
        debug_writer = DebugArtifactWriter(
            out_dir,
            enabled=True,
            max_edge=config.debug.max_edge_scale,
        )
        debug_writer.save_json(
            [r.model_dump(mode="json") for r in result.regions],
            "regions", "regions.json",
        )
        debug_writer.save_json(result.region_mask.to_summary(), "mask", "mask_metrics.json")
        if result.pixels is not None:
            debug_writer.save_overlay(result.pixels, result.mask, "mask", "01_mask_overlay.png")

    tracer.event(f"Extraction saved: {result.region_mask.pixel_count} pixels -> {out_dir}")

    return result
