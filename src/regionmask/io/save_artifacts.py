"""
Artifact saving utilities for regionmask.

Handles writing masks, pixel cut-outs, JSON summaries and debug overlays.
"""

import json
import os

import cv2
import numpy as np

from regionmask.tracer import get_tracer


def ensure_dir(path):
    """Create directory if it does not exist."""
    if path:
        os.makedirs(path, exist_ok=True)


def get_debug_dir(out_dir, stage_name):
    """
    Get the debug directory path for a stage.

    Creates the directory if it does not exist.
    """
    debug_dir = os.path.join(out_dir, "debug", stage_name)
    ensure_dir(debug_dir)
    return debug_dir


def save_image(img, path, max_edge=None):
    """
    Save an image to disk.

    Optionally downscales to max_edge while preserving aspect ratio.
    Boolean masks are written as 0/255; 3-channel images are RGB.
    """
    tracer = get_tracer()

    if img.dtype == bool:
        img = img.astype(np.uint8) * 255

    if max_edge and max(img.shape[:2]) > max_edge:
        scale = max_edge / max(img.shape[:2])
        new_size = (max(1, int(img.shape[1] * scale)), max(1, int(img.shape[0] * scale)))
        img = cv2.resize(img, new_size, interpolation=cv2.INTER_NEAREST)

    if len(img.shape) == 3 and img.shape[2] == 3:
        img = cv2.cvtColor(img, cv2.COLOR_RGB2BGR)

    ensure_dir(os.path.dirname(path))
    cv2.imwrite(path, img)
    tracer.event(f"Saved image: {path}")


def save_json(data, path, indent=2):
    """
    Save a dictionary or Pydantic model to JSON.
    """
    tracer = get_tracer()

    ensure_dir(os.path.dirname(path))

    if hasattr(data, "model_dump"):
        data = data.model_dump(mode="json")

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent, default=str)

    tracer.event(f"Saved JSON: {path}")


def save_array(arr, path):
    """Save a NumPy array in .npy format."""
    tracer = get_tracer()

    ensure_dir(os.path.dirname(path))
    np.save(path, arr)
    tracer.event(f"Saved array: {path}")


def to_display(pixels):
    """
    Scale pixel values to uint8 for display.

    Uses the 0.5 and 99.5 percentiles of the finite values; NaN maps to 0.
    """
    pixels = np.asarray(pixels, dtype=np.float64)
    finite = np.isfinite(pixels)
    out = np.zeros(pixels.shape, dtype=np.uint8)
    if not finite.any():
        return out

    lo, hi = np.percentile(pixels[finite], [0.5, 99.5])
    if hi <= lo:
        hi = lo + 1.0
    scaled = np.clip((pixels - lo) / (hi - lo), 0.0, 1.0) * 255
    out[finite] = scaled[finite].astype(np.uint8)
    return out


def create_mask_overlay(pixels, mask, color=(255, 0, 0), alpha=0.4):
    """
    Blend a mask over a grayscale rendering of pixels.

    Returns an RGB uint8 image with mask pixels tinted by color and the mask
    outline drawn at full strength.
    """
    gray = to_display(pixels)
    overlay = cv2.cvtColor(gray, cv2.COLOR_GRAY2RGB)

    tint = np.zeros_like(overlay)
    tint[mask] = color
    blended = cv2.addWeighted(overlay, 1.0, tint, alpha, 0)

    contours, _ = cv2.findContours(mask.astype(np.uint8), cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_NONE)
    cv2.drawContours(blended, contours, -1, color, 1)

    return blended


class DebugArtifactWriter:
    """
    Helper class to manage debug artifact writing for one extraction.

    Handles creation of debug directories and provides convenience methods
    for saving various artifact types.
    """

    def __init__(self, out_dir, enabled=True, max_edge=1600):
        self.out_dir = out_dir
        self.enabled = enabled
        self.max_edge = max_edge

    def get_stage_dir(self, stage_name):
        """Get the debug directory for a stage."""
        return get_debug_dir(self.out_dir, stage_name)

    def save_image(self, img, stage_name, filename):
        """Save an image artifact."""
        if not self.enabled:
            return
        path = os.path.join(self.get_stage_dir(stage_name), filename)
        save_image(img, path, max_edge=self.max_edge)

    def save_json(self, data, stage_name, filename):
        """Save a JSON artifact."""
        if not self.enabled:
            return
        path = os.path.join(self.get_stage_dir(stage_name), filename)
        save_json(data, path)

    def save_overlay(self, pixels, mask, stage_name, filename, **kwargs):
        """Draw and save a mask overlay."""
        if not self.enabled:
            return
        overlay = create_mask_overlay(pixels, mask, **kwargs)
        self.save_image(overlay, stage_name, filename)
