"""
Pixel data loading for regionmask.

Reads the image a mask is applied to: either a NumPy ``.npy`` array or any
single-channel image OpenCV can decode. Row i of the returned array holds
the pixels with logical y = origin + i.
"""

import os

import cv2
import numpy as np

from regionmask.tracer import get_tracer, trace


IMAGE_EXTENSIONS = [".png", ".jpg", ".jpeg", ".tiff", ".tif", ".bmp"]


@trace(label="load_pixels")
def load_pixels(path):
    """
    Load pixel values from disk as a 2-D float64 array.

    Color images are converted to grayscale; 16-bit images keep their depth.

    Raises FileNotFoundError if path does not exist.
    Raises ValueError if the file cannot be decoded or is not 2-D.
    """
    tracer = get_tracer()

    if not os.path.exists(path):
        raise FileNotFoundError(f"Image not found: {path}")

    if path.lower().endswith(".npy"):
        pixels = np.load(path, allow_pickle=False)
    else:
        pixels = cv2.imread(path, cv2.IMREAD_ANYDEPTH | cv2.IMREAD_GRAYSCALE)
        if pixels is None:
            raise ValueError(f"Failed to load image: {path}")

    pixels = np.asarray(pixels, dtype=np.float64)
    if pixels.ndim != 2:
        raise ValueError(f"Expected a 2-D image, got shape {pixels.shape}: {path}")

    tracer.event(f"Loaded pixels: {pixels.shape[1]}x{pixels.shape[0]}", pixels=pixels)

    return pixels


def validate_pixel_input(path):
    """
    Check that path exists and has a supported extension.

    Returns a list of error messages (empty if valid).
    """
    errors = []

    if not os.path.exists(path):
        errors.append(f"File not found: {path}")
        return errors

    ext = os.path.splitext(path)[1].lower()
    if ext != ".npy" and ext not in IMAGE_EXTENSIONS:
        errors.append(f"Unsupported image format: {path}")

    return errors
