"""Pytest fixtures for regionmask tests."""

import os
import tempfile

import numpy as np
import pytest


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture(autouse=True)
def reset_tracer():
    """Leave the global tracer disabled after every test."""
    yield
    from regionmask.tracer import configure_tracer
    configure_tracer(enabled=False)


@pytest.fixture
def default_config():
    """Create default extraction configuration."""
    from regionmask.config import MaskConfig
    return MaskConfig()


@pytest.fixture
def ds9_region_text():
    """A region listing as returned by DS9 for image coordinates."""
    return "\n".join([
        "# Region file format: DS9 version 4.1",
        'global color=green dashlist=8 3 width=1 font="helvetica 10 normal roman" select=1',
        "image",
        "circle(50,50,10) # color=red width=2",
        "-circle(50,50,4)",
        "box(80,40,10,6,0)",
        "point(20,20) # point=x",
        "text(30,30) # text={Hello}",
        "",
    ])


@pytest.fixture
def gradient_image():
    """A 100x120 image whose value encodes its own logical coordinates."""
    rows, cols = np.mgrid[0:100, 0:120]
    # origin 1: value = 1000 * y + x
    return (1000 * (rows + 1) + (cols + 1)).astype(np.float64)


@pytest.fixture
def region_file(temp_dir, ds9_region_text):
    """Write the DS9 region listing to disk."""
    path = os.path.join(temp_dir, "regions.reg")
    with open(path, "w", encoding="utf-8") as f:
        f.write(ds9_region_text)
    return path
