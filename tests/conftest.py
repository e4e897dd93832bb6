"""Shared fixtures: deterministic RGBA rasters and placed images."""

import numpy as np
import pytest

from phototone.raster import Geometry, RasterImage


def create_test_pixels(height: int = 24, width: int = 32, seed: int = 42) -> np.ndarray:
    """Create an opaque random RGBA uint8 buffer."""
    rng = np.random.default_rng(seed)
    pixels = rng.integers(0, 256, size=(height, width, 4), dtype=np.uint8)
    pixels[..., 3] = 255
    return pixels


@pytest.fixture
def rgba():
    """Random opaque 24x32 RGBA buffer."""
    return create_test_pixels()


@pytest.fixture
def placed_geometry():
    """Geometry of a centered, half-scale image on a canvas."""
    return Geometry(
        left=160.0,
        top=120.0,
        scale_x=0.5,
        scale_y=0.5,
        origin_x="center",
        origin_y="center",
        width=32,
        height=24,
    )


@pytest.fixture
def image(rgba, placed_geometry):
    """RasterImage placed on a canvas with a non-trivial geometry."""
    return RasterImage(rgba, placed_geometry)
