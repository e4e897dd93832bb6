"""Reference raster host and per-operation pixel implementations."""

from phototone.raster.apply import (
    apply_operation,
    apply_operations_to_array,
    contrast_factor,
    hue_rotation_matrix,
)
from phototone.raster.image import BoundingBox, Geometry, RasterImage

__all__ = [
    "RasterImage",
    "Geometry",
    "BoundingBox",
    "apply_operation",
    "apply_operations_to_array",
    "contrast_factor",
    "hue_rotation_matrix",
]
