"""Reference raster host: an RGBA image with placement geometry.

RasterImage keeps the unfiltered source buffer next to the filtered one,
so re-applying a pipeline always starts from the source. Like canvas
hosts, re-rasterizing resets the declared width and height to the buffer
size; the executor snapshots and restores geometry around each apply.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from dataclasses import asdict, dataclass, replace
from pathlib import Path
from typing import Any, Literal

import numpy as np
from PIL import Image

from phototone.config import EXECUTOR_CONFIG, ExecutorConfig
from phototone.errors import RasterDisposedError
from phototone.operations import Operation
from phototone.raster.apply import apply_operations_to_array

logger = logging.getLogger(__name__)

OriginX = Literal["left", "center", "right"] | float
OriginY = Literal["top", "center", "bottom"] | float

_ORIGIN_OFFSETS = {"left": 0.0, "top": 0.0, "center": 0.5, "right": 1.0, "bottom": 1.0}


def _origin_offset(origin: str | float) -> float:
    if isinstance(origin, str):
        if origin not in _ORIGIN_OFFSETS:
            raise ValueError(f"Unknown origin anchor: {origin!r}")
        return _ORIGIN_OFFSETS[origin]
    return float(origin)


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box covered by the image on the canvas."""

    left: float
    top: float
    width: float
    height: float


@dataclass(frozen=True)
class Geometry:
    """Placement of an image on its canvas.

    Attributes:
        left: X coordinate of the origin anchor
        top: Y coordinate of the origin anchor
        scale_x: Horizontal scale factor
        scale_y: Vertical scale factor
        origin_x: Horizontal anchor ("left", "center", "right" or a 0..1 fraction)
        origin_y: Vertical anchor ("top", "center", "bottom" or a 0..1 fraction)
        width: Declared width in source pixels
        height: Declared height in source pixels
    """

    left: float = 0.0
    top: float = 0.0
    scale_x: float = 1.0
    scale_y: float = 1.0
    origin_x: OriginX = "left"
    origin_y: OriginY = "top"
    width: int = 0
    height: int = 0

    def bounding_box(self) -> BoundingBox:
        """Compute the on-canvas bounding box."""
        scaled_width = abs(self.width * self.scale_x)
        scaled_height = abs(self.height * self.scale_y)
        return BoundingBox(
            left=self.left - _origin_offset(self.origin_x) * scaled_width,
            top=self.top - _origin_offset(self.origin_y) * scaled_height,
            width=scaled_width,
            height=scaled_height,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _as_rgba(pixels: np.ndarray) -> np.ndarray:
    pixels = np.asarray(pixels)
    if pixels.dtype != np.uint8:
        raise ValueError(f"pixels must be uint8, got {pixels.dtype}")
    if pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
        raise ValueError(f"pixels must be [H, W, 3] or [H, W, 4], got shape {pixels.shape}")
    if pixels.shape[2] == 3:
        alpha = np.full(pixels.shape[:2] + (1,), 255, dtype=np.uint8)
        pixels = np.concatenate([pixels, alpha], axis=2)
    return np.ascontiguousarray(pixels.copy())


class RasterImage:
    """Mutable RGBA image handle implementing :class:`phototone.protocols.RasterHandle`.

    Example:
        >>> preview = RasterImage.open("photo.jpg", on_redraw=canvas.request_render)
        >>> export = preview.clone()
        >>> apply_to_preview_and_export(preview, export, ControlValues(exposure=20))
    """

    def __init__(
        self,
        pixels: np.ndarray,
        geometry: Geometry | None = None,
        on_redraw: Callable[[], None] | None = None,
        config: ExecutorConfig = EXECUTOR_CONFIG,
    ):
        source = _as_rgba(pixels)
        height, width = source.shape[:2]
        self._source: np.ndarray | None = source
        self._pixels: np.ndarray | None = source.copy()
        self._geometry = geometry or Geometry(width=width, height=height)
        self._coords = self._geometry.bounding_box()
        self._lock = threading.RLock()
        self._on_redraw = on_redraw
        self._config = config
        self.filters: list[Operation] = []

    # ========================================================================
    # Construction
    # ========================================================================

    @classmethod
    def from_array(cls, pixels: np.ndarray, **kwargs: Any) -> RasterImage:
        """Create from a uint8 RGB or RGBA array (copied)."""
        return cls(pixels, **kwargs)

    @classmethod
    def from_pil(cls, image: Image.Image, **kwargs: Any) -> RasterImage:
        """Create from a Pillow image (converted to RGBA)."""
        return cls(np.asarray(image.convert("RGBA")), **kwargs)

    @classmethod
    def open(cls, path: str | Path, **kwargs: Any) -> RasterImage:
        """Load an image file with Pillow."""
        with Image.open(path) as image:
            return cls.from_pil(image, **kwargs)

    def clone(self, on_redraw: Callable[[], None] | None = None) -> RasterImage:
        """Return an independent copy of the unfiltered source and geometry.

        Used to keep a pristine export copy next to the on-screen preview.
        """
        return RasterImage(self.source, self._geometry, on_redraw=on_redraw, config=self._config)

    def to_pil(self) -> Image.Image:
        """Return the current pixels as a Pillow RGBA image."""
        return Image.fromarray(np.array(self.pixels))

    def save(self, path: str | Path, **kwargs: Any) -> None:
        """Save the current pixels with Pillow (RGB for formats without alpha)."""
        image = self.to_pil()
        if Path(path).suffix.lower() in (".jpg", ".jpeg"):
            image = image.convert("RGB")
        image.save(path, **kwargs)

    # ========================================================================
    # RasterHandle
    # ========================================================================

    def _check_alive(self) -> None:
        if self._source is None:
            raise RasterDisposedError("Raster image was disposed")

    @property
    def source(self) -> np.ndarray:
        """Copy of the unfiltered source pixels."""
        self._check_alive()
        return self._source.copy()

    @property
    def pixels(self) -> np.ndarray:
        """Current filtered pixels (read-only view)."""
        self._check_alive()
        view = self._pixels.view()
        view.flags.writeable = False
        return view

    @property
    def geometry(self) -> Geometry:
        return self._geometry

    @property
    def coords(self) -> BoundingBox:
        """Bounding box as of the last :meth:`set_coords` call."""
        return self._coords

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    @property
    def disposed(self) -> bool:
        return self._source is None

    def apply_filters(self, operations: Sequence[Operation]) -> None:
        """Re-rasterize from the source with operations applied.

        The current pixels are only replaced once every operation succeeded.
        Declared width and height are reset to the buffer size and scale to 1.
        """
        self._check_alive()
        result = apply_operations_to_array(self._source, operations, self._config)
        self._pixels = result
        self.filters = list(operations)
        height, width = result.shape[:2]
        self._geometry = replace(
            self._geometry, width=width, height=height, scale_x=1.0, scale_y=1.0
        )

    def set(self, **geometry: Any) -> None:
        """Update geometry fields, e.g. ``image.set(left=10, scale_x=0.5)``.

        :raises TypeError: If a keyword is not a geometry field
        """
        self._geometry = replace(self._geometry, **geometry)

    def set_coords(self) -> None:
        self._coords = self._geometry.bounding_box()

    def request_redraw(self) -> None:
        if self._on_redraw is not None:
            self._on_redraw()

    def dispose(self) -> None:
        """Release pixel buffers. Further pixel access raises RasterDisposedError."""
        with self._lock:
            self._source = None
            self._pixels = None
            self.filters = []

    def __repr__(self) -> str:
        state = "disposed" if self.disposed else f"{len(self.filters)} filters"
        return f"RasterImage({self._geometry.width}x{self._geometry.height}, {state})"
