"""
Protocol definitions for the host raster boundary.

The executor only talks to images through :class:`RasterHandle`, so any
scene-graph host that can apply an operation list and expose its geometry
can stand in for the bundled :class:`phototone.raster.RasterImage`.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    import threading

    import numpy as np

    from phototone.operations import Operation
    from phototone.raster.image import Geometry


@runtime_checkable
class RasterHandle(Protocol):
    """
    Protocol for a mutable raster image owned by the host.

    Implementations keep the unfiltered source pixels, so applying an
    operation list always starts from the source and never accumulates.
    """

    @property
    def pixels(self) -> np.ndarray:
        """Current (filtered) RGBA pixels, uint8 [H, W, 4]."""
        ...

    @property
    def geometry(self) -> Geometry:
        """Placement of the image: position, scale, origin and size."""
        ...

    @property
    def lock(self) -> threading.RLock:
        """Lock serializing pipeline executions on this image."""
        ...

    @property
    def disposed(self) -> bool:
        """True once the handle released its pixel data."""
        ...

    def apply_filters(self, operations: Sequence[Operation]) -> None:
        """Replace the current pixels by the source transformed by operations.

        May reset geometry as a side effect of re-rasterizing.
        """
        ...

    def set(self, **geometry: Any) -> None:
        """Update geometry fields."""
        ...

    def set_coords(self) -> None:
        """Recompute cached bounding-box coordinates from the geometry."""
        ...

    def request_redraw(self) -> None:
        """Ask the host to re-render (preview copies only)."""
        ...
