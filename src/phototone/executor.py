"""Pipeline executor: apply compiled operations to raster handles.

The executor is the only place that mutates images. For every apply it:

1. takes the image's lock, so executions on one image never interleave
2. snapshots the geometry (position, scale, origin anchor, size)
3. asks the host to re-rasterize from the unfiltered source with the operations
4. restores the geometry, even when an operation failed, and recomputes coords
5. requests a redraw, for the preview copy only

Because every apply starts from the source, re-applying the same control
vector is idempotent, and resetting is simply applying the neutral vector.

Example:
    >>> from phototone import ControlValues, RasterImage
    >>> from phototone.executor import apply_to_preview_and_export, reset_filters
    >>>
    >>> preview = RasterImage.open("photo.jpg", on_redraw=canvas.request_render)
    >>> export = preview.clone()
    >>> apply_to_preview_and_export(preview, export, ControlValues(exposure=20, fade=10))
    >>> reset_filters(preview)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from phototone.config.values import ControlValues
from phototone.errors import PipelineExecutionError, RasterDisposedError
from phototone.operations import OPERATION_TYPES, Operation
from phototone.pipeline import assemble
from phototone.protocols import RasterHandle

logger = logging.getLogger(__name__)

# Restore order matters for hosts that derive position from size and scale.
_GEOMETRY_RESTORE_ORDER = (
    "width",
    "height",
    "scale_x",
    "scale_y",
    "origin_x",
    "origin_y",
    "left",
    "top",
)


def _restore_geometry(image: RasterHandle, snapshot: object) -> None:
    image.set(**{name: getattr(snapshot, name) for name in _GEOMETRY_RESTORE_ORDER})
    image.set_coords()


def apply_operations(
    image: RasterHandle,
    operations: Sequence[Operation],
    *,
    export: bool = False,
) -> None:
    """Apply an ordered operation list to an image.

    :param image: Raster handle
    :param operations: Operations in application order
    :param export: True for the export copy; only non-export copies request a redraw
    :raises TypeError: If an item is not an operation descriptor
    :raises RasterDisposedError: If the image was disposed
    :raises PipelineExecutionError: If an operation failed; pixels keep their
        previous state and geometry is restored
    """
    for op in operations:
        if not isinstance(op, OPERATION_TYPES):
            raise TypeError(f"Expected an operation descriptor, got {type(op).__name__}")

    if image.disposed:
        raise RasterDisposedError("Cannot apply operations to a disposed image")

    with image.lock:
        snapshot = image.geometry
        try:
            image.apply_filters(operations)
        except RasterDisposedError:
            raise
        except Exception as exc:
            raise PipelineExecutionError(
                f"Failed to apply {len(operations)} operations: {exc}"
            ) from exc
        finally:
            if not image.disposed:
                _restore_geometry(image, snapshot)

        logger.debug(
            "Applied %d operations to %s image (%dx%d)",
            len(operations),
            "export" if export else "preview",
            snapshot.width,
            snapshot.height,
        )

    if not export:
        image.request_redraw()


def apply_filters(
    image: RasterHandle,
    values: ControlValues,
    *,
    export: bool = False,
) -> list[Operation]:
    """Compile a control vector and apply it to an image.

    :param image: Raster handle
    :param values: Control vector (out-of-range and NaN values are clamped)
    :param export: True for the export copy (no redraw request)
    :returns: The applied operation list
    """
    operations = assemble(values)
    apply_operations(image, operations, export=export)
    return operations


def apply_to_preview_and_export(
    preview: RasterHandle,
    export: RasterHandle,
    values: ControlValues,
) -> list[Operation]:
    """Apply the same control vector to the preview and the export copy.

    The vector is compiled once; both copies receive the identical list,
    so equal sources yield equal pixels.

    :param preview: On-screen copy (redraw requested)
    :param export: Full-resolution copy kept for export (never redrawn)
    :param values: Control vector
    :returns: The applied operation list
    """
    operations = assemble(values)
    apply_operations(preview, operations)
    apply_operations(export, operations, export=True)
    return operations


def reset_filters(image: RasterHandle, *, export: bool = False) -> None:
    """Restore an image's source pixels by applying the neutral vector."""
    apply_filters(image, ControlValues(), export=export)
