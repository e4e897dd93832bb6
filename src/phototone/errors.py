"""Exception hierarchy for phototone.

Preset imports fail with a :class:`PresetImportError` subclass and never
produce a partial control vector. Pipeline execution failures are reported
as :class:`PipelineExecutionError` after the image geometry was restored.

Compilation of a control vector never raises for numeric input: values are
clamped into range before they reach a stage compiler.
"""

from __future__ import annotations


class PhototoneError(Exception):
    """Base class for all phototone errors."""


# ============================================================================
# Preset import
# ============================================================================


class PresetImportError(PhototoneError):
    """An external preset could not be turned into a control vector."""


class InvalidDocumentError(PresetImportError):
    """The preset document is not well-formed XML."""


class UnsupportedFormatError(PresetImportError):
    """The preset file extension is not one of the supported formats."""

    def __init__(self, file_name: str):
        self.file_name = file_name
        super().__init__(f"Unsupported preset file type: {file_name!r}")


class NoRecognizedFieldsError(PresetImportError):
    """The document parsed, but none of its keys map to a control."""

    def __init__(self, keys_seen: int = 0):
        self.keys_seen = keys_seen
        super().__init__(f"No supported Lightroom settings found ({keys_seen} keys inspected)")


class RangeOutOfDomainError(PresetImportError, ValueError):
    """A value lies outside a control's domain.

    Imports clamp instead of rejecting, so this is only raised by the strict
    :meth:`phototone.config.operations.ControlSpec.check`.
    """

    def __init__(self, name: str, value: float, min_value: float, max_value: float):
        self.name = name
        self.value = value
        super().__init__(f"{name}={value} is outside valid range [{min_value}, {max_value}]")


# ============================================================================
# Pipeline execution
# ============================================================================


class PipelineExecutionError(PhototoneError):
    """Applying an operation list to a raster failed."""


class RasterDisposedError(PipelineExecutionError):
    """The raster handle was disposed and no longer owns pixel data."""
