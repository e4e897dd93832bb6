"""
phototone - Lightroom-style photo adjustments

Compiles a 35-slider control vector (light, color, HSL bands, effects)
into an ordered list of pixel operations and applies it to RGBA rasters.

Features:
- Stage compiler: each slider maps to at most one operation, neutral sliders to none
- Fixed stage order: tone, color, HSL bands, finishing effects
- Re-rasterizing executor that always starts from the unfiltered source
- Geometry (position, scale, origin) preserved across every apply
- Numba kernels for the color-matrix and 3x3 convolution primitives
- Lightroom preset import (.xmp, .lrtemplate)
- Built-in looks: vivid, warm, cool, vintage, dramatic, soft, b&w, ...

Example - Apply a look:
    >>> from phototone import ControlValues, RasterImage, apply_filters
    >>>
    >>> image = RasterImage.open("photo.jpg")
    >>> apply_filters(image, ControlValues(exposure=20, contrast=15, sat_blue=-30))
    >>> image.save("out.jpg")

Example - Fluent pipeline:
    >>> from phototone import Pipeline
    >>>
    >>> pipe = Pipeline().exposure(20).temperature(30).band("red", hue=10, sat=20)
    >>> pipe(image)

Example - Import a Lightroom preset:
    >>> from phototone import import_preset_file
    >>>
    >>> preset = import_preset_file("sunset.xmp", existing_names={"sunset"})
    >>> preset.name
    'sunset (2)'
"""

__version__ = "0.1.0"

from phototone.compiler import HUE_BANDS, HueBand, compile_band, compile_stage
from phototone.config import (
    BUILTIN_PRESETS,
    CONFIG,
    CONTROL_CONFIG,
    EXECUTOR_CONFIG,
    ControlSpec,
    ControlValues,
    ExecutorConfig,
    NamedPreset,
    create_preset,
    get_preset,
)
from phototone.errors import (
    InvalidDocumentError,
    NoRecognizedFieldsError,
    PhototoneError,
    PipelineExecutionError,
    PresetImportError,
    RangeOutOfDomainError,
    RasterDisposedError,
    UnsupportedFormatError,
)
from phototone.executor import (
    apply_filters,
    apply_operations,
    apply_to_preview_and_export,
    reset_filters,
)
from phototone.operations import (
    Blur,
    Brightness,
    ColorMatrix,
    Contrast,
    Convolute,
    Gamma,
    HueRotation,
    Noise,
    Operation,
    OperationKind,
    Saturation,
    Vibrance,
)
from phototone.pipeline import STAGE_ORDER, Pipeline, assemble
from phototone.presets import (
    import_preset,
    import_preset_file,
    map_lightroom_values,
    parse_lrtemplate_preset,
    parse_xmp_preset,
)
from phototone.protocols import RasterHandle
from phototone.raster import BoundingBox, Geometry, RasterImage

__all__ = [
    "__version__",
    # Control vector and config
    "ControlValues",
    "ControlSpec",
    "ExecutorConfig",
    "CONFIG",
    "CONTROL_CONFIG",
    "EXECUTOR_CONFIG",
    # Operations
    "Operation",
    "OperationKind",
    "Gamma",
    "Brightness",
    "Contrast",
    "Saturation",
    "Vibrance",
    "HueRotation",
    "ColorMatrix",
    "Convolute",
    "Blur",
    "Noise",
    # Compilation
    "compile_stage",
    "compile_band",
    "HUE_BANDS",
    "HueBand",
    "STAGE_ORDER",
    "assemble",
    "Pipeline",
    # Execution
    "RasterHandle",
    "RasterImage",
    "Geometry",
    "BoundingBox",
    "apply_operations",
    "apply_filters",
    "apply_to_preview_and_export",
    "reset_filters",
    # Presets
    "NamedPreset",
    "BUILTIN_PRESETS",
    "create_preset",
    "get_preset",
    "import_preset",
    "import_preset_file",
    "map_lightroom_values",
    "parse_xmp_preset",
    "parse_lrtemplate_preset",
    # Errors
    "PhototoneError",
    "PresetImportError",
    "InvalidDocumentError",
    "UnsupportedFormatError",
    "NoRecognizedFieldsError",
    "RangeOutOfDomainError",
    "PipelineExecutionError",
    "RasterDisposedError",
]
