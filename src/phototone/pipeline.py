"""Pipeline assembler and fluent pipeline builder.

The assembler turns a control vector into the ordered list of operations
the executor applies. Stage order is fixed: tone, then global color, then
the eight hue bands, then finishing effects. Neutral stages are left out
rather than inserted as identity operations.

Example:
    >>> from phototone import ControlValues, Pipeline, assemble
    >>>
    >>> ops = assemble(ControlValues(exposure=20, temperature=30))
    >>> [op.kind.value for op in ops]
    ['gamma', 'color_matrix']
    >>>
    >>> pipe = Pipeline().exposure(20).contrast(15).band("blue", sat=-30)
    >>> pipe(image)  # applies to the image's unfiltered source
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from phototone.compiler import HUE_BANDS, compile_band, compile_stage
from phototone.config import CONTROL_CONFIG
from phototone.config.values import ControlValues
from phototone.operations import Operation

if TYPE_CHECKING:
    from phototone.protocols import RasterHandle

logger = logging.getLogger(__name__)

TONE_STAGES = ("exposure", "shadows", "highlights", "whites", "blacks", "brightness", "contrast")
COLOR_STAGES = ("temperature", "tint", "vibrance", "saturation", "hue")
BAND_STAGES = tuple(band.name for band in HUE_BANDS)
FINISH_STAGES = ("clarity", "fade", "sharpness", "blur", "noise", "grain")

# (category, stages) in application order. Vignette has no stage, it is
# rendered as an overlay.
STAGE_ORDER: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("tone", TONE_STAGES),
    ("color", COLOR_STAGES),
    ("hsl", BAND_STAGES),
    ("finish", FINISH_STAGES),
)


def assemble(values: ControlValues) -> list[Operation]:
    """Compile a control vector into the ordered operation list.

    :param values: Control vector (clamped per stage during compilation)
    :returns: Operations in application order; empty for a neutral vector
    """
    operations: list[Operation] = []
    for category, stages in STAGE_ORDER:
        for stage in stages:
            if category == "hsl":
                op = compile_band(stage, *values.band(stage))
            else:
                op = compile_stage(stage, getattr(values, stage))
            if op is not None:
                operations.append(op)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Assembled %d operations: %s",
            len(operations),
            ", ".join(op.kind.value for op in operations),
        )
    return operations


@dataclass
class Pipeline:
    """Fluent builder over a control vector.

    Each method sets one control and returns self for chaining. Setting a
    control twice keeps the last value; sliders are absolute, not stacked.
    """

    _values: ControlValues = field(default_factory=ControlValues)

    @classmethod
    def from_values(cls, values: ControlValues) -> Pipeline:
        """Create a pipeline from an existing vector (copied)."""
        return cls(values.copy())

    @property
    def values(self) -> ControlValues:
        """Copy of the current control vector."""
        return self._values.copy()

    def set(self, name: str, value: float) -> Pipeline:
        """Set any control by name.

        :param name: Control name
        :param value: Slider value
        :returns: Self for chaining
        :raises KeyError: If the control does not exist
        """
        CONTROL_CONFIG.get_spec(name)  # raises KeyError for unknown controls
        setattr(self._values, name, float(value))
        return self

    # ========================================================================
    # Light
    # ========================================================================

    def exposure(self, value: float) -> Pipeline:
        """Set exposure (-100..100)."""
        return self.set("exposure", value)

    def brightness(self, value: float) -> Pipeline:
        """Set brightness (-100..100)."""
        return self.set("brightness", value)

    def contrast(self, value: float) -> Pipeline:
        """Set contrast (-100..100)."""
        return self.set("contrast", value)

    def highlights(self, value: float) -> Pipeline:
        """Set highlights (-100..100)."""
        return self.set("highlights", value)

    def shadows(self, value: float) -> Pipeline:
        """Set shadows (-100..100)."""
        return self.set("shadows", value)

    def whites(self, value: float) -> Pipeline:
        """Set whites (-100..100)."""
        return self.set("whites", value)

    def blacks(self, value: float) -> Pipeline:
        """Set blacks (-100..100)."""
        return self.set("blacks", value)

    # ========================================================================
    # Color
    # ========================================================================

    def temperature(self, value: float) -> Pipeline:
        """Set temperature (-100 cool .. 100 warm)."""
        return self.set("temperature", value)

    def tint(self, value: float) -> Pipeline:
        """Set tint (-100 green .. 100 magenta)."""
        return self.set("tint", value)

    def vibrance(self, value: float) -> Pipeline:
        """Set vibrance (-100..100)."""
        return self.set("vibrance", value)

    def saturation(self, value: float) -> Pipeline:
        """Set saturation (-100..100)."""
        return self.set("saturation", value)

    def hue(self, degrees: float) -> Pipeline:
        """Set hue rotation (-180..180 degrees)."""
        return self.set("hue", degrees)

    def band(self, name: str, hue: float | None = None, sat: float | None = None) -> Pipeline:
        """Set one hue band's hue and/or saturation shift.

        :param name: Band name ("red" .. "magenta")
        :param hue: Hue shift (-100..100), unchanged if None
        :param sat: Saturation shift (-100..100), unchanged if None
        :returns: Self for chaining
        """
        self._values.band(name)  # raises KeyError for unknown bands
        if hue is not None:
            self.set(f"hue_{name}", hue)
        if sat is not None:
            self.set(f"sat_{name}", sat)
        return self

    # ========================================================================
    # Effects
    # ========================================================================

    def clarity(self, value: float) -> Pipeline:
        """Set clarity (-100..100)."""
        return self.set("clarity", value)

    def sharpness(self, value: float) -> Pipeline:
        """Set sharpness (0..100)."""
        return self.set("sharpness", value)

    def blur(self, value: float) -> Pipeline:
        """Set blur (0..100)."""
        return self.set("blur", value)

    def vignette(self, value: float) -> Pipeline:
        """Set vignette (-100..100); stored for the overlay, no pixel operation."""
        return self.set("vignette", value)

    def noise(self, value: float) -> Pipeline:
        """Set noise (0..100)."""
        return self.set("noise", value)

    def grain(self, value: float) -> Pipeline:
        """Set grain (0..100)."""
        return self.set("grain", value)

    def fade(self, value: float) -> Pipeline:
        """Set fade (0..100)."""
        return self.set("fade", value)

    # ========================================================================
    # Compilation and execution
    # ========================================================================

    def operations(self) -> list[Operation]:
        """Compile the current vector into the ordered operation list."""
        return assemble(self._values)

    def is_neutral(self) -> bool:
        """Check if the pipeline compiles to no operations."""
        return not self.operations()

    def reset(self) -> Pipeline:
        """Reset every control to neutral."""
        self._values = ControlValues()
        return self

    def apply(self, image: RasterHandle, export: bool = False) -> RasterHandle:
        """Apply the pipeline to an image's unfiltered source.

        :param image: Raster handle
        :param export: True for the export copy (no redraw request)
        :returns: The same image handle
        """
        from phototone.executor import apply_operations

        apply_operations(image, self.operations(), export=export)
        return image

    def __call__(self, image: RasterHandle, export: bool = False) -> RasterHandle:
        """Apply the pipeline (alias for :meth:`apply`)."""
        return self.apply(image, export=export)

    def __len__(self) -> int:
        return len(self.operations())

    def __repr__(self) -> str:
        return f"Pipeline({self._values!r})"
