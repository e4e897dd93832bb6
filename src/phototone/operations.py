"""Operation descriptors produced by the stage compiler.

Each descriptor is an immutable, host-executable pixel transform. A stage
whose value is neutral compiles to ``None`` instead of an identity
descriptor, so ``Operation | None`` is the compiler's return type and the
assembler only ever hands real work to the executor.

Parameter conventions follow 8-bit canvas filters: offsets and brightness
are fractions of full scale (1.0 == 255), noise is in 0..255 units.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

import numpy as np


class OperationKind(Enum):
    """Primitive operation kinds the executor understands."""

    GAMMA = "gamma"
    BRIGHTNESS = "brightness"
    CONTRAST = "contrast"
    SATURATION = "saturation"
    VIBRANCE = "vibrance"
    HUE_ROTATION = "hue_rotation"
    COLOR_MATRIX = "color_matrix"
    CONVOLUTE = "convolute"
    BLUR = "blur"
    NOISE = "noise"


def _require_finite(name: str, *values: float) -> None:
    for value in values:
        if not math.isfinite(value):
            raise ValueError(f"{name}: parameters must be finite, got {value}")


@dataclass(frozen=True)
class Gamma:
    """Per-channel gamma curve, ``out = in ** gamma`` (gamma < 1 brightens)."""

    gamma: tuple[float, float, float]
    kind: ClassVar[OperationKind] = OperationKind.GAMMA

    def __post_init__(self):
        if len(self.gamma) != 3:
            raise ValueError(f"gamma must have 3 channels, got {len(self.gamma)}")
        _require_finite("gamma", *self.gamma)
        if min(self.gamma) <= 0.0:
            raise ValueError(f"gamma must be positive, got {self.gamma}")
        object.__setattr__(self, "gamma", tuple(float(g) for g in self.gamma))


@dataclass(frozen=True)
class Brightness:
    """Linear brightness offset, as a fraction of full scale."""

    brightness: float
    kind: ClassVar[OperationKind] = OperationKind.BRIGHTNESS

    def __post_init__(self):
        _require_finite("brightness", self.brightness)


@dataclass(frozen=True)
class Contrast:
    """Linear contrast around mid-grey, -1..1."""

    contrast: float
    kind: ClassVar[OperationKind] = OperationKind.CONTRAST

    def __post_init__(self):
        _require_finite("contrast", self.contrast)


@dataclass(frozen=True)
class Saturation:
    """Global saturation, -1 (grey) .. 1."""

    saturation: float
    kind: ClassVar[OperationKind] = OperationKind.SATURATION

    def __post_init__(self):
        _require_finite("saturation", self.saturation)


@dataclass(frozen=True)
class Vibrance:
    """Saturation weighted towards muted pixels, -1..1."""

    vibrance: float
    kind: ClassVar[OperationKind] = OperationKind.VIBRANCE

    def __post_init__(self):
        _require_finite("vibrance", self.vibrance)


@dataclass(frozen=True)
class HueRotation:
    """Hue rotation around the grey axis, in radians."""

    rotation: float
    kind: ClassVar[OperationKind] = OperationKind.HUE_ROTATION

    def __post_init__(self):
        _require_finite("rotation", self.rotation)


@dataclass(frozen=True)
class ColorMatrix:
    """Affine 4x5 matrix over RGBA, stored row-major as 20 values.

    Column 5 is an additive offset expressed as a fraction of full scale.
    """

    matrix: tuple[float, ...]
    kind: ClassVar[OperationKind] = OperationKind.COLOR_MATRIX

    def __post_init__(self):
        if len(self.matrix) != 20:
            raise ValueError(f"color matrix must have 20 entries, got {len(self.matrix)}")
        _require_finite("matrix", *self.matrix)
        object.__setattr__(self, "matrix", tuple(float(m) for m in self.matrix))

    def as_array(self) -> np.ndarray:
        """Return the matrix as a float32 array of shape (4, 5)."""
        return np.array(self.matrix, dtype=np.float32).reshape(4, 5)


@dataclass(frozen=True)
class Convolute:
    """3x3 convolution kernel, stored row-major as 9 values."""

    matrix: tuple[float, ...]
    kind: ClassVar[OperationKind] = OperationKind.CONVOLUTE

    def __post_init__(self):
        if len(self.matrix) != 9:
            raise ValueError(f"convolution kernel must have 9 entries, got {len(self.matrix)}")
        _require_finite("matrix", *self.matrix)
        object.__setattr__(self, "matrix", tuple(float(m) for m in self.matrix))

    def as_array(self) -> np.ndarray:
        """Return the kernel as a float32 array of shape (3, 3)."""
        return np.array(self.matrix, dtype=np.float32).reshape(3, 3)


@dataclass(frozen=True)
class Blur:
    """Box blur strength, 0..1 (radius scales with the longer image side)."""

    blur: float
    kind: ClassVar[OperationKind] = OperationKind.BLUR

    def __post_init__(self):
        _require_finite("blur", self.blur)
        if self.blur < 0.0:
            raise ValueError(f"blur must be non-negative, got {self.blur}")


@dataclass(frozen=True)
class Noise:
    """Uniform monochrome noise amplitude in 0..255 units."""

    noise: float
    kind: ClassVar[OperationKind] = OperationKind.NOISE

    def __post_init__(self):
        _require_finite("noise", self.noise)
        if self.noise < 0.0:
            raise ValueError(f"noise must be non-negative, got {self.noise}")


Operation = (
    Gamma
    | Brightness
    | Contrast
    | Saturation
    | Vibrance
    | HueRotation
    | ColorMatrix
    | Convolute
    | Blur
    | Noise
)

OPERATION_TYPES: tuple[type, ...] = (
    Gamma,
    Brightness,
    Contrast,
    Saturation,
    Vibrance,
    HueRotation,
    ColorMatrix,
    Convolute,
    Blur,
    Noise,
)


def identity_matrix() -> list[float]:
    """Return the row-major 4x5 identity color matrix as a mutable list."""
    return [
        1.0, 0.0, 0.0, 0.0, 0.0,
        0.0, 1.0, 0.0, 0.0, 0.0,
        0.0, 0.0, 1.0, 0.0, 0.0,
        0.0, 0.0, 0.0, 1.0, 0.0,
    ]  # fmt: skip
