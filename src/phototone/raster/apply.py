"""Apply operation descriptors to RGBA pixel buffers.

Every operation reads a uint8 [H, W, 4] buffer and returns a new one, so a
failure half-way through an operation list never leaves a partially
transformed buffer behind. Results are rounded and clamped to 0..255 after
each operation, the way an 8-bit canvas stores intermediate results.

Formulas follow common 2D canvas filters:
- Gamma: ``255 * (v / 255) ** gamma`` per channel
- Brightness: ``v + brightness * 255``
- Contrast: ``F * (v - 128) + 128`` with ``F = 259 (c + 255) / (255 (259 - c))``
- Saturation / Vibrance: pull non-max channels towards (or away from) the max channel
- Hue rotation: rotation around the grey axis as a color matrix
- Noise: ``(0.5 - u) * noise`` added equally to R, G and B
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Sequence

import numpy as np

from phototone.config import EXECUTOR_CONFIG, ExecutorConfig
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
from phototone.raster.kernels import color_matrix_numba, convolve3x3_numba

logger = logging.getLogger(__name__)

_LEVELS = np.arange(256, dtype=np.float64) / 255.0


def _to_uint8(values: np.ndarray) -> np.ndarray:
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)


def _with_rgb(pixels: np.ndarray, rgb: np.ndarray) -> np.ndarray:
    out = pixels.copy()
    out[..., :3] = _to_uint8(rgb)
    return out


def _rgb(pixels: np.ndarray) -> np.ndarray:
    return pixels[..., :3].astype(np.float64)


# ============================================================================
# Tone
# ============================================================================


def apply_gamma(pixels: np.ndarray, op: Gamma) -> np.ndarray:
    """Per-channel gamma via 256-entry lookup tables."""
    out = pixels.copy()
    for c, gamma in enumerate(op.gamma):
        lut = _to_uint8(255.0 * np.power(_LEVELS, gamma))
        out[..., c] = lut[pixels[..., c]]
    return out


def apply_brightness(pixels: np.ndarray, op: Brightness) -> np.ndarray:
    return _with_rgb(pixels, _rgb(pixels) + op.brightness * 255.0)


def contrast_factor(contrast: float) -> float:
    """Return the multiplier around mid-grey for a -1..1 contrast value."""
    c = math.floor(contrast * 255)
    return 259.0 * (c + 255) / (255.0 * (259 - c))


def apply_contrast(pixels: np.ndarray, op: Contrast) -> np.ndarray:
    factor = contrast_factor(op.contrast)
    return _with_rgb(pixels, factor * (_rgb(pixels) - 128.0) + 128.0)


# ============================================================================
# Color
# ============================================================================


def apply_saturation(pixels: np.ndarray, op: Saturation) -> np.ndarray:
    rgb = _rgb(pixels)
    adjust = -op.saturation
    peak = rgb.max(axis=-1, keepdims=True)
    # The max channel itself is unchanged since (peak - rgb) is 0 there.
    return _with_rgb(pixels, rgb + (peak - rgb) * adjust)


def apply_vibrance(pixels: np.ndarray, op: Vibrance) -> np.ndarray:
    rgb = _rgb(pixels)
    adjust = -op.vibrance
    peak = rgb.max(axis=-1, keepdims=True)
    average = rgb.mean(axis=-1, keepdims=True)
    amount = np.abs(peak - average) * 2.0 / 255.0 * adjust
    return _with_rgb(pixels, rgb + (peak - rgb) * amount)


def hue_rotation_matrix(rotation: float) -> np.ndarray:
    """Return the 4x5 color matrix rotating hue by rotation radians."""
    cos = math.cos(rotation)
    sin = math.sin(rotation)
    third = 1.0 / 3.0
    third_sqrt_sin = math.sqrt(third) * sin
    one_minus_cos = 1.0 - cos

    matrix = np.zeros((4, 5), dtype=np.float32)
    matrix[0, 0] = cos + one_minus_cos * third
    matrix[0, 1] = third * one_minus_cos - third_sqrt_sin
    matrix[0, 2] = third * one_minus_cos + third_sqrt_sin
    matrix[1, 0] = third * one_minus_cos + third_sqrt_sin
    matrix[1, 1] = cos + third * one_minus_cos
    matrix[1, 2] = third * one_minus_cos - third_sqrt_sin
    matrix[2, 0] = third * one_minus_cos - third_sqrt_sin
    matrix[2, 1] = third * one_minus_cos + third_sqrt_sin
    matrix[2, 2] = cos + third * one_minus_cos
    matrix[3, 3] = 1.0
    return matrix


def apply_matrix(pixels: np.ndarray, matrix: np.ndarray) -> np.ndarray:
    """Apply a 4x5 color matrix using the numba kernel."""
    pixels = np.ascontiguousarray(pixels)
    out = np.empty_like(pixels)
    color_matrix_numba(pixels, np.ascontiguousarray(matrix, dtype=np.float32), out)
    return out


def apply_hue_rotation(pixels: np.ndarray, op: HueRotation) -> np.ndarray:
    return apply_matrix(pixels, hue_rotation_matrix(op.rotation))


def apply_color_matrix(pixels: np.ndarray, op: ColorMatrix) -> np.ndarray:
    return apply_matrix(pixels, op.as_array())


# ============================================================================
# Effects
# ============================================================================


def apply_convolute(pixels: np.ndarray, op: Convolute) -> np.ndarray:
    pixels = np.ascontiguousarray(pixels)
    out = np.empty_like(pixels)
    convolve3x3_numba(pixels, op.as_array(), out)
    return out


def blur_radius(blur: float, width: int, height: int, config: ExecutorConfig) -> int:
    """Return the box blur radius in pixels for a blur strength."""
    return int(round(blur * config.blur_scale * max(width, height)))


def _box_blur_axis(values: np.ndarray, radius: int, axis: int) -> np.ndarray:
    moved = np.moveaxis(values, axis, 0)
    n = moved.shape[0]
    pad = [(radius + 1, radius)] + [(0, 0)] * (moved.ndim - 1)
    summed = np.cumsum(np.pad(moved, pad, mode="edge"), axis=0)
    window = (summed[2 * radius + 1 : 2 * radius + 1 + n] - summed[:n]) / (2 * radius + 1)
    return np.moveaxis(window, 0, axis)


def apply_blur(
    pixels: np.ndarray, op: Blur, config: ExecutorConfig = EXECUTOR_CONFIG
) -> np.ndarray:
    """Separable box blur over all four channels."""
    height, width = pixels.shape[:2]
    radius = blur_radius(op.blur, width, height, config)
    if radius < 1:
        return pixels.copy()

    values = pixels.astype(np.float64)
    values = _box_blur_axis(values, radius, axis=0)
    values = _box_blur_axis(values, radius, axis=1)
    return _to_uint8(values)


def apply_noise(pixels: np.ndarray, op: Noise, rng: np.random.Generator) -> np.ndarray:
    """Add the same uniform offset to R, G and B of each pixel."""
    height, width = pixels.shape[:2]
    offsets = (0.5 - rng.random((height, width, 1))) * op.noise
    return _with_rgb(pixels, _rgb(pixels) + offsets)


# ============================================================================
# Dispatch
# ============================================================================

_SIMPLE_APPLIERS: dict[OperationKind, Callable[[np.ndarray, Operation], np.ndarray]] = {
    OperationKind.GAMMA: apply_gamma,
    OperationKind.BRIGHTNESS: apply_brightness,
    OperationKind.CONTRAST: apply_contrast,
    OperationKind.SATURATION: apply_saturation,
    OperationKind.VIBRANCE: apply_vibrance,
    OperationKind.HUE_ROTATION: apply_hue_rotation,
    OperationKind.COLOR_MATRIX: apply_color_matrix,
    OperationKind.CONVOLUTE: apply_convolute,
}


def noise_rng(index: int, config: ExecutorConfig = EXECUTOR_CONFIG) -> np.random.Generator:
    """Return the generator for the noise operation at position index."""
    return np.random.default_rng([config.noise_seed, index])


def apply_operation(
    pixels: np.ndarray,
    op: Operation,
    index: int = 0,
    config: ExecutorConfig = EXECUTOR_CONFIG,
) -> np.ndarray:
    """Apply a single operation.

    :param pixels: RGBA uint8 [H, W, 4]
    :param op: Operation descriptor
    :param index: Position of op in its operation list (seeds noise)
    :param config: Executor configuration
    :returns: New RGBA uint8 buffer
    :raises TypeError: If op is not an operation descriptor
    """
    kind = getattr(op, "kind", None)
    if kind in _SIMPLE_APPLIERS:
        return _SIMPLE_APPLIERS[kind](pixels, op)
    if kind is OperationKind.BLUR:
        return apply_blur(pixels, op, config)
    if kind is OperationKind.NOISE:
        return apply_noise(pixels, op, noise_rng(index, config))
    raise TypeError(f"Unknown operation: {op!r}")


def apply_operations_to_array(
    source: np.ndarray,
    operations: Sequence[Operation],
    config: ExecutorConfig = EXECUTOR_CONFIG,
) -> np.ndarray:
    """Apply operations in order to a copy of source.

    :param source: RGBA uint8 [H, W, 4], left untouched
    :param operations: Ordered operation list
    :param config: Executor configuration
    :returns: New RGBA uint8 buffer (a plain copy for an empty list)
    """
    result = source.copy()
    for index, op in enumerate(operations):
        result = apply_operation(result, op, index, config)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Applied %s (%d/%d)", op.kind.value, index + 1, len(operations))
    return result
