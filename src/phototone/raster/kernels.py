"""
Numba-optimized kernels for per-pixel raster operations.

Provides JIT-compiled kernels for the color-matrix and 3x3 convolution
primitives. Both read uint8 RGBA [H, W, 4] and write a separate output
buffer, rounding and clamping to the 8-bit range like a clamped canvas.
"""

from __future__ import annotations

import numpy as np
from numba import njit, prange
from numpy.typing import NDArray


@njit(cache=True, nogil=True)
def _clamp_byte(value: float) -> np.uint8:
    rounded = round(value)
    if rounded < 0.0:
        return np.uint8(0)
    if rounded > 255.0:
        return np.uint8(255)
    return np.uint8(rounded)


@njit(parallel=True, fastmath=True, cache=True, nogil=True)
def color_matrix_numba(
    pixels: NDArray[np.uint8],
    matrix: NDArray[np.float32],
    out: NDArray[np.uint8],
) -> None:
    """
    Apply an affine 4x5 color matrix to every pixel.

    Args:
        pixels: Input RGBA [H, W, 4]
        matrix: Row-major [4, 5]; column 4 is an offset in fractions of 255
        out: Output RGBA [H, W, 4] (modified in-place)
    """
    height = pixels.shape[0]
    width = pixels.shape[1]

    for y in prange(height):
        for x in range(width):
            r = float(pixels[y, x, 0])
            g = float(pixels[y, x, 1])
            b = float(pixels[y, x, 2])
            a = float(pixels[y, x, 3])
            for c in range(4):
                val = (
                    matrix[c, 0] * r
                    + matrix[c, 1] * g
                    + matrix[c, 2] * b
                    + matrix[c, 3] * a
                    + matrix[c, 4] * 255.0
                )
                out[y, x, c] = _clamp_byte(val)


@njit(parallel=True, fastmath=True, cache=True, nogil=True)
def convolve3x3_numba(
    pixels: NDArray[np.uint8],
    kernel: NDArray[np.float32],
    out: NDArray[np.uint8],
) -> None:
    """
    Convolve the RGB channels with a 3x3 kernel, clamping samples to the edge.

    Alpha is copied unchanged.

    Args:
        pixels: Input RGBA [H, W, 4]
        kernel: Row-major [3, 3]
        out: Output RGBA [H, W, 4] (modified in-place)
    """
    height = pixels.shape[0]
    width = pixels.shape[1]

    for y in prange(height):
        for x in range(width):
            for c in range(3):
                val = 0.0
                for ky in range(3):
                    sy = min(max(y + ky - 1, 0), height - 1)
                    for kx in range(3):
                        sx = min(max(x + kx - 1, 0), width - 1)
                        val += kernel[ky, kx] * float(pixels[sy, sx, c])
                out[y, x, c] = _clamp_byte(val)
            out[y, x, 3] = pixels[y, x, 3]
