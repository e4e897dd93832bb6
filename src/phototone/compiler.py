"""Stage compiler: one slider value in, one operation (or nothing) out.

Every control has a pure compile function mapping its clamped slider value
to an operation descriptor. A neutral value compiles to ``None``. The two
controls of a hue band (hue shift and saturation shift) compile jointly
into a single color matrix.

The mappings are approximate (gamma proxies for highlights, shadows and
blacks, a contrast proxy for clarity). Preset values are tuned against
these exact formulas.

Example:
    >>> compile_stage("exposure", 100)
    Gamma(gamma=(0.5, 0.5, 0.5))
    >>> compile_stage("exposure", 0) is None
    True
    >>> compile_band("red", hue=0, sat=0) is None
    True
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass

from phototone.config import CONTROL_CONFIG, HUE_BAND_NAMES
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
    Saturation,
    Vibrance,
    identity_matrix,
)

logger = logging.getLogger(__name__)

StageCompiler = Callable[[float], Operation | None]


def _uniform_gamma(gamma: float) -> Gamma:
    return Gamma(gamma=(gamma, gamma, gamma))


# ============================================================================
# Light
# ============================================================================


def compile_exposure(value: float) -> Gamma:
    """Exposure as a gamma curve: +100 -> 0.5 (brighter), -100 -> 2.0 (darker)."""
    if value > 0:
        return _uniform_gamma(1 - (value / 100) * 0.5)
    return _uniform_gamma(1 + (abs(value) / 100) * 1)


def compile_brightness(value: float) -> Brightness:
    return Brightness(brightness=value / 100)


def compile_contrast(value: float) -> Contrast:
    return Contrast(contrast=value / 100)


def compile_highlights(value: float) -> Gamma:
    """Highlights as a global gamma; not luminance-masked."""
    factor = value / 200
    return _uniform_gamma(1 - factor * 0.3)


def compile_shadows(value: float) -> Gamma:
    """Positive lifts (gamma up to 1.5), negative crushes (gamma down to 0.7)."""
    if value > 0:
        return _uniform_gamma(1 + (value / 100) * 0.5)
    return _uniform_gamma(1 - (abs(value) / 100) * 0.3)


def compile_whites(value: float) -> Brightness:
    return Brightness(brightness=value / 300)


def compile_blacks(value: float) -> Gamma:
    """Positive lifts blacks (fade look), negative crushes them."""
    if value > 0:
        return _uniform_gamma(1 - (value / 100) * 0.3)
    return _uniform_gamma(1 + (abs(value) / 100) * 0.5)


# ============================================================================
# Color
# ============================================================================


def compile_temperature(value: float) -> ColorMatrix:
    """Warm (positive) boosts red and offsets towards yellow, cool does the reverse."""
    f = value / 100
    matrix = identity_matrix()
    matrix[0] = 1 + f * 0.1
    matrix[4] = f * 0.05
    matrix[9] = f * 0.02
    matrix[12] = 1 - f * 0.1
    matrix[14] = -f * 0.05
    return ColorMatrix(matrix=tuple(matrix))


def compile_tint(value: float) -> ColorMatrix:
    """Positive pushes towards magenta, negative towards green."""
    f = value / 100
    matrix = identity_matrix()
    matrix[0] = 1 + f * 0.05
    matrix[6] = 1 - abs(f) * 0.05
    matrix[12] = 1 + f * 0.05
    return ColorMatrix(matrix=tuple(matrix))


def compile_vibrance(value: float) -> Vibrance:
    return Vibrance(vibrance=value / 100)


def compile_saturation(value: float) -> Saturation:
    return Saturation(saturation=value / 100)


def compile_hue(value: float) -> HueRotation:
    """Hue slider in degrees to a rotation in radians."""
    return HueRotation(rotation=value * (math.pi / 180))


# ============================================================================
# Effects
# ============================================================================


def compile_clarity(value: float) -> Contrast:
    """Clarity as a small global contrast change."""
    return Contrast(contrast=(value / 100) * 0.3)


def compile_sharpness(value: float) -> Convolute:
    amount = value / 100
    edge = -amount * 0.5
    return Convolute(
        matrix=(
            0.0, edge, 0.0,
            edge, 1 + amount * 2, edge,
            0.0, edge, 0.0,
        )
    )  # fmt: skip


def compile_blur(value: float) -> Blur:
    return Blur(blur=value / 200)


def compile_vignette(value: float) -> None:
    """Vignette is drawn by the overlay renderer; the pixel pipeline skips it."""
    return None


def compile_noise(value: float) -> Noise:
    return Noise(noise=value * 5)


def compile_grain(value: float) -> Noise:
    """Same primitive as noise on a softer scale; both may be present."""
    return Noise(noise=value * 1.5)


def compile_fade(value: float) -> ColorMatrix:
    """Lift the black point of R, G and B; alpha untouched."""
    lift = value / 100 * 0.15
    matrix = identity_matrix()
    matrix[4] = lift
    matrix[9] = lift
    matrix[14] = lift
    return ColorMatrix(matrix=tuple(matrix))


# ============================================================================
# HSL bands
# ============================================================================

# Templates take (hue_factor, sat_factor) and return the 3x3 RGB block of
# the band's matrix. Offsets are zero and the alpha row is identity.
BandTemplate = Callable[[float, float], tuple[tuple[float, float, float], ...]]


def _red_template(h: float, s: float):
    return (
        (1 + s, h * 0.5, -h * 0.3),
        (-h * 0.2, 1, h * 0.2),
        (h * 0.3, -h * 0.2, 1),
    )


def _orange_template(h: float, s: float):
    return (
        (1 + s * 0.7, h * 0.3, 0),
        (-h * 0.2, 1 + s * 0.3, 0),
        (0, 0, 1),
    )


def _yellow_template(h: float, s: float):
    return (
        (1 + s * 0.5, h * 0.2, 0),
        (h * 0.1, 1 + s * 0.5, 0),
        (0, 0, 1 - s * 0.2),
    )


def _green_template(h: float, s: float):
    return (
        (1, -h * 0.3, h * 0.2),
        (h * 0.2, 1 + s, -h * 0.2),
        (-h * 0.1, h * 0.3, 1),
    )


def _cyan_template(h: float, s: float):
    return (
        (1 - s * 0.2, 0, 0),
        (h * 0.1, 1 + s * 0.5, h * 0.2),
        (-h * 0.1, h * 0.2, 1 + s * 0.5),
    )


def _blue_template(h: float, s: float):
    return (
        (1, h * 0.2, -h * 0.3),
        (-h * 0.2, 1, h * 0.2),
        (h * 0.3, -h * 0.2, 1 + s),
    )


def _purple_template(h: float, s: float):
    return (
        (1 + s * 0.3, 0, h * 0.2),
        (0, 1 - s * 0.1, 0),
        (h * 0.2, 0, 1 + s * 0.4),
    )


def _magenta_template(h: float, s: float):
    return (
        (1 + s * 0.4, h * 0.1, h * 0.2),
        (0, 1 - s * 0.2, 0),
        (h * 0.1, 0, 1 + s * 0.3),
    )


@dataclass(frozen=True)
class HueBand:
    """One of the eight HSL bands.

    Attributes:
        name: Band name ("red" .. "magenta")
        hue_scale: Slider-to-factor scale for the hue shift
        sat_scale: Slider-to-factor scale for the saturation shift
        template: Builds the band's RGB block from the two factors
    """

    name: str
    hue_scale: float
    sat_scale: float
    template: BandTemplate

    def factors(self, hue: float, sat: float) -> tuple[float, float]:
        """Return (hue_factor, sat_factor) for slider values in -100..100."""
        return hue / 100 * self.hue_scale, sat / 100 * self.sat_scale

    def matrix(self, hue: float, sat: float) -> tuple[float, ...]:
        """Return the band's row-major 4x5 color matrix."""
        rows = self.template(*self.factors(hue, sat))
        matrix = identity_matrix()
        for r, row in enumerate(rows):
            matrix[r * 5 : r * 5 + 3] = row
        return tuple(matrix)


# Red, green and blue use the stronger scales, the in-between bands the softer ones.
HUE_BANDS: tuple[HueBand, ...] = (
    HueBand("red", 0.2, 0.3, _red_template),
    HueBand("orange", 0.15, 0.25, _orange_template),
    HueBand("yellow", 0.15, 0.25, _yellow_template),
    HueBand("green", 0.2, 0.3, _green_template),
    HueBand("cyan", 0.15, 0.25, _cyan_template),
    HueBand("blue", 0.2, 0.3, _blue_template),
    HueBand("purple", 0.15, 0.25, _purple_template),
    HueBand("magenta", 0.15, 0.25, _magenta_template),
)

_BANDS_BY_NAME = {band.name: band for band in HUE_BANDS}


def compile_band(band: str, hue: float, sat: float) -> ColorMatrix | None:
    """Compile a hue band's two sliders into one color matrix.

    :param band: Band name, one of ``HUE_BAND_NAMES``
    :param hue: Hue shift slider, -100..100
    :param sat: Saturation shift slider, -100..100
    :returns: ColorMatrix, or None when both sliders are neutral
    :raises KeyError: If the band does not exist
    """
    if band not in _BANDS_BY_NAME:
        raise KeyError(f"Unknown hue band '{band}'. Available: {', '.join(HUE_BAND_NAMES)}")

    hue = CONTROL_CONFIG.get_spec(f"hue_{band}").validate(hue)
    sat = CONTROL_CONFIG.get_spec(f"sat_{band}").validate(sat)
    if hue == 0 and sat == 0:
        return None
    return ColorMatrix(matrix=_BANDS_BY_NAME[band].matrix(hue, sat))


# ============================================================================
# Registry
# ============================================================================

STAGE_COMPILERS: dict[str, StageCompiler] = {
    "exposure": compile_exposure,
    "brightness": compile_brightness,
    "contrast": compile_contrast,
    "highlights": compile_highlights,
    "shadows": compile_shadows,
    "whites": compile_whites,
    "blacks": compile_blacks,
    "temperature": compile_temperature,
    "tint": compile_tint,
    "vibrance": compile_vibrance,
    "saturation": compile_saturation,
    "hue": compile_hue,
    "clarity": compile_clarity,
    "sharpness": compile_sharpness,
    "blur": compile_blur,
    "vignette": compile_vignette,
    "noise": compile_noise,
    "grain": compile_grain,
    "fade": compile_fade,
}


def compile_stage(name: str, value: float) -> Operation | None:
    """Compile one control's value into an operation.

    The value is clamped into the control's range first (NaN is treated as
    neutral), so compilation never fails for numeric input.

    :param name: Control name (not a hue band control, see :func:`compile_band`)
    :param value: Slider value
    :returns: Operation, or None when the value is neutral
    :raises KeyError: If the control does not exist
    :raises ValueError: If name is a hue band control
    """
    if name.startswith(("hue_", "sat_")) and name.split("_", 1)[1] in _BANDS_BY_NAME:
        raise ValueError(f"'{name}' is a hue band control, use compile_band()")
    if name not in STAGE_COMPILERS:
        raise KeyError(f"Unknown control '{name}'")

    spec = CONTROL_CONFIG.get_spec(name)
    clamped = spec.validate(value)
    if spec.is_neutral(clamped):
        return None
    if clamped != value:
        logger.debug("Clamped %s=%r to %r", name, value, clamped)
    return STAGE_COMPILERS[name](clamped)
