"""Control vector dataclass.

ControlValues is the 35-slider adjustment state that drives the pipeline.
It is a plain value: created neutral, copied freely and compared by value.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields, replace
from typing import Any

from phototone.config.controls import CONTROL_CONFIG, HUE_BAND_NAMES

logger = logging.getLogger(__name__)


@dataclass
class ControlValues:
    """Slider values for every control, all neutral (0) by default.

    Ranges are defined by :data:`phototone.config.controls.CONTROL_CONFIG`:
    [-100, 100] for signed controls, [-180, 180] for ``hue`` and [0, 100]
    for sharpness, blur, noise, grain and fade.

    Example:
        >>> values = ControlValues(exposure=10, contrast=15, sat_blue=-30)
        >>> values.non_neutral()
        {'exposure': 10, 'contrast': 15, 'sat_blue': -30}
    """

    # Light
    exposure: float = 0.0
    brightness: float = 0.0
    contrast: float = 0.0
    highlights: float = 0.0
    shadows: float = 0.0
    whites: float = 0.0
    blacks: float = 0.0

    # Color
    temperature: float = 0.0
    tint: float = 0.0
    vibrance: float = 0.0
    saturation: float = 0.0
    hue: float = 0.0  # degrees

    # HSL hue shift per band
    hue_red: float = 0.0
    hue_orange: float = 0.0
    hue_yellow: float = 0.0
    hue_green: float = 0.0
    hue_cyan: float = 0.0
    hue_blue: float = 0.0
    hue_purple: float = 0.0
    hue_magenta: float = 0.0

    # HSL saturation per band
    sat_red: float = 0.0
    sat_orange: float = 0.0
    sat_yellow: float = 0.0
    sat_green: float = 0.0
    sat_cyan: float = 0.0
    sat_blue: float = 0.0
    sat_purple: float = 0.0
    sat_magenta: float = 0.0

    # Effects
    clarity: float = 0.0
    sharpness: float = 0.0
    blur: float = 0.0
    vignette: float = 0.0  # drawn by the overlay renderer, not the pixel pipeline
    noise: float = 0.0
    grain: float = 0.0
    fade: float = 0.0

    def clamp(self) -> ControlValues:
        """Clamp all values to their valid ranges.

        NaN becomes neutral and infinities clamp to the nearest bound.

        :returns: New ControlValues with clamped values
        """
        specs = CONTROL_CONFIG.get_all_specs()
        return ControlValues(
            **{name: spec.validate(getattr(self, name)) for name, spec in specs.items()}
        )

    def is_neutral(self) -> bool:
        """Check if all values are neutral (no-op).

        :returns: True if the vector compiles to an empty pipeline
        """
        return not self.non_neutral()

    def non_neutral(self) -> dict[str, float]:
        """Return the controls that differ from their neutral value, in panel order."""
        specs = CONTROL_CONFIG.get_all_specs()
        return {
            name: getattr(self, name)
            for name, spec in specs.items()
            if not spec.is_neutral(getattr(self, name))
        }

    def band(self, name: str) -> tuple[float, float]:
        """Return the (hue shift, saturation shift) pair of a hue band.

        :param name: Band name, one of ``HUE_BAND_NAMES``
        :raises KeyError: If the band does not exist
        """
        if name not in HUE_BAND_NAMES:
            raise KeyError(f"Unknown hue band '{name}'. Available: {', '.join(HUE_BAND_NAMES)}")
        return getattr(self, f"hue_{name}"), getattr(self, f"sat_{name}")

    def copy(self) -> ControlValues:
        """Return an independent copy."""
        return replace(self)

    def replace(self, **changes: float) -> ControlValues:
        """Return a copy with some controls changed.

        :raises TypeError: If a keyword is not a control name
        """
        return replace(self, **changes)

    def to_dict(self) -> dict[str, float]:
        """Convert to a plain dictionary keyed by control name."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ControlValues:
        """Create ControlValues from a dictionary.

        Unknown keys are ignored. Values are taken as given; call
        :meth:`clamp` to coerce them into range.

        :param d: Dictionary with control values
        :returns: ControlValues instance

        Example:
            >>> values = ControlValues.from_dict({"exposure": 20, "grain": 10})
        """
        valid_fields = {f.name for f in fields(cls)}
        unknown = sorted(k for k in d if k not in valid_fields)
        if unknown:
            logger.warning("Ignoring unknown controls: %s", ", ".join(unknown))
        return cls(**{k: float(v) for k, v in d.items() if k in valid_fields})

    def __repr__(self) -> str:
        changed = ", ".join(f"{k}={v}" for k, v in self.non_neutral().items())
        return f"ControlValues({changed})"
