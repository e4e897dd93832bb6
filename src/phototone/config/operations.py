"""Control specifications for pipeline configuration.

This module defines the ControlSpec dataclass that specifies the range,
default, neutral value and UI grouping of every slider in the control
vector.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Literal

from phototone.errors import RangeOutOfDomainError

ControlGroup = Literal["light", "color", "hsl_hue", "hsl_sat", "effects"]


@dataclass(frozen=True)
class ControlSpec:
    """Specification for a single control (slider).

    Attributes:
        name: Control name (e.g., "exposure", "hue_red")
        min_value: Minimum allowed value
        max_value: Maximum allowed value
        default: Default value when not specified
        neutral: Value that causes no change (compiles to no operation)
        group: UI group the control belongs to
        label: Short display label
        description: Human-readable description
    """

    name: str
    min_value: float
    max_value: float
    default: float
    neutral: float
    group: ControlGroup
    label: str = ""
    description: str = ""

    def validate(self, value: float) -> float:
        """Coerce value into the allowed range.

        NaN is replaced by the neutral value, infinities clamp to the bounds.

        :param value: Value to validate
        :returns: Clamped value within [min_value, max_value]
        :raises TypeError: If value is not a number
        """
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise TypeError(f"{self.name}: expected number, got {type(value).__name__}")

        value = float(value)
        if math.isnan(value):
            return self.neutral

        return max(self.min_value, min(self.max_value, value))

    def check(self, value: float) -> float:
        """Strict variant of :meth:`validate` that rejects out-of-range values.

        :param value: Value to check
        :returns: value as float
        :raises RangeOutOfDomainError: If value is NaN or outside the range
        """
        if not self.contains(value):
            raise RangeOutOfDomainError(self.name, value, self.min_value, self.max_value)
        return float(value)

    def contains(self, value: float) -> bool:
        """Check if value lies inside [min_value, max_value]."""
        return self.min_value <= value <= self.max_value

    def is_neutral(self, value: float) -> bool:
        """Check if value is exactly neutral (no effect).

        :param value: Value to check
        :returns: True if the value compiles to no operation
        """
        return value == self.neutral

    def __repr__(self) -> str:
        return (
            f"ControlSpec({self.name}, "
            f"range=[{self.min_value}, {self.max_value}], "
            f"default={self.default}, neutral={self.neutral}, "
            f"{self.group})"
        )
