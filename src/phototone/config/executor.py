"""Executor configuration.

Constants used by the reference raster executor that are not part of any
control's mapping.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ExecutorConfig:
    """Configuration for the raster executor.

    Attributes:
        blur_scale: Blur radius in pixels per unit of blur, relative to the
            longer image side. A blur of 0.5 on a 1000px image gives a 30px radius.
        noise_seed: Base seed for the noise generator. Combined with the
            operation's position so preview and export copies get the same noise.
    """

    blur_scale: float = 0.06
    noise_seed: int = 0

    def __post_init__(self):
        if self.blur_scale < 0.0:
            raise ValueError("blur_scale must be non-negative")
        if self.noise_seed < 0:
            raise ValueError("noise_seed must be non-negative")


EXECUTOR_CONFIG = ExecutorConfig()
