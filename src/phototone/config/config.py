"""Unified phototone configuration.

This module provides a top-level configuration dataclass that contains
the control specifications and the executor settings as sub-attributes.
"""

from __future__ import annotations

from dataclasses import dataclass

from phototone.config.controls import CONTROL_CONFIG as _CONTROLS
from phototone.config.controls import ControlConfig
from phototone.config.executor import EXECUTOR_CONFIG as _EXECUTOR
from phototone.config.executor import ExecutorConfig


@dataclass(frozen=True)
class PhototoneConfig:
    """Top-level configuration.

    Provides hierarchical access:
        CONFIG.controls.exposure
        CONFIG.executor.blur_scale

    Attributes:
        controls: Control vector specifications
        executor: Raster executor settings
    """

    controls: ControlConfig = _CONTROLS
    executor: ExecutorConfig = _EXECUTOR

    def get_all_specs(self) -> dict[str, dict[str, object]]:
        """Get all control specs, keyed by UI group.

        :return: Nested dictionary of specifications
        """
        grouped: dict[str, dict[str, object]] = {}
        for name, spec in self.controls.get_all_specs().items():
            grouped.setdefault(spec.group, {})[name] = spec
        return grouped


# Main singleton instance
CONFIG = PhototoneConfig()

# Shortcut singleton exports
CONTROL_CONFIG = CONFIG.controls
EXECUTOR_CONFIG = CONFIG.executor
