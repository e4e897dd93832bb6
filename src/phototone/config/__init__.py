"""Configuration module for phototone.

This module provides the control specifications, the control vector and
the preset library.

Usage:
    from phototone.config import CONFIG
    CONFIG.controls.exposure.max_value  # 100.0
    CONFIG.executor.blur_scale  # 0.06

    from phototone.config import CONTROL_CONFIG
    CONTROL_CONFIG.hue.min_value  # -180.0
"""

from phototone.config.config import (
    CONFIG,
    CONTROL_CONFIG,
    EXECUTOR_CONFIG,
    PhototoneConfig,
)
from phototone.config.controls import CONTROL_GROUPS, HUE_BAND_NAMES, ControlConfig
from phototone.config.executor import ExecutorConfig
from phototone.config.operations import ControlSpec
from phototone.config.presets import (
    BUILTIN_PRESETS,
    BW,
    CINEMATIC,
    COOL,
    DRAMATIC,
    LANDSCAPE,
    MOODY,
    ORIGINAL,
    PORTRAIT,
    SOFT,
    VINTAGE,
    VIVID,
    WARM,
    NamedPreset,
    create_preset,
    get_preset,
    preset_from_dict,
    preset_to_dict,
    validate_preset_record,
)
from phototone.config.values import ControlValues

__all__ = [
    # Specs
    "ControlSpec",
    "ControlConfig",
    "ExecutorConfig",
    "PhototoneConfig",
    "CONFIG",
    "CONTROL_CONFIG",
    "EXECUTOR_CONFIG",
    "CONTROL_GROUPS",
    "HUE_BAND_NAMES",
    # Values
    "ControlValues",
    # Presets
    "NamedPreset",
    "BUILTIN_PRESETS",
    "ORIGINAL",
    "VIVID",
    "WARM",
    "COOL",
    "VINTAGE",
    "DRAMATIC",
    "SOFT",
    "BW",
    "CINEMATIC",
    "PORTRAIT",
    "LANDSCAPE",
    "MOODY",
    "create_preset",
    "get_preset",
    "preset_to_dict",
    "preset_from_dict",
    "validate_preset_record",
]
