"""Tests for control specifications and the ControlValues vector.

Tests the clamping semantics shared by the compiler and the importer:
- NaN becomes neutral, infinities clamp to the bounds
- Ranges come from CONTROL_CONFIG
- ControlValues is a plain value (copy, compare, replace)
"""

import logging
import math

import numpy as np
import pytest

from phototone.config import (
    CONFIG,
    CONTROL_CONFIG,
    CONTROL_GROUPS,
    EXECUTOR_CONFIG,
    HUE_BAND_NAMES,
    ControlSpec,
    ControlValues,
    ExecutorConfig,
)
from phototone.errors import PresetImportError, RangeOutOfDomainError


class TestControlSpec:
    """Test ControlSpec validation."""

    def test_validate_clamps(self):
        """Test out-of-range values clamp to the bounds."""
        spec = CONTROL_CONFIG.exposure
        assert spec.validate(250) == 100.0
        assert spec.validate(-250) == -100.0
        assert spec.validate(42) == 42.0

    def test_validate_nan_is_neutral(self):
        """Test NaN is replaced by the neutral value."""
        assert CONTROL_CONFIG.contrast.validate(float("nan")) == 0.0
        assert CONTROL_CONFIG.fade.validate(math.nan) == 0.0

    def test_validate_infinity_clamps(self):
        """Test infinities clamp to the nearest bound."""
        assert CONTROL_CONFIG.hue.validate(float("inf")) == 180.0
        assert CONTROL_CONFIG.hue.validate(float("-inf")) == -180.0
        assert CONTROL_CONFIG.grain.validate(float("-inf")) == 0.0

    def test_validate_accepts_numpy_scalars(self):
        """Test numpy scalars are accepted as numbers."""
        assert CONTROL_CONFIG.exposure.validate(np.float32(12.5)) == 12.5
        assert CONTROL_CONFIG.exposure.validate(np.int64(-7)) == -7.0

    def test_validate_rejects_non_numbers(self):
        """Test strings and booleans raise TypeError."""
        with pytest.raises(TypeError):
            CONTROL_CONFIG.exposure.validate("10")
        with pytest.raises(TypeError):
            CONTROL_CONFIG.exposure.validate(True)

    def test_check_is_strict(self):
        """Test check() raises RangeOutOfDomainError outside the range."""
        assert CONTROL_CONFIG.blur.check(50) == 50.0
        with pytest.raises(RangeOutOfDomainError) as exc_info:
            CONTROL_CONFIG.blur.check(-1)
        assert isinstance(exc_info.value, ValueError)
        assert isinstance(exc_info.value, PresetImportError)
        assert exc_info.value.name == "blur"

    def test_check_rejects_nan(self):
        """Test check() rejects NaN."""
        with pytest.raises(RangeOutOfDomainError):
            CONTROL_CONFIG.exposure.check(float("nan"))

    def test_is_neutral(self):
        """Test neutral detection is exact."""
        spec = ControlSpec("x", -1.0, 1.0, 0.0, 0.0, "light")
        assert spec.is_neutral(0.0)
        assert not spec.is_neutral(1e-9)


class TestControlConfig:
    """Test the control registry."""

    def test_has_35_controls(self):
        """Test the panel exposes 35 controls in order."""
        names = CONTROL_CONFIG.names()
        assert len(names) == 35
        assert names[0] == "exposure"
        assert names[-1] == "fade"

    def test_ranges(self):
        """Test signed, unsigned and hue ranges."""
        assert (CONTROL_CONFIG.exposure.min_value, CONTROL_CONFIG.exposure.max_value) == (
            -100.0,
            100.0,
        )
        assert (CONTROL_CONFIG.hue.min_value, CONTROL_CONFIG.hue.max_value) == (-180.0, 180.0)
        for name in ("sharpness", "blur", "noise", "grain", "fade"):
            spec = CONTROL_CONFIG.get_spec(name)
            assert (spec.min_value, spec.max_value) == (0.0, 100.0)
        for name in ("clarity", "vignette"):
            assert CONTROL_CONFIG.get_spec(name).min_value == -100.0

    def test_all_neutral_zero(self):
        """Test every control's default and neutral are 0."""
        for spec in CONTROL_CONFIG.get_all_specs().values():
            assert spec.default == 0.0
            assert spec.neutral == 0.0

    def test_get_spec_unknown(self):
        """Test unknown names and method names raise KeyError."""
        with pytest.raises(KeyError):
            CONTROL_CONFIG.get_spec("dehaze")
        with pytest.raises(KeyError):
            CONTROL_CONFIG.get_spec("get_spec")

    def test_groups(self):
        """Test every control belongs to a known UI group."""
        assert len(CONTROL_CONFIG.group("hsl_hue")) == len(HUE_BAND_NAMES)
        assert len(CONTROL_CONFIG.group("hsl_sat")) == len(HUE_BAND_NAMES)
        grouped = CONFIG.get_all_specs()
        assert set(grouped) == set(CONTROL_GROUPS)
        assert sum(len(specs) for specs in grouped.values()) == 35

    def test_singletons(self):
        """Test CONFIG shares the module singletons."""
        assert CONFIG.controls is CONTROL_CONFIG
        assert CONFIG.executor is EXECUTOR_CONFIG
        assert EXECUTOR_CONFIG.blur_scale == 0.06

    def test_executor_config_validation(self):
        """Test negative executor constants are rejected."""
        with pytest.raises(ValueError):
            ExecutorConfig(blur_scale=-0.1)
        with pytest.raises(ValueError):
            ExecutorConfig(noise_seed=-1)


class TestControlValues:
    """Test the ControlValues vector."""

    def test_default_is_neutral(self):
        """Test a new vector is neutral."""
        values = ControlValues()
        assert values.is_neutral()
        assert values.non_neutral() == {}

    def test_clamp(self):
        """Test clamp() coerces every field and returns a new vector."""
        values = ControlValues(
            exposure=250, hue=-500, blur=-3, noise=float("nan"), fade=float("inf")
        )
        clamped = values.clamp()

        assert clamped.exposure == 100.0
        assert clamped.hue == -180.0
        assert clamped.blur == 0.0
        assert clamped.noise == 0.0
        assert clamped.fade == 100.0
        assert values.exposure == 250

    def test_non_neutral_in_panel_order(self):
        """Test non_neutral() lists changed controls in panel order."""
        values = ControlValues(fade=5, exposure=10, sat_blue=-30)
        assert list(values.non_neutral()) == ["exposure", "sat_blue", "fade"]

    def test_value_semantics(self):
        """Test equality by value and independent copies."""
        a = ControlValues(exposure=10)
        b = a.copy()
        assert a == b
        b.exposure = 20
        assert a.exposure == 10
        assert a != b

    def test_replace(self):
        """Test replace() returns an edited copy."""
        a = ControlValues(exposure=10)
        b = a.replace(contrast=5)
        assert (b.exposure, b.contrast) == (10, 5)
        assert a.contrast == 0.0
        with pytest.raises(TypeError):
            a.replace(dehaze=1)

    def test_band(self):
        """Test band() returns the (hue, sat) pair."""
        values = ControlValues(hue_cyan=12, sat_cyan=-8)
        assert values.band("cyan") == (12, -8)
        assert values.band("red") == (0.0, 0.0)
        with pytest.raises(KeyError):
            values.band("teal")

    def test_dict_conversion(self):
        """Test to_dict() and from_dict() agree."""
        values = ControlValues(exposure=10, hue_red=-5)
        d = values.to_dict()
        assert len(d) == 35
        assert ControlValues.from_dict(d) == values

    def test_from_dict_ignores_unknown(self, caplog):
        """Test unknown keys are skipped with a warning."""
        with caplog.at_level(logging.WARNING, logger="phototone.config.values"):
            values = ControlValues.from_dict({"exposure": "15", "dehaze": 10})
        assert values.exposure == 15.0
        assert "dehaze" in caplog.text

    def test_repr_shows_changes(self):
        """Test repr lists only non-neutral controls."""
        assert repr(ControlValues()) == "ControlValues()"
        assert "grain=10" in repr(ControlValues(grain=10))
