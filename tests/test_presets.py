"""Tests for the built-in looks and preset records."""

import json
import re

import pytest

from phototone import ControlValues, assemble
from phototone.config import (
    BUILTIN_PRESETS,
    BW,
    ORIGINAL,
    VIVID,
    NamedPreset,
    create_preset,
    get_preset,
    preset_from_dict,
    preset_to_dict,
    validate_preset_record,
)


class TestBuiltinPresets:
    """Test the built-in looks."""

    def test_library(self):
        """Test the twelve looks are registered by id."""
        assert len(BUILTIN_PRESETS) == 12
        assert list(BUILTIN_PRESETS)[0] == "original"
        assert all(not preset.is_custom for preset in BUILTIN_PRESETS.values())

    def test_original_is_neutral(self):
        """Test the Original look compiles to nothing."""
        assert ORIGINAL.values.is_neutral()
        assert assemble(ORIGINAL.values) == []

    def test_values_in_range(self):
        """Test every built-in look is already within range."""
        for preset in BUILTIN_PRESETS.values():
            assert preset.values.clamp() == preset.values

    def test_bw_desaturates(self):
        """Test B&W fully desaturates."""
        assert BW.values.saturation == -100

    def test_get_preset(self):
        """Test lookup is case-insensitive and returns a copy."""
        preset = get_preset("VIVID")
        assert preset.name == VIVID.name
        preset.values.exposure = 90
        assert VIVID.values.exposure == 5

    def test_get_preset_unknown(self):
        """Test unknown ids list the available looks."""
        with pytest.raises(KeyError, match="Available"):
            get_preset("sepia")


class TestCustomPresets:
    """Test custom preset creation and records."""

    def test_create_preset(self):
        """Test ids, timestamps and the custom flag."""
        preset = create_preset("Mine", "⭐", "My look", ControlValues(exposure=10))
        assert re.fullmatch(r"custom-\d+-[0-9a-z]{9}", preset.id)
        assert preset.created_at == preset.updated_at > 0
        assert preset.is_custom

    def test_ids_are_unique(self):
        """Test two presets created together get different ids."""
        a = create_preset("A", "⭐", "", ControlValues())
        b = create_preset("B", "⭐", "", ControlValues())
        assert a.id != b.id

    def test_snapshot_is_independent(self):
        """Test later edits to the source vector do not leak into the preset."""
        values = ControlValues(contrast=10)
        preset = create_preset("Snap", "📸", "", values)
        values.contrast = 80
        assert preset.values.contrast == 10

    def test_requires_control_values(self):
        """Test NamedPreset rejects plain dicts."""
        with pytest.raises(TypeError):
            NamedPreset("x", "X", "", "", {"exposure": 10})

    def test_record_round_trip(self):
        """Test record conversion survives JSON."""
        preset = create_preset("Mine", "⭐", "My look", ControlValues(exposure=10, hue_red=-5))
        record = json.loads(json.dumps(preset_to_dict(preset)))

        assert set(record) == {
            "id",
            "name",
            "icon",
            "description",
            "filters",
            "createdAt",
            "updatedAt",
        }
        assert validate_preset_record(record)
        restored = preset_from_dict(record)
        assert restored == preset

    def test_validate_record(self):
        """Test shape validation."""
        record = preset_to_dict(VIVID)
        assert validate_preset_record(record)
        assert not validate_preset_record([record])
        assert not validate_preset_record({k: v for k, v in record.items() if k != "filters"})
        assert not validate_preset_record({**record, "createdAt": "yesterday"})

    def test_from_dict_invalid(self):
        """Test invalid records raise ValueError."""
        with pytest.raises(ValueError):
            preset_from_dict({"id": "x"})

    def test_from_dict_clamps(self):
        """Test stored values are clamped on load."""
        record = preset_to_dict(VIVID)
        record["filters"] = {"exposure": 500, "fade": -3}
        preset = preset_from_dict(record)
        assert preset.values.exposure == 100.0
        assert preset.values.fade == 0.0
        assert not preset.is_custom
