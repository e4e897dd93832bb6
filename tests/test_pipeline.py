"""Tests for the pipeline assembler and the fluent Pipeline builder."""

import numpy as np
import pytest

from phototone import ControlValues, Pipeline, assemble
from phototone.operations import ColorMatrix, Contrast, Gamma, Noise, OperationKind
from phototone.pipeline import BAND_STAGES, COLOR_STAGES, FINISH_STAGES, STAGE_ORDER, TONE_STAGES


def kinds(operations) -> list[str]:
    """Return the kind names of an operation list."""
    return [op.kind.value for op in operations]


class TestStageOrder:
    """Test the fixed stage order."""

    def test_categories(self):
        """Test tone, color, bands, finish in that order."""
        assert [category for category, _ in STAGE_ORDER] == ["tone", "color", "hsl", "finish"]
        assert TONE_STAGES[0] == "exposure"
        assert COLOR_STAGES[-1] == "hue"
        assert BAND_STAGES == ("red", "orange", "yellow", "green", "cyan", "blue", "purple", "magenta")
        assert FINISH_STAGES == ("clarity", "fade", "sharpness", "blur", "noise", "grain")

    def test_vignette_not_staged(self):
        """Test vignette has no stage."""
        staged = {stage for _, stages in STAGE_ORDER for stage in stages}
        assert "vignette" not in staged


class TestAssemble:
    """Test assemble()."""

    def test_neutral_is_empty(self):
        """Test the neutral vector compiles to an empty list."""
        assert assemble(ControlValues()) == []

    def test_vignette_only_is_empty(self):
        """Test a vignette-only vector has no pixel operations."""
        assert assemble(ControlValues(vignette=-40)) == []

    def test_order_across_categories(self):
        """Test operations follow stage order, not field order."""
        values = ControlValues(grain=10, sat_red=10, temperature=30, exposure=20)
        ops = assemble(values)
        assert kinds(ops) == ["gamma", "color_matrix", "color_matrix", "noise"]
        assert ops[0] == Gamma(gamma=(0.9, 0.9, 0.9))
        assert ops[1].matrix[0] == pytest.approx(1.03)

    def test_tone_order(self):
        """Test exposure is applied before contrast."""
        ops = assemble(ControlValues(contrast=10, exposure=10))
        assert isinstance(ops[0], Gamma)
        assert isinstance(ops[1], Contrast)

    def test_fade_before_sharpness(self):
        """Test finish stages: clarity, fade, sharpness, blur, noise, grain."""
        values = ControlValues(grain=5, noise=5, blur=5, sharpness=5, fade=5, clarity=5)
        assert kinds(assemble(values)) == [
            "contrast",
            "color_matrix",
            "convolute",
            "blur",
            "noise",
            "noise",
        ]

    def test_noise_and_grain_coexist(self):
        """Test noise and grain both produce a noise operation."""
        ops = assemble(ControlValues(noise=10, grain=10))
        assert ops == [Noise(noise=50.0), Noise(noise=15.0)]

    def test_band_isolation(self):
        """Test a single band slider yields one operation."""
        ops = assemble(ControlValues(sat_blue=-30))
        assert len(ops) == 1
        assert isinstance(ops[0], ColorMatrix)

    def test_one_operation_per_band(self):
        """Test hue and sat of the same band compile jointly."""
        ops = assemble(ControlValues(hue_green=20, sat_green=-20))
        assert len(ops) == 1

    def test_out_of_range_is_clamped(self):
        """Test assembly never fails for numeric input."""
        values = ControlValues(exposure=1e9, hue=float("nan"), blur=-5, noise=float("inf"))
        ops = assemble(values)
        assert kinds(ops) == ["gamma", "noise"]
        assert ops[1] == Noise(noise=500.0)

    def test_assembly_is_pure(self):
        """Test assembling twice gives equal lists and leaves the input unchanged."""
        values = ControlValues(exposure=250, sat_red=10)
        first = assemble(values)
        second = assemble(values)
        assert first == second
        assert values.exposure == 250

    def test_every_operation_is_valid(self):
        """Test a fully loaded vector compiles to known kinds."""
        rng = np.random.default_rng(42)
        values = ControlValues.from_dict(
            {name: float(rng.uniform(1, 100)) for name in ControlValues().to_dict()}
        )
        ops = assemble(values)
        assert all(isinstance(op.kind, OperationKind) for op in ops)
        # 34 staged controls, 8 bands compile jointly, vignette never compiles
        assert len(ops) == 7 + 5 + 8 + 6


class TestPipelineBuilder:
    """Test the fluent Pipeline builder."""

    def test_chaining(self):
        """Test fluent methods set controls and return self."""
        pipe = Pipeline().exposure(20).contrast(10).band("red", hue=10)
        values = pipe.values
        assert (values.exposure, values.contrast, values.hue_red) == (20, 10, 10)
        assert values.sat_red == 0.0
        assert len(pipe) == 3

    def test_last_value_wins(self):
        """Test setting a control twice keeps the last value."""
        pipe = Pipeline().exposure(20).exposure(-20)
        assert pipe.operations() == [Gamma(gamma=(1.2, 1.2, 1.2))]

    def test_band_keeps_other_slider(self):
        """Test band() only changes the given slider."""
        pipe = Pipeline().band("cyan", hue=15).band("cyan", sat=-5)
        assert pipe.values.band("cyan") == (15, -5)

    def test_unknown_control(self):
        """Test unknown names raise KeyError."""
        with pytest.raises(KeyError):
            Pipeline().set("dehaze", 10)
        with pytest.raises(KeyError):
            Pipeline().set("band", 10)
        with pytest.raises(KeyError):
            Pipeline().band("teal", hue=10)

    def test_values_is_copy(self):
        """Test the values property cannot mutate the pipeline."""
        pipe = Pipeline().fade(10)
        pipe.values.fade = 50
        assert pipe.values.fade == 10

    def test_from_values_copies(self):
        """Test from_values() snapshots the vector."""
        values = ControlValues(blur=10)
        pipe = Pipeline.from_values(values)
        values.blur = 90
        assert pipe.values.blur == 10

    def test_reset(self):
        """Test reset() returns to neutral."""
        pipe = Pipeline().saturation(-100).grain(10)
        assert not pipe.is_neutral()
        pipe.reset()
        assert pipe.is_neutral()
        assert pipe.operations() == []

    def test_vignette_is_stored_but_not_compiled(self):
        """Test vignette is kept in the vector without an operation."""
        pipe = Pipeline().vignette(-30)
        assert pipe.values.vignette == -30
        assert pipe.is_neutral()

    def test_apply(self, image, rgba):
        """Test calling the pipeline applies it to the image."""
        pipe = Pipeline().exposure(50).saturation(-100)
        result = pipe(image)

        assert result is image
        assert len(image.filters) == 2
        pixels = image.pixels
        assert np.all(pixels[..., 0] == pixels[..., 1])
        assert np.all(pixels[..., 1] == pixels[..., 2])
        assert pixels[..., :3].astype(int).sum() > 0
        np.testing.assert_array_equal(pixels[..., 3], rgba[..., 3])
