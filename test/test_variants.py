"""Tests for export variants and color-space handling."""

import dataclasses

import colour
import numpy as np
import pytest
import torch

from export import (
    COLOR_SPACES,
    EXPORT_VARIANTS,
    ExportVariant,
    UnknownVariantError,
    UnsupportedColorSpaceError,
    decode_input,
    get_variant,
)
from export.variants import from_working_gamma, to_working_gamma


class TestRegistry:
    """Tests for the export variant registry."""

    def test_known_variants(self):
        assert [v.id for v in EXPORT_VARIANTS] == ["rec709_clean", "log_input", "wide_gamut"]
        assert get_variant("rec709_clean").name == "Rec709_Clean"
        assert get_variant("log_input").color_space == "log_slog3"
        assert get_variant("wide_gamut").color_space == "log_logc"

    def test_every_variant_has_supported_color_space(self):
        for variant in EXPORT_VARIANTS:
            assert variant.color_space in COLOR_SPACES

    def test_unknown_variant(self):
        with pytest.raises(UnknownVariantError, match="bogus"):
            get_variant("bogus")

    def test_variants_are_frozen(self):
        variant = get_variant("rec709_clean")
        with pytest.raises(dataclasses.FrozenInstanceError):
            variant.name = "Other"

    def test_variant_fields(self):
        variant = ExportVariant("custom", "Custom", "A custom variant", "log_vlog")
        assert variant.description == "A custom variant"


class TestDecodeInput:
    """Tests for mapping LUT input coordinates into the working space."""

    def test_rec709_passthrough(self):
        grid = torch.linspace(0, 1, 11, dtype=torch.float64)
        assert torch.equal(decode_input(grid, "rec709"), grid)

    @pytest.mark.parametrize(
        "color_space,method",
        [("log_slog3", "S-Log3"), ("log_vlog", "V-Log"), ("log_logc", "ARRI LogC3")],
    )
    def test_log_decoding(self, color_space, method):
        grid = torch.linspace(0, 1, 11, dtype=torch.float64)
        expected = colour.oetf(
            colour.models.log_decoding(grid.numpy(), method), "ITU-R BT.709"
        )
        result = decode_input(grid, color_space)
        torch.testing.assert_close(result, torch.from_numpy(np.asarray(expected, dtype=np.float64)))

    @pytest.mark.parametrize("color_space", ["log_slog3", "log_vlog", "log_logc"])
    def test_log_decoding_is_monotonic(self, color_space):
        grid = torch.linspace(0, 1, 101, dtype=torch.float64)
        result = decode_input(grid, color_space)
        assert torch.all(result[1:] > result[:-1])

    def test_preserves_shape_and_dtype(self):
        grid = torch.rand(4, 5, 3)
        result = decode_input(grid, "log_slog3")
        assert result.shape == grid.shape
        assert result.dtype == torch.float32

    def test_unknown_color_space(self):
        with pytest.raises(UnsupportedColorSpaceError, match="aces"):
            decode_input(torch.zeros(3), "aces")

    def test_errors_are_value_errors(self):
        assert issubclass(UnsupportedColorSpaceError, ValueError)
        assert issubclass(UnknownVariantError, ValueError)


class TestWorkingGamma:
    """Tests for the preview working encodings."""

    def test_srgb_passthrough(self, gradient_image):
        assert to_working_gamma(gradient_image, "srgb") is gradient_image
        assert from_working_gamma(gradient_image, "srgb") is gradient_image

    @pytest.mark.parametrize("gamma", ["linear", "rec709"])
    def test_roundtrip(self, gradient_image, gamma):
        working = to_working_gamma(gradient_image, gamma)
        restored = from_working_gamma(working, gamma)
        torch.testing.assert_close(restored, gradient_image, rtol=0, atol=1e-5)

    def test_linear_darkens_midtones(self):
        mid = torch.tensor([0.5, 0.5, 0.5])
        linear = to_working_gamma(mid, "linear")
        torch.testing.assert_close(linear, torch.full((3,), 0.2140), rtol=0, atol=1e-4)

    def test_unknown_gamma(self, gradient_image):
        with pytest.raises(ValueError, match="preview gamma"):
            to_working_gamma(gradient_image, "gamma22")
        with pytest.raises(ValueError, match="preview gamma"):
            from_working_gamma(gradient_image, "gamma22")
