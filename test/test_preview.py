"""Tests for before/after preview rendering."""

import pytest
import torch

from export import UnsupportedColorSpaceError, before_after, iter_preview_rows, render_preview
from presets import ColorSettings


class TestRenderPreview:
    """Tests for grading whole images."""

    def test_neutral_preset_keeps_image(self, gradient_image):
        rendered = render_preview(gradient_image, ColorSettings())
        assert rendered.shape == gradient_image.shape
        assert rendered.dtype == gradient_image.dtype
        torch.testing.assert_close(rendered, gradient_image, rtol=0, atol=1e-5)

    @pytest.mark.parametrize("gamma", ["linear", "rec709"])
    def test_neutral_preset_any_gamma(self, gradient_image, gamma):
        rendered = render_preview(gradient_image, ColorSettings(), preview_gamma=gamma)
        torch.testing.assert_close(rendered, gradient_image, rtol=0, atol=1e-4)

    def test_preset_changes_image(self, gradient_image):
        rendered = render_preview(gradient_image, ColorSettings(exposure=1.0))
        assert rendered.mean() > gradient_image.mean()
        assert rendered.max() <= 1.0

    def test_gamma_changes_result(self, gradient_image):
        settings = ColorSettings(contrast=40)
        srgb = render_preview(gradient_image, settings, preview_gamma="srgb")
        linear = render_preview(gradient_image, settings, preview_gamma="linear")
        assert not torch.allclose(srgb, linear)

    def test_log_source_is_decoded(self, gradient_image):
        rendered = render_preview(gradient_image, ColorSettings(), color_space="log_slog3")
        assert not torch.allclose(rendered, gradient_image, atol=1e-3)

    def test_batching_does_not_change_result(self, gradient_image):
        settings = ColorSettings(vibrance=30, highlights=-25)
        one_batch = render_preview(gradient_image, settings, rows_per_batch=1000)
        small_batches = render_preview(gradient_image, settings, rows_per_batch=7)
        torch.testing.assert_close(one_batch, small_batches)

    def test_input_not_modified(self, gradient_image):
        original = gradient_image.clone()
        render_preview(gradient_image, ColorSettings(saturation=50))
        assert torch.equal(gradient_image, original)


class TestIterPreviewRows:
    """Tests for row-batched rendering."""

    def test_batches_cover_image(self, gradient_image):
        batches = list(iter_preview_rows(gradient_image, ColorSettings(), rows_per_batch=10))
        assert [start for start, _ in batches] == [0, 10, 20, 30, 40]
        assert [rows.shape for _, rows in batches][-1] == (3, 8, 64)
        assert sum(rows.shape[1] for _, rows in batches) == gradient_image.shape[1]

    def test_rows_per_batch_must_be_positive(self, gradient_image):
        with pytest.raises(ValueError, match="rows_per_batch"):
            list(iter_preview_rows(gradient_image, ColorSettings(), rows_per_batch=0))

    def test_unknown_color_space(self, gradient_image):
        with pytest.raises(UnsupportedColorSpaceError):
            list(iter_preview_rows(gradient_image, ColorSettings(), color_space="aces"))


class TestBeforeAfter:
    """Tests for comparison image composition."""

    def test_split_side_by_side(self, gradient_image):
        rendered = render_preview(gradient_image, ColorSettings(contrast=30))
        combined = before_after(gradient_image, rendered, "split")
        width = gradient_image.shape[2]
        assert combined.shape == (3, gradient_image.shape[1], width * 2)
        assert torch.equal(combined[..., :width], gradient_image)
        assert torch.equal(combined[..., width:], rendered)

    def test_after_and_before(self, gradient_image):
        rendered = render_preview(gradient_image, ColorSettings(contrast=30))
        assert before_after(gradient_image, rendered, "after") is rendered
        assert before_after(gradient_image, rendered, "before") is gradient_image

    def test_unknown_mode(self, gradient_image):
        with pytest.raises(ValueError, match="preview mode"):
            before_after(gradient_image, gradient_image, "overlay")
