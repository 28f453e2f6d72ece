"""Compose the grading stages into the full preset transform."""

from typing import Tuple

import torch

from presets.settings import ColorSettings

from . import stages
from .color import luminance


def transform_tensor(rgb: torch.Tensor, settings: ColorSettings) -> torch.Tensor:
    """
    Apply a preset to any tensor of RGB values.

    Args:
        rgb: Tensor of shape (..., 3), nominally in [0, 1]
        settings: Preset to apply; it is only read

    Returns:
        New tensor of the same shape with values clamped to [0, 1]
    """
    if rgb.shape[-1] != 3:
        raise ValueError(f"Expected RGB values in the last dimension, got shape {tuple(rgb.shape)}")

    out = stages.apply_exposure(rgb, settings.exposure)
    out = stages.apply_whites_blacks(out, settings.whites, settings.blacks)

    # Split toning and shadow tint key off this luminance as well
    tonal_luminance = luminance(out)

    out = stages.apply_highlights_shadows(
        out, tonal_luminance, settings.highlights, settings.shadows
    )
    out = stages.apply_contrast(out, settings.contrast)
    out = stages.apply_clarity(out, settings.clarity)
    out = stages.apply_texture(out, settings.texture)
    out = stages.apply_dehaze(out, settings.dehaze)
    out = stages.apply_tone_curves(out, settings.tone_curve)

    if settings.convert_to_grayscale:
        return stages.grayscale_mix(out, settings.gray_mixer)

    out = stages.apply_hsl_adjustments(
        out, settings.hsl, settings.vibrance, settings.saturation
    )
    out = stages.apply_split_toning(out, tonal_luminance, settings.color_grading)
    out = stages.apply_calibration(out, tonal_luminance, settings.calibration)
    out = stages.apply_white_balance(out, settings.temperature, settings.tint)
    return out.clamp(0, 1)


def transform_color(
    r: float, g: float, b: float, settings: ColorSettings
) -> Tuple[float, float, float]:
    """Transform a single RGB triple in [0, 1] with the given preset."""
    rgb = torch.tensor([r, g, b], dtype=torch.float64)
    out = transform_tensor(rgb, settings)
    return tuple(out.tolist())
