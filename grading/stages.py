"""
Individual stages of the grading pipeline.

Each stage is a pure function of an (..., 3) RGB tensor and the settings it
needs, and returns a new tensor. The coefficients are tuned to approximate
the look of the Camera Raw sliders; they are not derived from a published
color-science model and should be kept as they are.
"""

import torch

from presets.settings import (
    Calibration,
    ColorGrading,
    HSLAdjustments,
    HueChannels,
    ToneCurves,
    is_identity_curve,
)

from .color import channel_sum, hsl_to_rgb, hue_channel_weights, luminance, rgb_to_hsl
from .curves import apply_tone_curve


def _pivot(rgb: torch.Tensor, pivot, factor) -> torch.Tensor:
    return pivot + (rgb - pivot) * factor


def _bleed(weight: torch.Tensor, amount: float) -> torch.Tensor:
    """Per-pixel scalar weight broadcast over the RGB axis."""
    return (weight * amount).unsqueeze(-1)


def apply_exposure(rgb: torch.Tensor, exposure: float) -> torch.Tensor:
    return rgb * 2.0**exposure


def apply_whites_blacks(rgb: torch.Tensor, whites: float, blacks: float) -> torch.Tensor:
    whites_offset = whites / 100 * 0.3
    blacks_offset = blacks / 100 * 0.3
    return rgb + whites_offset * rgb + blacks_offset * (1 - rgb)


def apply_highlights_shadows(
    rgb: torch.Tensor, tonal_luminance: torch.Tensor, highlights: float, shadows: float
) -> torch.Tensor:
    highlight_amount = tonal_luminance**2 * (highlights / 100) * 0.5
    shadow_amount = (1 - tonal_luminance) ** 2 * (shadows / 100) * 0.5
    return rgb + (highlight_amount + shadow_amount).unsqueeze(-1)


def apply_contrast(rgb: torch.Tensor, contrast: float) -> torch.Tensor:
    return _pivot(rgb, 0.5, 1 + contrast / 100)


def apply_clarity(rgb: torch.Tensor, clarity: float) -> torch.Tensor:
    """Midtone-weighted local contrast around the pixel's own luminance."""
    if clarity == 0:
        return rgb
    lum = luminance(rgb)
    midtone_weight = 1 - (lum - 0.5).abs() * 2
    factor = 1 + (clarity / 100) * 0.3 * midtone_weight
    return _pivot(rgb, lum.unsqueeze(-1), factor.unsqueeze(-1))


def apply_texture(rgb: torch.Tensor, texture: float) -> torch.Tensor:
    """Like clarity, but with a flat amount across all tones."""
    if texture == 0:
        return rgb
    lum = luminance(rgb).unsqueeze(-1)
    return _pivot(rgb, lum, 1 + (texture / 100) * 0.15)


def apply_dehaze(rgb: torch.Tensor, dehaze: float) -> torch.Tensor:
    if dehaze == 0:
        return rgb
    amount = dehaze / 100
    return _pivot(rgb, 0.5, 1 + amount * 0.3) - amount * 0.1


def apply_tone_curves(rgb: torch.Tensor, curves: ToneCurves) -> torch.Tensor:
    """
    Apply the combined RGB curve to every channel, then each per-channel curve
    that differs from the identity.
    """
    rgb = apply_tone_curve(rgb.clamp(0, 1), curves.rgb)
    channels = list(rgb.unbind(-1))
    for index, points in enumerate((curves.red, curves.green, curves.blue)):
        if not is_identity_curve(points):
            channels[index] = apply_tone_curve(channels[index], points)
    return torch.stack(channels, dim=-1)


def grayscale_mix(rgb: torch.Tensor, gray_mixer: HueChannels) -> torch.Tensor:
    """
    Collapse to gray: Rec. 709 luminance nudged by the gray mixer channel
    matching each pixel's hue, scaled by how saturated the pixel was.
    """
    hsl = rgb_to_hsl(rgb)
    weights = hue_channel_weights(hsl[..., 0])
    mixer = [value / 100 for value in gray_mixer.values()]
    adjustment = channel_sum(weights, mixer) * hsl[..., 1]
    gray = (luminance(rgb) + adjustment * 0.5).clamp(0, 1)
    return gray.unsqueeze(-1).expand_as(rgb).clone()


def apply_hsl_adjustments(
    rgb: torch.Tensor, hsl_adjustments: HSLAdjustments, vibrance: float, saturation: float
) -> torch.Tensor:
    """Per-hue-channel HSL shifts followed by global vibrance and saturation."""
    hsl = rgb_to_hsl(rgb.clamp(0, 1))
    hue, sat, light = hsl.unbind(-1)
    weights = hue_channel_weights(hue)

    hue_shift = channel_sum(weights, [v / 360 for v in hsl_adjustments.hue.values()])
    hue = torch.remainder(hue + hue_shift + 1, 1.0)

    sat_mult = 1 + channel_sum(
        weights, [v / 100 for v in hsl_adjustments.saturation.values()]
    )
    sat = sat * sat_mult.clamp(min=0)

    lum_shift = channel_sum(
        weights, [v / 100 * 0.3 for v in hsl_adjustments.luminance.values()]
    )
    light = (light + lum_shift).clamp(0, 1)

    # Vibrance favours less saturated colors
    sat = sat * (1 + (vibrance / 100) * (1 - sat))
    sat = sat * (1 + saturation / 100)
    sat = sat.clamp(0, 1)

    return hsl_to_rgb(torch.stack([hue, sat, light], dim=-1))


def _zone_tint(hue_degrees: float, dtype, device) -> torch.Tensor:
    hsl = torch.tensor([hue_degrees / 360, 1.0, 0.5], dtype=dtype, device=device)
    return hsl_to_rgb(hsl) - 0.5


def apply_split_toning(
    rgb: torch.Tensor, tonal_luminance: torch.Tensor, grading: ColorGrading
) -> torch.Tensor:
    """Tint shadows, midtones and highlights toward their zone hues."""
    zones = (
        (grading.shadow_hue, grading.shadow_saturation, (1 - tonal_luminance) ** 2),
        (grading.highlight_hue, grading.highlight_saturation, tonal_luminance**2),
        (
            grading.midtone_hue,
            grading.midtone_saturation,
            1 - (tonal_luminance - 0.5).abs() * 2,
        ),
    )
    for hue, saturation, weight in zones:
        if saturation <= 0:
            continue
        strength = _bleed(weight, saturation / 100 * 0.2)
        rgb = rgb + _zone_tint(hue, rgb.dtype, rgb.device) * strength
    return rgb


def apply_calibration(
    rgb: torch.Tensor, tonal_luminance: torch.Tensor, calibration: Calibration
) -> torch.Tensor:
    """
    Approximate camera calibration as cross-channel bleeding.

    Hue sliders move energy from a primary into the other two channels in
    proportion to that primary's value; saturation sliders boost or cut a
    primary by its share of the pixel's total.
    """
    if calibration.is_neutral():
        return rgb

    orig_r, orig_g, orig_b = rgb.unbind(-1)
    out_r, out_g, out_b = orig_r, orig_g, orig_b

    if calibration.shadow_tint != 0:
        # Positive = magenta, negative = green
        tint = (1 - tonal_luminance) ** 2 * (calibration.shadow_tint / 100) * 0.2
        out_r = out_r + tint * 0.5
        out_g = out_g - tint
        out_b = out_b + tint * 0.5

    total = (orig_r + orig_g + orig_b).clamp(min=0.001)
    red_share = orig_r / total
    green_share = orig_g / total
    blue_share = orig_b / total

    red_hue = calibration.red_hue / 100
    red_sat = calibration.red_saturation / 100
    red_influence = orig_r * 0.3
    out_r = out_r + red_hue * red_influence * 0.5
    out_g = out_g + red_hue * red_influence
    out_b = out_b - red_hue * red_influence
    out_r = out_r + red_sat * red_share * 0.4
    out_g = out_g - red_sat * red_share * 0.15
    out_b = out_b - red_sat * red_share * 0.15

    green_hue = calibration.green_hue / 100
    green_sat = calibration.green_saturation / 100
    green_influence = orig_g * 0.3
    out_r = out_r - green_hue * green_influence
    out_g = out_g + green_hue * green_influence * 0.5
    out_b = out_b + green_hue * green_influence
    out_r = out_r - green_sat * green_share * 0.15
    out_g = out_g + green_sat * green_share * 0.4
    out_b = out_b - green_sat * green_share * 0.15

    blue_hue = calibration.blue_hue / 100
    blue_sat = calibration.blue_saturation / 100
    blue_influence = orig_b * 0.3
    out_r = out_r + blue_hue * blue_influence
    out_g = out_g - blue_hue * blue_influence
    out_b = out_b + blue_hue * blue_influence * 0.5
    out_r = out_r - blue_sat * blue_share * 0.15
    out_g = out_g - blue_sat * blue_share * 0.15
    out_b = out_b + blue_sat * blue_share * 0.4

    return torch.stack([out_r, out_g, out_b], dim=-1)


def apply_white_balance(rgb: torch.Tensor, temperature: float, tint: float) -> torch.Tensor:
    """Temperature trades red against blue; tint trades green against magenta."""
    r, g, b = rgb.unbind(-1)
    if temperature != 0:
        shift = temperature / 100 * 0.1
        r = r + shift
        b = b - shift
    if tint != 0:
        shift = tint / 100 * 0.1
        r = r + shift * 0.5
        g = g - shift
        b = b + shift * 0.5
    return torch.stack([r, g, b], dim=-1)
