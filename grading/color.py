"""Color model helpers shared by the grading stages.

All functions operate on tensors whose last dimension holds RGB (or HSL)
channels, so the same code serves a single pixel, an image or a LUT grid.
"""

import torch

from utils.constants import (
    HUE_CHANNEL_RANGES,
    REC709_LUMA_B,
    REC709_LUMA_G,
    REC709_LUMA_R,
)


def luminance(rgb: torch.Tensor) -> torch.Tensor:
    """Rec. 709 luminance of an (..., 3) tensor, returned with shape (...)."""
    return (
        REC709_LUMA_R * rgb[..., 0]
        + REC709_LUMA_G * rgb[..., 1]
        + REC709_LUMA_B * rgb[..., 2]
    )


def rgb_to_hsl(rgb: torch.Tensor) -> torch.Tensor:
    """
    Convert RGB to HSL with all three components in [0, 1].

    Achromatic pixels (max == min) get hue 0 and saturation 0.
    """
    r, g, b = rgb.unbind(-1)
    max_c, _ = rgb.max(dim=-1)
    min_c, _ = rgb.min(dim=-1)
    lightness = (max_c + min_c) / 2

    delta = max_c - min_c
    chromatic = delta > 0
    safe_delta = torch.where(chromatic, delta, torch.ones_like(delta))

    sat_denominator = torch.where(lightness > 0.5, 2 - max_c - min_c, max_c + min_c)
    sat_denominator = torch.where(
        sat_denominator == 0, torch.ones_like(sat_denominator), sat_denominator
    )
    saturation = torch.where(chromatic, delta / sat_denominator, torch.zeros_like(delta))

    # Red wins ties, then green, matching the usual switch on max
    hue_r = (g - b) / safe_delta + 6 * (g < b).to(rgb.dtype)
    hue_g = (b - r) / safe_delta + 2
    hue_b = (r - g) / safe_delta + 4
    hue = torch.where(max_c == r, hue_r, torch.where(max_c == g, hue_g, hue_b)) / 6
    hue = torch.where(chromatic, hue, torch.zeros_like(hue))

    return torch.stack([hue, saturation, lightness], dim=-1)


def _hue_to_channel(p: torch.Tensor, q: torch.Tensor, t: torch.Tensor) -> torch.Tensor:
    t = torch.where(t < 0, t + 1, t)
    t = torch.where(t > 1, t - 1, t)
    return torch.where(
        t < 1 / 6,
        p + (q - p) * 6 * t,
        torch.where(
            t < 1 / 2, q, torch.where(t < 2 / 3, p + (q - p) * (2 / 3 - t) * 6, p)
        ),
    )


def hsl_to_rgb(hsl: torch.Tensor) -> torch.Tensor:
    """Inverse of rgb_to_hsl; zero saturation yields (l, l, l)."""
    h, s, light = hsl.unbind(-1)
    q = torch.where(light < 0.5, light * (1 + s), light + s - light * s)
    p = 2 * light - q

    rgb = torch.stack(
        [
            _hue_to_channel(p, q, h + 1 / 3),
            _hue_to_channel(p, q, h),
            _hue_to_channel(p, q, h - 1 / 3),
        ],
        dim=-1,
    )
    gray = light.unsqueeze(-1).expand_as(rgb)
    return torch.where((s == 0).unsqueeze(-1), gray, rgb)


def hue_channel_weights(hue: torch.Tensor) -> torch.Tensor:
    """
    Soft membership of a hue in each of the eight hue channels.

    Args:
        hue: Tensor of hues in [0, 1) (fraction of a full turn)

    Returns:
        Tensor of shape (..., 8) in red..magenta order. Each channel falls off
        linearly from its center to its half-width, with circular distance so
        red wraps around 0. Rows are normalized to sum to 1 unless every
        weight is zero.
    """
    centers = torch.tensor(
        [center / 360 for _, center, _ in HUE_CHANNEL_RANGES],
        dtype=hue.dtype,
        device=hue.device,
    )
    ranges = torch.tensor(
        [width / 360 for _, _, width in HUE_CHANNEL_RANGES],
        dtype=hue.dtype,
        device=hue.device,
    )

    distance = (hue.unsqueeze(-1) - centers).abs()
    distance = torch.where(distance > 0.5, 1 - distance, distance)
    weights = torch.where(
        distance < ranges, 1 - distance / ranges, torch.zeros_like(distance)
    )

    total = weights.sum(dim=-1, keepdim=True)
    safe_total = torch.where(total > 0, total, torch.ones_like(total))
    return weights / safe_total


def channel_sum(weights: torch.Tensor, values: list[float]) -> torch.Tensor:
    """Weighted sum over the hue channels: sum_k weights[..., k] * values[k]."""
    values_t = torch.tensor(values, dtype=weights.dtype, device=weights.device)
    return (weights * values_t).sum(dim=-1)
