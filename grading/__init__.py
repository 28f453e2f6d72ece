"""Per-pixel color transform driven by preset settings."""

from .color import hsl_to_rgb, hue_channel_weights, luminance, rgb_to_hsl
from .curves import apply_tone_curve
from .pipeline import transform_color, transform_tensor

__all__ = [
    "apply_tone_curve",
    "hsl_to_rgb",
    "hue_channel_weights",
    "luminance",
    "rgb_to_hsl",
    "transform_color",
    "transform_tensor",
]
