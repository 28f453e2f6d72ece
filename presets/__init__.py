"""Preset settings model and XMP parsing."""

from .parser import PresetParseError, load_preset, parse_preset
from .settings import (
    HUE_CHANNEL_NAMES,
    IDENTITY_CURVE,
    Calibration,
    ColorGrading,
    ColorSettings,
    HSLAdjustments,
    HueChannels,
    ToneCurves,
    is_identity_curve,
)

__all__ = [
    # Settings model
    "ColorSettings",
    "HueChannels",
    "HSLAdjustments",
    "ColorGrading",
    "Calibration",
    "ToneCurves",
    "HUE_CHANNEL_NAMES",
    "IDENTITY_CURVE",
    "is_identity_curve",
    # Parsing
    "PresetParseError",
    "load_preset",
    "parse_preset",
]
