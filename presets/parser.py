"""
Parse Camera Raw style XMP presets into ColorSettings.

Presets store their values as ``crs:`` attributes on a single ``rdf:Description``
node. The split toning and color grading panels, and the camera calibration
short names, spell some fields differently, so every field lists the attribute
names to try in order.
"""

import logging
import math
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Optional, Tuple

from .settings import (
    HUE_CHANNEL_NAMES,
    Calibration,
    ColorGrading,
    ColorSettings,
    CurvePoint,
    HSLAdjustments,
    HueChannels,
    ToneCurves,
    identity_curve,
)

logger = logging.getLogger(__name__)

CRS_NS = "http://ns.adobe.com/camera-raw-settings/1.0/"
RDF_NS = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"

BASIC_FIELDS = {
    "exposure": ("Exposure2012",),
    "contrast": ("Contrast2012",),
    "highlights": ("Highlights2012",),
    "shadows": ("Shadows2012",),
    "whites": ("Whites2012",),
    "blacks": ("Blacks2012",),
    "clarity": ("Clarity2012",),
    "dehaze": ("Dehaze",),
    "texture": ("Texture",),
    "vibrance": ("Vibrance",),
    "saturation": ("Saturation",),
    "temperature": ("IncrementalTemperature",),
    "tint": ("IncrementalTint",),
}

COLOR_GRADING_FIELDS = {
    "shadow_hue": ("SplitToningShadowHue", "ColorGradeShadowHue"),
    "shadow_saturation": ("SplitToningShadowSaturation", "ColorGradeShadowSat"),
    "shadow_luminance": ("ColorGradeShadowLum",),
    "midtone_hue": ("ColorGradeMidtoneHue",),
    "midtone_saturation": ("ColorGradeMidtoneSat",),
    "midtone_luminance": ("ColorGradeMidtoneLum",),
    "highlight_hue": ("SplitToningHighlightHue", "ColorGradeHighlightHue"),
    "highlight_saturation": (
        "SplitToningHighlightSaturation",
        "ColorGradeHighlightSat",
    ),
    "highlight_luminance": ("ColorGradeHighlightLum",),
    "balance": ("SplitToningBalance", "ColorGradeBlending"),
    "blending": ("ColorGradeBlending",),
}

CALIBRATION_FIELDS = {
    "shadow_tint": ("ShadowTint",),
    "red_hue": ("CameraProfileRedPrimaryHue", "RedHue"),
    "red_saturation": ("CameraProfileRedPrimarySaturation", "RedSaturation"),
    "green_hue": ("CameraProfileGreenPrimaryHue", "GreenHue"),
    "green_saturation": ("CameraProfileGreenPrimarySaturation", "GreenSaturation"),
    "blue_hue": ("CameraProfileBluePrimaryHue", "BlueHue"),
    "blue_saturation": ("CameraProfileBluePrimarySaturation", "BlueSaturation"),
}

TONE_CURVE_FIELDS = {
    "rgb": ("ToneCurvePV2012",),
    "red": ("ToneCurvePV2012Red",),
    "green": ("ToneCurvePV2012Green",),
    "blue": ("ToneCurvePV2012Blue",),
}


class PresetParseError(ValueError):
    """Raised when a preset document is not well-formed XML."""

    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source
        if source:
            message = f"Failed to parse {source}: {message}"
        super().__init__(message)


def _crs(name: str) -> str:
    return f"{{{CRS_NS}}}{name}"


def parse_number(value: Optional[str]) -> float:
    """
    Parse a numeric attribute such as "+0.35" or "-30".

    Missing or unparseable values become 0.0 instead of failing the preset.
    """
    if not value:
        return 0.0
    try:
        number = float(value.strip().replace("+", "", 1))
    except ValueError:
        logger.debug(f"Ignoring unparseable numeric value {value!r}")
        return 0.0
    return number if math.isfinite(number) else 0.0


def parse_bool(value: Optional[str]) -> bool:
    return value is not None and value.strip().lower() == "true"


def _find_description(root: ET.Element) -> Optional[ET.Element]:
    descriptions = list(root.iter(f"{{{RDF_NS}}}Description"))
    for desc in descriptions:
        if any(key.startswith(f"{{{CRS_NS}}}") for key in desc.attrib):
            return desc
    return descriptions[0] if descriptions else None


class _PresetReader:
    """Looks up crs values on a description node, attribute first then child element."""

    def __init__(self, description: Optional[ET.Element]):
        self.description = description

    def raw(self, names: Tuple[str, ...]) -> Optional[str]:
        if self.description is None:
            return None
        for i, name in enumerate(names):
            value = self.description.get(_crs(name))
            if not value:
                child = self.description.find(_crs(name))
                value = child.text.strip() if child is not None and child.text else None
            if value:
                if i > 0:
                    logger.debug(f"Using fallback attribute {name} for {names[0]}")
                return value
        return None

    def number(self, names: Tuple[str, ...]) -> float:
        return parse_number(self.raw(names))

    def flag(self, names: Tuple[str, ...]) -> bool:
        return parse_bool(self.raw(names))

    def curve(self, names: Tuple[str, ...]) -> List[CurvePoint]:
        if self.description is None:
            return identity_curve()
        for name in names:
            element = self.description.find(f".//{_crs(name)}")
            if element is None:
                continue
            points = parse_curve_points(
                item.text for item in element.iter(f"{{{RDF_NS}}}li")
            )
            return points if points else identity_curve()
        return identity_curve()


def parse_curve_points(items) -> List[CurvePoint]:
    """Parse "x, y" list items, skipping anything that is not a pair of numbers."""
    points = []
    for text in items:
        if not text or not text.strip():
            continue
        parts = text.split(",")
        try:
            if len(parts) != 2:
                raise ValueError(f"expected 2 values, got {len(parts)}")
            points.append((float(parts[0].strip()), float(parts[1].strip())))
        except ValueError:
            logger.debug(f"Skipping malformed curve point {text!r}")
    if len(points) == 1:
        # A single point is not a curve
        return []
    return points


def parse_preset(
    document_text: str | bytes, source: Optional[str] = None
) -> ColorSettings:
    """
    Parse an XMP preset document into a fully populated ColorSettings.

    Args:
        document_text: The XML text of the preset, or its raw bytes so the
            declared encoding is honoured
        source: Optional file name used in error messages

    Returns:
        ColorSettings with every field absent from the document left at its default

    Raises:
        PresetParseError: If the document is not well-formed XML or cannot be decoded
    """
    try:
        root = ET.fromstring(document_text)
    except (ET.ParseError, UnicodeDecodeError) as e:
        raise PresetParseError(str(e), source=source) from e

    reader = _PresetReader(_find_description(root))
    if reader.description is None:
        logger.debug("No rdf:Description node found, using defaults")

    def hue_channels(prefix: str) -> HueChannels:
        return HueChannels(
            **{
                name: reader.number((f"{prefix}{name.capitalize()}",))
                for name in HUE_CHANNEL_NAMES
            }
        )

    settings = ColorSettings(
        **{name: reader.number(keys) for name, keys in BASIC_FIELDS.items()},
        convert_to_grayscale=reader.flag(("ConvertToGrayscale",)),
        gray_mixer=hue_channels("GrayMixer"),
        hsl=HSLAdjustments(
            hue=hue_channels("HueAdjustment"),
            saturation=hue_channels("SaturationAdjustment"),
            luminance=hue_channels("LuminanceAdjustment"),
        ),
        color_grading=ColorGrading(
            **{name: reader.number(keys) for name, keys in COLOR_GRADING_FIELDS.items()}
        ),
        calibration=Calibration(
            **{name: reader.number(keys) for name, keys in CALIBRATION_FIELDS.items()}
        ),
        tone_curve=ToneCurves(
            **{name: reader.curve(keys) for name, keys in TONE_CURVE_FIELDS.items()}
        ),
    )

    # Blending is the one grading field whose neutral value is not zero
    if reader.raw(COLOR_GRADING_FIELDS["blending"]) is None:
        settings.color_grading.blending = ColorGrading().blending

    return settings


def load_preset(preset_path: str | Path) -> Tuple[str, ColorSettings]:
    """
    Read a preset file from disk.

    Returns:
        Tuple of (preset_name, settings) where the name is the file name without
        its .xmp extension
    """
    path = Path(preset_path)
    if not path.exists():
        raise FileNotFoundError(f"Preset file not found: {path}")

    data = path.read_bytes()
    name = path.name[:-4] if path.name.lower().endswith(".xmp") else path.name
    settings = parse_preset(data, source=path.name)
    logger.debug(f"Loaded preset {name} from {path}")
    return name, settings
