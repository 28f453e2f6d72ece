"""Canonical in-memory representation of a color-grading preset."""

import copy
from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, List, Tuple

from utils.constants import HUE_CHANNEL_RANGES

CurvePoint = Tuple[float, float]

HUE_CHANNEL_NAMES = tuple(name for name, _, _ in HUE_CHANNEL_RANGES)

IDENTITY_CURVE: Tuple[CurvePoint, ...] = ((0.0, 0.0), (255.0, 255.0))


def identity_curve() -> List[CurvePoint]:
    return list(IDENTITY_CURVE)


def is_identity_curve(points: List[CurvePoint]) -> bool:
    """True for the untouched two-point curve (0,0) -> (255,255)."""
    if len(points) != 2:
        return False
    (x0, y0), (x1, y1) = points
    return (x0, y0) == (0.0, 0.0) and (x1, y1) == (255.0, 255.0)


def _coerce_curve(value: Any) -> List[CurvePoint]:
    points = [(float(x), float(y)) for x, y in value or []]
    return points if len(points) >= 2 else identity_curve()


def _filtered(cls, data: dict) -> dict:
    valid_fields = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in valid_fields}


@dataclass
class HueChannels:
    """One value per hue channel, in the fixed red..magenta order."""

    red: float = 0.0
    orange: float = 0.0
    yellow: float = 0.0
    green: float = 0.0
    aqua: float = 0.0
    blue: float = 0.0
    purple: float = 0.0
    magenta: float = 0.0

    def values(self) -> List[float]:
        return [getattr(self, name) for name in HUE_CHANNEL_NAMES]

    def is_neutral(self) -> bool:
        return not any(self.values())

    @classmethod
    def from_dict(cls, data: dict) -> "HueChannels":
        return cls(**{k: float(v) for k, v in _filtered(cls, data).items()})


@dataclass
class HSLAdjustments:
    hue: HueChannels = field(default_factory=HueChannels)
    saturation: HueChannels = field(default_factory=HueChannels)
    luminance: HueChannels = field(default_factory=HueChannels)

    def is_neutral(self) -> bool:
        return (
            self.hue.is_neutral()
            and self.saturation.is_neutral()
            and self.luminance.is_neutral()
        )

    @classmethod
    def from_dict(cls, data: dict) -> "HSLAdjustments":
        return cls(
            hue=HueChannels.from_dict(data.get("hue", {})),
            saturation=HueChannels.from_dict(data.get("saturation", {})),
            luminance=HueChannels.from_dict(data.get("luminance", {})),
        )


@dataclass
class ColorGrading:
    """Split toning / three-way color grading zones.

    Hues are in degrees [0, 360), saturations in [0, 100] and luminances in
    [-100, 100]. ``blending`` defaults to 50 like the grading panel it mirrors.
    """

    shadow_hue: float = 0.0
    shadow_saturation: float = 0.0
    shadow_luminance: float = 0.0
    midtone_hue: float = 0.0
    midtone_saturation: float = 0.0
    midtone_luminance: float = 0.0
    highlight_hue: float = 0.0
    highlight_saturation: float = 0.0
    highlight_luminance: float = 0.0
    balance: float = 0.0
    blending: float = 50.0

    @classmethod
    def from_dict(cls, data: dict) -> "ColorGrading":
        return cls(**{k: float(v) for k, v in _filtered(cls, data).items()})


@dataclass
class Calibration:
    shadow_tint: float = 0.0
    red_hue: float = 0.0
    red_saturation: float = 0.0
    green_hue: float = 0.0
    green_saturation: float = 0.0
    blue_hue: float = 0.0
    blue_saturation: float = 0.0

    def is_neutral(self) -> bool:
        return not any(getattr(self, f.name) for f in fields(self))

    @classmethod
    def from_dict(cls, data: dict) -> "Calibration":
        return cls(**{k: float(v) for k, v in _filtered(cls, data).items()})


@dataclass
class ToneCurves:
    """Combined RGB curve plus per-channel curves, as (input, output) pairs in [0, 255]."""

    rgb: List[CurvePoint] = field(default_factory=identity_curve)
    red: List[CurvePoint] = field(default_factory=identity_curve)
    green: List[CurvePoint] = field(default_factory=identity_curve)
    blue: List[CurvePoint] = field(default_factory=identity_curve)

    @classmethod
    def from_dict(cls, data: dict) -> "ToneCurves":
        return cls(**{k: _coerce_curve(v) for k, v in _filtered(cls, data).items()})


@dataclass
class ColorSettings:
    """All parameters of a global color grade.

    Every field defaults to its neutral value, so ``ColorSettings()`` is the
    identity transform.
    """

    exposure: float = 0.0
    contrast: float = 0.0
    highlights: float = 0.0
    shadows: float = 0.0
    whites: float = 0.0
    blacks: float = 0.0
    clarity: float = 0.0
    dehaze: float = 0.0
    texture: float = 0.0
    vibrance: float = 0.0
    saturation: float = 0.0
    temperature: float = 0.0
    tint: float = 0.0
    convert_to_grayscale: bool = False
    gray_mixer: HueChannels = field(default_factory=HueChannels)
    hsl: HSLAdjustments = field(default_factory=HSLAdjustments)
    color_grading: ColorGrading = field(default_factory=ColorGrading)
    calibration: Calibration = field(default_factory=Calibration)
    tone_curve: ToneCurves = field(default_factory=ToneCurves)

    @classmethod
    def from_dict(cls, data: dict) -> "ColorSettings":
        nested = {
            "gray_mixer": HueChannels,
            "hsl": HSLAdjustments,
            "color_grading": ColorGrading,
            "calibration": Calibration,
            "tone_curve": ToneCurves,
        }
        kwargs: Dict[str, Any] = {}
        for key, value in _filtered(cls, data).items():
            if key in nested:
                kwargs[key] = nested[key].from_dict(value or {})
            elif key == "convert_to_grayscale":
                kwargs[key] = bool(value)
            else:
                kwargs[key] = float(value)
        return cls(**kwargs)

    def to_dict(self) -> dict:
        return asdict(self)

    def copy(self) -> "ColorSettings":
        return copy.deepcopy(self)

    def changed_fields(self) -> Dict[str, Any]:
        """Return every field that differs from its default, keyed by dotted path."""
        changed: Dict[str, Any] = {}
        _collect_changes(self.to_dict(), ColorSettings().to_dict(), "", changed)
        return changed

    def is_neutral(self) -> bool:
        return not self.changed_fields()


def _collect_changes(current: dict, default: dict, prefix: str, out: dict) -> None:
    for key, value in current.items():
        path = f"{prefix}{key}"
        if isinstance(value, dict):
            _collect_changes(value, default[key], f"{path}.", out)
        elif key in ToneCurves.__dataclass_fields__ and isinstance(value, list):
            if not is_identity_curve(value):
                out[path] = value
        elif value != default[key]:
            out[path] = value
