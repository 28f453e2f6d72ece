"""Export variants and the color-space handling behind them."""

from dataclasses import dataclass
from typing import Literal, get_args

import colour
import numpy as np
import torch

ColorSpace = Literal["rec709", "log_slog3", "log_vlog", "log_logc"]
PreviewGamma = Literal["linear", "srgb", "rec709"]

COLOR_SPACES = get_args(ColorSpace)
PREVIEW_GAMMAS = get_args(PreviewGamma)

COLOR_SPACE_LABELS = {
    "rec709": "Rec.709",
    "log_slog3": "S-Log3",
    "log_vlog": "V-Log",
    "log_logc": "ARRI LogC",
}

# colour-science log decoding functions for each log input space
LOG_DECODINGS = {
    "log_slog3": "S-Log3",
    "log_vlog": "V-Log",
    "log_logc": "ARRI LogC3",
}


class UnknownVariantError(ValueError):
    """Raised when an export variant id is not in the registry."""

    pass


class UnsupportedColorSpaceError(ValueError):
    """Raised when a LUT is requested for a color space we cannot map."""

    pass


@dataclass(frozen=True)
class ExportVariant:
    id: str
    name: str
    description: str
    color_space: ColorSpace


EXPORT_VARIANTS = (
    ExportVariant(
        id="rec709_clean",
        name="Rec709_Clean",
        description="Standard Rec.709 LUT, no gamut expansion",
        color_space="rec709",
    ),
    ExportVariant(
        id="log_input",
        name="Log_Input",
        description="Log-encoded input LUT for video workflows",
        color_space="log_slog3",
    ),
    ExportVariant(
        id="wide_gamut",
        name="Wide_Gamut",
        description="Extended gamut LUT with soft clipping",
        color_space="log_logc",
    ),
)

VARIANT_IDS = tuple(variant.id for variant in EXPORT_VARIANTS)


def get_variant(variant_id: str) -> ExportVariant:
    for variant in EXPORT_VARIANTS:
        if variant.id == variant_id:
            return variant
    raise UnknownVariantError(
        f"Unknown export variant '{variant_id}', expected one of {VARIANT_IDS}"
    )


def check_color_space(color_space: str) -> None:
    if color_space not in COLOR_SPACES:
        raise UnsupportedColorSpaceError(
            f"Unsupported color space '{color_space}', expected one of {COLOR_SPACES}"
        )


def _numpy_op(values: torch.Tensor, fn) -> torch.Tensor:
    array = values.detach().cpu().numpy().astype(np.float64)
    result = torch.from_numpy(np.asarray(fn(array), dtype=np.float64))
    return result.to(device=values.device, dtype=values.dtype)


def decode_input(grid: torch.Tensor, color_space: str) -> torch.Tensor:
    """
    Map LUT input coordinates into the display-referred space the grading engine expects.

    Rec.709 input is passed through. Log inputs are decoded to scene-linear and
    re-encoded with the BT.709 OETF, so the engine sees the same kind of signal
    a Rec.709 source would give it.
    """
    check_color_space(color_space)
    if color_space == "rec709":
        return grid

    method = LOG_DECODINGS[color_space]

    def log_to_display(array: np.ndarray) -> np.ndarray:
        linear = colour.models.log_decoding(array, method)
        return colour.oetf(linear, "ITU-R BT.709")

    return _numpy_op(grid, log_to_display)


def to_working_gamma(image: torch.Tensor, preview_gamma: str) -> torch.Tensor:
    """Re-encode sRGB preview pixels into the working encoding chosen for the preview."""
    if preview_gamma not in PREVIEW_GAMMAS:
        raise ValueError(
            f"Unsupported preview gamma '{preview_gamma}', expected one of {PREVIEW_GAMMAS}"
        )
    if preview_gamma == "srgb":
        return image
    if preview_gamma == "linear":
        return _numpy_op(image, lambda a: colour.cctf_decoding(a, "sRGB"))
    return _numpy_op(
        image,
        lambda a: colour.oetf(colour.cctf_decoding(a, "sRGB"), "ITU-R BT.709"),
    )


def from_working_gamma(image: torch.Tensor, preview_gamma: str) -> torch.Tensor:
    """Inverse of to_working_gamma, back to sRGB for display."""
    if preview_gamma not in PREVIEW_GAMMAS:
        raise ValueError(
            f"Unsupported preview gamma '{preview_gamma}', expected one of {PREVIEW_GAMMAS}"
        )
    if preview_gamma == "srgb":
        return image
    if preview_gamma == "linear":
        return _numpy_op(image, lambda a: colour.cctf_encoding(a, "sRGB"))
    return _numpy_op(
        image,
        lambda a: colour.cctf_encoding(colour.oetf_inverse(a, "ITU-R BT.709"), "sRGB"),
    )
