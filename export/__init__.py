"""LUT generation, export variants and preview rendering."""

from .generator import cube_filename, export_variants, generate_cube, sample_lut
from .preview import before_after, iter_preview_rows, render_preview
from .variants import (
    COLOR_SPACES,
    EXPORT_VARIANTS,
    PREVIEW_GAMMAS,
    ExportVariant,
    UnknownVariantError,
    UnsupportedColorSpaceError,
    decode_input,
    get_variant,
)

__all__ = [
    # Generation
    "cube_filename",
    "export_variants",
    "generate_cube",
    "sample_lut",
    # Preview
    "before_after",
    "iter_preview_rows",
    "render_preview",
    # Variants
    "COLOR_SPACES",
    "EXPORT_VARIANTS",
    "PREVIEW_GAMMAS",
    "ExportVariant",
    "UnknownVariantError",
    "UnsupportedColorSpaceError",
    "decode_input",
    "get_variant",
]
