"""Utility functions and classes for LUT export and manipulation."""

from .constants import CUBE_PRECISION, DEFAULT_LUT_SIZE, LUT_SIZES
from .image import save_tensor_as_image, tensor_to_pil
from .io import (
    format_cube,
    load_image_as_tensor,
    read_cube_file,
    write_cube_file,
    write_cube_text,
)
from .transforms import apply_lut, identity_lut

__all__ = [
    # Constants
    "CUBE_PRECISION",
    "DEFAULT_LUT_SIZE",
    "LUT_SIZES",
    # LUT I/O
    "format_cube",
    "load_image_as_tensor",
    "read_cube_file",
    "write_cube_file",
    "write_cube_text",
    # Image conversion
    "tensor_to_pil",
    "save_tensor_as_image",
    # LUT operations
    "apply_lut",
    "identity_lut",
]
