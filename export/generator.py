"""
Sample the grading pipeline on a regular grid and serialize it as a .cube LUT.
"""

import logging
from pathlib import Path
from typing import List

import torch
from tqdm import tqdm

from grading import transform_tensor
from presets.settings import ColorSettings
from utils.constants import LUT_SIZES, SAMPLE_CHUNK_SIZE
from utils.io import format_cube, write_cube_text
from utils.transforms import identity_lut

from .variants import COLOR_SPACE_LABELS, check_color_space, decode_input, get_variant

logger = logging.getLogger(__name__)


def check_lut_size(size: int) -> None:
    if size not in LUT_SIZES:
        raise ValueError(f"LUT size must be one of {LUT_SIZES}, got {size}")


def sample_lut(
    settings: ColorSettings,
    size: int,
    color_space: str = "rec709",
    clamp: bool = True,
    chunk_size: int = SAMPLE_CHUNK_SIZE,
) -> torch.Tensor:
    """
    Evaluate the preset at every node of an N x N x N grid.

    The grid is flattened, pushed through the engine in chunks and
    concatenated back in order, so the result does not depend on chunk_size.

    The engine's last stage already clamps every output to [0, 1], so
    clamp=False still yields values in that range; the flag only matters for
    the header written by generate_cube.

    Returns:
        Tensor of shape (size, size, size, 3) indexed [B][G][R], float64
    """
    check_lut_size(size)
    check_color_space(color_space)

    grid = identity_lut(size, dtype=torch.float64).reshape(-1, 3)
    inputs = decode_input(grid, color_space)

    outputs = [
        transform_tensor(chunk, settings) for chunk in torch.split(inputs, chunk_size)
    ]
    lut = torch.cat(outputs).reshape(size, size, size, 3)

    if clamp:
        lut = lut.clamp(0, 1)
    return lut


def generate_cube(
    name: str,
    size: int,
    color_space: str,
    variant_label: str,
    clamp: bool,
    settings: ColorSettings,
) -> str:
    """
    Build the full .cube text for one preset and variant.

    Raises:
        ValueError: If size is not an offered grid size or the color space is unknown
    """
    lut = sample_lut(settings, size, color_space=color_space, clamp=clamp)
    comments = [
        f"Created from preset: {name}",
        f"Variant: {variant_label}",
        f"Input color space: {COLOR_SPACE_LABELS[color_space]}",
        f"Clamped: {'yes' if clamp else 'no'}",
    ]
    return format_cube(lut, title=f"{name} {variant_label}", comments=comments)


def cube_filename(preset_name: str, size: int, variant_name: str) -> str:
    return f"{preset_name}_{size}x{size}x{size}_{variant_name}.cube"


def export_variants(
    preset_name: str,
    settings: ColorSettings,
    variant_ids: List[str],
    size: int,
    output_dir: str | Path,
    clamp: bool = True,
    show_progress: bool = False,
) -> List[Path]:
    """
    Write one .cube file per requested export variant.

    Unknown variant ids fail before anything is written.

    Returns:
        Paths of the written files, in the order of variant_ids
    """
    variants = [get_variant(variant_id) for variant_id in variant_ids]
    check_lut_size(size)

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for variant in tqdm(variants, desc="Generating LUTs", disable=not show_progress):
        text = generate_cube(
            preset_name, size, variant.color_space, variant.name, clamp, settings
        )
        path = output_dir / cube_filename(preset_name, size, variant.name)
        write_cube_text(str(path), text)
        logger.info(f"Wrote {path} ({size ** 3} entries)")
        written.append(path)
    return written
