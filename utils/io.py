import re
from typing import Iterable

import numpy as np
import torch
from PIL import Image

from .constants import CUBE_PRECISION

DATA_LINE = re.compile(r"^[\d\.\-\+eE\s]+$")


def load_image_as_tensor(image_path: str) -> torch.Tensor:
    image = Image.open(image_path).convert("RGB")
    image_array = np.array(image)
    image_tensor = torch.from_numpy(image_array).permute(2, 0, 1)
    image_tensor = image_tensor.float() / 255.0
    return image_tensor


def _parse_triple(parts: list[str], keyword: str) -> list[float]:
    if len(parts) != 3:
        raise ValueError(f"{keyword} needs 3 values, got {len(parts)}")
    return [float(x) for x in parts]


def read_cube_file(lut_path: str) -> tuple[torch.Tensor, list[float], list[float]]:
    """
    Load a 3D .cube LUT.

    Header keywords may appear in any order before the data. TITLE, comments
    and blank lines are ignored; so is any other keyword this reader does not
    know about (e.g. LUT_1D_INPUT_RANGE written by some tools).

    Returns:
        Tuple of (lut_tensor, domain_min, domain_max) where lut_tensor has
        shape (size, size, size, 3) indexed [B][G][R]

    Raises:
        ValueError: If LUT_3D_SIZE is missing or the entry count does not match it
    """
    lut_size = None
    domain_min = [0.0, 0.0, 0.0]
    domain_max = [1.0, 1.0, 1.0]
    rows = []

    with open(lut_path, "r") as f:
        for raw_line in f:
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue

            keyword, *parts = line.split()
            if keyword == "LUT_3D_SIZE":
                lut_size = int(parts[0])
            elif keyword == "DOMAIN_MIN":
                domain_min = _parse_triple(parts, keyword)
            elif keyword == "DOMAIN_MAX":
                domain_max = _parse_triple(parts, keyword)
            elif DATA_LINE.match(line) and len(parts) == 2:
                rows.append([float(keyword), float(parts[0]), float(parts[1])])

    if lut_size is None:
        raise ValueError("LUT_3D_SIZE not found in cube file")

    expected_entries = lut_size**3
    if len(rows) != expected_entries:
        raise ValueError(f"Expected {expected_entries} entries, got {len(rows)}")

    # Red varies fastest in the file, so a C-order reshape gives [B][G][R]
    lut = torch.tensor(np.asarray(rows, dtype=np.float32))
    return lut.reshape(lut_size, lut_size, lut_size, 3), domain_min, domain_max


def format_cube(
    lut_tensor: torch.Tensor,
    title: str = "Generated LUT",
    comments: Iterable[str] = (),
    domain_min: list[float] | None = None,
    domain_max: list[float] | None = None,
) -> str:
    """
    Serialize a LUT tensor to .cube text.

    Args:
        lut_tensor: LUT tensor of shape (size, size, size, 3) indexed [B][G][R]
        title: Written as the TITLE line
        comments: Extra lines written as "# ..." comments below the title
        domain_min: Minimum domain values (default [0.0, 0.0, 0.0])
        domain_max: Maximum domain values (default [1.0, 1.0, 1.0])

    Returns:
        The file contents, one "R G B" line per grid node with red varying fastest
    """
    if domain_min is None:
        domain_min = [0.0, 0.0, 0.0]
    if domain_max is None:
        domain_max = [1.0, 1.0, 1.0]

    assert lut_tensor.ndim == 4, "LUT tensor must be 4D (size, size, size, 3)"
    assert lut_tensor.shape[-1] == 3, "LUT tensor must have 3 channels (RGB)"
    assert lut_tensor.shape[0] == lut_tensor.shape[1] == lut_tensor.shape[2], (
        "LUT must be cubic (same size in all dimensions)"
    )
    assert len(domain_min) == 3, "Domain min must be a 3-element list"
    assert len(domain_max) == 3, "Domain max must be a 3-element list"

    lut_size = lut_tensor.shape[0]
    fmt = f"{{:.{CUBE_PRECISION}f}}"

    lines = [f'TITLE "{title}"']
    lines.extend(f"# {comment}" for comment in comments)
    lines.append(f"LUT_3D_SIZE {lut_size}")
    lines.append("DOMAIN_MIN " + " ".join(fmt.format(v) for v in domain_min))
    lines.append("DOMAIN_MAX " + " ".join(fmt.format(v) for v in domain_max))
    lines.append("")

    # Adding zero turns -0.0 into 0.0 so black never prints as "-0.000000"
    lut_data = (lut_tensor.reshape(-1, 3).detach().cpu().double() + 0.0).tolist()
    row = f"{fmt} {fmt} {fmt}"
    lines.extend(row.format(r, g, b) for r, g, b in lut_data)

    return "\n".join(lines) + "\n"


def write_cube_file(
    lut_path: str,
    lut_tensor: torch.Tensor,
    domain_min: list[float] | None = None,
    domain_max: list[float] | None = None,
    title: str = "Generated LUT",
) -> None:
    """Save a LUT tensor to a .cube file (see format_cube)."""
    write_cube_text(
        lut_path,
        format_cube(lut_tensor, title=title, domain_min=domain_min, domain_max=domain_max),
    )


def write_cube_text(lut_path: str, text: str) -> None:
    # newline="" keeps "\n" line endings on every platform
    with open(lut_path, "w", newline="") as f:
        f.write(text)
