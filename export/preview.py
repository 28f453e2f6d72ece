"""Before/after preview rendering of a preset on an image."""

from typing import Iterator, Literal, Tuple

import torch

from grading import transform_tensor
from presets.settings import ColorSettings

from .variants import check_color_space, decode_input, from_working_gamma, to_working_gamma

PreviewMode = Literal["after", "before", "split"]


def iter_preview_rows(
    image: torch.Tensor,
    settings: ColorSettings,
    preview_gamma: str = "srgb",
    rows_per_batch: int = 64,
    color_space: str = "rec709",
) -> Iterator[Tuple[int, torch.Tensor]]:
    """
    Grade an image a batch of rows at a time.

    Args:
        image: Image tensor of shape (C, H, W) with sRGB values in [0, 1]
        settings: Preset to apply
        preview_gamma: Working encoding the engine sees ("srgb", "rec709" or "linear")
        rows_per_batch: Number of image rows per yielded batch
        color_space: Encoding of the source pixels; log footage is decoded the
            same way LUT inputs are before grading

    Yields:
        (row_start, rows) where rows has shape (C, n, W) and is ready for display
    """
    if rows_per_batch <= 0:
        raise ValueError(f"rows_per_batch must be positive, got {rows_per_batch}")

    check_color_space(color_space)

    height = image.shape[1]
    for row_start in range(0, height, rows_per_batch):
        rows = image[:, row_start : row_start + rows_per_batch].permute(1, 2, 0)
        working = to_working_gamma(decode_input(rows, color_space), preview_gamma)
        graded = transform_tensor(working, settings)
        display = from_working_gamma(graded, preview_gamma).clamp(0, 1)
        yield row_start, display.permute(2, 0, 1)


def render_preview(
    image: torch.Tensor,
    settings: ColorSettings,
    preview_gamma: str = "srgb",
    rows_per_batch: int = 64,
    color_space: str = "rec709",
) -> torch.Tensor:
    """Grade a whole (C, H, W) image; see iter_preview_rows."""
    rendered = torch.empty_like(image)
    rows_iter = iter_preview_rows(image, settings, preview_gamma, rows_per_batch, color_space)
    for row_start, rows in rows_iter:
        rendered[:, row_start : row_start + rows.shape[1]] = rows.to(image.dtype)
    return rendered


def before_after(
    original: torch.Tensor, rendered: torch.Tensor, mode: PreviewMode = "split"
) -> torch.Tensor:
    """Compose the comparison image shown to the user."""
    if mode == "after":
        return rendered
    if mode == "before":
        return original
    if mode == "split":
        # Side by side, original on the left
        return torch.cat([original, rendered.to(original.dtype)], dim=-1)
    raise ValueError(f"Unknown preview mode '{mode}', expected after, before or split")
