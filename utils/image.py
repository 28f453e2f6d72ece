"""Image conversion utilities for tensors and PIL Images."""

from pathlib import Path

import numpy as np
import torch
from PIL import Image


def tensor_to_pil(tensor: torch.Tensor) -> Image.Image:
    """
    Convert a PyTorch tensor to a PIL Image.

    Args:
        tensor: Image tensor of shape (C, H, W) in [0, 1] range

    Returns:
        PIL Image in RGB format
    """
    img_array = tensor.detach().permute(1, 2, 0).clamp(0, 1).cpu().double().numpy()
    # Round rather than truncate so graded mid-greys do not drift down a level
    img_array = np.rint(img_array * 255).astype(np.uint8)
    return Image.fromarray(img_array)


def save_tensor_as_image(tensor: torch.Tensor, path: str | Path) -> None:
    """Save a (C, H, W) tensor as an image file, creating parent folders as needed."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tensor_to_pil(tensor).save(path)
