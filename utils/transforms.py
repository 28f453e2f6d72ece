import torch
import torch.nn.functional as F


def _as_channels_last_batch(image: torch.Tensor) -> tuple[torch.Tensor, bool]:
    """Return image as (B, H, W, 3) and whether the input had channels first."""
    if image.ndim == 3:
        image = image.unsqueeze(0)
    channels_first = image.shape[1] == 3
    if channels_first:
        image = image.permute(0, 2, 3, 1)
    return image, channels_first


def apply_lut(
    image: torch.Tensor,
    lut_tensor: torch.Tensor,
    domain_min: list[float] | None = None,
    domain_max: list[float] | None = None,
) -> torch.Tensor:
    """
    Look every pixel up in a 3D LUT with trilinear interpolation.

    Args:
        image: (C, H, W), (H, W, C), (B, C, H, W) or (B, H, W, C) tensor; a
            leading dimension of 3 is taken to be the channel axis
        lut_tensor: LUT tensor of shape (size, size, size, 3) indexed [B][G][R]
        domain_min: Input value mapped to the first lattice node (default 0)
        domain_max: Input value mapped to the last lattice node (default 1)

    Returns:
        Graded image in the same layout and dtype as the input
    """
    if domain_min is None:
        domain_min = [0.0, 0.0, 0.0]
    if domain_max is None:
        domain_max = [1.0, 1.0, 1.0]
    assert len(domain_min) == 3, "Domain min must be a 3-element list"
    assert len(domain_max) == 3, "Domain max must be a 3-element list"

    batched = image.ndim == 4
    pixels, channels_first = _as_channels_last_batch(image)
    batch, height, width, _ = pixels.shape

    low = torch.tensor(domain_min, device=pixels.device, dtype=pixels.dtype)
    high = torch.tensor(domain_max, device=pixels.device, dtype=pixels.dtype)
    coords = ((pixels - low) / (high - low)).clamp(0, 1)

    # grid_sample reads grid[..., 0] along the last volume axis (R) and
    # grid[..., 2] along the first (B), so RGB coordinates need no reordering.
    # With align_corners the range [-1, 1] spans first to last lattice node.
    grid = (coords * 2 - 1).reshape(batch, height * width, 1, 1, 3)
    volume = lut_tensor.to(device=pixels.device, dtype=pixels.dtype)
    volume = volume.permute(3, 0, 1, 2).unsqueeze(0).expand(batch, -1, -1, -1, -1)

    sampled = F.grid_sample(
        volume, grid, mode="bilinear", padding_mode="border", align_corners=True
    )
    result = sampled.reshape(batch, 3, height, width)

    if not channels_first:
        result = result.permute(0, 2, 3, 1)
    return result if batched else result.squeeze(0)


def identity_lut(resolution: int = 33, dtype: torch.dtype = torch.float32) -> torch.Tensor:
    """
    Create identity LUT using meshgrid.
    Creates [B][G][R] spatial indexing, matching the .cube line order where red varies fastest.
    At position [b,g,r], stores RGB value [r,g,b] so every node maps to itself.
    Node i along an axis sits at i / (resolution - 1).
    """
    coords = torch.arange(resolution, dtype=dtype) / (resolution - 1)
    b, g, r = torch.meshgrid(coords, coords, coords, indexing="ij")
    return torch.stack([r, g, b], dim=-1)
