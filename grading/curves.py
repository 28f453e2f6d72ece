import torch

from presets.settings import CurvePoint
from utils.constants import CURVE_MAX


def sorted_curve(points: list[CurvePoint]) -> list[CurvePoint]:
    return sorted(points, key=lambda point: point[0])


def apply_tone_curve(values: torch.Tensor, points: list[CurvePoint]) -> torch.Tensor:
    """
    Remap values in [0, 1] through a piecewise-linear curve defined in [0, 255].

    Points are sorted by input before use. Inputs below the first point or
    above the last one take that endpoint's output. Where segments overlap
    (repeated inputs) the earliest segment wins.
    """
    if len(points) < 2:
        return values

    curve = sorted_curve(points)
    v = values * CURVE_MAX

    result = torch.where(
        v < curve[0][0],
        torch.full_like(v, curve[0][1]),
        torch.full_like(v, curve[-1][1]),
    )

    # Walk segments back to front so the first matching segment is written last
    segments = list(zip(curve[:-1], curve[1:]))
    for (x1, y1), (x2, y2) in reversed(segments):
        inside = (v >= x1) & (v <= x2)
        if x2 > x1:
            interpolated = y1 + (v - x1) / (x2 - x1) * (y2 - y1)
        else:
            interpolated = torch.full_like(v, y1)
        result = torch.where(inside, interpolated, result)

    return result / CURVE_MAX
