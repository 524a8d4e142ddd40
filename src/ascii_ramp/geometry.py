"""Output grid sizing and per-cell source rectangles."""

import math
from typing import Callable, NamedTuple

import numpy as np

# height/width ratio of a terminal character cell
CHAR_ASPECT = 0.55


class SampleRect(NamedTuple):
    """Half-open source pixel block [x0, x1) x [y0, y1)."""

    x0: int
    x1: int
    y0: int
    y1: int

    @property
    def is_empty(self) -> bool:
        return self.x1 <= self.x0 or self.y1 <= self.y0

    @property
    def area(self) -> int:
        if self.is_empty:
            return 0
        return (self.x1 - self.x0) * (self.y1 - self.y0)


class GridPlan(NamedTuple):
    out_width: int
    out_height: int
    cell_rect: Callable[[int, int], SampleRect]


def _clamp(v: int, lo: int, hi: int) -> int:
    return lo if v < lo else (hi if v > hi else v)


def round_half_away(x: float) -> int:
    """Round to nearest integer, ties away from zero (C roundf)."""
    if x < 0:
        return -math.floor(-x + 0.5)
    return math.floor(x + 0.5)


def output_height(width: int, height: int, out_width: int) -> int:
    # float32 to match terminal-cell scaling of the reference renderer exactly
    scaled = (
        np.float32(height)
        * (np.float32(out_width) / np.float32(width))
        * np.float32(CHAR_ASPECT)
    )
    return max(1, round_half_away(float(scaled)))


def _span(index: int, src: int, out: int) -> tuple[int, int]:
    lo = (index * src) // out
    hi = -((-(index + 1) * src) // out)  # ceil division
    return _clamp(lo, 0, src), _clamp(hi, 0, src)


def plan(width: int, height: int, target_width: int) -> GridPlan:
    """
    Size the output grid for a width x height source at target_width columns.

    Cell rectangles come from floor/ceil of the linear source mapping, so
    neighbouring cells may share one boundary row or column of pixels.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"source dimensions must be positive: {width}x{height}")
    if target_width <= 0:
        raise ValueError(f"target width must be positive: {target_width}")

    out_w = target_width
    out_h = output_height(width, height, out_w)

    def cell_rect(ox: int, oy: int) -> SampleRect:
        x0, x1 = _span(ox, width, out_w)
        y0, y1 = _span(oy, height, out_h)
        return SampleRect(x0, x1, y0, y1)

    return GridPlan(out_w, out_h, cell_rect)
