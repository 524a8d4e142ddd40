"""Brightness-to-glyph quantization."""

import math

import numpy as np

# Dark -> light
RAMP_DEFAULT = "@%#*+=-:. "
RAMP_INVERT = RAMP_DEFAULT[::-1]

INVERT_TOKENS = ("inv", "invert")


def select_ramp(mode: str | None) -> str:
    if mode in INVERT_TOKENS:
        return RAMP_INVERT
    return RAMP_DEFAULT


def to_glyph(luminance: float, ramp: str) -> str:
    """Map luminance in [0,1] (0 dark, 1 light) onto the nearest ramp glyph."""
    if not ramp:
        raise ValueError("ramp must not be empty")
    lum = float(luminance)
    if math.isnan(lum):
        lum = 0.0
    lum = min(max(lum, 0.0), 1.0)

    last = len(ramp) - 1
    idx = math.floor(np.float32(lum) * np.float32(last) + np.float32(0.5))
    idx = min(max(idx, 0), last)
    return ramp[idx]
