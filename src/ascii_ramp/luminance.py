"""Area averaging of BT.709 luminance over source pixel blocks."""

import numpy as np

from .geometry import SampleRect
from .pixels import PixelBuffer

# ITU-R BT.709 luma weights (r, g, b)
LUMA_WEIGHTS = np.array([0.2126, 0.7152, 0.0722], dtype=np.float32)


def pixel_luminance(rgb: np.ndarray) -> np.ndarray:
    """
    rgb: ...x3 uint8
    returns ... float32 in [0,1]
    """
    c = rgb.astype(np.float32)
    wr, wg, wb = LUMA_WEIGHTS
    return (wr * c[..., 0] + wg * c[..., 1] + wb * c[..., 2]) / np.float32(255.0)


def luminance_map(buffer: PixelBuffer) -> np.ndarray:
    """Per-pixel luminance plane, height x width float32."""
    return pixel_luminance(buffer.rgb())


def mean_luminance(lum: np.ndarray, rect: SampleRect) -> float:
    if rect.is_empty:
        return 0.0
    block = lum[rect.y0 : rect.y1, rect.x0 : rect.x1]
    if block.size == 0:
        return 0.0
    avg = block.sum(dtype=np.float64) / block.size
    return float(np.float32(avg))


def average_luminance(buffer: PixelBuffer, rect: SampleRect) -> float:
    """Mean luminance of the pixels inside rect; 0.0 when rect holds none."""
    if rect.is_empty:
        return 0.0
    block = buffer.rgb()[rect.y0 : rect.y1, rect.x0 : rect.x1]
    h, w = block.shape[:2]
    return mean_luminance(pixel_luminance(block), SampleRect(0, w, 0, h))
