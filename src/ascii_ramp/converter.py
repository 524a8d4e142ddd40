"""Image -> text grid pipeline."""

import logging
import time
from typing import Iterable, TextIO

from .geometry import plan
from .glyphs import RAMP_DEFAULT, RAMP_INVERT, to_glyph
from .luminance import luminance_map, mean_luminance
from .pixels import PixelBuffer, open_pixels

DEFAULT_WIDTH = 120

logger = logging.getLogger(__name__)


def convert(buffer: PixelBuffer, target_width: int, ramp: str = RAMP_DEFAULT) -> list[str]:
    """
    Convert a decoded image into rows of glyphs.

    Each glyph is the ramp entry for the mean luminance of its source block.
    Returns out_height strings of out_width characters each.
    """
    t0 = time.perf_counter()
    grid = plan(buffer.width, buffer.height, target_width)
    logger.debug(
        "Planned %dx%d grid for %dx%d source (%d channel(s))",
        grid.out_width,
        grid.out_height,
        buffer.width,
        buffer.height,
        buffer.channel_count,
    )

    lum = luminance_map(buffer)
    rows = []
    for oy in range(grid.out_height):
        line = []
        for ox in range(grid.out_width):
            avg = mean_luminance(lum, grid.cell_rect(ox, oy))
            line.append(to_glyph(avg, ramp))
        rows.append("".join(line))

    logger.debug("Converted in %.3fs", time.perf_counter() - t0)
    return rows


def render(rows: Iterable[str], stream: TextIO) -> None:
    for row in rows:
        stream.write(row + "\n")


def image_to_ascii(image_path: str, width: int = DEFAULT_WIDTH, invert: bool = False) -> str:
    """Decode image_path and return its ASCII rendering as newline-joined rows."""
    ramp = RAMP_INVERT if invert else RAMP_DEFAULT
    with open_pixels(image_path) as buf:
        rows = convert(buf, width, ramp)
    return "\n".join(rows)
