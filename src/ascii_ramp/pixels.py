"""Decoded pixel buffers and the Pillow-backed decoder that produces them."""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)

# Pillow modes that collapse to a single 8-bit gray channel.
_GRAY_MODES = {"1", "L", "LA", "La"}

# High bit depth gray, scaled down rather than clipped at 255.
_WIDE_GRAY_MODES = {"I", "I;16", "I;16B", "I;16L", "I;16N", "F"}

# Pillow signals corrupt data with SyntaxError as well as OSError
_DECODE_ERRORS = (OSError, SyntaxError, ValueError, Image.DecompressionBombError)


class DecodeError(RuntimeError):
    """The image file could not be opened or decoded."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        self.reason = reason
        msg = f"Failed to load image '{path}'"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


@dataclass(frozen=True)
class PixelBuffer:
    """
    Row-major, top-to-bottom 8-bit pixels.

    channel_count < 3 is grayscale (first byte of each pixel is r=g=b);
    otherwise the first three channels are r, g, b and any 4th is ignored.
    """

    width: int
    height: int
    channel_count: int
    data: bytes

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"image dimensions must be positive, got {self.width}x{self.height}"
            )
        if self.channel_count <= 0:
            raise ValueError(f"channel count must be positive: {self.channel_count}")
        expected = self.width * self.height * self.channel_count
        if len(self.data) != expected:
            raise ValueError(
                f"pixel data has {len(self.data)} bytes, expected {expected}"
            )

    @property
    def is_grayscale(self) -> bool:
        return self.channel_count < 3

    def array(self) -> np.ndarray:
        # frombuffer over bytes is read-only, the caller's data is never touched
        return np.frombuffer(self.data, dtype=np.uint8).reshape(
            self.height, self.width, self.channel_count
        )

    def rgb(self) -> np.ndarray:
        arr = self.array()
        if self.is_grayscale:
            return np.repeat(arr[..., :1], 3, axis=2)
        return arr[..., :3]

    @classmethod
    def from_image(cls, img: Image.Image) -> "PixelBuffer":
        if img.mode in _WIDE_GRAY_MODES:
            gray = _narrow_gray(img)
            h, w = gray.shape
            return cls(width=w, height=h, channel_count=1, data=gray.tobytes())
        img = _normalize_mode(img)
        w, h = img.size
        return cls(
            width=w,
            height=h,
            channel_count=len(img.getbands()),
            data=img.tobytes(),
        )


def _narrow_gray(img: Image.Image) -> np.ndarray:
    """
    img: I;16*, I or F mode
    returns HxW uint8
    """
    arr = np.asarray(img)
    if img.mode == "F":
        # float samples are taken as [0,1]
        arr = np.clip(np.nan_to_num(arr), 0.0, 1.0) * 255.0 + 0.5
        return arr.astype(np.uint8)
    # 16-bit samples keep their high byte; "I" carries 16-bit data too
    arr = np.clip(arr.astype(np.int64), 0, 65535)
    return (arr >> 8).astype(np.uint8)


def _normalize_mode(img: Image.Image) -> Image.Image:
    mode = img.mode
    if mode in ("L", "RGB", "RGBA"):
        return img
    if mode in _GRAY_MODES:
        return img.convert("L")
    if mode in ("P", "PA"):
        target = "RGBA" if mode == "PA" or "transparency" in img.info else "RGB"
        return img.convert(target)
    return img.convert("RGB")


@contextmanager
def open_pixels(path: str) -> Iterator[PixelBuffer]:
    """
    Decode `path` with Pillow and yield its PixelBuffer.

    The Pillow image is closed on every exit path. Any open/decode failure
    is raised as DecodeError.
    """
    try:
        img = Image.open(path)
    except _DECODE_ERRORS as e:
        raise DecodeError(path, str(e)) from e

    try:
        try:
            img.load()
            logger.debug(
                "Decoded %s: format=%s mode=%s size=%dx%d",
                path,
                img.format,
                img.mode,
                img.width,
                img.height,
            )
            buf = PixelBuffer.from_image(img)
        except _DECODE_ERRORS as e:
            raise DecodeError(path, str(e)) from e
        yield buf
    finally:
        img.close()
