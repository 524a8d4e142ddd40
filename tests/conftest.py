"""Shared fixtures."""

import logging

import pytest
from PIL import Image


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo CLI logging setup so handlers never outlive a test's capture."""
    yield
    log = logging.getLogger("ascii_ramp")
    for h in log.handlers:
        h.close()
    log.handlers[:] = []
    log.setLevel(logging.NOTSET)
    log.propagate = True


@pytest.fixture
def make_image(tmp_path):
    """Write a solid or pixel-listed image to disk and return its path."""

    def _make(size, mode="RGB", color=0, pixels=None, name="img.png"):
        img = Image.new(mode, size, color=color)
        if pixels is not None:
            img.putdata(pixels)
        path = tmp_path / name
        img.save(path)
        return str(path)

    return _make
