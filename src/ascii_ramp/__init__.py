"""ASCII Ramp - render images as brightness-ramp ASCII art."""

__version__ = "0.1.0"

"""
Expose a lightweight lazy wrapper so `python -m ascii_ramp.cli` does not find
the cli module already imported (runpy warns about that). The core API is
imported from its submodules directly.
"""


def main(*args, **kwargs):
    from .cli import main as _m

    return _m(*args, **kwargs)


__all__ = [
    "main",
]
