#!/usr/bin/env python3
"""Command-line entry point: ascii-ramp <image> [width] [mode]."""

import logging
import re
import sys
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .converter import DEFAULT_WIDTH, convert, render
from .glyphs import select_ramp
from .pixels import DecodeError, open_pixels

PROG = "ascii-ramp"

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_DECODE = 2

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


# -----------------------------
# Options
# -----------------------------

@dataclass
class Options:
    image_path: Optional[str] = None
    width: int = DEFAULT_WIDTH
    mode: Optional[str] = None

    debug: bool = False
    log_path: Optional[str] = None


class UsageError(Exception):
    pass


def print_usage(file=sys.stderr):
    print(
        f"Usage: {PROG} <image> [width] [inv] [--debug] [--log FILE]\n"
        "  image : path to PNG/JPEG/BMP/GIF/TIFF/WebP etc\n"
        f"  width : desired output width in characters (default {DEFAULT_WIDTH})\n"
        "  inv   : if 'inv' or 'invert', invert ASCII brightness mapping\n",
        file=file,
    )


LOG = logging.getLogger("ascii_ramp")
def setup_logging(debug: bool, log_path: str | None = None) -> None:
    level = logging.DEBUG if debug else logging.WARNING
    # the file handler records DEBUG regardless of console verbosity
    LOG.setLevel(logging.DEBUG if log_path else level)

    fmt = logging.Formatter("%(levelname)s: %(message)s")

    handlers: list[logging.Handler] = []

    sh = logging.StreamHandler(sys.stderr)
    sh.setLevel(level)
    sh.setFormatter(fmt)
    handlers.append(sh)

    if log_path:
        fh = logging.FileHandler(log_path, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter("%(asctime)s %(levelname)s: %(message)s"))
        handlers.append(fh)

    for h in LOG.handlers:
        h.close()
    LOG.handlers[:] = handlers
    LOG.propagate = False


def parse_width(value: str | None) -> int:
    """atoi-style width: leading integer or the default when <= 0/unparsable."""
    if value is None:
        return DEFAULT_WIDTH
    m = _LEADING_INT.match(value)
    if not m:
        return DEFAULT_WIDTH
    width = int(m.group(1))
    return width if width > 0 else DEFAULT_WIDTH


def parse_args(argv: Sequence[str]) -> Options:
    """Parse arguments (without the program name)."""
    opt = Options()
    positional: List[str] = []

    i = 0
    while i < len(argv):
        a = argv[i]
        if a == "--debug":
            opt.debug = True
            i += 1
        elif a == "--log":
            if i + 1 >= len(argv):
                raise UsageError("--log requires a value")
            opt.log_path = argv[i + 1]
            i += 2
        else:
            positional.append(a)
            i += 1

    if not positional:
        raise UsageError("missing image path")

    opt.image_path = positional[0]
    if len(positional) >= 2:
        opt.width = parse_width(positional[1])
    if len(positional) >= 3:
        opt.mode = positional[2]
    return opt


# -----------------------------
# main
# -----------------------------

def main(argv: Optional[Sequence[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    argv = list(argv)

    if "-h" in argv or "--help" in argv:
        print_usage(file=sys.stdout)
        return EXIT_OK

    try:
        opt = parse_args(argv)
    except UsageError as e:
        print(f"Error: {e}", file=sys.stderr)
        print_usage(file=sys.stderr)
        return EXIT_USAGE

    try:
        setup_logging(opt.debug, opt.log_path)
    except OSError as e:
        print(f"Error: cannot open log file '{opt.log_path}' ({e})", file=sys.stderr)
        return EXIT_USAGE
    LOG.debug("Args: image=%s width=%d mode=%s", opt.image_path, opt.width, opt.mode)

    ramp = select_ramp(opt.mode)
    try:
        with open_pixels(opt.image_path) as buf:
            rows = convert(buf, opt.width, ramp)
    except DecodeError as e:
        LOG.debug("Decode failure", exc_info=True)
        print(str(e), file=sys.stderr)
        return EXIT_DECODE

    render(rows, sys.stdout)
    sys.stdout.flush()
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
