from __future__ import annotations

import argparse
import sys
import unittest
from pathlib import Path
from typing import List

from . import __version__
from .core import (
    DrawOptions,
    draw_dot,
    draw_line,
    export_picture,
    import_picture,
    new_canvas,
    read_bmp,
    resize_file,
    write_bmp,
)
from .errors import FormatError, PixelCanvasError
from .formatting import describe_image, parse_color
from .image import BLACK, WHITE


def _color_arg(value: str):
    try:
        return parse_color(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _size_arg(value: str) -> int:
    try:
        n = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid size: {value!r}") from exc
    if n < 0:
        raise argparse.ArgumentTypeError(f"size must be >= 0, got {n}")
    return n


def _draw_options_from_args(ns: argparse.Namespace) -> DrawOptions:
    return DrawOptions(
        color=getattr(ns, "color", None) or BLACK,
        background=getattr(ns, "background", None) or WHITE,
        verbose=ns.verbose,
    )


def _add_common_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument("--verbose", action="store_true", help="verbose logging")


def _add_output_flag(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "-o", "--output", type=Path, help="output .bmp (defaults to overwriting the input)"
    )


def _add_color_flag(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--color", type=_color_arg, default=BLACK, metavar="#RRGGBB", help="paint color"
    )


def _add_background_flag(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--background",
        type=_color_arg,
        default=WHITE,
        metavar="#RRGGBB",
        help="fill color for new pixels (default white)",
    )


def run_selftest() -> int:
    loader = unittest.TestLoader()
    suite = loader.discover(start_dir=str(Path(__file__).parent.parent.parent / "tests"))
    runner = unittest.TextTestRunner(verbosity=2)
    res = runner.run(suite)
    return 0 if res.wasSuccessful() else 1


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="pixelcanvas",
        description="Paint on 24-bpp BMP pixel art from the command line.",
    )
    ap.add_argument("--selftest", action="store_true", help="run the internal test suite and exit")
    ap.add_argument("--version", action="version", version=f"pixelcanvas {__version__}")

    sub = ap.add_subparsers(dest="cmd", required=False)

    p_new = sub.add_parser("new", help="create a blank canvas")
    p_new.add_argument("width", type=_size_arg)
    p_new.add_argument("height", type=_size_arg)
    p_new.add_argument("output", type=Path, metavar="out.bmp")
    _add_background_flag(p_new)
    _add_common_flags(p_new)

    p_info = sub.add_parser("info", help="validate a BMP and describe it")
    p_info.add_argument("input", type=Path, metavar="input.bmp")
    _add_common_flags(p_info)

    p_dot = sub.add_parser("dot", help="paint a single pixel")
    p_dot.add_argument("input", type=Path, metavar="input.bmp")
    p_dot.add_argument("x", type=float)
    p_dot.add_argument("y", type=float)
    _add_output_flag(p_dot)
    _add_color_flag(p_dot)
    _add_common_flags(p_dot)

    p_line = sub.add_parser("line", help="paint a one-pixel line between two points")
    p_line.add_argument("input", type=Path, metavar="input.bmp")
    p_line.add_argument("x0", type=float)
    p_line.add_argument("y0", type=float)
    p_line.add_argument("x1", type=float)
    p_line.add_argument("y1", type=float)
    _add_output_flag(p_line)
    _add_color_flag(p_line)
    _add_common_flags(p_line)

    p_resize = sub.add_parser("resize", help="grow or shrink the canvas, keeping painted pixels")
    p_resize.add_argument("input", type=Path, metavar="input.bmp")
    p_resize.add_argument("width", type=_size_arg)
    p_resize.add_argument("height", type=_size_arg)
    _add_output_flag(p_resize)
    _add_background_flag(p_resize)
    _add_common_flags(p_resize)

    p_export = sub.add_parser("export", help="convert a BMP to another format (via Pillow)")
    p_export.add_argument("input", type=Path, metavar="input.bmp")
    p_export.add_argument("output", type=Path, metavar="out.png")
    _add_common_flags(p_export)

    p_import = sub.add_parser("import", help="convert any Pillow-readable picture to BMP")
    p_import.add_argument("input", type=Path, metavar="picture")
    p_import.add_argument("output", type=Path, metavar="out.bmp")
    _add_common_flags(p_import)

    return ap


def _dispatch(ns: argparse.Namespace) -> None:
    opts = _draw_options_from_args(ns)

    if ns.cmd == "new":
        new_canvas(ns.output, ns.width, ns.height, opts)
    elif ns.cmd == "info":
        image = read_bmp(ns.input)
        print(f"{ns.input.name}: {describe_image(image)}")
    elif ns.cmd == "dot":
        draw_dot(ns.input, ns.output or ns.input, ns.x, ns.y, opts)
    elif ns.cmd == "line":
        draw_line(ns.input, ns.output or ns.input, (ns.x0, ns.y0), (ns.x1, ns.y1), opts)
    elif ns.cmd == "resize":
        resize_file(ns.input, ns.output or ns.input, ns.width, ns.height, opts)
    elif ns.cmd == "export":
        export_picture(ns.output, read_bmp(ns.input))
        if opts.verbose:
            print(f"Wrote {ns.output}")
    elif ns.cmd == "import":
        size = write_bmp(ns.output, import_picture(ns.input))
        if opts.verbose:
            print(f"Wrote {ns.output} ({size} bytes)")


def main(argv: List[str] | None = None) -> None:
    argv = list(sys.argv[1:] if argv is None else argv)
    ap = build_parser()
    ns = ap.parse_args(argv)

    if ns.selftest and ns.cmd is None:
        sys.exit(run_selftest())

    if ns.cmd is None:
        ap.print_help()
        sys.exit(1)

    try:
        _dispatch(ns)
    except FormatError as e:
        print(f"{e.kind}: {e}", file=sys.stderr)
        sys.exit(2)
    except PixelCanvasError as e:
        print(str(e), file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
