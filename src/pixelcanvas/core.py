from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

from PIL import Image as PILImage
from PIL import UnidentifiedImageError

from .bmp import decode, encode
from .errors import PixelCanvasError
from .image import BLACK, WHITE, Color, Image, PixelCoord
from .store import ImageStore
from .tools import make_tool


@dataclass(frozen=True)
class DrawOptions:
    color: Color = BLACK
    background: Color = WHITE
    verbose: bool = False


def read_bmp(path: Path) -> Image:
    if not path.exists():
        raise PixelCanvasError(f"File not found: {path}")
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise PixelCanvasError(f"Cannot read {path}: {exc.strerror or exc}") from exc
    return decode(data)


def write_bytes(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


def write_bmp(path: Path, image: Image) -> int:
    data = encode(image)
    write_bytes(path, data)
    return len(data)


def to_pil(image: Image) -> PILImage.Image:
    store = ImageStore.from_image(image)
    return PILImage.frombytes("RGBA", image.size, store.to_rgba_bytes())


def from_pil(img: PILImage.Image) -> Image:
    rgba = img.convert("RGBA")
    w, h = rgba.size
    data = rgba.tobytes()
    return Image(
        width=w,
        height=h,
        red=data[0::4],
        green=data[1::4],
        blue=data[2::4],
        alpha=data[3::4],
    )


def import_picture(path: Path) -> Image:
    """Load any format Pillow understands (PNG, GIF, ...) as an Image."""
    if not path.exists():
        raise PixelCanvasError(f"File not found: {path}")
    try:
        with PILImage.open(path) as img:
            return from_pil(img)
    except UnidentifiedImageError as exc:
        raise PixelCanvasError(f"Not an image: {path}") from exc
    except OSError as exc:
        raise PixelCanvasError(f"Cannot read {path}: {exc}") from exc


def export_picture(path: Path, image: Image) -> None:
    """
    Save through Pillow; the format follows the file extension.

    .bmp targets go through our own encoder so the result stays 24-bpp
    and readable by `read_bmp`.
    """
    if path.suffix.lower() == ".bmp":
        write_bmp(path, image)
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        to_pil(image).save(path)
    except (KeyError, ValueError, OSError) as exc:
        raise PixelCanvasError(f"Cannot export to {path.name}: {exc}") from exc


def _report(opts: DrawOptions, out_path: Path, size: int, what: str) -> None:
    if opts.verbose:
        print(f"Wrote {out_path} ({size} bytes, {what})")


def new_canvas(out_path: Path, width: int, height: int, opts: DrawOptions) -> Image:
    if width < 0 or height < 0:
        raise PixelCanvasError(f"Invalid size: {width}x{height}")
    image = ImageStore(width, height, background=opts.background).to_image()
    size = write_bmp(out_path, image)
    _report(opts, out_path, size, f"blank {width}x{height}")
    return image


def _load_store(input_path: Path, opts: DrawOptions) -> ImageStore:
    return ImageStore.from_image(read_bmp(input_path), background=opts.background)


def _apply_stroke(
    tool_key: str,
    input_path: Path,
    out_path: Path,
    down: Tuple[float, float],
    up: Tuple[float, float],
    opts: DrawOptions,
) -> List[PixelCoord]:
    store = _load_store(input_path, opts)
    tool = make_tool(tool_key, store, opts.color)
    painted = tool.on_mouse_down(*down) + tool.on_mouse_up(*up)
    size = write_bmp(out_path, store.to_image())
    _report(opts, out_path, size, f"{tool_key}: {len(painted)} px painted")
    return painted


def draw_dot(
    input_path: Path, out_path: Path, x: float, y: float, opts: DrawOptions
) -> List[PixelCoord]:
    return _apply_stroke("dot", input_path, out_path, (x, y), (x, y), opts)


def draw_line(
    input_path: Path,
    out_path: Path,
    start: Tuple[float, float],
    end: Tuple[float, float],
    opts: DrawOptions,
) -> List[PixelCoord]:
    return _apply_stroke("line", input_path, out_path, start, end, opts)


def resize_file(
    input_path: Path, out_path: Path, width: int, height: int, opts: DrawOptions
) -> Image:
    if width < 0 or height < 0:
        raise PixelCanvasError(f"Invalid size: {width}x{height}")
    store = _load_store(input_path, opts)
    store.resize(width, height)
    image = store.to_image()
    size = write_bmp(out_path, image)
    _report(opts, out_path, size, f"resized to {width}x{height}")
    return image
