from __future__ import annotations

from .errors import PreconditionViolation
from .image import WHITE, Color, Image


def _rgba_bytes(color: Color) -> bytes:
    try:
        values = tuple(color)
    except TypeError as exc:
        raise PreconditionViolation(f"color must be an (r, g, b, a) tuple, got {color!r}") from exc
    if len(values) != 4 or not all(isinstance(v, int) and 0 <= v <= 0xFF for v in values):
        raise PreconditionViolation(f"color must be four 0..255 ints, got {color!r}")
    return bytes(values)


class ImageStore:
    """
    Mutable RGBA canvas the tools paint on.

    Pixels are kept interleaved (4 bytes per pixel, RGBA), row-major,
    y-down. The codec never sees this object; it works on `to_image()`
    snapshots.
    """

    def __init__(self, width: int, height: int, background: Color = WHITE) -> None:
        if width < 0 or height < 0:
            raise PreconditionViolation(f"invalid canvas size {width}x{height}")
        self._fill = _rgba_bytes(background)
        self.background = tuple(self._fill)
        self._width = width
        self._height = height
        self._data = bytearray(self._fill * (width * height))

    @classmethod
    def from_image(cls, image: Image, background: Color = WHITE) -> "ImageStore":
        store = cls(0, 0, background=background)
        store.set_image(image)
        return store

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def get_image_size(self) -> tuple[int, int]:
        return self._width, self._height

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._height

    def _index(self, x: int, y: int) -> int:
        if not self.contains(x, y):
            raise PreconditionViolation(
                f"pixel out of bounds: ({x},{y}) for size {self._width}x{self._height}"
            )
        return 4 * (y * self._width + x)

    def get_pixel(self, x: int, y: int) -> Color:
        i = self._index(x, y)
        r, g, b, a = self._data[i:i + 4]
        return (r, g, b, a)

    def set_pixel(self, x: int, y: int, color: Color) -> None:
        i = self._index(x, y)
        self._data[i:i + 4] = _rgba_bytes(color)

    def resize(self, width: int, height: int) -> None:
        """
        Change canvas size, keeping the overlapping top-left rectangle.
        Newly exposed pixels get the background color.
        """
        if width < 0 or height < 0:
            raise PreconditionViolation(f"invalid canvas size {width}x{height}")
        new = bytearray(self._fill * (width * height))
        keep_w = min(width, self._width)
        keep_h = min(height, self._height)
        for y in range(keep_h if keep_w else 0):
            src = 4 * y * self._width
            dst = 4 * y * width
            new[dst:dst + 4 * keep_w] = self._data[src:src + 4 * keep_w]
        self._width = width
        self._height = height
        self._data = new

    def set_image(self, image: Image) -> None:
        """Replace the whole canvas (size included) with `image`."""
        n = image.width * image.height
        if image.width < 0 or image.height < 0:
            raise PreconditionViolation(f"invalid image size {image.width}x{image.height}")
        for name in ("red", "green", "blue"):
            got = len(getattr(image, name))
            if got != n:
                raise PreconditionViolation(
                    f"{name} channel has {got} samples, expected {n} "
                    f"for {image.width}x{image.height}"
                )
        data = bytearray(4 * n)
        data[0::4] = image.red
        data[1::4] = image.green
        data[2::4] = image.blue
        data[3::4] = image.alpha if len(image.alpha) == n else b"\xff" * n
        self._width = image.width
        self._height = image.height
        self._data = data

    def to_image(self) -> Image:
        return Image(
            width=self._width,
            height=self._height,
            red=bytes(self._data[0::4]),
            green=bytes(self._data[1::4]),
            blue=bytes(self._data[2::4]),
            alpha=bytes(self._data[3::4]),
        )

    def to_rgba_bytes(self) -> bytes:
        return bytes(self._data)
