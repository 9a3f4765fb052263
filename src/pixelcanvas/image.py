from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Tuple


Color = Tuple[int, int, int, int]  # (r, g, b, a), 0..255 each

WHITE: Color = (0xFF, 0xFF, 0xFF, 0xFF)
BLACK: Color = (0x00, 0x00, 0x00, 0xFF)
TRANSPARENT: Color = (0x00, 0x00, 0x00, 0x00)


class PixelCoord(NamedTuple):
    """Integer pixel position; origin top-left, y grows downwards."""

    x: int
    y: int


@dataclass(frozen=True)
class Image:
    """
    Raster image as four byte planes.

    Every channel holds exactly width*height samples, row-major,
    with y = 0 as the top row.
    """

    width: int
    height: int
    red: bytes
    green: bytes
    blue: bytes
    alpha: bytes

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def pixel(self, x: int, y: int) -> Color:
        i = y * self.width + x
        return (self.red[i], self.green[i], self.blue[i], self.alpha[i])


def pack_rgba(color: Color) -> int:
    """
    Little-endian 32-bit RGBA: red in the low byte, alpha in the high byte.
    """
    r, g, b, a = color
    return (r & 0xFF) | ((g & 0xFF) << 8) | ((b & 0xFF) << 16) | ((a & 0xFF) << 24)


def unpack_rgba(value: int) -> Color:
    return (
        value & 0xFF,
        (value >> 8) & 0xFF,
        (value >> 16) & 0xFF,
        (value >> 24) & 0xFF,
    )
