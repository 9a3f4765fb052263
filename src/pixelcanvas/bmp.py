from __future__ import annotations

import struct
from typing import Optional

from .errors import (
    BadSignature,
    EmptyFile,
    ImageDataSizeMismatch,
    NegativeDimensions,
    PreconditionViolation,
    SizeMismatch,
    TooShort,
    UnsupportedBitDepth,
    UnsupportedCompression,
    UnsupportedOffset,
)
from .image import Image


HEADER_SIZE = 0x36  # 14-byte file header + 40-byte BITMAPINFOHEADER
DIB_HEADER_SIZE = 0x28
BITS_PER_PIXEL = 24
BYTES_PER_PIXEL = BITS_PER_PIXEL // 8
BI_RGB = 0
SIGNATURE = b"BM"


def row_stride(width: int) -> int:
    """Bytes per stored row, padded up to a multiple of 4."""
    return 4 * ((BYTES_PER_PIXEL * width + 3) // 4)


def image_data_size(width: int, height: int) -> int:
    return row_stride(width) * height


def _write_le(buf: bytearray, value: int, offset: int, num_bytes: int) -> None:
    for i in range(offset, offset + num_bytes):
        buf[i] = value & 0xFF
        value >>= 8


def create(
    width: int = 0,
    height: int = 0,
    red: Optional[bytes] = None,
    green: Optional[bytes] = None,
    blue: Optional[bytes] = None,
    alpha: Optional[bytes] = None,
) -> Image:
    """
    Build an Image with sensible defaults.

    Missing dimensions are 0; missing channels are black (all zero).
    Given channels are copied, so the caller keeps ownership of its buffers.
    """
    width = width or 0
    height = height or 0
    n = width * height

    def _plane(given: Optional[bytes]) -> bytes:
        return bytes(n) if given is None else bytes(given)

    return Image(
        width=width,
        height=height,
        red=_plane(red),
        green=_plane(green),
        blue=_plane(blue),
        alpha=_plane(alpha),
    )


def _check_encodable(image: Image) -> None:
    if image.width < 0 or image.height < 0:
        raise PreconditionViolation(
            f"image dimensions must be >= 0, got {image.width}x{image.height}"
        )
    n = image.width * image.height
    for name in ("red", "green", "blue"):
        got = len(getattr(image, name))
        if got != n:
            raise PreconditionViolation(
                f"{name} channel has {got} samples, expected {n} "
                f"for {image.width}x{image.height}"
            )


def encode(image: Image) -> bytes:
    """
    Write `image` as an uncompressed 24-bpp BMP.

    Rows are stored bottom-up as BGR triples; alpha is dropped. Padding
    bytes stay zero because the buffer starts zeroed.
    """
    _check_encodable(image)

    width, height = image.width, image.height
    stride = row_stride(width)
    out = bytearray(HEADER_SIZE + stride * height)

    # File header
    out[0x00:0x02] = SIGNATURE
    _write_le(out, len(out), 0x02, 4)
    _write_le(out, HEADER_SIZE, 0x0A, 4)

    # BITMAPINFOHEADER; fields past 0x22 stay zero
    _write_le(out, DIB_HEADER_SIZE, 0x0E, 4)
    _write_le(out, width, 0x12, 4)
    _write_le(out, height, 0x16, 4)
    _write_le(out, 1, 0x1A, 2)
    _write_le(out, BITS_PER_PIXEL, 0x1C, 2)
    _write_le(out, BI_RGB, 0x1E, 4)

    if width == 0 or height == 0:
        return bytes(out)

    for y in range(height):
        y_flipped = height - 1 - y
        start = HEADER_SIZE + stride * y_flipped
        end = start + BYTES_PER_PIXEL * width
        src = slice(y * width, (y + 1) * width)
        out[start:end:3] = image.blue[src]
        out[start + 1:end:3] = image.green[src]
        out[start + 2:end:3] = image.red[src]

    return bytes(out)


def _verify(data: bytes) -> tuple[int, int, int]:
    """
    Run every structural check; return (width, height, pixel offset).
    """
    size = len(data)
    if size == 0:
        raise EmptyFile("cannot read an empty BMP file")
    if size < HEADER_SIZE:
        raise TooShort(
            f"malformed BMP: {size} bytes cannot fit the combined "
            f"{HEADER_SIZE}-byte header"
        )
    if data[0:2] != SIGNATURE:
        raise BadSignature("bad signature: file does not start with 'BM'")

    stated_size = struct.unpack_from("<I", data, 0x02)[0]
    if stated_size != size:
        raise SizeMismatch(
            f"stated size mismatch: header says {stated_size} bytes, file has {size}"
        )

    offset = struct.unpack_from("<I", data, 0x0A)[0]
    if offset < HEADER_SIZE:
        raise UnsupportedOffset(
            f"pixel data offset 0x{offset:X} overlaps the header "
            f"(must be >= 0x{HEADER_SIZE:X})"
        )

    bpp = struct.unpack_from("<H", data, 0x1C)[0]
    if bpp != BITS_PER_PIXEL:
        raise UnsupportedBitDepth(f"unsupported bpp: {bpp} (only 24 is supported)")

    compression = struct.unpack_from("<I", data, 0x1E)[0]
    if compression != BI_RGB:
        raise UnsupportedCompression(
            f"unsupported compression: {compression} (only BI_RGB is supported)"
        )

    width, height = struct.unpack_from("<ii", data, 0x12)
    if width < 0 or height < 0:
        raise NegativeDimensions(
            f"negative dimensions are not supported: {width}x{height}"
        )

    stated_data_size = size - offset
    expected_data_size = image_data_size(width, height)
    if stated_data_size != expected_data_size:
        raise ImageDataSizeMismatch(
            f"image data size inconsistent with declared dimensions: "
            f"{width}x{height} needs {expected_data_size} bytes, "
            f"found {stated_data_size}"
        )
    return width, height, offset


def decode(data: bytes) -> Image:
    """
    Parse a 24-bpp BI_RGB BMP into a fresh Image.

    The whole file is verified first; any problem raises a FormatError
    subclass and nothing is returned. Alpha comes back fully opaque.
    """
    data = bytes(data)
    width, height, offset = _verify(data)

    n = width * height
    if n == 0:
        # no rows to walk; a zero-width image may still declare a huge height
        return Image(width=width, height=height, red=b"", green=b"", blue=b"", alpha=b"")

    stride = row_stride(width)
    red = bytearray(n)
    green = bytearray(n)
    blue = bytearray(n)

    for r in range(height):
        y = height - 1 - r
        start = offset + stride * r
        end = start + BYTES_PER_PIXEL * width
        dst = slice(y * width, (y + 1) * width)
        blue[dst] = data[start:end:3]
        green[dst] = data[start + 1:end:3]
        red[dst] = data[start + 2:end:3]

    return Image(
        width=width,
        height=height,
        red=bytes(red),
        green=bytes(green),
        blue=bytes(blue),
        alpha=b"\xff" * n,
    )
