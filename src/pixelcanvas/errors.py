from __future__ import annotations


class PixelCanvasError(Exception):
    """User-facing one-line errors."""


class PreconditionViolation(PixelCanvasError, ValueError):
    """Caller broke a contract (bad channel sizes, out-of-bounds pixel, ...)."""


class FormatError(PixelCanvasError, ValueError):
    """Raised by `bmp.decode` for input it refuses to parse."""

    kind = "FormatError"


class EmptyFile(FormatError):
    kind = "EmptyFile"


class TooShort(FormatError):
    kind = "TooShort"


class BadSignature(FormatError):
    kind = "BadSignature"


class SizeMismatch(FormatError):
    kind = "SizeMismatch"


class UnsupportedOffset(FormatError):
    kind = "UnsupportedOffset"


class UnsupportedBitDepth(FormatError):
    kind = "UnsupportedBitDepth"


class UnsupportedCompression(FormatError):
    kind = "UnsupportedCompression"


class NegativeDimensions(FormatError):
    kind = "NegativeDimensions"


class ImageDataSizeMismatch(FormatError):
    kind = "ImageDataSizeMismatch"
