from __future__ import annotations

__version__ = "0.3.0"

from .bmp import create, decode, encode
from .errors import FormatError, PixelCanvasError, PreconditionViolation
from .image import Image, PixelCoord
from .raster import rasterize

__all__ = [
    "__version__",
    "Image",
    "PixelCoord",
    "create",
    "decode",
    "encode",
    "rasterize",
    "FormatError",
    "PixelCanvasError",
    "PreconditionViolation",
]
