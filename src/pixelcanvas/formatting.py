from __future__ import annotations

import re

from .image import Color, Image


_HEX_COLOR = re.compile(r"^#([0-9a-f]{6})([0-9a-f]{2})?$", re.IGNORECASE)


def parse_color(text: str) -> Color:
    """
    Parse '#rrggbb' or '#rrggbbaa' (any case). Alpha defaults to 0xFF.
    """
    m = _HEX_COLOR.match(text.strip())
    if not m:
        raise ValueError(f"invalid color {text!r}; expected #rrggbb or #rrggbbaa")
    rgb, alpha = m.group(1), m.group(2)
    return (
        int(rgb[0:2], 16),
        int(rgb[2:4], 16),
        int(rgb[4:6], 16),
        int(alpha, 16) if alpha else 0xFF,
    )


def format_color(color: Color) -> str:
    r, g, b, a = color
    if a == 0xFF:
        return f"#{r:02x}{g:02x}{b:02x}"
    return f"#{r:02x}{g:02x}{b:02x}{a:02x}"


def describe_image(image: Image) -> str:
    w, h = image.size
    if w == 0 or h == 0:
        return f"{w}x{h} px (empty)"
    colors = set(zip(image.red, image.green, image.blue))
    return f"{w}x{h} px, {len(colors)} distinct colors"
