from __future__ import annotations

import math
from typing import Dict, List, Optional, Type

from .image import BLACK, Color, PixelCoord
from .raster import rasterize
from .store import ImageStore


class Tool:
    """
    Mouse-driven painting tool.

    Coordinates are image-space floats (already mapped from the screen);
    each handler returns the pixels it painted.
    """

    def __init__(self, store: ImageStore, color: Color = BLACK) -> None:
        self.store = store
        self.color = color

    def on_mouse_down(self, image_x: float, image_y: float) -> List[PixelCoord]:
        return []

    def on_mouse_up(self, image_x: float, image_y: float) -> List[PixelCoord]:
        return []

    def _paint(self, pixels: List[PixelCoord]) -> List[PixelCoord]:
        painted = []
        for p in pixels:
            if self.store.contains(p.x, p.y):
                self.store.set_pixel(p.x, p.y, self.color)
                painted.append(p)
        return painted


def _floor_coord(image_x: float, image_y: float) -> PixelCoord:
    return PixelCoord(math.floor(image_x), math.floor(image_y))


class DotTool(Tool):
    def on_mouse_down(self, image_x: float, image_y: float) -> List[PixelCoord]:
        w, h = self.store.get_image_size()
        if not (0 <= image_x < w and 0 <= image_y < h):
            return []
        return self._paint([_floor_coord(image_x, image_y)])


class LineTool(Tool):
    """Press sets the start pixel; release draws the line to it."""

    def __init__(self, store: ImageStore, color: Color = BLACK) -> None:
        super().__init__(store, color)
        self._start: Optional[PixelCoord] = None

    def on_mouse_down(self, image_x: float, image_y: float) -> List[PixelCoord]:
        self._start = _floor_coord(image_x, image_y)
        return []

    def on_mouse_up(self, image_x: float, image_y: float) -> List[PixelCoord]:
        if self._start is None:
            return []
        start, self._start = self._start, None
        return self._paint(rasterize(start, _floor_coord(image_x, image_y)))


TOOLS: Dict[str, Type[Tool]] = {
    "dot": DotTool,
    "line": LineTool,
}


def make_tool(key: str, store: ImageStore, color: Color = BLACK) -> Tool:
    try:
        cls = TOOLS[key]
    except KeyError:
        raise ValueError(f"unknown tool: {key!r}") from None
    return cls(store, color)
