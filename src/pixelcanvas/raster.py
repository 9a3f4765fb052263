from __future__ import annotations

import math
from typing import List, Sequence, Tuple

from .errors import PreconditionViolation
from .image import PixelCoord


def _sign(v: float) -> int:
    return (v > 0) - (v < 0)


def _as_coord(p: Sequence[int], name: str) -> PixelCoord:
    try:
        x, y = p
    except (TypeError, ValueError) as exc:
        raise PreconditionViolation(f"{name} must be an (x, y) pair, got {p!r}") from exc
    for v in (x, y):
        if isinstance(v, bool) or not isinstance(v, int):
            raise PreconditionViolation(f"{name} must have integer coordinates, got {p!r}")
    return PixelCoord(x, y)


def _straight(start: PixelCoord, end: PixelCoord) -> List[PixelCoord]:
    if start.y == end.y:
        step = _sign(end.x - start.x)
        return [PixelCoord(x, start.y) for x in range(start.x, end.x + step, step)]
    step = _sign(end.y - start.y)
    return [PixelCoord(start.x, y) for y in range(start.y, end.y + step, step)]


def _representative_corners(dx: int, dy: int) -> Tuple[Tuple[int, int], Tuple[int, int]]:
    """
    Pick the pixel-rectangle corners the line runs between, relative to the
    start pixel's top-left corner. Returns (rep_start, rep_end).
    """
    if dx >= 0 and dy > 0:
        return (0, 0), (dx + 1, dy + 1)
    if dx < 0 and dy >= 0:
        return (1, 0), (dx, dy + 1)
    if dx > 0 and dy <= 0:
        return (0, 1), (dx + 1, dy)
    if dx <= 0 and dy < 0:
        return (1, 1), (dx, dy)
    raise AssertionError(f"unhandled direction ({dx}, {dy})")


def _shallow(start: Tuple[int, int], end: Tuple[int, int]) -> List[PixelCoord]:
    # y = m*x + b, one pixel per column
    sx, sy = start
    ex, ey = end
    m = (ey - sy) / (ex - sx)
    b = sy - m * sx
    step = _sign(ex - sx)

    out: List[PixelCoord] = []
    for xi in range(sx, ex, step):
        y0 = m * xi + b
        y1 = m * (xi + 1) + b
        fy0 = math.floor(y0)
        fy1 = math.floor(y1)
        if fy0 == fy1:
            out.append(PixelCoord(xi, fy0))
            continue
        # Crosses one row boundary inside this column; keep the row the
        # line integral favours.
        offset = max(fy0, fy1)
        area = (m / 2) * ((xi + 1) ** 2 - xi ** 2) + (b - offset)
        out.append(PixelCoord(xi, max(fy0, fy1) if area > 0 else min(fy0, fy1)))
    return out


def _steep(start: Tuple[int, int], end: Tuple[int, int]) -> List[PixelCoord]:
    # x = m*y + b, one pixel per row
    sx, sy = start
    ex, ey = end
    m = (ex - sx) / (ey - sy)
    b = sx - m * sy
    step = _sign(ey - sy)

    out: List[PixelCoord] = []
    for yi in range(sy, ey, step):
        x0 = m * yi + b
        x1 = m * (yi + 1) + b
        fx0 = math.floor(x0)
        fx1 = math.floor(x1)
        if fx0 == fx1:
            out.append(PixelCoord(fx0, yi))
            continue
        offset = min(fx0, fx1)
        area = (m / 2) * ((yi + 1) ** 2 - yi ** 2) + (b - offset)
        out.append(PixelCoord(max(fx0, fx1) if area > 0 else min(fx0, fx1), yi))
    return out


def rasterize(start: Sequence[int], end: Sequence[int]) -> List[PixelCoord]:
    """
    Pixels a one-pixel-wide line from `start` to `end` covers.

    Horizontal and vertical lines include both endpoints. Diagonal lines
    run between representative corners of the end pixels and step along
    the major axis; when a step straddles two pixels, the sign of the
    line's integral over that step (measured from the boundary between
    them) chooses one. Output follows the stepping order and may
    contain repeats.
    """
    start = _as_coord(start, "start")
    end = _as_coord(end, "end")

    if start == end:
        return [start]
    if start.x == end.x or start.y == end.y:
        return _straight(start, end)

    dx = end.x - start.x
    dy = end.y - start.y
    (rsx, rsy), (rex, rey) = _representative_corners(dx, dy)
    start_pt = (rsx + start.x, rsy + start.y)
    end_pt = (rex + start.x, rey + start.y)

    slope = (rey - rsy) / (rex - rsx)
    if abs(slope) <= 1:
        return _shallow(start_pt, end_pt)
    return _steep(start_pt, end_pt)
