"""Scanline rasterisation of triangles into an RGBA image."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from .geometry import (
    FRUSTUM_PLANES,
    Vertex,
    clip_to_planes,
    linear_to_srgb,
    sort_by_y,
    to_viewport,
    viewport_coordinate,
)
from .image import Image

# Element draws are clipped against the x and y planes only.
_ELEMENT_PLANES = FRUSTUM_PLANES[:4]


@dataclass
class AttributeList:
    """A flat list of per-vertex attribute values, ``count`` values per vertex."""

    count: int
    items: List[float] = field(default_factory=list)

    @property
    def length(self) -> int:
        """Total number of values held."""
        return len(self.items)


def _div(numerator: float, denominator: float) -> float:
    """Floating-point division that yields inf or nan instead of raising."""
    try:
        return numerator / denominator
    except ZeroDivisionError:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)


def _ceil(value: float) -> float:
    return float(math.ceil(value)) if math.isfinite(value) else value


def _to_byte(value: float) -> int:
    scaled = value * 255
    if math.isnan(scaled) or scaled <= 0:
        return 0
    if scaled >= 255:
        return 255
    return int(scaled)


def _advance(point: Vertex, step: Vertex) -> Vertex:
    return Vertex(
        x=point.x + step.x,
        y=point.y + 1,
        z=point.z + step.z,
        w=point.w + step.w,
        r=point.r + step.r,
        g=point.g + step.g,
        b=point.b + step.b,
        a=point.a + step.a,
    )


def _triangles(vertices: Sequence[Vertex]) -> Iterator[Tuple[Vertex, Vertex, Vertex]]:
    it = iter(vertices)
    return zip(it, it, it)


def edge_step(
    v1: Vertex, v2: Vertex, hyperbolic: bool = False
) -> Tuple[Vertex, Vertex]:
    """Return ``(step, start)`` for walking the edge v1-v2 one row at a time.

    ``step`` holds the change of every attribute per unit of y (its y is 1);
    ``start`` is the edge's point on the first integer row at or below the
    upper end. With ``hyperbolic`` colours are pre-multiplied by w.
    """
    if v1.y > v2.y:
        v1, v2 = v2, v1
    if hyperbolic:
        v1 = v1.scaled_colors(v1.w)
        v2 = v2.scaled_colors(v2.w)

    dy = v2.y - v1.y
    step = Vertex(
        x=_div(v2.x - v1.x, dy),
        y=1.0,
        z=_div(v2.z - v1.z, dy),
        w=_div(v2.w - v1.w, dy),
        r=_div(v2.r - v1.r, dy),
        g=_div(v2.g - v1.g, dy),
        b=_div(v2.b - v1.b, dy),
        a=_div(v2.a - v1.a, dy),
    )
    e = _ceil(v1.y) - v1.y
    start = Vertex(
        x=v1.x + e * step.x,
        y=v1.y + e,
        z=v1.z + e * step.z,
        w=v1.w + e * step.w,
        r=v1.r + e * step.r,
        g=v1.g + e * step.g,
        b=v1.b + e * step.b,
        a=v1.a + e * step.a,
    )
    return step, start


class Rasterizer:
    """Draws triangles into an image with optional depth test, sRGB and
    perspective-correct (hyperbolic) colour interpolation."""

    def __init__(self, image: Image) -> None:
        self.image = image
        self.srgb = False
        self.depth = False
        self.hyperbolic = False
        self._z_buffer: Optional[List[float]] = None

    def enable_depth(self) -> None:
        """Turn on depth testing with a fresh depth buffer set to infinity."""
        self.depth = True
        self._z_buffer = [math.inf] * (self.image.width * self.image.height)

    def enable_hyperbolic(self) -> None:
        """Turn on hyperbolic interpolation, which also implies sRGB and depth."""
        self.hyperbolic = True
        self.srgb = True
        if self._z_buffer is None:
            self.enable_depth()
        else:
            self.depth = True

    def plot(self, x: float, y: float, w: float, r: float, g: float, b: float, a: float) -> None:
        """Write one pixel, applying the hyperbolic and sRGB conversions."""
        if self.hyperbolic:
            r, g, b, a = (_div(c, w) for c in (r, g, b, a))
        if self.srgb:
            r, g, b, a = (linear_to_srgb(c) for c in (r, g, b, a))
        self.image[int(x), int(y)] = (_to_byte(r), _to_byte(g), _to_byte(b), _to_byte(a))

    def scanline(self, v1: Vertex, v2: Vertex) -> None:
        """Fill the integer x positions in [v1.x, v2.x) on the row of the left end."""
        if v1 == v2:
            return
        left, right = (v2, v1) if v1.x > v2.x else (v1, v2)

        dx = right.x - left.x
        z_s = _div(right.z - left.z, dx)
        w_s = _div(right.w - left.w, dx)
        r_s = _div(right.r - left.r, dx)
        g_s = _div(right.g - left.g, dx)
        b_s = _div(right.b - left.b, dx)
        a_s = _div(right.a - left.a, dx)

        e = _ceil(left.x) - left.x
        x = left.x + e
        y = left.y
        z = left.z + e * z_s
        w = left.w + e * w_s
        r = left.r + e * r_s
        g = left.g + e * g_s
        b = left.b + e * b_s
        a = left.a + e * a_s

        width, height = self.image.width, self.image.height
        while x < right.x:
            if 0 <= x < width and 0 <= y < height:
                if self.depth and self._z_buffer is not None:
                    index = int(x) + int(y) * width
                    if z < self._z_buffer[index]:
                        self._z_buffer[index] = z
                        self.plot(x, y, w, r, g, b, a)
                else:
                    self.plot(x, y, w, r, g, b, a)
            z += z_s
            w += w_s
            r += r_s
            g += g_s
            b += b_s
            a += a_s
            x += 1

    def dda(self, top: Vertex, middle: Vertex, bottom: Vertex) -> None:
        """Fill a triangle whose vertices are already sorted by y."""
        s_long, p_long = edge_step(top, bottom, self.hyperbolic)
        s_middle, p_middle = edge_step(top, middle, self.hyperbolic)
        while p_long.y < middle.y:
            self.scanline(p_long, p_middle)
            p_long = _advance(p_long, s_long)
            p_middle = _advance(p_middle, s_middle)

        s_lower, p_lower = edge_step(middle, bottom, self.hyperbolic)
        while p_lower.y < bottom.y:
            self.scanline(p_long, p_lower)
            p_long = _advance(p_long, s_long)
            p_lower = _advance(p_lower, s_lower)

    def _fill_clipped(self, vertices: Sequence[Vertex], planes: Iterable[Sequence[float]]) -> None:
        clipped = clip_to_planes(vertices, planes)
        width, height = self.image.width, self.image.height
        for triangle in _triangles(clipped):
            screen = [to_viewport(v, width, height) for v in triangle]
            self.dda(*sort_by_y(screen))

    def draw_arrays_triangles(
        self, first: int, count: int, positions: AttributeList, colors: AttributeList
    ) -> None:
        """Draw ``count`` consecutive vertices starting at vertex ``first``."""
        pc, cc = positions.count, colors.count
        pos, col = positions.items, colors.items
        for base in range(0, count, 3):
            triangle = []
            for start in range(base + first, base + first + 3):
                z = pos[start * pc + 2] if pc >= 3 else 0.0
                w = pos[start * pc + 3] if pc >= 4 else 1.0
                a = col[start * cc + 3] if cc > 3 else 1.0
                triangle.append(Vertex(
                    x=pos[start * pc],
                    y=pos[start * pc + 1],
                    z=z / w,
                    w=1 / w,
                    r=col[start * cc],
                    g=col[start * cc + 1],
                    b=col[start * cc + 2],
                    a=a,
                ))
            self._fill_clipped(triangle, FRUSTUM_PLANES)

    def draw_elements_triangles(
        self,
        offset: int,
        count: int,
        positions: AttributeList,
        colors: AttributeList,
        elements: Sequence[int],
    ) -> None:
        """Draw ``count`` vertices named by ``elements`` from ``offset`` on.

        Each element is the index of the vertex's first value in both the
        position and the colour list.
        """
        pc, cc = positions.count, colors.count
        pos, col = positions.items, colors.items
        width, height = self.image.width, self.image.height
        for base in range(0, count, 3):
            triangle = []
            for current in range(base, base + 3):
                start = elements[offset + current]
                x, y = pos[start], pos[start + 1]
                z = pos[start + 2] if pc > 2 else 0.0
                w = pos[start + 3] if pc > 3 else 1.0
                a = col[start + 3] if cc > 3 else 1.0
                if w == 0.0:
                    w = math.sqrt(x * x + y * y + w * w)
                triangle.append(Vertex(
                    x=viewport_coordinate(width, x, w),
                    y=viewport_coordinate(height, y, w),
                    z=z / w,
                    w=1 / w,
                    r=col[start],
                    g=col[start + 1],
                    b=col[start + 2],
                    a=a,
                ))
            self._fill_clipped(triangle, _ELEMENT_PLANES)