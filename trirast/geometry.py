"""Vertices, clip-space helpers and frustum clipping for triangle lists."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Iterable, List, Sequence, Tuple

logger = logging.getLogger(__name__)

Plane = Tuple[int, int, int, int]

FRUSTUM_PLANES: Tuple[Plane, ...] = (
    (1, 0, 0, 1),
    (-1, 0, 0, 1),
    (0, 1, 0, 1),
    (0, -1, 0, 1),
    (0, 0, 1, 1),
    (0, 0, -1, 1),
)

_SRGB_THRESHOLD = 0.0031308


@dataclass(frozen=True, slots=True)
class Vertex:
    """A homogeneous position with an RGBA colour."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0
    r: float = 0.0
    g: float = 0.0
    b: float = 0.0
    a: float = 1.0

    def scaled_colors(self, factor: float) -> "Vertex":
        """Return a copy with every colour channel multiplied by ``factor``."""
        return replace(
            self,
            r=self.r * factor,
            g=self.g * factor,
            b=self.b * factor,
            a=self.a * factor,
        )


def linear_to_srgb(linear: float) -> float:
    """Convert a linear colour channel value to the sRGB transfer curve."""
    if linear <= _SRGB_THRESHOLD:
        return linear * 12.92
    return 1.055 * math.pow(linear, 1.0 / 2.4) - 0.055


def viewport_coordinate(length: int, point: float, w: float) -> float:
    """Map a clip-space coordinate to a pixel coordinate along an axis."""
    return (point / w + 1) * length / 2


def device_coordinate(length: int, point: float, w: float) -> float:
    """Map a pixel coordinate back to clip space; inverse of viewport_coordinate."""
    return (point / (length // 2) - 1) * w


def plane_distance(plane: Sequence[float], vertex: Vertex) -> float:
    """Signed distance of a vertex from a homogeneous clipping plane."""
    return plane[0] * vertex.x + plane[1] * vertex.y + plane[2] * vertex.z + plane[3] * vertex.w


def find_intersection(v1: Vertex, v2: Vertex, plane: Sequence[float]) -> Vertex:
    """Return the point where the segment v1-v2 crosses ``plane``.

    All attributes, colour included, are interpolated linearly. Raises
    ZeroDivisionError when both ends lie at the same distance from the plane.
    """
    d1 = plane_distance(plane, v1)
    d2 = plane_distance(plane, v2)
    denominator = d2 - d1

    def mix(p: float, q: float) -> float:
        return (d2 * p - d1 * q) / denominator

    return Vertex(
        x=mix(v1.x, v2.x),
        y=mix(v1.y, v2.y),
        z=mix(v1.z, v2.z),
        w=mix(v1.w, v2.w),
        r=mix(v1.r, v2.r),
        g=mix(v1.g, v2.g),
        b=mix(v1.b, v2.b),
        a=mix(v1.a, v2.a),
    )


def _triples(vertices: Sequence[Vertex]) -> Iterable[Tuple[Vertex, Vertex, Vertex]]:
    if len(vertices) % 3:
        raise ValueError(
            f"triangle list needs a multiple of 3 vertices, got {len(vertices)}"
        )
    it = iter(vertices)
    return zip(it, it, it)


def clip_triangles(vertices: Sequence[Vertex], plane: Sequence[float]) -> List[Vertex]:
    """Clip a flat triangle list against one plane.

    Triangles wholly outside are dropped, triangles with one vertex outside
    become two triangles, and those with two outside are shortened to one.
    """
    clipped: List[Vertex] = []
    for triangle in _triples(vertices):
        inside = [v for v in triangle if plane_distance(plane, v) >= 0.0]
        outside = [v for v in triangle if plane_distance(plane, v) < 0.0]
        if not inside:
            logger.debug("all vertices invalid")
        elif len(outside) == 2:
            logger.debug("2 vertices invalid")
            valid = inside[0]
            clipped.extend((
                valid,
                find_intersection(valid, outside[0], plane),
                find_intersection(valid, outside[1], plane),
            ))
        elif len(outside) == 1:
            logger.debug("1 vertex invalid")
            first, second = inside
            new_first = find_intersection(first, outside[0], plane)
            new_second = find_intersection(second, outside[0], plane)
            clipped.extend((first, new_first, new_second))
            clipped.extend((first, second, new_second))
        else:
            logger.debug("all vertices valid")
            clipped.extend(inside)
    return clipped


def clip_to_planes(
    vertices: Sequence[Vertex], planes: Iterable[Sequence[float]]
) -> List[Vertex]:
    """Clip a flat triangle list against each plane in turn."""
    result = list(vertices)
    for plane in planes:
        result = clip_triangles(result, plane)
    return result


def to_viewport(vertex: Vertex, width: int, height: int) -> Vertex:
    """Divide by w and map x and y to pixel coordinates; w becomes 1/w."""
    w = vertex.w
    return replace(
        vertex,
        x=viewport_coordinate(width, vertex.x, w),
        y=viewport_coordinate(height, vertex.y, w),
        z=vertex.z / w,
        w=1 / w,
    )


def sort_by_y(triangle: Iterable[Vertex]) -> Tuple[Vertex, ...]:
    """Order vertices top to bottom; equal y keeps the original order."""
    return tuple(sorted(triangle, key=lambda v: v.y))