"""Reading scene description files and rendering them to PNG."""

from __future__ import annotations

import re
import sys
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .image import Image
from .raster import AttributeList, Rasterizer

_DIGITS = frozenset("0123456789")
_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)


class SceneError(Exception):
    """Raised when a scene description cannot be carried out."""


def tokenize(line: str, start: int = 0) -> List[str]:
    """Split the first line of ``line`` from ``start`` on whitespace."""
    rest = line[start:].split("\n", 1)[0].split("\0", 1)[0]
    return rest.split()


def is_number(token: str) -> bool:
    """True when every character of ``token`` is an ASCII digit."""
    return all(char in _DIGITS for char in token)


def _parse_int(token: str) -> int:
    match = _INT_PREFIX.match(token)
    return int(match.group(1)) if match else 0


def _parse_float(token: str) -> float:
    match = _FLOAT_PREFIX.match(token)
    return float(match.group(1)) if match else 0.0


class Scene:
    """State built up by executing a scene description line by line."""

    def __init__(self) -> None:
        self.image: Optional[Image] = None
        self.filename: Optional[str] = None
        self.rasterizer: Optional[Rasterizer] = None
        self.positions: Optional[AttributeList] = None
        self.colors: Optional[AttributeList] = None
        self.elements: List[int] = []
        self.srgb = False
        self.depth = False
        self.hyperbolic = False
        # Order matters: the first keyword that prefixes the line wins.
        self._commands: Tuple[Tuple[str, Callable[[List[str]], None]], ...] = (
            ("png", self._png),
            ("color", self._color),
            ("position", self._position),
            ("drawPixels", self._draw_pixels),
            ("drawArraysTriangles", self._draw_arrays),
            ("drawElementsTriangles", self._draw_elements),
            ("elements", self._elements),
            ("sRGB", self._srgb),
            ("depth", self._depth),
            ("hyp", self._hyp),
        )

    def execute(self, line: str) -> None:
        """Carry out one line of a scene description; unknown lines are ignored."""
        for keyword, handler in self._commands:
            if line.startswith(keyword):
                handler(tokenize(line, len(keyword)))
                return

    def run(self, lines: Iterable[str]) -> None:
        """Execute every line in turn."""
        for line in lines:
            self.execute(line)

    def _require_rasterizer(self) -> Rasterizer:
        if self.rasterizer is None:
            raise SceneError("no png line before drawing")
        return self.rasterizer

    def _require_attributes(self) -> Tuple[AttributeList, AttributeList]:
        if self.positions is None or self.colors is None:
            raise SceneError("positions and colors must be given before drawing")
        return self.positions, self.colors

    def _png(self, tokens: List[str]) -> None:
        dimensions = [int(token) for token in tokens if is_number(token)]
        if len(dimensions) < 2:
            raise SceneError("png needs a width and a height")
        self.filename = tokens[-1]
        self.image = Image(dimensions[0], dimensions[1])
        rasterizer = Rasterizer(self.image)
        rasterizer.srgb = self.srgb
        if self.depth:
            rasterizer.enable_depth()
        if self.hyperbolic:
            rasterizer.enable_hyperbolic()
        self.rasterizer = rasterizer

    @staticmethod
    def _attribute_list(keyword: str, tokens: Sequence[str]) -> AttributeList:
        if not tokens:
            raise SceneError(f"{keyword} needs a size")
        return AttributeList(
            count=_parse_int(tokens[0]),
            items=[_parse_float(token) for token in tokens[1:]],
        )

    def _color(self, tokens: List[str]) -> None:
        self.colors = self._attribute_list("color", tokens)

    def _position(self, tokens: List[str]) -> None:
        self.positions = self._attribute_list("position", tokens)

    def _draw_pixels(self, tokens: List[str]) -> None:
        """Accepted for compatibility; draws nothing."""

    def _draw_arrays(self, tokens: List[str]) -> None:
        if len(tokens) < 2:
            raise SceneError("drawArraysTriangles needs first and count")
        rasterizer = self._require_rasterizer()
        positions, colors = self._require_attributes()
        try:
            rasterizer.draw_arrays_triangles(
                _parse_int(tokens[0]), _parse_int(tokens[1]), positions, colors
            )
        except IndexError as exc:
            raise SceneError(f"drawArraysTriangles reads past the data: {exc}") from exc

    def _draw_elements(self, tokens: List[str]) -> None:
        if len(tokens) < 2:
            raise SceneError("drawElementsTriangles needs count and offset")
        rasterizer = self._require_rasterizer()
        positions, colors = self._require_attributes()
        count, offset = _parse_int(tokens[0]), _parse_int(tokens[1])
        try:
            rasterizer.draw_elements_triangles(
                offset, count, positions, colors, self.elements
            )
        except IndexError as exc:
            raise SceneError(f"drawElementsTriangles reads past the data: {exc}") from exc

    def _elements(self, tokens: List[str]) -> None:
        values = [int(_parse_float(token)) for token in tokens]
        # New values overwrite from the start; earlier ones beyond them remain.
        self.elements[: len(values)] = values

    def _srgb(self, tokens: List[str]) -> None:
        self.srgb = True
        if self.rasterizer is not None:
            self.rasterizer.srgb = True

    def _depth(self, tokens: List[str]) -> None:
        rasterizer = self._require_rasterizer()
        self.depth = True
        rasterizer.enable_depth()

    def _hyp(self, tokens: List[str]) -> None:
        self.hyperbolic = True
        self.srgb = True
        self.depth = True
        if self.rasterizer is not None:
            self.rasterizer.enable_hyperbolic()


def render_file(path) -> Path:
    """Render the scene file at ``path`` and return the PNG path written."""
    scene = Scene()
    with open(path, "r", encoding="utf-8") as handle:
        scene.run(handle)
    if scene.image is None or scene.filename is None:
        raise SceneError("scene has no png line")
    output = Path(scene.filename)
    scene.image.save(output)
    return output


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command-line entry point: render one scene file."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 1:
        print("Usage: trirast file", file=sys.stderr)
        return 1
    file_name = args[0]
    print(f"file name: {file_name}")
    try:
        render_file(file_name)
    except OSError as exc:
        print(f"Error opening file: {exc}", file=sys.stderr)
        return 1
    except SceneError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0