"""An RGBA raster image that can be read from and written to PNG files."""

from __future__ import annotations

import os
from typing import Tuple, Union

from PIL import Image as _PILImage
from PIL import UnidentifiedImageError

Pixel = Tuple[int, int, int, int]
PathLike = Union[str, "os.PathLike[str]"]

_CHANNELS = 4


class Image:
    """A width x height grid of 8-bit RGBA pixels, stored row by row.

    A new image is transparent black. Pixels are addressed as ``img[x, y]``.
    """

    def __init__(self, width: int, height: int) -> None:
        if width < 0 or height < 0:
            raise ValueError(f"image dimensions must be non-negative, got {width}x{height}")
        self._width = int(width)
        self._height = int(height)
        self._pixels = bytearray(self._width * self._height * _CHANNELS)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @classmethod
    def load(cls, path: PathLike) -> "Image":
        """Read a PNG file, expanding it to 8-bit RGBA.

        Missing alpha becomes fully opaque. Raises ValueError if the file
        is not a PNG.
        """
        try:
            with _PILImage.open(path) as source:
                if source.format != "PNG":
                    raise ValueError(f"{os.fspath(path)} is not a PNG file")
                source.load()
                rgba = source.convert("RGBA")
        except UnidentifiedImageError as exc:
            raise ValueError(f"{os.fspath(path)} is not a PNG file") from exc
        image = cls(rgba.width, rgba.height)
        image._pixels[:] = rgba.tobytes()
        return image

    def save(self, path: PathLike) -> None:
        """Write the image as an 8-bit RGBA, non-interlaced PNG."""
        picture = _PILImage.frombytes(
            "RGBA", (self._width, self._height), bytes(self._pixels)
        )
        picture.save(path, format="PNG")

    def _offset(self, xy: Tuple[int, int]) -> int:
        x, y = xy
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise IndexError(
                f"pixel ({x}, {y}) outside {self._width}x{self._height} image"
            )
        return (x + y * self._width) * _CHANNELS

    def __getitem__(self, xy: Tuple[int, int]) -> Pixel:
        start = self._offset(xy)
        red, green, blue, alpha = self._pixels[start:start + _CHANNELS]
        return red, green, blue, alpha

    def __setitem__(self, xy: Tuple[int, int], rgba: Pixel) -> None:
        values = tuple(rgba)
        if len(values) != _CHANNELS:
            raise ValueError(f"expected 4 channel values, got {len(values)}")
        start = self._offset(xy)
        self._pixels[start:start + _CHANNELS] = bytes(values)

    def to_bytes(self) -> bytes:
        """Return the raw pixel data, RGBA, row-major from the top row."""
        return bytes(self._pixels)

    def __repr__(self) -> str:
        return f"Image(width={self._width}, height={self._height})"