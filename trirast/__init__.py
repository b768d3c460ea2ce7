"""Software triangle rasterizer that renders scene descriptions to PNG."""

__version__ = "0.1.0"
__all__ = ["geometry", "image", "raster", "scene"]