# trirast

A small software triangle rasterizer. It reads a plain-text scene
description, clips triangles against the view frustum, fills them with
scanline (DDA) interpolation of depth and colour, and writes the result as an
8-bit RGBA PNG.

## Installation

```
pip install .
```

## Usage

```
trirast scene.txt
```

The command prints `file name: scene.txt`, renders the scene and saves the
PNG named on its `png` line. It exits with status 1 and a message on standard
error when it is not given exactly one argument, when the file cannot be
opened, or when the scene cannot be carried out.

## Scene files

The file is read line by line. A line is handled by the first keyword, in
the order below, that it starts with; lines that start with none of them are
ignored. The rest of the line is split on whitespace.

| Keyword | Meaning |
| --- | --- |
| `png W H name.png` | Create a `W`×`H` transparent black image. The first two all-digit tokens are the size; the last token is the output file name. |
| `color n v...` | Vertex colours, `n` components per vertex (r, g, b, optional a), in 0–1. |
| `position n v...` | Vertex positions, `n` components per vertex (x, y, optional z, optional w), in clip space. |
| `drawPixels ...` | Accepted and ignored; draws nothing. |
| `drawArraysTriangles first count` | Draw `count` consecutive vertices starting at vertex `first`, three at a time, clipped against all six frustum planes. |
| `drawElementsTriangles count offset` | Draw `count` vertices named by the index list, starting at position `offset` in it, clipped against the four x and y planes. Each index is the position of the vertex's first value in both the position and the colour list. |
| `elements i...` | The index list. Values overwrite the list from its start; earlier values beyond them remain. |
| `sRGB` | Convert linear colours to sRGB when writing pixels. |
| `depth` | Enable the depth buffer (smaller z wins). Must come after `png`. |
| `hyp` | Perspective-correct (hyperbolic) colour interpolation; also enables `sRGB` and `depth`. |

Drawing before a `png` line, or before both `position` and `color`, or
reading past the end of the data, raises `trirast.scene.SceneError`.

Example:

```
png 20 30 out.png
position 2 -1 -1 1 -1 -1 1
color 3 1 0 0 0 1 0 0 0 1
drawArraysTriangles 0 3
```

## Library use

```python
from trirast.scene import Scene, render_file

path = render_file("scene.txt")   # renders, saves the PNG and returns its Path

scene = Scene()
scene.run([
    "png 4 4 out.png",
    "position 2 -1 -1 1 -1 -1 1",
    "color 3 1 0 0 0 1 0 0 0 1",
    "drawArraysTriangles 0 3",
])
scene.image.save(scene.filename)  # Scene.run itself writes nothing
```

The modules:

- `trirast.image` — `Image`, a grid of RGBA pixels addressed as `img[x, y]`.
  `Image.save` writes an RGBA PNG, `Image.load` reads a PNG and expands it to
  RGBA (raising `ValueError` for files that are not PNG), and `to_bytes`
  returns the raw row-major pixel data.
- `trirast.geometry` — the `Vertex` dataclass, `linear_to_srgb`,
  `viewport_coordinate` and `device_coordinate`, `plane_distance`,
  `find_intersection`, `clip_triangles` and `clip_to_planes` (with the
  `FRUSTUM_PLANES` constant), `to_viewport` and `sort_by_y`.
- `trirast.raster` — `AttributeList`, `edge_step` and the `Rasterizer`, with
  `enable_depth`, `enable_hyperbolic`, `plot`, `scanline`, `dda`,
  `draw_arrays_triangles` and `draw_elements_triangles`.
- `trirast.scene` — `tokenize`, `is_number`, `Scene`, `SceneError`,
  `render_file` and `main`.

Clipping decisions are logged at debug level on the `trirast.geometry`
logger.

## What it does not do

It draws filled, colour-interpolated triangles only: there are no textures,
no lines or points, and `drawPixels` draws nothing. Output is always a PNG
file; there is no window or on-screen display.

## Running the tests

```
pip install .[test]
pytest
```