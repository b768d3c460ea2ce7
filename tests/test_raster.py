import math

import pytest

from trirast.geometry import Vertex
from trirast.image import Image
from trirast.raster import AttributeList, Rasterizer, edge_step

BLANK = (0, 0, 0, 0)
RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)


def _pixels(image):
    return {(x, y): image[x, y] for x in range(image.width) for y in range(image.height)}


def _quad(z=None):
    corners = [(-1, -1), (1, -1), (-1, 1), (1, -1), (1, 1), (-1, 1)]
    items = []
    for x, y in corners:
        items.extend((x, y) if z is None else (x, y, z))
    return AttributeList(count=2 if z is None else 3, items=[float(v) for v in items])


def _colors(rgb, vertices=6):
    return AttributeList(count=3, items=[float(c) for c in rgb] * vertices)


def test_attribute_list_length():
    values = AttributeList(count=2, items=[1.0, 2.0, 3.0, 4.0])
    assert values.length == 4


def test_edge_step_start_on_integer_row():
    step, start = edge_step(Vertex(x=0.0, y=0.25), Vertex(x=4.0, y=3.75))
    assert step.y == 1.0
    assert start.y == math.ceil(0.25)


def test_edge_step_symmetric_in_arguments():
    v1 = Vertex(x=1.0, y=0.5, r=0.2)
    v2 = Vertex(x=3.0, y=2.5, r=0.8)
    assert edge_step(v1, v2) == edge_step(v2, v1)


def test_edge_step_hyperbolic_premultiplies_colors():
    v1 = Vertex(x=0.0, y=0.3, w=2.0, r=0.5, g=0.25, b=0.1, a=1.0)
    v2 = Vertex(x=2.0, y=3.7, w=4.0, r=0.1, g=0.75, b=0.3, a=0.5)
    expected = edge_step(v1.scaled_colors(v1.w), v2.scaled_colors(v2.w), False)
    assert edge_step(v1, v2, True) == expected


def test_edge_step_flat_edge_does_not_raise():
    step, start = edge_step(Vertex(x=0.0, y=1.0), Vertex(x=2.0, y=1.0))
    assert start.y == 1.0
    assert math.isinf(step.x)


def test_plot_writes_scaled_channels():
    image = Image(2, 2)
    Rasterizer(image).plot(1, 0, 1.0, 1.0, 0.0, 0.5, 1.0)
    assert image[1, 0] == (255, 0, 127, 255)
    assert image[0, 0] == BLANK


def test_plot_clamps_out_of_range_channels():
    image = Image(1, 1)
    Rasterizer(image).plot(0, 0, 1.0, 2.0, -1.0, 0.0, 1.0)
    assert image[0, 0] == (255, 0, 0, 255)


def test_enable_hyperbolic_implies_srgb_and_depth():
    rasterizer = Rasterizer(Image(2, 2))
    rasterizer.enable_hyperbolic()
    assert (rasterizer.hyperbolic, rasterizer.srgb, rasterizer.depth) == (True, True, True)


def test_scanline_identical_vertices_draws_nothing():
    image = Image(3, 3)
    v = Vertex(x=0.0, y=1.0, r=1.0)
    Rasterizer(image).scanline(v, v)
    assert set(_pixels(image).values()) == {BLANK}


def test_scanline_covers_half_open_span():
    image = Image(4, 2)
    left = Vertex(x=0.5, y=1.0, r=1.0)
    right = Vertex(x=3.0, y=1.0, r=1.0)
    Rasterizer(image).scanline(right, left)
    row = [image[x, 1] for x in range(4)]
    assert row == [BLANK, RED, RED, BLANK]
    assert all(image[x, 0] == BLANK for x in range(4))


def test_draw_arrays_full_screen_quad():
    image = Image(4, 4)
    Rasterizer(image).draw_arrays_triangles(0, 6, _quad(), _colors((1, 0, 0)))
    assert set(_pixels(image).values()) == {RED}


def test_draw_arrays_first_offset_selects_second_triangle():
    image = Image(4, 4)
    Rasterizer(image).draw_arrays_triangles(3, 3, _quad(), _colors((1, 0, 0)))
    pixels = _pixels(image)
    assert pixels[(0, 0)] == BLANK
    assert pixels[(3, 3)] == RED
    for (x, y), value in pixels.items():
        assert value == (RED if x + y >= 4 else BLANK)


def test_draw_arrays_triangle_outside_is_dropped():
    image = Image(4, 4)
    positions = AttributeList(count=2, items=[2.0, 0.0, 3.0, 0.0, 2.0, 1.0])
    Rasterizer(image).draw_arrays_triangles(0, 3, positions, _colors((1, 0, 0), 3))
    assert set(_pixels(image).values()) == {BLANK}


def test_draw_arrays_partly_outside_is_clipped():
    image = Image(4, 4)
    positions = AttributeList(count=2, items=[-3.0, -3.0, 9.0, -3.0, -3.0, 9.0])
    Rasterizer(image).draw_arrays_triangles(0, 3, positions, _colors((1, 0, 0), 3))
    colours = set(_pixels(image).values())
    assert RED in colours
    assert colours <= {RED, BLANK}


def test_draw_arrays_missing_data_raises():
    positions = AttributeList(count=2, items=[-1.0, -1.0, 1.0, -1.0])
    with pytest.raises(IndexError):
        Rasterizer(Image(2, 2)).draw_arrays_triangles(0, 3, positions, _colors((1, 0, 0), 3))


def test_without_depth_last_draw_wins():
    image = Image(4, 4)
    rasterizer = Rasterizer(image)
    rasterizer.draw_arrays_triangles(0, 6, _quad(-0.5), _colors((0, 1, 0)))
    rasterizer.draw_arrays_triangles(0, 6, _quad(0.5), _colors((1, 0, 0)))
    assert set(_pixels(image).values()) == {RED}


@pytest.mark.parametrize("near_first", [True, False])
def test_depth_keeps_nearest(near_first):
    image = Image(4, 4)
    rasterizer = Rasterizer(image)
    rasterizer.enable_depth()
    draws = [(_quad(-0.5), (0, 1, 0)), (_quad(0.5), (1, 0, 0))]
    if not near_first:
        draws.reverse()
    for positions, rgb in draws:
        rasterizer.draw_arrays_triangles(0, 6, positions, _colors(rgb))
    assert set(_pixels(image).values()) == {GREEN}


def test_enable_depth_resets_buffer():
    image = Image(4, 4)
    rasterizer = Rasterizer(image)
    rasterizer.enable_depth()
    rasterizer.draw_arrays_triangles(0, 6, _quad(-0.5), _colors((0, 1, 0)))
    rasterizer.enable_depth()
    rasterizer.draw_arrays_triangles(0, 6, _quad(0.5), _colors((1, 0, 0)))
    assert set(_pixels(image).values()) == {RED}


def test_draw_elements_triangle():
    image = Image(2, 2)
    positions = AttributeList(count=2, items=[-2.0, -2.0, 0.0, -2.0, -2.0, 0.0])
    colors = AttributeList(count=3, items=[1.0] * 7)
    Rasterizer(image).draw_elements_triangles(0, 3, positions, colors, [0, 2, 4])
    white = (255, 255, 255, 255)
    assert image[0, 0] == white
    assert image[1, 0] == white
    assert image[0, 1] == white
    assert image[1, 1] == BLANK


def test_draw_elements_zero_count_draws_nothing():
    image = Image(2, 2)
    positions = AttributeList(count=2, items=[0.0] * 6)
    colors = AttributeList(count=3, items=[1.0] * 7)
    Rasterizer(image).draw_elements_triangles(0, 0, positions, colors, [0, 2, 4])
    assert set(_pixels(image).values()) == {BLANK}


def test_draw_elements_bad_index_raises():
    positions = AttributeList(count=2, items=[0.0] * 6)
    colors = AttributeList(count=3, items=[1.0] * 7)
    with pytest.raises(IndexError):
        Rasterizer(Image(2, 2)).draw_elements_triangles(0, 3, positions, colors, [0, 2, 40])