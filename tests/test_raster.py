"""Tests for the OpenCV raster surface."""

from __future__ import annotations

import numpy as np
import pytest

from selection_mask.compositor import OpenCVRasterSurface, RasterSurface, pixel_span
from selection_mask.compositor.raster import pixel_coverage


def test_pixel_span_uses_pixel_centres() -> None:
    assert pixel_span(9.5, 60.5, 200) == (9, 60)
    assert pixel_span(10, 60, 200) == (10, 60)
    assert pixel_span(-5, 3.2, 200) == (0, 3)
    assert pixel_span(190, 260, 200) == (190, 200)


def test_pixel_coverage_weights_partial_pixels() -> None:
    first, weights = pixel_coverage(9.5, 12.0, 200)

    assert first == 9
    assert np.allclose(weights, [0.5, 1.0, 1.0])


def test_surface_implements_the_interface() -> None:
    assert isinstance(OpenCVRasterSurface(10, 10), RasterSurface)


def test_surface_rejects_empty_size() -> None:
    with pytest.raises(ValueError):
        OpenCVRasterSurface(0, 10)


@pytest.mark.parametrize("antialias", [True, False])
def test_new_surface_is_excluded(antialias: bool) -> None:
    surface = OpenCVRasterSurface(30, 20, antialias=antialias)

    array = surface.to_array()

    assert array.shape == (20, 30)
    assert array.dtype == np.uint8
    assert (array == 0).all()


@pytest.mark.parametrize("antialias", [True, False])
def test_fill_rect_is_clamped(antialias: bool) -> None:
    surface = OpenCVRasterSurface(30, 20, antialias=antialias)

    assert surface.fill_rect(20, 10, 50, 50)
    assert not surface.fill_rect(40, 40, 5, 5)

    array = surface.to_array()
    assert (array[10:, 20:] == 255).all()
    assert (array[:10, :] == 0).all()
    assert (array[:, :20] == 0).all()


def test_antialiased_fill_gives_soft_edges() -> None:
    surface = OpenCVRasterSurface(20, 20, antialias=True)

    surface.fill_rect(2.5, 2.0, 5.0, 5.0)
    array = surface.to_array()

    assert array[3, 2] == 128
    assert (array[2:7, 3:7] == 255).all()
    assert array[3, 7] == 128


def test_hard_fill_uses_pixel_centres() -> None:
    surface = OpenCVRasterSurface(20, 20, antialias=False)

    surface.fill_rect(2.5, 2.0, 5.0, 5.0)
    array = surface.to_array()

    assert set(np.unique(array)) == {0, 255}
    assert (array[2:7, 2:7] == 255).all()
    assert int((array == 255).sum()) == 25


def test_repeated_fill_is_idempotent() -> None:
    surface = OpenCVRasterSurface(20, 20)
    surface.fill_rect(2.3, 2.3, 10.4, 10.4)
    once = surface.to_array()

    surface.fill_rect(2.3, 2.3, 10.4, 10.4)

    assert np.array_equal(surface.to_array(), once)


def test_painting_never_darkens() -> None:
    surface = OpenCVRasterSurface(40, 40)
    surface.fill_rect(0, 0, 40, 40)

    surface.stroke_polyline(np.array([[5.0, 5.0], [35.0, 35.0]]), 6)

    assert (surface.to_array() == 255).all()


@pytest.mark.parametrize("antialias", [True, False])
def test_round_join_fills_the_corner(antialias: bool) -> None:
    surface = OpenCVRasterSurface(100, 100, antialias=antialias)

    # Right angle at (50, 50)
    surface.stroke_polyline(np.array([[10.0, 50.0], [50.0, 50.0], [50.0, 90.0]]), 12)
    array = surface.to_array()

    assert array[49, 49] == 255
    # Outer corner region just beyond the vertex, inside the round join
    assert array[46, 52] == 255
    # Square-corner tip lies outside a round join
    assert array[44, 55] == 0


@pytest.mark.parametrize("antialias", [True, False])
def test_stroke_outside_surface_is_ignored(antialias: bool) -> None:
    surface = OpenCVRasterSurface(20, 20, antialias=antialias)

    surface.stroke_polyline(np.array([[100.0, 100.0], [150.0, 120.0]]), 8)

    assert (surface.to_array() == 0).all()


@pytest.mark.parametrize("antialias", [True, False])
def test_single_point_paints_a_disc(antialias: bool) -> None:
    surface = OpenCVRasterSurface(40, 40, antialias=antialias)

    surface.stroke_polyline(np.array([[20.0, 20.0]]), 10)
    array = surface.to_array()

    assert array[19, 19] == 255
    assert array[19, 22] == 255
    assert array[19, 30] == 0
    assert array[10, 10] == 0
