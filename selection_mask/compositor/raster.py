"""
Raster Surfaces

A raster surface owns an 8-bit single-channel pixel buffer and knows how to
paint two things into it: filled axis-aligned rectangles and stroked
polylines with round caps and joins. The compositor only talks to this
interface, so another drawing backend can be dropped in.

Coordinates follow the canvas convention: pixel (i, j) covers the square
[i, i+1) x [j, j+1) and its centre is (i + 0.5, j + 0.5).

Painting is a union: a pixel's new value is the maximum of its old value and
what the shape contributes, so nothing painted is ever darkened and painting
the same shape twice changes nothing.
"""

from abc import ABC, abstractmethod
from typing import Tuple
import math

import numpy as np
import cv2


EXCLUDED = 0
INCLUDED = 255

# Sub-pixel precision bits used for OpenCV drawing calls
_SHIFT = 4
_ONE = 1 << _SHIFT

# OpenCV refuses thicker lines
_MAX_THICKNESS = 32767


# ============================================================================
# Helpers
# ============================================================================

def pixel_span(start: float, end: float, limit: int) -> Tuple[int, int]:
    """
    Half-open range of pixel indices whose centres fall in [start, end).

    The range is clamped to [0, limit), so the result may be empty
    (first >= stop).

    Example:
        >>> pixel_span(9.5, 60.5, 200)
        (9, 60)
    """
    first = math.ceil(start - 0.5)
    stop = math.ceil(end - 0.5)
    return max(0, first), min(limit, stop)


def pixel_coverage(start: float, end: float, limit: int) -> Tuple[int, np.ndarray]:
    """
    Fraction of each pixel along one axis covered by [start, end].

    Args:
        start: Interval start, already clamped to [0, limit]
        end: Interval end, already clamped to [0, limit]
        limit: Number of pixels along the axis

    Returns:
        (first, weights): index of the first touched pixel and the coverage
        of pixels first, first + 1, ... in [0, 1]

    Example:
        >>> pixel_coverage(9.5, 12.0, 200)
        (9, array([0.5, 1. , 1. ]))
    """
    first = max(0, math.floor(start))
    stop = min(limit, math.ceil(end))
    idx = np.arange(first, stop, dtype=np.float64)
    weights = np.minimum(idx + 1, end) - np.maximum(idx, start)
    return first, np.clip(weights, 0.0, 1.0)


def _is_dot(points: np.ndarray) -> bool:
    return len(points) == 1 or bool(np.all(points == points[0]))


# ============================================================================
# Abstract Base Class (Interface)
# ============================================================================

class RasterSurface(ABC):
    """
    Abstract 8-bit drawing surface filled with EXCLUDED on creation.
    """

    def __init__(self, width: int, height: int, antialias: bool = True):
        """
        Args:
            width: Surface width in pixels (> 0)
            height: Surface height in pixels (> 0)
            antialias: Give partially covered edge pixels partial values

        Raises:
            ValueError: If a dimension is not positive
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Surface dimensions must be positive, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.antialias = antialias

    @property
    def shape(self) -> Tuple[int, int]:
        return self.height, self.width

    def fill_rect(self, x: float, y: float, width: float, height: float) -> bool:
        """
        Fill an axis-aligned rectangle, clamped to the surface.

        Returns:
            True if the clamped rectangle is not empty
        """
        x0, x1 = max(0.0, x), min(float(self.width), x + width)
        y0, y1 = max(0.0, y), min(float(self.height), y + height)
        if x0 >= x1 or y0 >= y1:
            return False
        self._fill_box(x0, y0, x1, y1)
        return True

    @abstractmethod
    def _fill_box(self, x0: float, y0: float, x1: float, y1: float) -> None:
        """Paint the box [x0, x1] x [y0, y1], already clamped and non-empty."""
        pass

    @abstractmethod
    def stroke_polyline(self, points: np.ndarray, width: float) -> None:
        """
        Stroke an open polyline with round caps and round joins.

        Args:
            points: Vertices in canvas coordinates, shape (N, 2), N >= 1.
                    A single vertex (or all-equal vertices) paints a dot.
            width: Line width in pixels (> 0)
        """
        pass

    @abstractmethod
    def to_array(self) -> np.ndarray:
        """Copy of the buffer, shape (H, W), dtype uint8."""
        pass


# ============================================================================
# OpenCV backend
# ============================================================================

class OpenCVRasterSurface(RasterSurface):
    """
    Surface backed by a numpy buffer and OpenCV drawing primitives.

    OpenCV's thick lines end in round caps and polylines join segments with
    them, which gives round joins as well. Each stroke is drawn into a
    scratch tile covering its bounding box and merged with np.maximum.
    """

    def __init__(self, width: int, height: int, antialias: bool = True):
        super().__init__(width, height, antialias)
        self._buffer = np.full((self.height, self.width), EXCLUDED, dtype=np.uint8)

    @property
    def _line_type(self) -> int:
        return cv2.LINE_AA if self.antialias else cv2.LINE_8

    def _fill_box(self, x0: float, y0: float, x1: float, y1: float) -> None:
        if not self.antialias:
            c0, c1 = pixel_span(x0, x1, self.width)
            r0, r1 = pixel_span(y0, y1, self.height)
            self._buffer[r0:r1, c0:c1] = INCLUDED
            return

        c0, cx = pixel_coverage(x0, x1, self.width)
        r0, cy = pixel_coverage(y0, y1, self.height)
        tile = np.rint(np.outer(cy, cx) * INCLUDED).astype(np.uint8)
        region = self._buffer[r0:r0 + len(cy), c0:c0 + len(cx)]
        np.maximum(region, tile, out=region)

    def stroke_polyline(self, points: np.ndarray, width: float) -> None:
        pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        if len(pts) == 0:
            return

        # Bounding box of the stroke plus a margin for caps and smoothing
        reach = width / 2 + 2
        c0 = max(0, math.floor(pts[:, 0].min() - reach))
        c1 = min(self.width, math.ceil(pts[:, 0].max() + reach))
        r0 = max(0, math.floor(pts[:, 1].min() - reach))
        r1 = min(self.height, math.ceil(pts[:, 1].max() + reach))
        if c0 >= c1 or r0 >= r1:
            return

        tile = np.zeros((r1 - r0, c1 - c0), dtype=np.uint8)

        # Canvas coordinates -> tile pixel-centre coordinates, fixed point
        local = pts - (c0 + 0.5, r0 + 0.5)
        fixed = np.round(local * _ONE).astype(np.int32)

        if _is_dot(pts):
            center = (int(fixed[0, 0]), int(fixed[0, 1]))
            radius = max(1, int(round(width / 2 * _ONE)))
            cv2.circle(tile, center, radius, INCLUDED, -1, self._line_type, _SHIFT)
        else:
            thickness = int(min(_MAX_THICKNESS, max(1, round(width))))
            cv2.polylines(
                tile,
                [fixed.reshape(-1, 1, 2)],
                False,
                INCLUDED,
                thickness,
                self._line_type,
                _SHIFT
            )

        region = self._buffer[r0:r1, c0:c1]
        np.maximum(region, tile, out=region)

    def to_array(self) -> np.ndarray:
        return self._buffer.copy()

