"""
Selection-to-mask compositing.

This module provides:
1. A raster surface (OpenCV) for filling rectangles and stroking
   round-capped polylines
2. The compositor that unions selection primitives into a binary mask in
   the original image's pixel space
"""

from .raster import (
    EXCLUDED,
    INCLUDED,
    RasterSurface,
    OpenCVRasterSurface,
    pixel_span
)

from .compositor import (
    CompositorConfig,
    MaskResult,
    VectorToRasterCompositor,
    build_mask,
    flatten_path
)

__all__ = [
    # Raster surfaces
    'EXCLUDED',
    'INCLUDED',
    'RasterSurface',
    'OpenCVRasterSurface',
    'pixel_span',
    # Compositing
    'CompositorConfig',
    'MaskResult',
    'VectorToRasterCompositor',
    'build_mask',
    'flatten_path'
]
