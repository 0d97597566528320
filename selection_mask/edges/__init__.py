"""
Sobel edge detection for magnetic selection.

Provides grayscale conversion, Sobel gradient-magnitude maps and
nearest-edge snapping for the drawing overlay.
"""

from .edge_detector import (
    EdgeConfig,
    EdgeSnapResult,
    SobelEdgeDetector,
    grayscale,
    sobel_magnitude,
    full_frame_edge_map,
    find_nearest_edge
)

__all__ = [
    'EdgeConfig',
    'EdgeSnapResult',
    'SobelEdgeDetector',
    'grayscale',
    'sobel_magnitude',
    'full_frame_edge_map',
    'find_nearest_edge'
]
