"""
selection-mask - Selection-to-mask compositing for masked image editing.

This package turns user-drawn selection shapes (rectangles and freehand
strokes in display coordinates) into a binary mask in the original image's
pixel space, and computes Sobel gradient maps used to snap the cursor to
nearby edges while drawing.
"""

from .errors import (
    SelectionMaskError,
    MaskBuildError,
    NoSelectionDrawn,
    LayerGeometryMissing,
    InvalidPrimitiveGeometry
)
from .geometry import (
    Rectangle,
    FreehandStroke,
    PathCommand,
    PathCommandType,
    LayerGeometry,
    CoordinateTransformer,
    to_image_space
)
from .selection import SelectionModel
from .compositor import (
    CompositorConfig,
    MaskResult,
    VectorToRasterCompositor,
    build_mask
)
from .edges import (
    EdgeConfig,
    EdgeSnapResult,
    SobelEdgeDetector,
    grayscale,
    sobel_magnitude,
    find_nearest_edge,
    full_frame_edge_map
)

__version__ = "0.1.0"

__all__ = [
    # Errors
    'SelectionMaskError',
    'MaskBuildError',
    'NoSelectionDrawn',
    'LayerGeometryMissing',
    'InvalidPrimitiveGeometry',
    # Geometry
    'Rectangle',
    'FreehandStroke',
    'PathCommand',
    'PathCommandType',
    'LayerGeometry',
    'CoordinateTransformer',
    'to_image_space',
    # Selection
    'SelectionModel',
    # Compositing
    'CompositorConfig',
    'MaskResult',
    'VectorToRasterCompositor',
    'build_mask',
    # Edges
    'EdgeConfig',
    'EdgeSnapResult',
    'SobelEdgeDetector',
    'grayscale',
    'sobel_magnitude',
    'find_nearest_edge',
    'full_frame_edge_map'
]
