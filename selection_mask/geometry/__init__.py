"""
Selection geometry: primitives, layer placement and coordinate mapping.
"""

from .primitives import (
    Point,
    PathCommandType,
    PathCommand,
    Rectangle,
    FreehandStroke,
    SelectionPrimitive,
    LayerGeometry
)
from .transform import (
    CoordinateTransformer,
    to_image_space,
    rectangle_to_image_space,
    command_to_image_space,
    stroke_to_image_space
)
from .serialization import (
    command_from_data,
    primitive_from_dict,
    primitives_from_dicts,
    primitive_to_dict,
    geometry_from_dict,
    geometry_to_dict,
    load_selection,
    dump_selection
)

__all__ = [
    # Primitives
    'Point',
    'PathCommandType',
    'PathCommand',
    'Rectangle',
    'FreehandStroke',
    'SelectionPrimitive',
    'LayerGeometry',
    # Coordinate mapping
    'CoordinateTransformer',
    'to_image_space',
    'rectangle_to_image_space',
    'command_to_image_space',
    'stroke_to_image_space',
    # Serialization
    'command_from_data',
    'primitive_from_dict',
    'primitives_from_dicts',
    'primitive_to_dict',
    'geometry_from_dict',
    'geometry_to_dict',
    'load_selection',
    'dump_selection'
]
