"""
Display-space to image-space coordinate mapping.

Display and image share a 1:1 pixel mapping at draw time (zoom is
normalized by the canvas before primitives get here), so the mapping is a
pure translation by the layer offset. No clamping is done here; clamping
belongs to the rasterizer.
"""

from typing import Tuple

from .primitives import (
    FreehandStroke,
    LayerGeometry,
    PathCommand,
    Point,
    Rectangle,
    SelectionPrimitive
)


def to_image_space(point: Point, geometry: LayerGeometry) -> Point:
    """
    Map a display-space point to image pixel coordinates.

    Args:
        point: (x, y) in display space
        geometry: Layer placement

    Returns:
        (x - offset_x, y - offset_y)
    """
    x, y = point
    return x - geometry.offset_x, y - geometry.offset_y


def rectangle_to_image_space(rect: Rectangle, geometry: LayerGeometry) -> Rectangle:
    """Translate a rectangle's bounding box, keeping its size and region id."""
    box = rect.normalized()
    x, y = to_image_space((box.x, box.y), geometry)
    return Rectangle(x, y, box.width, box.height, region_id=box.region_id)


def command_to_image_space(command: PathCommand, geometry: LayerGeometry) -> PathCommand:
    """Translate every coordinate pair of a path command."""
    coords: Tuple[float, ...] = ()
    for point in command.points():
        coords += to_image_space(point, geometry)
    return PathCommand(command.kind, coords)


def stroke_to_image_space(stroke: FreehandStroke, geometry: LayerGeometry) -> FreehandStroke:
    """Translate every command of a stroke, keeping its width."""
    return FreehandStroke(
        tuple(command_to_image_space(c, geometry) for c in stroke.commands),
        stroke_width=stroke.stroke_width
    )


class CoordinateTransformer:
    """
    Maps selection primitives from display space into a layer's image space.

    Example:
        >>> geometry = LayerGeometry(offset_x=100, offset_y=50,
        ...                          original_width=640, original_height=480)
        >>> transformer = CoordinateTransformer(geometry)
        >>> transformer.transform(Rectangle(110, 60, 20, 20))
        Rectangle(x=10, y=10, width=20, height=20, region_id=None)
    """

    def __init__(self, geometry: LayerGeometry):
        self.geometry = geometry

    def point(self, point: Point) -> Point:
        return to_image_space(point, self.geometry)

    def transform(self, primitive: SelectionPrimitive) -> SelectionPrimitive:
        """
        Return a new primitive with every vertex in image space.

        Raises:
            TypeError: If the primitive type is unknown
        """
        if isinstance(primitive, Rectangle):
            return rectangle_to_image_space(primitive, self.geometry)
        if isinstance(primitive, FreehandStroke):
            return stroke_to_image_space(primitive, self.geometry)
        raise TypeError(f"Unsupported selection primitive: {type(primitive).__name__}")
