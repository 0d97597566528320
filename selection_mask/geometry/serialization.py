"""
Converting selections to and from JSON-like data.

The drawing overlay hands selections over as plain JSON-like data:

    {
        "geometry": {"offsetX": 0, "offsetY": 0,
                     "originalWidth": 640, "originalHeight": 480},
        "primitives": [
            {"type": "rect", "x": 10, "y": 10, "width": 50, "height": 50,
             "regionId": 1},
            {"type": "path", "strokeWidth": 30,
             "path": [{"type": "move", "coords": [5, 5]},
                      {"type": "quad", "coords": [20, 0, 40, 5]}]}
        ]
    }

Path commands may also use the compact list form ``["M", x, y]``,
``["L", x, y]`` and ``["Q", cx, cy, x, y]``.

Every parser raises ValueError for a malformed document.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple, Union
import json

from .primitives import (
    FreehandStroke,
    LayerGeometry,
    PathCommand,
    PathCommandType,
    Rectangle,
    SelectionPrimitive
)


_COMPACT_COMMANDS = {
    'M': PathCommandType.MOVE,
    'L': PathCommandType.LINE,
    'Q': PathCommandType.QUAD,
}


def _require_dict(data: Any, what: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ValueError(f"Expected a {what} object, got {type(data).__name__}")
    return data


def _optional_float(value: Any) -> Optional[float]:
    return float(value) if value is not None else None


# ============================================================================
# Dict -> objects
# ============================================================================

def command_from_data(data: Any) -> PathCommand:
    """
    Parse a path command in either dict or compact list form.

    Raises:
        ValueError: If the command type is unknown or the shape is wrong
    """
    if isinstance(data, dict):
        try:
            kind = PathCommandType(data['type'])
        except (KeyError, ValueError):
            raise ValueError(f"Unknown path command: {data!r}")
        coords = data.get('coords')
        if not isinstance(coords, (list, tuple)):
            raise ValueError(f"Path command without coords: {data!r}")
    elif isinstance(data, (list, tuple)) and data:
        kind = _COMPACT_COMMANDS.get(str(data[0]).upper())
        if kind is None:
            raise ValueError(f"Unknown path command: {data!r}")
        coords = data[1:]
    else:
        raise ValueError(f"Malformed path command: {data!r}")

    try:
        return PathCommand(kind, tuple(coords))
    except (TypeError, ValueError) as e:
        raise ValueError(f"Path command has non-numeric coords: {data!r}") from e


def primitive_from_dict(data: Dict[str, Any]) -> SelectionPrimitive:
    """
    Parse one selection primitive.

    Geometry is only parsed here, not validated; degenerate shapes are
    detected (and skipped) by the compositor.

    Raises:
        ValueError: If the item is not an object, the type is unknown, or a
                    required field is missing or not a number
    """
    data = _require_dict(data, "primitive")
    kind = data.get('type')
    try:
        if kind == 'rect':
            region_id = data.get('regionId')
            return Rectangle(
                x=float(data['x']),
                y=float(data['y']),
                width=float(data['width']),
                height=float(data['height']),
                region_id=int(region_id) if region_id is not None else None
            )
        if kind == 'path':
            path = data['path']
            if not isinstance(path, (list, tuple)):
                raise ValueError(f"Path must be a list of commands, got {path!r}")
            return FreehandStroke(
                commands=tuple(command_from_data(c) for c in path),
                stroke_width=_optional_float(data.get('strokeWidth'))
            )
    except KeyError as e:
        raise ValueError(f"Primitive of type '{kind}' is missing field {e}")
    except (TypeError, OverflowError) as e:
        raise ValueError(f"Primitive of type '{kind}' has a malformed field: {e}") from e

    raise ValueError(f"Unknown primitive type: {kind!r}")


def primitives_from_dicts(items: Sequence[Dict[str, Any]]) -> List[SelectionPrimitive]:
    """Parse a list of primitives, keeping their order."""
    if not isinstance(items, (list, tuple)):
        raise ValueError(f"Expected a list of primitives, got {type(items).__name__}")
    return [primitive_from_dict(item) for item in items]


def geometry_from_dict(data: Dict[str, Any]) -> LayerGeometry:
    """
    Parse layer geometry.

    Raises:
        ValueError: If a required field is missing or not a number
    """
    data = _require_dict(data, "geometry")
    try:
        return LayerGeometry(
            offset_x=float(data.get('offsetX', 0.0)),
            offset_y=float(data.get('offsetY', 0.0)),
            original_width=int(data['originalWidth']),
            original_height=int(data['originalHeight']),
            display_width=_optional_float(data.get('displayWidth')),
            display_height=_optional_float(data.get('displayHeight'))
        )
    except KeyError as e:
        raise ValueError(f"Layer geometry is missing field {e}")
    except (TypeError, OverflowError) as e:
        raise ValueError(f"Layer geometry has a malformed field: {e}") from e


def load_selection(
    data: Union[str, bytes, Dict[str, Any]]
) -> Tuple[Optional[LayerGeometry], List[SelectionPrimitive]]:
    """
    Parse a selection document into (geometry, primitives).

    Args:
        data: Document as a dict or as JSON text. A missing or null
              "geometry" gives None, which build_mask() reports as
              LayerGeometryMissing.

    Raises:
        ValueError: If the document is malformed
    """
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as e:
            raise ValueError(f"Could not parse selection: {e.msg} (line {e.lineno})") from e

    data = _require_dict(data, "selection")
    geometry_data = data.get('geometry')
    geometry = geometry_from_dict(geometry_data) if geometry_data is not None else None
    return geometry, primitives_from_dicts(data.get('primitives', []))


# ============================================================================
# Objects -> dict
# ============================================================================

def primitive_to_dict(primitive: SelectionPrimitive) -> Dict[str, Any]:
    """Inverse of primitive_from_dict()."""
    if isinstance(primitive, Rectangle):
        data = {
            'type': 'rect',
            'x': primitive.x,
            'y': primitive.y,
            'width': primitive.width,
            'height': primitive.height,
        }
        if primitive.region_id is not None:
            data['regionId'] = primitive.region_id
        return data

    if isinstance(primitive, FreehandStroke):
        data = {
            'type': 'path',
            'path': [
                {'type': c.kind.value, 'coords': list(c.coords)}
                for c in primitive.commands
            ],
        }
        if primitive.stroke_width is not None:
            data['strokeWidth'] = primitive.stroke_width
        return data

    raise TypeError(f"Unsupported selection primitive: {type(primitive).__name__}")


def geometry_to_dict(geometry: LayerGeometry) -> Dict[str, Any]:
    data = {
        'offsetX': geometry.offset_x,
        'offsetY': geometry.offset_y,
        'originalWidth': geometry.original_width,
        'originalHeight': geometry.original_height,
    }
    if geometry.display_width is not None:
        data['displayWidth'] = geometry.display_width
    if geometry.display_height is not None:
        data['displayHeight'] = geometry.display_height
    return data


def dump_selection(
    geometry: Optional[LayerGeometry],
    primitives: Sequence[SelectionPrimitive]
) -> Dict[str, Any]:
    """Inverse of load_selection(); pass the result to json.dumps() for text."""
    return {
        'geometry': geometry_to_dict(geometry) if geometry is not None else None,
        'primitives': [primitive_to_dict(p) for p in primitives],
    }
