"""
Selection Primitives and Layer Geometry

Immutable value types describing what the user drew on the overlay
(rectangles and freehand strokes, in display coordinates) and where the
edited image layer sits on that overlay.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Tuple, Union
import math

from ..errors import InvalidPrimitiveGeometry


Point = Tuple[float, float]


def _all_finite(values) -> bool:
    # None or non-numeric values count as not finite
    try:
        return all(math.isfinite(v) for v in values)
    except (TypeError, ValueError):
        return False


# ============================================================================
# Path commands
# ============================================================================

class PathCommandType(Enum):
    """Kinds of path commands making up a freehand stroke."""
    MOVE = "move"
    LINE = "line"
    QUAD = "quad"

    @property
    def arity(self) -> int:
        """Number of coordinates the command carries."""
        return 4 if self is PathCommandType.QUAD else 2


@dataclass(frozen=True)
class PathCommand:
    """
    One command of a freehand stroke path.

    Attributes:
        kind: Command type (move, line or quadratic curve)
        coords: Flat coordinates. MOVE/LINE: (x, y).
                QUAD: (control_x, control_y, x, y).
    """
    kind: PathCommandType
    coords: Tuple[float, ...]

    def __post_init__(self):
        # Accept lists and other sequences, store as a tuple of floats
        object.__setattr__(self, 'coords', tuple(float(c) for c in self.coords))

    @classmethod
    def move(cls, x: float, y: float) -> 'PathCommand':
        return cls(PathCommandType.MOVE, (x, y))

    @classmethod
    def line(cls, x: float, y: float) -> 'PathCommand':
        return cls(PathCommandType.LINE, (x, y))

    @classmethod
    def quad(cls, cx: float, cy: float, x: float, y: float) -> 'PathCommand':
        return cls(PathCommandType.QUAD, (cx, cy, x, y))

    @property
    def end_point(self) -> Point:
        """Point where the pen rests after this command."""
        return self.coords[-2], self.coords[-1]

    def points(self) -> Iterator[Point]:
        """Iterate over every vertex (control points included)."""
        for i in range(0, len(self.coords), 2):
            yield self.coords[i], self.coords[i + 1]

    def validate(self) -> None:
        """
        Check coordinate count and finiteness.

        Raises:
            InvalidPrimitiveGeometry: If the command is malformed
        """
        if len(self.coords) != self.kind.arity:
            raise InvalidPrimitiveGeometry(
                f"{self.kind.value} command needs {self.kind.arity} coordinates, "
                f"got {len(self.coords)}"
            )
        if not _all_finite(self.coords):
            raise InvalidPrimitiveGeometry(
                f"{self.kind.value} command has non-finite coordinates: {self.coords}"
            )


# ============================================================================
# Primitives
# ============================================================================

@dataclass(frozen=True)
class Rectangle:
    """
    Axis-aligned rectangular selection in display coordinates.

    A rectangle dragged up or to the left has a negative width or height;
    ``normalized()`` gives the same area with a top-left origin.

    Attributes:
        x: Anchor x (left edge when width >= 0)
        y: Anchor y (top edge when height >= 0)
        width: Signed width in pixels
        height: Signed height in pixels
        region_id: Optional caller-assigned id used for external correlation
                   (focusing a region, attaching instructions). Never
                   interpreted by the compositor.
    """
    x: float
    y: float
    width: float
    height: float
    region_id: Optional[int] = None

    @property
    def corners(self) -> Tuple[Point, Point]:
        """Top-left and bottom-right corners of the bounding box."""
        box = self.normalized()
        return (box.x, box.y), (box.x + box.width, box.y + box.height)

    def normalized(self) -> 'Rectangle':
        """Bounding box with non-negative width and height."""
        return Rectangle(
            min(self.x, self.x + self.width),
            min(self.y, self.y + self.height),
            abs(self.width),
            abs(self.height),
            region_id=self.region_id
        )

    def validate(self) -> None:
        """
        Raises:
            InvalidPrimitiveGeometry: On missing or non-finite values
        """
        if not _all_finite((self.x, self.y, self.width, self.height)):
            raise InvalidPrimitiveGeometry(
                f"Rectangle has non-finite geometry: {self}", self
            )


@dataclass(frozen=True)
class FreehandStroke:
    """
    Freehand brush stroke in display coordinates.

    Attributes:
        commands: Ordered path commands (move / line / quad)
        stroke_width: Brush diameter in pixels. None means the compositor's
                      default stroke width is used.
    """
    commands: Tuple[PathCommand, ...]
    stroke_width: Optional[float] = None

    def __post_init__(self):
        object.__setattr__(self, 'commands', tuple(self.commands))

    def points(self) -> Iterator[Point]:
        """Iterate over every vertex of every command."""
        for command in self.commands:
            yield from command.points()

    def validate(self) -> None:
        """
        Raises:
            InvalidPrimitiveGeometry: On empty paths, malformed commands or
                                      a non-positive stroke width
        """
        if not self.commands:
            raise InvalidPrimitiveGeometry("Stroke has no path commands", self)
        if self.stroke_width is not None:
            if not _all_finite((self.stroke_width,)) or self.stroke_width <= 0:
                raise InvalidPrimitiveGeometry(
                    f"Stroke width must be positive, got {self.stroke_width}", self
                )
        for command in self.commands:
            try:
                command.validate()
            except InvalidPrimitiveGeometry as exc:
                raise InvalidPrimitiveGeometry(str(exc), self) from exc


SelectionPrimitive = Union[Rectangle, FreehandStroke]


# ============================================================================
# Layer geometry
# ============================================================================

@dataclass(frozen=True)
class LayerGeometry:
    """
    Placement of the edited layer on the overlay and its true pixel size.

    Attributes:
        offset_x: Left position of the layer in display space
        offset_y: Top position of the layer in display space
        original_width: Native image width; authoritative mask width
        original_height: Native image height; authoritative mask height
        display_width: Width as shown on the overlay (informative only)
        display_height: Height as shown on the overlay (informative only)
    """
    offset_x: float
    offset_y: float
    original_width: int
    original_height: int
    display_width: Optional[float] = None
    display_height: Optional[float] = None

    @property
    def offset(self) -> Point:
        return self.offset_x, self.offset_y

    @property
    def shape(self) -> Tuple[int, int]:
        """Mask shape as (H, W)."""
        return int(self.original_height), int(self.original_width)

    def is_valid(self) -> bool:
        """True when offsets are finite and the original size is positive."""
        dims = (self.original_width, self.original_height)
        if not _all_finite(dims + self.offset):
            return False
        return int(self.original_width) > 0 and int(self.original_height) > 0
