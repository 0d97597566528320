"""
Vector-to-Raster Compositor

Turns the current selection primitives into a binary mask in the edited
layer's original pixel space.

The process:
1. Validate inputs (at least one primitive, usable layer geometry)
2. Allocate an original_width x original_height surface filled with 0
3. For each primitive, in insertion order:
   - map it from display space to image space
   - rectangles: inflate by expansion_ratio * max(w, h), clamp, fill
   - strokes: flatten curves, stroke with round caps and joins
4. Return the buffer wrapped in a MaskResult (PNG / base64 encoders)

Compositing is a pure union: nothing painted is ever erased.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence
import base64
import io
import logging
import math
import time

import numpy as np
from PIL import Image

from ..errors import InvalidPrimitiveGeometry, LayerGeometryMissing, NoSelectionDrawn
from ..geometry import (
    CoordinateTransformer,
    FreehandStroke,
    LayerGeometry,
    PathCommandType,
    Rectangle,
    SelectionPrimitive
)
from .raster import INCLUDED, OpenCVRasterSurface, RasterSurface

logger = logging.getLogger(__name__)


# ============================================================================
# Configuration
# ============================================================================

@dataclass
class CompositorConfig:
    """
    Configuration for mask compositing.

    Attributes:
        expansion_ratio: Fraction of a rectangle's larger side added on every
                         side before filling (default: 0.01)
        default_stroke_width: Brush width for strokes without their own
                              width, in pixels (default: 30)
        antialias: Soft edges on rectangles and strokes. False gives a
                   mask holding only 0 and 255.
        curve_tolerance: Maximum distance in pixels between a quadratic
                         curve and its flattened polyline
    """
    expansion_ratio: float = 0.01
    default_stroke_width: float = 30.0
    antialias: bool = True
    curve_tolerance: float = 0.25

    def __post_init__(self):
        """Validate configuration parameters."""
        if not math.isfinite(self.expansion_ratio) or self.expansion_ratio < 0:
            raise ValueError(
                f"expansion_ratio must be a finite value >= 0, got {self.expansion_ratio}"
            )
        if not math.isfinite(self.default_stroke_width) or self.default_stroke_width <= 0:
            raise ValueError(
                f"default_stroke_width must be > 0, got {self.default_stroke_width}"
            )
        if not self.curve_tolerance > 0:
            raise ValueError(f"curve_tolerance must be > 0, got {self.curve_tolerance}")


# ============================================================================
# Results
# ============================================================================

@dataclass
class MaskResult:
    """
    A freshly built mask.

    Attributes:
        mask: Mask array (H, W), uint8. 255 = editable, 0 = fixed.
              Antialiased stroke edges may hold intermediate values.
        geometry: Layer geometry the mask was built for
        primitive_count: Number of primitives submitted
        skipped: Indices of primitives skipped for invalid geometry
        build_time: Time taken to build the mask (seconds)
    """
    mask: np.ndarray
    geometry: LayerGeometry
    primitive_count: int
    skipped: List[int] = field(default_factory=list)
    build_time: float = 0.0

    @property
    def width(self) -> int:
        return int(self.mask.shape[1])

    @property
    def height(self) -> int:
        return int(self.mask.shape[0])

    @property
    def painted_count(self) -> int:
        """Number of primitives that made it onto the mask."""
        return self.primitive_count - len(self.skipped)

    def get_included_pixels(self) -> int:
        """Number of pixels at full inclusion (255)."""
        return int((self.mask == INCLUDED).sum())

    def get_included_ratio(self) -> float:
        total = self.mask.size
        return self.get_included_pixels() / total if total > 0 else 0.0

    def to_image(self, rgb: bool = False) -> Image.Image:
        """Mask as a Pillow image: ``L`` mode, or black/white ``RGB``."""
        image = Image.fromarray(self.mask)
        return image.convert('RGB') if rgb else image

    def to_png_bytes(self, rgb: bool = False) -> bytes:
        """Encode the mask as a single-page PNG."""
        buffer = io.BytesIO()
        self.to_image(rgb=rgb).save(buffer, format='PNG')
        return buffer.getvalue()

    def to_base64(self, rgb: bool = False) -> str:
        """Base64 PNG, the form the image-editing API client expects."""
        return base64.b64encode(self.to_png_bytes(rgb=rgb)).decode('ascii')

    def to_data_url(self, rgb: bool = False) -> str:
        return f"data:image/png;base64,{self.to_base64(rgb=rgb)}"

    def __str__(self) -> str:
        """String representation of results."""
        return (
            f"MaskResult({self.width}x{self.height}, "
            f"primitives={self.painted_count}/{self.primitive_count}, "
            f"included={self.get_included_ratio() * 100:.1f}%, "
            f"time={self.build_time * 1000:.1f}ms)"
        )


# ============================================================================
# Path flattening
# ============================================================================

def _quad_segments(p0: np.ndarray, p1: np.ndarray, p2: np.ndarray, tolerance: float) -> int:
    # A quadratic strays at most |p0 - 2 p1 + p2| / 4 from its chord; n
    # segments shrink that by n^2.
    deviation = float(np.hypot(*(p0 - 2 * p1 + p2))) / 4
    return max(1, math.ceil(math.sqrt(deviation / tolerance)))


def flatten_path(stroke: FreehandStroke, tolerance: float = 0.25) -> List[np.ndarray]:
    """
    Flatten a stroke's path commands into polylines, one per sub-path.

    Follows canvas path semantics: MOVE starts a new sub-path, a LINE
    without a current point only moves the pen, a QUAD without one starts at
    its control point, and a sub-path consisting of a lone point paints
    nothing.

    Args:
        stroke: Stroke whose commands are already validated
        tolerance: Maximum flattening error for curves, in pixels

    Returns:
        polylines: Arrays of shape (N, 2), N >= 2
    """
    polylines: List[np.ndarray] = []
    current: List[np.ndarray] = []

    def close_subpath():
        if len(current) >= 2:
            polylines.append(np.array(current, dtype=np.float64))

    for command in stroke.commands:
        coords = np.array(command.coords, dtype=np.float64).reshape(-1, 2)

        if command.kind is PathCommandType.MOVE:
            close_subpath()
            current = [coords[0]]
            continue

        if not current:
            # A line with no current point only moves the pen
            current = [coords[0]]
            if command.kind is PathCommandType.LINE:
                continue

        if command.kind is PathCommandType.LINE:
            current.append(coords[0])
        else:
            p0, p1, p2 = current[-1], coords[0], coords[1]
            n = _quad_segments(p0, p1, p2, tolerance)
            for t in np.linspace(0.0, 1.0, n + 1)[1:]:
                current.append((1 - t) ** 2 * p0 + 2 * (1 - t) * t * p1 + t ** 2 * p2)

    close_subpath()
    return polylines


# ============================================================================
# Compositor
# ============================================================================

class VectorToRasterCompositor:
    """
    Builds binary masks from selection primitives.

    Instances only hold configuration, so one compositor can serve any
    number of builds, including builds running on other threads as long as
    each gets its own snapshot of the primitives.

    Example:
        >>> compositor = VectorToRasterCompositor(CompositorConfig())
        >>> geometry = LayerGeometry(0, 0, original_width=200, original_height=200)
        >>> result = compositor.build_mask([Rectangle(10, 10, 50, 50)], geometry)
        >>> result.mask.shape
        (200, 200)
        >>> png = result.to_png_bytes()
    """

    def __init__(self, config: Optional[CompositorConfig] = None):
        """
        Args:
            config: Compositing parameters. If None, uses defaults.
        """
        self.config = config or CompositorConfig()

    def build_mask(
        self,
        primitives: Sequence[SelectionPrimitive],
        geometry: Optional[LayerGeometry]
    ) -> MaskResult:
        """
        Rasterize primitives into a mask sized to the layer's original image.

        Args:
            primitives: Selection primitives in display space, insertion order
            geometry: Geometry of the layer being edited

        Returns:
            result: MaskResult with an (original_height, original_width) mask

        Raises:
            NoSelectionDrawn: If primitives is empty
            LayerGeometryMissing: If geometry is None or has a non-positive
                                  original size
        """
        primitives = tuple(primitives)
        if not primitives:
            raise NoSelectionDrawn()
        if geometry is None or not geometry.is_valid():
            raise LayerGeometryMissing()

        start_time = time.time()
        height, width = geometry.shape
        surface = OpenCVRasterSurface(width, height, antialias=self.config.antialias)
        transformer = CoordinateTransformer(geometry)

        skipped: List[int] = []
        for index, primitive in enumerate(primitives):
            try:
                self._paint(surface, transformer, primitive)
            except InvalidPrimitiveGeometry as exc:
                logger.warning("Skipping primitive %d: %s", index, exc)
                skipped.append(index)

        result = MaskResult(
            mask=surface.to_array(),
            geometry=geometry,
            primitive_count=len(primitives),
            skipped=skipped,
            build_time=time.time() - start_time
        )
        logger.debug("Built %s", result)
        return result

    def _paint(
        self,
        surface: RasterSurface,
        transformer: CoordinateTransformer,
        primitive: SelectionPrimitive
    ) -> None:
        if isinstance(primitive, Rectangle):
            primitive.validate()
            self._paint_rectangle(surface, transformer.transform(primitive))
        elif isinstance(primitive, FreehandStroke):
            primitive.validate()
            self._paint_stroke(surface, transformer.transform(primitive))
        else:
            raise InvalidPrimitiveGeometry(
                f"Unsupported selection primitive: {type(primitive).__name__}", primitive
            )

    def _paint_rectangle(self, surface: RasterSurface, rect: Rectangle) -> None:
        expansion = max(rect.width, rect.height) * self.config.expansion_ratio
        surface.fill_rect(
            rect.x - expansion,
            rect.y - expansion,
            rect.width + 2 * expansion,
            rect.height + 2 * expansion
        )

    def _paint_stroke(self, surface: RasterSurface, stroke: FreehandStroke) -> None:
        width = stroke.stroke_width or self.config.default_stroke_width
        for polyline in flatten_path(stroke, self.config.curve_tolerance):
            surface.stroke_polyline(polyline, width)


def build_mask(
    primitives: Sequence[SelectionPrimitive],
    geometry: Optional[LayerGeometry],
    expansion_ratio: float = 0.01,
    default_stroke_width: float = 30.0
) -> MaskResult:
    """
    Build a mask with the default configuration.

    Shortcut for ``VectorToRasterCompositor(CompositorConfig(...)).build_mask``.

    Raises:
        NoSelectionDrawn: If primitives is empty
        LayerGeometryMissing: If geometry is missing or invalid
    """
    config = CompositorConfig(
        expansion_ratio=expansion_ratio,
        default_stroke_width=default_stroke_width
    )
    return VectorToRasterCompositor(config).build_mask(primitives, geometry)
