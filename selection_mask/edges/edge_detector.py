"""
Sobel Edge Detection for Magnetic Selection

Computes gradient-magnitude maps with the 3x3 Sobel operator and uses them
to snap a cursor to the strongest nearby edge while the user draws.

The process:
1. Convert the pixel buffer to luminance (0.299 R + 0.587 G + 0.114 B)
2. Convolve interior pixels with the Sobel kernels
       Gx = [-1 0 1; -2 0 2; -1 0 1]     Gy = [-1 -2 -1; 0 0 0; 1 2 1]
   leaving a 1-pixel border at zero
3. magnitude = sqrt(Gx^2 + Gy^2)
4. For snapping, scan a disc around the query point for the strongest
   magnitude above a threshold
"""

from dataclasses import dataclass
from typing import Optional, Tuple
import math

import numpy as np
import cv2


LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114])


# ============================================================================
# Configuration
# ============================================================================

@dataclass
class EdgeConfig:
    """
    Configuration for edge snapping.

    Attributes:
        radius: Search radius around the query point in pixels (default: 20)
        threshold: Minimum gradient magnitude that counts as an edge
                   (default: 50)
        quantize_luminance: Round luminance to 8-bit levels before the
                            Sobel pass, as an 8-bit grayscale buffer would
    """
    radius: int = 20
    threshold: float = 50.0
    quantize_luminance: bool = True

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.radius < 1:
            raise ValueError(f"radius must be >= 1, got {self.radius}")
        if not math.isfinite(self.threshold) or self.threshold < 0:
            raise ValueError(f"threshold must be a finite value >= 0, got {self.threshold}")


# ============================================================================
# Results
# ============================================================================

@dataclass(frozen=True)
class EdgeSnapResult:
    """
    Outcome of an edge-snap query.

    Attributes:
        x: Snapped x, or the query x when nothing qualified
        y: Snapped y, or the query y when nothing qualified
        strength: Gradient magnitude at (x, y); 0 means "no snap available"
    """
    x: float
    y: float
    strength: float = 0.0

    @property
    def snapped(self) -> bool:
        return self.strength > 0

    @property
    def point(self) -> Tuple[float, float]:
        return self.x, self.y

    def __str__(self) -> str:
        if not self.snapped:
            return f"EdgeSnapResult(no edge near ({self.x}, {self.y}))"
        return f"EdgeSnapResult(x={self.x}, y={self.y}, strength={self.strength:.1f})"


# ============================================================================
# Pipeline stages
# ============================================================================

def grayscale(pixels: np.ndarray, quantize: bool = True) -> np.ndarray:
    """
    Convert a pixel buffer to luminance.

    Args:
        pixels: RGB (H, W, 3) or RGBA (H, W, 4) buffer, alpha ignored, or an
                already single-channel (H, W) buffer
        quantize: Round and clamp to 0..255 (8-bit grayscale levels)

    Returns:
        luminance: Array (H, W), float64

    Raises:
        ValueError: If the buffer shape is not supported
    """
    pixels = np.asarray(pixels)

    if pixels.ndim == 2:
        luminance = pixels.astype(np.float64)
    elif pixels.ndim == 3 and pixels.shape[2] in (3, 4):
        luminance = pixels[..., :3].astype(np.float64) @ LUMA_WEIGHTS
    else:
        raise ValueError(
            f"Pixel buffer must be (H, W), (H, W, 3) or (H, W, 4), got shape {pixels.shape}"
        )

    if quantize:
        # np.rint rounds half to even, like an 8-bit clamped buffer
        luminance = np.clip(np.rint(luminance), 0, 255)
    return luminance


def sobel_magnitude(
    luminance: np.ndarray,
    width: Optional[int] = None,
    height: Optional[int] = None
) -> np.ndarray:
    """
    Gradient magnitude of a luminance image.

    Args:
        luminance: 2-D array (H, W), or a flat buffer together with width
                   and height
        width: Image width, required for flat buffers
        height: Image height, required for flat buffers

    Returns:
        edge_map: Array (H, W), float64, >= 0, border pixels 0

    Raises:
        ValueError: If a flat buffer does not match width * height
    """
    luminance = np.asarray(luminance, dtype=np.float64)

    if luminance.ndim == 1:
        if width is None or height is None:
            raise ValueError("width and height are required for a flat luminance buffer")
        if luminance.size != width * height:
            raise ValueError(
                f"Buffer of {luminance.size} values does not match {width}x{height}"
            )
        luminance = luminance.reshape(height, width)
    elif luminance.ndim != 2:
        raise ValueError(f"Luminance must be 2D array (H, W), got shape {luminance.shape}")

    h, w = luminance.shape
    edge_map = np.zeros((h, w), dtype=np.float64)
    if h < 3 or w < 3:
        return edge_map

    # cv2.Sobel with ksize=3 correlates with exactly the Gx / Gy kernels
    gx = cv2.Sobel(luminance, cv2.CV_64F, 1, 0, ksize=3)
    gy = cv2.Sobel(luminance, cv2.CV_64F, 0, 1, ksize=3)

    # Only interior pixels have a full 3x3 neighbourhood
    edge_map[1:-1, 1:-1] = np.hypot(gx[1:-1, 1:-1], gy[1:-1, 1:-1])
    return edge_map


def full_frame_edge_map(
    pixels: np.ndarray,
    width: Optional[int] = None,
    height: Optional[int] = None,
    quantize: bool = True
) -> np.ndarray:
    """
    Edge map of a whole frame.

    Args:
        pixels: Pixel buffer as accepted by grayscale(), or a flat RGBA
                buffer (canvas ImageData layout) together with width and
                height
        width: Frame width, required for flat buffers
        height: Frame height, required for flat buffers
        quantize: See grayscale()

    Returns:
        edge_map: Array (H, W), float64
    """
    pixels = np.asarray(pixels)
    if pixels.ndim == 1:
        if width is None or height is None:
            raise ValueError("width and height are required for a flat pixel buffer")
        if pixels.size != width * height * 4:
            raise ValueError(
                f"Flat RGBA buffer of {pixels.size} values does not match {width}x{height}"
            )
        pixels = pixels.reshape(height, width, 4)
    return sobel_magnitude(grayscale(pixels, quantize=quantize))


def find_nearest_edge(
    pixels: np.ndarray,
    sample_point: Tuple[float, float],
    radius: int = 20,
    threshold: float = 50.0,
    quantize: bool = True
) -> EdgeSnapResult:
    """
    Snap a point to the strongest edge within ``radius``.

    A 2r x 2r window [x - r, x + r) x [y - r, y + r), clamped to the buffer,
    is cut around the point and its edge map computed. Every pixel within
    Euclidean distance r of the point is a candidate; the strongest one
    exceeding ``threshold`` wins, ties going to the candidate closest to the
    point, then to the first in row-major order.

    Resolving ties by distance is deliberate: a plain raster scan would keep
    the first strongest pixel above and to the left, pulling the snap away
    from an equally strong edge right under the pointer.

    Args:
        pixels: Pixel buffer as accepted by grayscale(), in the same
                coordinate space as sample_point
        sample_point: Query point (x, y)
        radius: Search radius in pixels
        threshold: Minimum magnitude to snap to
        quantize: See grayscale()

    Returns:
        result: Snapped point and its magnitude, or the unchanged query
                point with strength 0 when no pixel qualifies
    """
    x, y = sample_point
    miss = EdgeSnapResult(x, y, 0.0)
    radius = int(radius)

    pixels = np.asarray(pixels)
    buf_h, buf_w = pixels.shape[:2]
    if not (math.isfinite(x) and math.isfinite(y)) or radius < 1:
        return miss

    cx, cy = int(math.floor(x)), int(math.floor(y))
    x0, x1 = max(0, cx - radius), min(buf_w, cx + radius)
    y0, y1 = max(0, cy - radius), min(buf_h, cy + radius)
    if x0 >= x1 or y0 >= y1:
        return miss

    window = pixels[y0:y1, x0:x1]
    edges = sobel_magnitude(grayscale(window, quantize=quantize))

    # Distance of every window pixel from the query pixel
    ys, xs = np.mgrid[y0:y1, x0:x1]
    distance = np.hypot(xs - cx, ys - cy)
    candidates = (distance <= radius) & (edges > threshold)
    if not candidates.any():
        return miss

    strength = edges[candidates].max()
    best = candidates & (edges == strength)
    # First minimum in row-major order among the strongest
    index = np.argmin(np.where(best, distance, np.inf))
    row, col = np.unravel_index(index, edges.shape)

    return EdgeSnapResult(float(x0 + col), float(y0 + row), float(strength))


# ============================================================================
# Edge Detector
# ============================================================================

class SobelEdgeDetector:
    """
    Edge snapping with a fixed configuration.

    Stateless apart from its configuration; safe to share.

    Example:
        >>> detector = SobelEdgeDetector(EdgeConfig(radius=20, threshold=50))
        >>> result = detector.find_nearest_edge(frame, (pointer_x, pointer_y))
        >>> if result.snapped:
        ...     pointer_x, pointer_y = result.point
    """

    def __init__(self, config: Optional[EdgeConfig] = None):
        """
        Args:
            config: Snapping parameters. If None, uses defaults.
        """
        self.config = config or EdgeConfig()

    def grayscale(self, pixels: np.ndarray) -> np.ndarray:
        return grayscale(pixels, quantize=self.config.quantize_luminance)

    def edge_map(self, pixels: np.ndarray) -> np.ndarray:
        """Full-frame edge map of a (H, W[, C]) buffer."""
        return full_frame_edge_map(pixels, quantize=self.config.quantize_luminance)

    def find_nearest_edge(
        self,
        pixels: np.ndarray,
        sample_point: Tuple[float, float]
    ) -> EdgeSnapResult:
        return find_nearest_edge(
            pixels,
            sample_point,
            radius=self.config.radius,
            threshold=self.config.threshold,
            quantize=self.config.quantize_luminance
        )
