"""
Error types raised while building masks.

Every error here is recoverable: callers are expected to report the message
to the user (draw a selection, pick a layer) and carry on.
"""

from typing import Any, Optional


class SelectionMaskError(Exception):
    """Base class for all selection-mask errors."""


class MaskBuildError(SelectionMaskError):
    """A mask could not be built from the current selection."""


class NoSelectionDrawn(MaskBuildError):
    """build_mask() was called without any selection primitives."""

    def __init__(self, message: str = "Please draw mask regions first"):
        super().__init__(message)


class LayerGeometryMissing(MaskBuildError):
    """build_mask() was called without usable target layer geometry."""

    def __init__(self, message: str = "Please select a layer to edit"):
        super().__init__(message)


class InvalidPrimitiveGeometry(SelectionMaskError):
    """
    A primitive has non-finite or degenerate coordinates.

    The compositor catches this, skips the primitive and continues with the
    rest of the selection.

    Attributes:
        primitive: The offending primitive (may be None when unknown)
    """

    def __init__(self, message: str, primitive: Optional[Any] = None):
        super().__init__(message)
        self.primitive = primitive
