"""
Selection Model

Ordered collection of the primitives the user has drawn. Order is drawing
(union) order, not priority. Primitives are immutable: moving or resizing a
shape is a remove followed by an add.
"""

from typing import Dict, Iterable, Iterator, List, Optional, Tuple
import logging

from ..geometry import Rectangle, SelectionPrimitive

logger = logging.getLogger(__name__)


class SelectionModel:
    """
    Insertion-ordered set of selection primitives.

    Rectangles may carry a ``region_id``; the model keeps optional
    per-region instruction text next to them and drops it when the
    rectangle goes away.

    Example:
        >>> model = SelectionModel()
        >>> rect = Rectangle(10, 10, 50, 50, region_id=model.next_region_id())
        >>> model.add(rect)
        >>> model.set_instruction(rect.region_id, "make the sky purple")
        >>> result = build_mask(model.snapshot(), geometry)
    """

    def __init__(self, primitives: Optional[Iterable[SelectionPrimitive]] = None):
        self._primitives: List[SelectionPrimitive] = []
        self._instructions: Dict[int, str] = {}
        for primitive in primitives or ():
            self.add(primitive)

    # ------------------------------------------------------------------
    # Collection protocol
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._primitives)

    def __iter__(self) -> Iterator[SelectionPrimitive]:
        return iter(tuple(self._primitives))

    def __contains__(self, primitive: object) -> bool:
        return self._index_of(primitive) is not None

    @property
    def is_empty(self) -> bool:
        return not self._primitives

    def _index_of(self, primitive: object) -> Optional[int]:
        # Identity, not equality: two equal rectangles are distinct selections
        for i, existing in enumerate(self._primitives):
            if existing is primitive:
                return i
        return None

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add(self, primitive: SelectionPrimitive) -> SelectionPrimitive:
        """
        Append a primitive.

        Returns:
            The primitive, for chaining

        Raises:
            ValueError: If this exact object is already in the model
        """
        if primitive in self:
            raise ValueError("Primitive is already part of the selection")
        self._primitives.append(primitive)
        logger.debug("Added %s (%d primitives)", type(primitive).__name__, len(self))
        return primitive

    def remove(self, primitive: SelectionPrimitive) -> None:
        """
        Remove a primitive by identity.

        Instruction text attached to a removed rectangle's region is dropped
        unless another rectangle still carries the same region id.

        Raises:
            ValueError: If the primitive is not in the model
        """
        index = self._index_of(primitive)
        if index is None:
            raise ValueError("Primitive is not part of the selection")
        del self._primitives[index]
        self._prune_instructions()

    def replace(self, old: SelectionPrimitive, new: SelectionPrimitive) -> SelectionPrimitive:
        """Remove ``old`` and add ``new`` at the end (moves/resizes)."""
        instruction = None
        if isinstance(old, Rectangle) and old.region_id is not None:
            instruction = self._instructions.get(old.region_id)
        self.remove(old)
        self.add(new)
        if instruction is not None and isinstance(new, Rectangle) and new.region_id == old.region_id:
            self._instructions[new.region_id] = instruction
        return new

    def clear(self) -> None:
        self._primitives.clear()
        self._instructions.clear()

    # ------------------------------------------------------------------
    # Enumeration
    # ------------------------------------------------------------------

    def primitives(self) -> Tuple[SelectionPrimitive, ...]:
        """Current primitives in insertion order."""
        return tuple(self._primitives)

    def snapshot(self) -> Tuple[SelectionPrimitive, ...]:
        """
        Immutable copy of the primitives for handing to another thread.

        Primitives themselves are frozen, so a tuple of them is safe to use
        while the model keeps changing.
        """
        return self.primitives()

    # ------------------------------------------------------------------
    # Regions
    # ------------------------------------------------------------------

    def regions(self) -> List[Rectangle]:
        """Rectangles carrying a region id, in insertion order."""
        return [
            p for p in self._primitives
            if isinstance(p, Rectangle) and p.region_id is not None
        ]

    def find_region(self, region_id: int) -> Optional[Rectangle]:
        """Most recently added rectangle with the given region id."""
        for primitive in reversed(self._primitives):
            if isinstance(primitive, Rectangle) and primitive.region_id == region_id:
                return primitive
        return None

    def next_region_id(self) -> int:
        """One past the largest region id in use (1 for an empty model)."""
        ids = [r.region_id for r in self.regions()]
        return max(ids) + 1 if ids else 1

    def set_instruction(self, region_id: int, text: str) -> None:
        """
        Attach instruction text to a region.

        Raises:
            KeyError: If no rectangle carries this region id
        """
        if self.find_region(region_id) is None:
            raise KeyError(f"No region with id {region_id}")
        self._instructions[region_id] = text

    def instruction_for(self, region_id: int) -> Optional[str]:
        return self._instructions.get(region_id)

    def instructions(self) -> Dict[int, str]:
        """Region id -> instruction text, for regions still present."""
        return dict(self._instructions)

    def _prune_instructions(self) -> None:
        keep = {r.region_id for r in self.regions()}
        for region_id in list(self._instructions):
            if region_id not in keep:
                del self._instructions[region_id]
