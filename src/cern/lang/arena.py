"""
Node Arena
==========

Owns every syntax-tree node created during one parse.

Nodes live in a list of fixed-size slots and refer to each other by
slot index (NodeRef), never by direct reference. A parent therefore
never owns its children: the arena owns everything, and a node lives
exactly as long as the arena does. There is no per-node free; the whole
arena is reclaimed at once with ``reset()`` (or by dropping it).

Capacity
--------
The store is pre-sized: it never grows past ``capacity`` slots, and an
allocation that does not fit raises ArenaExhaustedError. The default
mirrors the reference sizing of a 4 MiB region carved into 32-byte
slots.

Example:
    >>> arena = Arena(capacity=16)
    >>> ref = arena.construct(TermIdent, token)
    >>> arena[ref]
    TermIdent(token=Token(IDENTIFIER, 'x', 1:1))
"""

from typing import Any, Iterator, NewType, Optional

from cern.lang.errors import ArenaError, ArenaExhaustedError

NodeRef = NewType("NodeRef", int)

REGION_SIZE = 4 * 1024 * 1024
SLOT_SIZE = 32
DEFAULT_CAPACITY = REGION_SIZE // SLOT_SIZE


class Arena:
    """
    Index-based node store.

    Attributes:
        capacity: Maximum number of slots
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity <= 0:
            raise ValueError(f"arena capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._slots: list[Any] = []

    def __len__(self) -> int:
        return len(self._slots)

    def __getitem__(self, ref: NodeRef) -> Any:
        return self.get(ref)

    def __iter__(self) -> Iterator[tuple[NodeRef, Any]]:
        for index, node in enumerate(self._slots):
            yield NodeRef(index), node

    @property
    def remaining(self) -> int:
        """Number of slots still available."""
        return self.capacity - len(self._slots)

    def allocate(self) -> NodeRef:
        """
        Reserve one empty slot.

        Returns:
            Reference to the new slot, which holds None until written

        Raises:
            ArenaExhaustedError: If every slot is in use
        """
        if len(self._slots) >= self.capacity:
            raise ArenaExhaustedError(self.capacity)
        self._slots.append(None)
        return NodeRef(len(self._slots) - 1)

    def construct(self, node_type: type, *args, **kwargs) -> NodeRef:
        """Allocate a slot and build a node of ``node_type`` in it."""
        ref = self.allocate()
        self._slots[ref] = node_type(*args, **kwargs)
        return ref

    def get(self, ref: NodeRef, expected: Optional[type | tuple[type, ...]] = None) -> Any:
        """
        Dereference a node.

        Args:
            ref: Slot reference
            expected: Variant class (or classes) the node must be

        Raises:
            ArenaError: For an out-of-range ref, an empty slot, or a node
                of the wrong variant
        """
        self._check_ref(ref)
        node = self._slots[ref]
        if node is None:
            raise ArenaError(f"node reference {ref} points to an empty slot")
        if expected is not None and not isinstance(node, expected):
            raise ArenaError(
                f"node reference {ref} is a {type(node).__name__}, "
                f"not {_type_names(expected)}"
            )
        return node

    def rewrite(self, ref: NodeRef, node: Any) -> None:
        """
        Replace the node in an existing slot.

        Used to extend a left-associative expression chain in place: the
        slot keeps its identity so refs held elsewhere stay valid.
        """
        self._check_ref(ref)
        self._slots[ref] = node

    def reset(self) -> None:
        """Reclaim every slot at once. All outstanding refs become invalid."""
        self._slots.clear()

    def _check_ref(self, ref: NodeRef) -> None:
        if not isinstance(ref, int) or not 0 <= ref < len(self._slots):
            raise ArenaError(f"invalid node reference {ref!r}")


def _type_names(expected: type | tuple[type, ...]) -> str:
    if isinstance(expected, tuple):
        return " or ".join(t.__name__ for t in expected)
    return expected.__name__
