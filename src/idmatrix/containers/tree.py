"""Container for the leaf order of a dendrogram."""
from typing import Iterable, Iterator


# Classes --------------------------------------------------------------------------------------------------------------
class LeafOrder:
    """
    Leaf labels of a dendrogram in left-to-right, first-seen order.

    Adding a label that is already present is a no-op, so every label keeps the
    index it was first given.

    Examples:
        >>> order = LeafOrder([b'a', b'b', b'a', b'c'])
        >>> order.labels, order.index(b'c')
        ((b'a', b'b', b'c'), 2)
    """
    __slots__ = ('_index',)

    def __init__(self, labels: Iterable[bytes] = ()):
        self._index: dict[bytes, int] = {}
        for label in labels: self.add(label)

    def add(self, label: bytes) -> int:
        """Adds a leaf if unseen and returns its index."""
        if (i := self._index.get(label)) is None: i = self._index[label] = len(self._index)
        return i

    @property
    def labels(self) -> tuple[bytes, ...]: return tuple(self._index)

    def index(self, label: bytes) -> int:
        try: return self._index[label]
        except KeyError: raise KeyError(f'Leaf {label!r} not in tree') from None

    def __len__(self) -> int: return len(self._index)
    def __iter__(self) -> Iterator[bytes]: return iter(self._index)
    def __contains__(self, label: bytes) -> bool: return label in self._index
    def __eq__(self, other):
        if isinstance(other, LeafOrder): return self.labels == other.labels
        return NotImplemented
    def __repr__(self): return f"LeafOrder(n={len(self._index)})"
