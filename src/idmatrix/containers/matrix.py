"""Container for square, labelled identity matrices."""
from typing import Iterable, Sequence

import numpy as np

from idmatrix.containers import LabelMismatchError, unique_labels
from idmatrix.utils import preview


# Classes --------------------------------------------------------------------------------------------------------------
class IdentityMatrix:
    """
    A square table of identity scores with one row and one column per label.

    Cells are kept as the formatted bytes they were built or read as, so copying
    a matrix around never changes how its values print.

    Args:
        labels: Row (and column) labels, unique.
        cells: (N x N) array-like of ``bytes`` cells.
        corner: The top-left header cell.

    Examples:
        >>> m = IdentityMatrix([b'x', b'y'], [[b'100.00', b'85.00'], [b'85.00', b'100.00']])
        >>> m[b'x', b'y']
        b'85.00'
    """
    __slots__ = ('_labels', '_index', '_cells', 'corner')

    def __init__(self, labels: Iterable[bytes], cells, corner: bytes = b''):
        self._labels = unique_labels(labels, 'matrix label')
        n = len(self._labels)
        self._cells = np.empty((n, n), dtype=object)
        if n:
            cells = np.asarray(cells, dtype=object)
            if cells.shape != (n, n):
                raise ValueError(f'Expected a {n}x{n} array of cells, got shape {cells.shape}')
            self._cells[:] = cells
        self._cells.flags.writeable = False
        self._index = {label: i for i, label in enumerate(self._labels)}
        self.corner = corner

    @classmethod
    def from_rows(cls, labels: Sequence[bytes], rows: Iterable[Sequence[bytes]], corner: bytes = b''):
        rows = list(rows)
        cells = np.empty((len(rows), len(labels)), dtype=object)
        for i, row in enumerate(rows): cells[i, :] = list(row)
        return cls(labels, cells, corner)

    @property
    def labels(self) -> tuple[bytes, ...]: return self._labels
    @property
    def cells(self) -> np.ndarray:
        """The read-only (N x N) object array of cells."""
        return self._cells
    @property
    def shape(self) -> tuple[int, int]: return self._cells.shape

    def __len__(self) -> int: return len(self._labels)
    def __contains__(self, label: bytes) -> bool: return label in self._index
    def __iter__(self): return iter(self._labels)

    def index(self, label: bytes) -> int:
        try: return self._index[label]
        except KeyError: raise KeyError(f'Label {label!r} not in matrix') from None

    def __getitem__(self, item: tuple[bytes, bytes]) -> bytes:
        a, b = item
        return self._cells[self.index(a), self.index(b)]

    def row(self, label: bytes) -> tuple[bytes, ...]: return tuple(self._cells[self.index(label)])

    def rows(self):
        """Yields (label, cells) pairs in row order."""
        for i, label in enumerate(self._labels): yield label, tuple(self._cells[i])

    def values(self) -> np.ndarray:
        """Parses the cells into an (N x N) float64 array."""
        out = np.zeros(self.shape, dtype=np.float64)
        for (i, j), cell in np.ndenumerate(self._cells): out[i, j] = float(cell)
        return out

    def is_symmetric(self) -> bool:
        return bool(np.all(self._cells == self._cells.T))

    def reorder(self, order: Iterable[bytes]) -> 'IdentityMatrix':
        """
        Permutes rows and columns into `order`, keeping the corner cell.

        Args:
            order: Every label of this matrix, each exactly once, in the new order.

        Returns:
            A new matrix with ``new[i, j] == old[order[i], order[j]]``.

        Raises:
            DuplicateLabelError: If `order` repeats a label.
            LabelMismatchError: If `order` and the matrix do not hold the same labels.
        """
        order = unique_labels(order, 'order label')
        wanted, have = set(order), set(self._labels)
        if wanted != have:
            missing, unexpected = wanted - have, have - wanted
            problems = []
            if missing: problems.append(f'not in matrix: {preview(missing)}')
            if unexpected: problems.append(f'not in order: {preview(unexpected)}')
            raise LabelMismatchError(
                f'Order has {len(order)} labels, matrix has {len(self._labels)}; ' + '; '.join(problems),
                missing=missing, unexpected=unexpected
            )
        idx = np.fromiter((self._index[label] for label in order), dtype=np.intp, count=len(order))
        return IdentityMatrix(order, self._cells[np.ix_(idx, idx)], self.corner)

    def __eq__(self, other):
        if not isinstance(other, IdentityMatrix): return NotImplemented
        return (self._labels == other._labels and self.corner == other.corner and
                bool(np.all(self._cells == other._cells)))

    def __repr__(self): return f"IdentityMatrix(n={len(self._labels)})"
