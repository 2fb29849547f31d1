"""
Reordering of identity matrices into dendrogram leaf order.
"""
from pathlib import Path
from typing import Union, Iterable, BinaryIO

from idmatrix.containers import LabelMismatchError
from idmatrix.containers.matrix import IdentityMatrix
from idmatrix.containers.tree import LeafOrder
from idmatrix.io.newick import read_leaf_order
from idmatrix.io.tabular import read_matrix, write_matrix
from idmatrix.utils import as_bytes


# Classes --------------------------------------------------------------------------------------------------------------
class MatrixReorderer:
    """
    Permutes a matrix so its rows and columns follow the leaf order of a tree.

    Cells are moved, never re-parsed, and the corner cell is kept.

    Examples:
        >>> m = IdentityMatrix([b'x', b'y'], [[b'1.00', b'2.00'], [b'2.00', b'3.00']])
        >>> MatrixReorderer().reorder(m, [b'y', b'x']).row(b'y')
        (b'3.00', b'2.00')
    """
    __slots__ = ()

    def reorder(self, matrix: IdentityMatrix, order: Union[LeafOrder, Iterable[bytes]]) -> IdentityMatrix:
        """
        Raises:
            LabelMismatchError: If the order and the matrix do not hold exactly the same labels.
        """
        return matrix.reorder(order.labels if isinstance(order, LeafOrder) else map(as_bytes, order))

    def run(self, matrix_file: Union[str, Path, BinaryIO], tree_file: Union[str, Path, BinaryIO],
            output: Union[str, Path, BinaryIO]) -> IdentityMatrix:
        """
        Reads a matrix and a tree, reorders the matrix and writes it to `output`.

        Nothing is written unless both inputs parse and their labels agree.
        """
        order = read_leaf_order(tree_file)
        matrix = read_matrix(matrix_file)
        try: reordered = self.reorder(matrix, order)
        except LabelMismatchError as e:
            raise LabelMismatchError(f'Tree {_name(tree_file)} and matrix {_name(matrix_file)} disagree: {e}',
                                     e.missing, e.unexpected) from e
        write_matrix(reordered, output)
        return reordered


# Functions ------------------------------------------------------------------------------------------------------------
def _name(file) -> str:
    if isinstance(file, (str, Path)): return str(file)
    return getattr(file, 'name', '<stream>')
