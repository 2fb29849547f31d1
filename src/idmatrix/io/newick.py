"""
Leaf order extraction from dendrograms in nested parenthetical (Newick-style) notation, e.g.
``(('a':0,'b':0):190.2,'c':164.5);``.
"""
from pathlib import Path
from re import compile as regex
from typing import Union, Generator, BinaryIO

from idmatrix.containers.tree import LeafOrder
from idmatrix.io import BaseReader, DataFile, TreeFormatError


# Constants ------------------------------------------------------------------------------------------------------------
_SEPARATORS = regex(rb'[(),;\s]+')
_BRANCH_LENGTH = b':'
_QUOTE = b"'"


# Functions ------------------------------------------------------------------------------------------------------------
def parse_leaf_order(text: Union[bytes, str]) -> LeafOrder:
    """
    Recovers the leaf labels of a tree in left-to-right, first-seen order.

    The text is split on runs of parentheses, commas, semicolons and whitespace.
    In each token the part before the first ``:`` is the candidate label, with
    surrounding single quotes removed. Empty candidates (bare branch lengths) are
    skipped and repeated labels keep their first index.

    Args:
        text: One line of tree notation.

    Returns:
        The LeafOrder, possibly empty.

    Examples:
        >>> parse_leaf_order(b"(('a':0,'b':0):190.2,'c':164.5);").labels
        (b'a', b'b', b'c')
    """
    if isinstance(text, str): text = text.encode()
    order = LeafOrder()
    for token in _SEPARATORS.split(text):
        if not token: continue
        if label := token.partition(_BRANCH_LENGTH)[0].strip(_QUOTE): order.add(label)
    return order


# Classes --------------------------------------------------------------------------------------------------------------
@DataFile.register('newick')
class NewickReader(BaseReader):
    """
    Reads the leaf order of the tree on the first line of a file.

    Examples:
        >>> with open("tree.dnd", "rb") as f:
        ...     order = NewickReader(f).read()
    """
    __slots__ = ()

    def read(self) -> LeafOrder:
        """
        Raises:
            TreeFormatError: If the first line holds no leaf labels.
        """
        first = next(self._lines(), (1, b''))[1]
        if not (order := parse_leaf_order(first)):
            raise self.error('No leaf labels found on the first line of the tree', 1, TreeFormatError)
        return order

    def __iter__(self) -> Generator[bytes, None, None]: yield from self.read()


def read_leaf_order(file: Union[str, Path, BinaryIO]) -> LeafOrder:
    """Reads the leaf order of the tree stored in `file`."""
    with DataFile(file, 'newick') as f: return f.reader().read()
