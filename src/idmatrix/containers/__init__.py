"""
Containers for labels, pairwise scores, identity matrices and dendrogram leaf orders.
"""
from typing import Iterable

from idmatrix import IdmatrixError
from idmatrix.utils import preview


# Exceptions and Warnings ----------------------------------------------------------------------------------------------
class DuplicateLabelError(IdmatrixError):
    """Raised when a label occurs more than once where labels must be unique."""

class LabelMismatchError(IdmatrixError):
    """
    Raised when two label sets that must be equal are not.

    Attributes:
        missing: Labels expected but absent.
        unexpected: Labels present but not expected.
    """
    def __init__(self, message: str, missing: Iterable[bytes] = (), unexpected: Iterable[bytes] = ()):
        self.missing = frozenset(missing)
        self.unexpected = frozenset(unexpected)
        super().__init__(message)


# Functions ------------------------------------------------------------------------------------------------------------
def unique_labels(labels: Iterable[bytes], what: str = 'label') -> tuple[bytes, ...]:
    """
    Returns the labels as a tuple, raising if any label repeats.

    Raises:
        DuplicateLabelError: If any label occurs twice.
    """
    labels = tuple(labels)
    seen = set()
    dupes = []
    for label in labels:
        if label in seen: dupes.append(label)
        seen.add(label)
    if dupes: raise DuplicateLabelError(f'Duplicate {what}s: {preview(set(dupes))}')
    return labels
