"""
Symmetric identity matrices from directional alignment scores.
"""
from pathlib import Path
from typing import Union, Iterable, BinaryIO
from warnings import warn

import numpy as np

from idmatrix import UnknownLabelWarning
from idmatrix.containers import unique_labels
from idmatrix.containers.matrix import IdentityMatrix
from idmatrix.containers.scores import Hit, ScoreMap
from idmatrix.io import DataFile
from idmatrix.io.seq import read_labels
from idmatrix.io.tabular import write_matrix
from idmatrix.utils import preview
from idmatrix.utils.resources import jit


# Classes --------------------------------------------------------------------------------------------------------------
class MatrixBuilder:
    """
    Folds pairwise alignment hits into a symmetric identity matrix.

    For each pair of labels the cell is the mean of the two directional scores
    when both exist, the one score when only one exists, and zero otherwise.
    The diagonal follows the same rule, so a label without a self hit scores
    zero against itself.

    Args:
        min_length: Hits with an alignment length below this are ignored.
        precision: Number of decimals written per cell.

    Examples:
        >>> hits = [Hit(b'A', b'B', 90.0, 500), Hit(b'B', b'A', 80.0, 500)]
        >>> MatrixBuilder(min_length=100).build([b'A', b'B'], hits)[b'A', b'B']
        b'85.00'
    """
    __slots__ = ('min_length', 'precision')

    def __init__(self, min_length: int = 0, precision: int = 2):
        if min_length < 0: raise ValueError(f'min_length must be >= 0, got {min_length}')
        self.min_length = min_length
        self.precision = precision

    def scores(self, hits: Iterable[Hit]) -> ScoreMap:
        """Filters hits by length and folds them into a ScoreMap (last hit per pair wins)."""
        return ScoreMap.from_hits(hits, self.min_length)

    def build(self, labels: Iterable[bytes], hits: Union[ScoreMap, Iterable[Hit]]) -> IdentityMatrix:
        """
        Builds the matrix with rows and columns in `labels` order.

        Args:
            labels: Unique labels.
            hits: Alignment hits, or a ScoreMap already folded from them.

        Returns:
            An IdentityMatrix with an empty corner cell.

        Raises:
            DuplicateLabelError: If a label repeats.
        """
        labels = unique_labels(labels)
        scores = hits if isinstance(hits, ScoreMap) else self.scores(hits)
        if unknown := scores.labels().difference(labels):
            warn(f'{len(unknown)} alignment label(s) are not in the label set and were ignored: '
                 f'{preview(unknown)}', UnknownLabelWarning, stacklevel=2)

        resolved = np.zeros((len(labels), len(labels)), dtype=np.float64)
        _symmetrize_kernel(scores.to_array(labels), resolved)

        fmt = b'%%.%df' % self.precision
        n = len(labels)
        cells = np.empty((n, n), dtype=object)
        for i in range(n):
            for j in range(i, n): cells[i, j] = cells[j, i] = fmt % resolved[i, j]
        return IdentityMatrix(labels, cells)

    def run(self, labels_file: Union[str, Path, BinaryIO], hits_file: Union[str, Path, BinaryIO],
            output: Union[str, Path, BinaryIO]) -> IdentityMatrix:
        """
        Reads labels and hits, builds the matrix and writes it to `output`.

        Nothing is written unless both inputs parse completely.
        """
        labels = read_labels(labels_file)
        with DataFile(hits_file, 'blast') as f: scores = self.scores(f)
        matrix = self.build(labels, scores)
        write_matrix(matrix, output)
        return matrix


# Kernels --------------------------------------------------------------------------------------------------------------
@jit(nopython=True, cache=True)
def _symmetrize_kernel(scores, out):
    """
    Resolves each unordered pair (i, j), j >= i, from scores[i, j] and scores[j, i]
    (NaN = absent) and writes the value to both out[i, j] and out[j, i].
    """
    n = scores.shape[0]
    for i in range(n):
        for j in range(i, n):
            fwd = scores[i, j]
            rev = scores[j, i]
            if not np.isnan(fwd) and not np.isnan(rev): v = (fwd + rev) / 2.0
            elif not np.isnan(fwd): v = fwd
            elif not np.isnan(rev): v = rev
            else: v = 0.0
            out[i, j] = v
            out[j, i] = v
