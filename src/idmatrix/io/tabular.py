from abc import abstractmethod
from math import isfinite
from pathlib import Path
from typing import Union, Generator, BinaryIO

from idmatrix.containers import unique_labels, DuplicateLabelError
from idmatrix.containers.matrix import IdentityMatrix
from idmatrix.containers.scores import Hit
from idmatrix.io import BaseReader, BaseWriter, DataFile, MatrixFormatError


# Classes --------------------------------------------------------------------------------------------------------------
class TabularReader(BaseReader):
    """Base class for readers of tab-delimited formats."""
    _delim = b'\t'
    _min_cols: int = 1
    __slots__ = ()

    def _read_parts(self) -> Generator[tuple[int, list[bytes]], None, None]:
        """Yields (line number, fields), skipping blank and ``#`` comment lines."""
        delim, min_cols = self._delim, self._min_cols
        for n, line in self._lines():
            if not line.strip() or line.startswith(b'#'): continue
            parts = line.split(delim)
            if len(parts) < min_cols:
                raise self.error(f'Expected at least {min_cols} tab-separated fields, found {len(parts)}', n)
            yield n, parts

    def __iter__(self) -> Generator:
        parse = self.parse_row
        for n, parts in self._read_parts(): yield parse(parts, n)

    @abstractmethod
    def parse_row(self, parts: list[bytes], line: int = None):
        """
        Parses a single row split by delimiter.

        Args:
            parts: List of column bytes.
            line: Line number, for error messages.
        """
        pass


@DataFile.register('blast')
class BlastReader(TabularReader):
    """
    Reader for BLAST tabular output (``-outfmt 6`` / ``7``).

    Only the first four columns are used: query, subject, percent identity and
    alignment length. Further columns are ignored.

    Examples:
        >>> with open("all_vs_all.tsv", "rb") as f:
        ...     for hit in BlastReader(f):
        ...         print(hit.identity)
    """
    _min_cols = 4
    __slots__ = ()

    def parse_row(self, parts: list[bytes], line: int = None) -> Hit:
        """
        Parses a BLAST row.

        Args:
            parts: List of column bytes.
            line: Line number, for error messages.

        Returns:
            A Hit object.

        Raises:
            ParserError: If the identity is not a finite number or the length is not a non-negative integer.
        """
        try: identity = float(parts[2])
        except ValueError: identity = None
        if identity is None or not isfinite(identity):
            raise self.error(f'Identity {parts[2].decode(errors="replace")!r} is not a number', line)
        try: length = int(parts[3])
        except ValueError: length = -1
        if length < 0:
            raise self.error(
                f'Alignment length {parts[3].decode(errors="replace")!r} is not a non-negative integer', line)
        return Hit(parts[0], parts[1], identity, length)


@DataFile.register('matrix')
class MatrixReader(TabularReader):
    """
    Reader for tab-separated square matrices.

    The first line holds the corner cell followed by the column labels; every
    following line holds a row label followed by one cell per column. Row labels
    must repeat the column labels in the same order.

    Examples:
        >>> with open("identity.tsv", "rb") as f:
        ...     matrix = MatrixReader(f).read()
    """
    __slots__ = ()

    def read(self) -> IdentityMatrix:
        """
        Reads the whole matrix.

        Raises:
            MatrixFormatError: If the matrix is empty, not square, or mislabelled.
        """
        header, labels, rows = None, (), []
        for n, line in self._lines():
            if header is None:
                header = line.split(self._delim)
                try: labels = unique_labels(header[1:], 'column label')
                except DuplicateLabelError as e: raise self.error(str(e), n, MatrixFormatError) from e
                continue
            if not line: continue
            rows.append(self.parse_row(line.split(self._delim), n, labels, len(rows)))
        if header is None: raise self.error('Matrix file is empty', cls=MatrixFormatError)
        if len(rows) != len(labels):
            raise self.error(f'Expected {len(labels)} rows, found {len(rows)}', cls=MatrixFormatError)
        return IdentityMatrix.from_rows(labels, rows, header[0])

    def __iter__(self) -> Generator[IdentityMatrix, None, None]: yield self.read()

    def parse_row(self, parts: list[bytes], line: int = None, labels: tuple[bytes, ...] = (),
                  i: int = 0) -> list[bytes]:
        """Checks a row against the header and returns its cells."""
        if i >= len(labels): raise self.error(f'More rows than the {len(labels)} columns', line, MatrixFormatError)
        if parts[0] != labels[i]:
            raise self.error(f'Row label {parts[0].decode(errors="replace")!r} does not match column '
                             f'{labels[i].decode(errors="replace")!r}', line, MatrixFormatError)
        if len(parts) - 1 != len(labels):
            raise self.error(f'Expected {len(labels)} cells, found {len(parts) - 1}', line, MatrixFormatError)
        return parts[1:]


@DataFile.register('matrix')
class MatrixWriter(BaseWriter):
    """
    Writer for tab-separated square matrices.

    Examples:
        >>> with MatrixWriter("identity.tsv") as w:
        ...     w.write(matrix)
    """
    __slots__ = ()
    _FLUSH_EVERY = 1000

    def write_one(self, matrix: IdentityMatrix):
        if not isinstance(matrix, IdentityMatrix):
            raise TypeError(f"MatrixWriter expects IdentityMatrix objects, got {type(matrix)}")
        lines = [b'\t'.join((matrix.corner, *matrix.labels)) + b'\n']
        for label, cells in matrix.rows():
            lines.append(b'\t'.join((label, *cells)) + b'\n')
            if len(lines) >= self._FLUSH_EVERY:
                self._handle.write(b''.join(lines))
                lines = []
        if lines: self._handle.write(b''.join(lines))


# Functions ------------------------------------------------------------------------------------------------------------
def read_hits(file: Union[str, Path, BinaryIO]) -> list[Hit]:
    """Reads every hit of a BLAST tabular file, in file order."""
    with DataFile(file, 'blast') as f: return list(f)


def read_matrix(file: Union[str, Path, BinaryIO]) -> IdentityMatrix:
    """Reads a tab-separated matrix file."""
    with DataFile(file, 'matrix') as f: return f.reader().read()


def write_matrix(matrix: IdentityMatrix, file: Union[str, Path, BinaryIO]):
    """Writes a matrix in the tab-separated format read by `read_matrix`."""
    with DataFile.writer(file, 'matrix') as w: w.write(matrix)
