from pathlib import Path
from typing import Union, Generator, BinaryIO

from idmatrix.containers import unique_labels
from idmatrix.io import BaseReader, DataFile


# Classes --------------------------------------------------------------------------------------------------------------
@DataFile.register('fasta')
class LabelReader(BaseReader):
    """
    Reads the labels of a FASTA(-like) file without decoding any sequence.

    Every line starting with ``>`` opens a record; its label is the first
    whitespace-delimited token of that line. Anything before the first header
    is ignored.

    Examples:
        >>> with open("genomes.fna", "rb") as f:
        ...     for label in LabelReader(f):
        ...         print(label)
    """
    __slots__ = ()
    def __iter__(self) -> Generator[bytes, None, None]:
        for n, line in self._lines():
            if not line.startswith(b'>'): continue
            if not (tokens := line[1:].split(maxsplit=1)):
                raise self.error('Header has no label', n)
            yield tokens[0]


# Functions ------------------------------------------------------------------------------------------------------------
def read_labels(file: Union[str, Path, BinaryIO]) -> tuple[bytes, ...]:
    """
    Reads the labels of a FASTA file in file order.

    Raises:
        ParserError: If a header has no label.
        DuplicateLabelError: If a label occurs twice.
    """
    with DataFile(file, 'fasta') as f: labels = list(f)
    return unique_labels(labels)
