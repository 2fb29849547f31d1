"""
Module for reading label, alignment, matrix and tree files and writing matrices.
"""
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Union, Generator, BinaryIO, Type

from idmatrix import IdmatrixError
from idmatrix.io.open import Xopen, DECOMPRESSION_ERRORS


# Exceptions and Warnings ----------------------------------------------------------------------------------------------
class ParserError(IdmatrixError):
    """
    Raised when an input file breaks its format.

    Attributes:
        source: Name of the offending input.
        line: 1-based line number, when known.
    """
    def __init__(self, message: str, source: str = None, line: int = None):
        self.source = source
        self.line = line
        self.reason = message
        where = source or '<input>'
        if line is not None: where += f':{line}'
        super().__init__(f'{where}: {message}')

class MatrixFormatError(ParserError):
    """Raised when a matrix file is not square or its row labels disagree with its header."""

class TreeFormatError(ParserError):
    """Raised when a tree file yields no leaf labels."""


# Classes --------------------------------------------------------------------------------------------------------------
class BaseReader(ABC):
    """Abstract base class for readers over an open binary handle."""
    __slots__ = ('_handle', '_name', '_iterator')
    def __init__(self, handle: BinaryIO, name: str = None, **kwargs):
        """
        Initializes the reader.

        Args:
            handle: The open binary handle to read from.
            name: Name of the input used in error messages (defaults to the handle's name).
        """
        self._handle = handle
        self._name = name or getattr(handle, 'name', None) or '<stream>'
        self._iterator = None

    @property
    def name(self) -> str: return str(self._name)
    @abstractmethod
    def __iter__(self) -> Generator: ...
    def __enter__(self): return self
    def __exit__(self, exc_type, exc_val, exc_tb): self.close()
    def __next__(self):
        if self._iterator is None: self._iterator = self.__iter__()
        return next(self._iterator)

    def close(self):
        """Closes the reader. The handle belongs to the caller."""
        pass

    def _lines(self) -> Generator[tuple[int, bytes], None, None]:
        """
        Yields (line number, line without its terminator).

        Raises:
            ParserError: If a compressed input is corrupt or ends early.
        """
        n = 0
        try:
            for n, line in enumerate(self._handle, 1): yield n, line.rstrip(b'\r\n')
        except DECOMPRESSION_ERRORS as e:
            raise self.error(f'Compressed input is corrupt or truncated ({e})', n + 1) from e

    def error(self, message: str, line: int = None, cls: Type[ParserError] = ParserError) -> ParserError:
        """Builds a ParserError that points at this input."""
        return cls(message, self.name, line)


class BaseWriter(ABC):
    """
    Abstract base class for writers.

    Examples:
        >>> with MatrixWriter("out.tsv") as w:
        ...     w.write(matrix)
    """
    __slots__ = ('_opener', '_handle')
    def __init__(self, file: Union[str, Path, BinaryIO], mode: str = 'wb'):
        self._opener = Xopen(file, mode=mode)
        self._handle = None

    def __enter__(self):
        self._handle = self._opener.__enter__()
        self.write_header()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._opener.__exit__(exc_type, exc_val, exc_tb)

    def write(self, *items):
        """Writes each item; lists and tuples are unpacked."""
        for item in items:
            if isinstance(item, (list, tuple)):
                for sub_item in item: self.write_one(sub_item)
            else: self.write_one(item)

    @abstractmethod
    def write_one(self, item): ...

    def write_header(self):
        """Writes the file header if applicable."""
        pass


class FileFormat(str, Enum):
    """Supported file formats."""
    FASTA = 'fasta'
    BLAST = 'blast'
    MATRIX = 'matrix'
    NEWICK = 'newick'


class DataFile:
    """
    Opens an input by path (or handle) and iterates it with the reader registered for its format.

    Examples:
        >>> with DataFile("genomes.fna", 'fasta') as f:
        ...     labels = list(f)
    """
    __slots__ = ('_opener', '_handle', '_format', '_reader_kwargs')
    _READERS: dict['FileFormat', Type[BaseReader]] = {}
    _WRITERS: dict['FileFormat', Type[BaseWriter]] = {}
    Format = FileFormat

    def __init__(self, file: Union[str, Path, BinaryIO], fmt: Union[str, FileFormat], **reader_kwargs):
        self._opener = Xopen(file, mode='rb')
        self._handle = None
        self._format = self.Format(fmt)
        self._reader_kwargs = reader_kwargs

    @property
    def format(self) -> FileFormat: return self._format
    @property
    def name(self) -> str: return self._opener.name

    @classmethod
    def register(cls, fmt: Union[str, FileFormat]):
        """Class decorator registering a reader or writer for a format."""
        fmt = cls.Format(fmt)
        def decorator(klass):
            if issubclass(klass, BaseReader): cls._READERS[fmt] = klass
            elif issubclass(klass, BaseWriter): cls._WRITERS[fmt] = klass
            else: raise TypeError(f'{klass.__name__} is neither a reader nor a writer')
            return klass
        return decorator

    @classmethod
    def writer(cls, file: Union[str, Path, BinaryIO], fmt: Union[str, FileFormat], **kwargs) -> BaseWriter:
        """Returns the writer registered for `fmt`, ready to be used as a context manager."""
        return cls._WRITERS[cls.Format(fmt)](file, **kwargs)

    def reader(self) -> BaseReader:
        if self._handle is None: raise RuntimeError('DataFile must be opened before reading')
        return self._READERS[self._format](self._handle, name=self.name, **self._reader_kwargs)

    def __iter__(self):
        if self._handle is not None:
            yield from self.reader()
            return
        with self: yield from self.reader()

    def __enter__(self):
        self._handle = self._opener.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._opener.__exit__(exc_type, exc_val, exc_tb)
        self._handle = None


# Register the concrete readers and writers
from idmatrix.io import seq, tabular, newick  # noqa: E402,F401
