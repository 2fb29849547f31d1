import lzma
import sys
import zlib
from io import IOBase
from typing import Union, BinaryIO, Optional
from pathlib import Path
from importlib import import_module

from idmatrix.utils.resources import RESOURCES


# Constants ------------------------------------------------------------------------------------------------------------
DECOMPRESSION_ERRORS = (EOFError, lzma.LZMAError, zlib.error)
if RESOURCES.has_module('zstandard'):
    from zstandard import ZstdError
    DECOMPRESSION_ERRORS += (ZstdError,)


# Classes --------------------------------------------------------------------------------------------------------------
class PeekableHandle:
    """
    Holds back the first bytes of a non-seekable stream (stdin, pipes) so they
    can be checked for a compression signature and then read again.
    """
    __slots__ = ('_stream', '_buffer')

    def __init__(self, stream: BinaryIO, max_peek: int = 4096):
        self._stream = stream
        self._buffer = stream.read(max_peek)

    def peek(self, size: int = -1) -> bytes: return self._buffer if size < 0 else self._buffer[:size]

    def read(self, size: int = -1) -> bytes:
        if size is None or size < 0:
            chunk, self._buffer = self._buffer, b''
            return chunk + self._stream.read()
        chunk, self._buffer = self._buffer[:size], self._buffer[size:]
        if len(chunk) < size: chunk += self._stream.read(size - len(chunk))
        return chunk

    def __iter__(self):
        lines, self._buffer = self._buffer.splitlines(keepends=True), b''
        if lines and not lines[-1].endswith(b'\n'): lines[-1] += self._stream.readline()
        yield from lines
        yield from self._stream

    def close(self):
        if hasattr(self._stream, 'close'): self._stream.close()


class Xopen:
    """
    Opens paths, standard streams and file objects, transparently handling compression.

    Reading detects gzip, bzip2, xz and zstd from magic bytes; writing picks the
    codec from the file suffix. The path ``-`` maps to stdin or stdout.

    Examples:
        >>> with Xopen("hits.tsv.gz") as f:
        ...     first = f.readline()
    """
    _MAGIC = {
        b'\x1f\x8b': 'gzip',
        b'\x42\x5a\x68': 'bz2',
        b'\xfd7zXZ\x00': 'lzma',
        b'\x28\xb5\x2f\xfd': 'zstandard'
    }
    _EXT_TO_PKG = {'gz': 'gzip', 'bz2': 'bz2', 'xz': 'lzma', 'zst': 'zstandard'}
    _MIN_N_BYTES = max(len(i) for i in _MAGIC.keys())
    _OPEN_FUNCS = {}

    def __init__(self, file: Union[str, Path, BinaryIO], mode: str = 'rb'):
        """
        Args:
            file: File path (str or Path), ``-``, or an existing binary file object.
            mode: 'rb' or 'wb'.
        """
        self.file = file
        self.mode = mode
        self._handle: Optional[BinaryIO] = None
        self._raw: Optional[BinaryIO] = None
        self._close_on_exit = False

    @property
    def name(self) -> str:
        """A printable name for error messages."""
        if isinstance(self.file, (str, Path)): return str(self.file)
        return getattr(self.file, 'name', '<stream>')

    def __enter__(self) -> BinaryIO:
        try: self._handle = self._open()
        except BaseException:
            if self._raw is not None: self._raw.close()
            raise
        return self._handle

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._handle is None: return
        if self._close_on_exit:
            self._handle.close()
            # Codec wrappers do not close the file object they were given
            if self._raw is not None and self._raw is not self._handle: self._raw.close()
        elif 'w' in self.mode and hasattr(self._handle, 'flush'): self._handle.flush()

    def _get_opener(self, pkg_name: str):
        """
        Retrieves the open function of a compression module, importing it on first use.

        Raises:
            ModuleNotFoundError: If the module is not installed (e.g. zstandard).
        """
        if pkg_name not in self._OPEN_FUNCS:
            try: self._OPEN_FUNCS[pkg_name] = import_module(pkg_name).open
            except ImportError as e:
                raise ModuleNotFoundError(f"Compression module '{pkg_name}' not installed.") from e
        return self._OPEN_FUNCS[pkg_name]

    def _open(self) -> BinaryIO:
        writing = 'w' in self.mode or 'a' in self.mode
        should_close = False

        if isinstance(self.file, IOBase): raw_stream = self.file
        elif str(self.file) in {'-', 'stdin'} and not writing: raw_stream = sys.stdin.buffer
        elif str(self.file) in {'-', 'stdout'} and writing: raw_stream = sys.stdout.buffer
        else:
            path = Path(self.file).expanduser()
            if writing:
                self._close_on_exit = True
                if pkg := self._EXT_TO_PKG.get(path.suffix.lower().lstrip('.')):
                    return self._get_opener(pkg)(path, mode=self.mode)
                return open(path, mode=self.mode)
            raw_stream = open(path, mode='rb')
            self._raw = raw_stream
            should_close = True

        if writing: return raw_stream

        # Seekable streams: sniff then rewind
        try:
            if raw_stream.seekable():
                pos = raw_stream.tell()
                start = raw_stream.read(self._MIN_N_BYTES)
                raw_stream.seek(pos)
                if should_close: self._close_on_exit = True
                for magic, pkg in self._MAGIC.items():
                    if start.startswith(magic): return self._get_opener(pkg)(raw_stream, mode='rb')
                return raw_stream
        except (AttributeError, ValueError, OSError): pass

        peekable = PeekableHandle(raw_stream)
        start = peekable.peek(self._MIN_N_BYTES)
        if should_close: self._close_on_exit = True
        for magic, pkg in self._MAGIC.items():
            if start.startswith(magic): return self._get_opener(pkg)(peekable, mode='rb')
        return peekable
