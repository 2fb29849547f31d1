"""
Command line entry points: ``idt-matrix`` builds a symmetric identity matrix from BLAST output and
``idt-reorder`` reorders a matrix into the leaf order of a dendrogram.
"""
from argparse import ArgumentParser, ArgumentTypeError, Namespace
from dataclasses import dataclass
from pathlib import Path
import sys
from typing import Callable, Sequence
from warnings import catch_warnings, simplefilter, showwarning

from idmatrix import IdmatrixError, IdmatrixWarning, __version__
from idmatrix.engines import MatrixBuilder, MatrixReorderer
from idmatrix.utils import Config


# Classes --------------------------------------------------------------------------------------------------------------
@dataclass
class BuildConfig(Config):
    labels: str = None
    alignments: str = None
    output: str = None
    min_aln_len: int = 0

    def run(self):
        return MatrixBuilder(min_length=self.min_aln_len).run(self.labels, self.alignments, self.output)


@dataclass
class ReorderConfig(Config):
    matrix: str = None
    tree: str = None
    output: str = None

    def run(self):
        return MatrixReorderer().run(self.matrix, self.tree, self.output)


# Functions ------------------------------------------------------------------------------------------------------------
def _non_negative_int(value: str) -> int:
    try: number = int(value)
    except ValueError: raise ArgumentTypeError(f'{value!r} is not an integer') from None
    if number < 0: raise ArgumentTypeError(f'{value!r} is negative')
    return number


def _file_arg(value: str) -> str:
    if not value: raise ArgumentTypeError('empty path')
    return value


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog='idt-matrix',
        description='Build a symmetric identity matrix from pairwise BLAST tabular output.'
    )
    parser.add_argument('labels', type=_file_arg, help='FASTA file; its headers define the labels and their order')
    parser.add_argument('alignments', type=_file_arg,
                        help='BLAST tabular output (qseqid, sseqid, pident, length, ...)')
    parser.add_argument('output', type=_file_arg, help='Output matrix (tab-separated), "-" for stdout')
    parser.add_argument('min_aln_len', type=_non_negative_int,
                        help='Ignore alignments shorter than this many positions')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def reorder_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog='idt-reorder',
        description='Reorder an identity matrix into the leaf order of a dendrogram.'
    )
    parser.add_argument('matrix', type=_file_arg, help='Matrix written by idt-matrix')
    parser.add_argument('tree', type=_file_arg, help='Dendrogram in nested parenthetical notation (first line)')
    parser.add_argument('output', type=_file_arg, help='Output matrix (tab-separated), "-" for stdout')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def _run(parser: ArgumentParser, config_cls: type, argv: Sequence[str] = None) -> int:
    """Parses arguments, runs the command and reports failures on stderr."""
    args: Namespace = parser.parse_args(argv)
    config: Config = config_cls.from_args(args)
    with catch_warnings(record=True) as caught:
        simplefilter('always', IdmatrixWarning)
        try: config.run()
        except (IdmatrixError, OSError, ImportError) as e:
            _report(parser.prog, caught)
            print(f'{parser.prog}: error: {_describe(e)}', file=sys.stderr)
            return 1
    _report(parser.prog, caught)
    return 0


def _report(prog: str, caught: list):
    for w in caught:
        if issubclass(w.category, IdmatrixWarning): print(f'{prog}: warning: {w.message}', file=sys.stderr)
        else: showwarning(w.message, w.category, w.filename, w.lineno)


def _describe(e: BaseException) -> str:
    if isinstance(e, OSError) and e.filename is not None:
        return f'{e.strerror or e}: {Path(e.filename)}'
    return str(e)


def build_main(argv: Sequence[str] = None) -> int:
    return _run(build_parser(), BuildConfig, argv)


def reorder_main(argv: Sequence[str] = None) -> int:
    return _run(reorder_parser(), ReorderConfig, argv)


def _entry(main: Callable[[Sequence[str]], int]) -> Callable[[], None]:
    def wrapper(): raise SystemExit(main())
    return wrapper


build = _entry(build_main)
reorder = _entry(reorder_main)
