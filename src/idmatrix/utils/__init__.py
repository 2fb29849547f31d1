"""
Module containing utility functions and classes shared by the readers, engines and CLI.
"""
from argparse import Namespace
from dataclasses import dataclass, fields
from typing import Iterable


# Classes --------------------------------------------------------------------------------------------------------------
@dataclass
class Config:
    """
    Config parent class that can conveniently set attributes from CLI args
    """

    @classmethod
    def from_args(cls, args: Namespace):
        """
        Sets attributes of the class from a Namespace object (e.g. from argparse)

        Parameters
        ----------
        args : :class:`argparse.Namespace`
            :class:`argparse.Namespace` object containing attributes to set

        Returns
        -------
        cls
            Class instance with attributes set from args

        """
        return cls(**{f.name: getattr(args, f.name) for f in fields(cls) if hasattr(args, f.name)})


# Functions ------------------------------------------------------------------------------------------------------------
def as_bytes(value) -> bytes:
    """Coerces a label or path-like string to bytes."""
    if isinstance(value, bytes): return value
    if isinstance(value, (bytearray, memoryview)): return bytes(value)
    return str(value).encode()


def preview(items: Iterable[bytes], limit: int = 5) -> str:
    """
    Renders a short, human-readable list of labels for error messages.

    Examples:
        >>> preview([b'a', b'b'])
        "'a', 'b'"
    """
    items = sorted(items)
    shown = ', '.join(repr(i.decode(errors='replace')) for i in items[:limit])
    if len(items) > limit: shown += f' (+{len(items) - limit} more)'
    return shown
