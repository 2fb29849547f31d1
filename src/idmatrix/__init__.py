"""
Top-level module: identity matrices from pairwise alignments, reordered by dendrogram leaf order.
"""
from importlib.metadata import version, PackageNotFoundError


# Exceptions and Warnings ----------------------------------------------------------------------------------------------
class IdmatrixError(Exception):
    """Base class for all errors raised by idmatrix."""

class IdmatrixWarning(Warning): pass
class UnknownLabelWarning(IdmatrixWarning): pass


# Constants ------------------------------------------------------------------------------------------------------------
try: __version__ = version(__name__)
except PackageNotFoundError: __version__ = '0.0.0'
