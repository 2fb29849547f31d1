"""
Engines turning parsed inputs into identity matrices.
"""
from idmatrix.engines.builder import MatrixBuilder
from idmatrix.engines.reorder import MatrixReorderer
