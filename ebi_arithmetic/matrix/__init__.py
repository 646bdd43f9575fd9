"""
Dense matrices of exact or approximate fractions.

Exact matrices store their cells in 64-bit integers while they fit and switch
to arbitrary-precision integers when an operation would overflow.
"""

from .fraction_matrix import FractionMatrix
from .exact_matrix import ExactFractionMatrix
from .approx_matrix import ApproxFractionMatrix
from .cell import CellType
from .matrix_operations import MatrixOperations, multiply, multiply_vector, vector_multiply
from .gauss import GaussJordan, gauss_jordan, gauss_jordan_reduced, identity_minus, invert

__all__ = [
    'FractionMatrix', 'ExactFractionMatrix', 'ApproxFractionMatrix', 'CellType', 'MatrixOperations', 'multiply',
    'multiply_vector', 'vector_multiply', 'GaussJordan', 'gauss_jordan', 'gauss_jordan_reduced', 'identity_minus',
    'invert'
]
