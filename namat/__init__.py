"""namat: immutable, type-specialized 2-D matrices with missing-value aware
operations.

A `Mat` stores its elements in one flat, row-major numpy array of a single
element kind (bool, int, long, double or any python object).  Each kind has a
missing-value sentinel, and mapping, folding, row/column selection and the
arithmetic operators all respect it.
"""

from .errors import DimensionMismatch, MatError, MatIndexError, ShapeMismatch
from .logger import Logger
from .mat import Mat, MatAny, MatBool, MatDouble, MatInt, MatLong, matrix
from .namat_warnings import NamatWarning
from .scalar import NA, ScalarTag, Value, get_scalar_tag
from .vec import Vec

__version__ = "0.1.0"
__all__ = [
    "Mat",
    "MatBool",
    "MatInt",
    "MatLong",
    "MatDouble",
    "MatAny",
    "matrix",
    "Vec",
    "NA",
    "Value",
    "ScalarTag",
    "get_scalar_tag",
    "Logger",
    "NamatWarning",
    "MatError",
    "DimensionMismatch",
    "ShapeMismatch",
    "MatIndexError",
]
