"""exception types raised by `Mat` and `Vec` operations.  All of them derive
from `MatError`, and each also derives from the builtin exception a caller
would naturally catch (`ValueError` or `IndexError`)."""


class MatError(Exception):
    """base class of all namat errors"""

    pass


class DimensionMismatch(MatError, ValueError):
    """raised when dimensions that must agree do not: the inner dimensions of
    a matrix product, the lengths of columns handed to
    `Mat.from_columns()`, or the element count handed to the factory or to
    `Mat.reshape()`"""

    pass


class ShapeMismatch(MatError, ValueError):
    """raised by the elementwise operators when the two operand shapes differ"""

    pass


class MatIndexError(MatError, IndexError):
    """raised when a row, column or linear offset is outside the valid range"""

    pass
