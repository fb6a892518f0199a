"""the concrete `Mat` representations, one per element kind.  Each owns a
single flat, row-major `numpy.ndarray` of its kind's dtype."""
import numpy as np

from ..scalar import ANY, BOOL, DOUBLE, INT, LONG
from . import mat_math
from .mat_handler import Mat, register


class _PrimitiveMat(Mat):
    """shared transpose strategy of the fixed-width kinds: a square matrix is
    transposed in place on a clone of its data, a rectangular one tile by tile
    into a fresh buffer"""

    def _transpose(self):
        if self.is_empty:
            return self
        r, c = self.num_rows, self.num_cols
        if self.is_square:
            buf = self._values.copy()
            mat_math.square_transpose(r, buf)
        else:
            buf = np.empty_like(self._values)
            mat_math.block_transpose(r, c, self._values, buf)
        t = type(self)(c, r, buf)
        t._transposed.set(self)
        return t


@register
class MatBool(_PrimitiveMat):
    """a `Mat` of booleans"""

    scalar_tag = BOOL


@register
class MatInt(_PrimitiveMat):
    """a `Mat` of 32-bit integers"""

    scalar_tag = INT


@register
class MatLong(_PrimitiveMat):
    """a `Mat` of 64-bit integers"""

    scalar_tag = LONG


@register
class MatDouble(_PrimitiveMat):
    """a `Mat` of double precision floats"""

    scalar_tag = DOUBLE

    def to_double_array(self):
        return self._values


@register
class MatAny(Mat):
    """a `Mat` of arbitrary python objects, missing as `None`"""

    scalar_tag = ANY

    def _transpose(self):
        if self.is_empty:
            return self
        r, c = self.num_rows, self.num_cols
        buf = self._values.reshape(r, c).T.copy().reshape(-1)
        t = MatAny(c, r, buf)
        t._transposed.set(self)
        return t
