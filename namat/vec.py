"""a minimal, immutable 1-D companion to `Mat`.  Rows and columns extracted
from a matrix come back as `Vec` instances and `Mat.from_columns()` accepts
them."""
import operator

import numpy as np

from .errors import MatIndexError
from .scalar import get_scalar_tag, infer_tag, tag_for_dtype


class Vec(object):
    """immutable, typed, missing-aware 1-D container

    Args:
        values (`numpy.ndarray` or sequence): the elements.  An ndarray of the
            matching dtype is wrapped without a copy and made read-only.
        kind (`str` or `ScalarTag`, optional): element kind.  If `None`, the
            kind is inferred from the ndarray dtype or the python values.

    Example::

        v = namat.Vec([1.0, None, 3.0])
        assert v.has_na
        assert v.at(1) is namat.NA

    """

    def __init__(self, values, kind=None):
        if kind is not None:
            tag = get_scalar_tag(kind)
        elif isinstance(values, np.ndarray):
            tag = tag_for_dtype(values.dtype)
        else:
            values = list(values)
            tag = infer_tag(values)
        arr = tag.as_array(values)
        arr.flags.writeable = False
        self.__values = arr
        self.__tag = tag

    @property
    def scalar_tag(self):
        return self.__tag

    @property
    def kind(self):
        return self.__tag.kind

    @property
    def length(self):
        return self.__values.shape[0]

    def __len__(self):
        return self.length

    @property
    def is_empty(self):
        return self.length == 0

    def raw(self, i):
        """unboxed element at offset `i`

        Args:
            i (`int`): offset in [0, length)

        Returns:
            the element as a native python value

        """
        i = operator.index(i)
        if i < 0 or i >= self.length:
            raise MatIndexError(
                "Vec.raw(): index {0} out of bounds for length {1}".format(
                    i, self.length
                )
            )
        return self.__values.item(i)

    def at(self, i):
        """element at offset `i` as `NA` or `Value`"""
        return self.__tag.to_scalar(self.raw(i))

    @property
    def has_na(self):
        """True if any element is missing"""
        return bool(self.__tag.missing_mask(self.__values).any())

    def slice(self, start, stop):
        """a `Vec` over [start, stop) sharing this instance's storage"""
        return Vec(self.__values[start:stop], self.__tag)

    @property
    def contents(self):
        """a writable copy of the elements"""
        return self.__values.copy()

    def to_array(self):
        """read-only reference to the backing `numpy.ndarray`"""
        return self.__values

    def __iter__(self):
        return iter(self.__values.tolist())

    def __eq__(self, other):
        if self is other:
            return True
        if not isinstance(other, Vec):
            return NotImplemented
        if self.length != other.length:
            return False
        a, b = self.__values, other.to_array()
        ma = self.__tag.missing_mask(a)
        if np.any(ma != other.scalar_tag.missing_mask(b)):
            return False
        return bool(np.all(np.asarray(a == b, dtype=bool) | ma))

    def __hash__(self):
        h = 1
        for v in self:
            if not self.__tag.is_missing(v):
                h = (h * 31 + hash(v)) & 0xFFFFFFFF
        return h - (1 << 32) if h & 0x80000000 else h

    def __repr__(self):
        shown = ", ".join(self.__tag.show(v) for v in self)
        return "Vec([{0}], kind={1!r})".format(shown, self.kind)
