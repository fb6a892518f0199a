"""Element-kind descriptors and the missing-aware scalar.

Every `Mat` and `Vec` carries a `ScalarTag` that knows, for one element kind,
the numpy dtype of the backing storage, which raw value denotes "missing"
(NA), how to render a value as text and how to widen a value to double
precision.  The five kinds are:

==========  ===========  ==================
kind        dtype        missing sentinel
==========  ===========  ==================
``bool``    ``bool``     (none)
``int``     ``int32``    ``-2**31``
``long``    ``int64``    ``-2**63``
``double``  ``float64``  ``NaN``
``any``     ``object``   ``None``
==========  ===========  ==================
"""
import math
import numbers

import numpy as np


class NAType(object):
    """the type of the `NA` singleton: a scalar that is missing"""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(NAType, cls).__new__(cls)
        return cls._instance

    is_na = True

    def __repr__(self):
        return "NA"

    def __bool__(self):
        return False

    def __reduce__(self):
        return (NAType, ())


NA = NAType()


class Value(object):
    """a scalar that is present

    Args:
        v (`object`): the wrapped value

    Example::

        m = namat.matrix(2, 2, [1, 2, 3, 4])
        assert m.at(0, 0) == Value(1)

    """

    __slots__ = ("v",)
    is_na = False

    def __init__(self, v):
        self.v = v

    def get(self):
        return self.v

    def __eq__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        return self.v == other.v

    def __hash__(self):
        return hash(self.v)

    def __repr__(self):
        return "Value({0!r})".format(self.v)


class ScalarTag(object):
    """descriptor for one element kind.  Concrete tags are module level
    singletons; use `get_scalar_tag()` to look one up.
    """

    kind = None
    dtype = None
    missing = None
    is_numeric = False

    def is_missing(self, v):
        """True if `v` is the missing sentinel for this kind"""
        return False

    def not_missing(self, v):
        return not self.is_missing(v)

    def missing_mask(self, values):
        """boolean `numpy.ndarray` flagging the missing entries of `values`"""
        return np.zeros(len(values), dtype=bool)

    def to_double(self, v):
        """widen `v` to a python float, mapping missing to NaN"""
        if self.is_missing(v):
            return math.nan
        return float(v)

    def show(self, v):
        """render `v` as text, "NA" if missing"""
        if self.is_missing(v):
            return "NA"
        return str(v)

    def to_scalar(self, v):
        """wrap `v` as either `NA` or `Value(v)`"""
        if self.is_missing(v):
            return NA
        return Value(v)

    def as_array(self, values):
        """coerce `values` to a flat `numpy.ndarray` of this kind's dtype.
        `None` entries become the missing sentinel.  An ndarray that already
        has the right dtype and layout is returned as-is, without a copy.
        """
        if isinstance(values, np.ndarray):
            if values.dtype == self.dtype:
                if values.ndim == 1 and values.flags.c_contiguous:
                    return values
                return np.ascontiguousarray(values).reshape(-1)
            return self._convert(values.reshape(-1))
        values = list(values)
        if self.kind == "any":
            arr = np.empty(len(values), dtype=object)
            for i, v in enumerate(values):
                arr[i] = v
            return arr
        return np.asarray(
            [self.missing if v is None else v for v in values], dtype=self.dtype
        )

    def _convert(self, arr):
        return arr.astype(self.dtype)

    def __repr__(self):
        return "ScalarTag({0})".format(self.kind)


class ScalarTagBool(ScalarTag):
    kind = "bool"
    dtype = np.dtype(np.bool_)
    missing = False

    def to_double(self, v):
        return 1.0 if v else 0.0


class _IntegralTag(ScalarTag):
    is_numeric = True

    def is_missing(self, v):
        return v == self.missing

    def missing_mask(self, values):
        return values == self.missing

    def _convert(self, arr):
        if arr.dtype.kind == "f":
            nans = np.isnan(arr)
            if nans.any():
                arr = np.where(nans, self.missing, arr)
        elif arr.dtype == object:
            arr = np.asarray(
                [self.missing if v is None else v for v in arr], dtype=self.dtype
            )
        return arr.astype(self.dtype)


class ScalarTagInt(_IntegralTag):
    kind = "int"
    dtype = np.dtype(np.int32)
    missing = -(2 ** 31)


class ScalarTagLong(_IntegralTag):
    kind = "long"
    dtype = np.dtype(np.int64)
    missing = -(2 ** 63)


class ScalarTagDouble(ScalarTag):
    kind = "double"
    dtype = np.dtype(np.float64)
    missing = math.nan
    is_numeric = True

    def is_missing(self, v):
        return v != v

    def missing_mask(self, values):
        return np.isnan(values)

    def show(self, v):
        if v != v:
            return "NA"
        return "{0:.4f}".format(v)

    def _convert(self, arr):
        if arr.dtype == object:
            arr = np.asarray(
                [math.nan if v is None else v for v in arr], dtype=self.dtype
            )
        return arr.astype(self.dtype)


class ScalarTagAny(ScalarTag):
    kind = "any"
    dtype = np.dtype(object)
    missing = None

    def is_missing(self, v):
        return v is None

    def missing_mask(self, values):
        return np.fromiter((v is None for v in values), dtype=bool, count=len(values))

    def to_double(self, v):
        if v is None:
            return math.nan
        if isinstance(v, numbers.Real):
            return float(v)
        raise TypeError("ScalarTagAny.to_double(): not a number: {0!r}".format(v))

    def _convert(self, arr):
        out = np.empty(len(arr), dtype=object)
        out[:] = arr.tolist()
        return out


BOOL = ScalarTagBool()
INT = ScalarTagInt()
LONG = ScalarTagLong()
DOUBLE = ScalarTagDouble()
ANY = ScalarTagAny()

_TAGS = {tag.kind: tag for tag in (BOOL, INT, LONG, DOUBLE, ANY)}

_ALIASES = {
    "boolean": BOOL,
    "int32": INT,
    "int64": LONG,
    "float": DOUBLE,
    "float64": DOUBLE,
    "object": ANY,
}


def tag_for_dtype(dtype):
    """map a numpy dtype onto the element kind that stores it.  Narrow integer
    types widen to `int`, unsigned 32-bit and wider integers to `long`, every
    float type to `double` and everything else to `any`.
    """
    dtype = np.dtype(dtype)
    if dtype.kind == "b":
        return BOOL
    if dtype.kind in "iu":
        if dtype.itemsize < 4 or (dtype.kind == "i" and dtype.itemsize == 4):
            return INT
        return LONG
    if dtype.kind == "f":
        return DOUBLE
    return ANY


def get_scalar_tag(kind):
    """resolve a kind name, dtype or type to its `ScalarTag`

    Args:
        kind (`str`, `ScalarTag`, `numpy.dtype` or `type`): a kind name ("bool",
            "int", "long", "double", "any" or one of their aliases), a tag,
            a numpy dtype or a python type (`bool`, `int`, `float`, ...)

    Returns:
        `ScalarTag`: the descriptor

    """
    if isinstance(kind, ScalarTag):
        return kind
    if isinstance(kind, str):
        name = kind.lower()
        if name in _TAGS:
            return _TAGS[name]
        if name in _ALIASES:
            return _ALIASES[name]
    try:
        return tag_for_dtype(kind)
    except TypeError:
        raise ValueError("get_scalar_tag(): unrecognized kind: {0!r}".format(kind))


def infer_tag(values, default=ANY):
    """infer the narrowest kind that holds every entry of `values`, a python
    sequence.  `None` entries are skipped since every kind can store them as
    missing.  Returns `default` when nothing is left to look at.
    """
    tag = None
    for v in values:
        if v is None:
            continue
        if isinstance(v, (bool, np.bool_)):
            vtag = BOOL
        elif isinstance(v, numbers.Integral):
            vtag = LONG
        elif isinstance(v, numbers.Real):
            vtag = DOUBLE
        else:
            return ANY
        if tag is None or tag is vtag:
            tag = vtag
        elif BOOL in (tag, vtag):
            return ANY
        else:
            tag = DOUBLE
    if tag is None:
        return default
    return tag
