import math
import numbers
import operator
import sys

import numpy as np
import pandas as pd

from ..errors import DimensionMismatch, MatIndexError, ShapeMismatch
from ..logger import Logger
from ..scalar import DOUBLE, get_scalar_tag, infer_tag, tag_for_dtype
from ..vec import Vec
from . import mat_impl, mat_math

# kind name -> concrete Mat subclass, filled by register()
_REPRESENTATIONS = {}
# kind name -> the canonical empty instance of that kind
_EMPTY = {}


def register(cls):
    """class decorator that makes `cls` the representation the factory
    builds for `cls.scalar_tag.kind`"""
    _REPRESENTATIONS[cls.scalar_tag.kind] = cls
    return cls


class _Memo(object):
    """a compute-once cell.  The first `get()` computes and publishes the value
    with a single attribute store; concurrent first callers may each compute
    it, which only wastes work since the computation is pure."""

    __slots__ = ("_value",)
    _unset = object()

    def __init__(self):
        self._value = _Memo._unset

    def get(self, compute):
        value = self._value
        if value is _Memo._unset:
            value = compute()
            self._value = value
        return value

    def set(self, value):
        self._value = value

    @property
    def is_set(self):
        return self._value is not _Memo._unset


def _kind_of(values, kind):
    if kind is not None:
        return get_scalar_tag(kind)
    if isinstance(values, np.ndarray):
        return tag_for_dtype(values.dtype)
    return infer_tag(values, default=DOUBLE)


def matrix(rows, cols, values, kind=None):
    """factory: build the representation of `kind` over `values`

    Args:
        rows (`int`): number of rows
        cols (`int`): number of cols
        values (`numpy.ndarray` or sequence): rows*cols elements in row-major
            order.  An ndarray of the matching dtype is wrapped without a copy
            and made read-only: the matrix owns it from here on.
        kind (`str` or `ScalarTag`, optional): element kind.  If `None`, the kind
            is inferred from the ndarray dtype or the python values.

    Returns:
        `Mat`: the new matrix.  If `rows` or `cols` is zero, `values` is ignored
        and the canonical empty matrix of the kind is returned.

    Example::

        m = namat.matrix(2, 2, [1, 2, 3, 4], kind="int")
        assert m.raw(1, 0) == 3

    """
    rows, cols = operator.index(rows), operator.index(cols)
    if rows < 0 or cols < 0:
        raise DimensionMismatch(
            "matrix(): negative dimensions ({0} {1})".format(rows, cols)
        )
    if isinstance(values, Vec):
        values = values.to_array()
    elif not isinstance(values, np.ndarray):
        values = list(values)
    tag = _kind_of(values, kind)
    if rows == 0 or cols == 0:
        return Mat.empty(tag)
    arr = tag.as_array(values)
    if arr.shape[0] != rows * cols:
        raise DimensionMismatch(
            "matrix(): {0} values cannot fill a ({1} {2}) matrix".format(
                arr.shape[0], rows, cols
            )
        )
    return _REPRESENTATIONS[tag.kind](rows, cols, arr)


class Mat(object):
    """immutable, row-major, missing-aware 2-D container backed by one flat,
    typed `numpy.ndarray`.  Build instances with `matrix()` or the class methods
    (`Mat.from_columns()`, `Mat.zeros()`, `Mat.ident()`, ...), never through the
    concrete constructors.

    Example::

        m = namat.matrix(2, 2, [1, 2, 3, 4], kind="int")
        m * m            # elementwise: [[1, 4], [9, 16]]
        m @ m            # product:     [[7.0, 10.0], [15.0, 22.0]]
        m * 3            # [[3, 6], [9, 12]]
        m.take_rows(1, 0)
        m.T

    Note:
        the element kind decides what "missing" means: NaN for doubles,
        the minimum value for ints and longs, `None` for arbitrary objects.
        Booleans have no missing value.

    """

    # defaults for stringify()
    display_rows = 8
    display_cols = 8

    scalar_tag = None

    # numpy arrays and scalars defer to the reflected operators
    __array_ufunc__ = None

    def __init__(self, num_rows, num_cols, values, freeze=True):
        self._num_rows = num_rows
        self._num_cols = num_cols
        self._values = values
        self._transposed = _Memo()
        self._flat = _Memo()
        self._flat_t = _Memo()
        if freeze:
            values.flags.writeable = False

    # ------------------------------------------------------------------
    # construction

    @classmethod
    def build(cls, rows, cols, values, kind=None):
        """alias of the module level `matrix()` factory"""
        return matrix(rows, cols, values, kind)

    @classmethod
    def _builder(cls, rows, cols, kind):
        """a writable, uninitialized instance for construction-time filling
        with `_update()`.  Call `_freeze()` before handing it out."""
        tag = get_scalar_tag(kind)
        values = np.empty(rows * cols, dtype=tag.dtype)
        return _REPRESENTATIONS[tag.kind](rows, cols, values, freeze=False)

    def _freeze(self):
        self._values.flags.writeable = False
        return self

    @classmethod
    def empty(cls, kind="double"):
        """the canonical (0 x 0) matrix of `kind`"""
        tag = get_scalar_tag(kind)
        m = _EMPTY.get(tag.kind)
        if m is None:
            m = _REPRESENTATIONS[tag.kind](0, 0, np.empty(0, dtype=tag.dtype))
            m = _EMPTY.setdefault(tag.kind, m)
        return m

    @classmethod
    def zeros(cls, rows, cols, kind="double"):
        """a zero-filled (`rows` x `cols`) matrix"""
        tag = get_scalar_tag(kind)
        return matrix(rows, cols, np.zeros(rows * cols, dtype=tag.dtype), tag)

    @classmethod
    def ident(cls, n):
        """the (`n` x `n`) double identity matrix"""
        return matrix(n, n, mat_math.ident(n), DOUBLE)

    @classmethod
    def from_columns(cls, columns, kind=None):
        """build a matrix whose columns are `columns`

        Args:
            columns ([`Vec`, `numpy.ndarray` or sequence]): the columns, all of
                the same length
            kind (`str` or `ScalarTag`, optional): element kind.  If `None`, taken
                from the first column

        Returns:
            `Mat`: a (len(columns[0]) x len(columns)) matrix

        """
        columns = [c.to_array() if isinstance(c, Vec) else c for c in columns]
        if len(columns) == 0:
            return cls.empty(kind if kind is not None else DOUBLE)
        lengths = [len(c) for c in columns]
        if any(n != lengths[0] for n in lengths):
            raise DimensionMismatch(
                "Mat.from_columns(): all columns must be the same length, "
                + "got lengths "
                + str(lengths)
            )
        if kind is not None:
            tag = get_scalar_tag(kind)
        elif isinstance(columns[0], np.ndarray):
            tag = tag_for_dtype(columns[0].dtype)
        else:
            tag = infer_tag([v for c in columns for v in c], default=DOUBLE)
        flat = np.concatenate([tag.as_array(c) for c in columns])
        return matrix(len(columns), lengths[0], flat, tag).T

    @classmethod
    def from_rows(cls, rows, kind=None):
        """build a matrix whose rows are `rows`, all of the same length"""
        rows = [r.to_array() if isinstance(r, Vec) else r for r in rows]
        if len(rows) == 0:
            return cls.empty(kind if kind is not None else DOUBLE)
        lengths = [len(r) for r in rows]
        if any(n != lengths[0] for n in lengths):
            raise DimensionMismatch(
                "Mat.from_rows(): all rows must be the same length, "
                + "got lengths "
                + str(lengths)
            )
        if kind is not None:
            tag = get_scalar_tag(kind)
        elif isinstance(rows[0], np.ndarray):
            tag = tag_for_dtype(rows[0].dtype)
        else:
            tag = infer_tag([v for r in rows for v in r], default=DOUBLE)
        flat = np.concatenate([tag.as_array(r) for r in rows])
        return matrix(len(rows), lengths[0], flat, tag)

    @classmethod
    def from_dataframe(cls, df):
        """build a matrix from the values of a `pandas.DataFrame`.  The
        labels are dropped; the kind follows the frame's common dtype.

        Args:
            df (`pandas.DataFrame`): dataframe

        Returns:
            `Mat`: a copy of the frame's values

        """
        if not isinstance(df, pd.DataFrame):
            raise TypeError("Mat.from_dataframe(): df is not a DataFrame")
        x = np.array(df.to_numpy(), order="C")
        return matrix(x.shape[0], x.shape[1], x.reshape(-1))

    # ------------------------------------------------------------------
    # shape

    @property
    def num_rows(self):
        return self._num_rows

    @property
    def num_cols(self):
        return self._num_cols

    @property
    def shape(self):
        return (self._num_rows, self._num_cols)

    @property
    def length(self):
        """total number of elements"""
        return self._num_rows * self._num_cols

    def __len__(self):
        return self.length

    @property
    def is_square(self):
        return self._num_rows == self._num_cols

    @property
    def is_empty(self):
        return self.length == 0

    @property
    def kind(self):
        return self.scalar_tag.kind

    # ------------------------------------------------------------------
    # primitives every representation provides

    def _apply(self, i):
        return self._values.item(i)

    def _apply_rc(self, r, c):
        return self._values.item(r * self._num_cols + c)

    def _update(self, i, v):
        # construction time only: the buffer is read-only once frozen
        self._values[i] = self.scalar_tag.missing if v is None else v

    def copy(self):
        """a matrix equal to this one over a fresh copy of the data"""
        if self.is_empty:
            return self
        return type(self)(self._num_rows, self._num_cols, self._values.copy())

    def _transpose(self):
        raise NotImplementedError()

    # ------------------------------------------------------------------
    # element access

    def _check_row(self, r, caller):
        r = operator.index(r)
        if r < 0 or r >= self._num_rows:
            raise MatIndexError(
                "Mat.{0}(): row index {1} out of bounds for {2} rows".format(
                    caller, r, self._num_rows
                )
            )
        return r

    def _check_col(self, c, caller):
        c = operator.index(c)
        if c < 0 or c >= self._num_cols:
            raise MatIndexError(
                "Mat.{0}(): col index {1} out of bounds for {2} cols".format(
                    caller, c, self._num_cols
                )
            )
        return c

    def raw(self, i, c=None):
        """unboxed element by row-major offset `raw(i)` or by position
        `raw(r, c)`

        Returns:
            the element as a native python value

        """
        if c is None:
            i = operator.index(i)
            if i < 0 or i >= self.length:
                raise MatIndexError(
                    "Mat.raw(): offset {0} out of bounds for length {1}".format(
                        i, self.length
                    )
                )
            return self._apply(i)
        r = self._check_row(i, "raw")
        c = self._check_col(c, "raw")
        return self._apply_rc(r, c)

    def at(self, i, c=None):
        """same as `raw()` but wrapped as `NA` or `Value`"""
        return self.scalar_tag.to_scalar(self.raw(i, c))

    @property
    def contents(self):
        """a writable copy of the data as a flat row-major `numpy.ndarray`"""
        return self._values.copy()

    def to_double_array(self):
        """the data widened to a flat float64 `numpy.ndarray`, missing as NaN.
        Use with caution: may return the (read-only) backing array itself."""
        if not self.scalar_tag.is_numeric:
            raise TypeError(
                "Mat.to_double_array(): kind '{0}' is not numeric".format(self.kind)
            )
        x = self._values.astype(np.float64)
        mask = self.scalar_tag.missing_mask(self._values)
        if mask.any():
            x[mask] = np.nan
        return x

    # ------------------------------------------------------------------
    # generic operations

    def map(self, f, kind=None):
        """apply `f` to every present element in row-major order

        Args:
            f (`callable`): function of one native python value
            kind (`str` or `ScalarTag`, optional): kind of the result.  If
                `None`, inferred from the values `f` returns

        Returns:
            `Mat`: a new matrix of the same shape; missing elements stay missing

        Example::

            m = namat.matrix(2, 2, [1, 2, 3, 4], kind="int")
            halves = m.map(lambda v: v / 2.0)

        """
        tag = None if kind is None else get_scalar_tag(kind)
        return mat_impl.map(self, f, tag)

    def fold_left(self, init, f):
        """left fold `acc = f(acc, v)` over the present elements in row-major
        order, starting from `init`"""
        return mat_impl.fold_left(self, init, f)

    def reshape(self, r, c):
        """the same data viewed as an (`r` x `c`) matrix.  The data is shared,
        not copied.

        Raises:
            `DimensionMismatch`: if r*c != length

        """
        r, c = operator.index(r), operator.index(c)
        if r < 0 or c < 0 or r * c != self.length:
            raise DimensionMismatch(
                "Mat.reshape(): cannot reshape ({0} {1}) to ({2} {3})".format(
                    self._num_rows, self._num_cols, r, c
                )
            )
        return matrix(r, c, self._values, self.scalar_tag)

    @property
    def transposed(self):
        """transpose of this matrix, computed once and cached"""
        return self._transposed.get(self._transpose)

    @property
    def T(self):
        """wrapper for `Mat.transposed`"""
        return self.transposed

    def take_rows(self, *locs):
        """a new matrix of the rows `locs`, in the given order.  Rows may be
        repeated or reordered."""
        return mat_impl.take_rows(self, locs)

    def take_cols(self, *locs):
        """a new matrix of the cols `locs`, in the given order"""
        return self.T.take_rows(*locs).T

    def without_rows(self, *locs):
        """a new matrix without the rows `locs`; the rest keep their order"""
        return mat_impl.without_rows(self, locs)

    def without_cols(self, *locs):
        """a new matrix without the cols `locs`; the rest keep their order"""
        return self.T.without_rows(*locs).T

    def rows_with_na(self):
        """ordered indices of the rows holding at least one missing element"""
        if self.is_empty:
            return []
        mask = self.scalar_tag.missing_mask(self._values)
        grid = mask.reshape(self._num_rows, self._num_cols)
        return np.flatnonzero(grid.any(axis=1)).tolist()

    def cols_with_na(self):
        """ordered indices of the cols holding at least one missing element"""
        return self.T.rows_with_na()

    def drop_rows_with_na(self):
        return self.without_rows(*self.rows_with_na())

    def drop_cols_with_na(self):
        return self.without_cols(*self.cols_with_na())

    # ------------------------------------------------------------------
    # rows and cols as Vec

    def _flatten(self):
        return self._flat.get(lambda: Vec(self._values, self.scalar_tag))

    def _flatten_t(self):
        return self._flat_t.get(lambda: Vec(self.T._values, self.scalar_tag))

    def row(self, r):
        """row `r` as a `Vec`"""
        r = self._check_row(r, "row")
        nc = self._num_cols
        return self._flatten().slice(r * nc, (r + 1) * nc)

    def col(self, c):
        """col `c` as a `Vec`"""
        c = self._check_col(c, "col")
        nr = self._num_rows
        return self._flatten_t().slice(c * nr, (c + 1) * nr)

    def rows(self):
        """every row as a list of `Vec`"""
        flat = self._flatten()
        nc = self._num_cols
        return [flat.slice(r * nc, (r + 1) * nc) for r in range(self._num_rows)]

    def cols(self):
        """every col as a list of `Vec`"""
        flat = self._flatten_t()
        nr = self._num_rows
        return [flat.slice(c * nr, (c + 1) * nr) for c in range(self._num_cols)]

    # ------------------------------------------------------------------
    # numerics

    def mult(self, other, verbose=False):
        """matrix product, always in double precision

        Args:
            other (`Mat`): right operand with `num_rows` == self.num_cols
            verbose (`bool` or `str`): passed to `Logger`.  True echoes timing
                to the screen, a filename writes it to that file

        Returns:
            `Mat`: the double product

        Raises:
            `DimensionMismatch`: if the inner dimensions differ
            `TypeError`: if either operand is not numeric

        Example::

            m = namat.matrix(2, 2, [1, 2, 3, 4], kind="int")
            assert m.mult(m) == namat.matrix(2, 2, [7.0, 10.0, 15.0, 22.0])

        """
        if not isinstance(other, Mat):
            raise TypeError(
                "Mat.mult(): other must be a Mat, not " + str(type(other))
            )
        if not (self.scalar_tag.is_numeric and other.scalar_tag.is_numeric):
            raise TypeError(
                "Mat.mult(): kinds '{0}' and '{1}' are not both numeric".format(
                    self.kind, other.kind
                )
            )
        logger = Logger(verbose)
        try:
            if self._num_cols != other.num_rows:
                logger.lraise(
                    "Mat.mult(): cannot multiply ({0} {1}) x ({2} {3})".format(
                        self._num_rows, self._num_cols, other.num_rows, other.num_cols
                    ),
                    DimensionMismatch,
                )
            return mat_math.mult(self, other, logger)
        finally:
            logger.close()

    def dot(self, other):
        """wrapper for `Mat.mult()`"""
        return self.mult(other)

    def __matmul__(self, other):
        if not isinstance(other, Mat):
            return NotImplemented
        return self.mult(other)

    def round_to(self, sig=2):
        """round each element to `sig` decimal digits, halves rounding up

        Args:
            sig (`int`): number of decimal digits.  Default is 2

        Returns:
            `Mat`: a double matrix

        """
        if not self.scalar_tag.is_numeric:
            raise TypeError(
                "Mat.round_to(): kind '{0}' is not numeric".format(self.kind)
            )
        pwr = math.pow(10, sig)
        to_double = self.scalar_tag.to_double
        return self.map(
            lambda v: float(np.floor(to_double(v) * pwr + 0.5) / pwr), DOUBLE
        )

    def _binary_op(self, other, op, name, reflected=False):
        if isinstance(other, Mat):
            if self.shape != other.shape:
                raise ShapeMismatch(
                    "Mat.{0}(): shape mismatch: {1} {2}".format(
                        name, self.shape, other.shape
                    )
                )
            other_tag = other.scalar_tag
        elif isinstance(other, numbers.Real):
            other_tag = None
        else:
            return NotImplemented
        if not self.scalar_tag.is_numeric or (
            other_tag is not None and not other_tag.is_numeric
        ):
            raise TypeError(
                "Mat.{0}(): operands must be numeric, got '{1}' and '{2}'".format(
                    name, self.kind, other.kind if other_tag else type(other).__name__
                )
            )

        mask = self.scalar_tag.missing_mask(self._values)
        if other_tag is not None:
            mask = mask | other_tag.missing_mask(other.to_array())
        if name in ("__truediv__", "__rtruediv__"):
            lhs = self.to_double_array()
            rhs = other.to_double_array() if other_tag else float(other)
        else:
            lhs = self._values
            rhs = other.to_array() if other_tag else other
            if other_tag is None:
                lhs = _widen_for(lhs, other)
        with np.errstate(all="ignore"):
            out = op(rhs, lhs) if reflected else op(lhs, rhs)
        tag = tag_for_dtype(out.dtype)
        if tag.dtype != out.dtype:
            out = out.astype(tag.dtype)
        if mask.any():
            out[mask] = tag.missing
        return matrix(self._num_rows, self._num_cols, out, tag)

    def __add__(self, other):
        """elementwise addition with a `Mat` of the same shape or a scalar"""
        return self._binary_op(other, operator.add, "__add__")

    def __radd__(self, other):
        return self._binary_op(other, operator.add, "__radd__", reflected=True)

    def __sub__(self, other):
        """elementwise subtraction with a `Mat` of the same shape or a scalar"""
        return self._binary_op(other, operator.sub, "__sub__")

    def __rsub__(self, other):
        return self._binary_op(other, operator.sub, "__rsub__", reflected=True)

    def __mul__(self, other):
        """elementwise (not matrix) multiplication; see `Mat.mult()` for the
        matrix product"""
        return self._binary_op(other, operator.mul, "__mul__")

    def __rmul__(self, other):
        return self._binary_op(other, operator.mul, "__rmul__", reflected=True)

    def __truediv__(self, other):
        """elementwise true division, always yielding doubles"""
        return self._binary_op(other, operator.truediv, "__truediv__")

    def __rtruediv__(self, other):
        return self._binary_op(
            other, operator.truediv, "__rtruediv__", reflected=True
        )

    def to_array(self):
        """read-only reference to the flat backing `numpy.ndarray`.  Use with
        caution."""
        return self._values

    # ------------------------------------------------------------------
    # equality and hashing

    def __eq__(self, other):
        """row-major equality of all values.  Two missing values are equal; a
        missing value never equals a present one, whatever its raw value"""
        if self is other:
            return True
        if not isinstance(other, Mat):
            return NotImplemented
        if self.shape != other.shape:
            return False
        a, b = self._values, other.to_array()
        ma = self.scalar_tag.missing_mask(a)
        mb = other.scalar_tag.missing_mask(b)
        if np.any(ma != mb):
            return False
        same = np.asarray(a == b, dtype=bool)
        return bool(np.all(same | ma))

    def __hash__(self):
        """rolling `acc * 31 + hash(v)` over the present values in row-major
        order, wrapped to a signed 32-bit int"""
        h = self.fold_left(1, lambda acc, v: (acc * 31 + hash(v)) & 0xFFFFFFFF)
        return h - (1 << 32) if h & 0x80000000 else h

    # ------------------------------------------------------------------
    # labeled table

    def to_dataframe(self, row_names=None, col_names=None):
        """return a `pandas.DataFrame` representation of `Mat`

        Args:
            row_names ([`str`], optional): index labels. Default is a range index
            col_names ([`str`], optional): column labels. Default is a range index

        Returns:
            `pandas.DataFrame`: a dataframe over a copy of the data.  Missing
            elements become NaN.

        """
        x = self._values.reshape(self._num_rows, self._num_cols).copy()
        df = pd.DataFrame(data=x, index=row_names, columns=col_names)
        mask = self.scalar_tag.missing_mask(self._values)
        if mask.any():
            df = df.mask(mask.reshape(self._num_rows, self._num_cols))
        return df

    # ------------------------------------------------------------------
    # text

    def stringify(self, nrows=None, ncols=None):
        """text rendering: a "[R x C]" header followed by the rows, eliding
        the middle rows and cols beyond `nrows` and `ncols`

        Args:
            nrows (`int`, optional): max rows shown. Default is `Mat.display_rows`
            ncols (`int`, optional): max cols shown. Default is `Mat.display_cols`

        Returns:
            `str`: the rendering

        """
        if nrows is None:
            nrows = self.display_rows
        if ncols is None:
            ncols = self.display_cols
        show = self.scalar_tag.show
        shown_rows = _shown(nrows, self._num_rows)
        shown_cols = _shown(ncols, self._num_cols)
        vlen = 0
        for r in shown_rows:
            for c in shown_cols:
                vlen = max(vlen, len(show(self._apply_rc(r, c))))

        def create_row(r):
            cells = _build_str(
                ncols,
                self._num_cols,
                lambda c: show(self._apply_rc(r, c)).rjust(vlen) + " ",
            )
            return cells + "\n"

        return "[{0} x {1}]\n".format(self._num_rows, self._num_cols) + _build_str(
            nrows, self._num_rows, create_row, "...\n"
        )

    def __str__(self):
        return self.stringify()

    def __repr__(self):
        return self.stringify()

    def print(self, nrows=None, ncols=None, stream=None):
        """write `stringify(nrows, ncols)` to `stream` (default `sys.stdout`)"""
        if stream is None:
            stream = sys.stdout
        stream.write(self.stringify(nrows, ncols))


def _widen_for(arr, scalar):
    """`arr`, widened to int64 or float64 when the integral `scalar` does not
    fit its integer dtype"""
    if arr.dtype.kind != "i" or not isinstance(scalar, numbers.Integral):
        return arr
    scalar = int(scalar)
    for dtype in (arr.dtype, np.dtype(np.int64)):
        info = np.iinfo(dtype)
        if info.min <= scalar <= info.max:
            break
    else:
        dtype = np.dtype(np.float64)
    if dtype == arr.dtype:
        return arr
    return arr.astype(dtype)


def _shown(limit, total):
    """indices kept when eliding `total` items down to `limit`"""
    if total <= limit:
        return list(range(total))
    half = limit // 2
    return list(range(half)) + list(range(total - half, total))


def _build_str(limit, total, callback, etc=" ... "):
    if total <= limit:
        return "".join(callback(i) for i in range(total))
    half = limit // 2
    return (
        "".join(callback(i) for i in range(half))
        + etc
        + "".join(callback(i) for i in range(total - half, total))
    )
