"""generic, kind-agnostic algorithms behind `Mat.map()`, `Mat.fold_left()`,
`Mat.take_rows()` and `Mat.without_rows()`.  They only use the primitive
accessors every representation supplies, so no representation has to repeat
them."""
import operator

import numpy as np

from ..errors import MatIndexError
from ..scalar import INT, LONG, infer_tag


def _row_locs(src, locs, caller):
    """normalize `locs` to a list of ints, checking each is a valid row"""
    checked = []
    for loc in locs:
        loc = operator.index(loc)
        if loc < 0 or loc >= src.num_rows:
            raise MatIndexError(
                "Mat.{0}(): row index {1} out of bounds for {2} rows".format(
                    caller, loc, src.num_rows
                )
            )
        checked.append(loc)
    return checked


def _fits_int(v):
    # the int sentinel itself would read back as missing
    return INT.missing < v < 2 ** 31


def map(src, f, tag=None):
    """apply `f` to every present element of `src` in row-major order

    Args:
        src (`Mat`): source matrix
        f (`callable`): one-argument function of a native python value
        tag (`ScalarTag`, optional): kind of the result.  If `None`, the kind is
            inferred from the values `f` returns, falling back to the kind of
            `src` when there are none.  Python ints from an `int` source stay
            `int` while they fit.

    Returns:
        `Mat`: a new matrix of the same shape.  Missing elements of `src` are
        missing in the result.

    """
    stag = src.scalar_tag
    n = src.length
    missing = [False] * n
    out = [None] * n
    for i in range(n):
        v = src._apply(i)
        if stag.is_missing(v):
            missing[i] = True
        else:
            out[i] = f(v)
    if tag is None:
        present = [v for v, m in zip(out, missing) if not m]
        tag = infer_tag(present, default=stag)
        if tag is LONG and stag is INT and all(_fits_int(v) for v in present):
            tag = INT
    if src.is_empty:
        return src.empty(tag)
    result = src._builder(src.num_rows, src.num_cols, tag)
    for i in range(n):
        result._update(i, tag.missing if missing[i] else out[i])
    return result._freeze()


def fold_left(src, init, f):
    """left fold of `f(acc, v)` over the present elements of `src` in
    row-major order"""
    stag = src.scalar_tag
    acc = init
    for i in range(src.length):
        v = src._apply(i)
        if not stag.is_missing(v):
            acc = f(acc, v)
    return acc


def take_rows(src, locs):
    """copy the rows `locs` of `src`, in the given order, into a new matrix.
    Repeated rows are copied once per occurrence."""
    locs = np.asarray(_row_locs(src, locs, "take_rows"), dtype=np.intp)
    grid = src._values.reshape(src.num_rows, src.num_cols)
    taken = grid[locs]
    return src.build(len(locs), src.num_cols, taken.reshape(-1), src.scalar_tag)


def without_rows(src, locs):
    """copy every row of `src` not listed in `locs`, keeping their order"""
    drop = sorted(set(_row_locs(src, locs, "without_rows")))
    if len(drop) == 0:
        return src
    grid = src._values.reshape(src.num_rows, src.num_cols)
    kept = np.delete(grid, drop, 0)
    return src.build(kept.shape[0], src.num_cols, kept.reshape(-1), src.scalar_tag)
