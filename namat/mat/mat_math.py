"""transpose and product kernels shared by the `Mat` representations.

The transposes work on flat, row-major `numpy.ndarray` buffers.  A naive
transpose of a large rectangular matrix walks one of the two buffers with a
stride of a full row, touching a new cache line on every element; the blocked
transpose instead copies `BLOCK_SIZE` x `BLOCK_SIZE` tiles so that the reads
and writes of each tile stay cache resident.
"""
import warnings

import numpy as np

from ..errors import DimensionMismatch
from ..namat_warnings import NamatWarning
from ..scalar import DOUBLE

# tile edge for block_transpose()
BLOCK_SIZE = 60


def square_transpose(n, values):
    """transpose an `n` x `n` matrix in place by swapping each symmetric pair
    of off-diagonal elements.  The diagonal is not touched.

    Args:
        n (`int`): the matrix dimension
        values (`numpy.ndarray`): writable, flat, row-major buffer of length n*n

    """
    if n < 2:
        return
    grid = values.reshape(n, n)
    # one scratch row, reused for every swap
    scratch = np.empty(n - 1, dtype=values.dtype)
    for i in range(n - 1):
        upper = scratch[: n - 1 - i]
        upper[:] = grid[i, i + 1 :]
        grid[i, i + 1 :] = grid[i + 1 :, i]
        grid[i + 1 :, i] = upper


def block_transpose(rows, cols, src, dst, block_size=None):
    """transpose the `rows` x `cols` matrix in `src` into `dst` tile by tile

    Args:
        rows (`int`): number of rows in `src`
        cols (`int`): number of cols in `src`
        src (`numpy.ndarray`): flat, row-major source buffer
        dst (`numpy.ndarray`): writable flat buffer of the same length that
            receives the `cols` x `rows` result
        block_size (`int`, optional): tile edge.  Default is `BLOCK_SIZE`

    """
    if block_size is None:
        block_size = BLOCK_SIZE
    s = src.reshape(rows, cols)
    d = dst.reshape(cols, rows)
    for r0 in range(0, rows, block_size):
        r1 = min(r0 + block_size, rows)
        for c0 in range(0, cols, block_size):
            c1 = min(c0 + block_size, cols)
            d[c0:c1, r0:r1] = s[r0:r1, c0:c1].T


def mult(a, b, logger=None):
    """dense product of two numeric `Mat` instances, computed in double
    precision regardless of the operand kinds

    Args:
        a (`Mat`): the (m x k) left operand
        b (`Mat`): the (k x n) right operand
        logger (`Logger`, optional): receives start/finish timing entries

    Returns:
        `Mat`: the (m x n) double product

    Note:
        missing values widen to NaN and therefore propagate through every
        dot product that touches them

    """
    if a.num_cols != b.num_rows:
        raise DimensionMismatch(
            "mat_math.mult(): cannot multiply ({0} {1}) x ({2} {3})".format(
                a.num_rows, a.num_cols, b.num_rows, b.num_cols
            )
        )
    phrase = "multiplying ({0} {1}) x ({2} {3})".format(
        a.num_rows, a.num_cols, b.num_rows, b.num_cols
    )
    if logger is not None:
        logger.log(phrase)
    x = a.to_double_array().reshape(a.num_rows, a.num_cols)
    y = b.to_double_array().reshape(b.num_rows, b.num_cols)
    if np.isnan(x).any() or np.isnan(y).any():
        warnings.warn(
            "mat_math.mult(): missing values propagate as NaN", NamatWarning
        )
    prod = np.dot(x, y)
    if logger is not None:
        logger.log(phrase)
    return a.build(a.num_rows, b.num_cols, prod.reshape(-1), DOUBLE)


def ident(n):
    """flat, row-major buffer of the `n` x `n` identity in double precision"""
    return np.identity(n, dtype=np.float64).reshape(-1)
