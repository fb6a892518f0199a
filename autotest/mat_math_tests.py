import numpy as np
import pytest


def square_transpose_test():
    from namat.mat import mat_math
    for n in (0, 1, 2, 5, 61):
        buf = np.arange(n * n, dtype=np.float64)
        mat_math.square_transpose(n, buf)
        assert np.array_equal(
            buf.reshape(n, n), np.arange(n * n, dtype=np.float64).reshape(n, n).T
        )
        # the diagonal stays put
        assert np.array_equal(np.diag(buf.reshape(n, n)), np.arange(n) * (n + 1))


def square_transpose_object_test():
    from namat.mat import mat_math
    buf = np.empty(9, dtype=object)
    buf[:] = ["a", "b", "c", None, "e", "f", "g", "h", "i"]
    mat_math.square_transpose(3, buf)
    assert buf.tolist() == ["a", None, "g", "b", "e", "h", "c", "f", "i"]


def block_transpose_test():
    from namat.mat import mat_math
    rows, cols = 7, 5
    src = np.arange(rows * cols, dtype=np.int64)
    expected = src.reshape(rows, cols).T
    for block_size in (1, 2, 3, 60):
        dst = np.empty_like(src)
        mat_math.block_transpose(rows, cols, src, dst, block_size=block_size)
        assert np.array_equal(dst.reshape(cols, rows), expected)

    src = np.arange(61 * 121, dtype=np.int32)
    dst = np.empty_like(src)
    mat_math.block_transpose(61, 121, src, dst)
    assert np.array_equal(dst.reshape(121, 61), src.reshape(61, 121).T)


def block_transpose_object_test():
    from namat.mat import mat_math
    src = np.empty(6, dtype=object)
    src[:] = ["a", "b", None, "d", "e", "f"]
    dst = np.empty_like(src)
    mat_math.block_transpose(2, 3, src, dst, block_size=2)
    assert dst.tolist() == ["a", "d", "b", "e", None, "f"]


def kernel_mult_test():
    import namat
    from namat.mat import mat_math
    a = namat.matrix(1, 3, [1, 2, 3], kind="int")
    b = namat.matrix(3, 1, [4, 5, 6], kind="long")
    prod = mat_math.mult(a, b)
    assert prod.shape == (1, 1)
    assert prod.raw(0) == 32.0
    assert mat_math.mult(b, a).shape == (3, 3)
    with pytest.raises(namat.DimensionMismatch):
        mat_math.mult(a, a)


def kernel_mult_logger_test(capsys):
    import namat
    from namat.mat import mat_math
    a = namat.Mat.ident(2)
    mat_math.mult(a, a, namat.Logger(True))
    out = capsys.readouterr().out
    assert "starting: multiplying (2 2) x (2 2)" in out
    assert "finished: multiplying (2 2) x (2 2)" in out


def ident_test():
    from namat.mat import mat_math
    i = mat_math.ident(3)
    assert i.shape == (9,)
    assert i.dtype == np.float64
    assert i.tolist() == [1.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 1.0]


if __name__ == "__main__":
    square_transpose_test()
    block_transpose_test()
    # kernel_mult_test()
