import numpy as np
import pytest


def vec_test():
    import namat
    v = namat.Vec([1.0, None, 3.0])
    assert v.kind == "double"
    assert len(v) == 3
    assert v.has_na
    assert v.at(1) is namat.NA
    assert v.at(2) == namat.Value(3.0)
    assert v.raw(0) == 1.0
    assert not v.is_empty
    assert namat.Vec([]).is_empty
    assert namat.Vec([1, 2]).kind == "long"
    assert namat.Vec([1, 2], kind="int").kind == "int"
    assert not namat.Vec([1, 2]).has_na
    with pytest.raises(namat.MatIndexError):
        v.raw(3)


def vec_immutable_test():
    import namat
    arr = np.arange(4, dtype=np.int64)
    v = namat.Vec(arr)
    assert v.to_array() is arr
    with pytest.raises(ValueError):
        v.to_array()[0] = 9
    c = v.contents
    c[0] = 9
    assert v.raw(0) == 0


def vec_slice_test():
    import namat
    v = namat.Vec(np.arange(6, dtype=np.int32))
    s = v.slice(2, 5)
    assert list(s) == [2, 3, 4]
    assert s.kind == "int"
    assert np.shares_memory(s.to_array(), v.to_array())


def vec_eq_hash_test():
    import namat
    a = namat.Vec([1, None], kind="int")
    b = namat.Vec([1.0, None])
    assert a == b
    assert hash(a) == hash(b)
    assert a != namat.Vec([1, 2])
    assert a != namat.Vec([1])
    assert a != [1, None]
    assert repr(b) == "Vec([1.0000, NA], kind='double')"


def vec_from_mat_test():
    import namat
    m = namat.matrix(2, 2, [1, 2, 3, 4])
    assert m.row(0).kind == m.kind
    assert hash(m.row(1)) == hash(namat.Vec([3, 4]))


if __name__ == "__main__":
    vec_test()
    vec_slice_test()
