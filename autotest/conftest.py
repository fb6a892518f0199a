import numpy as np
import pytest


@pytest.fixture
def int_mat():
    import namat
    return namat.matrix(2, 2, [1, 2, 3, 4], kind="int")


@pytest.fixture
def na_mat():
    import namat
    nan = np.nan
    return namat.matrix(3, 3, [1.0, 2.0, nan,
                               4.0, 5.0, 6.0,
                               7.0, nan, 9.0])


@pytest.fixture
def big_arr():
    # crosses several transpose tiles in both directions
    return np.arange(130 * 75, dtype=np.float64)
