import numpy as np
import pytest

from c2c.datasets import make_disturbances


@pytest.fixture(scope="session")
def disturbances():
    return make_disturbances(n_samples=20, random_state=123)


@pytest.fixture
def dates(disturbances):
    return disturbances[0].copy()


@pytest.fixture
def X(disturbances):
    return disturbances[1].copy()


@pytest.fixture
def table(disturbances):
    """Ten time series where the rows 2, 5 and 7 have less than 3 values."""
    dates, X = disturbances
    X = X[:10].copy()
    X[2, :] = 0
    X[5, :] = 0
    X[5, [3, 10]] = 450.0
    X[7, :] = 0
    X[7, 20] = 300.0
    return dates.copy(), X


@pytest.fixture
def disturbance():
    """A stable series with a loss in 2003 and a linear regrowth."""
    dates = np.arange(2000, 2016, dtype=float)
    values = np.array(
        [
            500.0,
            500.0,
            500.0,
            200.0,
            250.0,
            300.0,
            350.0,
            400.0,
            450.0,
            500.0,
            500.0,
            500.0,
            500.0,
            500.0,
            500.0,
            500.0,
        ]
    )
    return dates, values


pytest.register_assert_rewrite("c2c.utils._testing")
