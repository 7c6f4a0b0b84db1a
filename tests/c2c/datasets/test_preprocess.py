import numpy as np
import pytest
from sklearn.base import clone

from c2c.datasets.preprocess import (
    Despike,
    Infill,
    Revert,
    despike,
    fill_missing,
    named_preprocess,
    revert,
)
from c2c.utils._testing import (
    assert_exhaustive_parameter_checks,
    assert_parameter_checks,
)


def test_revert():
    values = np.array([1.0, 0.0, -3.0])
    revert(values)
    np.testing.assert_equal(values, [-1.0, 0.0, 3.0])


@pytest.mark.parametrize(
    "values,expected",
    [
        ([50, 50, 50, 50, 50, 0, 50, 50, 50, 50, 50], [50] * 11),
        ([100, 110, 0, 200, 400], [100, 110, 110, 200, 200]),
        ([100, 300, 0, 200, 210, 220], [100, 300, 200, 200, 210, 210]),
        ([100, 110, 0, 300, 310, 500], [100, 110, 300, 300, 310, 310]),
        ([0, 100, 120, 140], [100, 100, 120, 120]),
        ([100, 120, 140, 0], [100, 120, 140, 140]),
        ([100, 0, 0, 130, 140, 170], [100, 130, 130, 130, 140, 140]),
        ([100, 200, 210], [100, 200, 210]),
    ],
)
def test_fill_missing(values, expected):
    values = np.array(values, dtype=float)
    fill_missing(values)
    np.testing.assert_equal(values, expected)


def test_fill_missing_too_short():
    with pytest.raises(ValueError, match="at least 3 values"):
        fill_missing(np.array([1.0, 0.0]))


def test_fill_missing_idempotent(X):
    for x in X:
        fill_missing(x)
        expected = x.copy()
        fill_missing(x)
        np.testing.assert_equal(x, expected)


def test_despike():
    values = np.array([50.0] * 5 + [300.0] + [50.0] * 5)
    despike(values, 0.85)
    np.testing.assert_equal(values, [50.0] * 11)


def test_despike_disabled():
    values = np.array([50.0] * 5 + [300.0] + [50.0] * 5)
    despike(values, 1.0)
    assert values[5] == 300.0


@pytest.mark.parametrize(
    "values",
    [
        [50, 50, 140, 50, 50],
        [100, 100, 400, 350, 350],
        [100, 200, 300, 400, 500],
    ],
)
def test_despike_no_spike(values):
    values = np.array(values, dtype=float)
    expected = values.copy()
    despike(values, 0.85)
    np.testing.assert_equal(values, expected)


def test_preprocess_idempotent(disturbance):
    _, values = disturbance
    fill_missing(values)
    despike(values)
    expected = values.copy()
    fill_missing(values)
    despike(values)
    np.testing.assert_equal(values, expected)


@pytest.mark.parametrize(
    "name,expected",
    [("revert", revert), ("infill", fill_missing), ("despike", despike)],
)
def test_named_preprocess(name, expected):
    assert named_preprocess(name) is expected


def test_named_preprocess_invalid():
    with pytest.raises(ValueError, match="name must be"):
        named_preprocess("smooth")


@pytest.mark.parametrize("estimator", [Revert(), Infill(), Despike()])
def test_transform_copies(estimator, X):
    X_orig = X.copy()
    X_t = clone(estimator).fit_transform(X)
    np.testing.assert_equal(X, X_orig)
    assert X_t.shape == X.shape


@pytest.mark.parametrize("estimator", [Revert(), Infill(), Despike()])
def test_transform_n_timesteps(estimator, X):
    estimator = clone(estimator).fit(X)
    with pytest.raises(ValueError, match="timesteps"):
        estimator.transform(X[:, :10])


def test_revert_transform(X):
    np.testing.assert_equal(Revert().fit_transform(X), -X)


def test_infill_transform(X):
    X_t = Infill().fit_transform(X)
    assert (X_t != 0).all()
    for x, x_t in zip(X, X_t):
        x = x.copy()
        fill_missing(x)
        np.testing.assert_equal(x_t, x)


def test_infill_too_few_values(X):
    X[3, 2:] = 0
    with pytest.raises(ValueError, match="Time series 3"):
        Infill().fit_transform(X)


def test_despike_transform():
    X = np.array([[50.0, 50.0, 300.0, 50.0, 50.0], [50.0, 50.0, 300.0, 50.0, 50.0]])
    np.testing.assert_equal(Despike().fit_transform(X), 50.0)
    np.testing.assert_equal(Despike(tolerance=1).fit_transform(X), X)


def test_transform_nan():
    X = np.array([[1.0, np.nan, 2.0]])
    with pytest.raises(ValueError, match="NaN"):
        Revert().fit(X)


def test_despike_parameter_checks():
    assert_exhaustive_parameter_checks(Despike())
    assert_parameter_checks(Despike())
