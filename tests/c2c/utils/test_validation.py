import numpy as np
import pytest

from c2c.utils._array import argmin, count_valid, lerp
from c2c.utils._parallel import partition_n_jobs, run_in_parallel
from c2c.utils.validation import check_array, check_dates, check_option, check_series


def test_check_array_copy():
    X = np.arange(10 * 10, dtype=float).reshape(10, 10)
    X_checked = check_array(X, copy=True)
    assert X_checked is not X
    np.testing.assert_equal(X_checked, X)


def test_check_array_contiguous():
    X = np.arange(10 * 10).reshape(10, 10)[:, ::2]
    X_checked = check_array(X)
    assert X_checked.flags.c_contiguous
    assert X_checked.dtype == float


@pytest.mark.parametrize("value,match", [(np.nan, "NaN"), (np.inf, "infinity")])
def test_check_array_not_finite(value, match):
    X = np.ones((2, 3))
    X[1, 1] = value
    with pytest.raises(ValueError, match=match):
        check_array(X)


def test_check_array_allow_nan():
    X = np.ones((2, 3))
    X[1, 1] = np.nan
    assert np.isnan(check_array(X, allow_nan=True)).any()


def test_check_dates():
    dates = check_dates([2000, 2001, 2003], n_timesteps=3)
    assert dates.dtype == float
    np.testing.assert_equal(dates, [2000, 2001, 2003])


@pytest.mark.parametrize(
    "dates,match",
    [
        ([2000, 2000, 2001], "strictly increasing"),
        ([2002, 2001, 2000], "strictly increasing"),
        ([2000, np.nan, 2002], "finite"),
        ([2000, 2001], "Expected 3 dates"),
    ],
)
def test_check_dates_invalid(dates, match):
    with pytest.raises(ValueError, match=match):
        check_dates(dates, n_timesteps=3)


def test_check_series_in_place():
    values = np.array([1.0, 2.0, 3.0])
    _, checked = check_series([1, 2, 3], values)
    assert checked is values


def test_check_series_invalid():
    with pytest.raises(ValueError, match="1D"):
        check_series([1, 2], [[1, 2]])

    with pytest.raises(ValueError, match="finite"):
        check_series([1, 2], [1, np.inf])


def test_check_option():
    assert check_option({"a": 1, "b": 2}, "a", "name") == 1
    with pytest.raises(ValueError, match="name must be 'a' or 'b', got c"):
        check_option({"a": 1, "b": 2}, "c", "name")


def test_argmin():
    assert argmin([3.0, 1.0, 1.0, 2.0]) == 1
    assert argmin([np.inf, 1.0]) == 1
    assert argmin([5.0]) == 0


def test_lerp():
    assert lerp(100.0, 200.0, 0.0) == 100.0
    assert lerp(100.0, 200.0, 1.0) == 200.0
    assert lerp(100.0, 200.0, 0.25) == 125.0


def test_count_valid():
    assert count_valid(np.array([0.0, 1.0, -2.0, 0.0])) == 2


def test_partition_n_jobs():
    assert partition_n_jobs(3, 10) == (3, [0, 4, 7], [4, 3, 3])


@pytest.mark.parametrize("n_jobs", [None, 1, 2])
def test_run_in_parallel(n_jobs):
    def work(offset, batch_size):
        return list(range(offset, offset + batch_size))

    result = run_in_parallel(work, 10, n_jobs=n_jobs, backend="threading")
    assert [i for batch in result for i in batch] == list(range(10))
