# Authors: Isak Samsten
# License: BSD 3 clause
"""Utilities for preprocessing annual time series.

The functions operate in place on a single series, a one dimensional float
array where ``0`` marks a missing observation. The transformers apply the
same routines to every row of a copy of a table of series.
"""

import numbers

import numpy as np
from sklearn.base import OneToOneFeatureMixin, TransformerMixin, _fit_context
from sklearn.utils._param_validation import Interval
from sklearn.utils.validation import check_is_fitted

from ..base import BaseEstimator
from ..utils._array import count_valid
from ..utils.validation import check_option

__all__ = [
    "revert",
    "fill_missing",
    "despike",
    "named_preprocess",
    "Revert",
    "Infill",
    "Despike",
]

# A spike must deviate more than this from the mean of its neighbours.
SPIKE_THRESHOLD = 100


def named_preprocess(name):
    """
    Get a named preprocessor.

    Parameters
    ----------
    name : str
        The name of the preprocessor.

    Returns
    -------
    callable
        The preprocessor function.
    """
    return check_option(_PREPROCESS, name, "name")


def revert(values):
    """
    Invert the sign of the values in place.

    Parameters
    ----------
    values : ndarray of shape (n_timestep, )
        The series.
    """
    np.negative(values, out=values)


def _find_valid(values, start, direction):
    if start == -1:
        return -1

    limit = values.shape[0] if direction == 1 else -1
    for i in range(start + direction, limit, direction):
        if values[i] != 0:
            return i
    return -1


def fill_missing(values):
    """
    Fill missing (zero) values in place.

    Each missing value is replaced by its nearest valid neighbour on the
    side which is most stable, i.e., where the difference between the
    nearest and second nearest valid value is the smallest. If the left
    side has less than two valid values, the right neighbour is used and if
    the right side has less than two valid values, the right neighbour is
    used if it exists and the left otherwise. Finally, the last value is
    replaced by the second to last value if the last step is at least as
    large as the step before it.

    Parameters
    ----------
    values : ndarray of shape (n_timestep, )
        The series. Must contain at least three valid values.
    """
    if values.shape[0] < 3:
        raise ValueError(
            f"fill_missing requires at least 3 values, got {values.shape[0]}."
        )

    for i in range(values.shape[0]):
        if values[i] != 0:
            continue

        left1 = _find_valid(values, i, -1)
        left2 = _find_valid(values, left1, -1)
        right1 = _find_valid(values, i, 1)
        right2 = _find_valid(values, right1, 1)
        if left2 == -1:
            values[i] = values[right1]
        elif right2 == -1:
            values[i] = values[right1] if right1 != -1 else values[left1]
        else:
            left_diff = abs(values[left1] - values[left2])
            right_diff = abs(values[right1] - values[right2])
            values[i] = values[left1] if left_diff < right_diff else values[right1]

    last_diff = abs(values[-1] - values[-2])
    second_last_diff = abs(values[-2] - values[-3])
    if last_diff >= second_last_diff:
        values[-1] = values[-2]


def despike(values, tolerance=0.85):
    """
    Remove spikes in place.

    A value is a spike if it deviates more than 100 from the mean of its
    neighbours and the difference between the neighbours is less than
    ``1 - tolerance`` of the deviation, as in LandTrendr. Spikes are
    replaced by the mean of the neighbours.

    Parameters
    ----------
    values : ndarray of shape (n_timestep, )
        The series.
    tolerance : float, optional
        The spike tolerance. A value of 1 removes no spikes.
    """
    for i in range(1, values.shape[0] - 1):
        left = values[i - 1]
        right = values[i + 1]
        fitted = (left + right) / 2
        delta = abs(left - right)
        spike = abs(fitted - values[i])
        with np.errstate(divide="ignore", invalid="ignore"):
            proportion = np.float64(delta) / spike

        if spike > SPIKE_THRESHOLD and proportion < 1 - tolerance:
            values[i] = fitted


class Revert(OneToOneFeatureMixin, TransformerMixin, BaseEstimator):
    """
    Invert the sign of every time series.

    Examples
    --------
    >>> import numpy as np
    >>> from c2c.datasets.preprocess import Revert
    >>> Revert().fit_transform(np.array([[1.0, -2.0, 3.0]]))
    array([[-1.,  2., -3.]])
    """

    def fit(self, X, y=None):
        """
        Fit the model to the provided data.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_timestep)
            The input data to fit the model.
        y : array-like, optional
            The target values. Ignored.

        Returns
        -------
        object
            Returns the instance of the fitted model.
        """
        self._validate_data(X)
        return self

    def transform(self, X):
        """
        Invert the sign of each time series.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_timestep)
            The input data to be transformed.

        Returns
        -------
        ndarray of shape (n_samples, n_timestep)
            The transformed data.
        """
        check_is_fitted(self)
        X = self._validate_data(X, reset=False, copy=True)
        for row in X:
            revert(row)
        return X


class Infill(OneToOneFeatureMixin, TransformerMixin, BaseEstimator):
    """
    Fill missing values.

    Missing values are encoded as zero and replaced according to
    :func:`fill_missing`.
    """

    def fit(self, X, y=None):
        """
        Fit the model to the provided data.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_timestep)
            The input data to fit the model.
        y : array-like, optional
            The target values. Ignored.

        Returns
        -------
        object
            Returns the instance of the fitted model.
        """
        self._validate_data(X)
        return self

    def transform(self, X):
        """
        Fill the missing values of each time series.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_timestep)
            The input data to be transformed.

        Returns
        -------
        ndarray of shape (n_samples, n_timestep)
            The transformed data.
        """
        check_is_fitted(self)
        X = self._validate_data(X, reset=False, copy=True)
        for i, row in enumerate(X):
            if count_valid(row) < 3:
                raise ValueError(
                    f"Time series {i} has less than 3 non-zero values and "
                    "cannot be filled."
                )
            fill_missing(row)
        return X


class Despike(OneToOneFeatureMixin, TransformerMixin, BaseEstimator):
    """
    Remove spikes.

    Parameters
    ----------
    tolerance : float, optional
        The spike tolerance. A value of 1 disables the spike removal.

    Examples
    --------
    >>> import numpy as np
    >>> from c2c.datasets.preprocess import Despike
    >>> Despike().fit_transform(np.array([[50.0, 50.0, 300.0, 50.0, 50.0]]))
    array([[50., 50., 50., 50., 50.]])
    """

    _parameter_constraints: dict = {
        "tolerance": [Interval(numbers.Real, 0, 1, closed="both")],
    }

    def __init__(self, tolerance=0.85):
        self.tolerance = tolerance

    @_fit_context(prefer_skip_nested_validation=True)
    def fit(self, X, y=None):
        """
        Fit the model to the provided data.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_timestep)
            The input data to fit the model.
        y : array-like, optional
            The target values. Ignored.

        Returns
        -------
        object
            Returns the instance of the fitted model.
        """
        self._validate_data(X)
        return self

    def transform(self, X):
        """
        Remove the spikes of each time series.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_timestep)
            The input data to be transformed.

        Returns
        -------
        ndarray of shape (n_samples, n_timestep)
            The transformed data.
        """
        check_is_fitted(self)
        X = self._validate_data(X, reset=False, copy=True)
        if self.tolerance < 1:
            for row in X:
                despike(row, self.tolerance)
        return X


_PREPROCESS = {
    "revert": revert,
    "infill": fill_missing,
    "despike": despike,
}
