# Authors: Isak Samsten
# License: BSD 3 clause

import numpy as np
from sklearn.utils.validation import check_array as sklearn_check_array
from sklearn.utils.validation import column_or_1d

__all__ = [
    "check_option",
    "check_array",
    "check_dates",
    "check_series",
]


def check_option(dict, key, name):
    """Look up ``key`` in ``dict`` or raise a ValueError listing the options."""
    if key in dict:
        return dict[key]
    else:
        keys = ["'%s'" % key for key in sorted(list(dict.keys()))]
        if len(keys) == 1:
            msg = f"{name} must be {keys[0]}, got {key}"
        else:
            msg = f"{name} must be {', '.join(keys[:-1])} or {keys[-1]}, got {key}"

        raise ValueError(msg)


def check_array(x, allow_nan=False, contiguous=True, **kwargs):
    """Wrapper to check array

    Parameters
    ----------
    x : ndarray
        The array to check
    allow_nan : bool, optional
        If NaN values are allowed
    contiguous : bool, optional
        Ensure that the array is in c-order.
    kwargs : dict
        Additional arguments passed to `sklearn.utils.check_array`

    Returns
    -------
    ndarray
        The checked array
    """
    if contiguous:
        order = kwargs.get("order", None)
        if order is not None and order.lower() != "c":
            raise ValueError("order=%r and contiguous=True are incompatible")
        kwargs["order"] = "C"

    kwargs.setdefault("dtype", float)
    x = sklearn_check_array(x, ensure_all_finite=False, **kwargs)

    if np.issubdtype(x.dtype, np.floating):
        if not allow_nan and np.isnan(x).any():
            raise ValueError("Input contains NaN.")

        if np.isinf(x).any():
            raise ValueError("Input contains infinity.")

    return x


def check_dates(dates, n_timesteps=None):
    """Check that dates are a valid time axis.

    Parameters
    ----------
    dates : array-like of shape (n_timesteps, )
        The dates, typically years.
    n_timesteps : int, optional
        The expected number of dates.

    Returns
    -------
    ndarray of shape (n_timesteps, )
        The dates as a float array.
    """
    dates = column_or_1d(np.asarray(dates, dtype=float))
    if not np.isfinite(dates).all():
        raise ValueError("dates must be finite.")

    if n_timesteps is not None and dates.shape[0] != n_timesteps:
        raise ValueError(
            f"Expected {n_timesteps} dates, got {dates.shape[0]} dates instead."
        )

    if dates.shape[0] > 1 and not (np.diff(dates) > 0).all():
        raise ValueError("dates must be strictly increasing.")

    return dates


def check_series(dates, values):
    """Check a single time series.

    ``values`` is returned as-is (and can therefore be mutated in place
    by the caller) if it already is a float64 ndarray.

    Parameters
    ----------
    dates : array-like of shape (n_timesteps, )
        The dates.
    values : array-like of shape (n_timesteps, )
        The values.

    Returns
    -------
    dates : ndarray of shape (n_timesteps, )
        The dates.
    values : ndarray of shape (n_timesteps, )
        The values.
    """
    values = np.asarray(values, dtype=float)
    if values.ndim != 1:
        raise ValueError(f"Expected 1D values, got {values.ndim}D array instead.")

    if not np.isfinite(values).all():
        raise ValueError("values must be finite.")

    dates = check_dates(dates, n_timesteps=values.shape[0])
    return dates, values
