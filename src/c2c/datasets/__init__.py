# Authors: Isak Samsten
# License: BSD 3 clause

"""
Dataset loading utilities.

Time series tables are stored as comma separated files with the dates in
the header and one time series per row, prefixed by its identifier.

Examples
--------
>>> from c2c.datasets import make_disturbances
>>> dates, X = make_disturbances(n_samples=5, random_state=0)
>>> X.shape
(5, 36)
"""

import numpy as np
from sklearn.utils import check_random_state

__all__ = [
    "load_csv",
    "save_csv",
    "make_disturbances",
]


def load_csv(fname):
    """
    Load a table of time series.

    The first line contains the dates, optionally preceded by the name of
    the identifier column. Every other line contains the identifier of a
    time series followed by its values.

    Parameters
    ----------
    fname : str or path-like
        The file name.

    Returns
    -------
    ids : ndarray of shape (n_samples, )
        The identifier of each time series.
    dates : ndarray of shape (n_timestep, )
        The dates.
    X : ndarray of shape (n_samples, n_timestep)
        The time series.
    """
    header = np.loadtxt(fname, delimiter=",", dtype=str, max_rows=1, ndmin=1)
    header = [column.strip() for column in header]
    data = np.loadtxt(fname, delimiter=",", skiprows=1, dtype=float, ndmin=2)
    if data.shape[0] == 0:
        raise ValueError(f"{fname} contains no time series.")

    n_timestep = data.shape[1] - 1
    if len(header) == n_timestep + 1:
        header = header[1:]
    elif len(header) != n_timestep:
        raise ValueError(
            f"Expected {n_timestep} dates in the header of {fname}, "
            f"got {len(header)} columns."
        )

    try:
        dates = np.array(header, dtype=float)
    except ValueError as e:
        raise ValueError(f"The header of {fname} must contain dates.") from e

    return data[:, 0], dates, data[:, 1:]


def save_csv(fname, headers, rows):
    """
    Save rows of changes.

    Parameters
    ----------
    fname : str, path-like or file
        The file name or an open text file.
    headers : list of str
        The column names.
    rows : ndarray of shape (n_rows, n_columns)
        The rows.
    """
    rows = np.asarray(rows, dtype=float).reshape(-1, len(headers))
    np.savetxt(
        fname,
        rows,
        fmt="%.15g",
        delimiter=",",
        header=",".join(headers),
        comments="",
    )


def make_disturbances(
    n_samples=10,
    *,
    start_year=1984,
    end_year=2019,
    noise=10.0,
    missing=0.05,
    random_state=None,
):
    """
    Generate annual time series with a disturbance followed by regrowth.

    Each time series is stable at a baseline, drops abruptly at a random
    year and then grows back linearly to the baseline.

    Parameters
    ----------
    n_samples : int, optional
        The number of time series.
    start_year : int, optional
        The first year.
    end_year : int, optional
        The last year.
    noise : float, optional
        The standard deviation of the gaussian noise.
    missing : float, optional
        The probability that an observation is missing (zero).
    random_state : int or RandomState, optional
        The pseudo random number generator.

    Returns
    -------
    dates : ndarray of shape (n_timestep, )
        The years.
    X : ndarray of shape (n_samples, n_timestep)
        The time series.
    """
    if end_year - start_year < 10:
        raise ValueError("end_year must be at least 10 years after start_year.")

    random_state = check_random_state(random_state)
    dates = np.arange(start_year, end_year + 1, dtype=float)
    n_timestep = dates.shape[0]
    X = np.empty((n_samples, n_timestep), dtype=float)
    for i in range(n_samples):
        baseline = random_state.uniform(400, 800)
        loss = random_state.uniform(200, 0.6 * baseline)
        disturbance = random_state.randint(2, n_timestep - 6)
        recovery = random_state.randint(5, 16)

        years_after = np.arange(n_timestep) - disturbance
        regrowth = np.clip(years_after / recovery, 0, 1)
        x = np.where(years_after < 0, baseline, baseline - loss * (1 - regrowth))
        x += random_state.normal(scale=noise, size=n_timestep)
        X[i] = np.maximum(x, 1)

    X[random_state.uniform(size=X.shape) < missing] = 0
    return dates, X
