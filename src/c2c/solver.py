# Authors: Isak Samsten
# License: BSD 3 clause
"""Detect changes in annual time series."""

import logging
import numbers

import numpy as np
from sklearn.base import clone
from sklearn.utils._param_validation import Interval

from .base import BaseEstimator
from .changes import headers
from .datasets.preprocess import despike, fill_missing, revert
from .segment import extend_with_regrowth, segment
from .utils._array import count_valid
from .utils._parallel import run_in_parallel
from .utils.validation import check_array, check_dates, check_series

__all__ = ["C2cSolver"]

logger = logging.getLogger(__name__)

# Less valid values than this cannot be segmented.
MIN_VALID = 3


class C2cSolver(BaseEstimator):
    """
    Detect changes using bottom-up segmentation.

    Each time series is preprocessed (optionally reverted, infilled and
    despiked), segmented into at most ``max_segments`` linear segments and
    every vertex is reported as a :class:`~c2c.changes.Change`.

    Parameters
    ----------
    max_error : float, optional
        Maximum error (RMSE) allowed to remove points and construct segments.
    max_segments : int, optional
        Maximum number of segments to be fitted on the time series.
    start_year : int, optional
        Year of the first observation. Informational only.
    end_year : int, optional
        Year of the last observation. Informational only.
    infill : bool, optional
        Fill missing (zero) values before segmentation.
    spikes_tolerance : float, optional
        Tolerance of spikes in the time series. A value of 1 indicates no
        spike removal.
    revert_band : bool, optional
        Invert the sign of the values before segmentation.
    negative_magnitude_only : bool, optional
        Only report changes with a negative magnitude.
    post_metrics : bool, optional
        Include the post metrics (postMagnitude, postDuration, postRate).
    regrowth_metrics : bool, optional
        Include the regrowth metrics (indexRegrowth, recoveryIndicator, y2r60,
        y2r80, y2r100).
    interpolate : bool, optional
        Replace the values between the vertices with the fitted line before
        computing the regrowth metrics.
    regrowth_years : array-like of int, optional
        The years after a disturbance averaged by the regrowth index. The
        largest is also the minimum number of years scanned for regrowth.
    n_jobs : int, optional
        The number of parallel jobs used by :meth:`solve_table`.

    Examples
    --------
    >>> import numpy as np
    >>> from c2c.solver import C2cSolver
    >>> dates = np.arange(2000, 2011)
    >>> values = np.array([500.0, 510, 505, 200, 260, 320, 380, 440, 500, 505, 500])
    >>> [change.date for change in C2cSolver().solve(dates, values)]
    [2000.0, 2002.0, 2003.0, 2010.0]
    """

    _parameter_constraints: dict = {
        "max_error": [Interval(numbers.Real, 0, None, closed="left")],
        "max_segments": [Interval(numbers.Integral, 1, None, closed="left")],
        "start_year": [Interval(numbers.Integral, None, None, closed="neither")],
        "end_year": [Interval(numbers.Integral, None, None, closed="neither")],
        "infill": ["boolean"],
        "spikes_tolerance": [Interval(numbers.Real, 0, 1, closed="both")],
        "revert_band": ["boolean"],
        "negative_magnitude_only": ["boolean"],
        "post_metrics": ["boolean"],
        "regrowth_metrics": ["boolean"],
        "interpolate": ["boolean"],
        "regrowth_years": ["array-like"],
        "n_jobs": [numbers.Integral, None],
    }

    def __init__(
        self,
        max_error=75,
        max_segments=6,
        *,
        start_year=1984,
        end_year=2019,
        infill=True,
        spikes_tolerance=0.85,
        revert_band=False,
        negative_magnitude_only=False,
        post_metrics=True,
        regrowth_metrics=False,
        interpolate=False,
        regrowth_years=(4, 5, 6),
        n_jobs=None,
    ):
        self.max_error = max_error
        self.max_segments = max_segments
        self.start_year = start_year
        self.end_year = end_year
        self.infill = infill
        self.spikes_tolerance = spikes_tolerance
        self.revert_band = revert_band
        self.negative_magnitude_only = negative_magnitude_only
        self.post_metrics = post_metrics
        self.regrowth_metrics = regrowth_metrics
        self.interpolate = interpolate
        self.regrowth_years = regrowth_years
        self.n_jobs = n_jobs

    def headers(self, prepend=("id", "index")):
        """
        The column names of the rows returned by :meth:`solve_table`.

        Parameters
        ----------
        prepend : sequence of str, optional
            The columns before the change columns.

        Returns
        -------
        list of str
            The column names.
        """
        return headers(
            post_metrics=self.post_metrics,
            regrowth_metrics=self.regrowth_metrics,
            prepend=prepend,
        )

    def solve(self, dates, values):
        """
        Detect the changes of a single time series.

        Parameters
        ----------
        dates : array-like of shape (n_timestep, )
            The strictly increasing dates.
        values : array-like of shape (n_timestep, )
            The values, with missing values encoded as 0. If values is a
            float ndarray, it is preprocessed in place.

        Returns
        -------
        list of Change or None
            The changes or None if the time series has less than three
            non-zero values.
        """
        self._validate_params()
        regrowth_years = self._check_regrowth_years()
        dates, values = check_series(dates, values)
        return self._solve(dates, values, regrowth_years)

    def solve_table(self, dates, X, ids=None):
        """
        Detect the changes of every time series in a table.

        Parameters
        ----------
        dates : array-like of shape (n_timestep, )
            The strictly increasing dates.
        X : array-like of shape (n_samples, n_timestep)
            The time series, with missing values encoded as 0.
        ids : array-like of shape (n_samples, ), optional
            The identifier of each time series. If None, the row number.

        Returns
        -------
        headers : list of str
            The column names.
        rows : ndarray of shape (n_changes, n_columns)
            One row per change, with the identifier and the row number of the
            time series in the first two columns. Time series with less
            than three non-zero values have no rows.
        """
        self._validate_params()
        regrowth_years = self._check_regrowth_years()
        X = check_array(X, input_name="X", estimator=self, copy=True)
        dates = check_dates(dates, n_timesteps=X.shape[1])
        if ids is None:
            ids = np.arange(X.shape[0], dtype=float)
        else:
            ids = np.asarray(ids, dtype=float)
            if ids.shape != (X.shape[0],):
                raise ValueError(
                    f"Expected {X.shape[0]} ids, got ids of shape {ids.shape}."
                )

        logger.debug("Solving %d time series with %r", X.shape[0], self)

        def work(offset, batch_size):
            rows = []
            for i in range(offset, offset + batch_size):
                changes = self._solve(dates, X[i], regrowth_years)
                if changes is None:
                    logger.debug(
                        "Skipping line %d (id=%g), less than %d non-zero values",
                        i,
                        ids[i],
                        MIN_VALID,
                    )
                    continue

                for change in changes:
                    rows.append(
                        [
                            ids[i],
                            i,
                            *change.to_row(
                                post_metrics=self.post_metrics,
                                regrowth_metrics=self.regrowth_metrics,
                            ),
                        ]
                    )
            return rows

        columns = self.headers()
        rows = [
            row
            for batch in run_in_parallel(work, X.shape[0], n_jobs=self.n_jobs)
            for row in batch
        ]
        if rows:
            return columns, np.array(rows, dtype=float)
        else:
            return columns, np.empty((0, len(columns)), dtype=float)

    def _check_regrowth_years(self):
        regrowth_years = np.asarray(self.regrowth_years)
        if (
            regrowth_years.ndim != 1
            or regrowth_years.size == 0
            or not np.issubdtype(regrowth_years.dtype, np.integer)
            or (regrowth_years < 1).any()
        ):
            raise ValueError(
                "regrowth_years must be a non-empty sequence of positive integers, "
                f"got {self.regrowth_years!r}."
            )
        return tuple(int(year) for year in regrowth_years)

    def _segment(self, dates, values, regrowth_years):
        return segment(
            dates,
            values,
            max_error=self.max_error,
            max_segments=self.max_segments,
            post_metrics=self.post_metrics,
            regrowth_metrics=self.regrowth_metrics,
            regrowth_years=regrowth_years,
        )

    def _solve(self, dates, values, regrowth_years):
        if count_valid(values) < MIN_VALID:
            return None

        if self.revert_band:
            revert(values)

        if self.infill:
            fill_missing(values)

        if self.spikes_tolerance < 1:
            despike(values, self.spikes_tolerance)

        if self.interpolate:
            # The regrowth is computed on the interpolated values
            simple = clone(self).set_params(regrowth_metrics=False)
            changes = simple._segment(dates, values, regrowth_years)
            _interpolate(dates, values, changes)
            logger.debug("Interpolated values: %s", values)
            if self.regrowth_metrics:
                changes = extend_with_regrowth(changes, dates, values, regrowth_years)
        else:
            changes = self._segment(dates, values, regrowth_years)

        if self.negative_magnitude_only:
            changes = [change for change in changes if change.has_negative_magnitude]

        return changes


def _interpolate(dates, values, changes):
    """Replace the values between the changes with the line between them."""
    change_dates = np.array([change.date for change in changes], dtype=float)
    change_values = np.array([change.value for change in changes], dtype=float)
    between = (
        (dates > change_dates[0])
        & (dates < change_dates[-1])
        & ~np.isin(dates, change_dates)
    )
    values[between] = np.interp(dates[between], change_dates, change_values)
