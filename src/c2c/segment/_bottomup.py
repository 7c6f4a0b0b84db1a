# Authors: Isak Samsten
# License: BSD 3 clause

import math
import numbers

import numpy as np
from sklearn.base import _fit_context
from sklearn.utils._param_validation import Interval

from ..changes import Change, Regrowth
from ..utils._array import argmin, lerp
from ..utils.validation import check_dates
from ._base import BaseSegmenter

__all__ = [
    "BottomUpSegmenter",
    "bottom_up",
    "segment",
    "segment_changes",
    "extend_with_regrowth",
]


def _merge_cost(dates, values, start, finish):
    y1 = values[start]
    y2 = values[finish]
    x1 = dates[start]
    time_window = dates[finish] - x1
    error = 0.0
    for i in range(start, finish + 1):
        interpolated = lerp(y1, y2, (dates[i] - x1) / time_window)
        diff = values[i] - interpolated
        error += diff * diff
    return math.sqrt(error / (finish - start))


def bottom_up(dates, values, max_error=75, max_segments=6):
    """
    Bottom-up segmentation of a time series.

    Starting from one segment between every pair of consecutive samples,
    the two adjacent segments that are the cheapest to merge are merged as
    long as the cost of the merge is lower than ``max_error`` or there are
    more than ``max_segments`` segments. The cost of a merge is the root
    mean squared error of the line between the endpoints of the merged
    segment.

    Parameters
    ----------
    dates : ndarray of shape (n_timestep, )
        The strictly increasing dates.
    values : ndarray of shape (n_timestep, )
        The values.
    max_error : float, optional
        The maximum merge cost.
    max_segments : int, optional
        The maximum number of segments.

    Returns
    -------
    ndarray of shape (n_vertices, )
        The index of the vertices, including the first and last sample.

    References
    ----------
    Keogh, E., Chu, S., Hart, D., & Pazzani, M. (2001).
        An online algorithm for segmenting time series. In proceedings of
        the IEEE International Conference on Data Mining.

    Hermosilla, T., Wulder, M. A., White, J. C., Coops, N. C., & Hobart, G. W.
    (2015).
        An integrated Landsat time series protocol for change detection and
        generation of annual gap-free surface reflectance composites. Remote
        Sensing of Environment, 158, 220-234.
    """
    n_timestep = values.shape[0]
    if n_timestep < 2:
        return np.arange(n_timestep, dtype=np.intp)

    starts = list(range(n_timestep - 1))
    finishes = list(range(1, n_timestep))
    costs = [
        _merge_cost(dates, values, starts[i], finishes[i + 1])
        for i in range(len(starts) - 1)
    ]

    while costs:
        index = argmin(costs)
        if not (costs[index] < max_error or len(starts) > max_segments):
            break

        finishes[index] = finishes[index + 1]
        del starts[index + 1]
        del finishes[index + 1]
        del costs[index]

        # Only the costs of merging with the new segment changes
        if index + 1 < len(starts):
            costs[index] = _merge_cost(
                dates, values, starts[index], finishes[index + 1]
            )
        if index > 0:
            costs[index - 1] = _merge_cost(
                dates, values, starts[index - 1], finishes[index]
            )

    return np.array(starts + [finishes[-1]], dtype=np.intp)


def _regrowth(values, index, magnitude, years):
    # Scan until the loss is fully recovered and at least max(years) values
    # have been observed after the change.
    value = values[index]
    min_years = max(years)
    for i in range(index + 1, values.shape[0]):
        recovered = (values[i] - value) / abs(magnitude)
        if recovered >= 1 and i - index >= min_years:
            return Regrowth(
                previous_value=float(value - magnitude),
                next_values=tuple(float(v) for v in values[index + 1 : i + 1]),
                years=tuple(years),
            )
    return None


def segment_changes(
    dates,
    values,
    vertices,
    *,
    post_metrics=True,
    regrowth_metrics=False,
    regrowth_years=(4, 5, 6),
):
    """
    Compute the changes of the vertices.

    Parameters
    ----------
    dates : ndarray of shape (n_timestep, )
        The dates.
    values : ndarray of shape (n_timestep, )
        The values.
    vertices : array-like of shape (n_vertices, )
        The index of the vertices, in increasing order.
    post_metrics : bool, optional
        Compute the difference to the next vertex.
    regrowth_metrics : bool, optional
        Compute the regrowth after vertices with a negative magnitude.
    regrowth_years : tuple of int, optional
        The years after a change used to compute the regrowth index.

    Returns
    -------
    list of Change
        The changes, one per vertex.
    """
    changes = []
    n_vertices = len(vertices)
    for i, curr in enumerate(vertices):
        date = float(dates[curr])
        value = float(values[curr])
        if i > 0:
            prev = vertices[i - 1]
            change = Change(
                date,
                value,
                magnitude=value - float(values[prev]),
                duration=date - float(dates[prev]),
            )
        else:
            change = Change(date, value)

        if post_metrics:
            if i < n_vertices - 1:
                post = vertices[i + 1]
                change = change.with_post(
                    float(values[post]) - value, float(dates[post]) - date
                )
            else:
                change = change.with_post(math.nan, math.nan)

        if regrowth_metrics and change.has_negative_magnitude:
            change = change.with_regrowth(
                _regrowth(values, curr, change.magnitude, regrowth_years)
            )

        changes.append(change)
    return changes


def extend_with_regrowth(changes, dates, values, regrowth_years=(4, 5, 6)):
    """
    Recompute the regrowth of existing changes.

    The changes are matched to the samples by their date.

    Parameters
    ----------
    changes : list of Change
        The changes.
    dates : ndarray of shape (n_timestep, )
        The strictly increasing dates.
    values : ndarray of shape (n_timestep, )
        The values.
    regrowth_years : tuple of int, optional
        The years after a change used to compute the regrowth index.

    Returns
    -------
    list of Change
        The changes with regrowth.
    """
    change_dates = np.array([change.date for change in changes], dtype=float)
    index = np.searchsorted(dates, change_dates)
    found = index < dates.shape[0]
    found[found] = dates[index[found]] == change_dates[found]
    if not found.all():
        raise ValueError(
            f"The changes at {change_dates[~found].tolist()} are not in dates."
        )

    extended = []
    for i, change in zip(index, changes):
        if change.has_negative_magnitude:
            change = change.with_regrowth(
                _regrowth(values, i, change.magnitude, regrowth_years)
            )
        extended.append(change)
    return extended


def segment(
    dates,
    values,
    *,
    max_error=75,
    max_segments=6,
    post_metrics=True,
    regrowth_metrics=False,
    regrowth_years=(4, 5, 6),
):
    """
    Segment a time series and compute the changes of the vertices.

    Parameters
    ----------
    dates : ndarray of shape (n_timestep, )
        The strictly increasing dates.
    values : ndarray of shape (n_timestep, )
        The values.
    max_error : float, optional
        The maximum merge cost.
    max_segments : int, optional
        The maximum number of segments.
    post_metrics : bool, optional
        Compute the difference to the next vertex.
    regrowth_metrics : bool, optional
        Compute the regrowth after vertices with a negative magnitude.
    regrowth_years : tuple of int, optional
        The years after a change used to compute the regrowth index.

    Returns
    -------
    list of Change
        The changes, one per vertex.

    See Also
    --------
    bottom_up : Compute the vertices.
    segment_changes : Compute the changes.
    """
    vertices = bottom_up(
        dates, values, max_error=max_error, max_segments=max_segments
    )
    return segment_changes(
        dates,
        values,
        vertices,
        post_metrics=post_metrics,
        regrowth_metrics=regrowth_metrics,
        regrowth_years=regrowth_years,
    )


class BottomUpSegmenter(BaseSegmenter):
    """
    Segmenter using bottom-up piecewise linear approximation.

    Parameters
    ----------
    max_error : float, optional
        The maximum root mean squared error of merging two segments.
    max_segments : int, optional
        The maximum number of segments. Segments are merged, regardless of
        the error, until there are at most ``max_segments``.

    Attributes
    ----------
    labels_ : list of shape (n_samples, )
        A list of n_samples arrays with the index of the vertices.
    dates_ : ndarray of shape (n_timestep, )
        The dates of the samples.

    Examples
    --------
    >>> import numpy as np
    >>> from c2c.segment import BottomUpSegmenter
    >>> X = np.array([[500.0, 500, 500, 100, 200, 300, 400, 500]])
    >>> BottomUpSegmenter(max_error=10).fit(X).labels_
    [array([0, 2, 3, 7])]
    """

    _parameter_constraints: dict = {
        "max_error": [Interval(numbers.Real, 0, None, closed="left")],
        "max_segments": [Interval(numbers.Integral, 1, None, closed="left")],
    }

    def __init__(self, max_error=75, max_segments=6):
        self.max_error = max_error
        self.max_segments = max_segments

    @_fit_context(prefer_skip_nested_validation=True)
    def fit(self, X, y=None, dates=None):
        """
        Fit the segmenter.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_timesteps)
            The samples.
        y : ignored, optional
            Ignored.
        dates : array-like of shape (n_timesteps, ), optional
            The dates of the samples. If None, ``arange(n_timesteps)``.

        Returns
        -------
        self
            The estimator.
        """
        X = self._validate_data(X, ensure_min_features=2)
        if dates is None:
            self.dates_ = np.arange(X.shape[-1], dtype=float)
        else:
            self.dates_ = check_dates(dates, n_timesteps=X.shape[-1])

        self.labels_ = self._segment(X)
        return self

    def _segment(self, X):
        return [
            bottom_up(
                self.dates_,
                x,
                max_error=self.max_error,
                max_segments=self.max_segments,
            )
            for x in X
        ]
