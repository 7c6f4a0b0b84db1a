# Authors: Isak Samsten
# License: BSD 3 clause
"""Change records produced by the segmentation.

Every vertex of the fitted piecewise-linear model is reported as a
:class:`Change`. The optional post-change fields and the regrowth payload
are decided once per configuration: the post fields are ``None`` when the
post metrics are disabled and the regrowth payload is ``None`` unless the
vertex is a disturbance for which regrowth could be measured.
"""

import dataclasses
import math
import numbers
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

__all__ = [
    "Change",
    "Regrowth",
    "RegrowthError",
    "headers",
]

_BASE_HEADERS = ("year", "index", "magnitude", "duration", "rate")
_POST_HEADERS = ("postMagnitude", "postDuration", "postRate")
_REGROWTH_HEADERS = ("indexRegrowth", "recoveryIndicator", "y2r60", "y2r80", "y2r100")


class RegrowthError(RuntimeError):
    """Raised when the regrowth payload is inconsistent with its vertex."""


def headers(*, post_metrics=True, regrowth_metrics=False, prepend=("id", "index")):
    """Column names of the change rows.

    Parameters
    ----------
    post_metrics : bool, optional
        Include the post-change columns.
    regrowth_metrics : bool, optional
        Include the regrowth columns.
    prepend : sequence of str, optional
        Columns placed before the change columns.

    Returns
    -------
    list of str
        The column names.
    """
    result = list(prepend)
    result.extend(_BASE_HEADERS)
    if post_metrics:
        result.extend(_POST_HEADERS)
    if regrowth_metrics:
        result.extend(_REGROWTH_HEADERS)
    return result


def _divide(a, b):
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.float64(a) / np.float64(b))


@dataclass(frozen=True)
class Regrowth:
    """Values observed after a disturbance.

    Parameters
    ----------
    previous_value : float
        The value just before the disturbance.
    next_values : tuple of float
        The values observed the years after the disturbance, until full
        recovery.
    years : tuple of int
        The years after the disturbance used to sample the regrowth index.
    """

    previous_value: float
    next_values: Tuple[float, ...]
    years: Tuple[int, ...] = (4, 5, 6)

    def value_after(self, years):
        """The value observed ``years`` years after the disturbance."""
        if years < 1 or years > len(self.next_values):
            raise IndexError(f"no value observed {years} years after the change")
        return self.next_values[years - 1]


@dataclass(frozen=True)
class Change:
    """A vertex of the segmentation.

    Parameters
    ----------
    date : float
        The date of the vertex.
    value : float
        The value of the vertex.
    magnitude : float, optional
        The value difference to the previous vertex, NaN for the first.
    duration : float, optional
        The date difference to the previous vertex, NaN for the first.
    post_magnitude : float, optional
        The value difference to the next vertex, NaN for the last and None
        if post metrics are not computed.
    post_duration : float, optional
        The date difference to the next vertex, NaN for the last and None
        if post metrics are not computed.
    regrowth : Regrowth, optional
        The regrowth after a disturbance.
    """

    date: float
    value: float
    magnitude: float = math.nan
    duration: float = math.nan
    post_magnitude: Optional[float] = None
    post_duration: Optional[float] = None
    regrowth: Optional[Regrowth] = None

    @property
    def rate(self):
        return _divide(self.magnitude, self.duration)

    @property
    def post_rate(self):
        if self.post_magnitude is None or self.post_duration is None:
            return math.nan
        return _divide(self.post_magnitude, self.post_duration)

    @property
    def has_post_metrics(self):
        return self.post_magnitude is not None

    @property
    def has_negative_magnitude(self):
        return self.magnitude < 0

    @property
    def index_regrowth(self):
        """Mean value at the sampled years after the change minus the value."""
        if self.regrowth is None:
            return math.nan

        try:
            samples = [self.regrowth.value_after(y) for y in self.regrowth.years]
        except IndexError:
            return math.nan

        if not samples:
            return math.nan

        return float(np.mean(samples)) - self.value

    @property
    def recovery_indicator(self):
        return _divide(self.index_regrowth, self.magnitude)

    def years_to_regrowth(self, percent):
        """Years until the value reaches a percentage of the pre-change value.

        Parameters
        ----------
        percent : float
            The percentage of the value before the change, in (0, 100].

        Returns
        -------
        float
            The number of years, NaN if the change has no regrowth.

        Raises
        ------
        ValueError
            If percent is not in (0, 100].
        RegrowthError
            If the pre-change value is never reached again.
        """
        if not isinstance(percent, numbers.Real) or not 0 < percent <= 100:
            raise ValueError(f"percent must be in (0, 100], got {percent!r}")

        if self.regrowth is None:
            return math.nan

        threshold = self.regrowth.previous_value * percent / 100
        for years, value in enumerate((self.value, *self.regrowth.next_values)):
            if value >= threshold:
                return float(years)

        # Only reached for negative pre-change values, where a percentage
        # below 100 lies above the recovered value.
        if threshold > self.regrowth.previous_value:
            return math.nan

        raise RegrowthError(
            f"The value {self.regrowth.previous_value} before the change at "
            f"{self.date} is never reached again, but the regrowth was computed "
            "until full recovery."
        )

    @property
    def years_to_full_regrowth(self):
        return self.years_to_regrowth(100)

    def with_post(self, post_magnitude, post_duration):
        return dataclasses.replace(
            self, post_magnitude=post_magnitude, post_duration=post_duration
        )

    def with_regrowth(self, regrowth):
        return dataclasses.replace(self, regrowth=regrowth)

    def to_row(self, *, post_metrics=True, regrowth_metrics=False):
        """The fields of the change in the order given by :func:`headers`.

        Parameters
        ----------
        post_metrics : bool, optional
            Include the post-change fields.
        regrowth_metrics : bool, optional
            Include the regrowth fields.

        Returns
        -------
        list of float
            The fields.
        """
        row = [self.date, self.value, self.magnitude, self.duration, self.rate]
        if post_metrics:
            row.extend(
                [
                    math.nan if self.post_magnitude is None else self.post_magnitude,
                    math.nan if self.post_duration is None else self.post_duration,
                    self.post_rate,
                ]
            )
        if regrowth_metrics:
            row.extend(
                [
                    self.index_regrowth,
                    self.recovery_indicator,
                    self.years_to_regrowth(60),
                    self.years_to_regrowth(80),
                    self.years_to_full_regrowth,
                ]
            )
        return row
