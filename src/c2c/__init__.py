# Authors: Isak Samsten
# License: BSD 3 clause

"""
c2c - bottom-up change detection for annual time series.

c2c fits a piecewise-linear model to (possibly gapped and noisy) annual
observations, such as a per-pixel vegetation index, and reports each vertex
of the model as a change with magnitude, duration and rate. Disturbances
can optionally be followed by regrowth indicators.
"""
from .version import version as __version__

__all__ = [
    "__version__",
]
