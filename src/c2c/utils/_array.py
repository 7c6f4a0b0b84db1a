# Authors: Isak Samsten
# License: BSD 3 clause

import numpy as np


def argmin(costs):
    """Index of the first smallest cost."""
    index = 0
    for i in range(1, len(costs)):
        if costs[i] < costs[index]:
            index = i
    return index


def lerp(y1, y2, fraction):
    return y1 * (1 - fraction) + y2 * fraction


def count_valid(values):
    """Number of non-zero (observed) values."""
    return int(np.count_nonzero(values))
