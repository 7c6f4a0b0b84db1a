"""
Segment time series into piecewise linear changes.
"""

from ._bottomup import (
    BottomUpSegmenter,
    bottom_up,
    extend_with_regrowth,
    segment,
    segment_changes,
)

__all__ = [
    "BottomUpSegmenter",
    "bottom_up",
    "segment",
    "segment_changes",
    "extend_with_regrowth",
]
