"""Motion estimation module."""

from .median_filter import MedianFilter, median3x3
from .block_matcher import BlockMatcher, BlockMatch, compute_sad
from .motion_field import MotionField, MotionVector
from .estimator import MotionEstimator, full_search
from .statistics import (
    FieldStatistics,
    FieldSummary,
    compute_statistics,
    quick_sqrt,
    exact_magnitude
)

__all__ = [
    "MedianFilter",
    "median3x3",
    "BlockMatcher",
    "BlockMatch",
    "compute_sad",
    "MotionField",
    "MotionVector",
    "MotionEstimator",
    "full_search",
    "FieldStatistics",
    "FieldSummary",
    "compute_statistics",
    "quick_sqrt",
    "exact_magnitude"
]
