"""
Unit tests for motion field statistics and the approximate square root.
"""

import dataclasses

import numpy as np
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from motion.motion_field import MotionField
from motion.statistics import (
    FieldStatistics, FieldSummary, compute_statistics, exact_magnitude, quick_sqrt
)


def _uniform_field(nx, ny, dx, dy):
    field = MotionField.zeros(nx, ny)
    field.vectors[:, :] = (dx, dy)
    return field


class TestQuickSqrt:
    """Tests for the bit-trick square root."""

    def test_relative_error_bound(self):
        """Three Newton steps keep the relative error below 0.2%."""
        sq = np.arange(1, 2 * 16 * 16 + 1, dtype=np.float32)
        approx = quick_sqrt(sq)
        exact = np.sqrt(sq.astype(np.float64))

        assert approx.dtype == np.float32
        assert np.max(np.abs(approx - exact) / exact) < 0.002

    def test_scalar(self):
        assert float(quick_sqrt(25.0)) == pytest.approx(5.0, rel=0.002)

    def test_zero_is_tiny(self):
        """The approximation never returns exactly zero, only a negligible value."""
        value = float(quick_sqrt(np.zeros(1, dtype=np.float32))[0])

        assert 0.0 <= value < 1e-6

    def test_fewer_iterations_less_accurate(self):
        sq = np.arange(1, 100, dtype=np.float32)
        exact = np.sqrt(sq)
        err_one = np.max(np.abs(quick_sqrt(sq, iterations=1) - exact) / exact)
        err_three = np.max(np.abs(quick_sqrt(sq, iterations=3) - exact) / exact)

        assert err_three <= err_one


class TestFieldStatistics:
    """Tests for FieldStatistics."""

    def test_uniform_field_legacy_min(self):
        """Every vector (3, 4): mean = max ~ 5, and legacy min reports 0."""
        summary = compute_statistics(_uniform_field(6, 4, 3, 4), legacy_min=True)

        assert summary.mean == pytest.approx(5.0, rel=0.005)
        assert summary.max == pytest.approx(5.0, rel=0.005)
        assert summary.min == 0.0

    def test_uniform_field_true_min(self):
        """With the corrected accumulator min is the real smallest magnitude."""
        summary = compute_statistics(_uniform_field(6, 4, 3, 4), legacy_min=False)

        assert summary.min == pytest.approx(5.0, rel=0.005)
        assert summary.max == pytest.approx(5.0, rel=0.005)

    def test_zero_field(self):
        summary = compute_statistics(MotionField.zeros(4, 4))

        assert summary.mean == pytest.approx(0.0, abs=1e-6)
        assert summary.min == 0.0
        assert summary.max == pytest.approx(0.0, abs=1e-6)

    def test_exact_magnitude(self):
        """Exact square root can be plugged in without changing the contract."""
        field = MotionField.zeros(2, 2)
        field.vectors[0, 1] = (3, 4)
        field.vectors[1, 0] = (-6, 8)
        field.vectors[1, 1] = (0, -16)

        summary = FieldStatistics(magnitude=exact_magnitude, legacy_min=False).compute(field)

        assert summary.mean == pytest.approx((0 + 5 + 10 + 16) / 4)
        assert summary.min == 0.0
        assert summary.max == pytest.approx(16.0)

    def test_quick_and_exact_agree(self):
        rng = np.random.default_rng(2)
        field = MotionField.zeros(10, 8)
        field.vectors[:] = rng.integers(-16, 16, size=(8, 10, 2))

        quick = FieldStatistics(legacy_min=False).compute(field)
        exact = FieldStatistics(magnitude=exact_magnitude, legacy_min=False).compute(field)

        assert quick.mean == pytest.approx(exact.mean, rel=0.002)
        assert quick.max == pytest.approx(exact.max, rel=0.002)

    def test_magnitudes_row_major(self):
        field = MotionField.zeros(2, 1)
        field.vectors[0, 1] = (0, 15)
        lengths = FieldStatistics(magnitude=exact_magnitude).magnitudes(field)

        assert lengths.tolist() == [0.0, 15.0]

    def test_empty_field(self):
        with pytest.raises(ValueError):
            compute_statistics(MotionField.zeros(0, 0))

    def test_summary_immutable(self):
        summary = FieldSummary(mean=1.0, min=0.0, max=2.0)

        with pytest.raises(dataclasses.FrozenInstanceError):
            summary.mean = 3.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
