"""
Unit tests for the range classifier and reference range contracts.

Tests for:
- classify() precedence and boundary inclusion
- Non-finite value handling
- ReferenceRange validation
- derive_critical_range()
"""

import logging
import math

import pytest

from simtimeline.classification.range_classifier import classify, derive_critical_range
from simtimeline.data.contracts import Flag, ReferenceRange
from simtimeline.data.errors import InvalidRangeError


# =============================================================================
# PRECEDENCE TESTS
# =============================================================================

class TestClassifyPrecedence:
    """Tests for the five-step classification order."""

    def test_high_below_critical_high(self, systolic_range):
        """200 is above high but below critical_high 220."""
        assert classify(200, systolic_range) is Flag.HIGH

    def test_critical_high(self, systolic_range):
        """225 is past critical_high."""
        assert classify(225, systolic_range) is Flag.CRITICAL_HIGH

    def test_low(self, potassium_range):
        assert classify(3.0, potassium_range) is Flag.LOW

    def test_critical_low(self, potassium_range):
        assert classify(2.0, potassium_range) is Flag.CRITICAL_LOW

    def test_normal(self, potassium_range):
        assert classify(4.2, potassium_range) is Flag.NORMAL

    def test_critical_wins_over_normal_bounds_in_any_order(self):
        """A malformed range still yields critical first."""
        weird = ReferenceRange(low=100, high=50, critical_low=60, critical_high=40)
        # 45 is <= critical_low (60): CRITICAL_LOW takes priority over everything
        assert classify(45, weird) is Flag.CRITICAL_LOW
        # 70 is >= critical_high (40) but not <= critical_low
        assert classify(70, weird) is Flag.CRITICAL_HIGH

    @pytest.mark.parametrize("value", [-1000, 0, 89.9, 90, 150, 180, 180.1, 219.9, 220, 1e6])
    def test_critical_flags_only_past_critical_bounds(self, value, systolic_range):
        """CRITICAL_HIGH iff value >= 220; no CRITICAL_LOW without a bound."""
        flag = classify(value, systolic_range)
        assert (flag is Flag.CRITICAL_HIGH) == (value >= 220)
        assert flag is not Flag.CRITICAL_LOW


# =============================================================================
# BOUNDARY TESTS
# =============================================================================

class TestClassifyBoundaries:
    """Tests for inclusive boundary semantics."""

    def test_normal_range_is_inclusive(self, potassium_range):
        assert classify(3.5, potassium_range) is Flag.NORMAL
        assert classify(5.0, potassium_range) is Flag.NORMAL

    def test_critical_bounds_are_inclusive(self, potassium_range):
        assert classify(2.5, potassium_range) is Flag.CRITICAL_LOW
        assert classify(6.5, potassium_range) is Flag.CRITICAL_HIGH

    def test_unbounded_range_is_always_normal(self):
        rng = ReferenceRange()
        assert rng.is_unbounded
        for value in (-1e9, 0, 42, 1e9):
            assert classify(value, rng) is Flag.NORMAL

    def test_open_ended_upper(self):
        """SpO2 style: only a lower bound."""
        rng = ReferenceRange(low=90)
        assert classify(100, rng) is Flag.NORMAL
        assert classify(89, rng) is Flag.LOW


# =============================================================================
# NON-FINITE VALUE TESTS
# =============================================================================

class TestNonFiniteValues:
    """Non-finite values are normalized, never raised."""

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf, None])
    def test_non_finite_is_normal(self, value, potassium_range):
        assert classify(value, potassium_range) is Flag.NORMAL

    def test_non_finite_is_logged(self, potassium_range, caplog):
        with caplog.at_level(logging.WARNING, logger="simtimeline.classification.range_classifier"):
            classify(math.nan, potassium_range)
        assert "Non-finite" in caplog.text


# =============================================================================
# REFERENCE RANGE VALIDATION TESTS
# =============================================================================

class TestReferenceRangeValidation:
    """Tests for ReferenceRange.validate() and from_dict()."""

    def test_valid_range_passes(self, potassium_range):
        assert potassium_range.validate() is potassium_range

    def test_low_above_high_rejected(self):
        with pytest.raises(InvalidRangeError):
            ReferenceRange(low=10, high=5).validate()

    def test_critical_low_less_extreme_rejected(self):
        with pytest.raises(InvalidRangeError):
            ReferenceRange(low=3.5, critical_low=4.0).validate()

    def test_critical_high_less_extreme_rejected(self):
        with pytest.raises(InvalidRangeError):
            ReferenceRange(high=5.0, critical_high=4.0).validate()

    def test_non_finite_bound_rejected(self):
        with pytest.raises(InvalidRangeError):
            ReferenceRange(low=math.nan).validate()

    def test_from_dict_treats_blank_as_absent(self):
        rng = ReferenceRange.from_dict({"low": "3.5", "high": "", "critical_high": None})
        assert rng.low == 3.5
        assert rng.high is None
        assert rng.critical_high is None

    def test_invalid_range_error_is_value_error(self):
        """Loaders catching ValueError also catch range errors."""
        with pytest.raises(ValueError):
            ReferenceRange.from_dict({"low": 10, "high": 1})


# =============================================================================
# DERIVED CRITICAL RANGE TESTS
# =============================================================================

class TestDeriveCriticalRange:
    """Tests for critical bounds derived from a normal interval."""

    def test_thirty_percent_margin(self):
        rng = derive_critical_range(3.5, 5.0)
        assert rng.critical_low == pytest.approx(3.05)
        assert rng.critical_high == pytest.approx(5.45)

    def test_one_sided_range_has_no_critical_bounds(self):
        rng = derive_critical_range(90, None)
        assert rng.critical_low is None
        assert rng.critical_high is None
        assert rng.low == 90

    def test_derived_range_classifies(self):
        rng = derive_critical_range(70, 100, margin_fraction=0.5)
        assert classify(50, rng) is Flag.CRITICAL_LOW
        assert classify(60, rng) is Flag.LOW
        assert classify(110, rng) is Flag.HIGH
        assert classify(115, rng) is Flag.CRITICAL_HIGH


# =============================================================================
# FLAG HELPER TESTS
# =============================================================================

class TestFlagHelpers:
    def test_symbols(self):
        assert Flag.NORMAL.symbol == ""
        assert Flag.LOW.symbol == "↓"
        assert Flag.HIGH.symbol == "↑"

    def test_severity_helpers(self):
        assert not Flag.NORMAL.is_abnormal()
        assert Flag.HIGH.is_abnormal() and not Flag.HIGH.is_critical()
        assert Flag.CRITICAL_LOW.is_critical()
