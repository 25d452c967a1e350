"""
Unit tests for result flag assignment.

Tests for:
- assign_flag() parity with the live classifier
- fulfil_result() immutability
- flag_panel() bulk flagging over a DataFrame
"""

import dataclasses
import math

import numpy as np
import pandas as pd
import pytest

from simtimeline.classification.range_classifier import classify
from simtimeline.config.session_settings import SessionSettings, get_default_settings
from simtimeline.data.contracts import Flag, ReferenceRange
from simtimeline.reporting.result_flags import (
    FlaggedResult,
    assign_flag,
    flag_panel,
    fulfil_result,
)


# =============================================================================
# ASSIGN FLAG TESTS
# =============================================================================

class TestAssignFlag:
    """Lab flags use the same rules as live vitals."""

    @pytest.mark.parametrize("value", [1.0, 2.5, 3.0, 3.5, 4.2, 5.0, 5.5, 6.5, 9.0, math.nan])
    def test_matches_classify(self, value, potassium_range):
        assert assign_flag(value, potassium_range) is classify(value, potassium_range)


# =============================================================================
# FULFILMENT TESTS
# =============================================================================

class TestFulfilResult:
    """Tests for one-shot, frozen result flags."""

    def test_flag_stored_with_result(self, potassium_range):
        result = fulfil_result("Potassium, serum", 6.8, potassium_range, unit="mmol/L", timestamp=42.0)
        assert result.flag is Flag.CRITICAL_HIGH
        assert result.symbol == "↑↑"
        assert result.flagged_at == 42.0
        assert result.to_dict()["reference"]["critical_high"] == 6.5

    def test_result_is_immutable(self, potassium_range):
        result = fulfil_result("Potassium, serum", 4.0, potassium_range)
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.flag = Flag.HIGH

    def test_defaults_timestamp_to_now(self, potassium_range):
        result = fulfil_result("Potassium, serum", 4.0, potassium_range)
        assert isinstance(result, FlaggedResult)
        assert result.flagged_at > 0


# =============================================================================
# PANEL TESTS
# =============================================================================

class TestFlagPanel:
    """Tests for DataFrame panel flagging."""

    def test_flags_each_row(self):
        panel = pd.DataFrame({
            "analyte": ["Sodium", "Potassium", "Glucose", "Troponin I"],
            "value": [128.0, 6.9, 95.0, 0.9],
            "low": [135.0, 3.5, 70.0, np.nan],
            "high": [145.0, 5.0, 100.0, 0.04],
            "critical_low": [120.0, 2.5, 40.0, np.nan],
            "critical_high": [160.0, 6.5, 400.0, np.nan],
        })
        flagged = flag_panel(panel)
        assert list(flagged["flag"]) == ["low", "critical_high", "normal", "high"]
        assert list(flagged["symbol"]) == ["↓", "↑↑", "", "↑"]
        assert "flag" not in panel.columns

    def test_missing_bound_columns(self):
        panel = pd.DataFrame({"analyte": ["SpO2"], "value": [85.0], "low": [90.0]})
        assert list(flag_panel(panel)["flag"]) == ["low"]

    def test_missing_value_is_normal(self):
        panel = pd.DataFrame({"analyte": ["Lactate"], "value": [np.nan], "high": [2.0]})
        assert list(flag_panel(panel)["flag"]) == ["normal"]

    def test_settings_derive_missing_critical_bounds(self):
        panel = pd.DataFrame({
            "analyte": ["Potassium", "Sodium"],
            "value": [5.6, 150.0],
            "low": [3.5, 135.0],
            "high": [5.0, 145.0],
            "critical_low": [np.nan, 120.0],
            "critical_high": [np.nan, 160.0],
        })
        assert list(flag_panel(panel)["flag"]) == ["high", "high"]

        flagged = flag_panel(panel, settings=get_default_settings())
        assert list(flagged["flag"]) == ["critical_high", "high"]

    def test_margin_fraction_comes_from_settings(self):
        panel = pd.DataFrame({"analyte": ["Potassium"], "value": [5.6], "low": [3.5], "high": [5.0]})
        wide = SessionSettings(name="wide", critical_margin_fraction=1.0)
        assert list(flag_panel(panel, settings=wide)["flag"]) == ["high"]

    def test_requires_value_column(self):
        with pytest.raises(KeyError):
            flag_panel(pd.DataFrame({"analyte": ["x"]}))


class TestReferenceRangeRoundTrip:
    def test_to_dict(self, potassium_range):
        assert ReferenceRange.from_dict(potassium_range.to_dict()) == potassium_range
