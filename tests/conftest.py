"""
pytest configuration and shared fixtures.

This module provides shared fixtures and configuration for all tests.
"""

import pytest
import sys
import os

# Add src to path for all tests
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from simtimeline.data.contracts import (
    AlarmConfig,
    AlarmThreshold,
    Keyframe,
    ReferenceRange,
    Scenario,
)


# =============================================================================
# CONFIGURATION
# =============================================================================

def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


# =============================================================================
# CLOCK FIXTURES
# =============================================================================

class FakeClock:
    """Manually advanced clock returning seconds."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def fake_clock():
    """A clock that only moves when the test advances it."""
    return FakeClock()


# =============================================================================
# TIMELINE FIXTURES
# =============================================================================

@pytest.fixture
def hr_template():
    """Three-keyframe HR ramp authored over 600 seconds."""
    return (
        Keyframe(0, "Baseline", {"HR": 80}),
        Keyframe(300, "Tachycardia", {"HR": 110}),
        Keyframe(600, "Severe tachycardia", {"HR": 140}),
    )


@pytest.fixture
def vitals_scenario():
    """Four-keyframe deterioration over 40 seconds with several vitals."""
    timeline = (
        Keyframe(0, "Stable", {"hr": 80, "spo2": 98, "bpSys": 120}),
        Keyframe(10, "Tachycardic", {"hr": 130, "spo2": 96, "bpSys": 115}),
        Keyframe(20, "Hypoxic", {"hr": 135, "spo2": 85, "bpSys": 100}),
        Keyframe(30, "Shock", {"hr": 150, "spo2": 80, "bpSys": 70}),
    )
    return Scenario(timeline=timeline, total_duration_seconds=40)


@pytest.fixture
def alarm_config():
    """Case alarm config overriding HR; other vitals use defaults."""
    return AlarmConfig(thresholds={
        "HR": AlarmThreshold(enabled=True, low=50, high=120, critical_high=145),
    })


# =============================================================================
# RANGE FIXTURES
# =============================================================================

@pytest.fixture
def systolic_range():
    """Systolic BP range with a critical upper bound only."""
    return ReferenceRange(low=90, high=180, critical_high=220)


@pytest.fixture
def potassium_range():
    """Serum potassium, mmol/L."""
    return ReferenceRange(low=3.5, high=5.0, critical_low=2.5, critical_high=6.5)
