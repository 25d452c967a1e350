"""
Built-in Alarm Thresholds for the patient monitor.

v1.0: Defines the fallback thresholds used when a case's AlarmConfig does
not name a parameter.

Keys are normalized parameter keys (lower-case): the monitor's ``bpSys``
is ``bpsys`` here.
"""

from typing import Dict, Optional

from ..data.contracts import AlarmThreshold, normalize_parameter_key


# =============================================================================
# Default Threshold Table
# =============================================================================

DEFAULT_ALARM_THRESHOLDS: Dict[str, AlarmThreshold] = {
    # Heart rate (bpm)
    "hr": AlarmThreshold(enabled=True, low=50, high=120),

    # SpO2 (%) - no upper alarm
    "spo2": AlarmThreshold(enabled=True, low=90, high=None),

    # Blood pressure (mmHg)
    "bpsys": AlarmThreshold(enabled=True, low=90, high=180),
    "bpdia": AlarmThreshold(enabled=True, low=50, high=110),

    # Respiratory rate (breaths/min)
    "rr": AlarmThreshold(enabled=True, low=8, high=30),

    # Temperature (deg C)
    "temp": AlarmThreshold(enabled=True, low=36, high=38.5),

    # End-tidal CO2 (mmHg)
    "etco2": AlarmThreshold(enabled=True, low=30, high=50),
}


def get_default_threshold(parameter: str) -> Optional[AlarmThreshold]:
    """
    Get the built-in threshold for a parameter.

    Args:
        parameter: Parameter key (any case)

    Returns:
        The default threshold, or None for parameters the monitor does not
        alarm on by default
    """
    return DEFAULT_ALARM_THRESHOLDS.get(normalize_parameter_key(parameter))
