"""
Configuration module for the scenario timeline engine.

v1.0: Contains the default alarm threshold table and session presets.
"""

from .alarm_defaults import (
    DEFAULT_ALARM_THRESHOLDS,
    get_default_threshold,
)
from .session_settings import (
    SessionSettings,
    SESSION_PRESETS,
    get_session_settings,
    get_default_settings,
)

__all__ = [
    # Alarm defaults
    'DEFAULT_ALARM_THRESHOLDS',
    'get_default_threshold',

    # Session settings
    'SessionSettings',
    'SESSION_PRESETS',
    'get_session_settings',
    'get_default_settings',
]
