# Data contracts module
# v1.0: Shared types for timelines, ranges, alarms and flags

from .contracts import (
    Flag,
    ReferenceRange,
    ParameterSnapshot,
    Keyframe,
    Timeline,
    Scenario,
    AlarmThreshold,
    AlarmConfig,
    SessionClock,
    AlarmEvent,
    normalize_parameter_key,
    normalize_keys,
    make_snapshot,
)
from .errors import (
    SimTimelineError,
    InvalidRangeError,
    EmptyTimelineError,
    NonFiniteValueError,
)

__all__ = [
    # Contracts
    'Flag',
    'ReferenceRange',
    'ParameterSnapshot',
    'Keyframe',
    'Timeline',
    'Scenario',
    'AlarmThreshold',
    'AlarmConfig',
    'SessionClock',
    'AlarmEvent',
    'normalize_parameter_key',
    'normalize_keys',
    'make_snapshot',

    # Errors
    'SimTimelineError',
    'InvalidRangeError',
    'EmptyTimelineError',
    'NonFiniteValueError',
]
