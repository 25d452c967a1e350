"""
Scenario timeline and threshold evaluation engine for clinical-training
simulators.

v1.0: Timeline scaling, step-function playback, range classification,
live alarm sessions and one-shot result flagging.
"""

from .data import (
    Flag,
    ReferenceRange,
    Keyframe,
    Scenario,
    AlarmThreshold,
    AlarmConfig,
    AlarmEvent,
    InvalidRangeError,
    EmptyTimelineError,
    NonFiniteValueError,
)
from .classification import classify
from .timeline import scale_timeline, scale_scenario, resolve_snapshot
from .monitoring import AlarmSession, SessionState, SessionRunner
from .reporting import assign_flag, fulfil_result

__version__ = "1.0.0"

__all__ = [
    'Flag',
    'ReferenceRange',
    'Keyframe',
    'Scenario',
    'AlarmThreshold',
    'AlarmConfig',
    'AlarmEvent',
    'InvalidRangeError',
    'EmptyTimelineError',
    'NonFiniteValueError',
    'classify',
    'scale_timeline',
    'scale_scenario',
    'resolve_snapshot',
    'AlarmSession',
    'SessionState',
    'SessionRunner',
    'assign_flag',
    'fulfil_result',
]
