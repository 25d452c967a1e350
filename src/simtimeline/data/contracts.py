"""
Core data contracts for the scenario timeline engine.

Every component (classifier, scaler, resolver, alarm session, result
flagging) exchanges these types. Bounds that may be absent are Optional
floats, never sentinel numbers.

Version: 1.0
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from .errors import InvalidRangeError


# =============================================================================
# SEVERITY FLAG
# =============================================================================

class Flag(Enum):
    """
    Severity classification of a value against a reference range.

    Attached transiently to a rendered vital sign, or persisted on a
    completed lab/radiology result.
    """
    NORMAL = "normal"
    LOW = "low"
    HIGH = "high"
    CRITICAL_LOW = "critical_low"
    CRITICAL_HIGH = "critical_high"

    def is_abnormal(self) -> bool:
        """Check if this flag should be highlighted at all."""
        return self is not Flag.NORMAL

    def is_critical(self) -> bool:
        """Check if this flag is one of the critical tiers."""
        return self in (Flag.CRITICAL_LOW, Flag.CRITICAL_HIGH)

    @property
    def symbol(self) -> str:
        """Report-style arrow for this flag ('' for NORMAL)."""
        return _FLAG_SYMBOLS[self]


_FLAG_SYMBOLS = {
    Flag.NORMAL: "",
    Flag.LOW: "↓",
    Flag.HIGH: "↑",
    Flag.CRITICAL_LOW: "↓↓",
    Flag.CRITICAL_HIGH: "↑↑",
}


# =============================================================================
# REFERENCE RANGE
# =============================================================================

@dataclass(frozen=True)
class ReferenceRange:
    """
    Normal and critical bounds for one parameter or analyte.

    Any bound may be None (open-ended). The normal range is inclusive;
    critical bounds are inclusive in the direction of severity.
    """
    low: Optional[float] = None
    high: Optional[float] = None
    critical_low: Optional[float] = None
    critical_high: Optional[float] = None

    def validate(self) -> "ReferenceRange":
        """
        Check bound consistency.

        Raises:
            InvalidRangeError: if a bound is non-finite or the bounds are
                out of order.

        Returns:
            self, so loaders can write ``ReferenceRange(...).validate()``.
        """
        for name in ("low", "high", "critical_low", "critical_high"):
            bound = getattr(self, name)
            if bound is not None and not math.isfinite(bound):
                raise InvalidRangeError(f"{name} bound must be finite, got {bound!r}")

        if self.low is not None and self.high is not None and self.low > self.high:
            raise InvalidRangeError(f"low ({self.low}) > high ({self.high})")
        if self.critical_low is not None and self.low is not None and self.critical_low > self.low:
            raise InvalidRangeError(
                f"critical_low ({self.critical_low}) is less extreme than low ({self.low})"
            )
        if self.critical_high is not None and self.high is not None and self.critical_high < self.high:
            raise InvalidRangeError(
                f"critical_high ({self.critical_high}) is less extreme than high ({self.high})"
            )
        if (self.critical_low is not None and self.critical_high is not None
                and self.critical_low > self.critical_high):
            raise InvalidRangeError(
                f"critical_low ({self.critical_low}) > critical_high ({self.critical_high})"
            )
        return self

    @property
    def is_unbounded(self) -> bool:
        return all(
            b is None for b in (self.low, self.high, self.critical_low, self.critical_high)
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ReferenceRange":
        """Build and validate a range from a loosely-typed mapping."""
        return cls(
            low=_optional_float(data.get("low")),
            high=_optional_float(data.get("high")),
            critical_low=_optional_float(data.get("critical_low")),
            critical_high=_optional_float(data.get("critical_high")),
        ).validate()

    def to_dict(self) -> Dict[str, Optional[float]]:
        return {
            "low": self.low,
            "high": self.high,
            "critical_low": self.critical_low,
            "critical_high": self.critical_high,
        }


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


# =============================================================================
# PARAMETER SNAPSHOTS
# =============================================================================

ParameterSnapshot = Dict[str, float]


def normalize_parameter_key(key: str) -> str:
    """Parameter keys are case-insensitive: 'bpSys' and 'BPSYS' are one key."""
    return key.strip().lower()


def normalize_keys(values: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Copy a parameter-keyed mapping with normalized keys.

    Raises:
        ValueError: if two keys collide after normalization.
    """
    out: Dict[str, Any] = {}
    for key, value in values.items():
        norm = normalize_parameter_key(key)
        if norm in out:
            raise ValueError(f"Duplicate parameter key after normalization: {key!r}")
        out[norm] = value
    return out


def make_snapshot(values: Mapping[str, float]) -> ParameterSnapshot:
    """Build a snapshot with normalized keys."""
    return normalize_keys(values)


# =============================================================================
# KEYFRAMES, TIMELINES AND SCENARIOS
# =============================================================================

@dataclass(frozen=True)
class Keyframe:
    """
    An authored point in scenario time.

    ``rhythm`` and ``conditions`` are non-numeric monitor settings (ECG
    rhythm name, ST elevation, PVC toggle...) carried alongside the numeric
    snapshot. The engine never interprets them.
    """
    offset_seconds: float
    label: str
    snapshot: Mapping[str, float]
    rhythm: Optional[str] = None
    conditions: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not math.isfinite(self.offset_seconds) or self.offset_seconds < 0:
            raise ValueError(f"Keyframe offset must be finite and >= 0, got {self.offset_seconds}")
        # Read-only views so a timeline can be handed to many sessions.
        object.__setattr__(self, "snapshot", MappingProxyType(make_snapshot(self.snapshot)))
        object.__setattr__(self, "conditions", MappingProxyType(dict(self.conditions)))

    def with_offset(self, offset_seconds: float) -> "Keyframe":
        """Copy of this keyframe at a different offset."""
        return Keyframe(
            offset_seconds=offset_seconds,
            label=self.label,
            snapshot=dict(self.snapshot),
            rhythm=self.rhythm,
            conditions=dict(self.conditions),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "offset_seconds": self.offset_seconds,
            "label": self.label,
            "snapshot": dict(self.snapshot),
            "rhythm": self.rhythm,
            "conditions": dict(self.conditions),
        }


Timeline = Tuple[Keyframe, ...]


@dataclass(frozen=True)
class Scenario:
    """
    A timeline attached to a case.

    Sessions never share a Scenario's playback state; each session gets its
    own scaled copy of the timeline.
    """
    timeline: Timeline
    total_duration_seconds: float
    auto_start: bool = False
    enabled: bool = True
    name: str = ""
    description: str = ""

    def __post_init__(self):
        object.__setattr__(self, "timeline", tuple(self.timeline))


# =============================================================================
# ALARM CONFIGURATION
# =============================================================================

@dataclass(frozen=True)
class AlarmThreshold:
    """Per-parameter alarm thresholds as configured for a case."""
    enabled: bool = True
    low: Optional[float] = None
    high: Optional[float] = None
    critical_low: Optional[float] = None
    critical_high: Optional[float] = None

    def to_range(self) -> ReferenceRange:
        return ReferenceRange(
            low=self.low,
            high=self.high,
            critical_low=self.critical_low,
            critical_high=self.critical_high,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AlarmThreshold":
        """Build a threshold, validating its bounds as a ReferenceRange."""
        rng = ReferenceRange.from_dict(data)
        return cls(
            enabled=bool(data.get("enabled", True)),
            low=rng.low,
            high=rng.high,
            critical_low=rng.critical_low,
            critical_high=rng.critical_high,
        )


@dataclass(frozen=True)
class AlarmConfig:
    """
    Alarm thresholds owned by a case; read-only during a session.

    Parameters absent from ``thresholds`` fall back to the built-in default
    table in :mod:`simtimeline.config.alarm_defaults`.
    """
    thresholds: Mapping[str, AlarmThreshold] = field(default_factory=dict)
    use_defaults: bool = True

    def __post_init__(self):
        object.__setattr__(self, "thresholds", MappingProxyType(normalize_keys(self.thresholds)))

    def threshold_for(self, parameter: str) -> Optional[AlarmThreshold]:
        """Case threshold for a parameter, else the default, else None."""
        key = normalize_parameter_key(parameter)
        if key in self.thresholds:
            return self.thresholds[key]
        if self.use_defaults:
            from ..config.alarm_defaults import get_default_threshold
            return get_default_threshold(key)
        return None

    @classmethod
    def from_dict(cls, data: Mapping[str, Mapping[str, Any]], use_defaults: bool = True) -> "AlarmConfig":
        """
        Load a config from ``{parameter: {enabled, low, high, ...}}``.

        Raises:
            InvalidRangeError: if any entry has inconsistent bounds.
        """
        return cls(
            thresholds={key: AlarmThreshold.from_dict(entry) for key, entry in data.items()},
            use_defaults=use_defaults,
        )


# =============================================================================
# SESSION CLOCK AND EVENTS
# =============================================================================

@dataclass
class SessionClock:
    """Playback clock for one session; mutated only by its AlarmSession."""
    started_at: Optional[float] = None
    elapsed_seconds: float = 0.0
    running: bool = False


@dataclass(frozen=True)
class AlarmEvent:
    """A flag change for one monitored parameter."""
    parameter: str
    value: float
    flag: Flag
    timestamp: float
    elapsed_seconds: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "parameter": self.parameter,
            "value": self.value,
            "flag": self.flag.value,
            "timestamp": self.timestamp,
            "elapsed_seconds": self.elapsed_seconds,
        }
