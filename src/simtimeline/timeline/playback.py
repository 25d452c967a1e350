"""
Playback Resolver.

Resolves the active keyframe of a timeline at an elapsed time. Playback is a
step function: values jump at keyframe offsets and are never interpolated.
Smoothing, if any, belongs to the display layer.

- elapsed before the first offset -> first keyframe
- elapsed past the last offset    -> last keyframe (the scenario holds)
- several keyframes at one offset -> the one authored last
"""

import math
from typing import Optional, Sequence

import numpy as np

from ..data.contracts import Keyframe, ParameterSnapshot
from ..data.errors import EmptyTimelineError


def _offsets(timeline: Sequence[Keyframe]) -> np.ndarray:
    if len(timeline) == 0:
        raise EmptyTimelineError("Cannot resolve playback on an empty timeline")
    return np.array([kf.offset_seconds for kf in timeline], dtype=float)


def active_keyframe_index(timeline: Sequence[Keyframe], elapsed_seconds: float) -> int:
    """
    Index of the keyframe active at ``elapsed_seconds``.

    Raises:
        EmptyTimelineError: if the timeline is empty
        ValueError: if elapsed_seconds is NaN
    """
    if math.isnan(elapsed_seconds):
        raise ValueError("elapsed_seconds must not be NaN")
    offsets = _offsets(timeline)
    # side='right' places elapsed after every tie, so the last tie wins
    idx = int(np.searchsorted(offsets, elapsed_seconds, side="right")) - 1
    return max(idx, 0)


def resolve_keyframe(timeline: Sequence[Keyframe], elapsed_seconds: float) -> Keyframe:
    """Active keyframe, including its rhythm and conditions."""
    return timeline[active_keyframe_index(timeline, elapsed_seconds)]


def resolve_snapshot(timeline: Sequence[Keyframe], elapsed_seconds: float) -> ParameterSnapshot:
    """
    Parameter snapshot active at ``elapsed_seconds``.

    Returns a fresh dict each call; callers may mutate it freely.
    """
    return dict(resolve_keyframe(timeline, elapsed_seconds).snapshot)


def next_keyframe_offset(timeline: Sequence[Keyframe], elapsed_seconds: float) -> Optional[float]:
    """Offset of the next keyframe strictly after ``elapsed_seconds``, or None."""
    offsets = _offsets(timeline)
    idx = int(np.searchsorted(offsets, elapsed_seconds, side="right"))
    if idx >= len(offsets):
        return None
    return float(offsets[idx])


def is_complete(timeline: Sequence[Keyframe], elapsed_seconds: float) -> bool:
    """True once the final keyframe has been reached."""
    return elapsed_seconds >= _offsets(timeline)[-1]
