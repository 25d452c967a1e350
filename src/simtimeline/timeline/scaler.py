"""
Timeline Scaler.

Rescales an authored keyframe sequence from its template duration to a
session-chosen duration. Only timing changes; labels, snapshots, rhythm and
conditions are copied as authored.

Rules:
- new_offset = floor(offset * target / template + 0.5)  (nearest second, ties up)
- the first keyframe always lands on 0
- keyframes that collapse onto the same second are all kept, in authored order
- output length == input length
"""

import logging
import math
from typing import Sequence

import numpy as np

from ..data.contracts import Keyframe, Scenario, Timeline
from ..data.errors import EmptyTimelineError

logger = logging.getLogger(__name__)


def _check_duration(name: str, value: float):
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"{name} must be a finite number > 0, got {value!r}")


def scaled_offsets(
    offsets: Sequence[float],
    template_duration_seconds: float,
    target_duration_seconds: float,
) -> np.ndarray:
    """
    Compute scaled integer offsets.

    floor(x + 0.5) is monotonic, so sorted input stays sorted; collapsed
    neighbours become equal rather than swapping.

    Returns:
        int64 array, same length as ``offsets``, first element 0
    """
    factor = target_duration_seconds / template_duration_seconds
    scaled = np.floor(np.asarray(offsets, dtype=float) * factor + 0.5).astype(np.int64)
    if scaled.size:
        scaled[0] = 0
    return scaled


def scale_timeline(
    template: Sequence[Keyframe],
    template_duration_seconds: float,
    target_duration_seconds: float,
) -> Timeline:
    """
    Rescale a timeline to a new duration while preserving relative pacing.

    Args:
        template: Keyframes sorted ascending by offset
        template_duration_seconds: Duration the template was authored for
        target_duration_seconds: Session duration

    Returns:
        New timeline with the same number of keyframes

    Raises:
        EmptyTimelineError: if the template has no keyframes
        ValueError: if a duration is not > 0 or the template is unsorted
    """
    if len(template) == 0:
        raise EmptyTimelineError("Cannot scale an empty timeline")
    _check_duration("template_duration_seconds", template_duration_seconds)
    _check_duration("target_duration_seconds", target_duration_seconds)

    offsets = np.array([kf.offset_seconds for kf in template], dtype=float)
    if np.any(np.diff(offsets) < 0):
        raise ValueError("Template keyframes must be sorted ascending by offset")

    new_offsets = scaled_offsets(offsets, template_duration_seconds, target_duration_seconds)

    collapsed = int(np.sum(np.diff(new_offsets) == 0)) if len(new_offsets) > 1 else 0
    if collapsed:
        logger.debug(
            f"{collapsed} keyframe(s) collapsed onto a shared offset when scaling "
            f"{template_duration_seconds}s -> {target_duration_seconds}s"
        )

    return tuple(
        kf.with_offset(int(offset)) for kf, offset in zip(template, new_offsets)
    )


def scale_scenario(scenario: Scenario, target_duration_seconds: float) -> Scenario:
    """
    Produce a session-ready copy of a scenario at a new duration.

    Like attaching a template in the case wizard, the copy is enabled and
    does not auto-start; the author opts in to auto-start separately.
    """
    timeline = scale_timeline(
        scenario.timeline,
        scenario.total_duration_seconds,
        target_duration_seconds,
    )
    return Scenario(
        timeline=timeline,
        total_duration_seconds=target_duration_seconds,
        auto_start=False,
        enabled=True,
        name=scenario.name,
        description=scenario.description,
    )
