"""
Range Classifier.

Maps a single value and a ReferenceRange to a severity Flag. Used on every
tick for live vitals and once per result for labs.

Precedence (most severe wins):
1. value <= critical_low   -> CRITICAL_LOW
2. value >= critical_high  -> CRITICAL_HIGH
3. value <  low            -> LOW
4. value >  high           -> HIGH
5. otherwise               -> NORMAL
"""

import logging
import math
from typing import Optional

from ..data.contracts import Flag, ReferenceRange

logger = logging.getLogger(__name__)


def classify(value: Optional[float], reference: ReferenceRange) -> Flag:
    """
    Classify a value against a reference range.

    Never raises. A missing or non-finite value is logged and classified as
    NORMAL so the caller keeps rendering.

    Args:
        value: Instantaneous value
        reference: Normal and critical bounds (any may be None)

    Returns:
        The severity flag
    """
    if value is None or not math.isfinite(value):
        logger.warning(f"Non-finite value {value!r} classified as NORMAL")
        return Flag.NORMAL

    if reference.critical_low is not None and value <= reference.critical_low:
        return Flag.CRITICAL_LOW
    if reference.critical_high is not None and value >= reference.critical_high:
        return Flag.CRITICAL_HIGH
    if reference.low is not None and value < reference.low:
        return Flag.LOW
    if reference.high is not None and value > reference.high:
        return Flag.HIGH
    return Flag.NORMAL


def derive_critical_range(
    low: Optional[float],
    high: Optional[float],
    margin_fraction: float = 0.3,
) -> ReferenceRange:
    """
    Build a range whose critical bounds sit a fraction of the normal span
    beyond each normal bound.

    Lab databases usually list only the normal interval. With both bounds
    present the span is ``high - low``; with one bound missing no span
    exists and only the normal bounds are returned.

    Args:
        low: Lower normal bound
        high: Upper normal bound
        margin_fraction: Fraction of the span beyond each bound

    Returns:
        Validated ReferenceRange
    """
    if low is None or high is None:
        return ReferenceRange(low=low, high=high).validate()

    span = high - low
    margin = span * margin_fraction
    return ReferenceRange(
        low=low,
        high=high,
        critical_low=low - margin,
        critical_high=high + margin,
    ).validate()
