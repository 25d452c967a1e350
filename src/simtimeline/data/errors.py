"""
Exception taxonomy for the scenario timeline engine.

Only EmptyTimelineError is raised by the engine itself. InvalidRangeError is
raised by configuration loaders before a range ever reaches the classifier,
and NonFiniteValueError documents a condition the classifier normalizes to
NORMAL instead of raising.
"""


class SimTimelineError(Exception):
    """Base class for all engine errors."""


class InvalidRangeError(SimTimelineError, ValueError):
    """A ReferenceRange whose bounds are inconsistent (e.g. low > high)."""


class EmptyTimelineError(SimTimelineError, ValueError):
    """A timeline with no keyframes; playback is impossible."""


class NonFiniteValueError(SimTimelineError, ValueError):
    """A NaN or infinite value was offered for classification.

    Never raised: the classifier logs the anomaly and returns NORMAL so the
    monitor keeps rendering.
    """
