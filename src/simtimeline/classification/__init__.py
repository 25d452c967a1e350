# Range classification module

from .range_classifier import (
    classify,
    derive_critical_range,
)

__all__ = [
    'classify',
    'derive_critical_range',
]
