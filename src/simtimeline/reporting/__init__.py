# Reporting module

from .result_flags import (
    assign_flag,
    fulfil_result,
    flag_panel,
    FlaggedResult,
)

__all__ = [
    'assign_flag',
    'fulfil_result',
    'flag_panel',
    'FlaggedResult',
]
