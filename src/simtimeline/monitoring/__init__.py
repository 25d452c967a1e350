# Monitoring module
# v1.0: Live alarm session state machine and its tick loop

from .alarm_session import (
    AlarmSession,
    SessionState,
)
from .session_runner import (
    SessionRunner,
)

__all__ = [
    'AlarmSession',
    'SessionState',
    'SessionRunner',
]
