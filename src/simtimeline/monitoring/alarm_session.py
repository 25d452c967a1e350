"""
Alarm Session State Machine.

v1.0: Live, clock-driven evaluator that turns a scenario into a stream of
classified vital-sign states.

State Machine:
- IDLE: Scenario attached, clock not started
- RUNNING: Clock advancing, ticks evaluate vitals
- PAUSED: Clock frozen, elapsed time kept
- ENDED: Terminal, ticks are no-ops

Each tick resolves the active snapshot, classifies every monitored
parameter and emits an AlarmEvent only when a parameter's flag changes.
Before the first tick every parameter is assumed NORMAL.
"""

import logging
import time
from enum import Enum
from typing import Callable, Dict, List, Optional, Set

from ..classification.range_classifier import classify
from ..config.session_settings import SessionSettings, get_default_settings
from ..data.contracts import (
    AlarmConfig,
    AlarmEvent,
    Flag,
    ParameterSnapshot,
    Scenario,
    SessionClock,
    normalize_parameter_key,
)
from ..data.errors import EmptyTimelineError
from ..timeline.playback import resolve_keyframe

logger = logging.getLogger(__name__)

AlarmListener = Callable[[AlarmEvent], None]


# =============================================================================
# SESSION STATE ENUM
# =============================================================================

class SessionState(Enum):
    """Playback lifecycle states."""
    IDLE = "idle"           # Scenario attached, not started
    RUNNING = "running"     # Clock advancing
    PAUSED = "paused"       # Clock frozen
    ENDED = "ended"         # Terminal


# =============================================================================
# ALARM SESSION
# =============================================================================

class AlarmSession:
    """
    Stateful wrapper around the playback resolver and range classifier.

    The session owns its SessionClock. Scenario and AlarmConfig are read
    only. Time comes from an injected ``clock`` callable returning seconds,
    so tests can drive it deterministically.

    Single writer: call tick() from one place (usually a SessionRunner).
    """

    def __init__(
        self,
        scenario: Scenario,
        alarm_config: Optional[AlarmConfig] = None,
        settings: Optional[SessionSettings] = None,
        clock: Callable[[], float] = time.time,
    ):
        if len(scenario.timeline) == 0:
            raise EmptyTimelineError("Scenario has no keyframes; cannot start a session")

        self.scenario = scenario
        self.alarm_config = alarm_config if alarm_config is not None else AlarmConfig()
        self.settings = settings if settings is not None else get_default_settings()
        self._clock = clock

        self.state = SessionState.IDLE
        self.session_clock = SessionClock()
        self._resumed_at: Optional[float] = None
        self._frozen_elapsed = 0.0

        self._snapshot: ParameterSnapshot = dict(scenario.timeline[0].snapshot)
        self._flags: Dict[str, Flag] = {}
        self._announced: Dict[str, Flag] = {}
        self._listeners: List[AlarmListener] = []
        self.history: List[AlarmEvent] = []

        self._acknowledged: Set[str] = set()
        self._snoozed_until: Dict[str, float] = {}

        if scenario.auto_start and scenario.enabled:
            self.start()

    # =========================================================================
    # STATE TRANSITIONS
    # =========================================================================

    def start(self) -> bool:
        """IDLE -> RUNNING. Disabled scenarios never start."""
        if self.state is not SessionState.IDLE:
            logger.debug(f"start() ignored in state {self.state.value}")
            return False
        if not self.scenario.enabled:
            logger.info("Scenario is disabled; session not started")
            return False

        now = self._clock()
        self.session_clock.started_at = now
        self.session_clock.running = True
        self._resumed_at = now
        self.state = SessionState.RUNNING
        logger.info(f"Session started ({len(self.scenario.timeline)} keyframes, "
                    f"{self.scenario.total_duration_seconds}s)")
        return True

    def pause(self) -> bool:
        """RUNNING -> PAUSED, freezing elapsed time."""
        if self.state is not SessionState.RUNNING:
            logger.debug(f"pause() ignored in state {self.state.value}")
            return False
        self._frozen_elapsed = self.elapsed_seconds
        self._resumed_at = None
        self.session_clock.elapsed_seconds = self._frozen_elapsed
        self.session_clock.running = False
        self.state = SessionState.PAUSED
        return True

    def resume(self) -> bool:
        """PAUSED -> RUNNING, continuing from the frozen elapsed time."""
        if self.state is not SessionState.PAUSED:
            logger.debug(f"resume() ignored in state {self.state.value}")
            return False
        self._resumed_at = self._clock()
        self.session_clock.running = True
        self.state = SessionState.RUNNING
        return True

    def end(self) -> bool:
        """Any state -> ENDED. Idempotent."""
        if self.state is SessionState.ENDED:
            return False
        self._frozen_elapsed = self.elapsed_seconds
        self._resumed_at = None
        self.session_clock.elapsed_seconds = self._frozen_elapsed
        self.session_clock.running = False
        self.state = SessionState.ENDED
        logger.info(f"Session ended at {self._frozen_elapsed:.1f}s")
        return True

    @property
    def elapsed_seconds(self) -> float:
        """Elapsed scenario time, frozen while not running."""
        return self._elapsed_at(self._clock())

    def _elapsed_at(self, now: float) -> float:
        if self.state is SessionState.RUNNING and self._resumed_at is not None:
            return self._frozen_elapsed + max(0.0, now - self._resumed_at)
        return self._frozen_elapsed

    # =========================================================================
    # TICK
    # =========================================================================

    def tick(self) -> List[AlarmEvent]:
        """
        Advance one evaluation step.

        Returns:
            Alarm change events emitted by this tick (empty unless RUNNING)
        """
        if self.state is not SessionState.RUNNING:
            return []

        now = self._clock()
        elapsed = self._elapsed_at(now)
        self.session_clock.elapsed_seconds = elapsed

        self._snapshot = dict(resolve_keyframe(self.scenario.timeline, elapsed).snapshot)

        events: List[AlarmEvent] = []
        for parameter, value in self._snapshot.items():
            threshold = self.alarm_config.threshold_for(parameter)
            if threshold is None or not threshold.enabled:
                continue

            flag = classify(value, threshold.to_range())
            if flag is not self._flags.get(parameter, Flag.NORMAL):
                self._acknowledged.discard(parameter)
            self._flags[parameter] = flag

            snoozed = self._is_snoozed(parameter, now)
            snooze_expired = (
                not snoozed and self._snoozed_until.pop(parameter, None) is not None
            )

            announced = self._announced.get(parameter, Flag.NORMAL)
            if flag is announced:
                if snooze_expired and flag.is_abnormal():
                    # Condition outlasted the snooze: announce it again
                    events.append(AlarmEvent(parameter, value, flag, now, elapsed))
                continue

            # Snooze holds back non-critical alarms only; recovery to NORMAL
            # and critical flags always go out. Held changes are sent on expiry.
            if snoozed and flag.is_abnormal() and not flag.is_critical():
                continue
            self._announced[parameter] = flag
            events.append(AlarmEvent(parameter, value, flag, now, elapsed))

        for event in events:
            self._emit(event)
        return events

    # =========================================================================
    # SNOOZE AND ACKNOWLEDGE
    # =========================================================================

    def _is_snoozed(self, parameter: str, now: float) -> bool:
        until = self._snoozed_until.get(parameter)
        return until is not None and now < until

    def snooze(self, parameter: str, duration_seconds: Optional[float] = None):
        """
        Hold back LOW/HIGH change events for a parameter for a while.

        Returns to NORMAL and critical flags are still emitted. When the
        snooze expires, the current flag is sent if it differs from the last
        one emitted, or re-announced if it is still abnormal.
        """
        if duration_seconds is None:
            duration_seconds = self.settings.default_snooze_sec
        key = normalize_parameter_key(parameter)
        self._snoozed_until[key] = self._clock() + duration_seconds

    def acknowledge(self, parameter: str):
        """Silence an active alarm until its flag changes again."""
        self._acknowledged.add(normalize_parameter_key(parameter))

    def acknowledge_all(self):
        self._acknowledged.update(self.active_alarms())

    def active_alarms(self) -> List[str]:
        """Parameters currently abnormal, not acknowledged and not snoozed."""
        now = self._clock()
        return sorted(
            p for p, flag in self._flags.items()
            if flag.is_abnormal()
            and p not in self._acknowledged
            and not self._is_snoozed(p, now)
        )

    # =========================================================================
    # DISPLAY INTERFACE
    # =========================================================================

    def subscribe(self, listener: AlarmListener):
        self._listeners.append(listener)

    def unsubscribe(self, listener: AlarmListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, event: AlarmEvent):
        self.history.append(event)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(f"Alarm listener failed for {event.parameter}")

    def current_snapshot(self) -> ParameterSnapshot:
        return dict(self._snapshot)

    def current_flags(self) -> Dict[str, Flag]:
        return dict(self._flags)

    def get_state(self) -> Dict:
        """Poll view of the session for the display layer."""
        keyframe = resolve_keyframe(self.scenario.timeline, self.elapsed_seconds)
        return {
            "state": self.state.value,
            "elapsed_seconds": self.elapsed_seconds,
            "keyframe_label": keyframe.label,
            "rhythm": keyframe.rhythm,
            "snapshot": self.current_snapshot(),
            "flags": {p: f.value for p, f in self._flags.items()},
            "active_alarms": self.active_alarms(),
        }
